from fastapi import APIRouter, Depends, Path, Query, status

from quicklink_app.dependencies import get_base_url, get_url_service
from quicklink_app.schemas.url import (
    ApiResponse,
    URLAnalyticsResponse,
    URLCreate,
    URLCreated,
    URLList,
)
from quicklink_app.services.short_code_generator import (
    SHORTCODE_MAX_LENGTH,
    SHORTCODE_MIN_LENGTH,
    SHORTCODE_REGEX,
)
from quicklink_app.services.url_service import URLService

router = APIRouter(prefix="/urls", tags=["urls"])

MAX_PAGE_SIZE = 100


@router.post("", response_model=ApiResponse[URLCreated], status_code=status.HTTP_201_CREATED)
async def create_short_url(
    url_data: URLCreate,
    url_service: URLService = Depends(get_url_service),
    base_url: str = Depends(get_base_url)
):
    """Create a new short URL (409 if the requested shortcode is taken)"""
    created = await url_service.create_short_url(url_data, base_url)
    return ApiResponse(data=created, message="Short URL created successfully")


@router.get("", response_model=ApiResponse[URLList])
async def list_urls(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
    url_service: URLService = Depends(get_url_service),
    base_url: str = Depends(get_base_url)
):
    """List active short URLs, most recently created first"""
    urls = await url_service.list_urls(page, min(limit, MAX_PAGE_SIZE), base_url)
    return ApiResponse(data=urls)


@router.get("/{shortcode}", response_model=ApiResponse[URLAnalyticsResponse])
async def get_url_analytics(
    shortcode: str = Path(
        ...,
        min_length=SHORTCODE_MIN_LENGTH,
        max_length=SHORTCODE_MAX_LENGTH,
        pattern=SHORTCODE_REGEX,
    ),
    url_service: URLService = Depends(get_url_service),
    base_url: str = Depends(get_base_url)
):
    """Get analytics for a short URL"""
    analytics = await url_service.get_url_analytics(shortcode, base_url)
    return ApiResponse(data=analytics)
