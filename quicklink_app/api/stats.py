from fastapi import APIRouter, Depends

from quicklink_app.dependencies import get_url_service
from quicklink_app.schemas.stats import ServiceStats
from quicklink_app.schemas.url import ApiResponse
from quicklink_app.services.url_service import URLService

router = APIRouter(tags=["stats"])


@router.get("/stats", response_model=ApiResponse[ServiceStats])
async def get_service_stats(url_service: URLService = Depends(get_url_service)):
    """Aggregate counters for the whole service"""
    return ApiResponse(data=await url_service.get_statistics())
