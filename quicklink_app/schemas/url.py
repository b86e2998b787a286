from datetime import datetime
from typing import Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, TypeAdapter, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from quicklink_app.analytics.aggregator import CountryCount, RefererCount
from quicklink_app.services.short_code_generator import ShortCodeGenerator

T = TypeVar("T")

URL_PATTERN_MESSAGE = "URL must start with http:// or https://"
SHORTCODE_MESSAGE = "Shortcode must be 3-20 characters, alphanumeric, underscore, or dash only"
PRIVATE_HOST_PREFIXES = ("192.168.", "10.", "172.")

HTTP_URL = TypeAdapter(HttpUrl)


class CamelModel(BaseModel):
    """Base schema: snake_case in Python, camelCase on the wire"""
    
    # Pydantic V2 style configuration
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class URLCreate(CamelModel):
    """Create request.

    Only app-independent rules live here. Limits that come from Settings
    (reserved words, maximum expiry and lengths) are applied by URLService
    against the settings of the app serving the request.
    """
    url: str = Field(..., description="The original URL to be shortened")
    shortcode: Optional[str] = Field(None, description="Custom shortcode (optional)")
    expires_in: Optional[int] = Field(
        None,
        ge=1,
        description="Minutes until the short URL expires",
    )
    description: Optional[str] = None

    @field_validator("url")
    @classmethod
    def check_url(cls, value: str) -> str:
        value = value.strip()
        if not value.lower().startswith(("http://", "https://")):
            raise ValueError(URL_PATTERN_MESSAGE)

        try:
            parsed = HTTP_URL.validate_python(value)
        except PydanticValidationError:
            raise ValueError("Invalid URL format")

        hostname = (parsed.host or "").lower()
        if hostname in ("localhost", "127.0.0.1") or hostname.startswith(PRIVATE_HOST_PREFIXES):
            raise ValueError("Private/local URLs are not allowed")

        # The caller's spelling is kept; HttpUrl would add a trailing slash
        return value

    @field_validator("shortcode")
    @classmethod
    def check_shortcode(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        
        value = value.strip().lower()
        if not value:
            return None
        
        if not ShortCodeGenerator.is_valid(value):
            raise ValueError(SHORTCODE_MESSAGE)
        
        return value


class URLCreated(CamelModel):
    shortcode: str
    short_url: str
    original_url: str
    description: Optional[str] = None
    expires_at: datetime
    created_at: datetime


class ClickSummary(CamelModel):
    timestamp: datetime
    referer: str
    country: str
    user_agent: str


class URLAnalytics(CamelModel):
    total_clicks: int
    last_accessed: Optional[datetime] = None
    clicks_by_day: Dict[str, int]
    top_referers: List[RefererCount]
    top_countries: List[CountryCount]
    recent_clicks: List[ClickSummary]


class URLAnalyticsResponse(CamelModel):
    shortcode: str
    short_url: str
    original_url: str
    description: str
    created_at: datetime
    expires_at: datetime
    is_active: bool
    analytics: URLAnalytics


class URLListItem(CamelModel):
    shortcode: str
    short_url: str
    original_url: str
    description: str
    created_at: datetime
    expires_at: datetime
    click_count: int
    last_accessed: Optional[datetime] = None


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    pages: int
    has_next: bool
    has_prev: bool


class URLList(CamelModel):
    urls: List[URLListItem]
    pagination: Pagination


class ApiResponse(BaseModel, Generic[T]):
    """Success envelope shared by every JSON endpoint"""
    
    success: bool = True
    data: T
    message: Optional[str] = None
