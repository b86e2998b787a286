import logging
import math
from datetime import datetime
from typing import Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from quicklink_app.analytics.aggregator import AnalyticsAggregator
from quicklink_app.config import Settings
from quicklink_app.exceptions import ConflictError, NotFoundError, ValidationError
from quicklink_app.models.click import ClickMetadata
from quicklink_app.models.url import UrlRecord
from quicklink_app.schemas.stats import (
    GeneratorInfo,
    MemoryUsage,
    PerformanceInfo,
    ServiceInfo,
    ServiceStats,
    URLCounters,
)
from quicklink_app.schemas.url import (
    ClickSummary,
    Pagination,
    URLAnalytics,
    URLAnalyticsResponse,
    URLCreate,
    URLCreated,
    URLList,
    URLListItem,
)
from quicklink_app.services.short_code_generator import GenerationOptions, ShortCodeGenerator
from quicklink_app.storage.strategies import RecordStore

logger = logging.getLogger(__name__)

UTM_SOURCE = "quicklink"
UTM_MEDIUM = "shorturl"


def add_tracking_params(url: str, shortcode: str) -> str:
    """
    Set the UTM parameters on a URL.
    
    Existing utm_source/utm_medium/utm_campaign values are replaced in
    place; all other query parameters are kept.
    """
    parts = urlsplit(url)
    tracking = {
        "utm_source": UTM_SOURCE,
        "utm_medium": UTM_MEDIUM,
        "utm_campaign": shortcode,
    }
    
    query = []
    for key, value in parse_qsl(parts.query, keep_blank_values=True):
        if key in tracking:
            if tracking[key] is None:
                continue
            value = tracking[key]
            tracking[key] = None
        query.append((key, value))
    query.extend((key, value) for key, value in tracking.items() if value is not None)
    
    return urlunsplit(parts._replace(query=urlencode(query)))


def format_uptime(seconds: float) -> str:
    seconds = int(seconds)
    return f"{seconds // 60}m {seconds % 60}s"


class URLService:
    """
    URL Service with dependency injection for store, generator and aggregator.
    
    This follows the Dependency Injection pattern:
    - Every collaborator is passed in (built once by the app factory)
    - Easy to test (construct isolated instances)
    - The HTTP layer only talks to this class
    """
    
    def __init__(
        self,
        store: RecordStore,
        generator: ShortCodeGenerator,
        aggregator: AnalyticsAggregator,
        settings: Settings,
    ):
        self.store = store
        self.generator = generator
        self.aggregator = aggregator
        self.settings = settings

    async def create_short_url(self, payload: URLCreate, base_url: str) -> URLCreated:
        """Create a new short URL
        
        A caller-supplied shortcode must be free (ConflictError otherwise);
        without one, a code is generated with the configured strategy.
        """
        self._check_limits(payload)
        shortcode = payload.shortcode
        expires_in = payload.expires_in
        if expires_in is None:
            expires_in = self.settings.default_expires_in

        if shortcode:
            if self.store.exists(shortcode):
                raise ConflictError(f"Shortcode '{shortcode}' is already taken")
        else:
            options = GenerationOptions(
                length=self.settings.short_code_length,
                strategy=self.settings.short_code_strategy,
                url=payload.url,
                readable=self.settings.short_code_readable,
                max_attempts=self.settings.max_attempts,
            )
            shortcode = self.generator.generate(options, self.store.exists)
        
        record = self.store.create(
            shortcode,
            payload.url,
            expires_in,
            payload.description or "",
        )
        
        return URLCreated(
            shortcode=record.shortcode,
            short_url=self.build_short_url(base_url, record.shortcode),
            original_url=record.original_url,
            description=record.description or None,
            expires_at=record.expires_at,
            created_at=record.created_at,
        )

    async def get_url_analytics(self, shortcode: str, base_url: str) -> URLAnalyticsResponse:
        """Full analytics for a shortcode, including expired-but-unswept ones"""
        found = self.store.get_with_events(shortcode)
        if found is None:
            raise NotFoundError("Short URL")
        
        record, events = found
        summary = self.aggregator.summarize(events)
        now = self._now()
        
        return URLAnalyticsResponse(
            shortcode=record.shortcode,
            short_url=self.build_short_url(base_url, record.shortcode),
            original_url=record.original_url,
            description=record.description,
            created_at=record.created_at,
            expires_at=record.expires_at,
            is_active=record.is_active and not record.is_expired(now),
            analytics=URLAnalytics(
                total_clicks=record.click_count,
                last_accessed=record.last_accessed,
                clicks_by_day=summary.clicks_by_day,
                top_referers=summary.top_referers,
                top_countries=summary.top_countries,
                recent_clicks=[
                    ClickSummary(
                        timestamp=click.timestamp,
                        referer=click.referer,
                        country=click.country,
                        user_agent=click.user_agent,
                    )
                    for click in summary.recent_clicks
                ],
            ),
        )

    async def list_urls(self, page: int, limit: int, base_url: str) -> URLList:
        """Page through active URLs, newest first"""
        records = self.store.list_active()
        total = len(records)
        offset = (page - 1) * limit
        
        return URLList(
            urls=[
                self._to_list_item(record, base_url)
                for record in records[offset:offset + limit]
            ],
            pagination=Pagination(
                page=page,
                limit=limit,
                total=total,
                pages=math.ceil(total / limit),
                has_next=offset + limit < total,
                has_prev=page > 1,
            ),
        )

    async def resolve_redirect(
        self,
        shortcode: str,
        metadata: Optional[ClickMetadata] = None,
        track: bool = True,
    ) -> str:
        """
        Resolve a shortcode to its redirect target and record the click.
        
        Raises:
            NotFoundError: If the code is unknown or expired
        """
        record = self.store.get(shortcode)
        if record is None:
            raise NotFoundError("Short URL")
        
        if not self.store.record_click(shortcode, metadata):
            logger.warning(f"Failed to record click for {shortcode}")
        
        redirect_url = record.original_url
        if track:
            try:
                redirect_url = add_tracking_params(record.original_url, shortcode)
            except ValueError as e:
                logger.warning(f"Failed to add tracking params to {record.original_url}: {e}")
        
        logger.info(
            f"Redirecting {shortcode} -> {record.original_url} "
            f"({metadata.user_agent if metadata else 'unknown'} "
            f"from {metadata.referer if metadata else 'direct'})"
        )
        return redirect_url

    async def get_statistics(self) -> ServiceStats:
        store_stats = self.store.get_stats()
        generator_stats = self.generator.get_stats()
        uptime = (self._now() - store_stats["started_at"]).total_seconds()
        
        return ServiceStats(
            service=ServiceInfo(
                name=self.settings.app_name,
                version=self.settings.app_version,
                uptime=format_uptime(uptime),
            ),
            urls=URLCounters(
                total=store_stats["total_urls"],
                active=store_stats["active_urls"],
                total_clicks=store_stats["total_clicks"],
            ),
            performance=PerformanceInfo(
                cache_size=store_stats["cache_size"],
                memory_usage=MemoryUsage(**store_stats["memory_usage"]),
            ),
            generator=GeneratorInfo(
                possible_combinations=generator_stats["possible_combinations"]["length6"],
                strategy=self.settings.short_code_strategy,
                counter=generator_stats["counter"],
            ),
        )

    def _check_limits(self, payload: URLCreate) -> None:
        """Apply the configured limits; all violations are reported together"""
        settings = self.settings
        errors = []

        if len(payload.url) > settings.url_max_length:
            errors.append(("url", f"URL cannot exceed {settings.url_max_length} characters"))

        reserved = {word.lower() for word in settings.reserved_shortcodes}
        if payload.shortcode and payload.shortcode in reserved:
            errors.append(("shortcode", "Shortcode conflicts with reserved word"))

        if payload.expires_in is not None and payload.expires_in > settings.max_expires_in:
            errors.append(("expiresIn", f"Expiry cannot exceed {settings.max_expires_in} minutes"))

        if payload.description and len(payload.description) > settings.description_max_length:
            errors.append((
                "description",
                f"Description cannot exceed {settings.description_max_length} characters",
            ))

        if errors:
            raise ValidationError(
                "Validation failed",
                [{"field": field, "message": message, "type": "value_error"} for field, message in errors],
            )

    @staticmethod
    def build_short_url(base_url: str, shortcode: str) -> str:
        return f"{base_url.rstrip('/')}/{shortcode}"

    def _to_list_item(self, record: UrlRecord, base_url: str) -> URLListItem:
        return URLListItem(
            shortcode=record.shortcode,
            short_url=self.build_short_url(base_url, record.shortcode),
            original_url=record.original_url,
            description=record.description,
            created_at=record.created_at,
            expires_at=record.expires_at,
            click_count=record.click_count,
            last_accessed=record.last_accessed,
        )

    def _now(self) -> datetime:
        return self.store.now()
