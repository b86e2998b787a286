import html

from fastapi import APIRouter, Depends, Path, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse

from quicklink_app.analytics.metadata import get_client_ip, parse_referer, parse_user_agent
from quicklink_app.api.errors import get_request_id
from quicklink_app.config import Settings
from quicklink_app.dependencies import get_settings, get_url_service
from quicklink_app.exceptions import NotFoundError
from quicklink_app.models.click import ClickMetadata
from quicklink_app.services.short_code_generator import (
    SHORTCODE_MAX_LENGTH,
    SHORTCODE_MIN_LENGTH,
    SHORTCODE_REGEX,
)
from quicklink_app.services.url_service import URLService

router = APIRouter(tags=["redirect"])

NOT_FOUND_PAGE = """<!DOCTYPE html>
<html>
<head>
  <title>Link Not Found - QuickLink</title>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <style>
    body {{ font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
           margin: 0; height: 100vh; display: flex; align-items: center; justify-content: center; }}
    .container {{ text-align: center; max-width: 500px; padding: 2rem; }}
    .code {{ font-family: monospace; padding: 0.25rem 0.5rem; background: #eee; border-radius: 6px; }}
  </style>
</head>
<body>
  <div class="container">
    <h2>Link Not Found</h2>
    <p>The short link <span class="code">{shortcode}</span> doesn't exist or has expired.</p>
    <p>This could happen if:</p>
    <ul style="text-align: left; display: inline-block;">
      <li>The link was mistyped</li>
      <li>The link has expired</li>
      <li>The link was deleted</li>
    </ul>
    <p><a href="/">&larr; Go to homepage</a></p>
  </div>
</body>
</html>
"""


def render_not_found(shortcode: str) -> str:
    return NOT_FOUND_PAGE.format(shortcode=html.escape(shortcode))


@router.get("/{shortcode}")
async def redirect_to_long_url(
    request: Request,
    shortcode: str = Path(
        ...,
        min_length=SHORTCODE_MIN_LENGTH,
        max_length=SHORTCODE_MAX_LENGTH,
        pattern=SHORTCODE_REGEX,
    ),
    track: str = "true",
    url_service: URLService = Depends(get_url_service),
    settings: Settings = Depends(get_settings)
):
    """
    Redirect to the original URL.
    
    Flow:
    1. Look up the live record (hot cache, then store)
    2. Record the click with parsed request metadata
    3. Redirect with 302 so every visit comes back through here
    
    UTM parameters are added unless ?track=false is passed.
    """
    metadata = ClickMetadata(
        ip=get_client_ip(request.headers, request.client.host if request.client else None),
        user_agent=parse_user_agent(request.headers.get("user-agent")),
        referer=parse_referer(request.headers.get("referer") or request.headers.get("referrer")),
        request_id=get_request_id(request),
    )
    add_utm = settings.tracking_enabled and track.lower() != "false"
    
    try:
        redirect_url = await url_service.resolve_redirect(shortcode, metadata, track=add_utm)
    except NotFoundError:
        return HTMLResponse(render_not_found(shortcode), status_code=status.HTTP_404_NOT_FOUND)
    
    return RedirectResponse(url=redirect_url, status_code=status.HTTP_302_FOUND)
