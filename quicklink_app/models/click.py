"""
Data models for click tracking.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class ClickMetadata(BaseModel):
    """
    Request metadata captured by the redirect handler.
    
    Values are already parsed (browser family, referrer host); the store
    derives the country and stamps the time when it records the click.
    """
    
    ip: Optional[str] = Field(None, description="Client IP address")
    user_agent: Optional[str] = Field(None, description="Parsed user-agent family")
    referer: Optional[str] = Field(None, description="Referrer host")
    request_id: Optional[str] = Field(None, description="Correlation id of the request")


class ClickEvent(BaseModel):
    """
    One entry of a record's event log.
    
    Appended on every recorded redirect. The store keeps only the most recent
    entries per shortcode (ring buffer).
    """
    
    timestamp: datetime = Field(..., description="When the click occurred")
    ip: str = Field("unknown", description="Client IP address")
    user_agent: str = Field("unknown", description="Browser family")
    referer: str = Field("direct", description="Referrer host")
    country: str = Field("Unknown", description="Country derived from the IP")
    request_id: Optional[str] = None
    
    model_config = {
        "json_schema_extra": {
            "example": {
                "timestamp": "2025-10-29T10:30:00Z",
                "ip": "203.0.113.7",
                "user_agent": "Chrome",
                "referer": "twitter.com",
                "country": "Unknown",
                "request_id": "9f1c2ab4de5f6071",
            }
        }
    }
