from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class UrlRecord(BaseModel):
    """
    Authoritative record for one shortcode.
    
    expires_at is fixed at creation (created_at + TTL) and never recomputed.
    click_count and last_accessed are mutated by the store on every redirect.
    Copies handed out by the store (and held by the hot cache) are snapshots,
    produced with model_copy().
    """
    
    shortcode: str = Field(..., description="Unique short key")
    original_url: str = Field(..., description="The original long URL")
    description: str = ""
    created_at: datetime
    expires_at: datetime
    is_active: bool = True
    click_count: int = 0
    last_accessed: Optional[datetime] = None

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now
