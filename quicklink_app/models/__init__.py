"""
In-memory data models for the URL shortener.

Note: There is no database. Records live for the lifetime of the process and
are owned by the record store (quicklink_app.storage).
"""

from .url import UrlRecord
from .click import ClickEvent, ClickMetadata

__all__ = ["UrlRecord", "ClickEvent", "ClickMetadata"]
