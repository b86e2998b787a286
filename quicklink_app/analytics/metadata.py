"""
Click metadata parsing.

Turns raw request headers into the coarse values kept in the event log:
client IP, browser family, referrer host and country.
"""

from typing import Mapping, Optional
from urllib.parse import urlsplit

# Static lookup standing in for real geolocation
COUNTRY_BY_IP = {
    "127.0.0.1": "Local",
    "::1": "Local",
}

# Checked in order; Edge and Chrome both advertise "Safari"
BROWSER_MARKERS = [
    ("Edg", "Edge"),
    ("Chrome", "Chrome"),
    ("Firefox", "Firefox"),
    ("Safari", "Safari"),
    ("curl", "curl"),
    ("Postman", "Postman"),
]


def get_client_ip(headers: Mapping[str, str], peer_host: Optional[str] = None) -> str:
    """Client IP from proxy headers, then the socket peer"""
    forwarded_for = headers.get("x-forwarded-for")
    if forwarded_for:
        first = forwarded_for.split(",")[0].strip()
        if first:
            return first
    
    real_ip = headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()
    
    return peer_host or "unknown"


def parse_user_agent(user_agent: Optional[str]) -> str:
    """Reduce a User-Agent header to a browser family"""
    if not user_agent:
        return "unknown"
    
    for marker, family in BROWSER_MARKERS:
        if marker in user_agent:
            return family
    
    return "Other"


def parse_referer(referer: Optional[str]) -> str:
    """Referrer host, "direct" when absent, "unknown" when unparsable"""
    if not referer:
        return "direct"
    
    try:
        hostname = urlsplit(referer).hostname
    except ValueError:
        return "unknown"
    
    return hostname or "unknown"


def lookup_country(ip: Optional[str]) -> str:
    if not ip or ip == "unknown":
        return "Unknown"
    return COUNTRY_BY_IP.get(ip, "Unknown")
