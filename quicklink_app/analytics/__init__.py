"""
Click analytics: metadata parsing and on-demand aggregation.
"""

from .aggregator import AnalyticsAggregator, AggregateSummary, RefererCount, CountryCount
from .metadata import get_client_ip, parse_user_agent, parse_referer, lookup_country

__all__ = [
    "AnalyticsAggregator",
    "AggregateSummary",
    "RefererCount",
    "CountryCount",
    "get_client_ip",
    "parse_user_agent",
    "parse_referer",
    "lookup_country",
]
