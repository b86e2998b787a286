"""
Tests for click metadata parsing and analytics aggregation.
"""
from datetime import datetime, timedelta, timezone

import pytest

from quicklink_app.analytics.aggregator import AnalyticsAggregator
from quicklink_app.analytics.metadata import (
    get_client_ip,
    lookup_country,
    parse_referer,
    parse_user_agent
)
from quicklink_app.models.click import ClickEvent

DAY_ONE = datetime(2026, 3, 1, 23, 30, tzinfo=timezone.utc)


def make_event(timestamp=DAY_ONE, referer="direct", country="Unknown", **kwargs) -> ClickEvent:
    return ClickEvent(timestamp=timestamp, referer=referer, country=country, **kwargs)


class TestAggregator:
    """Test on-demand summaries"""
    
    def test_groups_by_calendar_day(self):
        events = [
            make_event(DAY_ONE),
            make_event(DAY_ONE + timedelta(minutes=10)),
            make_event(DAY_ONE + timedelta(minutes=45)),  # next day
        ]
        
        summary = AnalyticsAggregator().summarize(events)
        
        assert summary.clicks_by_day == {"2026-03-01": 2, "2026-03-02": 1}
    
    def test_top_referers_capped_and_sorted(self):
        events = []
        for i, count in enumerate([1, 4, 2, 7, 3, 5, 6]):
            events += [make_event(referer=f"site{i}.com") for _ in range(count)]
        
        summary = AnalyticsAggregator().summarize(events)
        
        counts = [entry.count for entry in summary.top_referers]
        assert len(summary.top_referers) == 5
        assert counts == sorted(counts, reverse=True)
        assert summary.top_referers[0].referer == "site3.com"
        assert counts == [7, 6, 5, 4, 3]
    
    def test_ties_keep_first_seen_order(self):
        events = [
            make_event(country="Local"),
            make_event(country="Unknown"),
            make_event(country="Unknown"),
            make_event(country="Local"),
        ]
        
        summary = AnalyticsAggregator().summarize(events)
        
        assert [entry.country for entry in summary.top_countries] == ["Local", "Unknown"]
        assert all(entry.count == 2 for entry in summary.top_countries)
    
    def test_recent_clicks_in_insertion_order(self):
        events = [make_event(request_id=str(i)) for i in range(25)]
        
        summary = AnalyticsAggregator().summarize(events)
        
        assert [event.request_id for event in summary.recent_clicks] == [str(i) for i in range(15, 25)]
    
    def test_empty_log(self):
        summary = AnalyticsAggregator().summarize([])
        
        assert summary.clicks_by_day == {}
        assert summary.top_referers == []
        assert summary.top_countries == []
        assert summary.recent_clicks == []


class TestMetadataParsing:
    """Test header parsing for click events"""
    
    @pytest.mark.parametrize("user_agent, family", [
        ("Mozilla/5.0 (Windows NT 10.0) AppleWebKit/537.36 Chrome/120.0 Safari/537.36", "Chrome"),
        ("Mozilla/5.0 (Macintosh) AppleWebKit/605.1.15 Version/17.0 Safari/605.1.15", "Safari"),
        ("Mozilla/5.0 (X11; Linux x86_64; rv:121.0) Gecko/20100101 Firefox/121.0", "Firefox"),
        ("Mozilla/5.0 (Windows NT 10.0) Chrome/120.0 Safari/537.36 Edg/120.0", "Edge"),
        ("curl/8.4.0", "curl"),
        ("PostmanRuntime/7.36.0", "Postman"),
        ("python-httpx/0.27", "Other"),
        (None, "unknown"),
    ])
    def test_user_agent_family(self, user_agent, family):
        assert parse_user_agent(user_agent) == family
    
    def test_referer_host(self):
        assert parse_referer("https://twitter.com/some/post") == "twitter.com"
        assert parse_referer(None) == "direct"
        assert parse_referer("") == "direct"
        assert parse_referer("not a url") == "unknown"
        assert parse_referer("http://[broken") == "unknown"
    
    def test_client_ip(self):
        assert get_client_ip({"x-forwarded-for": "203.0.113.7, 10.0.0.1"}, "10.0.0.2") == "203.0.113.7"
        assert get_client_ip({"x-real-ip": "198.51.100.4"}, "10.0.0.2") == "198.51.100.4"
        assert get_client_ip({}, "10.0.0.2") == "10.0.0.2"
        assert get_client_ip({}) == "unknown"
    
    def test_country_lookup(self):
        assert lookup_country("127.0.0.1") == "Local"
        assert lookup_country("::1") == "Local"
        assert lookup_country("203.0.113.7") == "Unknown"
        assert lookup_country("unknown") == "Unknown"
        assert lookup_country(None) == "Unknown"
