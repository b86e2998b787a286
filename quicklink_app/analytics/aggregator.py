"""
Analytics aggregation over a record's click log.

The summary is recomputed on every query and never cached: the event log is
bounded, so a pass over it is cheap.
"""

from collections import Counter
from typing import Dict, Iterable, List

from pydantic import BaseModel

from quicklink_app.models.click import ClickEvent


class RefererCount(BaseModel):
    referer: str
    count: int


class CountryCount(BaseModel):
    country: str
    count: int


class AggregateSummary(BaseModel):
    clicks_by_day: Dict[str, int]
    top_referers: List[RefererCount]
    top_countries: List[CountryCount]
    recent_clicks: List[ClickEvent]


class AnalyticsAggregator:
    """Derives per-code usage summaries from an event log"""
    
    def __init__(self, top_n: int = 5, recent_n: int = 10):
        self.top_n = top_n
        self.recent_n = recent_n
    
    def summarize(self, events: Iterable[ClickEvent]) -> AggregateSummary:
        """
        Summarize an event log.
        
        Args:
            events: Click events in insertion (chronological) order
        
        Returns:
            Clicks per calendar day, top referrers and countries (descending
            by count, ties in first-seen order) and the most recent events
            in insertion order
        """
        events = list(events)
        
        return AggregateSummary(
            clicks_by_day=self.group_by_day(events),
            top_referers=[
                RefererCount(referer=referer, count=count)
                for referer, count in self._top(event.referer or "direct" for event in events)
            ],
            top_countries=[
                CountryCount(country=country, count=count)
                for country, count in self._top(event.country or "Unknown" for event in events)
            ],
            recent_clicks=events[-self.recent_n:] if self.recent_n else [],
        )
    
    @staticmethod
    def group_by_day(events: Iterable[ClickEvent]) -> Dict[str, int]:
        """Count events per calendar day (ISO date of the event timestamp)"""
        groups: Dict[str, int] = {}
        for event in events:
            day = event.timestamp.date().isoformat()
            groups[day] = groups.get(day, 0) + 1
        return groups
    
    def _top(self, values: Iterable[str]):
        # most_common sorts stably, so equal counts keep first-seen order
        return Counter(values).most_common(self.top_n)
