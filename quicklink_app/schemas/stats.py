from typing import Optional

from quicklink_app.schemas.url import CamelModel


class ServiceInfo(CamelModel):
    name: str
    version: str
    uptime: str


class URLCounters(CamelModel):
    total: int
    active: int
    total_clicks: int


class MemoryUsage(CamelModel):
    urls: int
    analytics: int
    cache: int


class PerformanceInfo(CamelModel):
    cache_size: int
    memory_usage: MemoryUsage


class GeneratorInfo(CamelModel):
    possible_combinations: int
    strategy: str
    counter: Optional[int] = None


class ServiceStats(CamelModel):
    service: ServiceInfo
    urls: URLCounters
    performance: PerformanceInfo
    generator: GeneratorInfo
