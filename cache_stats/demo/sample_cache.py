# cache_stats/demo/sample_cache.py

from itertools import count

from cache_stats.core.collector import CacheDataCollector
from cache_stats.sdk.traceable_cache import TraceableCache


def _tick_clock(step: float = 0.001):
    """Deterministic clock advancing by step seconds on every reading."""
    ticks = count()
    return lambda: next(ticks) * step


def build_demo_collector() -> CacheDataCollector:
    """Run a small workload against two traced caches and collect it."""
    clock = _tick_clock()
    app_cache = TraceableCache(clock=clock)
    session_cache = TraceableCache(clock=clock)

    app_cache.save("user:1", {"name": "Ada"})
    app_cache.save("user:2", {"name": "Grace"})
    app_cache.get_item("user:1")
    app_cache.get_item("user:3")
    app_cache.get_items(["user:1", "user:2", "user:4"])
    app_cache.has_item("user:2")
    app_cache.delete_item("user:2")
    app_cache.clear()

    session_cache.has_item("session:abc")
    session_cache.save("session:abc", "token")
    session_cache.get_item("session:abc")

    collector = CacheDataCollector({"app": app_cache, "session": session_cache})
    collector.collect()
    return collector
