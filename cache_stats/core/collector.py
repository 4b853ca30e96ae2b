"""
Cache data collection.

Gathers the recorded events of named traced caches and computes their
statistics in one pass.
"""

import logging
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple

from .statistics import SourceStatistics, StatisticsAggregator, TotalStatistics
from cache_stats.sdk.traceable_cache import TraceableCache
from cache_stats.storage.models import CacheOperationEvent

logger = logging.getLogger(__name__)


class CacheDataCollector:
    """Collects statistics for an explicit set of named traced caches.

    Sources are registered through the constructor or add_instance(); there
    is no process-wide registry.
    """

    def __init__(self, instances: Optional[Mapping[str, TraceableCache]] = None):
        """Initialize the collector.

        Args:
            instances: Traced caches keyed by source name
        """
        self._instances: Dict[str, TraceableCache] = dict(instances or {})
        self._aggregator = StatisticsAggregator()
        self._calls: Mapping[str, Tuple[CacheOperationEvent, ...]] = MappingProxyType({})

    @property
    def instances(self) -> Mapping[str, TraceableCache]:
        return MappingProxyType(self._instances)

    def add_instance(self, name: str, instance: TraceableCache) -> None:
        """Register a traced cache under name, replacing any previous one."""
        if name in self._instances:
            logger.debug("Replacing cache source %r", name)
        self._instances[name] = instance

    def collect(self) -> None:
        """Snapshot every source's calls and compute statistics from them."""
        calls = {name: instance.get_calls() for name, instance in self._instances.items()}
        self._calls = MappingProxyType(calls)
        self._aggregator.compute(calls)
        logger.debug(
            "Collected %d calls from %d cache sources",
            sum(len(events) for events in calls.values()),
            len(calls)
        )

    def reset(self) -> None:
        """Drop collected data and clear every source's call log."""
        for instance in self._instances.values():
            instance.clear_calls()
        self._calls = MappingProxyType({})
        self._aggregator = StatisticsAggregator()

    def get_calls(self) -> Mapping[str, Tuple[CacheOperationEvent, ...]]:
        """Calls captured by the last collect(), per source."""
        return self._calls

    def get_statistics(self) -> Mapping[str, SourceStatistics]:
        return self._aggregator.get_per_source_statistics()

    def get_totals(self) -> TotalStatistics:
        return self._aggregator.get_total_statistics()
