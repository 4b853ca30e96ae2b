"""
Cache usage statistics.

Reduces recorded cache operation events into per-source and total
statistics. The reduction is pure and performs no I/O, so it is safe to run
from several callers as long as each passes its own event snapshot.
"""

from dataclasses import dataclass, fields
from decimal import Decimal, ROUND_HALF_UP
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Tuple

from cache_stats.storage.models import CacheOperationEvent, OperationKind

NOT_AVAILABLE = "N/A"

# Numeric fields summed into the total, in report order
COUNTER_FIELDS = ("calls", "total_time", "reads", "hits", "misses", "writes", "deletes")


@dataclass(frozen=True)
class SourceStatistics:
    """Usage statistics for one cache source, or the total over all sources."""
    calls: int = 0
    total_time: float = 0
    reads: int = 0
    hits: int = 0
    misses: int = 0
    writes: int = 0
    deletes: int = 0
    hit_ratio: str = NOT_AVAILABLE

    @property
    def hit_ratio_percent(self) -> Optional[float]:
        """Numeric hit ratio in percent, None when nothing was read."""
        return hit_ratio_percent(self.hits, self.reads)

    def as_dict(self) -> Dict[str, object]:
        """Plain mapping of all fields, in declaration order."""
        return {f.name: getattr(self, f.name) for f in fields(self)}


# The total has the same shape as a single source
TotalStatistics = SourceStatistics

EMPTY_STATISTICS = SourceStatistics()


def hit_ratio_percent(hits: float, reads: float) -> Optional[float]:
    """Return hits/reads as a percentage rounded to 2 places, or None.

    Halves round away from zero, so 1 hit in 32 reads is 3.13.
    """
    if reads > 0:
        percent = Decimal(100) * Decimal(str(hits)) / Decimal(str(reads))
        return float(percent.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))
    return None


def format_hit_ratio(hits: float, reads: float) -> str:
    """Format the hit ratio as "57.14%", dropping trailing zeros ("50%").

    Returns "N/A" when there were no reads.
    """
    percent = hit_ratio_percent(hits, reads)
    if percent is None:
        return NOT_AVAILABLE
    text = f"{percent:.2f}".rstrip("0").rstrip(".")
    return f"{text}%"


def compute_source_statistics(events: Iterable[CacheOperationEvent]) -> SourceStatistics:
    """Fold the events of one source, in order, into its statistics.

    Args:
        events: Recorded operation events for a single source

    Returns:
        SourceStatistics for the source (all zero for no events)
    """
    calls = 0
    total_time = 0
    reads = hits = misses = writes = deletes = 0

    for event in events:
        calls += 1
        total_time += event.end_time - event.start_time

        if event.kind is OperationKind.GET_ITEM:
            reads += 1
            if event.found:
                hits += 1
            else:
                misses += 1
        elif event.kind is OperationKind.GET_ITEMS:
            count = event.hit_count + event.miss_count
            reads += count
            hits += event.hit_count
            # Derived from the batch size, miss_count is not trusted directly
            misses += count - event.hit_count
        elif event.kind is OperationKind.HAS_ITEM:
            reads += 1
            if event.found:
                hits += 1
            else:
                misses += 1
        elif event.kind is OperationKind.SAVE:
            writes += 1
        elif event.kind is OperationKind.DELETE_ITEM:
            deletes += 1

    return SourceStatistics(
        calls=calls,
        total_time=total_time,
        reads=reads,
        hits=hits,
        misses=misses,
        writes=writes,
        deletes=deletes,
        hit_ratio=format_hit_ratio(hits, reads)
    )


def compute_total_statistics(statistics: Iterable[SourceStatistics]) -> TotalStatistics:
    """Sum per-source statistics; the ratio is recomputed, never averaged."""
    totals = dict.fromkeys(COUNTER_FIELDS, 0)
    for source_statistics in statistics:
        for key in COUNTER_FIELDS:
            totals[key] += getattr(source_statistics, key)

    return TotalStatistics(
        hit_ratio=format_hit_ratio(totals["hits"], totals["reads"]),
        **totals
    )


def compute_statistics(
    events_by_source: Mapping[str, Iterable[CacheOperationEvent]]
) -> Tuple[Dict[str, SourceStatistics], TotalStatistics]:
    """Compute statistics per source and the total across all sources.

    Every source gets an entry, even with no events, and sources keep the
    iteration order of the input mapping.

    Args:
        events_by_source: Ordered events per source name

    Returns:
        Tuple of (statistics per source name, total statistics)
    """
    per_source = {
        name: compute_source_statistics(events)
        for name, events in events_by_source.items()
    }
    return per_source, compute_total_statistics(per_source.values())


class StatisticsAggregator:
    """Computes statistics and keeps the last result for reporting layers.

    The snapshots returned by the getters stay valid until the next call to
    compute(); the per-source mapping is a read-only view.
    """

    def __init__(self):
        self._per_source: Mapping[str, SourceStatistics] = MappingProxyType({})
        self._total: TotalStatistics = EMPTY_STATISTICS

    def compute(
        self,
        events_by_source: Mapping[str, Iterable[CacheOperationEvent]]
    ) -> Tuple[Mapping[str, SourceStatistics], TotalStatistics]:
        """Aggregate one batch of recorded events.

        Args:
            events_by_source: Ordered events per source name, not mutated
                while this call runs

        Returns:
            Tuple of (read-only statistics per source, total statistics)
        """
        per_source, total = compute_statistics(events_by_source)
        self._per_source = MappingProxyType(per_source)
        self._total = total
        return self._per_source, self._total

    def get_per_source_statistics(self) -> Mapping[str, SourceStatistics]:
        return self._per_source

    def get_total_statistics(self) -> TotalStatistics:
        return self._total
