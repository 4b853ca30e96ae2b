"""
Traceable cache wrapper.

Records operation events for statistics without modifying cache behavior.
"""

import logging
import time
from typing import Any, Callable, Dict, Iterable, List, MutableMapping, Optional, Tuple

from ..storage.models import CacheOperationEvent, OperationKind

logger = logging.getLogger(__name__)


class TraceableCache:
    """Cache wrapper that records one event per operation.

    Wraps any mutable mapping used as the cache store. Events are recorded
    even when the backend raises; the error still reaches the caller.
    """

    def __init__(
        self,
        backend: Optional[MutableMapping[str, Any]] = None,
        clock: Callable[[], float] = time.perf_counter
    ):
        """Initialize traceable cache.

        Args:
            backend: Cache store to wrap (defaults to a new dict)
            clock: Monotonic time source used for event timings
        """
        self.backend = backend if backend is not None else {}
        self.clock = clock
        self._calls: List[CacheOperationEvent] = []

    def get_item(self, key: str, default: Any = None) -> Any:
        """Return the cached value for key, or default on a miss."""
        start = self.clock()
        found = False
        result = default
        try:
            if key in self.backend:
                result = self.backend[key]
                found = True
            return result
        finally:
            self._record(OperationKind.GET_ITEM, start, argument=key, result=result, found=found)

    def get_items(self, keys: Iterable[str]) -> Dict[str, Any]:
        """Return the cached values for all keys that are present."""
        keys = list(keys)
        start = self.clock()
        found: Dict[str, Any] = {}
        try:
            for key in keys:
                if key in self.backend:
                    found[key] = self.backend[key]
            return found
        finally:
            self._record(
                OperationKind.GET_ITEMS,
                start,
                argument=keys,
                result=found,
                hit_count=len(found),
                miss_count=len(keys) - len(found)
            )

    def has_item(self, key: str) -> bool:
        """Check whether key is cached."""
        start = self.clock()
        found = False
        try:
            found = key in self.backend
            return found
        finally:
            self._record(OperationKind.HAS_ITEM, start, argument=key, result=found, found=found)

    def save(self, key: str, value: Any) -> bool:
        """Store value under key."""
        start = self.clock()
        saved = False
        try:
            self.backend[key] = value
            saved = True
            return saved
        finally:
            self._record(OperationKind.SAVE, start, argument=(key, value), result=saved)

    def delete_item(self, key: str) -> bool:
        """Remove key from the cache. Returns whether it was cached."""
        start = self.clock()
        deleted = False
        try:
            if key in self.backend:
                del self.backend[key]
                deleted = True
            return deleted
        finally:
            self._record(OperationKind.DELETE_ITEM, start, argument=key, result=deleted)

    def delete_items(self, keys: Iterable[str]) -> int:
        """Remove several keys. Recorded as an unclassified operation."""
        keys = list(keys)
        start = self.clock()
        deleted = 0
        try:
            for key in keys:
                if key in self.backend:
                    del self.backend[key]
                    deleted += 1
            return deleted
        finally:
            self._record(OperationKind.OTHER, start, name="delete_items", argument=keys, result=deleted)

    def clear(self) -> None:
        """Empty the cache. Recorded as an unclassified operation."""
        start = self.clock()
        try:
            self.backend.clear()
        finally:
            self._record(OperationKind.OTHER, start, name="clear")

    def get_calls(self) -> Tuple[CacheOperationEvent, ...]:
        """Snapshot of the recorded events, oldest first."""
        return tuple(self._calls)

    def clear_calls(self) -> None:
        self._calls.clear()

    def _record(self, kind: OperationKind, start: float, **details: Any) -> None:
        event = CacheOperationEvent(
            kind=kind,
            start_time=start,
            end_time=self.clock(),
            **details
        )
        self._calls.append(event)
        logger.debug("Recorded %s in %.6fs", event.operation, event.duration)
