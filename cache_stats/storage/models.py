"""
Data models for recorded cache operations.

Defines the operation event entity consumed by the statistics aggregator.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class OperationKind(Enum):
    """Cache operations recognized for statistics purposes."""
    GET_ITEM = "get_item"
    GET_ITEMS = "get_items"  # Batch read
    HAS_ITEM = "has_item"
    SAVE = "save"
    DELETE_ITEM = "delete_item"
    OTHER = "other"  # Counted as a call, never classified

    @classmethod
    def from_name(cls, name: str) -> "OperationKind":
        """Map an operation name to its kind, falling back to OTHER."""
        try:
            kind = cls(name)
        except ValueError:
            return cls.OTHER
        return kind


@dataclass(frozen=True)
class CacheOperationEvent:
    """Immutable record of a single operation on a named cache.

    Events are trusted as recorded: counts and timings are not validated,
    so malformed values surface as odd statistics rather than errors.
    """
    kind: OperationKind
    start_time: float
    end_time: float
    hit_count: int = 0
    miss_count: int = 0
    found: Optional[bool] = None
    name: Optional[str] = None
    argument: Any = field(default=None, compare=False, repr=False)
    result: Any = field(default=None, compare=False, repr=False)

    @property
    def operation(self) -> str:
        """Raw operation name, e.g. "clear" for an OTHER event."""
        return self.name or self.kind.value

    @property
    def duration(self) -> float:
        return self.end_time - self.start_time
