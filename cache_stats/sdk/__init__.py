"""
SDK for Cache Stats.

Provides cache instrumentation that records operation events.
"""

from .traceable_cache import TraceableCache

__all__ = ["TraceableCache"]
