"""
Core modules for Cache Stats.

This package contains statistics aggregation and the collector that
gathers recorded events from traced caches.
"""
