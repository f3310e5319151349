"""
Runtime package: synchronization primitives and path rendering used by the
guard core, plus caller-facing check helpers in ``kindguard.runtime.checks``.
"""

from .concurrency import InFlightTracker, get_lock, with_lock
from .paths import path_literal

__all__ = [
    "InFlightTracker",
    "get_lock",
    "path_literal",
    "with_lock",
]
