"""
Interfaces package: the guard protocol and the value types shared by every guard.
"""

from .abc import AbstractGuard, GuardContract
from .types import (
    DEFAULT_UNION_OPTIONS,
    UNDEFINED,
    CoerceResult,
    Invalidation,
    Kind,
    LogicalInvalidation,
    Path,
    TraversalOptions,
    TypeInvalidation,
    UnionOptions,
)

__all__ = [
    "AbstractGuard",
    "CoerceResult",
    "DEFAULT_UNION_OPTIONS",
    "GuardContract",
    "Invalidation",
    "Kind",
    "LogicalInvalidation",
    "Path",
    "TraversalOptions",
    "TypeInvalidation",
    "UNDEFINED",
    "UnionOptions",
]
