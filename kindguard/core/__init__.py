"""
Core package providing the guard algebra.

Architecture:
- Guard base class and value classifier
- Canonical kind guards and their registry
- Literal and union guards
- Derived modifiers built from the above
"""

# Import order matters to avoid circular dependencies
from .errors import GuardAssertionError, GuardError, InvalidGuardError, InvalidLiteralError, UnknownKindError
from .guard import ExcludeGuard, Guard, deep_equal, get_type
from .kinds import KindGuard, KindRegistry, get_kind_registry, kind
from .literal import LiteralGuard, literal
from .primitives import any_, bigint, boolean, never, number, string, symbol, unknown
from .union import UnionGuard, union
from .modifiers import DerivedGuardCache, enums, nullable, optional, required

__all__ = [
    # Guards
    "Guard",
    "ExcludeGuard",
    "KindGuard",
    "LiteralGuard",
    "UnionGuard",
    # Constructors
    "kind",
    "literal",
    "union",
    "enums",
    "nullable",
    "optional",
    "required",
    "any_",
    "bigint",
    "boolean",
    "never",
    "number",
    "string",
    "symbol",
    "unknown",
    # Registries
    "KindRegistry",
    "DerivedGuardCache",
    "get_kind_registry",
    # Helpers
    "deep_equal",
    "get_type",
    # Errors
    "GuardError",
    "GuardAssertionError",
    "InvalidGuardError",
    "InvalidLiteralError",
    "UnknownKindError",
]
