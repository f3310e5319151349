"""
kindguard: a runtime guard algebra for describing and checking values.

Guards are immutable descriptors of value sets. Kind guards are canonical per
kind set, unions are kept minimal as they are built, and derived guards
(``nullable``, ``optional``, ``required``) are memoized per input guard.

Usage:
    from kindguard import boolean, literal, union

    flag = union([boolean(), literal(1)])
    flag.accept(True)  # True
    flag.accept(0)     # False
"""

from .core import (
    DerivedGuardCache,
    ExcludeGuard,
    Guard,
    GuardAssertionError,
    GuardError,
    InvalidGuardError,
    InvalidLiteralError,
    KindGuard,
    KindRegistry,
    LiteralGuard,
    UnionGuard,
    UnknownKindError,
    any_,
    bigint,
    boolean,
    deep_equal,
    enums,
    get_kind_registry,
    get_type,
    kind,
    literal,
    never,
    nullable,
    number,
    optional,
    required,
    string,
    symbol,
    union,
    unknown,
)
from .interfaces import (
    DEFAULT_UNION_OPTIONS,
    UNDEFINED,
    AbstractGuard,
    GuardContract,
    CoerceResult,
    Invalidation,
    Kind,
    LogicalInvalidation,
    Path,
    TraversalOptions,
    TypeInvalidation,
    UnionOptions,
)
from .runtime.checks import (
    assert_return,
    assert_valid,
    coercer,
    converter,
    creator,
    inspect_guard,
    is_valid,
    scanner,
    substitute,
    try_assert_return,
    validator,
)

__version__ = "0.1.0"

__all__ = [
    # Guards
    "AbstractGuard",
    "GuardContract",
    "Guard",
    "ExcludeGuard",
    "KindGuard",
    "LiteralGuard",
    "UnionGuard",
    # Constructors
    "any_",
    "bigint",
    "boolean",
    "enums",
    "kind",
    "literal",
    "never",
    "nullable",
    "number",
    "optional",
    "required",
    "string",
    "symbol",
    "union",
    "unknown",
    # Values and options
    "CoerceResult",
    "DEFAULT_UNION_OPTIONS",
    "Invalidation",
    "Kind",
    "LogicalInvalidation",
    "Path",
    "TraversalOptions",
    "TypeInvalidation",
    "UNDEFINED",
    "UnionOptions",
    # Registries
    "DerivedGuardCache",
    "KindRegistry",
    "get_kind_registry",
    # Helpers
    "assert_return",
    "assert_valid",
    "coercer",
    "converter",
    "creator",
    "deep_equal",
    "get_type",
    "inspect_guard",
    "is_valid",
    "scanner",
    "substitute",
    "try_assert_return",
    "validator",
    # Errors
    "GuardError",
    "GuardAssertionError",
    "InvalidGuardError",
    "InvalidLiteralError",
    "UnknownKindError",
]
