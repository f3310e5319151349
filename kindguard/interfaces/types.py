# kindguard/interfaces/types.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Iterable, NamedTuple, Optional, Tuple, Union

if TYPE_CHECKING:
    from kindguard.interfaces.abc import AbstractGuard


class Kind(str, Enum):
    """
    Closed set of kind tags produced by the value classifier, plus the three
    pseudo-kinds ``never``, ``unknown`` and ``any``.

    Members compare equal to their string values, so a kind set can be checked
    against a plain tuple of strings.
    """

    ANY = "any"
    BIGINT = "bigint"
    BOOLEAN = "boolean"
    FUNCTION = "function"
    NEVER = "never"
    NULL = "null"
    NUMBER = "number"
    OBJECT = "object"
    STRING = "string"
    SYMBOL = "symbol"
    UNDEFINED = "undefined"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value


class _Undefined(Enum):
    UNDEFINED = "undefined"

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False


# Marker for an absent value; distinct from None, which classifies as null.
UNDEFINED = _Undefined.UNDEFINED

PathKey = Union[int, str, Enum]
Path = Tuple[PathKey, ...]
KindNames = Union[Kind, str, Iterable[Union[Kind, str]]]


class CoerceResult(NamedTuple):
    skip_coerce: bool
    value: Any


@dataclass(frozen=True)
class TypeInvalidation:
    """
    The classified kind of a value is outside the expected kind set.

    Attributes:
        path: Keys leading from the validation root to the value
        setting: Expected kind set
        actual: Kind the value classified as
    """

    path: Path
    setting: Tuple[Kind, ...]
    actual: Kind
    rule: str = field(default="type", init=False)


@dataclass(frozen=True)
class LogicalInvalidation:
    """
    The value has an acceptable kind but failed a guard's predicate.

    Attributes:
        guard: Name of the guard whose predicate failed
        path: Keys leading from the validation root to the value
        function: Predicate that failed (``equals``, ``notEquals``, ...)
        setting: Expected value or predicate parameter
        actual: The offending value
    """

    guard: str
    path: Path
    function: str
    setting: Any
    actual: Any
    rule: str = field(default="logical", init=False)


Invalidation = Union[TypeInvalidation, LogicalInvalidation]


@dataclass(frozen=True)
class TraversalOptions:
    """
    Options consumed by ``convert`` and ``scan``.

    Attributes:
        should_continue: Return False to stop descending below ``path``
        max_path_length: Scanning stops for paths longer than this
    """

    should_continue: Optional[Callable[[Path, "AbstractGuard"], bool]] = None
    max_path_length: Optional[int] = None


@dataclass(frozen=True)
class UnionOptions:
    """
    Construction options for union guards.

    Attributes:
        skip_compaction: Keep members verbatim; no unfolding, de-duplication or absorption
        max_invalidations: Upper bound on member invalidations merged by ``validate``
        coerce_cache_size: Number of object inputs whose coercion result is memoized;
            memoized inputs stay referenced until evicted, 0 disables the memo
    """

    skip_compaction: bool = False
    max_invalidations: int = 100
    coerce_cache_size: int = 1024

    def __post_init__(self) -> None:
        if self.max_invalidations < 1:
            raise ValueError(f"max_invalidations must be positive, got {self.max_invalidations}")
        if self.coerce_cache_size < 0:
            raise ValueError(f"coerce_cache_size must not be negative, got {self.coerce_cache_size}")


DEFAULT_UNION_OPTIONS = UnionOptions()

# Callback Types
Converter = Callable[[Any, Path, "AbstractGuard", Any], Any]
Scanner = Callable[[Any, Path, "AbstractGuard", Any], None]
Replacer = Callable[[Path, "AbstractGuard"], "AbstractGuard"]
Inspecter = Callable[[Path, "AbstractGuard"], Iterable[Any]]
