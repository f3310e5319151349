# kindguard/core/guard.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from collections.abc import Mapping, Set as AbstractSet
from enum import Enum
from typing import Any, Collection, Iterable, Iterator, List, Optional, Sequence, Set, Tuple

from kindguard.core.errors import GuardAssertionError, InvalidLiteralError
from kindguard.interfaces.types import (
    UNDEFINED,
    CoerceResult,
    Converter,
    Inspecter,
    Invalidation,
    Kind,
    LogicalInvalidation,
    Path,
    Replacer,
    Scanner,
    TraversalOptions,
)

MAX_SAFE_INTEGER = 2**53 - 1

# Kinds whose members only ever compare equal to values of the same kind.
_EXACT_KEY_KINDS = frozenset((Kind.STRING, Kind.NULL, Kind.UNDEFINED))
_MISSING = object()


def get_type(value: Any) -> Kind:
    """
    Classify a value into its kind tag.

    This is the single source of truth for kind decisions; every guard
    prefilters on it. Never returns a pseudo-kind.
    """
    if value is None:
        return Kind.NULL
    if value is UNDEFINED:
        return Kind.UNDEFINED
    if isinstance(value, Enum):
        return Kind.SYMBOL
    if isinstance(value, bool):
        return Kind.BOOLEAN
    if isinstance(value, int):
        return Kind.NUMBER if -MAX_SAFE_INTEGER <= value <= MAX_SAFE_INTEGER else Kind.BIGINT
    if isinstance(value, float):
        return Kind.NUMBER
    if isinstance(value, str):
        return Kind.STRING
    if callable(value):
        return Kind.FUNCTION
    return Kind.OBJECT


def deep_equal(left: Any, right: Any) -> bool:
    """
    Structural equality that never equates values of different kinds, so
    ``True`` does not equal ``1`` at any depth, mapping keys and set
    elements included. Self-referencing containers compare without
    recursing forever.
    """
    return _deep_equal(left, right, set())


def _deep_equal(left: Any, right: Any, seen: Set[Tuple[int, int]]) -> bool:
    if left is right:
        return True

    left_kind = get_type(left)
    if left_kind is not get_type(right):
        return False
    if left_kind is not Kind.OBJECT:
        if left_kind in (Kind.FUNCTION, Kind.SYMBOL):
            return False
        return bool(left == right)

    if left.__class__ is not right.__class__:
        return False

    # A pair already under comparison is assumed equal; any difference
    # shows up on the path that entered it.
    pair = (id(left), id(right))
    if pair in seen:
        return True
    seen.add(pair)
    try:
        if isinstance(left, Mapping):
            return _mappings_equal(left, right, seen)
        if isinstance(left, (list, tuple)):
            return len(left) == len(right) and all(_deep_equal(a, b, seen) for a, b in zip(left, right))
        if isinstance(left, AbstractSet):
            return len(left) == len(right) and _covers(left, right, seen) and _covers(right, left, seen)
        return bool(left == right)
    finally:
        seen.discard(pair)


def _matching_key(key: Any, keys: Collection[Any], seen: Set[Tuple[int, int]]) -> Any:
    key_kind = get_type(key)
    if key_kind in _EXACT_KEY_KINDS:
        return key if key in keys else _MISSING
    for candidate in keys:
        if get_type(candidate) is key_kind and _deep_equal(key, candidate, seen):
            return candidate
    return _MISSING


def _mappings_equal(left: Mapping, right: Mapping, seen: Set[Tuple[int, int]]) -> bool:
    if len(left) != len(right):
        return False
    for key, item in left.items():
        match = _matching_key(key, right.keys(), seen)
        if match is _MISSING or not _deep_equal(item, right[match], seen):
            return False
    return True


def _covers(left: AbstractSet, right: AbstractSet, seen: Set[Tuple[int, int]]) -> bool:
    return all(_matching_key(element, right, seen) is not _MISSING for element in left)


class Guard:
    """
    Base class for every guard.

    A guard is an immutable, identity-significant descriptor of a set of
    values. The base implementation accepts everything and performs no
    coercion; variants override the behaviour they specialise. Python
    ``==`` and ``hash`` stay identity-based so guards can key weak caches,
    structural comparison is ``equals``.

    Runtime Invariants:
    - ``name``, ``type`` and ``arguments`` never change after construction
    - ``accept(value)`` agrees with ``validate`` recording no invalidations
    - ``equals`` is symmetric
    """

    def __init__(self, name: str, kinds: Sequence[Kind], arguments: Sequence[Any] = ()) -> None:
        """
        :param name: Discriminator tag, e.g. ``type``, ``literal``, ``union``.
        :param kinds: Kinds this guard can possibly accept, used for prefiltering.
        :param arguments: Constructor inputs, kept for introspection and re-derivation.
        """
        self._name = name
        self._type: Tuple[Kind, ...] = tuple(kinds)
        self._arguments: Tuple[Any, ...] = tuple(arguments)

    @property
    def name(self) -> str:
        return self._name

    @property
    def type(self) -> Tuple[Kind, ...]:
        return self._type

    @property
    def arguments(self) -> Tuple[Any, ...]:
        return self._arguments

    def accept(self, value: Any) -> bool:
        return True

    def validate(self, value: Any, path: Path = (), invalidations: Optional[List[Invalidation]] = None) -> bool:
        """
        Append the reasons ``value`` fails this guard to ``invalidations``.

        :return: True if the value is valid.
        """
        return True

    def coerce(self, value: Any, path: Path) -> CoerceResult:
        return CoerceResult(skip_coerce=True, value=value)

    def convert(
        self,
        value: Any,
        context: Any,
        path: Path,
        converter: Converter,
        options: Optional[TraversalOptions] = None,
    ) -> Any:
        return converter(value, path, self, context)

    def scan(
        self,
        value: Any,
        context: Any,
        path: Path,
        scanner: Scanner,
        options: Optional[TraversalOptions] = None,
    ) -> None:
        if options is not None and options.max_path_length is not None and len(path) > options.max_path_length:
            return
        scanner(value, path, self, context)

    def substitute(self, path: Path, replacer: Replacer) -> Guard:
        return replacer(path, self)

    def inspect(self, path: Path, inspecter: Inspecter) -> Iterator[Any]:
        """
        Lazily yield what ``inspecter`` produces for every reachable guard,
        depth first. Each call starts a fresh traversal.
        """
        return iter(inspecter(path, self))

    def equals(self, other: Any) -> bool:
        return self is other

    def exclude(self, values: Iterable[Any]) -> Guard:
        """
        Derive a guard accepting what this guard accepts, except ``values``.

        :raises InvalidLiteralError: If any value is not accepted by this guard.
        """
        values = tuple(values)
        if not values:
            return self
        for value in values:
            if not self.accept(value):
                raise InvalidLiteralError(f"Value {value!r} is not valid and cannot be excluded")
        return ExcludeGuard(self, values)

    def extract(self, values: Iterable[Any]) -> Guard:
        """
        Derive a guard accepting exactly ``values``.

        :raises InvalidLiteralError: If any value is not accepted by this guard.
        """
        from kindguard.core.modifiers import enums

        values = tuple(values)
        for value in values:
            if not self.accept(value):
                raise InvalidLiteralError(f"Value {value!r} is not valid and cannot be extracted")
        return enums(values)

    def __str__(self) -> str:
        return " | ".join(kind.value for kind in self._type)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self}>"


class ExcludeGuard(Guard):
    """
    Wraps a guard and rejects a fixed list of values it would otherwise
    accept.
    """

    def __init__(self, base: Guard, values: Tuple[Any, ...]) -> None:
        super().__init__("exclude", base.type, (base, values))
        self._base = base
        self._values = values

    def _is_excluded(self, value: Any) -> bool:
        return any(deep_equal(excluded, value) for excluded in self._values)

    def _excluded_invalidation(self, value: Any, path: Path) -> LogicalInvalidation:
        return LogicalInvalidation(
            guard=self._base.name, path=path, function="notEquals", setting=value, actual=value
        )

    def accept(self, value: Any) -> bool:
        return self._base.accept(value) and not self._is_excluded(value)

    def validate(self, value: Any, path: Path = (), invalidations: Optional[List[Invalidation]] = None) -> bool:
        if invalidations is None:
            invalidations = []
        if not self._base.validate(value, path, invalidations):
            return False
        if self._is_excluded(value):
            invalidations.append(self._excluded_invalidation(value, path))
            return False
        return True

    def coerce(self, value: Any, path: Path) -> CoerceResult:
        return self._base.coerce(value, path)

    def convert(self, value, context, path, converter, options=None):
        if self._is_excluded(value):
            raise GuardAssertionError([self._excluded_invalidation(value, path)])
        return self._base.convert(value, context, path, converter, options)

    def scan(self, value, context, path, scanner, options=None):
        if self._is_excluded(value):
            raise GuardAssertionError([self._excluded_invalidation(value, path)])
        self._base.scan(value, context, path, scanner, options)

    def substitute(self, path: Path, replacer: Replacer) -> Guard:
        return self._base.substitute(path, replacer)

    def inspect(self, path: Path, inspecter: Inspecter) -> Iterator[Any]:
        return self._base.inspect(path, inspecter)

    def equals(self, other: Any) -> bool:
        if self is other:
            return True
        if not isinstance(other, ExcludeGuard) or other._base is not self._base:
            return False
        return all(any(deep_equal(mine, theirs) for theirs in other._values) for mine in self._values) and all(
            any(deep_equal(theirs, mine) for mine in self._values) for theirs in other._values
        )

    def __str__(self) -> str:
        return f"{self._base} (excluding {', '.join(repr(value) for value in self._values)})"
