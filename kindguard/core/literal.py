# kindguard/core/literal.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from typing import Any, List, Optional

from kindguard.core.guard import Guard, deep_equal, get_type
from kindguard.core.kinds import kind
from kindguard.interfaces.types import UNDEFINED, Invalidation, Kind, LogicalInvalidation, Path


class LiteralGuard(Guard):
    """
    Guard accepting exactly one value.

    Objects (mappings, sequences, instances) compare structurally, functions
    and symbols by identity, everything else by equality within the same kind.
    """

    def __init__(self, value: Any) -> None:
        value_kind = get_type(value)
        super().__init__("literal", (value_kind,), (value,))
        self._value = value
        self._kind = value_kind

    @property
    def value(self) -> Any:
        return self._value

    def _matches(self, value: Any) -> bool:
        if self._kind is Kind.OBJECT:
            return deep_equal(self._value, value)
        if self._kind in (Kind.FUNCTION, Kind.SYMBOL):
            return value is self._value
        return get_type(value) is self._kind and value == self._value

    def accept(self, value: Any) -> bool:
        return self._matches(value)

    def validate(self, value: Any, path: Path = (), invalidations: Optional[List[Invalidation]] = None) -> bool:
        if self._matches(value):
            return True
        if invalidations is not None:
            invalidations.append(
                LogicalInvalidation(guard="literal", path=path, function="equals", setting=self._value, actual=value)
            )
        return False

    def equals(self, other: Any) -> bool:
        if self is other:
            return True
        return isinstance(other, LiteralGuard) and self._matches(other.value) and other._matches(self._value)

    def __str__(self) -> str:
        return repr(self._value)


def literal(value: Any) -> Guard:
    """
    Guard for a single value.

    ``None`` and ``UNDEFINED`` map straight to their canonical kind guards.
    """
    if value is UNDEFINED:
        return kind(Kind.UNDEFINED)
    if value is None:
        return kind(Kind.NULL)
    return LiteralGuard(value)
