# kindguard/core/errors.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
from enum import Enum
from typing import Any, Iterable, Tuple

from kindguard.interfaces.types import Invalidation, TypeInvalidation
from kindguard.runtime.paths import path_literal


class GuardError(Exception):
    """
    Base exception class for errors raised by guards and guard construction.
    """


class UnknownKindError(GuardError, ValueError):
    """
    Raised when a kind name outside the closed kind set is requested.
    """


class InvalidLiteralError(GuardError, TypeError):
    """
    Raised when excluding or extracting a value the guard does not accept.
    """


class InvalidGuardError(GuardError, TypeError):
    """
    Raised when an object that does not implement the guard protocol is used
    as a guard.
    """


def _escape_value(value: Any) -> str:
    if isinstance(value, Enum) and isinstance(value, str):
        return f'"{value.value}"'
    if isinstance(value, str):
        return f'"{value}"'
    if isinstance(value, (list, tuple)):
        return f"[{', '.join(_escape_value(item) for item in value)}]"
    return str(value)


def _sort_key(invalidation: Invalidation) -> Tuple[int, bool]:
    # Deepest path first, then logical rules ahead of type rules.
    return -len(invalidation.path), isinstance(invalidation, TypeInvalidation)


def _render(invalidation: Invalidation) -> str:
    path = path_literal(invalidation.path)

    if isinstance(invalidation, TypeInvalidation):
        setting = invalidation.setting
        if len(setting) == 1:
            expected = _escape_value(setting[0])
        else:
            expected = f"{', '.join(_escape_value(item) for item in setting[:-1])} or {_escape_value(setting[-1])}"
        return f'{path} - expected "type" to be {expected}, but received {_escape_value(invalidation.actual)}'

    if invalidation.setting is None or invalidation.setting is True:
        return f'{path} - expected to be "{invalidation.function}", but received {_escape_value(invalidation.actual)}'

    return (
        f'{path} - expected to be "{invalidation.function}" {_escape_value(invalidation.setting)}, '
        f"but received {_escape_value(invalidation.actual)}"
    )


class GuardAssertionError(GuardError):
    """
    Raised by ``convert``, ``scan`` and the assertion helpers when a value is
    not accepted by a guard.

    The message describes the most specific invalidation; all of them are
    available on ``invalidations``, deepest path first.
    """

    def __init__(self, invalidations: Iterable[Invalidation]) -> None:
        ordered = tuple(sorted(invalidations, key=_sort_key))
        if not ordered:
            raise ValueError("GuardAssertionError must have at least one invalidation")
        super().__init__(_render(ordered[0]))
        self.invalidations: Tuple[Invalidation, ...] = ordered
