# kindguard/runtime/checks.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

"""
Caller-facing helpers that turn a guard into predicates, validators and
transformers at a program boundary.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterator, List, Optional, Tuple, Union

from kindguard.core.errors import GuardAssertionError
from kindguard.interfaces.abc import AbstractGuard
from kindguard.interfaces.types import Converter, Inspecter, Invalidation, Replacer, Scanner, TraversalOptions

logger = logging.getLogger(__name__)

ErrorSpec = Union[None, str, BaseException, Callable[[Tuple[Invalidation, ...]], BaseException]]


def _collect(guard: AbstractGuard, value: Any) -> List[Invalidation]:
    invalidations: List[Invalidation] = []
    guard.validate(value, (), invalidations)
    return invalidations


def assert_valid(guard: AbstractGuard, value: Any, error: ErrorSpec = None) -> None:
    """
    Raise if ``guard`` does not accept ``value``.

    :param guard: Guard to check against.
    :param value: Value to check.
    :param error: What to raise on failure: an exception instance, a message
        for a ``TypeError``, or a callable building an exception from the
        invalidations. Defaults to ``GuardAssertionError``.
    :raises GuardAssertionError: If the value is invalid and no ``error`` is given.
    """
    if guard.accept(value):
        return

    if isinstance(error, BaseException):
        raise error
    if isinstance(error, str):
        raise TypeError(error)
    if error is not None:
        raise error(tuple(_collect(guard, value)))

    failure = GuardAssertionError(_collect(guard, value))
    logger.debug("Assertion against %s failed: %s", guard, failure)
    raise failure


def assert_return(guard: AbstractGuard, value: Any, error: ErrorSpec = None) -> Any:
    """Assert ``value`` against ``guard`` and return it."""
    assert_valid(guard, value, error)
    return value


def try_assert_return(guard: AbstractGuard, value: Any, default: Any = None) -> Any:
    """Return ``value`` if ``guard`` accepts it, otherwise ``default``."""
    return value if is_valid(guard)(value) else default


def is_valid(guard: AbstractGuard) -> Callable[[Any], bool]:
    """Predicate form of ``guard.accept``."""
    return guard.accept


def validator(guard: AbstractGuard) -> Callable[[Any], Tuple[Invalidation, ...]]:
    """
    Build a function returning the invalidations of a value, empty when valid.
    """

    def validate(value: Any) -> Tuple[Invalidation, ...]:
        return tuple(_collect(guard, value))

    return validate


def coercer(guard: AbstractGuard) -> Callable[[Any], Any]:
    """
    Build a function applying ``guard``'s built-in coercion to a value.
    """

    def coerce(value: Any) -> Any:
        return guard.coerce(value, ()).value

    return coerce


def creator(guard: AbstractGuard) -> Callable[[Any], Any]:
    """
    Build a function that coerces a value and asserts the result.

    :raises GuardAssertionError: From the built function, when the coerced value is invalid.
    """
    coerce = coercer(guard)

    def create(value: Any) -> Any:
        return assert_return(guard, coerce(value))

    return create


def converter(
    guard: AbstractGuard,
    convert: Converter,
    options: Optional[TraversalOptions] = None,
) -> Callable[..., Any]:
    """
    Build a function converting every value ``guard`` recognises with ``convert``.

    The built function takes ``(value, context=None, skip_assertion=False)``.
    """

    def run(value: Any, context: Any = None, skip_assertion: bool = False) -> Any:
        if not skip_assertion:
            assert_valid(guard, value)
        return guard.convert(value, context, (), convert, options)

    return run


def scanner(
    guard: AbstractGuard,
    scan: Scanner,
    options: Optional[TraversalOptions] = None,
) -> Callable[..., None]:
    """
    Build a function visiting every value ``guard`` recognises with ``scan``.

    The built function takes ``(value, context=None, skip_assertion=False)``.
    """

    def run(value: Any, context: Any = None, skip_assertion: bool = False) -> None:
        if not skip_assertion:
            assert_valid(guard, value)
        guard.scan(value, context, (), scan, options)

    return run


def substitute(guard: AbstractGuard, replacer: Replacer) -> AbstractGuard:
    """Rebuild ``guard`` from the root, letting ``replacer`` swap any node."""
    return guard.substitute((), replacer)


def inspect_guard(guard: AbstractGuard, inspecter: Inspecter) -> Iterator[Any]:
    """Lazily walk ``guard`` from the root, yielding what ``inspecter`` produces."""
    return guard.inspect((), inspecter)
