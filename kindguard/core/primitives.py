# kindguard/core/primitives.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

"""Fixed guards over single kinds."""

from kindguard.core.kinds import KindGuard, kind
from kindguard.interfaces.types import Kind

_BOOLEAN = kind(Kind.BOOLEAN)


def never() -> KindGuard:
    """Guard accepting nothing."""
    return kind(Kind.NEVER)


def unknown() -> KindGuard:
    """Guard accepting everything, keeping no member detail."""
    return kind(Kind.UNKNOWN)


def any_() -> KindGuard:
    """Guard accepting everything; absorbs every other guard in a union."""
    return kind(Kind.ANY)


def boolean() -> KindGuard:
    return _BOOLEAN


def number() -> KindGuard:
    return kind(Kind.NUMBER)


def bigint() -> KindGuard:
    return kind(Kind.BIGINT)


def string() -> KindGuard:
    return kind(Kind.STRING)


def symbol() -> KindGuard:
    return kind(Kind.SYMBOL)
