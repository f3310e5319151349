# kindguard/core/modifiers.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
import weakref
from typing import Any, Iterable, List, Optional

from kindguard.core.guard import Guard
from kindguard.core.kinds import KindGuard, kind
from kindguard.core.literal import literal
from kindguard.core.primitives import never
from kindguard.core.union import UnionGuard, union
from kindguard.interfaces.types import UNDEFINED, Kind
from kindguard.runtime.concurrency import get_lock, with_lock

logger = logging.getLogger(__name__)

_NULLISH = frozenset((Kind.NULL, Kind.UNDEFINED))


class DerivedGuardCache:
    """
    Weak side table from an input guard to the guard derived from it.

    Both sides are held weakly: a derived guard usually references its input,
    so a strong value would keep the key alive forever. An entry stays valid
    for as long as anyone holds the derived guard, which is as long as its
    identity can be observed. Entries can be dropped explicitly with
    ``discard``.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._entries: "weakref.WeakKeyDictionary[Guard, weakref.ReferenceType[Guard]]" = weakref.WeakKeyDictionary()
        self._lock = get_lock()

    def _lookup(self, guard: Guard) -> Optional[Guard]:
        ref = self._entries.get(guard)
        return ref() if ref is not None else None

    def get(self, guard: Guard) -> Optional[Guard]:
        with with_lock(self._lock):
            return self._lookup(guard)

    def put(self, guard: Guard, derived: Guard) -> Guard:
        """
        Store ``derived`` unless another thread got there first; return the
        entry that won.
        """
        with with_lock(self._lock):
            existing = self._lookup(guard)
            if existing is not None:
                return existing
            self._entries[guard] = weakref.ref(derived)
            logger.debug("Cached %s of %s", self.name, guard)
            return derived

    def discard(self, guard: Guard) -> None:
        with with_lock(self._lock):
            self._entries.pop(guard, None)

    def __len__(self) -> int:
        with with_lock(self._lock):
            return sum(1 for ref in self._entries.values() if ref() is not None)


NULLABLE_CACHE = DerivedGuardCache("nullable")
OPTIONAL_CACHE = DerivedGuardCache("optional")
REQUIRED_CACHE = DerivedGuardCache("required")


def _with_kind(guard: Guard, extra: Kind, marker: Any, cache: DerivedGuardCache) -> Guard:
    existing = cache.get(guard)
    if existing is not None:
        return existing

    if guard.accept(marker):
        return guard

    if isinstance(guard, KindGuard):
        return kind([*guard.type, extra])

    if isinstance(guard, UnionGuard):
        # Prepend to the existing members so skip_compaction unions stay verbatim.
        return cache.put(guard, union([kind(extra), *guard.members], guard.options))

    return cache.put(guard, union([kind(extra), guard]))


def nullable(guard: Guard) -> Guard:
    """
    Guard accepting ``None`` as well as whatever ``guard`` accepts.

    Repeated calls with the same guard return the same instance, and
    ``nullable(nullable(g))`` is ``nullable(g)``.
    """
    return _with_kind(guard, Kind.NULL, None, NULLABLE_CACHE)


def optional(guard: Guard) -> Guard:
    """
    Guard accepting ``UNDEFINED`` as well as whatever ``guard`` accepts.
    """
    return _with_kind(guard, Kind.UNDEFINED, UNDEFINED, OPTIONAL_CACHE)


def required(guard: Guard) -> Guard:
    """
    Strip ``None`` and ``UNDEFINED`` from what ``guard`` accepts.

    Kind guards lose the two kinds; unions lose members that only describe
    them and are rebuilt. Any other guard is assumed to be required already
    and returned unchanged.
    """
    if isinstance(guard, KindGuard):
        return kind([member_kind for member_kind in guard.type if member_kind not in _NULLISH])

    if not isinstance(guard, UnionGuard):
        return guard

    existing = REQUIRED_CACHE.get(guard)
    if existing is not None:
        return existing

    members: List[Guard] = []
    changed = False
    for member in guard.members:
        if isinstance(member, KindGuard):
            stripped = required(member)
            changed = changed or stripped is not member
            if stripped is not never():
                members.append(stripped)
        elif _NULLISH.issuperset(member.type):
            changed = True
        else:
            members.append(member)

    if not changed:
        return guard
    return REQUIRED_CACHE.put(guard, union(members, guard.options))


def enums(values: Iterable[Any]) -> Guard:
    """
    Guard accepting exactly the listed values.
    """
    values = list(values)
    if not values:
        return never()
    if len(values) == 1:
        return literal(values[0])
    return union([literal(value) for value in values])
