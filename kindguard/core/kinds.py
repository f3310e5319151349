# kindguard/core/kinds.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Tuple

from kindguard.core.errors import UnknownKindError
from kindguard.core.guard import Guard, get_type
from kindguard.interfaces.types import Invalidation, Kind, KindNames, Path, TypeInvalidation
from kindguard.runtime.concurrency import get_lock, with_lock

logger = logging.getLogger(__name__)


def _to_kind(name: Any) -> Kind:
    try:
        return Kind(name)
    except ValueError:
        raise UnknownKindError(f"Unknown kind: {name!r}") from None


def canonical_kinds(names: KindNames) -> Tuple[Kind, ...]:
    """
    Reduce a kind name or collection of kind names to its canonical form.

    ``any`` absorbs everything, then ``unknown`` absorbs everything else;
    ``never`` and duplicates are dropped and the rest sorted. An empty result
    is ``(never,)``.
    """
    if isinstance(names, str):
        kinds = {_to_kind(names)}
    else:
        kinds = {_to_kind(name) for name in names}

    if Kind.ANY in kinds:
        return (Kind.ANY,)
    if Kind.UNKNOWN in kinds:
        return (Kind.UNKNOWN,)

    kinds.discard(Kind.NEVER)
    if not kinds:
        return (Kind.NEVER,)
    return tuple(sorted(kinds, key=lambda kind: kind.value))


class KindGuard(Guard):
    """
    Guard accepting every value whose classified kind is in a fixed set.

    Instances are canonical: build them through ``kind()`` so equal kind sets
    share one instance.
    """

    def __init__(self, kinds: Tuple[Kind, ...]) -> None:
        super().__init__("type", kinds, (kinds,))
        self._members: FrozenSet[Kind] = frozenset(kinds)
        if len(kinds) == 1:
            only = kinds[0]
            if only in (Kind.ANY, Kind.UNKNOWN):
                self._match = lambda value: True
            elif only is Kind.NEVER:
                self._match = lambda value: False
            else:
                self._match = lambda value: get_type(value) is only
        else:
            self._match = lambda value: get_type(value) in self._members

    def accept(self, value: Any) -> bool:
        return self._match(value)

    def validate(self, value: Any, path: Path = (), invalidations: Optional[List[Invalidation]] = None) -> bool:
        if self._match(value):
            return True
        if invalidations is not None:
            invalidations.append(TypeInvalidation(path=path, setting=self.type, actual=get_type(value)))
        return False

    def equals(self, other: Any) -> bool:
        if self is other:
            return True
        return isinstance(other, KindGuard) and other.type == self.type


class KindRegistry:
    """
    Process-wide table of canonical kind guards, keyed by the joined
    canonical kind set.

    Entries are created lazily and never evicted. Reads are lock-free; a miss
    takes the lock and re-checks before inserting, so concurrent callers
    always receive the same instance.
    """

    def __init__(self) -> None:
        self._guards: Dict[str, KindGuard] = {}
        self._lock = get_lock()

    def get(self, names: KindNames) -> KindGuard:
        """
        Return the canonical guard for ``names``, creating it on first use.

        :raises UnknownKindError: If a name is not a known kind.
        """
        kinds = canonical_kinds(names)
        key = "|".join(kind.value for kind in kinds)

        existing = self._guards.get(key)
        if existing is not None:
            return existing

        with with_lock(self._lock):
            existing = self._guards.get(key)
            if existing is not None:
                return existing
            guard = KindGuard(kinds)
            self._guards[key] = guard
            logger.debug("Registered kind guard '%s'", key)
            return guard

    def __contains__(self, names: KindNames) -> bool:
        key = "|".join(kind.value for kind in canonical_kinds(names))
        return key in self._guards

    def __len__(self) -> int:
        return len(self._guards)

    def keys(self) -> List[str]:
        """Snapshot of the registered keys."""
        return list(self._guards)


_REGISTRY = KindRegistry()


def get_kind_registry() -> KindRegistry:
    """Return the process-wide kind registry."""
    return _REGISTRY


def kind(names: KindNames) -> KindGuard:
    """
    Canonical guard for one kind or a collection of kinds.

    Two calls over the same canonical set return the same instance.
    """
    return _REGISTRY.get(names)


def kind_set(guards: Iterable[Guard]) -> Tuple[Kind, ...]:
    """
    Kinds covered by ``guards`` in first-appearance order, without ``never``.
    """
    kinds: List[Kind] = []
    for guard in guards:
        for member_kind in guard.type:
            if member_kind != Kind.NEVER and member_kind not in kinds:
                kinds.append(member_kind)
    return tuple(kinds)
