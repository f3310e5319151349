# kindguard/core/union.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import dataclasses
import logging
from collections import OrderedDict
from typing import Any, Iterable, Iterator, List, Optional, Set, Tuple

from kindguard.core.errors import GuardAssertionError, InvalidGuardError
from kindguard.core.guard import Guard, get_type
from kindguard.core.kinds import KindGuard, kind, kind_set
from kindguard.core.literal import LiteralGuard
from kindguard.core.primitives import any_, never, unknown
from kindguard.interfaces.abc import GuardContract
from kindguard.interfaces.types import (
    DEFAULT_UNION_OPTIONS,
    CoerceResult,
    Inspecter,
    Invalidation,
    Kind,
    Path,
    Replacer,
    TypeInvalidation,
    UnionOptions,
)
from kindguard.runtime.concurrency import InFlightTracker, get_lock, with_lock

logger = logging.getLogger(__name__)


class _CoercionCache:
    """
    Bounded identity-keyed memo of coercion results for object inputs.

    Entries hold a strong reference to their input so an identity is never
    reused while its entry is alive. Mappings and lists cannot be weakly
    referenced, so up to ``size`` inputs stay reachable until evicted, least
    recently used first; a size of 0 disables the memo and retains nothing.
    Not synchronized, callers hold the owning union's lock.
    """

    def __init__(self, size: int) -> None:
        self._size = size
        self._entries: "OrderedDict[int, Tuple[object, CoerceResult]]" = OrderedDict()

    def get(self, obj: object) -> Optional[CoerceResult]:
        entry = self._entries.get(id(obj))
        if entry is None or entry[0] is not obj:
            return None
        self._entries.move_to_end(id(obj))
        return entry[1]

    def put(self, obj: object, result: CoerceResult) -> None:
        if self._size == 0:
            return
        self._entries[id(obj)] = (obj, result)
        self._entries.move_to_end(id(obj))
        while len(self._entries) > self._size:
            self._entries.popitem(last=False)

    def __len__(self) -> int:
        return len(self._entries)


def _never_coerces(member: Any) -> bool:
    return getattr(type(member), "coerce", None) is Guard.coerce


class UnionGuard(Guard):
    """
    Guard accepting any value one of its members accepts.

    Build instances through ``union()``, which keeps the member list minimal.
    Each instance owns a coercion memo and an in-flight tracker; neither is
    shared with other unions. The memo keeps up to ``coerce_cache_size``
    object inputs alive, set it to 0 for unions that see large payloads.

    Threading/Concurrency Guarantees:
    - Coercion state is mutated under the instance lock
    - Cycle tracking is per thread, so concurrent validations never interfere
    """

    def __init__(self, members: Tuple[Guard, ...], kinds: Tuple[Kind, ...], options: UnionOptions) -> None:
        super().__init__("union", kinds, (members,))
        self._members = members
        self._options = options
        self._coerce_members: Tuple[Guard, ...] = members
        self._coerce_cache = _CoercionCache(options.coerce_cache_size)
        self._lock = get_lock()
        self._in_flight = InFlightTracker()

    @property
    def members(self) -> Tuple[Guard, ...]:
        return self._members

    @property
    def options(self) -> UnionOptions:
        return self._options

    def accept(self, value: Any) -> bool:
        if get_type(value) is Kind.OBJECT:
            if value in self._in_flight:
                return True
            with self._in_flight.track(value):
                return any(member.accept(value) for member in self._members)
        return any(member.accept(value) for member in self._members)

    def coerce(self, value: Any, path: Path) -> CoerceResult:
        with with_lock(self._lock):
            candidates = self._coerce_members

        if not candidates:
            return CoerceResult(skip_coerce=True, value=value)

        is_object = get_type(value) is Kind.OBJECT
        if is_object:
            with with_lock(self._lock):
                cached = self._coerce_cache.get(value)
            if cached is not None:
                return cached

        result = CoerceResult(skip_coerce=True, value=value)
        inert: List[Guard] = []
        for member in candidates:
            outcome = member.coerce(value, path)
            if not outcome.skip_coerce:
                if result.skip_coerce:
                    result = CoerceResult(skip_coerce=False, value=outcome.value)
            elif _never_coerces(member):
                inert.append(member)

        with with_lock(self._lock):
            if inert:
                self._coerce_members = tuple(m for m in self._coerce_members if all(m is not i for i in inert))
                logger.debug("Pruned %d non-coercing members from %s", len(inert), self)
            if is_object:
                self._coerce_cache.put(value, result)

        return result

    def convert(self, value, context, path, converter, options=None):
        for member in self._members:
            if member.accept(value):
                return member.convert(value, context, path, converter, options)
        raise GuardAssertionError(self._collect(value, path))

    def scan(self, value, context, path, scanner, options=None):
        for member in self._members:
            if member.accept(value):
                member.scan(value, context, path, scanner, options)
                return
        raise GuardAssertionError(self._collect(value, path))

    def _collect(self, value: Any, path: Path) -> List[Invalidation]:
        invalidations: List[Invalidation] = []
        self.validate(value, path, invalidations)
        return invalidations

    def validate(self, value: Any, path: Path = (), invalidations: Optional[List[Invalidation]] = None) -> bool:
        if invalidations is None:
            invalidations = []

        value_kind = get_type(value)
        if value_kind is not Kind.OBJECT:
            return self._validate_members(value, value_kind, path, invalidations)

        # Already being validated by this union further up the stack.
        if value in self._in_flight:
            return True
        with self._in_flight.track(value):
            return self._validate_members(value, value_kind, path, invalidations)

    def _validate_members(self, value: Any, value_kind: Kind, path: Path, invalidations: List[Invalidation]) -> bool:
        if any(member.accept(value) for member in self._members):
            return True

        if value_kind not in self.type:
            invalidations.append(TypeInvalidation(path=path, setting=self.type, actual=value_kind))
            return False

        limit = self._options.max_invalidations
        collected: List[Invalidation] = []
        for member in self._members:
            if value_kind in member.type:
                member.validate(value, path, collected)
                if len(collected) > limit:
                    break

        invalidations.extend(collected[:limit])
        return False

    def equals(self, other: Any) -> bool:
        if self is other:
            return True
        if not isinstance(other, UnionGuard):
            return False
        theirs = other.members
        return all(any(o.equals(m) for o in theirs) for m in self._members) and all(
            any(m.equals(o) for m in self._members) for o in theirs
        )

    def substitute(self, path: Path, replacer: Replacer) -> Guard:
        replacement = replacer(path, self)
        if replacement is not self:
            return replacement.substitute(path, replacer)
        return union([member.substitute(path, replacer) for member in self._members], self._options)

    def inspect(self, path: Path, inspecter: Inspecter) -> Iterator[Any]:
        for member in self._members:
            yield from member.inspect(path, inspecter)

    def __str__(self) -> str:
        return f"({' | '.join(f'({member})' for member in self._members)})"


def _merge_boolean_literal(member: LiteralGuard, output: List[Guard]) -> bool:
    inverted = not member.value
    for index, existing in enumerate(output):
        if isinstance(existing, LiteralGuard) and existing.value is inverted:
            output[index] = kind(Kind.BOOLEAN)
            return True
    return False


def _compact(output: List[Guard]) -> None:
    # Fold kind guards into one, scanning from the end, then drop any other
    # member whose kinds the folded guard already covers.
    whole: Set[Kind] = set()
    last_index = -1
    for index in range(len(output) - 1, -1, -1):
        member = output[index]
        if not isinstance(member, KindGuard):
            continue
        if whole:
            del output[last_index]
            whole.update(member.type)
            output[index] = kind(whole)
        else:
            whole.update(member.type)
        last_index = index

    for index in range(len(output) - 1, -1, -1):
        member = output[index]
        if not isinstance(member, KindGuard) and all(member_kind in whole for member_kind in member.type):
            del output[index]


def _unfold_distinct_members(members: Iterable[Guard], output: List[Guard]) -> None:
    for member in members:
        if isinstance(member, UnionGuard):
            _unfold_distinct_members(member.members, output)
        elif isinstance(member, KindGuard) and member.type == (Kind.NEVER,):
            continue
        elif not any(existing.equals(member) for existing in output):
            merged = (
                bool(output)
                and isinstance(member, LiteralGuard)
                and isinstance(member.value, bool)
                and _merge_boolean_literal(member, output)
            )
            if not merged:
                output.append(member)
        _compact(output)


def union(members: Iterable[Guard], options: Optional[UnionOptions] = None, **overrides: Any) -> Guard:
    """
    Guard accepting any value accepted by one of ``members``.

    Unless ``skip_compaction`` is set, nested unions are flattened, equal
    members de-duplicated, ``literal(True) | literal(False)`` folded into
    ``boolean``, kind guards merged and members covered by them dropped. A
    single surviving member is returned as is; ``any``, ``unknown`` and
    ``never`` absorb as their kinds dictate.

    :param members: Member guards, in priority order for ``convert``/``scan``.
    :param options: Base options, ``DEFAULT_UNION_OPTIONS`` when omitted.
    :param overrides: Individual ``UnionOptions`` fields to override.
    :raises InvalidGuardError: If a member does not implement the guard protocol.
    """
    settings = options if options is not None else DEFAULT_UNION_OPTIONS
    if overrides:
        settings = dataclasses.replace(settings, **overrides)

    members = list(members)
    for member in members:
        if not isinstance(member, GuardContract):
            raise InvalidGuardError(f"Union member {member!r} does not implement the guard protocol")

    if not members:
        return never()
    if len(members) == 1:
        return members[0]

    if settings.skip_compaction:
        distinct = list(members)
    else:
        distinct = []
        _unfold_distinct_members(members, distinct)

    if len(distinct) == 1:
        logger.debug("Union of %d members collapsed to %s", len(members), distinct[0])
        return distinct[0]

    kinds = kind_set(distinct)
    if not kinds:
        return never()
    if Kind.ANY in kinds:
        return any_()
    if Kind.UNKNOWN in kinds:
        return unknown()

    return UnionGuard(tuple(distinct), kinds, settings)
