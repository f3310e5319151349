# kindguard/runtime/concurrency.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator, Set


class _LockFactory:
    """
    Internal factory for the locks guarding process-wide registries and
    per-union mutable state.
    """

    def create_lock(self) -> threading.Lock:
        """
        Return a new lock instance.
        """
        return threading.Lock()

    def create_local(self) -> threading.local:
        """
        Return a new thread-local namespace.
        """
        return threading.local()


_FACTORY = _LockFactory()


def get_lock() -> threading.Lock:
    """
    Provide a new lock instance to be used for synchronization.
    """
    return _FACTORY.create_lock()


@contextmanager
def with_lock(lock: threading.Lock) -> Iterator[None]:
    """
    Acquire the given lock upon entry and release it upon exit, even when the
    block raises.
    """
    lock.acquire()
    try:
        yield
    finally:
        lock.release()


class InFlightTracker:
    """
    Per-thread set of object identities currently being validated.

    Each thread sees its own set, so two threads validating the same object
    never mistake each other's work for a cycle. Identities are only held for
    the duration of a call, while the object is guaranteed to be alive.
    """

    def __init__(self) -> None:
        self._local = _FACTORY.create_local()

    def _objects(self) -> Set[int]:
        objects = getattr(self._local, "objects", None)
        if objects is None:
            objects = set()
            self._local.objects = objects
        return objects

    def __contains__(self, obj: object) -> bool:
        return id(obj) in self._objects()

    def __len__(self) -> int:
        return len(self._objects())

    @contextmanager
    def track(self, obj: object) -> Iterator[None]:
        """
        Mark ``obj`` as in flight for the duration of the block.
        """
        objects = self._objects()
        objects.add(id(obj))
        try:
            yield
        finally:
            objects.discard(id(obj))
