# kindguard/interfaces/abc.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
from typing import Any, Iterable, Iterator, List, Optional, Protocol, Tuple, runtime_checkable

from kindguard.interfaces.types import (
    CoerceResult,
    Converter,
    Inspecter,
    Invalidation,
    Kind,
    Path,
    Replacer,
    Scanner,
    TraversalOptions,
)


@runtime_checkable
class GuardContract(Protocol):
    """
    Minimal contract a guard must honour to take part in compound guards,
    including guards defined outside this package (object and array shapes,
    parameterized leaves). Unions only ever call these members.

    Runtime Invariants:
    - Guards are immutable after construction
    - ``accept(value)`` is True iff ``validate`` records no invalidations
    - ``equals`` is symmetric; identity always implies equality
    - ``type`` lists every kind the guard can possibly accept
    """

    @property
    def name(self) -> str: ...

    @property
    def type(self) -> Tuple[Kind, ...]: ...

    @property
    def arguments(self) -> Tuple[Any, ...]: ...

    def accept(self, value: Any) -> bool: ...

    def validate(self, value: Any, path: Path = (), invalidations: Optional[List[Invalidation]] = None) -> bool: ...

    def coerce(self, value: Any, path: Path) -> CoerceResult: ...

    def convert(
        self,
        value: Any,
        context: Any,
        path: Path,
        converter: Converter,
        options: Optional[TraversalOptions] = None,
    ) -> Any: ...

    def scan(
        self,
        value: Any,
        context: Any,
        path: Path,
        scanner: Scanner,
        options: Optional[TraversalOptions] = None,
    ) -> None: ...

    def substitute(self, path: Path, replacer: Replacer) -> "GuardContract": ...

    def inspect(self, path: Path, inspecter: Inspecter) -> Iterator[Any]: ...

    def equals(self, other: Any) -> bool: ...


@runtime_checkable
class AbstractGuard(GuardContract, Protocol):
    """Full guard surface: the contract plus the value-set refinements every ``Guard`` offers."""

    def exclude(self, values: Iterable[Any]) -> "AbstractGuard": ...

    def extract(self, values: Iterable[Any]) -> "AbstractGuard": ...
