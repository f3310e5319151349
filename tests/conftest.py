# tests/conftest.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from collections.abc import Mapping
from typing import Any, Dict, List, Optional

import pytest

from kindguard.core.guard import Guard, get_type
from kindguard.interfaces.types import (
    UNDEFINED,
    CoerceResult,
    Invalidation,
    Kind,
    LogicalInvalidation,
    Path,
    TypeInvalidation,
)

# -----------------------------------------------------------------------------
# COLLABORATOR GUARDS
# -----------------------------------------------------------------------------


class RoundingGuard(Guard):
    """Whole numbers only; coerces floats by rounding them."""

    def __init__(self) -> None:
        super().__init__("rounded", (Kind.NUMBER,))

    def accept(self, value: Any) -> bool:
        return get_type(value) is Kind.NUMBER and float(value).is_integer()

    def validate(self, value: Any, path: Path = (), invalidations: Optional[List[Invalidation]] = None) -> bool:
        if invalidations is None:
            invalidations = []
        value_kind = get_type(value)
        if value_kind is not Kind.NUMBER:
            invalidations.append(TypeInvalidation(path=path, setting=self.type, actual=value_kind))
            return False
        if not float(value).is_integer():
            invalidations.append(
                LogicalInvalidation(guard=self.name, path=path, function="integer", setting=None, actual=value)
            )
            return False
        return True

    def coerce(self, value: Any, path: Path) -> CoerceResult:
        if isinstance(value, float):
            return CoerceResult(skip_coerce=False, value=round(value))
        return CoerceResult(skip_coerce=True, value=value)


class TruncatingGuard(RoundingGuard):
    """Same values as RoundingGuard, but coerces by truncation."""

    def coerce(self, value: Any, path: Path) -> CoerceResult:
        if isinstance(value, float):
            return CoerceResult(skip_coerce=False, value=int(value))
        return CoerceResult(skip_coerce=True, value=value)


class RecordGuard(Guard):
    """
    Mapping with a fixed set of keyed fields. ``fields`` stays mutable so a
    field can refer back to the record itself.
    """

    def __init__(self, fields: Dict[str, Guard]) -> None:
        super().__init__("record", (Kind.OBJECT,))
        self.fields = dict(fields)

    def accept(self, value: Any) -> bool:
        return isinstance(value, Mapping) and all(
            guard.accept(value.get(key, UNDEFINED)) for key, guard in self.fields.items()
        )

    def validate(self, value: Any, path: Path = (), invalidations: Optional[List[Invalidation]] = None) -> bool:
        if invalidations is None:
            invalidations = []
        if not isinstance(value, Mapping):
            invalidations.append(TypeInvalidation(path=path, setting=self.type, actual=get_type(value)))
            return False
        valid = True
        for key, guard in self.fields.items():
            valid = guard.validate(value.get(key, UNDEFINED), path + (key,), invalidations) and valid
        return valid

    def coerce(self, value: Any, path: Path) -> CoerceResult:
        if not isinstance(value, Mapping):
            return CoerceResult(skip_coerce=True, value=value)
        coerced = dict(value)
        skip = True
        for key, guard in self.fields.items():
            if key in value:
                result = guard.coerce(value[key], path + (key,))
                if not result.skip_coerce:
                    coerced[key] = result.value
                    skip = False
        return CoerceResult(skip_coerce=skip, value=value if skip else coerced)

    def convert(self, value, context, path, converter, options=None):
        if options is not None and options.should_continue is not None and not options.should_continue(path, self):
            return converter(value, path, self, context)
        converted = {
            key: guard.convert(value.get(key, UNDEFINED), context, path + (key,), converter, options)
            for key, guard in self.fields.items()
        }
        return converter(converted, path, self, context)

    def scan(self, value, context, path, scanner, options=None):
        if options is not None and options.max_path_length is not None and len(path) > options.max_path_length:
            return
        scanner(value, path, self, context)
        for key, guard in self.fields.items():
            guard.scan(value.get(key, UNDEFINED), context, path + (key,), scanner, options)

    def substitute(self, path, replacer):
        replacement = replacer(path, self)
        if replacement is not self:
            return replacement
        return RecordGuard({key: guard.substitute(path + (key,), replacer) for key, guard in self.fields.items()})

    def inspect(self, path, inspecter):
        yield from inspecter(path, self)
        for key, guard in self.fields.items():
            yield from guard.inspect(path + (key,), inspecter)


# -----------------------------------------------------------------------------
# FIXTURES
# -----------------------------------------------------------------------------


@pytest.fixture
def rounding():
    """A coercing number guard defined outside the core."""
    return RoundingGuard()


@pytest.fixture
def truncating():
    """A second coercing number guard with a different coercion."""
    return TruncatingGuard()


@pytest.fixture
def boolean_or_one():
    """The union used throughout the validation scenarios."""
    from kindguard import boolean, literal, union

    return union([boolean(), literal(1)])


@pytest.fixture
def linked_node():
    """
    A record whose ``next`` field is a nullable reference to the record
    itself.
    """
    from kindguard import nullable, number

    node = RecordGuard({"value": number()})
    node.fields["next"] = nullable(node)
    return node


@pytest.fixture
def recorder():
    """Collects (value, path, guard, context) tuples from convert/scan callbacks."""
    calls = []

    def record(value, path, guard, context):
        calls.append((value, path, guard, context))
        return value

    record.calls = calls
    return record
