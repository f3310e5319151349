# tests/unit/runtime/test_checks.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import logging

import pytest
from conftest import RecordGuard

from kindguard import (
    GuardAssertionError,
    LogicalInvalidation,
    TraversalOptions,
    TypeInvalidation,
    assert_return,
    assert_valid,
    coercer,
    converter,
    creator,
    inspect_guard,
    is_valid,
    literal,
    nullable,
    number,
    scanner,
    string,
    substitute,
    try_assert_return,
    union,
    validator,
)


class PayloadError(Exception):
    def __init__(self, invalidations):
        super().__init__("payload rejected")
        self.invalidations = invalidations


# -----------------------------------------------------------------------------
# ASSERTIONS
# -----------------------------------------------------------------------------


def test_assert_valid_passes(boolean_or_one):
    """Test that a valid value passes silently."""
    assert assert_valid(boolean_or_one, True) is None


def test_assert_valid_default_error(boolean_or_one, caplog):
    """Test the default assertion error and its debug log."""
    with caplog.at_level(logging.DEBUG, logger="kindguard.runtime.checks"):
        with pytest.raises(GuardAssertionError) as exc_info:
            assert_valid(boolean_or_one, "abc")
    assert exc_info.value.invalidations == (
        TypeInvalidation(path=(), setting=("boolean", "number"), actual="string"),
    )
    assert "Assertion against" in caplog.text


def test_assert_valid_custom_errors(boolean_or_one):
    """Test each form of caller-supplied error."""
    with pytest.raises(KeyError):
        assert_valid(boolean_or_one, 0, KeyError("flag"))

    with pytest.raises(TypeError, match="not a flag"):
        assert_valid(boolean_or_one, 0, "not a flag")

    with pytest.raises(PayloadError) as exc_info:
        assert_valid(boolean_or_one, 0, PayloadError)
    assert exc_info.value.invalidations == (
        LogicalInvalidation(guard="literal", path=(), function="equals", setting=1, actual=0),
    )


def test_assert_return(boolean_or_one):
    """Test that the asserted value is handed back."""
    assert assert_return(boolean_or_one, 1) == 1
    with pytest.raises(GuardAssertionError):
        assert_return(boolean_or_one, 2)


def test_try_assert_return(boolean_or_one):
    """Test the default returned for invalid values."""
    assert try_assert_return(boolean_or_one, True) is True
    assert try_assert_return(boolean_or_one, 2) is None
    assert try_assert_return(boolean_or_one, 2, default=False) is False


# -----------------------------------------------------------------------------
# BUILDERS
# -----------------------------------------------------------------------------


def test_is_valid(boolean_or_one):
    """Test the predicate form."""
    check = is_valid(boolean_or_one)
    assert check(False)
    assert not check("x")


def test_validator(boolean_or_one):
    """Test that validators return the invalidations as a tuple."""
    validate = validator(boolean_or_one)
    assert validate(True) == ()
    assert validate(0) == (LogicalInvalidation(guard="literal", path=(), function="equals", setting=1, actual=0),)


def test_coercer(rounding):
    """Test coercion through a coercing and a non-coercing guard."""
    assert coercer(rounding)(2.7) == 3
    assert coercer(rounding)("x") == "x"
    assert coercer(string())(" x ") == " x "


def test_creator(rounding):
    """Test that creators coerce and then assert."""
    create = creator(nullable(rounding))
    assert create(2.2) == 2
    assert create(None) is None
    with pytest.raises(GuardAssertionError):
        create("2")


def test_converter(recorder):
    """Test the built converter with and without the up-front assertion."""
    guard = RecordGuard({"n": number(), "s": string()})
    convert = converter(guard, recorder)
    assert convert({"n": 1, "s": "a"}, context="ctx") == {"n": 1, "s": "a"}
    assert [call[1] for call in recorder.calls] == [("n",), ("s",), ()]
    assert all(call[3] == "ctx" for call in recorder.calls)

    with pytest.raises(GuardAssertionError):
        convert({"n": "1", "s": "a"})
    assert convert({"n": "1", "s": "a"}, skip_assertion=True) == {"n": "1", "s": "a"}


def test_converter_should_continue(recorder):
    """Test that traversal options reach the guard."""
    guard = RecordGuard({"n": number()})
    convert = converter(guard, recorder, TraversalOptions(should_continue=lambda path, guard: False))
    convert({"n": 1})
    assert [call[1] for call in recorder.calls] == [()]


def test_scanner(recorder):
    """Test the built scanner."""
    guard = RecordGuard({"n": union([literal(1), literal(2)])})
    scan = scanner(guard, recorder)
    assert scan({"n": 2}, context=[]) is None
    assert [(call[0], call[1]) for call in recorder.calls] == [({"n": 2}, ()), (2, ("n",))]
    with pytest.raises(GuardAssertionError) as exc_info:
        scan({"n": 3})
    assert str(exc_info.value).startswith('["n"] - expected to be "equals"')


def test_substitute_and_inspect(boolean_or_one):
    """Test the root-level substitute and inspect helpers."""
    assert substitute(boolean_or_one, lambda path, guard: string()) is string()
    names = list(inspect_guard(boolean_or_one, lambda path, guard: [guard.name]))
    assert names == ["type", "literal"]
