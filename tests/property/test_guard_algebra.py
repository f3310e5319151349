# tests/property/test_guard_algebra.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from hypothesis import assume, given
from hypothesis import strategies as st

from kindguard import (
    UNDEFINED,
    Kind,
    UnionGuard,
    any_,
    enums,
    kind,
    literal,
    never,
    nullable,
    optional,
    required,
    union,
    unknown,
)

# -----------------------------------------------------------------------------
# STRATEGIES
# -----------------------------------------------------------------------------

CONCRETE_KINDS = [
    "bigint",
    "boolean",
    "function",
    "null",
    "number",
    "object",
    "string",
    "symbol",
    "undefined",
]

scalars = st.one_of(
    st.none(),
    st.just(UNDEFINED),
    st.booleans(),
    st.integers(min_value=-(2**60), max_value=2**60),
    st.floats(allow_nan=False),
    st.text(max_size=3),
)
values = st.one_of(
    scalars,
    st.lists(scalars, max_size=3),
    st.dictionaries(st.text(max_size=2), scalars, max_size=2),
)

kind_guards = st.lists(st.sampled_from(CONCRETE_KINDS), max_size=3).map(kind)
literal_guards = st.one_of(scalars, st.lists(st.integers(-3, 3), max_size=2)).map(literal)

guards = st.recursive(
    st.one_of(kind_guards, literal_guards),
    lambda children: st.one_of(
        st.lists(children, max_size=4).map(union),
        children.map(nullable),
        children.map(optional),
        children.map(required),
    ),
    max_leaves=8,
)


# -----------------------------------------------------------------------------
# PROPERTIES
# -----------------------------------------------------------------------------


@given(guard=guards, value=values)
def test_accept_agrees_with_validate(guard, value):
    """Test that accept holds exactly when validate records nothing."""
    invalidations = []
    valid = guard.validate(value, (), invalidations)
    assert valid is guard.accept(value)
    assert (invalidations == []) is valid


@given(left=guards, right=guards)
def test_equals_is_symmetric(left, right):
    """Test that equality gives the same answer in both directions."""
    assert left.equals(right) == right.equals(left)


@given(guard=guards)
def test_equals_is_reflexive(guard):
    """Test that every guard equals itself."""
    assert guard.equals(guard)


@given(names=st.lists(st.sampled_from([kind.value for kind in Kind]), max_size=5))
def test_kind_canonicalization(names):
    """Test that permutations and duplicates of a kind set share one guard."""
    assert kind(names) is kind(list(reversed(names)) + names)


@given(guard=guards)
def test_union_absorption(guard):
    """Test the absorbing and neutral elements of union."""
    assert union([any_(), guard]) is any_()
    assert union([guard, never()]).equals(guard)
    if Kind.ANY not in guard.type:
        assert union([unknown(), guard]) is unknown()


@given(guard=guards)
def test_union_identity(guard):
    """Test that a single-member union is the member."""
    assert union([guard]) is guard


@given(members=st.lists(guards, min_size=2, max_size=4))
def test_union_is_minimal(members):
    """Test that no two members are equal and kind members never repeat."""
    result = union(members)
    if isinstance(result, UnionGuard):
        assert len(result.members) >= 2
        for index, member in enumerate(result.members):
            assert not any(member.equals(other) for other in result.members[index + 1 :])
        assert sum(1 for member in result.members if member.name == "type") <= 1


@given(members=st.lists(guards, max_size=4), value=values)
def test_union_accepts_what_any_member_accepts(members, value):
    """Test that compaction never changes the accepted set."""
    assert union(members).accept(value) == any(member.accept(value) for member in members)


@given(guard=guards)
def test_modifier_idempotence(guard):
    """Test that modifiers applied twice return the same reference."""
    with_null = nullable(guard)
    assert nullable(with_null) is with_null
    assert nullable(guard) is with_null

    with_undefined = optional(guard)
    assert optional(with_undefined) is with_undefined

    stripped = required(guard)
    assert required(stripped) is stripped
    assert required(guard) is stripped


@given(guard=guards, value=values)
def test_required_strips_markers(guard, value):
    """Test that required keeps every non-marker value of the input."""
    assume(Kind.ANY not in guard.type and Kind.UNKNOWN not in guard.type)
    stripped = required(optional(nullable(guard)))
    if value is None or value is UNDEFINED:
        assert not stripped.accept(value)
    else:
        assert stripped.accept(value) == guard.accept(value)


@given(items=st.lists(scalars, max_size=4))
def test_enums_matches_literal_union(items):
    """Test that enums accepts exactly the listed values."""
    guard = enums(items)
    for item in items:
        assert guard.accept(item)
    assert guard.equals(union([literal(item) for item in items]))
