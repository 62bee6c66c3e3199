"""Tests for the LazyCollection constructors."""

import pytest
from pyrsistent import plist, pvector

import pyopersist as pp


def test_new_is_empty_and_realized() -> None:
    """Test that new creates an empty realized collection of the given kind."""
    data = pp.LazyCollection.new(pp.QUEUE)
    assert data.is_realized()
    assert data.is_empty()
    assert data.kind == pp.QUEUE
    assert repr(data) == "Queue[]"


def test_once() -> None:
    """Test that once creates a single element collection."""
    assert pp.LazyCollection.once("x").to_list() == ["x"]
    assert pp.LazyCollection.once("x", pp.STACK).kind == pp.STACK


def test_from_values_keeps_order_for_every_ordered_kind() -> None:
    """Test that unpacked values keep their order in ordered kinds."""
    for kind in (pp.VECTOR, pp.STACK, pp.QUEUE):
        assert pp.LazyCollection.from_(1, 2, 3, kind=kind).to_list() == [1, 2, 3]


def test_from_iter_accepts_any_iterable() -> None:
    """Test that from_iter accepts generators, ranges and strings."""
    assert pp.LazyCollection.from_iter(x * 2 for x in range(3)).to_list() == [0, 2, 4]
    assert pp.LazyCollection.from_iter(range(2)).to_list() == [0, 1]
    assert pp.LazyCollection.from_iter("ab").to_list() == ["a", "b"]


def test_from_iter_reuses_lazy_collections() -> None:
    """Test that from_iter returns a collection of the same kind as is."""
    data = pp.LazyCollection.from_(1, 2)
    assert pp.LazyCollection.from_iter(data) is data
    converted = pp.LazyCollection.from_iter(data, pp.STACK)
    assert converted.kind == pp.STACK
    assert converted.to_list() == [1, 2]


def test_from_persistent_wraps_without_copy() -> None:
    """Test that a persistent structure is wrapped as is."""
    vec = pvector([1, 2])
    data = pp.LazyCollection.from_persistent(vec)
    assert data.is_realized()
    assert data.inner() is vec
    stack = pp.LazyCollection.from_persistent(plist([1, 2]), pp.STACK)
    assert stack.plus(0).to_list() == [0, 1, 2]


def test_from_fn_unfolds_until_none() -> None:
    """Test that from_fn stops at the first NONE."""

    def _fib(state: tuple[int, int]) -> pp.Option[tuple[int, tuple[int, int]]]:
        a, b = state
        return pp.Some((a, (b, a + b))) if a < 20 else pp.NONE

    assert pp.LazyCollection.from_fn((0, 1), _fib).to_list() == [0, 1, 1, 2, 3, 5, 8, 13]


def test_from_fn_is_replayable() -> None:
    """Test that two collections over the same unfold both see every element."""
    countdown = pp.LazyCollection.from_fn(
        3, lambda n: pp.Some((n, n - 1)) if n > 0 else pp.NONE
    )
    assert countdown.map(str).to_list() == ["3", "2", "1"]
    assert countdown.to_list() == [3, 2, 1]


def test_generate_calls_supplier_limit_times() -> None:
    """Test that generate calls its supplier exactly limit times."""
    counter = iter(range(100))
    data = pp.LazyCollection.generate(4, lambda: next(counter))
    assert data.to_list() == [0, 1, 2, 3]
    assert next(counter) == 4


def test_generate_zero() -> None:
    """Test that a zero limit produces an empty collection."""
    assert pp.LazyCollection.generate(0, lambda: 1).is_empty()


def test_iterate() -> None:
    """Test that iterate starts from the seed."""
    assert pp.LazyCollection.iterate(4, 1, lambda x: x * 3).to_list() == [1, 3, 9, 27]
    assert pp.LazyCollection.iterate(0, 1, lambda x: x).is_empty()


def test_negative_limits_are_rejected() -> None:
    """Test that negative limits raise before anything is recorded."""
    with pytest.raises(ValueError, match="limit"):
        pp.LazyCollection.generate(-1, lambda: 1)
    with pytest.raises(ValueError, match="limit"):
        pp.LazyCollection.iterate(-1, 0, lambda x: x)


def test_from_range() -> None:
    """Test ranges, with big integers, negative steps and empty bounds."""
    assert pp.LazyCollection.from_range(0, 5).to_list() == [0, 1, 2, 3, 4]
    assert pp.LazyCollection.from_range(5, 0, -2).to_list() == [5, 3, 1]
    assert pp.LazyCollection.from_range(3, 3).is_empty()
    big = 2**70
    assert pp.LazyCollection.from_range(big, big + 2).to_list() == [big, big + 1]


def test_from_range_into_set() -> None:
    """Test that a range can be materialized into any kind."""
    data = pp.LazyCollection.from_range(0, 5, kind=pp.SET)
    assert data.kind == pp.SET
    assert sorted(data) == [0, 1, 2, 3, 4]
