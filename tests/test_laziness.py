"""Tests for deferred evaluation and single materialization."""

import pyopersist as pp


def test_no_callback_runs_before_force() -> None:
    """Test that recording transformations never calls user functions."""
    calls: list[int] = []
    data = (
        pp.LazyCollection.from_iter(range(5))
        .peek(calls.append)
        .map(lambda x: x + 1)
        .filter(lambda x: x % 2 == 0)
        .flat_map(lambda x: (x, x))
    )
    assert calls == []
    assert not data.is_realized()


def test_pipeline_runs_once_per_collection() -> None:
    """Test that repeated queries reuse the materialized structure."""
    calls: list[int] = []
    data = pp.LazyCollection.from_(1, 2, 3).peek(calls.append).map(lambda x: x * 2)
    assert len(data) == 3
    assert data.to_list() == [2, 4, 6]
    assert data.get(0) == 2
    assert 4 in data
    assert repr(data) == "Vector[2, 4, 6]"
    assert calls == [1, 2, 3]
    assert data.is_realized()


def test_inner_returns_same_object_after_force() -> None:
    """Test that forcing twice returns the identical structure."""
    data = pp.LazyCollection.from_range(0, 100).map(str)
    assert data.inner() is data.inner()


def test_derived_collections_are_independent() -> None:
    """Test that deriving a collection leaves the receiver untouched."""
    base = pp.LazyCollection.from_range(0, 4)
    doubled = base.map(lambda x: x * 2)
    evens = base.filter(lambda x: x % 2 == 0)
    assert doubled.to_list() == [0, 2, 4, 6]
    assert evens.to_list() == [0, 2]
    assert base.to_list() == [0, 1, 2, 3]


def test_forcing_derived_does_not_force_parent() -> None:
    """Test that each handle owns its own materialization state."""
    base = pp.LazyCollection.from_range(0, 4)
    derived = base.map(lambda x: x + 1)
    assert derived.to_list() == [1, 2, 3, 4]
    assert not base.is_realized()


def test_transform_on_realized_collection_is_lazy() -> None:
    """Test that a realized collection accepts new pending operations."""
    calls: list[int] = []
    base = pp.LazyCollection.from_(1, 2).materialize()
    derived = base.peek(calls.append)
    assert base.is_realized()
    assert not derived.is_realized()
    assert calls == []
    assert derived.to_tuple() == (1, 2)
    assert calls == [1, 2]


def test_bounded_infinite_producer() -> None:
    """Test that an unbounded unfold terminates once bounded by take."""
    naturals = pp.LazyCollection.from_fn(0, lambda n: pp.Some((n, n + 1)))
    assert naturals.filter(lambda x: x % 3 == 0).take(4).to_list() == [0, 3, 6, 9]


def test_bounded_infinite_producer_with_take_while() -> None:
    """Test that take_while stops pulling from an unbounded unfold."""
    naturals = pp.LazyCollection.from_fn(1, lambda n: pp.Some((n, n * 2)))
    assert naturals.take_while(lambda x: x < 20).to_list() == [1, 2, 4, 8, 16]


def test_structural_update_forces_and_returns_realized() -> None:
    """Test that plus forces the receiver and returns a realized collection."""
    base = pp.LazyCollection.from_range(0, 3)
    bigger = base.plus(3)
    assert base.is_realized()
    assert bigger.is_realized()
    assert bigger.to_list() == [0, 1, 2, 3]
    assert base.to_list() == [0, 1, 2]


def test_lazy_structural_ops_do_not_force() -> None:
    """Test that the deferred structural variants keep the collection pending."""
    base = pp.LazyCollection.from_range(0, 3)
    data = base.plus_lazy(9).plus_all_lazy([7, 8]).minus_lazy(0)
    assert not data.is_realized()
    assert not base.is_realized()
    assert data.to_list() == [1, 2, 9, 7, 8]


def test_to_kind_does_not_force() -> None:
    """Test that retargeting keeps the pipeline pending."""
    calls: list[int] = []
    data = pp.LazyCollection.from_(3, 1, 3).peek(calls.append)
    as_set = data.to_kind(pp.SET)
    assert calls == []
    assert len(as_set) == 2
    assert calls == [3, 1, 3]


def test_one_shot_iterator_shared_between_handles() -> None:
    """Test that handles derived from the same iterator all see every element."""
    data = pp.LazyCollection.from_iter(iter([1, 2, 3]))
    squares = data.map(lambda x: x * x)
    assert squares.to_list() == [1, 4, 9]
    assert data.to_list() == [1, 2, 3]
    assert data.filter(lambda x: x > 1).to_list() == [2, 3]


def test_into_does_not_force_by_itself() -> None:
    """Test that into hands the collection over unchanged."""
    data = pp.LazyCollection.from_range(0, 3)
    assert data.into(lambda c: c) is data
    assert not data.is_realized()
