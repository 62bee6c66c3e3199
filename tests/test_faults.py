"""Tests for failure propagation during forcing."""

from collections.abc import Iterator

import pytest

import pyopersist as pp


class _Flaky:
    """Re-iterable source failing on its first iterations."""

    def __init__(self, failures: int) -> None:
        self.failures = failures
        self.opens = 0

    def __iter__(self) -> Iterator[int]:
        self.opens += 1
        yield 1
        if self.opens <= self.failures:
            msg = "connection reset"
            raise ConnectionError(msg)
        yield 2


def _broken() -> Iterator[int]:
    yield 1
    msg = "disk unplugged"
    raise OSError(msg)


def test_upstream_failure_is_wrapped() -> None:
    """Test that a failing producer surfaces as UpstreamFault with its cause."""
    data = pp.LazyCollection.from_iter(_broken()).map(lambda x: x * 2)
    with pytest.raises(pp.UpstreamFault) as info:
        data.to_list()
    assert isinstance(info.value.__cause__, OSError)
    assert isinstance(info.value, pp.LazyCollectionError)


def test_failed_force_leaves_collection_pending() -> None:
    """Test that nothing is published after a failed drain."""
    data = pp.LazyCollection.from_iter(_Flaky(failures=1))
    with pytest.raises(pp.UpstreamFault):
        len(data)
    assert not data.is_realized()


def test_retryable_source_succeeds_on_next_force() -> None:
    """Test that a re-iterable source is opened again by the next force."""
    source = _Flaky(failures=1)
    data = pp.LazyCollection.from_iter(source).map(lambda x: x * 10)
    with pytest.raises(pp.UpstreamFault):
        data.to_list()
    assert data.to_list() == [10, 20]
    assert data.is_realized()
    assert source.opens == 2


def test_failed_one_shot_iterator_raises_drained_source() -> None:
    """Test that a failed one-shot iterator can't be drained again."""
    data = pp.LazyCollection.from_iter(_broken())
    with pytest.raises(pp.UpstreamFault) as first:
        data.to_list()
    assert not isinstance(first.value, pp.DrainedSourceFault)
    with pytest.raises(pp.DrainedSourceFault):
        data.to_list()
    with pytest.raises(pp.DrainedSourceFault):
        data.map(str).to_list()


def test_failing_generator_factory() -> None:
    """Test that failures inside generated sources are upstream faults."""

    def _supplier() -> int:
        msg = "sensor offline"
        raise RuntimeError(msg)

    data = pp.LazyCollection.generate(3, _supplier)
    with pytest.raises(pp.UpstreamFault):
        data.to_list()
    assert not data.is_realized()


def test_user_callback_errors_propagate_unchanged() -> None:
    """Test that exceptions from map functions are not wrapped."""
    data = pp.LazyCollection.from_(1, 0, 2).map(lambda x: 1 // x)
    with pytest.raises(ZeroDivisionError):
        data.to_list()
    assert not data.is_realized()
    with pytest.raises(ZeroDivisionError):
        len(data)


def test_callback_error_after_partial_emission_publishes_nothing() -> None:
    """Test that a failure midway through the pipeline publishes no partial result."""
    seen: list[int] = []

    def _check(x: int) -> int:
        if x == 3:
            msg = "bad value"
            raise ValueError(msg)
        return x

    data = pp.LazyCollection.from_range(0, 5).peek(seen.append).map(_check)
    with pytest.raises(ValueError, match="bad value"):
        data.to_list()
    assert seen == [0, 1, 2, 3]
    assert not data.is_realized()


def test_try_materialize() -> None:
    """Test that engine faults become an Err, and success an Ok holding Self."""
    ok = pp.LazyCollection.from_(1, 2).try_materialize()
    assert ok.is_ok()
    assert ok.unwrap().to_list() == [1, 2]
    err = pp.LazyCollection.from_iter(_broken()).try_materialize()
    assert err.is_err()
    assert isinstance(err.unwrap_err(), pp.UpstreamFault)


def test_try_materialize_lets_callback_errors_through() -> None:
    """Test that user errors are not turned into an Err."""
    data = pp.LazyCollection.from_(0).map(lambda x: 1 // x)
    with pytest.raises(ZeroDivisionError):
        data.try_materialize()


def test_retry_after_callback_error_replays_zipped_iterator() -> None:
    """Test that a retry after a user error reproduces the full zip over a one-shot iterator."""
    calls: list[int] = []

    def _fail_second_call(pair: tuple[int, str]) -> tuple[int, str]:
        calls.append(1)
        if len(calls) == 2:
            msg = "transient"
            raise ValueError(msg)
        return pair

    data = pp.LazyCollection.from_(1, 2, 3).zip(iter("abc")).map(_fail_second_call)
    with pytest.raises(ValueError, match="transient"):
        data.to_list()
    assert not data.is_realized()
    assert data.to_list() == [(1, "a"), (2, "b"), (3, "c")]
    assert data.to_list() == [(1, "a"), (2, "b"), (3, "c")]


def test_zip_keeps_engine_faults_of_other_collections() -> None:
    """Test that a fault raised while forcing a zipped collection keeps its type."""
    other = pp.LazyCollection.from_iter(_broken())
    with pytest.raises(pp.UpstreamFault) as info:
        pp.LazyCollection.from_(1, 2).zip(other).to_list()
    assert isinstance(info.value.__cause__, OSError)
    with pytest.raises(pp.DrainedSourceFault):
        pp.LazyCollection.from_(1, 2).zip(other).to_list()


def test_try_materialize_result_combinators() -> None:
    """Test mapping over a materialization outcome, and turning it into an Option."""
    sizes = pp.LazyCollection.from_range(0, 4).try_materialize().map(len)
    assert sizes == pp.Ok(4)
    assert sizes.ok() == pp.Some(4)
    failed = pp.LazyCollection.from_iter(_broken()).try_materialize().map(len)
    assert failed.is_err()
    assert failed.ok().is_none()
    assert failed.ok().unwrap_or(-1) == -1


def test_reentrant_force_is_rejected() -> None:
    """Test that a pipeline forcing its own collection raises instead of deadlocking."""
    holder: list[pp.LazyCollection[int]] = []
    data = pp.LazyCollection.from_range(0, 3).map(lambda x: x + len(holder[0]))
    holder.append(data)
    with pytest.raises(pp.ReentrantForceError):
        data.to_list()
    assert not data.is_realized()


def test_index_fault_message() -> None:
    """Test that the index fault names the kind, index and size."""
    with pytest.raises(pp.IndexFault, match="index 4 out of range for Stack of size 2"):
        pp.LazyCollection.from_(1, 2, kind=pp.STACK).get(4)


def test_unsupported_operation_is_a_type_error() -> None:
    """Test that positional updates on sets can be caught as TypeError."""
    with pytest.raises(TypeError, match="unordered"):
        pp.LazyCollection.from_(1, kind=pp.SET).set_at(0, 2)
