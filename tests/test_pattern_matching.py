"""Tests for pattern matching on results, options and sources."""

from __future__ import annotations

import pyopersist as pp


def test_result_pattern_matching() -> None:
    """Test Result pattern matching on try_materialize."""

    def _broken():  # noqa: ANN202
        yield 1
        msg = "gone"
        raise OSError(msg)

    match pp.LazyCollection.from_(1, 2).try_materialize():
        case pp.Ok(value):
            assert value.to_list() == [1, 2]
        case pp.Err(error):
            raise AssertionError(error)

    match pp.LazyCollection.from_iter(_broken()).try_materialize():
        case pp.Ok(value):
            raise AssertionError(value)
        case pp.Err(error):
            assert isinstance(error, pp.UpstreamFault)


def test_option_pattern_matching() -> None:
    """Test Option pattern matching on lookups."""
    data = pp.LazyCollection.from_("hello")
    match data.first():
        case pp.Some(value):
            assert value == "hello"
        case _:
            raise AssertionError

    match data.get_option(3):
        case pp.Some(value):
            raise AssertionError(value)
        case _:
            pass


def test_source_pattern_matching() -> None:
    """Test that a handle exposes its source as a Realized or Pending variant."""
    handle = pp.LazyHandle.pending(pp.IterableProducer((1, 2)), pp.VECTOR.adapter)
    match handle.source:
        case pp.Pending(_, pipeline):
            assert len(pipeline) == 0
        case pp.Realized(_):
            raise AssertionError

    assert list(handle.force()) == [1, 2]
    match handle.source:
        case pp.Realized(value):
            assert list(value) == [1, 2]
        case _:
            raise AssertionError


def test_retarget_keeps_pipeline() -> None:
    """Test that retargeting a pending handle shares its producer and pipeline."""
    handle = pp.LazyHandle.pending(pp.IterableProducer((3, 1, 3)), pp.VECTOR.adapter)
    handle = handle.append(pp.ops.Map(lambda x: x * 2))
    retargeted = handle.retarget(pp.SET.adapter)
    assert retargeted.source == handle.source
    assert sorted(retargeted.force()) == [2, 6]
    assert not handle.is_realized()
