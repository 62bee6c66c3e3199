"""Tests for the global configuration."""

import logging
from collections.abc import Iterator

import pytest

import pyopersist as pp


@pytest.fixture
def short_repr() -> Iterator[None]:
    previous = pp.set_config(repr_max_items=3)
    yield
    pp.set_config(repr_max_items=previous.repr_max_items)


def test_default_config() -> None:
    """Test the default settings."""
    config = pp.get_config()
    assert config.repr_max_items is None
    assert config.publisher_timeout is None


def test_set_config_returns_previous() -> None:
    """Test that set_config replaces fields and returns the previous config."""
    previous = pp.set_config(publisher_timeout=2.5)
    try:
        assert pp.get_config().publisher_timeout == 2.5
        assert previous.publisher_timeout is None
    finally:
        pp.set_config(publisher_timeout=previous.publisher_timeout)


@pytest.mark.usefixtures("short_repr")
def test_repr_truncation() -> None:
    """Test that long collections are truncated in their textual form."""
    assert repr(pp.LazyCollection.from_range(0, 10)) == "Vector[0, 1, 2, ...]"
    assert repr(pp.LazyCollection.from_(1, 2, 3)) == "Vector[1, 2, 3]"
    assert repr(pp.LazyCollection.new(pp.STACK)) == "Stack[]"


def test_config_is_immutable() -> None:
    """Test that the config itself can't be modified in place."""
    with pytest.raises(AttributeError):
        pp.get_config().repr_max_items = 4  # type: ignore[misc]


def test_drain_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    """Test that draining and failures are reported at debug level."""
    with caplog.at_level(logging.DEBUG, logger="pyopersist"):
        pp.LazyCollection.from_range(0, 3).map(str).to_list()
        with pytest.raises(ZeroDivisionError):
            pp.LazyCollection.from_(0).map(lambda x: 1 // x).to_list()
    messages = [record.getMessage() for record in caplog.records]
    assert "draining 1 op(s) into Vector" in messages
    assert "materialized Vector of size 3" in messages
    assert any(message.startswith("drain into Vector aborted") for message in messages)
