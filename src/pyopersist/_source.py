from __future__ import annotations

import asyncio
import threading
from collections.abc import AsyncIterable, AsyncIterator, Callable, Iterable, Iterator
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

from ._core import get_config
from ._errors import DrainedSourceFault, LazyCollectionError, UpstreamFault

if TYPE_CHECKING:
    from ._pipeline import TransformPipeline


class Producer[T](Protocol):
    """Supplies the elements of a pending collection.

    `open` is called once per drain attempt, never before a force.
    """

    def open(self) -> Iterator[T]: ...


def _guarded[T](data: Iterator[T], origin: str) -> Iterator[T]:
    while True:
        try:
            item = next(data)
        except StopIteration:
            return
        except LazyCollectionError:
            raise
        except Exception as exc:
            msg = f"{origin} failed while supplying elements"
            raise UpstreamFault(msg) from exc
        yield item


class FactoryProducer[T]:
    """Calls **factory** for a fresh iterable on every open, hence always retryable."""

    __slots__ = ("_factory",)

    def __init__(self, factory: Callable[[], Iterable[T]]) -> None:
        self._factory = factory

    def open(self) -> Iterator[T]:
        try:
            data = iter(self._factory())
        except Exception as exc:
            msg = "generator factory failed"
            raise UpstreamFault(msg) from exc
        return _guarded(data, "generator")


class IterableProducer[T]:
    """Wraps an arbitrary iterable.

    Re-iterable inputs (tuples, ranges, persistent structures, ...) are iterated again on every open.

    A one-shot `Iterator` is shared by every collection derived from it: the elements pulled so far are cached and replayed, so several handles can open it in turn.
    Once the iterator has raised, it can't be resumed, and later opens raise `DrainedSourceFault`.
    """

    __slots__ = ("_cache", "_data", "_failed", "_lock", "_one_shot")

    def __init__(self, data: Iterable[T]) -> None:
        self._data = data
        self._one_shot = isinstance(data, Iterator)
        self._cache: list[T] = []
        self._failed = False
        self._lock = threading.Lock()

    def open(self) -> Iterator[T]:
        if not self._one_shot:
            return _guarded(iter(self._data), "iterable")
        if self._failed:
            msg = "one-shot iterator already failed and can't be drained again"
            raise DrainedSourceFault(msg)
        return self._replay()

    def _pull(self, idx: int) -> tuple[bool, T | None]:
        with self._lock:
            if idx < len(self._cache):
                return True, self._cache[idx]
            try:
                item = next(self._data)  # type: ignore[call-overload]
            except StopIteration:
                return False, None
            except Exception as exc:
                self._failed = True
                msg = "iterator failed while supplying elements"
                raise UpstreamFault(msg) from exc
            self._cache.append(item)
            return True, item

    def _replay(self) -> Iterator[T]:
        idx = 0
        while True:
            found, item = self._pull(idx)
            if not found:
                return
            yield item  # type: ignore[misc]
            idx += 1


async def _collect[T](publisher: AsyncIterable[T], timeout: float | None) -> tuple[T, ...]:
    async with asyncio.timeout(timeout):
        return tuple([item async for item in publisher])


def _run_blocking[T](publisher: AsyncIterable[T], timeout: float | None) -> tuple[T, ...]:
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(_collect(publisher, timeout))
    # The caller owns a running loop: block on a private one in a worker thread.
    with ThreadPoolExecutor(max_workers=1) as pool:
        return pool.submit(asyncio.run, _collect(publisher, timeout)).result()


class PublisherProducer[T]:
    """Blocks the forcing thread until an async publisher completes, then replays what it emitted.

    The collected elements are kept, so later opens don't subscribe again.
    A failed `AsyncIterator` can't be subscribed again and raises `DrainedSourceFault` on retry, while a re-iterable `AsyncIterable` is collected anew.
    """

    __slots__ = ("_collected", "_failed", "_lock", "_one_shot", "_publisher")

    def __init__(self, publisher: AsyncIterable[T]) -> None:
        self._publisher = publisher
        self._one_shot = isinstance(publisher, AsyncIterator)
        self._collected: tuple[T, ...] | None = None
        self._failed = False
        self._lock = threading.Lock()

    def open(self) -> Iterator[T]:
        with self._lock:
            if self._collected is None:
                self._collected = self._subscribe()
            return iter(self._collected)

    def _subscribe(self) -> tuple[T, ...]:
        if self._failed:
            msg = "async iterator already failed and can't be subscribed again"
            raise DrainedSourceFault(msg)
        try:
            return _run_blocking(self._publisher, get_config().publisher_timeout)
        except Exception as exc:
            self._failed = self._one_shot
            msg = "publisher failed before completing"
            raise UpstreamFault(msg) from exc


@dataclass(slots=True, frozen=True)
class Realized[C]:
    """Source variant holding a materialized persistent structure."""

    value: C


@dataclass(slots=True, frozen=True)
class Pending[T]:
    """Source variant holding a producer and the deferred operations to run over it."""

    producer: Producer[T]
    pipeline: TransformPipeline


type Source = Realized[Any] | Pending[Any]
