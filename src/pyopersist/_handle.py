from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from functools import partial
from typing import Any, Concatenate

from ._adapters import PersistentCollectionAdapter
from ._builder import build
from ._errors import ReentrantForceError
from ._ops import Op
from ._pipeline import TransformPipeline
from ._source import IterableProducer, Pending, Producer, Realized, Source

logger = logging.getLogger(__name__)


class LazyHandle[C]:
    """Owns the source of a collection, and materializes it at most once.

    The source is either `Realized` (a persistent structure) or `Pending` (a producer and a pipeline).
    The first successful `force` drains the pipeline, publishes the result as `Realized` and drops the pipeline: every later call returns the same object in O(1).

    Concurrent forces follow a single-winner policy: one thread drains while the others wait on the handle lock, then read the published value.
    A failed drain publishes nothing and leaves the handle `Pending`.

    Args:
        source (Source): Initial state of the handle.
        adapter (PersistentCollectionAdapter[C, Any]): Kind the pipeline materializes into.
    """

    __slots__ = ("_adapter", "_drainer", "_lock", "_source")

    def __init__(self, source: Source, adapter: PersistentCollectionAdapter[C, Any]) -> None:
        self._source = source
        self._adapter = adapter
        self._lock = threading.Lock()
        self._drainer: int | None = None

    @classmethod
    def realized(cls, value: C, adapter: PersistentCollectionAdapter[C, Any]) -> LazyHandle[C]:
        return cls(Realized(value), adapter)

    @classmethod
    def pending(
        cls, producer: Producer[Any], adapter: PersistentCollectionAdapter[C, Any]
    ) -> LazyHandle[C]:
        return cls(Pending(producer, TransformPipeline()), adapter)

    @property
    def source(self) -> Source:
        return self._source

    def is_realized(self) -> bool:
        return isinstance(self._source, Realized)

    def force(self) -> C:
        source = self._source
        if isinstance(source, Realized):
            return source.value
        if self._drainer == threading.get_ident():
            msg = "collection forced from inside its own pipeline"
            raise ReentrantForceError(msg)
        with self._lock:
            match self._source:
                case Realized(value):
                    return value
                case Pending() as pending:
                    return self._drain(pending)

    def _drain(self, pending: Pending[Any]) -> C:
        logger.debug(
            "draining %d op(s) into %s", len(pending.pipeline), self._adapter.name
        )
        self._drainer = threading.get_ident()
        try:
            value = pending.pipeline.drain_into(
                pending.producer, partial(build, self._adapter)
            )
        except Exception as exc:
            logger.debug("drain into %s aborted: %r", self._adapter.name, exc)
            raise
        finally:
            self._drainer = None
        self._source = Realized(value)
        logger.debug("materialized %s of size %d", self._adapter.name, self._adapter.size(value))
        return value

    def append(self, op: Op) -> LazyHandle[Any]:
        """Return a new handle with **op** appended to the pipeline, without forcing."""
        match self._source:
            case Realized(value):
                pipeline = TransformPipeline().append(op)
                return LazyHandle(Pending(IterableProducer(value), pipeline), self._adapter)
            case Pending(producer, pipeline):
                return LazyHandle(Pending(producer, pipeline.append(op)), self._adapter)

    def update[**P](
        self,
        func: Callable[Concatenate[C, P], C],
        *args: P.args,
        **kwargs: P.kwargs,
    ) -> LazyHandle[C]:
        """Force, then return a realized handle holding `func(value, *args, **kwargs)`."""
        return LazyHandle.realized(func(self.force(), *args, **kwargs), self._adapter)

    def retarget[R](self, adapter: PersistentCollectionAdapter[R, Any]) -> LazyHandle[R]:
        """Same elements and pipeline, materialized into another kind. Never forces."""
        match self._source:
            case Realized(value):
                producer: Producer[Any] = IterableProducer(value)
                return LazyHandle(Pending(producer, TransformPipeline()), adapter)
            case Pending() as pending:
                return LazyHandle(pending, adapter)
