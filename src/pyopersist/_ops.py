"""Deferred operations recorded by a `TransformPipeline`.

Each operation is an immutable value describing one step.
`apply` turns an upstream iterator into a downstream iterator, and only runs when a collection is forced.
Operations marked as buffering consume their whole upstream before emitting anything.
"""

from __future__ import annotations

import itertools
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from functools import partial
from random import Random
from typing import TYPE_CHECKING, Any

import cytoolz as cz
import more_itertools as mit

if TYPE_CHECKING:
    from ._source import Producer

_MISSING: Any = object()


def _restored(data: Iterator[Any]) -> Iterator[Any] | None:
    head = next(data, _MISSING)
    if head is _MISSING:
        return None
    return itertools.chain((head,), data)


class Op(ABC):
    __slots__ = ()

    @abstractmethod
    def apply(self, data: Iterator[Any]) -> Iterator[Any]: ...


@dataclass(slots=True, frozen=True)
class Map(Op):
    func: Callable[[Any], Any]

    def apply(self, data: Iterator[Any]) -> Iterator[Any]:
        return map(self.func, data)


@dataclass(slots=True, frozen=True)
class Filter(Op):
    predicate: Callable[[Any], bool]

    def apply(self, data: Iterator[Any]) -> Iterator[Any]:
        return filter(self.predicate, data)


@dataclass(slots=True, frozen=True)
class FlatMap(Op):
    """Flattens exactly one level, keeping encounter order."""

    func: Callable[[Any], Iterable[Any]]

    def apply(self, data: Iterator[Any]) -> Iterator[Any]:
        return itertools.chain.from_iterable(map(self.func, data))


@dataclass(slots=True, frozen=True)
class Slice(Op):
    """Python slice semantics, negative bounds included."""

    start: int | None
    stop: int | None
    step: int | None

    def apply(self, data: Iterator[Any]) -> Iterator[Any]:
        return mit.islice_extended(data, self.start, self.stop, self.step)


@dataclass(slots=True, frozen=True)
class Take(Op):
    n: int

    def apply(self, data: Iterator[Any]) -> Iterator[Any]:
        return cz.itertoolz.take(self.n, data)


@dataclass(slots=True, frozen=True)
class Drop(Op):
    n: int

    def apply(self, data: Iterator[Any]) -> Iterator[Any]:
        return cz.itertoolz.drop(self.n, data)


@dataclass(slots=True, frozen=True)
class TakeRight(Op):
    """Buffering: keeps the last `n` elements."""

    n: int

    def apply(self, data: Iterator[Any]) -> Iterator[Any]:
        return mit.tail(self.n, data)


@dataclass(slots=True, frozen=True)
class DropRight(Op):
    n: int

    def apply(self, data: Iterator[Any]) -> Iterator[Any]:
        if self.n == 0:
            return data
        return mit.islice_extended(data, None, -self.n)


@dataclass(slots=True, frozen=True)
class TakeWhile(Op):
    predicate: Callable[[Any], bool]

    def apply(self, data: Iterator[Any]) -> Iterator[Any]:
        return itertools.takewhile(self.predicate, data)


@dataclass(slots=True, frozen=True)
class DropWhile(Op):
    predicate: Callable[[Any], bool]

    def apply(self, data: Iterator[Any]) -> Iterator[Any]:
        return itertools.dropwhile(self.predicate, data)


@dataclass(slots=True, frozen=True)
class Zip(Op):
    """Truncates to the shortest input.

    The other inputs are opened anew on every drain, so one-shot iterators are replayed rather than exhausted.
    """

    others: tuple[Producer[Any], ...]

    def apply(self, data: Iterator[Any]) -> Iterator[Any]:
        return zip(data, *(other.open() for other in self.others))


@dataclass(slots=True, frozen=True)
class ZipWith(Op):
    other: Producer[Any]
    func: Callable[[Any, Any], Any]

    def apply(self, data: Iterator[Any]) -> Iterator[Any]:
        return map(self.func, data, self.other.open())


@dataclass(slots=True, frozen=True)
class ZipWithIndex(Op):
    def apply(self, data: Iterator[Any]) -> Iterator[Any]:
        return zip(data, itertools.count())


@dataclass(slots=True, frozen=True)
class Scan(Op):
    """Emits the seed, then every accumulated value."""

    seed: Any
    func: Callable[[Any, Any], Any]

    def apply(self, data: Iterator[Any]) -> Iterator[Any]:
        return itertools.accumulate(data, self.func, initial=self.seed)


@dataclass(slots=True, frozen=True)
class ScanRight(Op):
    """Buffering: accumulates `func(element, acc)` from the right, the seed coming last."""

    seed: Any
    func: Callable[[Any, Any], Any]

    def apply(self, data: Iterator[Any]) -> Iterator[Any]:
        backwards = itertools.accumulate(
            reversed(tuple(data)), partial(cz.functoolz.flip, self.func), initial=self.seed
        )
        return reversed(tuple(backwards))


@dataclass(slots=True, frozen=True)
class Sort(Op):
    """Buffering, stable."""

    key: Callable[[Any], Any] | None
    reverse: bool

    def apply(self, data: Iterator[Any]) -> Iterator[Any]:
        return iter(sorted(data, key=self.key, reverse=self.reverse))


@dataclass(slots=True, frozen=True)
class Distinct(Op):
    """Keeps the first occurrence of each element (or of each key)."""

    key: Callable[[Any], Any] | None

    def apply(self, data: Iterator[Any]) -> Iterator[Any]:
        return cz.itertoolz.unique(data, key=self.key)


@dataclass(slots=True, frozen=True)
class Peek(Op):
    action: Callable[[Any], object]

    def apply(self, data: Iterator[Any]) -> Iterator[Any]:
        return map(partial(cz.functoolz.do, self.action), data)


@dataclass(slots=True, frozen=True)
class Reverse(Op):
    """Buffering."""

    def apply(self, data: Iterator[Any]) -> Iterator[Any]:
        return reversed(tuple(data))


@dataclass(slots=True, frozen=True)
class Shuffle(Op):
    """Buffering. Deterministic only when seeded."""

    seed: int | None

    def apply(self, data: Iterator[Any]) -> Iterator[Any]:
        buffer = list(data)
        Random(self.seed).shuffle(buffer)
        return iter(buffer)


@dataclass(slots=True, frozen=True)
class Cycle(Op):
    """Buffering: repeats the whole upstream `times` times."""

    times: int

    def apply(self, data: Iterator[Any]) -> Iterator[Any]:
        return mit.ncycles(data, self.times)


@dataclass(slots=True, frozen=True)
class CycleWhile(Op):
    """Repeats the upstream for as long as **predicate** holds."""

    predicate: Callable[[Any], bool]

    def apply(self, data: Iterator[Any]) -> Iterator[Any]:
        return itertools.takewhile(self.predicate, itertools.cycle(data))


@dataclass(slots=True, frozen=True)
class Grouped(Op):
    """Tuples of `size` elements, the last one possibly shorter."""

    size: int

    def apply(self, data: Iterator[Any]) -> Iterator[Any]:
        return cz.itertoolz.partition_all(self.size, data)


@dataclass(slots=True, frozen=True)
class GroupedUntil(Op):
    """Tuples of consecutive elements, each one closed by an element for which **predicate** holds."""

    predicate: Callable[[Any], bool]

    def apply(self, data: Iterator[Any]) -> Iterator[Any]:
        return map(tuple, mit.split_after(data, self.predicate))


@dataclass(slots=True, frozen=True)
class Sliding(Op):
    """Windows of `size` elements every `step` elements.

    A trailing window may be shorter, as is the only window of an input shorter than `size`.
    """

    size: int
    step: int

    def apply(self, data: Iterator[Any]) -> Iterator[Any]:
        def _strip(window: tuple[Any, ...]) -> tuple[Any, ...]:
            return tuple(item for item in window if item is not _MISSING)

        return map(_strip, mit.windowed(data, self.size, fillvalue=_MISSING, step=self.step))


@dataclass(slots=True, frozen=True)
class GroupBy(Op):
    """Buffering: `(key, tuple_of_values)` pairs, in first-seen key order."""

    key: Callable[[Any], Any]

    def apply(self, data: Iterator[Any]) -> Iterator[Any]:
        groups = cz.itertoolz.groupby(self.key, data)
        return ((key, tuple(values)) for key, values in groups.items())


@dataclass(slots=True, frozen=True)
class Intersperse(Op):
    value: Any

    def apply(self, data: Iterator[Any]) -> Iterator[Any]:
        return mit.intersperse(self.value, data)


@dataclass(slots=True, frozen=True)
class OnEmpty(Op):
    """Emits `supplier()` if, and only if, the upstream is empty."""

    supplier: Callable[[], Any]

    def apply(self, data: Iterator[Any]) -> Iterator[Any]:
        return _restored(data) or iter((self.supplier(),))


@dataclass(slots=True, frozen=True)
class OnEmptySwitch(Op):
    """Switches to the elements of `supplier()` if the upstream is empty."""

    supplier: Callable[[], Iterable[Any]]

    def apply(self, data: Iterator[Any]) -> Iterator[Any]:
        return _restored(data) or iter(self.supplier())


@dataclass(slots=True, frozen=True)
class OnEmptyRaise(Op):
    """Raises `supplier()` if the upstream is empty."""

    supplier: Callable[[], BaseException]

    def apply(self, data: Iterator[Any]) -> Iterator[Any]:
        restored = _restored(data)
        if restored is None:
            raise self.supplier()
        return restored


@dataclass(slots=True, frozen=True)
class Combine(Op):
    """Merges adjacent elements with **op** while **predicate** holds for the pair."""

    predicate: Callable[[Any, Any], bool]
    op: Callable[[Any, Any], Any]

    def apply(self, data: Iterator[Any]) -> Iterator[Any]:
        current = next(data, _MISSING)
        if current is _MISSING:
            return
        for item in data:
            if self.predicate(current, item):
                current = self.op(current, item)
            else:
                yield current
                current = item
        yield current


@dataclass(slots=True, frozen=True)
class Concat(Op):
    elements: tuple[Any, ...]

    def apply(self, data: Iterator[Any]) -> Iterator[Any]:
        return itertools.chain(data, self.elements)


@dataclass(slots=True, frozen=True)
class MinusEach(Op):
    """Removes the first occurrence of each listed element, once per listing."""

    elements: tuple[Any, ...]

    def apply(self, data: Iterator[Any]) -> Iterator[Any]:
        remaining = list(self.elements)
        for item in data:
            if item in remaining:
                remaining.remove(item)
            else:
                yield item


@dataclass(slots=True, frozen=True)
class Exclude(Op):
    """Removes every occurrence of the listed elements."""

    elements: tuple[Any, ...]

    def apply(self, data: Iterator[Any]) -> Iterator[Any]:
        return itertools.filterfalse(self.elements.__contains__, data)


@dataclass(slots=True, frozen=True)
class Retain(Op):
    """Keeps only the elements present in the listed ones."""

    elements: tuple[Any, ...]

    def apply(self, data: Iterator[Any]) -> Iterator[Any]:
        return filter(self.elements.__contains__, data)
