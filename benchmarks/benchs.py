"""Benchmark cases for pyopersist developments.

- `build`: materializing through each kind's bulk constructor, against the fold over `plus`.
- `pipeline`: one fused drain of a `depth`-step chain, against materializing after every step.
- `query`: lookups on realized collections.
"""

import functools
from typing import Any

import pyopersist as pp

from ._registery import BenchFn, register

ALL_KINDS = (pp.VECTOR, pp.STACK, pp.QUEUE, pp.SET, pp.BAG)


def _fold_only(kind: pp.CollectorDescriptor) -> pp.CollectorDescriptor:
    class _FoldOnly(type(kind.adapter)):
        __slots__ = ()

        def bulk_builder(self) -> pp.Option[Any]:
            return pp.NONE

    return pp.CollectorDescriptor(kind.name, _FoldOnly())


BOTH_PATHS = (*ALL_KINDS, *map(_fold_only, ALL_KINDS))


def _triple(i: int) -> int:
    return i * 3


def _step(data: pp.LazyCollection[int], _: int) -> pp.LazyCollection[int]:
    return data.map(_triple).filter(lambda x: x % 2 == 0)


# build
# ------------------------------------------------------------


@register("build", kinds=BOTH_PATHS)
def from_iter(kind: pp.CollectorDescriptor, size: int, _depth: int) -> BenchFn:
    data = tuple(range(size))
    return lambda: pp.LazyCollection.from_iter(data, kind).inner()


@register("build", kinds=BOTH_PATHS)
def plus_loop(kind: pp.CollectorDescriptor, size: int, _depth: int) -> BenchFn:
    base = pp.LazyCollection.new(kind)
    return lambda: base.plus_loop(size, _triple).inner()


@register("build", kinds=ALL_KINDS, sizes=(1_000, 10_000))
def repeated_plus(kind: pp.CollectorDescriptor, size: int, _depth: int) -> BenchFn:
    """One realized collection per element, as a loop over `plus` would do."""
    base = pp.LazyCollection.new(kind)
    return lambda: functools.reduce(lambda acc, i: acc.plus(i), range(size), base).inner()


# pipeline
# ------------------------------------------------------------


@register("pipeline", depths=(1, 4, 16))
def fused(kind: pp.CollectorDescriptor, size: int, depth: int) -> BenchFn:
    data = pp.LazyCollection.from_iter(range(size), kind)
    return lambda: functools.reduce(_step, range(depth), data).inner()


@register("pipeline", depths=(1, 4, 16))
def stepwise(kind: pp.CollectorDescriptor, size: int, depth: int) -> BenchFn:
    data = pp.LazyCollection.from_iter(range(size), kind)
    return lambda: functools.reduce(
        lambda acc, i: _step(acc, i).materialize(), range(depth), data
    ).inner()


# query
# ------------------------------------------------------------


@register("query")
def indexed_get(kind: pp.CollectorDescriptor, size: int, _depth: int) -> BenchFn:
    data = pp.LazyCollection.from_iter(range(size), kind).materialize()
    return lambda: [data.get(i) for i in range(0, size, 97)]


@register("query", kinds=ALL_KINDS)
def membership(kind: pp.CollectorDescriptor, size: int, _depth: int) -> BenchFn:
    data = pp.LazyCollection.from_iter(range(size), kind).materialize()
    return lambda: sum(1 for x in range(0, 2 * size, 7) if x in data)


@register("query", kinds=ALL_KINDS)
def repeated_len(kind: pp.CollectorDescriptor, size: int, _depth: int) -> BenchFn:
    data = pp.LazyCollection.from_iter(range(size), kind).materialize()
    return lambda: [len(data) for _ in range(100)]
