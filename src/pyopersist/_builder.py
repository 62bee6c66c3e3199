"""Bulk construction of persistent structures.

Every function asks the adapter for its specialized bulk constructor, and folds `plus` over the elements when the kind has none.
For kinds whose `plus` prepends, the fold runs twice over reversed sequences, so it stays linear.
Both paths add elements in encounter order and produce equal structures: the choice only changes the cost.
"""

from __future__ import annotations

import functools
from collections.abc import Callable, Iterable, Iterator
from typing import TYPE_CHECKING

from ._results import Option, Some

if TYPE_CHECKING:
    from ._adapters import PersistentCollectionAdapter


def extend[C, T](
    adapter: PersistentCollectionAdapter[C, T], base: C, elements: Iterable[T]
) -> C:
    match adapter.bulk_builder():
        case Some(bulk):
            return bulk(base, elements)
        case _:
            return _fold(adapter, base, elements)


def _fold[C, T](adapter: PersistentCollectionAdapter[C, T], base: C, elements: Iterable[T]) -> C:
    if not adapter.prepends:
        return functools.reduce(adapter.plus, elements, base)
    # Pushing the new elements, then the old ones, each in reverse.
    backwards = functools.reduce(adapter.plus, elements, adapter.empty())
    result = functools.reduce(adapter.plus, adapter.iterate(backwards), adapter.empty())
    base_backwards = functools.reduce(adapter.plus, adapter.iterate(base), adapter.empty())
    return functools.reduce(adapter.plus, adapter.iterate(base_backwards), result)


def build[C, T](adapter: PersistentCollectionAdapter[C, T], elements: Iterable[T]) -> C:
    return extend(adapter, adapter.empty(), elements)


def plus_loop[C, T](
    adapter: PersistentCollectionAdapter[C, T],
    base: C,
    times: int,
    generator: Callable[[int], T],
) -> C:
    """Extend **base** with `generator(0) ... generator(times - 1)`, calling it exactly **times** times."""
    if times < 0:
        msg = f"times must be >= 0, got {times}"
        raise ValueError(msg)
    return extend(adapter, base, map(generator, range(times)))


def plus_loop_supplier[C, T](
    adapter: PersistentCollectionAdapter[C, T],
    base: C,
    supplier: Callable[[], Option[T]],
) -> C:
    """Extend **base** with the values of **supplier**, stopping at the first `NONE`."""
    return extend(adapter, base, _until_none(supplier))


def _until_none[T](supplier: Callable[[], Option[T]]) -> Iterator[T]:
    while True:
        match supplier():
            case Some(value):
                yield value
            case _:
                return
