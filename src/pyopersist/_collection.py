from __future__ import annotations

import itertools
import operator
from collections.abc import AsyncIterable, Callable, Collection, Iterable, Iterator
from functools import partial
from typing import Any, Concatenate, Self, overload

import cytoolz as cz
import more_itertools as mit

from . import _builder, _ops
from ._core import Pipeable, get_config
from ._descriptors import VECTOR, CollectorDescriptor
from ._errors import IndexFault, LazyCollectionError
from ._handle import LazyHandle
from ._results import NONE, Err, Ok, Option, Result, Some
from ._source import FactoryProducer, IterableProducer, PublisherProducer


def _unfolded[S, V](state: S, unfolder: Callable[[S], Option[tuple[V, S]]]) -> Iterator[V]:
    current = state
    while True:
        match unfolder(current):
            case Some((value, current)):
                yield value
            case _:
                return


def _generated[V](limit: int, supplier: Callable[[], V]) -> Iterator[V]:
    for _ in range(limit):
        yield supplier()


def _iterated[V](limit: int, seed: V, func: Callable[[V], V]) -> Iterator[V]:
    return cz.itertoolz.take(limit, cz.itertoolz.iterate(func, seed))


def _check_non_negative(name: str, value: int) -> None:
    if value < 0:
        msg = f"{name} must be >= 0, got {value}"
        raise ValueError(msg)


def _check_positive(name: str, value: int) -> None:
    if value < 1:
        msg = f"{name} must be >= 1, got {value}"
        raise ValueError(msg)


class LazyCollection[T](Pipeable, Collection[T]):
    """An immutable collection whose transformations are deferred until it is observed.

    A `LazyCollection` pairs a `LazyHandle` (the elements, realized or pending) with a `CollectorDescriptor` (the persistent kind to materialize into: `VECTOR`, `STACK`, `QUEUE`, `SET` or `BAG`).

    - Transformations (`map`, `filter`, `flat_map`, `zip`, `sort`, ...) only record an operation and return a new collection.
    - Queries (`len`, indexing, iteration, `==`, `repr`, conversions) force the pipeline, exactly once per collection.
    - Structural updates (`plus`, `minus`, `set_at`, ...) force, then return a new collection: the receiver is never modified.

    Note:
        Forcing a collection built over an infinite producer never returns unless a bounding operation (`take`, `take_while`, `slice`, ...) was recorded first.

    Args:
        handle (LazyHandle[Any]): Source of the elements.
        kind (CollectorDescriptor): Persistent kind to materialize into.

    Example:
    ```python
    >>> import pyopersist as pp
    >>> seen = []
    >>> doubled = pp.LazyCollection.from_(1, 2, 3).peek(seen.append).map(lambda x: x * 2)
    >>> seen
    []
    >>> doubled
    Vector[2, 4, 6]
    >>> len(doubled), seen
    (3, [1, 2, 3])

    ```
    """

    __slots__ = ("_handle", "_kind")

    def __init__(self, handle: LazyHandle[Any], kind: CollectorDescriptor = VECTOR) -> None:
        self._handle = handle
        self._kind = kind

    # construction --------------------------------------------------------

    @staticmethod
    def new(kind: CollectorDescriptor = VECTOR) -> LazyCollection[Any]:
        """Create an empty, realized collection."""
        return LazyCollection(LazyHandle.realized(kind.adapter.empty(), kind.adapter), kind)

    @staticmethod
    def from_[U](*values: U, kind: CollectorDescriptor = VECTOR) -> LazyCollection[U]:
        """Create a realized collection from unpacked values.

        Args:
            *values (U): Elements of the collection, in order.
            kind (CollectorDescriptor): Persistent kind to build. Defaults to `VECTOR`.

        Returns:
            LazyCollection[U]: A realized collection.

        Example:
        ```python
        >>> import pyopersist as pp
        >>> pp.LazyCollection.from_(1, 2, 3)
        Vector[1, 2, 3]
        >>> pp.LazyCollection.from_(1, 2, kind=pp.QUEUE)
        Queue[1, 2]
        >>> pp.LazyCollection.from_(1, 1, 2, kind=pp.SET).size()
        2

        ```
        """
        value = _builder.build(kind.adapter, values)
        return LazyCollection(LazyHandle.realized(value, kind.adapter), kind)

    @staticmethod
    def once[U](value: U, kind: CollectorDescriptor = VECTOR) -> LazyCollection[U]:
        """Create a realized collection holding a single value."""
        return LazyCollection.from_(value, kind=kind)

    @staticmethod
    def from_iter[U](data: Iterable[U], kind: CollectorDescriptor = VECTOR) -> LazyCollection[U]:
        """Create a pending collection over any `Iterable`.

        Nothing is read from **data** before the collection is forced.

        A one-shot `Iterator` can be shared by several derived collections: what was read from it is replayed to the next one.

        A `LazyCollection` is returned as is, or converted if **kind** differs.

        Args:
            data (Iterable[U]): Elements of the collection.
            kind (CollectorDescriptor): Persistent kind to materialize into. Defaults to `VECTOR`.

        Returns:
            LazyCollection[U]: A pending collection.

        Example:
        ```python
        >>> import pyopersist as pp
        >>> letters = pp.LazyCollection.from_iter(iter("abc"))
        >>> letters.is_realized()
        False
        >>> letters.map(str.upper)
        Vector['A', 'B', 'C']
        >>> letters
        Vector['a', 'b', 'c']

        ```
        """
        match data:
            case LazyCollection():
                return data if data.kind == kind else data.to_kind(kind)
            case _:
                handle = LazyHandle.pending(IterableProducer(data), kind.adapter)
                return LazyCollection(handle, kind)

    @staticmethod
    def from_persistent[U](value: Any, kind: CollectorDescriptor = VECTOR) -> LazyCollection[U]:  # noqa: ANN401
        """Wrap an existing persistent structure of the given **kind**, without copying it.

        Example:
        ```python
        >>> import pyopersist as pp
        >>> from pyrsistent import pvector
        >>> pp.LazyCollection.from_persistent(pvector([1, 2])).plus(3).inner()
        pvector([1, 2, 3])

        ```
        """
        return LazyCollection(LazyHandle.realized(value, kind.adapter), kind)

    @staticmethod
    def from_publisher[U](
        publisher: AsyncIterable[U], kind: CollectorDescriptor = VECTOR
    ) -> LazyCollection[U]:
        """Create a pending collection over an async publisher.

        The first force blocks the calling thread until **publisher** completes, or until `Config.publisher_timeout` elapses.

        If the caller is already running an event loop, the publisher is drained on a private loop in a worker thread.

        Args:
            publisher (AsyncIterable[U]): Any async iterable, e.g. an async generator.
            kind (CollectorDescriptor): Persistent kind to materialize into. Defaults to `VECTOR`.

        Returns:
            LazyCollection[U]: A pending collection.

        Example:
        ```python
        >>> import pyopersist as pp
        >>> async def ticks():
        ...     for i in range(3):
        ...         yield i
        >>> pp.LazyCollection.from_publisher(ticks()).map(lambda x: x * 10)
        Vector[0, 10, 20]

        ```
        """
        handle = LazyHandle.pending(PublisherProducer(publisher), kind.adapter)
        return LazyCollection(handle, kind)

    @staticmethod
    def from_fn[S, V](
        state: S,
        unfolder: Callable[[S], Option[tuple[V, S]]],
        kind: CollectorDescriptor = VECTOR,
    ) -> LazyCollection[V]:
        """Unfold **state** into a pending collection.

        **unfolder** returns `Some((value, next_state))` to emit a value, or `NONE` to stop.

        Args:
            state (S): Initial state.
            unfolder (Callable[[S], Option[tuple[V, S]]]): Generation step.
            kind (CollectorDescriptor): Persistent kind to materialize into. Defaults to `VECTOR`.

        Returns:
            LazyCollection[V]: A pending collection.

        Example:
        ```python
        >>> import pyopersist as pp
        >>> def countdown(n: int) -> pp.Option[tuple[int, int]]:
        ...     return pp.Some((n, n - 1)) if n > 0 else pp.NONE
        >>> pp.LazyCollection.from_fn(3, countdown)
        Vector[3, 2, 1]

        ```
        """
        producer = FactoryProducer(partial(_unfolded, state, unfolder))
        return LazyCollection(LazyHandle.pending(producer, kind.adapter), kind)

    @staticmethod
    def generate[V](
        limit: int, supplier: Callable[[], V], kind: CollectorDescriptor = VECTOR
    ) -> LazyCollection[V]:
        """Create a pending collection of **limit** values returned by **supplier**.

        Example:
        ```python
        >>> import pyopersist as pp
        >>> pp.LazyCollection.generate(3, lambda: "x")
        Vector['x', 'x', 'x']

        ```
        """
        _check_non_negative("limit", limit)
        producer = FactoryProducer(partial(_generated, limit, supplier))
        return LazyCollection(LazyHandle.pending(producer, kind.adapter), kind)

    @staticmethod
    def iterate[V](
        limit: int, seed: V, func: Callable[[V], V], kind: CollectorDescriptor = VECTOR
    ) -> LazyCollection[V]:
        """Create a pending collection of **seed**, `func(seed)`, `func(func(seed))`, ... up to **limit** values.

        Example:
        ```python
        >>> import pyopersist as pp
        >>> pp.LazyCollection.iterate(5, 1, lambda i: i + 1)
        Vector[1, 2, 3, 4, 5]

        ```
        """
        _check_non_negative("limit", limit)
        producer = FactoryProducer(partial(_iterated, limit, seed, func))
        return LazyCollection(LazyHandle.pending(producer, kind.adapter), kind)

    @staticmethod
    def from_range(
        start: int, stop: int, step: int = 1, kind: CollectorDescriptor = VECTOR
    ) -> LazyCollection[int]:
        """Create a pending collection of the integers from **start** (inclusive) to **stop** (exclusive).

        Example:
        ```python
        >>> import pyopersist as pp
        >>> pp.LazyCollection.from_range(0, 10, 3)
        Vector[0, 3, 6, 9]

        ```
        """
        producer = FactoryProducer(partial(range, start, stop, step))
        return LazyCollection(LazyHandle.pending(producer, kind.adapter), kind)

    # internals -------------------------------------------------------------

    @property
    def kind(self) -> CollectorDescriptor:
        return self._kind

    @property
    def _adapter(self) -> Any:  # noqa: ANN401
        return self._kind.adapter

    def _force(self) -> Any:  # noqa: ANN401
        return self._handle.force()

    def _lazy[R](self, op: _ops.Op) -> LazyCollection[R]:
        return LazyCollection(self._handle.append(op), self._kind)

    def _eager[**P](
        self,
        func: Callable[Concatenate[Any, P], Any],
        *args: P.args,
        **kwargs: P.kwargs,
    ) -> Self:
        return self.__class__(self._handle.update(func, *args, **kwargs), self._kind)

    # dunders ---------------------------------------------------------------

    def __repr__(self) -> str:
        return get_config().collection_repr(self._kind.name, iter(self))

    def __iter__(self) -> Iterator[T]:
        return self._adapter.iterate(self._force())

    def __len__(self) -> int:
        return self._adapter.size(self._force())

    def __contains__(self, elem: object) -> bool:
        return self._adapter.contains(self._force(), elem)

    def __eq__(self, other: object) -> bool:
        """Force both sides, then compare kinds and elements.

        Ordered kinds compare lengths and elements pairwise, `SET` compares membership and `BAG` compares multiplicities.
        """
        if not isinstance(other, LazyCollection):
            return NotImplemented
        left, right = self._force(), other._force()
        return self._kind == other._kind and self._adapter.equals(left, right)

    def __hash__(self) -> int:
        return hash((self._kind.name, self._adapter.hash(self._force())))

    @overload
    def __getitem__(self, index: int) -> T: ...
    @overload
    def __getitem__(self, index: slice) -> LazyCollection[T]: ...
    def __getitem__(self, index: int | slice) -> T | LazyCollection[T]:
        match index:
            case slice():
                return self.slice(index.start, index.stop, index.step)
            case _:
                return self.get(index)

    # queries -----------------------------------------------------------

    def inner(self) -> Any:  # noqa: ANN401
        """Force, and return the underlying persistent structure."""
        return self._force()

    def is_realized(self) -> bool:
        """Check whether the collection is already materialized, without forcing it."""
        return self._handle.is_realized()

    def materialize(self) -> Self:
        """Force the pipeline now, and return `Self`.

        Example:
        ```python
        >>> import pyopersist as pp
        >>> data = pp.LazyCollection.from_range(0, 3)
        >>> data.is_realized()
        False
        >>> data.materialize().is_realized()
        True

        ```
        """
        self._force()
        return self

    def try_materialize(self) -> Result[Self, LazyCollectionError]:
        """Force the pipeline, returning engine faults as an `Err` instead of raising them.

        Exceptions raised by user callbacks are not engine faults, and still propagate.

        Example:
        ```python
        >>> import pyopersist as pp
        >>> def broken():
        ...     yield 1
        ...     raise OSError("connection lost")
        >>> pp.LazyCollection.from_iter(broken()).try_materialize().is_err()
        True

        ```
        """
        try:
            self._force()
        except LazyCollectionError as exc:
            return Err(exc)
        return Ok(self)

    def size(self) -> int:
        return len(self)

    def is_empty(self) -> bool:
        return len(self) == 0

    def contains(self, elem: object) -> bool:
        return elem in self

    def get(self, index: int) -> T:
        """Return the element at **index**.

        Args:
            index (int): Position, between 0 and `size() - 1`.

        Returns:
            T: The element.

        Raises:
            IndexFault: If **index** is out of range. Negative indexes are out of range.

        Example:
        ```python
        >>> import pyopersist as pp
        >>> data = pp.LazyCollection.from_(1, 2)
        >>> data.get(1)
        2
        >>> data[2]
        Traceback (most recent call last):
            ...
        pyopersist._errors.IndexFault: index 2 out of range for Vector of size 2

        ```
        """
        return self._adapter.get(self._force(), index)

    def get_option(self, index: int) -> Option[T]:
        """Return `Some(element)` at **index**, or `NONE` if out of range."""
        if 0 <= index < len(self):
            return Some(self.get(index))
        return NONE

    def first(self) -> Option[T]:
        return self.get_option(0)

    def last(self) -> Option[T]:
        return self.get_option(len(self) - 1)

    def index_of(self, elem: object) -> Option[int]:
        """Position of the first occurrence of **elem**, in iteration order.

        Example:
        ```python
        >>> import pyopersist as pp
        >>> data = pp.LazyCollection.from_("a", "b", "a")
        >>> data.index_of("a"), data.last_index_of("a"), data.index_of("z")
        (Some(value=0), Some(value=2), NONE)

        ```
        """
        return Option.from_(mit.first(mit.locate(self, partial(operator.eq, elem)), None))

    def last_index_of(self, elem: object) -> Option[int]:
        return Option.from_(mit.last(mit.locate(self, partial(operator.eq, elem)), None))

    def count(self, elem: object) -> int:
        return mit.quantify(self, partial(operator.eq, elem))

    def iter(self) -> Iterator[T]:
        return iter(self)

    def to_list(self) -> list[T]:
        return list(self)

    def to_tuple(self) -> tuple[T, ...]:
        return tuple(self)

    def to_kind(self, kind: CollectorDescriptor) -> LazyCollection[T]:
        """Materialize into another persistent kind. Doesn't force anything.

        Example:
        ```python
        >>> import pyopersist as pp
        >>> data = pp.LazyCollection.from_(3, 1, 3)
        >>> data.to_kind(pp.SET).size(), data.to_kind(pp.BAG).count(3)
        (2, 2)
        >>> data.to_kind(pp.STACK)
        Stack[3, 1, 3]

        ```
        """
        return LazyCollection(self._handle.retarget(kind.adapter), kind)

    def sub_list(self, start: int, stop: int) -> LazyCollection[T]:
        """Force, and return a realized copy of the elements from **start** to **stop** (exclusive).

        Raises:
            IndexFault: If the bounds are outside of `0 <= start <= stop <= size()`.
        """
        coll = self._force()
        size = self._adapter.size(coll)
        if not 0 <= start <= size:
            raise IndexFault(start, size, self._kind.name)
        if not start <= stop <= size:
            raise IndexFault(stop, size, self._kind.name)
        elements = itertools.islice(self._adapter.iterate(coll), start, stop)
        value = _builder.build(self._adapter, elements)
        return LazyCollection(LazyHandle.realized(value, self._adapter), self._kind)

    # structural updates --------------------------------------------------

    def plus(self, elem: T) -> Self:
        """Return a new collection with **elem** added at the natural position of the kind.

        Vectors and queues append at the end, stacks push on the front, sets and bags add by membership.

        Args:
            elem (T): Element to add.

        Returns:
            Self: A new, realized collection. The receiver is unchanged.

        Example:
        ```python
        >>> import pyopersist as pp
        >>> base = pp.LazyCollection.from_(1, 2)
        >>> base.plus(3)
        Vector[1, 2, 3]
        >>> base
        Vector[1, 2]
        >>> pp.LazyCollection.from_(1, 2, kind=pp.STACK).plus(3)
        Stack[3, 1, 2]

        ```
        """
        return self._eager(self._adapter.plus, elem)

    def plus_at(self, index: int, elem: T) -> Self:
        """Return a new collection with **elem** inserted before position **index**.

        Raises:
            IndexFault: If **index** is outside of `0 <= index <= size()`.
            UnsupportedOperationError: On unordered kinds.

        Example:
        ```python
        >>> import pyopersist as pp
        >>> pp.LazyCollection.from_(1, 3).plus_at(1, 2)
        Vector[1, 2, 3]

        ```
        """
        return self._eager(self._adapter.plus_at, index, elem)

    def minus(self, elem: object) -> Self:
        """Return a new collection without the first occurrence of **elem**.

        An absent element gives back an equal collection.

        Example:
        ```python
        >>> import pyopersist as pp
        >>> pp.LazyCollection.from_(1, 2, 1).minus(1)
        Vector[2, 1]
        >>> pp.LazyCollection.from_(1, 2).minus(5)
        Vector[1, 2]

        ```
        """
        return self._eager(self._adapter.minus, elem)

    def minus_at(self, index: int) -> Self:
        """Return a new collection without the element at **index**.

        Raises:
            IndexFault: If **index** is out of range.
            UnsupportedOperationError: On unordered kinds.
        """
        return self._eager(self._adapter.minus_at, index)

    def set_at(self, index: int, elem: T) -> Self:
        """Return a new collection with the element at **index** replaced by **elem**.

        Raises:
            IndexFault: If **index** is out of range.
            UnsupportedOperationError: On unordered kinds.

        Example:
        ```python
        >>> import pyopersist as pp
        >>> pp.LazyCollection.from_(1, 2, 3).set_at(0, 9)
        Vector[9, 2, 3]

        ```
        """
        return self._eager(self._adapter.set_at, index, elem)

    def plus_all(self, elems: Iterable[T]) -> Self:
        """Return a new collection with every element of **elems** added, as with repeated `plus`."""
        return self._eager(self._adapter.plus_all, elems)

    def plus_all_at(self, index: int, elems: Iterable[T]) -> Self:
        """Return a new collection with the elements of **elems** inserted, in order, before position **index**.

        Raises:
            IndexFault: If **index** is outside of `0 <= index <= size()`.
            UnsupportedOperationError: On unordered kinds.

        Example:
        ```python
        >>> import pyopersist as pp
        >>> pp.LazyCollection.from_(1, 4).plus_all_at(1, [2, 3])
        Vector[1, 2, 3, 4]
        >>> pp.LazyCollection.from_(1, 4, kind=pp.STACK).plus_all_at(2, "ab")
        Stack[1, 4, 'a', 'b']

        ```
        """
        return self._eager(self._adapter.plus_all_at, index, elems)

    def minus_all(self, elems: Iterable[object]) -> Self:
        """Return a new collection with one occurrence removed per element of **elems**, as with repeated `minus`.

        Example:
        ```python
        >>> import pyopersist as pp
        >>> pp.LazyCollection.from_(1, 2, 1, 3, 1).minus_all([1, 1, 4])
        Vector[2, 3, 1]

        ```
        """
        return self._eager(self._adapter.minus_all, elems)

    def plus_loop(self, times: int, generator: Callable[[int], T]) -> Self:
        """Return a new collection extended with `generator(i)` for each `i` in `range(times)`.

        The kind's bulk constructor is used when it has one. Elements are added in encounter order, whatever the kind.

        Example:
        ```python
        >>> import pyopersist as pp
        >>> pp.LazyCollection.from_(0).plus_loop(3, lambda i: i * 10)
        Vector[0, 0, 10, 20]

        ```
        """
        return self._eager(partial(_builder.plus_loop, self._adapter), times, generator)

    def plus_loop_supplier(self, supplier: Callable[[], Option[T]]) -> Self:
        """Return a new collection extended with the values of **supplier**, until it returns `NONE`.

        Example:
        ```python
        >>> import pyopersist as pp
        >>> pending = iter(["a", "b"])
        >>> def next_letter() -> pp.Option[str]:
        ...     return pp.Option.from_(next(pending, None))
        >>> pp.LazyCollection.new().plus_loop_supplier(next_letter)
        Vector['a', 'b']

        ```
        """
        return self._eager(partial(_builder.plus_loop_supplier, self._adapter), supplier)

    # lazy transformations ----------------------------------------------------

    def map[R](self, func: Callable[[T], R]) -> LazyCollection[R]:
        """Apply **func** to each element.

        Example:
        ```python
        >>> import pyopersist as pp
        >>> pp.LazyCollection.from_(1, 2, 3).map(lambda i: i * 2)
        Vector[2, 4, 6]

        ```
        """
        return self._lazy(_ops.Map(func))

    def filter(self, predicate: Callable[[T], bool]) -> LazyCollection[T]:
        """Keep the elements for which **predicate** is true.

        Example:
        ```python
        >>> import pyopersist as pp
        >>> pp.LazyCollection.from_range(0, 6).filter(lambda x: x % 2 == 0)
        Vector[0, 2, 4]

        ```
        """
        return self._lazy(_ops.Filter(predicate))

    def filter_not(self, predicate: Callable[[T], bool]) -> LazyCollection[T]:
        return self._lazy(_ops.Filter(cz.functoolz.complement(predicate)))

    def not_none[U](self: LazyCollection[U | None]) -> LazyCollection[U]:
        return self._lazy(_ops.Filter(partial(operator.is_not, None)))

    def flat_map[R](self, func: Callable[[T], Iterable[R]]) -> LazyCollection[R]:
        """Map each element to an iterable, and flatten the results by exactly one level.

        Example:
        ```python
        >>> import pyopersist as pp
        >>> pp.LazyCollection.from_(1, 2).flat_map(lambda i: pp.LazyCollection.from_(i, i))
        Vector[1, 1, 2, 2]
        >>> pp.LazyCollection.from_(1, 2).flat_map(lambda i: [[i]])
        Vector[[1], [2]]

        ```
        """
        return self._lazy(_ops.FlatMap(func))

    def slice(
        self, start: int | None = None, stop: int | None = None, step: int | None = None
    ) -> LazyCollection[T]:
        """Keep a slice of the elements, with the semantics of Python slices.

        Example:
        ```python
        >>> import pyopersist as pp
        >>> data = pp.LazyCollection.from_range(0, 10)
        >>> data.slice(2, 8, 2)
        Vector[2, 4, 6]
        >>> data[-2:]
        Vector[8, 9]

        ```
        """
        if step == 0:
            msg = "slice step cannot be zero"
            raise ValueError(msg)
        return self._lazy(_ops.Slice(start, stop, step))

    def take(self, n: int) -> LazyCollection[T]:
        """Keep the first **n** elements, or fewer if the collection is shorter.

        Example:
        ```python
        >>> import pyopersist as pp
        >>> pp.LazyCollection.from_fn(0, lambda n: pp.Some((n, n + 1))).take(3)
        Vector[0, 1, 2]

        ```
        """
        _check_non_negative("n", n)
        return self._lazy(_ops.Take(n))

    def drop(self, n: int) -> LazyCollection[T]:
        _check_non_negative("n", n)
        return self._lazy(_ops.Drop(n))

    def take_right(self, n: int) -> LazyCollection[T]:
        """Keep the last **n** elements.

        Example:
        ```python
        >>> import pyopersist as pp
        >>> data = pp.LazyCollection.from_range(0, 5)
        >>> data.take_right(2), data.drop_right(2)
        (Vector[3, 4], Vector[0, 1, 2])

        ```
        """
        _check_non_negative("n", n)
        return self._lazy(_ops.TakeRight(n))

    def drop_right(self, n: int) -> LazyCollection[T]:
        _check_non_negative("n", n)
        return self._lazy(_ops.DropRight(n))

    def take_while(self, predicate: Callable[[T], bool]) -> LazyCollection[T]:
        """Keep elements while **predicate** holds, stopping at the first failure.

        Example:
        ```python
        >>> import pyopersist as pp
        >>> data = pp.LazyCollection.from_(1, 2, 5, 1)
        >>> data.take_while(lambda x: x < 3), data.drop_while(lambda x: x < 3)
        (Vector[1, 2], Vector[5, 1])

        ```
        """
        return self._lazy(_ops.TakeWhile(predicate))

    def drop_while(self, predicate: Callable[[T], bool]) -> LazyCollection[T]:
        return self._lazy(_ops.DropWhile(predicate))

    def take_until(self, predicate: Callable[[T], bool]) -> LazyCollection[T]:
        """Keep elements until **predicate** holds for the first time (excluded)."""
        return self._lazy(_ops.TakeWhile(cz.functoolz.complement(predicate)))

    def drop_until(self, predicate: Callable[[T], bool]) -> LazyCollection[T]:
        """Drop elements until **predicate** holds for the first time (included in the result)."""
        return self._lazy(_ops.DropWhile(cz.functoolz.complement(predicate)))

    @overload
    def zip[T1](self, iter1: Iterable[T1], /) -> LazyCollection[tuple[T, T1]]: ...
    @overload
    def zip[T1, T2](
        self, iter1: Iterable[T1], iter2: Iterable[T2], /
    ) -> LazyCollection[tuple[T, T1, T2]]: ...
    @overload
    def zip(self, *others: Iterable[Any]) -> LazyCollection[tuple[Any, ...]]: ...
    def zip(self, *others: Iterable[Any]) -> LazyCollection[tuple[Any, ...]]:
        """Pair elements with those of **others**, truncating to the shortest input.

        Other collections are only iterated (hence forced) when `Self` is.
        A one-shot iterator among **others** is read once, then replayed to every collection derived from this one.

        Example:
        ```python
        >>> import pyopersist as pp
        >>> pp.LazyCollection.from_(1, 2, 3).zip(pp.LazyCollection.from_("a", "b"))
        Vector[(1, 'a'), (2, 'b')]

        ```
        """
        return self._lazy(_ops.Zip(tuple(map(IterableProducer, others))))

    def zip_with[U, R](
        self, other: Iterable[U], func: Callable[[T, U], R]
    ) -> LazyCollection[R]:
        """Combine elements pairwise with **func**, truncating to the shortest input."""
        return self._lazy(_ops.ZipWith(IterableProducer(other), func))

    def zip_with_index(self) -> LazyCollection[tuple[T, int]]:
        """Pair each element with its position.

        Example:
        ```python
        >>> import pyopersist as pp
        >>> pp.LazyCollection.from_("a", "b").zip_with_index()
        Vector[('a', 0), ('b', 1)]

        ```
        """
        return self._lazy(_ops.ZipWithIndex())

    def scan[U](self, seed: U, func: Callable[[U, T], U]) -> LazyCollection[U]:
        """Emit **seed**, then each running accumulation of `func(acc, element)`.

        Example:
        ```python
        >>> import pyopersist as pp
        >>> pp.LazyCollection.from_(1, 2, 3).scan(0, lambda acc, x: acc + x)
        Vector[0, 1, 3, 6]

        ```
        """
        return self._lazy(_ops.Scan(seed, func))

    def scan_right[U](self, seed: U, func: Callable[[T, U], U]) -> LazyCollection[U]:
        """Accumulate `func(element, acc)` from the right, each element getting the accumulation of itself and what follows.

        The last element of the result is **seed**. Buffers the whole collection when forced.

        Example:
        ```python
        >>> import pyopersist as pp
        >>> pp.LazyCollection.from_(1, 2, 3).scan_right(0, lambda x, acc: x + acc)
        Vector[6, 5, 3, 0]
        >>> pp.LazyCollection.from_("a", "b").scan_right("", lambda x, acc: acc + x)
        Vector['ba', 'b', '']

        ```
        """
        return self._lazy(_ops.ScanRight(seed, func))

    def sort(
        self, key: Callable[[T], Any] | None = None, *, reverse: bool = False
    ) -> LazyCollection[T]:
        """Sort the elements. Buffers the whole collection when forced.

        Example:
        ```python
        >>> import pyopersist as pp
        >>> pp.LazyCollection.from_("bb", "a", "ccc").sort(len, reverse=True)
        Vector['ccc', 'bb', 'a']

        ```
        """
        return self._lazy(_ops.Sort(key, reverse))

    def distinct(self, key: Callable[[T], Any] | None = None) -> LazyCollection[T]:
        """Keep the first occurrence of each element, or of each **key**.

        Example:
        ```python
        >>> import pyopersist as pp
        >>> pp.LazyCollection.from_(1, 2, 1, 3, 2).distinct()
        Vector[1, 2, 3]

        ```
        """
        return self._lazy(_ops.Distinct(key))

    def peek(self, action: Callable[[T], object]) -> LazyCollection[T]:
        """Call **action** on each element as it passes through, when forced.

        **action** runs once per element per collection, however many times the collection is queried.
        """
        return self._lazy(_ops.Peek(action))

    def reverse(self) -> LazyCollection[T]:
        return self._lazy(_ops.Reverse())

    def shuffle(self, seed: int | None = None) -> LazyCollection[T]:
        """Shuffle the elements. Only deterministic when **seed** is given.

        Example:
        ```python
        >>> import pyopersist as pp
        >>> data = pp.LazyCollection.from_range(0, 20)
        >>> data.shuffle(7) == data.shuffle(7)
        True
        >>> sorted(data.shuffle()) == data.to_list()
        True

        ```
        """
        return self._lazy(_ops.Shuffle(seed))

    def cycle(self, times: int) -> LazyCollection[T]:
        """Repeat the whole collection **times** times.

        Example:
        ```python
        >>> import pyopersist as pp
        >>> pp.LazyCollection.from_(1, 2).cycle(2)
        Vector[1, 2, 1, 2]

        ```
        """
        _check_non_negative("times", times)
        return self._lazy(_ops.Cycle(times))

    def cycle_while(self, predicate: Callable[[T], bool]) -> LazyCollection[T]:
        """Repeat the collection for as long as **predicate** holds for the next element.

        Note:
            Never terminates if **predicate** holds for every element of a non-empty collection.
        """
        return self._lazy(_ops.CycleWhile(predicate))

    def cycle_until(self, predicate: Callable[[T], bool]) -> LazyCollection[T]:
        """Repeat the collection until **predicate** holds for the next element, which is excluded.

        Example:
        ```python
        >>> import pyopersist as pp
        >>> import itertools
        >>> calls = itertools.count()
        >>> pp.LazyCollection.from_(1, 2, 3).cycle_until(lambda _: next(calls) == 5)
        Vector[1, 2, 3, 1, 2]

        ```
        """
        return self._lazy(_ops.CycleWhile(cz.functoolz.complement(predicate)))

    def grouped(self, size: int) -> LazyCollection[tuple[T, ...]]:
        """Group consecutive elements into tuples of **size**, the last one possibly shorter.

        Example:
        ```python
        >>> import pyopersist as pp
        >>> pp.LazyCollection.from_range(0, 5).grouped(2)
        Vector[(0, 1), (2, 3), (4,)]

        ```
        """
        _check_positive("size", size)
        return self._lazy(_ops.Grouped(size))

    def grouped_while(self, predicate: Callable[[T], bool]) -> LazyCollection[tuple[T, ...]]:
        """Group consecutive elements while **predicate** holds.

        The first element failing **predicate** is the last one of its group.

        Example:
        ```python
        >>> import pyopersist as pp
        >>> pp.LazyCollection.from_range(1, 8).grouped_while(lambda x: x % 3 != 0)
        Vector[(1, 2, 3), (4, 5, 6), (7,)]

        ```
        """
        return self._lazy(_ops.GroupedUntil(cz.functoolz.complement(predicate)))

    def grouped_until(self, predicate: Callable[[T], bool]) -> LazyCollection[tuple[T, ...]]:
        """Group consecutive elements until **predicate** holds, the matching element closing its group.

        Example:
        ```python
        >>> import pyopersist as pp
        >>> pp.LazyCollection.from_("a", "b.", "c", "d.").grouped_until(lambda s: s.endswith("."))
        Vector[('a', 'b.'), ('c', 'd.')]

        ```
        """
        return self._lazy(_ops.GroupedUntil(predicate))

    def sliding(self, size: int, step: int = 1) -> LazyCollection[tuple[T, ...]]:
        """Windows of **size** elements, starting every **step** elements.

        A collection shorter than **size** yields a single, shorter window.

        Example:
        ```python
        >>> import pyopersist as pp
        >>> pp.LazyCollection.from_range(0, 4).sliding(2)
        Vector[(0, 1), (1, 2), (2, 3)]
        >>> pp.LazyCollection.from_(1).sliding(3)
        Vector[(1,)]

        ```
        """
        _check_positive("size", size)
        _check_positive("step", step)
        return self._lazy(_ops.Sliding(size, step))

    def group_by[K](self, key: Callable[[T], K]) -> LazyCollection[tuple[K, tuple[T, ...]]]:
        """Group elements by **key**, as `(key, values)` pairs in first-seen key order.

        Example:
        ```python
        >>> import pyopersist as pp
        >>> pp.LazyCollection.from_(1, 2, 3, 4).group_by(lambda x: x % 2)
        Vector[(1, (1, 3)), (0, (2, 4))]

        ```
        """
        return self._lazy(_ops.GroupBy(key))

    def intersperse(self, value: T) -> LazyCollection[T]:
        """Insert **value** between each pair of elements.

        Example:
        ```python
        >>> import pyopersist as pp
        >>> pp.LazyCollection.from_(1, 2, 3).intersperse(0)
        Vector[1, 0, 2, 0, 3]

        ```
        """
        return self._lazy(_ops.Intersperse(value))

    def on_empty(self, value: T) -> LazyCollection[T]:
        """Hold **value** alone if the collection turns out to be empty.

        Example:
        ```python
        >>> import pyopersist as pp
        >>> pp.LazyCollection.new().on_empty(42), pp.LazyCollection.from_(1).on_empty(42)
        (Vector[42], Vector[1])

        ```
        """
        return self._lazy(_ops.OnEmpty(partial(cz.functoolz.identity, value)))

    def on_empty_get(self, supplier: Callable[[], T]) -> LazyCollection[T]:
        """Like `on_empty`, but the value is only computed when needed."""
        return self._lazy(_ops.OnEmpty(supplier))

    def on_empty_switch(self, supplier: Callable[[], Iterable[T]]) -> LazyCollection[T]:
        """Hold the elements of `supplier()` instead if the collection turns out to be empty.

        Example:
        ```python
        >>> import pyopersist as pp
        >>> pp.LazyCollection.new().on_empty_switch(lambda: range(3))
        Vector[0, 1, 2]

        ```
        """
        return self._lazy(_ops.OnEmptySwitch(supplier))

    def on_empty_raise(self, supplier: Callable[[], BaseException]) -> LazyCollection[T]:
        """Raise `supplier()` when forced, if the collection turns out to be empty.

        The exception is raised by every query until the collection holds elements, as with any failing callback.

        Example:
        ```python
        >>> import pyopersist as pp
        >>> pp.LazyCollection.from_(1).on_empty_raise(LookupError)
        Vector[1]
        >>> pp.LazyCollection.new().on_empty_raise(lambda: LookupError("no rows")).size()
        Traceback (most recent call last):
            ...
        LookupError: no rows

        ```
        """
        return self._lazy(_ops.OnEmptyRaise(supplier))

    def combine(
        self, predicate: Callable[[T, T], bool], op: Callable[[T, T], T]
    ) -> LazyCollection[T]:
        """Merge adjacent elements with **op** while **predicate** holds for the running value and the next element.

        Example:
        ```python
        >>> import pyopersist as pp
        >>> pp.LazyCollection.from_(1, 1, 2, 2, 2, 1).combine(lambda a, b: a == b, lambda a, _: a)
        Vector[1, 2, 1]

        ```
        """
        return self._lazy(_ops.Combine(predicate, op))

    def plus_lazy(self, elem: T) -> LazyCollection[T]:
        """Append **elem** when forced, without forcing now."""
        return self._lazy(_ops.Concat((elem,)))

    def plus_all_lazy(self, elems: Iterable[T]) -> LazyCollection[T]:
        return self._lazy(_ops.Concat(tuple(elems)))

    def minus_lazy(self, elem: object) -> LazyCollection[T]:
        """Remove the first occurrence of **elem** when forced, without forcing now."""
        return self._lazy(_ops.MinusEach((elem,)))

    def minus_all_lazy(self, elems: Iterable[object]) -> LazyCollection[T]:
        return self._lazy(_ops.MinusEach(tuple(elems)))

    def remove_all(self, elems: Iterable[object]) -> LazyCollection[T]:
        """Remove every occurrence of each element of **elems**.

        Example:
        ```python
        >>> import pyopersist as pp
        >>> data = pp.LazyCollection.from_(1, 2, 1, 3)
        >>> data.remove_all([1]), data.retain_all([1, 3])
        (Vector[2, 3], Vector[1, 1, 3])

        ```
        """
        return self._lazy(_ops.Exclude(tuple(elems)))

    def retain_all(self, elems: Iterable[object]) -> LazyCollection[T]:
        """Keep only the elements present in **elems**."""
        return self._lazy(_ops.Retain(tuple(elems)))
