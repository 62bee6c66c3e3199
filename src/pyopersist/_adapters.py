"""Persistent collection kinds, backed by `pyrsistent`.

Every kind implements the `PersistentCollectionAdapter` capability set.
Every update returns a new structure, and the receiver is never touched.

| Kind   | Structure | Ordered | `plus` position | Positional updates |
|--------|-----------|---------|-----------------|--------------------|
| Vector | `PVector` | yes     | end             | yes                |
| Stack  | `PList`   | yes     | front           | yes                |
| Queue  | `PDeque`  | yes     | end             | yes                |
| Set    | `PSet`    | no      | n/a             | no                 |
| Bag    | `PBag`    | no      | n/a             | no                 |
"""

from __future__ import annotations

import functools
import operator
from collections.abc import Callable, Iterable, Iterator
from typing import Any, Protocol

import more_itertools as mit
from pyrsistent import PBag, PDeque, PList, PSet, PVector, pbag, pdeque, plist, pset, pvector

from ._errors import IndexFault, UnsupportedOperationError
from ._results import Option, Some

type BulkBuilder[C, T] = Callable[[C, Iterable[T]], C]
"""Extends a structure with many elements at once, in encounter order."""


class PersistentCollectionAdapter[C, T](Protocol):
    """Capability set shared by every persistent collection kind."""

    name: str
    ordered: bool
    prepends: bool
    """Whether `plus` adds in front of the existing elements."""

    def empty(self) -> C: ...
    def size(self, coll: C) -> int: ...
    def get(self, coll: C, index: int) -> T: ...
    def contains(self, coll: C, elem: object) -> bool: ...
    def iterate(self, coll: C) -> Iterator[T]: ...
    def plus(self, coll: C, elem: T) -> C:
        """Add **elem** at the natural position of the kind."""
        ...

    def plus_at(self, coll: C, index: int, elem: T) -> C: ...
    def plus_all_at(self, coll: C, index: int, elems: Iterable[T]) -> C: ...
    def minus(self, coll: C, elem: object) -> C:
        """Remove one occurrence of **elem**. An absent element leaves an equal structure."""
        ...

    def minus_at(self, coll: C, index: int) -> C: ...
    def set_at(self, coll: C, index: int, elem: T) -> C: ...
    def plus_all(self, coll: C, elems: Iterable[T]) -> C: ...
    def minus_all(self, coll: C, elems: Iterable[object]) -> C: ...
    def equals(self, left: C, right: C) -> bool: ...
    def hash(self, coll: C) -> int: ...
    def bulk_builder(self) -> Option[BulkBuilder[C, T]]:
        """The specialized bulk constructor of the kind, if it has one."""
        ...


def _check_index(kind: str, size: int, index: int, *, inclusive: bool = False) -> None:
    upper = size + 1 if inclusive else size
    if not 0 <= index < upper:
        raise IndexFault(index, size, kind)


def _unsupported(kind: str, operation: str) -> UnsupportedOperationError:
    return UnsupportedOperationError(f"{kind} is unordered and doesn't support `{operation}`")


def _ordered_equals(left: Iterable[Any], right: Iterable[Any]) -> bool:
    return all(map(operator.eq, left, right))


def _with_inserted[T](items: Iterable[T], index: int, elem: T) -> list[T]:
    buffer = list(items)
    buffer.insert(index, elem)
    return buffer


def _with_inserted_all[T](items: Iterable[T], index: int, elems: Iterable[T]) -> list[T]:
    buffer = list(items)
    buffer[index:index] = elems
    return buffer


def _with_replaced[T](items: Iterable[T], index: int, elem: T) -> list[T]:
    buffer = list(items)
    buffer[index] = elem
    return buffer


def _with_deleted[T](items: Iterable[T], index: int) -> list[T]:
    buffer = list(items)
    del buffer[index]
    return buffer


class VectorAdapter:
    """`PVector`: O(log32 n) indexed access and updates, appends at the end."""

    __slots__ = ()
    name = "Vector"
    ordered = True
    prepends = False

    def empty(self) -> PVector[Any]:
        return pvector()

    def size(self, coll: PVector[Any]) -> int:
        return len(coll)

    def get(self, coll: PVector[Any], index: int) -> Any:
        _check_index(self.name, len(coll), index)
        return coll[index]

    def contains(self, coll: PVector[Any], elem: object) -> bool:
        return elem in coll

    def iterate(self, coll: PVector[Any]) -> Iterator[Any]:
        return iter(coll)

    def plus(self, coll: PVector[Any], elem: Any) -> PVector[Any]:
        return coll.append(elem)

    def plus_at(self, coll: PVector[Any], index: int, elem: Any) -> PVector[Any]:
        _check_index(self.name, len(coll), index, inclusive=True)
        if index == len(coll):
            return coll.append(elem)
        return coll[:index].append(elem).extend(coll[index:])

    def plus_all_at(self, coll: PVector[Any], index: int, elems: Iterable[Any]) -> PVector[Any]:
        _check_index(self.name, len(coll), index, inclusive=True)
        return coll[:index].extend(elems).extend(coll[index:])

    def minus(self, coll: PVector[Any], elem: object) -> PVector[Any]:
        try:
            return coll.remove(elem)
        except ValueError:
            return coll

    def minus_at(self, coll: PVector[Any], index: int) -> PVector[Any]:
        _check_index(self.name, len(coll), index)
        return coll.delete(index)

    def set_at(self, coll: PVector[Any], index: int, elem: Any) -> PVector[Any]:
        _check_index(self.name, len(coll), index)
        return coll.set(index, elem)

    def plus_all(self, coll: PVector[Any], elems: Iterable[Any]) -> PVector[Any]:
        return coll.extend(elems)

    def minus_all(self, coll: PVector[Any], elems: Iterable[object]) -> PVector[Any]:
        return functools.reduce(self.minus, elems, coll)

    def equals(self, left: PVector[Any], right: PVector[Any]) -> bool:
        return len(left) == len(right) and _ordered_equals(left, right)

    def hash(self, coll: PVector[Any]) -> int:
        return hash(coll)

    def bulk_builder(self) -> Option[BulkBuilder[PVector[Any], Any]]:
        return Some(_extend_vector)


def _extend_vector(base: PVector[Any], elems: Iterable[Any]) -> PVector[Any]:
    return base.extend(elems)


class StackAdapter:
    """`PList`: a cons list. `plus` pushes on the front, indexed operations are linear."""

    __slots__ = ()
    name = "Stack"
    ordered = True
    prepends = True

    def empty(self) -> PList[Any]:
        return plist()

    def size(self, coll: PList[Any]) -> int:
        return len(coll)

    def get(self, coll: PList[Any], index: int) -> Any:
        _check_index(self.name, len(coll), index)
        return coll[index]

    def contains(self, coll: PList[Any], elem: object) -> bool:
        return elem in coll

    def iterate(self, coll: PList[Any]) -> Iterator[Any]:
        return iter(coll)

    def plus(self, coll: PList[Any], elem: Any) -> PList[Any]:
        return coll.cons(elem)

    def plus_at(self, coll: PList[Any], index: int, elem: Any) -> PList[Any]:
        _check_index(self.name, len(coll), index, inclusive=True)
        if index == 0:
            return coll.cons(elem)
        return plist(_with_inserted(coll, index, elem))

    def plus_all_at(self, coll: PList[Any], index: int, elems: Iterable[Any]) -> PList[Any]:
        _check_index(self.name, len(coll), index, inclusive=True)
        return plist(_with_inserted_all(coll, index, elems))

    def minus(self, coll: PList[Any], elem: object) -> PList[Any]:
        try:
            return coll.remove(elem)
        except ValueError:
            return coll

    def minus_at(self, coll: PList[Any], index: int) -> PList[Any]:
        _check_index(self.name, len(coll), index)
        if index == 0:
            return coll.rest
        return plist(_with_deleted(coll, index))

    def set_at(self, coll: PList[Any], index: int, elem: Any) -> PList[Any]:
        _check_index(self.name, len(coll), index)
        return plist(_with_replaced(coll, index, elem))

    def plus_all(self, coll: PList[Any], elems: Iterable[Any]) -> PList[Any]:
        return coll.mcons(elems)

    def minus_all(self, coll: PList[Any], elems: Iterable[object]) -> PList[Any]:
        return functools.reduce(self.minus, elems, coll)

    def equals(self, left: PList[Any], right: PList[Any]) -> bool:
        return len(left) == len(right) and _ordered_equals(left, right)

    def hash(self, coll: PList[Any]) -> int:
        return hash(tuple(coll))

    def bulk_builder(self) -> Option[BulkBuilder[PList[Any], Any]]:
        return Some(_extend_stack)


def _extend_stack(base: PList[Any], elems: Iterable[Any]) -> PList[Any]:
    return plist((*base, *elems))


class QueueAdapter:
    """`PDeque`: `plus` enqueues at the end, `minus` removes the first occurrence."""

    __slots__ = ()
    name = "Queue"
    ordered = True
    prepends = False

    def empty(self) -> PDeque[Any]:
        return pdeque()

    def size(self, coll: PDeque[Any]) -> int:
        return len(coll)

    def get(self, coll: PDeque[Any], index: int) -> Any:
        _check_index(self.name, len(coll), index)
        return coll[index]

    def contains(self, coll: PDeque[Any], elem: object) -> bool:
        return elem in coll

    def iterate(self, coll: PDeque[Any]) -> Iterator[Any]:
        return iter(coll)

    def plus(self, coll: PDeque[Any], elem: Any) -> PDeque[Any]:
        return coll.append(elem)

    def plus_at(self, coll: PDeque[Any], index: int, elem: Any) -> PDeque[Any]:
        _check_index(self.name, len(coll), index, inclusive=True)
        match index:
            case 0:
                return coll.appendleft(elem)
            case _ if index == len(coll):
                return coll.append(elem)
            case _:
                return pdeque(_with_inserted(coll, index, elem))

    def plus_all_at(self, coll: PDeque[Any], index: int, elems: Iterable[Any]) -> PDeque[Any]:
        _check_index(self.name, len(coll), index, inclusive=True)
        if index == len(coll):
            return coll.extend(elems)
        return pdeque(_with_inserted_all(coll, index, elems))

    def minus(self, coll: PDeque[Any], elem: object) -> PDeque[Any]:
        try:
            return coll.remove(elem)
        except ValueError:
            return coll

    def minus_at(self, coll: PDeque[Any], index: int) -> PDeque[Any]:
        _check_index(self.name, len(coll), index)
        match index:
            case 0:
                return coll.popleft()
            case _ if index == len(coll) - 1:
                return coll.pop()
            case _:
                return pdeque(_with_deleted(coll, index))

    def set_at(self, coll: PDeque[Any], index: int, elem: Any) -> PDeque[Any]:
        _check_index(self.name, len(coll), index)
        return pdeque(_with_replaced(coll, index, elem))

    def plus_all(self, coll: PDeque[Any], elems: Iterable[Any]) -> PDeque[Any]:
        return coll.extend(elems)

    def minus_all(self, coll: PDeque[Any], elems: Iterable[object]) -> PDeque[Any]:
        return functools.reduce(self.minus, elems, coll)

    def equals(self, left: PDeque[Any], right: PDeque[Any]) -> bool:
        return len(left) == len(right) and _ordered_equals(left, right)

    def hash(self, coll: PDeque[Any]) -> int:
        return hash(tuple(coll))

    def bulk_builder(self) -> Option[BulkBuilder[PDeque[Any], Any]]:
        return Some(_extend_queue)


def _extend_queue(base: PDeque[Any], elems: Iterable[Any]) -> PDeque[Any]:
    return base.extend(elems)


class SetAdapter:
    """`PSet`: unique elements, O(1) membership, no positional updates.

    `get` follows the iteration order, which is unspecified.
    """

    __slots__ = ()
    name = "Set"
    ordered = False
    prepends = False

    def empty(self) -> PSet[Any]:
        return pset()

    def size(self, coll: PSet[Any]) -> int:
        return len(coll)

    def get(self, coll: PSet[Any], index: int) -> Any:
        _check_index(self.name, len(coll), index)
        return mit.nth(coll, index)

    def contains(self, coll: PSet[Any], elem: object) -> bool:
        return elem in coll

    def iterate(self, coll: PSet[Any]) -> Iterator[Any]:
        return iter(coll)

    def plus(self, coll: PSet[Any], elem: Any) -> PSet[Any]:
        return coll.add(elem)

    def plus_at(self, coll: PSet[Any], index: int, elem: Any) -> PSet[Any]:
        raise _unsupported(self.name, "plus_at")

    def plus_all_at(self, coll: PSet[Any], index: int, elems: Iterable[Any]) -> PSet[Any]:
        raise _unsupported(self.name, "plus_all_at")

    def minus(self, coll: PSet[Any], elem: object) -> PSet[Any]:
        return coll.discard(elem)

    def minus_at(self, coll: PSet[Any], index: int) -> PSet[Any]:
        raise _unsupported(self.name, "minus_at")

    def set_at(self, coll: PSet[Any], index: int, elem: Any) -> PSet[Any]:
        raise _unsupported(self.name, "set_at")

    def plus_all(self, coll: PSet[Any], elems: Iterable[Any]) -> PSet[Any]:
        return coll.update(elems)

    def minus_all(self, coll: PSet[Any], elems: Iterable[object]) -> PSet[Any]:
        return functools.reduce(self.minus, elems, coll)

    def equals(self, left: PSet[Any], right: PSet[Any]) -> bool:
        return left == right

    def hash(self, coll: PSet[Any]) -> int:
        return hash(coll)

    def bulk_builder(self) -> Option[BulkBuilder[PSet[Any], Any]]:
        return Some(_extend_set)


def _extend_set(base: PSet[Any], elems: Iterable[Any]) -> PSet[Any]:
    return base.update(elems)


class BagAdapter:
    """`PBag`: a multiset. Duplicates are counted, order is unspecified."""

    __slots__ = ()
    name = "Bag"
    ordered = False
    prepends = False

    def empty(self) -> PBag[Any]:
        return pbag(())

    def size(self, coll: PBag[Any]) -> int:
        return len(coll)

    def get(self, coll: PBag[Any], index: int) -> Any:
        _check_index(self.name, len(coll), index)
        return mit.nth(coll, index)

    def contains(self, coll: PBag[Any], elem: object) -> bool:
        return elem in coll

    def iterate(self, coll: PBag[Any]) -> Iterator[Any]:
        return iter(coll)

    def plus(self, coll: PBag[Any], elem: Any) -> PBag[Any]:
        return coll.add(elem)

    def plus_at(self, coll: PBag[Any], index: int, elem: Any) -> PBag[Any]:
        raise _unsupported(self.name, "plus_at")

    def plus_all_at(self, coll: PBag[Any], index: int, elems: Iterable[Any]) -> PBag[Any]:
        raise _unsupported(self.name, "plus_all_at")

    def minus(self, coll: PBag[Any], elem: object) -> PBag[Any]:
        if elem in coll:
            return coll.remove(elem)
        return coll

    def minus_at(self, coll: PBag[Any], index: int) -> PBag[Any]:
        raise _unsupported(self.name, "minus_at")

    def set_at(self, coll: PBag[Any], index: int, elem: Any) -> PBag[Any]:
        raise _unsupported(self.name, "set_at")

    def plus_all(self, coll: PBag[Any], elems: Iterable[Any]) -> PBag[Any]:
        return coll.update(elems)

    def minus_all(self, coll: PBag[Any], elems: Iterable[object]) -> PBag[Any]:
        return functools.reduce(self.minus, elems, coll)

    def equals(self, left: PBag[Any], right: PBag[Any]) -> bool:
        return left == right

    def hash(self, coll: PBag[Any]) -> int:
        return hash(coll)

    def bulk_builder(self) -> Option[BulkBuilder[PBag[Any], Any]]:
        return Some(_extend_bag)


def _extend_bag(base: PBag[Any], elems: Iterable[Any]) -> PBag[Any]:
    return base.update(elems)


__all__ = [
    "BagAdapter",
    "BulkBuilder",
    "PersistentCollectionAdapter",
    "QueueAdapter",
    "SetAdapter",
    "StackAdapter",
    "VectorAdapter",
]
