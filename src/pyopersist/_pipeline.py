from __future__ import annotations

import functools
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from pyrsistent import PVector, pvector

from ._ops import Op

if TYPE_CHECKING:
    from ._source import Producer


@dataclass(slots=True, frozen=True)
class TransformPipeline:
    """Ordered, immutable list of deferred operations.

    Appending returns a new pipeline sharing its prefix with the receiver.

    Nothing runs until `drain_into`, which chains every operation over the producer's elements in recorded order, and hands the resulting iterator to a builder, all in a single pass.

    Example:
    ```python
    >>> import pyopersist as pp
    >>> from pyopersist import ops
    >>> base = pp.TransformPipeline().append(ops.Map(lambda x: x * 10))
    >>> longer = base.append(ops.Take(2))
    >>> len(base), len(longer)
    (1, 2)
    >>> tuple(longer.apply([1, 2, 3]))
    (10, 20)

    ```
    """

    ops: PVector[Op] = field(default_factory=pvector)

    def __len__(self) -> int:
        return len(self.ops)

    def __iter__(self) -> Iterator[Op]:
        return iter(self.ops)

    def append(self, op: Op) -> TransformPipeline:
        return TransformPipeline(self.ops.append(op))

    def apply(self, data: Iterable[Any]) -> Iterator[Any]:
        return functools.reduce(lambda acc, op: op.apply(acc), self.ops, iter(data))

    def drain_into[C](
        self, producer: Producer[Any], builder: Callable[[Iterator[Any]], C]
    ) -> C:
        return builder(self.apply(producer.open()))
