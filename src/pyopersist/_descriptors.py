from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Final

from ._adapters import (
    BagAdapter,
    PersistentCollectionAdapter,
    QueueAdapter,
    SetAdapter,
    StackAdapter,
    VectorAdapter,
)


@dataclass(slots=True, frozen=True)
class CollectorDescriptor:
    """Identifies which persistent kind a `LazyCollection` materializes into.

    Swapping the descriptor (see `LazyCollection.to_kind`) changes the target kind without forcing anything.

    Args:
        name (str): Name used in the textual form, e.g. `Vector[1, 2]`.
        adapter (PersistentCollectionAdapter[Any, Any]): Implementation of the kind.
    """

    name: str
    adapter: PersistentCollectionAdapter[Any, Any]

    def __repr__(self) -> str:
        return f"CollectorDescriptor({self.name})"


VECTOR: Final = CollectorDescriptor("Vector", VectorAdapter())
STACK: Final = CollectorDescriptor("Stack", StackAdapter())
QUEUE: Final = CollectorDescriptor("Queue", QueueAdapter())
SET: Final = CollectorDescriptor("Set", SetAdapter())
BAG: Final = CollectorDescriptor("Bag", BagAdapter())
