"""Exceptions raised by the engine.

All of them surface synchronously to the caller that forced the collection.
Exceptions raised by user callbacks (map, filter, peek, ...) are not wrapped and propagate unchanged.
"""


class LazyCollectionError(Exception):
    """Base class of every fault signalled by pyopersist."""


class IndexFault(LazyCollectionError, IndexError):
    """An index was outside of the collection bounds.

    Raised by `get`, `set_at`, `plus_at`, `minus_at` and `sub_list`. Indexes are never clamped, and negative indexes are rejected.
    """

    def __init__(self, index: int, size: int, kind: str) -> None:
        self.index = index
        self.size = size
        super().__init__(f"index {index} out of range for {kind} of size {size}")


class UpstreamFault(LazyCollectionError):
    """The producer of a pending collection failed before supplying all of its elements.

    The original exception is available as `__cause__`. The collection stays pending.
    """


class DrainedSourceFault(UpstreamFault):
    """A one-shot producer that already failed was asked for its elements again."""


class UnsupportedOperationError(LazyCollectionError, TypeError):
    """A positional operation was requested on an unordered collection kind."""


class ReentrantForceError(LazyCollectionError, RuntimeError):
    """A collection was forced from inside one of its own pipeline callbacks."""
