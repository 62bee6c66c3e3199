from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace

import cytoolz as cz


@dataclass(slots=True, frozen=True)
class Config:
    """Global settings of the engine.

    Attributes:
        repr_max_items (int | None): Maximum number of elements shown by `repr`. `None` shows everything.
        publisher_timeout (float | None): Seconds a force waits on an async publisher before failing with an `UpstreamFault`. `None` waits forever.
    """

    repr_max_items: int | None = None
    publisher_timeout: float | None = None

    def collection_repr(self, name: str, data: Iterable[object]) -> str:
        match self.repr_max_items:
            case None:
                parts = [repr(item) for item in data]
            case limit:
                head = tuple(cz.itertoolz.take(limit + 1, data))
                parts = [repr(item) for item in head[:limit]]
                if len(head) > limit:
                    parts.append("...")
        return f"{name}[{', '.join(parts)}]"


_CONFIG = Config()


def get_config() -> Config:
    return _CONFIG


def set_config(**changes: object) -> Config:
    """Replace fields of the global `Config`, returning the previous one.

    Example:
    ```python
    >>> import pyopersist as pp
    >>> previous = pp.set_config(repr_max_items=2)
    >>> pp.LazyCollection.from_range(0, 10)
    Vector[0, 1, ...]
    >>> _ = pp.set_config(repr_max_items=previous.repr_max_items)

    ```
    """
    global _CONFIG  # noqa: PLW0603
    previous = _CONFIG
    _CONFIG = replace(_CONFIG, **changes)  # type: ignore[arg-type]
    return previous
