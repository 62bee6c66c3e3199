from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from typing import Never, TypeIs, cast

from ._option import NONE, Option, Some


class ResultUnwrapError(RuntimeError): ...


class Result[T, E](ABC):
    """Outcome of a fallible operation, returned by `LazyCollection.try_materialize`.

    `Ok(value)` on success, `Err(error)` when the engine signalled a fault.
    """

    __slots__ = ()

    @abstractmethod
    def is_ok(self) -> TypeIs[Ok[T, E]]:  # type: ignore[misc]
        """Returns True if the result is Ok."""
        ...

    @abstractmethod
    def is_err(self) -> TypeIs[Err[T, E]]:  # type: ignore[misc]
        """Returns True if the result is Err."""
        ...

    @abstractmethod
    def unwrap(self) -> T:
        """Returns the contained Ok value, or raises ResultUnwrapError if the result is Err."""
        ...

    @abstractmethod
    def unwrap_err(self) -> E:
        """Returns the contained Err value, or raises ResultUnwrapError if the result is Ok."""
        ...

    def map[U](self, f: Callable[[T], U]) -> Result[U, E]:
        """Apply **f** to a contained Ok value, leaving Err untouched.

        Example:
        ```python
        >>> import pyopersist as pp
        >>> pp.LazyCollection.from_(1, 2, 3).try_materialize().map(len)
        Ok(value=3)

        ```
        """
        if self.is_ok():
            return Ok(f(self.unwrap()))
        return cast(Result[U, E], self)

    def ok(self) -> Option[T]:
        """Converts the Result into an Option, mapping Ok(v) to Some(v) and Err(e) to NONE."""
        if self.is_ok():
            return Some(self.unwrap())
        return NONE


@dataclass(slots=True)
class Ok[T, E](Result[T, E]):
    """Represents a successful value."""

    value: T

    def is_ok(self) -> TypeIs[Ok[T, E]]:  # type: ignore[misc]
        return True

    def is_err(self) -> TypeIs[Err[T, E]]:  # type: ignore[misc]
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_err(self) -> Never:
        raise ResultUnwrapError("called `unwrap_err` on Ok")


@dataclass(slots=True)
class Err[T, E](Result[T, E]):
    """Represents an error value."""

    error: E

    def is_ok(self) -> TypeIs[Ok[T, E]]:  # type: ignore[misc]
        return False

    def is_err(self) -> TypeIs[Err[T, E]]:  # type: ignore[misc]
        return True

    def unwrap(self) -> Never:
        msg = f"called `unwrap` on Err: {self.error!r}"
        raise ResultUnwrapError(msg)

    def unwrap_err(self) -> E:
        return self.error
