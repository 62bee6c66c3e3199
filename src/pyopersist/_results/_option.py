from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Never, TypeIs


class OptionUnwrapError(RuntimeError): ...


class Option[T](ABC):
    """A value that may be absent, returned by the non-raising lookups of a `LazyCollection`.

    Also the return type expected from unfolders (`LazyCollection.from_fn`) and suppliers (`plus_loop_supplier`), where `NONE` signals the end of generation.

    Use pattern matching on `Some(value)` to get at the value.
    """

    __slots__ = ()

    @staticmethod
    def from_[V](value: V | None) -> Option[V]:
        """Wrap a nullable value, mapping `None` to `NONE`.

        Args:
            value (V | None): The value to wrap.

        Returns:
            Option[V]: `Some(value)` if **value** is not `None`, `NONE` otherwise.

        Example:
        ```python
        >>> import pyopersist as pp
        >>> pp.Option.from_(3)
        Some(value=3)
        >>> pp.Option.from_(None)
        NONE

        ```
        """
        return NONE if value is None else Some(value)

    @abstractmethod
    def is_some(self) -> TypeIs[Some[T]]:  # type: ignore[misc]
        """Returns `True` if the option holds a value."""
        ...

    @abstractmethod
    def is_none(self) -> TypeIs[NoneOption]:  # type: ignore[misc]
        """Returns `True` if the option is `NONE`."""
        ...

    @abstractmethod
    def unwrap(self) -> T:
        """Returns the contained value.

        Raises:
            OptionUnwrapError: If the option is `NONE`.

        Example:
        ```python
        >>> import pyopersist as pp
        >>> pp.LazyCollection.from_(4, 5).first().unwrap()
        4
        >>> pp.LazyCollection.new().first().unwrap()
        Traceback (most recent call last):
            ...
        pyopersist._results._option.OptionUnwrapError: called `unwrap` on a `None`

        ```
        """
        ...

    def unwrap_or(self, default: T) -> T:
        """Returns the contained value or **default**.

        Example:
        ```python
        >>> import pyopersist as pp
        >>> pp.LazyCollection.from_(1, 2).get_option(5).unwrap_or(0)
        0

        ```
        """
        return self.unwrap() if self.is_some() else default


@dataclass(slots=True)
class Some[T](Option[T]):
    """Option variant holding a value."""

    value: T

    def is_some(self) -> TypeIs[Some[T]]:  # type: ignore[misc]
        return True

    def is_none(self) -> TypeIs[NoneOption]:  # type: ignore[misc]
        return False

    def unwrap(self) -> T:
        return self.value


@dataclass(slots=True)
class NoneOption(Option[Any]):
    """Option variant representing the absence of a value."""

    def __repr__(self) -> str:
        return "NONE"

    def is_some(self) -> TypeIs[Some[Any]]:  # type: ignore[misc]
        return False

    def is_none(self) -> TypeIs[NoneOption]:  # type: ignore[misc]
        return True

    def unwrap(self) -> Never:
        raise OptionUnwrapError("called `unwrap` on a `None`")


NONE: Option[Any] = NoneOption()
"""Singleton instance representing the absence of a value."""
