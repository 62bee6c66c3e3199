from __future__ import annotations

from collections.abc import Callable
from typing import Concatenate, Self


class Pipeable:
    """Mixin class providing pipeable methods for fluent chaining."""

    __slots__ = ()

    def into[**P, R](
        self,
        func: Callable[Concatenate[Self, P], R],
        *args: P.args,
        **kwargs: P.kwargs,
    ) -> R:
        """Convert `Self` to `R`.

        This method allows to pipe the instance into an object or function that can convert `Self` into another type.

        Conceptually, this allow to do `x.into(f)` instead of `f(x)`, hence keeping a fluent chaining style.

        Note:
            The instance is passed as is: **func** decides whether the pipeline gets forced or not.

        Args:
            func (Callable[Concatenate[Self, P], R]): Function for conversion.
            *args (P.args): Positional arguments to pass to **func**.
            **kwargs (P.kwargs): Keyword arguments to pass to **func**.

        Returns:
            R: The converted value.

        Example:
        ```python
        >>> import pyopersist as pp
        >>> pp.LazyCollection.from_range(0, 5).map(lambda x: x * x).into(sum)
        30

        ```
        """
        return func(self, *args, **kwargs)

    def inspect[**P](
        self,
        func: Callable[Concatenate[Self, P], object],
        *args: P.args,
        **kwargs: P.kwargs,
    ) -> Self:
        """Pass `Self` to **func** to perform side effects without altering the data.

        Args:
            func (Callable[Concatenate[Self, P], object]): Function to apply to the instance for side effects.
            *args (P.args): Positional arguments to pass to **func**.
            **kwargs (P.kwargs): Keyword arguments to pass to **func**.

        Returns:
            Self: The instance itself for chaining.

        Example:
        ```python
        >>> import pyopersist as pp
        >>> pp.LazyCollection.from_(1, 2, 3).inspect(print).plus(4)
        Vector[1, 2, 3]
        Vector[1, 2, 3, 4]

        ```
        """
        func(self, *args, **kwargs)
        return self
