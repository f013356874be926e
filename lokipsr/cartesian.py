"""Lazy Cartesian product over a list of parameter grids."""

from __future__ import annotations

import itertools
from collections.abc import Iterator, Sequence


class CartesianProductView:
    """Iterable over every combination of one value from each grid.

    The last grid varies fastest. Each combination is a tuple.
    """

    def __init__(self, params: Sequence[Sequence[float]], max_dims: int = 5) -> None:
        self.params = params
        self.max_dims = max_dims

    def __iter__(self) -> Iterator[tuple[float, ...]]:
        ndims = len(self.params)
        if ndims > self.max_dims:
            raise ValueError(
                "Too many dimensions for CartesianProductIterator "
                f"(got {ndims}, max {self.max_dims})"
            )
        if self.is_empty():
            return iter(())
        return itertools.product(*self.params)

    def is_empty(self) -> bool:
        """True if there are no grids or any grid is empty."""
        return len(self.params) == 0 or any(len(grid) == 0 for grid in self.params)


def cartesian_product_view(
    params: Sequence[Sequence[float]], max_dims: int = 5
) -> CartesianProductView:
    """Create a view over the Cartesian product of ``params``."""
    return CartesianProductView(params, max_dims)