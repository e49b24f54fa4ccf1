"""Exceptions raised by the factorization routines."""

from __future__ import annotations

from typing import Any


class FactorOverflowError(OverflowError):
    """Raised when a count cannot be represented by the code type.

    This covers the number of distinct levels of a factor, the product of
    universe sizes for full-space combinations, and level tables too large
    to allocate. It is always raised before any arithmetic that would wrap.
    """

    def __init__(self, value: int, dtype: Any, what: str = "count"):
        self.value = int(value)
        self.dtype = dtype
        self.what = what
        super().__init__(f"{what} {self.value} cannot be represented by {dtype}")
