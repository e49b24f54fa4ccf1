"""
Sanitize: size checks and buffer handling shared by the factorizers.

Every count that ends up in a code array (number of distinct levels,
product of universe sizes) goes through ``checked_count`` or
``checked_product`` first, so a count whose largest code is
unrepresentable raises FactorOverflowError instead of wrapping around
inside numpy. A count N only needs its largest code, N - 1, to fit.

Usage:
    from factorize.sanitize import checked_product, allocate_codes

    codes = allocate_codes(n, out=None, code_dtype=np.int32)
    total = checked_product(3, 4, codes.dtype)
"""

from typing import Any, Optional, Sequence

import numpy as np

from .constants import DEFAULT_CODE_DTYPE, MAX_LEVEL_ROWS
from .exceptions import FactorOverflowError


def resolve_code_dtype(code_dtype: Any = None) -> np.dtype:
    """
    Normalize a code type to a numpy integer dtype.

    Args:
        code_dtype: Anything accepted by ``np.dtype``, or None for the default

    Returns:
        The integer dtype

    Raises:
        TypeError: If the dtype is not an integer type
    """
    if code_dtype is None:
        return DEFAULT_CODE_DTYPE
    dtype = np.dtype(code_dtype)
    if not np.issubdtype(dtype, np.integer):
        raise TypeError(f"Code type must be an integer dtype, got {dtype}")
    return dtype


def checked_count(count: int, dtype: Any, what: str = "count") -> int:
    """
    Check that codes in [0, count) are representable by ``dtype``.

    Raises:
        FactorOverflowError: If ``count - 1`` exceeds the maximum of ``dtype``
    """
    count = int(count)
    if count - 1 > int(np.iinfo(dtype).max):
        raise FactorOverflowError(count, np.dtype(dtype), what)
    return count


def checked_product(left: int, right: int, dtype: Any, what: str = "product") -> int:
    """
    Multiply two counts, failing if codes below the result overflow ``dtype``.

    The product is computed exactly with Python integers and compared
    against the dtype limit before it is ever stored in a numpy array.
    """
    return checked_count(int(left) * int(right), dtype, what)


def check_table_size(nrows: int) -> int:
    """Check that a level table with ``nrows`` rows can be allocated."""
    nrows = int(nrows)
    if nrows > MAX_LEVEL_ROWS:
        raise FactorOverflowError(nrows, np.dtype(np.intp), "level table size")
    return nrows


def as_variable(values: Sequence[Any], n: Optional[int] = None) -> np.ndarray:
    """
    View a categorical variable as a 1-D numpy array of its first ``n`` values.

    numpy arrays are used as-is. Other sequences are stored in an object
    array so that each element keeps its own Python type (tuples stay
    single values, mixed ints and floats are not coerced).

    Args:
        values: The variable, one value per observation
        n: Number of observations to use (default: all of them)

    Returns:
        1-D array of length ``n``

    Raises:
        ValueError: If ``values`` is not 1-D or holds fewer than ``n`` values
    """
    if isinstance(values, np.ndarray):
        arr = values
        if arr.ndim != 1:
            raise ValueError(f"Expected 1D array, got {arr.ndim}D")
    else:
        arr = np.empty(len(values), dtype=object)
        for i, value in enumerate(values):
            arr[i] = value

    if n is None:
        return arr
    if len(arr) < n:
        raise ValueError(f"Variable has {len(arr)} values, expected at least {n}")
    return arr[:n]


def allocate_codes(n: int, out: Optional[np.ndarray] = None,
                   code_dtype: Any = None) -> np.ndarray:
    """
    Get the array that will receive ``n`` codes.

    Args:
        n: Number of observations
        out: Caller-owned buffer; its first ``n`` entries are used
        code_dtype: Integer type of a freshly allocated buffer

    Returns:
        Writable 1-D integer array of length ``n`` (a view of ``out`` if given)

    Raises:
        TypeError: If ``out`` is not an integer array
        ValueError: If ``out`` is too short or conflicts with ``code_dtype``
    """
    if out is None:
        return np.zeros(n, dtype=resolve_code_dtype(code_dtype))

    if not isinstance(out, np.ndarray) or out.ndim != 1:
        raise ValueError("Output codes must be a 1D numpy array")
    resolve_code_dtype(out.dtype)
    if code_dtype is not None and np.dtype(code_dtype) != out.dtype:
        raise ValueError(f"code_dtype {np.dtype(code_dtype)} conflicts with output dtype {out.dtype}")
    if len(out) < n:
        raise ValueError(f"Output codes have length {len(out)}, expected at least {n}")
    return out[:n]


def check_observations(n: Optional[int]) -> Optional[int]:
    """Validate an explicit number of observations."""
    if n is None:
        return None
    n = int(n)
    if n < 0:
        raise ValueError(f"Number of observations must be >= 0, got {n}")
    return n


__all__ = [
    "resolve_code_dtype",
    "checked_count",
    "checked_product",
    "check_table_size",
    "as_variable",
    "allocate_codes",
    "check_observations",
]
