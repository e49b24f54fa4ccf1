"""
Combine Module

Combines several categorical variables into a single factor whose levels
are combinations of values, one from each variable.

Two flavours are provided:

- combine_to_factor: levels are the combinations actually observed,
  unique and sorted lexicographically (variable 0 first).
- combine_to_factor_unused: the inputs are already factor codes with a
  known number of levels each, and the levels enumerate every possible
  combination, observed or not. Variable 0 changes slowest, the last
  variable fastest.

Usage:
    combined = combine_to_factor([["c", "a", "b"], ["A", "B", "C"]])
    for row in combined.rows():
        print(row)

    full = combine_to_factor_unused([(codes_a, 2), (codes_b, 3)])
    assert full.nlevels == 6
"""

from typing import Any, Iterator, List, Optional, Sequence, Tuple
from dataclasses import dataclass, field
from functools import cmp_to_key, partial
import logging
import math

import numpy as np

from .exceptions import FactorOverflowError
from .factor import create_factor
from .sanitize import (
    allocate_codes,
    as_variable,
    check_observations,
    check_table_size,
    checked_count,
    checked_product,
)

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class CombinedFactor:
    """
    Codes into a table of value combinations.

    Attributes:
        codes: Integer code of each observation
        levels: One array per input variable, all of the same length.
            Entry ``j`` of every array together forms level ``j``.

    For every observation ``i`` and variable ``f``,
    ``levels[f][codes[i]] == inputs[f][i]``.
    Unpacks as ``codes, levels = combined``.
    """
    codes: np.ndarray
    levels: List[np.ndarray] = field(default_factory=list)

    def __iter__(self):
        return iter((self.codes, self.levels))

    def __len__(self) -> int:
        return len(self.codes)

    @property
    def nvariables(self) -> int:
        return len(self.levels)

    @property
    def nlevels(self) -> int:
        """Number of combinations; 0 when there are no variables."""
        if not self.levels:
            return 0
        return len(self.levels[0])

    def decode(self) -> List[np.ndarray]:
        """Reconstruct each input variable from codes and levels."""
        return [level[self.codes] for level in self.levels]

    def rows(self) -> Iterator[Tuple[Any, ...]]:
        """Iterate over the levels as tuples, in code order."""
        return zip(*self.levels)


def _zero_codes(n: Optional[int], out: Optional[np.ndarray], code_dtype: Any) -> CombinedFactor:
    """All observations share the single empty combination."""
    if n is None:
        n = len(out) if out is not None else 0
    codes = allocate_codes(n, out, code_dtype)
    codes.fill(0)
    return CombinedFactor(codes=codes, levels=[])


def _compare_rows(columns: Sequence[Sequence[Any]], left: int, right: int) -> int:
    """Field-wise comparison of two observations, variable 0 first."""
    for column in columns:
        a = column[left]
        b = column[right]
        if a < b:
            return -1
        if b < a:
            return 1
    return 0


def combine_to_factor(inputs: Sequence[Sequence[Any]],
                      n: Optional[int] = None,
                      out: Optional[np.ndarray] = None,
                      code_dtype: Any = None) -> CombinedFactor:
    """
    Combine categorical variables into a factor over observed combinations.

    Observations are never materialized as tuples. Row indices are sorted
    with a comparator that walks the variables in order, so only ``<`` is
    required of the values. Rows that compare equal in both directions
    form one combination, whose levels are taken from its first occurrence.

    Args:
        inputs: Categorical variables, each with one value per observation
        n: Number of observations (default: length of the first variable)
        out: Optional integer array whose first ``n`` entries receive the codes
        code_dtype: Integer type of the codes if ``out`` is not given

    Returns:
        CombinedFactor with unique, lexicographically sorted level rows

    Raises:
        FactorOverflowError: If the largest combination code does not fit the code type
    """
    n = check_observations(n)
    ninputs = len(inputs)

    if ninputs == 0:
        return _zero_codes(n, out, code_dtype)
    if ninputs == 1:
        factor = create_factor(inputs[0], n=n, out=out, code_dtype=code_dtype)
        return CombinedFactor(codes=factor.codes, levels=[factor.levels])

    if n is None:
        n = len(inputs[0])
    variables = [as_variable(values, n) for values in inputs]
    codes = allocate_codes(n, out, code_dtype)

    # Plain lists compare faster than numpy scalars.
    compare = partial(_compare_rows, [variable.tolist() for variable in variables])
    order = sorted(range(n), key=cmp_to_key(compare))

    # The sort is stable, so each run of equal rows starts at its first occurrence.
    limit = int(np.iinfo(codes.dtype).max)
    reference_rows = []
    code = -1
    for row in order:
        if not reference_rows or compare(reference_rows[-1], row) != 0:
            code = len(reference_rows)
            if code > limit:
                raise FactorOverflowError(code + 1, codes.dtype, "number of levels")
            reference_rows.append(row)
        codes[row] = code

    reference_rows = np.asarray(reference_rows, dtype=np.intp)
    levels = [variable[reference_rows] for variable in variables]

    logger.debug("Combined %d variables over %d observations into %d levels",
                 ninputs, n, len(reference_rows))
    return CombinedFactor(codes=codes, levels=levels)


def combine_to_factor_unused(inputs: Sequence[Tuple[Sequence[int], int]],
                             n: Optional[int] = None,
                             out: Optional[np.ndarray] = None,
                             code_dtype: Any = None) -> CombinedFactor:
    """
    Combine factors into a factor over all possible combinations.

    Each input is a ``(codes, count)`` pair where ``codes`` are existing
    factor codes and ``count`` is the number of levels of that factor,
    which may exceed the largest observed code. The combined code is the
    mixed-radix number with variable 0 as the most significant digit::

        code = sum_f codes_f * prod(count_f' for f' > f)

    Codes must lie in [0, count) for their variable; this is not checked.

    Args:
        inputs: ``(codes, count)`` pairs, one per variable
        n: Number of observations (default: length of the first code array)
        out: Optional integer array whose first ``n`` entries receive the codes
        code_dtype: Integer type of the codes and levels if ``out`` is not given

    Returns:
        CombinedFactor whose levels hold ``prod(count)`` rows in row-major order

    Raises:
        FactorOverflowError: If the largest combination code does not fit the code type
        ValueError: If a count is negative
    """
    n = check_observations(n)
    ninputs = len(inputs)

    if ninputs == 0:
        return _zero_codes(n, out, code_dtype)

    counts = []
    for f, (_, count) in enumerate(inputs):
        count = int(count)
        if count < 0:
            raise ValueError(f"Number of levels for variable {f} must be >= 0, got {count}")
        counts.append(count)

    if n is None:
        n = len(inputs[0][0])
    codes = allocate_codes(n, out, code_dtype)
    dtype = codes.dtype
    variables = [as_variable(values, n).astype(dtype, copy=False) for values, _ in inputs]

    if ninputs == 1:
        check_table_size(checked_count(counts[0], dtype, "number of levels"))
        codes[:] = variables[0]
        return CombinedFactor(codes=codes, levels=[np.arange(counts[0], dtype=dtype)])

    # Iterate from back to front, the first variable is the slowest changing.
    codes[:] = variables[-1]
    ncombos = checked_count(counts[-1], dtype, "number of levels")
    for f in range(ninputs - 1, 0, -1):
        next_ncombos = checked_product(ncombos, counts[f - 1], dtype, "number of combinations")
        # With a single level the codes are all 0. Otherwise ncombos is at
        # most half of next_ncombos, so it fits the code type.
        if counts[f - 1] > 1:
            codes += ncombos * variables[f - 1]
        ncombos = next_ncombos

    check_table_size(ncombos)
    if ncombos == 0:
        levels = [np.empty(0, dtype=dtype) for _ in counts]
        return CombinedFactor(codes=codes, levels=levels)

    levels = [None] * ninputs
    inner_repeats = 1
    for f in range(ninputs - 1, -1, -1):
        outer_repeats = math.prod(counts[:f])
        block = np.repeat(np.arange(counts[f], dtype=dtype), inner_repeats)
        levels[f] = np.tile(block, outer_repeats)
        inner_repeats *= counts[f]

    logger.debug("Combined %d variables over %d observations into %d possible levels",
                 ninputs, n, ncombos)
    return CombinedFactor(codes=codes, levels=levels)


__all__ = ["CombinedFactor", "combine_to_factor", "combine_to_factor_unused"]
