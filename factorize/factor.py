"""
Factor Module

Converts a single categorical variable into a factor, in the same sense as
R: an array of integer codes, each of which references into an array of
unique, sorted levels.

    >>> factor = create_factor(["A", "B", "C", "A", "B", "C"])
    >>> factor.codes
    array([0, 1, 2, 0, 1, 2])
    >>> list(factor.levels)
    ['A', 'B', 'C']
"""

from typing import Any, Optional, Sequence
from dataclasses import dataclass
from operator import itemgetter
import logging

import numpy as np

from .exceptions import FactorOverflowError
from .sanitize import allocate_codes, as_variable, check_observations

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class Factor:
    """
    A categorical variable as codes into a table of levels.

    Attributes:
        codes: Integer code of each observation, in [0, nlevels)
        levels: Unique values of the variable, sorted ascending

    For every observation ``i``, ``levels[codes[i]] == input[i]``.
    Unpacks as ``codes, levels = factor``.
    """
    codes: np.ndarray
    levels: np.ndarray

    def __iter__(self):
        return iter((self.codes, self.levels))

    def __len__(self) -> int:
        return len(self.codes)

    @property
    def nlevels(self) -> int:
        """Number of distinct levels."""
        return len(self.levels)

    def decode(self) -> np.ndarray:
        """Reconstruct the original values from codes and levels."""
        return self.levels[self.codes]


def create_factor(values: Sequence[Any],
                  n: Optional[int] = None,
                  out: Optional[np.ndarray] = None,
                  code_dtype: Any = None) -> Factor:
    """
    Convert a categorical variable into a factor.

    Values must be hashable and totally ordered. Codes are first assigned
    in order of first appearance, then remapped so that they follow the
    sorted order of the levels.

    Args:
        values: Categorical variable, one value per observation
        n: Number of observations to use (default: ``len(values)``)
        out: Optional integer array whose first ``n`` entries receive the codes
        code_dtype: Integer type of the codes if ``out`` is not given

    Returns:
        Factor whose ``codes`` cover every integer in [0, nlevels) at least once

    Raises:
        FactorOverflowError: If the largest code does not fit the code type
    """
    variable = as_variable(values, check_observations(n))
    n = len(variable)
    codes = allocate_codes(n, out, code_dtype)

    # First pass: provisional codes in order of first appearance.
    limit = int(np.iinfo(codes.dtype).max)
    mapping = {}
    for i, value in enumerate(variable):
        code = mapping.get(value)
        if code is None:
            code = len(mapping)
            if code > limit:
                raise FactorOverflowError(code + 1, codes.dtype, "number of levels")
            mapping[value] = code
        codes[i] = code

    # Keys are unique, so sorting on the value alone never hits a tie.
    unique = sorted(mapping.items(), key=itemgetter(0))
    del mapping

    nuniq = len(unique)
    remapping = np.empty(nuniq, dtype=codes.dtype)
    levels = np.empty(nuniq, dtype=variable.dtype)
    for u, (value, provisional) in enumerate(unique):
        remapping[provisional] = u
        levels[u] = value

    # Second pass: provisional codes to sorted codes.
    if n:
        codes[:] = remapping[codes]

    logger.debug("Factorized %d observations into %d levels", n, nuniq)
    return Factor(codes=codes, levels=levels)


__all__ = ["Factor", "create_factor"]
