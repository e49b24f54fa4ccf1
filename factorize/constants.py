# factorize/constants.py
"""
Factorize Constants

This module defines defaults shared by all factorization routines:

- DEFAULT_CODE_DTYPE: Integer type of the output codes when the caller
  provides neither an output buffer nor an explicit dtype
- MAX_LEVEL_ROWS: Largest level table that can be allocated
"""
import numpy as np


# =============================================================================
# Code Type
# =============================================================================

DEFAULT_CODE_DTYPE = np.dtype(np.int64)


# =============================================================================
# Table Sizes
# =============================================================================

# Level tables are numpy arrays, so their length is bounded by the index type
MAX_LEVEL_ROWS = int(np.iinfo(np.intp).max)
