"""
Factorize - Categorical Variables as Integer Codes

Converts categorical variables into factors: dense integer codes plus a
sorted table of the distinct values (or value combinations) they index.
"""

__version__ = "0.1.0"

from .factor import Factor, create_factor
from .combine import CombinedFactor, combine_to_factor, combine_to_factor_unused
from .exceptions import FactorOverflowError

__all__ = [
    "Factor",
    "CombinedFactor",
    "create_factor",
    "combine_to_factor",
    "combine_to_factor_unused",
    "FactorOverflowError",
]
