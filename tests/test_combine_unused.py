"""
Tests for combining factors over all possible combinations
"""

import itertools

import pytest
import numpy as np

from factorize import FactorOverflowError, combine_to_factor, combine_to_factor_unused


class TestCombineToFactorUnused:
    def test_two_variables(self):
        combined = combine_to_factor_unused([
            (np.array([0, 1, 0]), 2),
            (np.array([0, 2, 1]), 3),
        ])
        np.testing.assert_array_equal(combined.codes, [0, 5, 1])
        assert combined.nlevels == 6
        assert [tuple(int(v) for v in row) for row in combined.rows()] == [
            (0, 0), (0, 1), (0, 2), (1, 0), (1, 1), (1, 2),
        ]

    def test_three_variables(self):
        counts = (2, 3, 4)
        rng = np.random.default_rng(3)
        codes = [rng.integers(0, c, size=50) for c in counts]
        combined = combine_to_factor_unused(list(zip(codes, counts)))

        expected = codes[0] * 12 + codes[1] * 4 + codes[2]
        np.testing.assert_array_equal(combined.codes, expected)

        rows = [tuple(int(v) for v in row) for row in combined.rows()]
        assert rows == list(itertools.product(*(range(c) for c in counts)))

        for f in range(3):
            np.testing.assert_array_equal(combined.levels[f][combined.codes], codes[f])

    def test_unobserved_levels(self):
        combined = combine_to_factor_unused([([0, 0], 3), ([1, 1], 2)])
        np.testing.assert_array_equal(combined.codes, [1, 1])
        assert combined.nlevels == 6
        np.testing.assert_array_equal(combined.levels[0], [0, 0, 1, 1, 2, 2])
        np.testing.assert_array_equal(combined.levels[1], [0, 1, 0, 1, 0, 1])

    def test_small_input_dtype(self):
        first = np.array([255, 0, 17], dtype=np.uint8)
        second = np.array([299, 1, 0], dtype=np.int16)
        combined = combine_to_factor_unused([(first, 256), (second, 300)])
        np.testing.assert_array_equal(combined.codes, first.astype(np.int64) * 300 + second)
        assert combined.codes.max() == 256 * 300 - 1

    def test_zero_levels(self):
        combined = combine_to_factor_unused([(np.array([], dtype=int), 0), (np.array([], dtype=int), 4)])
        assert len(combined) == 0
        assert combined.nlevels == 0
        assert all(len(level) == 0 for level in combined.levels)

    def test_zero_levels_before_large_universe(self):
        empty = np.array([], dtype=np.int64)
        combined = combine_to_factor_unused([(empty, 0), (empty, 2**40)])
        assert combined.nlevels == 0
        assert combined.nvariables == 2
        assert all(len(level) == 0 for level in combined.levels)

    def test_negative_count(self):
        with pytest.raises(ValueError):
            combine_to_factor_unused([([0], -1), ([0], 2)])


class TestDegenerateCases:
    def test_no_variables(self):
        combined = combine_to_factor_unused([], n=3)
        np.testing.assert_array_equal(combined.codes, [0, 0, 0])
        assert combined.levels == []

    def test_single_variable(self):
        combined = combine_to_factor_unused([([2, 0, 2], 4)])
        np.testing.assert_array_equal(combined.codes, [2, 0, 2])
        assert len(combined.levels) == 1
        np.testing.assert_array_equal(combined.levels[0], [0, 1, 2, 3])


class TestBuffers:
    def test_out_buffer(self):
        out = np.full(4, -1, dtype=np.int32)
        combined = combine_to_factor_unused([([1, 0], 2), ([1, 1], 2)], out=out)
        np.testing.assert_array_equal(out, [3, 1, -1, -1])
        assert combined.levels[0].dtype == np.int32

    def test_partial_n(self):
        combined = combine_to_factor_unused([([1, 0, 1], 2), ([2, 2, 0], 3)], n=1)
        np.testing.assert_array_equal(combined.codes, [5])
        assert combined.nlevels == 6


class TestOverflow:
    def test_product_overflow(self):
        with pytest.raises(FactorOverflowError) as excinfo:
            combine_to_factor_unused([([0], 16), ([0], 16)], code_dtype=np.int8)
        assert excinfo.value.value == 256

    def test_product_overflow_default_dtype(self):
        empty = np.array([], dtype=np.int64)
        with pytest.raises(FactorOverflowError):
            combine_to_factor_unused([(empty, 2**32), (empty, 2**32)])

    def test_single_count_overflow(self):
        with pytest.raises(FactorOverflowError):
            combine_to_factor_unused([([0], 300)], code_dtype=np.int8)

    def test_largest_representable(self):
        combined = combine_to_factor_unused([([2], 3), ([41], 42)], code_dtype=np.int8)
        np.testing.assert_array_equal(combined.codes, [125])
        assert combined.nlevels == 126

    def test_count_one_past_maximum_code(self):
        combined = combine_to_factor_unused([([7], 8), ([3], 4), ([3], 4)], code_dtype=np.int8)
        np.testing.assert_array_equal(combined.codes, [127])
        assert combined.nlevels == 128

        combined = combine_to_factor_unused([([15], 16), ([7], 8)], code_dtype=np.int8)
        np.testing.assert_array_equal(combined.codes, [127])

    def test_single_variable_full_code_range(self):
        combined = combine_to_factor_unused([([255, 0], 256)], code_dtype=np.uint8)
        np.testing.assert_array_equal(combined.codes, [255, 0])
        assert combined.nlevels == 256
        assert combined.levels[0][-1] == 255

    def test_single_level_variable(self):
        combined = combine_to_factor_unused([([0, 0], 1), ([255, 3], 256)], code_dtype=np.uint8)
        np.testing.assert_array_equal(combined.codes, [255, 3])
        assert combined.nlevels == 256

    def test_same_bound_as_observed_combinations(self):
        grid = list(itertools.product(range(16), range(8)))
        first = [a for a, _ in grid]
        second = [b for _, b in grid]
        observed = combine_to_factor([first, second], code_dtype=np.int8)
        full = combine_to_factor_unused([(first, 16), (second, 8)], code_dtype=np.int8)
        np.testing.assert_array_equal(observed.codes, full.codes)
        assert observed.nlevels == full.nlevels == 128


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
