"""
Tests for the density ratio and supported-region extraction.

Grid points with ratio >= BF are supported. Undefined ratios are dropped
before run analysis. The interval is the envelope of all supported points;
disjoint runs are listed, and more than 3 runs are flagged as multimodal.
"""

import pytest
import numpy as np
from scipy import stats

from supportint.support import (
    SupportInterval,
    evaluate_ratio,
    density_ratio,
    run_lengths,
    supported_runs,
    extract_interval,
    validate_threshold,
)


@pytest.mark.tier2
class TestDensityRatio:
    """Tests for the pointwise posterior/prior ratio."""

    def test_ratio_of_normals(self):
        grid = np.linspace(-2, 2, 9)
        prior = stats.norm(0, 1).pdf
        posterior = stats.norm(0.5, 0.3).pdf

        ratio = evaluate_ratio(prior, posterior, grid)
        np.testing.assert_allclose(ratio, posterior(grid) / prior(grid))

    def test_zero_prior_density_is_missing(self):
        ratio = density_ratio(np.array([1.0, 0.0, 0.0]), np.array([2.0, 1.0, 0.0]))
        assert ratio[0] == 2.0
        assert np.isnan(ratio[1])  # x / 0
        assert np.isnan(ratio[2])  # 0 / 0

    def test_no_clipping(self):
        ratio = density_ratio(np.array([1e-10, 1.0]), np.array([1.0, 0.0]))
        assert ratio[0] == pytest.approx(1e10)
        assert ratio[1] == 0.0

    def test_no_runtime_warning(self, recwarn):
        density_ratio(np.zeros(3), np.zeros(3))
        assert len(recwarn) == 0


@pytest.mark.tier2
class TestRunLengths:
    """Tests for run-length encoding."""

    def test_encoding(self):
        values, lengths = run_lengths(np.array([True, True, False, True]))
        np.testing.assert_array_equal(values, [True, False, True])
        np.testing.assert_array_equal(lengths, [2, 1, 1])

    def test_single_run(self):
        values, lengths = run_lengths(np.zeros(5, dtype=bool))
        np.testing.assert_array_equal(values, [False])
        np.testing.assert_array_equal(lengths, [5])

    def test_empty(self):
        values, lengths = run_lengths(np.array([], dtype=bool))
        assert values.size == 0
        assert lengths.size == 0

    def test_supported_runs_bounds(self):
        grid = np.arange(8.0)
        supported = np.array([False, True, True, False, False, True, True, True])
        assert supported_runs(supported, grid) == [(1.0, 2.0), (5.0, 7.0)]


@pytest.mark.tier2
class TestExtractInterval:
    """Tests for thresholding and envelope extraction."""

    def test_unimodal(self):
        grid = np.linspace(0, 1, 11)
        ratio = np.array([0.1, 0.5, 1.2, 2.0, 3.0, 2.0, 1.0, 0.5, 0.2, 0.1, 0.0])

        si = extract_interval(ratio, grid, BF=1)
        assert si.lower == pytest.approx(0.2)
        assert si.upper == pytest.approx(0.6)  # ratio == BF is supported
        assert not si.multimodal
        assert si.intervals == [(pytest.approx(0.2), pytest.approx(0.6))]

    def test_bimodal_envelope(self):
        """Disjoint support is flattened into one outer envelope."""
        grid = np.linspace(0, 1, 11)
        ratio = np.array([0.1, 2.0, 3.0, 0.5, 0.2, 0.1, 0.3, 2.5, 4.0, 2.0, 0.1])

        si = extract_interval(ratio, grid, BF=1)
        assert si.lower == pytest.approx(0.1)
        assert si.upper == pytest.approx(0.9)
        assert si.multimodal
        assert len(si.intervals) == 2
        assert si.intervals[0] == (pytest.approx(0.1), pytest.approx(0.2))
        assert si.intervals[1] == (pytest.approx(0.7), pytest.approx(0.9))

    def test_bimodal_collapses_at_higher_threshold(self):
        grid = np.linspace(0, 1, 11)
        ratio = np.array([0.1, 2.0, 3.0, 0.5, 0.2, 0.1, 0.3, 2.5, 4.0, 3.5, 0.1])

        si = extract_interval(ratio, grid, BF=3.5)
        assert not si.multimodal
        assert (si.lower, si.upper) == (pytest.approx(0.8), pytest.approx(0.9))

    def test_support_at_both_edges_is_not_multimodal(self):
        """One gap between supported grid edges gives only 3 runs."""
        grid = np.linspace(0, 1, 5)
        ratio = np.array([2.0, 2.0, 0.5, 2.0, 2.0])

        si = extract_interval(ratio, grid, BF=1)
        assert not si.multimodal
        assert (si.lower, si.upper) == (0.0, 1.0)
        assert si.intervals == [(0.0, 0.25), (0.75, 1.0)]

    def test_four_runs_are_multimodal(self):
        grid = np.linspace(0, 1, 5)
        ratio = np.array([0.5, 2.0, 0.5, 2.0, 2.0])

        si = extract_interval(ratio, grid, BF=1)
        assert si.multimodal
        assert (si.lower, si.upper) == (0.25, 1.0)
        assert len(si.intervals) == 2

    def test_single_supported_point_is_empty(self):
        grid = np.linspace(0, 1, 5)
        ratio = np.array([0.1, 0.1, 5.0, 0.1, 0.1])

        si = extract_interval(ratio, grid, BF=1)
        assert si.is_empty
        assert np.isnan(si.lower) and np.isnan(si.upper)
        assert si.intervals == []

    def test_no_support_is_empty(self):
        grid = np.linspace(0, 1, 5)
        si = extract_interval(np.full(5, 0.5), grid, BF=1)
        assert si.is_empty
        assert np.isnan(si.width)

    def test_missing_values_are_dropped_before_runs(self):
        """A missing ratio inside a supported run does not split it."""
        grid = np.linspace(0, 1, 6)
        ratio = np.array([0.1, 2.0, np.nan, 2.0, 0.1, 0.1])

        si = extract_interval(ratio, grid, BF=1)
        assert not si.multimodal
        assert (si.lower, si.upper) == (pytest.approx(0.2), pytest.approx(0.6))

    def test_missing_values_never_supported(self):
        grid = np.linspace(0, 1, 5)
        ratio = np.array([np.nan, np.nan, 2.0, np.nan, np.nan])
        assert extract_interval(ratio, grid, BF=1).is_empty

    def test_degenerate_grid_is_empty(self):
        grid = np.full(5, 1.0)
        assert extract_interval(np.full(5, 10.0), grid, BF=1).is_empty

    def test_shape_mismatch(self):
        with pytest.raises(ValueError, match="same shape"):
            extract_interval(np.ones(3), np.linspace(0, 1, 4))

    def test_unpacking(self):
        grid = np.linspace(0, 1, 11)
        lo, hi = extract_interval(np.full(11, 2.0), grid, BF=1)
        assert (lo, hi) == (0.0, 1.0)

    def test_repr(self):
        si = SupportInterval(lower=0.1, upper=0.9, BF=3.0)
        assert repr(si) == "SupportInterval(BF=3: [0.1000, 0.9000])"


@pytest.mark.tier2
class TestThresholdValidation:
    """Tests for BF validation."""

    @pytest.mark.parametrize("bad", [0, -1, np.nan, np.inf])
    def test_invalid(self, bad):
        with pytest.raises(ValueError, match="BF must be a positive"):
            validate_threshold(bad)

    @pytest.mark.parametrize("good", [1, 1 / 3, 100])
    def test_valid(self, good):
        assert validate_threshold(good) == float(good)
