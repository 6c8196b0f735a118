"""
Support interval computation for a single parameter.

A support interval contains the parameter values whose posterior density
exceeds their prior density by at least a factor BF. Under the
Savage-Dickey density ratio, testing any value inside the interval against
a point null gives a Bayes factor smaller than 1/BF.

Steps:
1. Build a shared grid over prior and posterior draws (core.build_grid)
2. Fit a density to each sample and evaluate both on the grid
3. Compute the pointwise ratio posterior / prior
4. Threshold the ratio and report the outer bounds of the supported region
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np
import pandas as pd

from .config import DEFAULT_CONFIG
from .core import build_grid, combined_range, is_degenerate_grid, pooled_draws
from .density import DensityFitter, as_sample, fit_density
from .diagnostics import DensityFittingError


def validate_threshold(BF) -> float:
    """Check that a support threshold is a positive finite number."""
    BF = float(BF)
    if not np.isfinite(BF) or BF <= 0:
        raise ValueError(f"BF must be a positive finite number, got {BF}")
    return BF


# =============================================================================
# Result containers
# =============================================================================

@dataclass
class SupportCurve:
    """Densities and their ratio evaluated on the grid of one parameter.

    Attributes:
        grid: Evaluation points
        prior_density: Prior density at each grid point
        posterior_density: Posterior density at each grid point
        ratio: posterior_density / prior_density (NaN where undefined)
        identical: Prior and posterior draws were identical. The curve is
            kept for plotting only and never yields an interval.
    """
    grid: np.ndarray
    prior_density: np.ndarray
    posterior_density: np.ndarray
    ratio: np.ndarray
    identical: bool = False

    def interval(self, BF: float = DEFAULT_CONFIG["BF"]) -> "SupportInterval":
        """Extract the support interval at threshold BF from this curve."""
        if self.identical:
            return SupportInterval(BF=validate_threshold(BF), curve=self)
        interval = extract_interval(self.ratio, self.grid, BF)
        interval.curve = self
        return interval

    def to_frame(self) -> pd.DataFrame:
        """Long-format table of the curve (one row per grid point)."""
        return pd.DataFrame({
            "x": self.grid,
            "prior": self.prior_density,
            "posterior": self.posterior_density,
            "ratio": self.ratio,
        })


@dataclass
class SupportInterval:
    """Support interval at one threshold.

    (lower, upper) is the outer envelope of every supported grid point;
    (NaN, NaN) means no interval could be determined at this threshold.
    Disjoint supported regions are listed in `intervals` in grid order.

    Attributes:
        lower: Lower bound (NaN if no support)
        upper: Upper bound (NaN if no support)
        BF: Threshold the interval was computed at
        intervals: Disjoint supported sub-intervals
        multimodal: True if the thresholded ratio splits into more than 3 runs
        curve: Evaluated curve the interval was extracted from, if any
    """
    lower: float = np.nan
    upper: float = np.nan
    BF: float = DEFAULT_CONFIG["BF"]
    intervals: List[Tuple[float, float]] = field(default_factory=list)
    multimodal: bool = False
    curve: Optional[SupportCurve] = None

    @property
    def is_empty(self) -> bool:
        return bool(np.isnan(self.lower) or np.isnan(self.upper))

    @property
    def width(self) -> float:
        if self.is_empty:
            return np.nan
        return self.upper - self.lower

    def __iter__(self):
        # Unpack as lo, hi = interval
        yield self.lower
        yield self.upper

    def __repr__(self) -> str:
        extra = f", {len(self.intervals)} regions" if self.multimodal else ""
        return f"SupportInterval(BF={self.BF:g}: [{self.lower:.4f}, {self.upper:.4f}]{extra})"


# =============================================================================
# Ratio and region extraction
# =============================================================================

def evaluate_ratio(prior_density, posterior_density, grid: np.ndarray) -> np.ndarray:
    """
    Evaluate the posterior/prior density ratio on a grid.

    ratio[i] = posterior(grid[i]) / prior(grid[i])

    No smoothing or clipping is applied. Undefined values (0/0, x/0) are
    returned as NaN so they are excluded from thresholding.

    Parameters
    ----------
    prior_density, posterior_density : callable
        Fitted densities, evaluable on an array of points
    grid : array
        Evaluation points

    Returns
    -------
    ratio : array
        Density ratio at each grid point
    """
    grid = np.asarray(grid, dtype=float)
    d_prior = np.asarray(prior_density(grid), dtype=float)
    d_posterior = np.asarray(posterior_density(grid), dtype=float)
    return density_ratio(d_prior, d_posterior)


def density_ratio(d_prior: np.ndarray, d_posterior: np.ndarray) -> np.ndarray:
    """Pointwise d_posterior / d_prior with non-finite results set to NaN."""
    with np.errstate(divide="ignore", invalid="ignore"):
        ratio = d_posterior / d_prior
    ratio = np.asarray(ratio, dtype=float)
    ratio[~np.isfinite(ratio)] = np.nan
    return ratio


def run_lengths(x: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Run-length encode a 1-D sequence.

    Parameters
    ----------
    x : array
        Sequence to encode

    Returns
    -------
    values : array
        Value of each run
    lengths : array
        Length of each run
    """
    x = np.asarray(x)
    if x.size == 0:
        return x[:0], np.zeros(0, dtype=int)
    starts = np.concatenate([[0], np.flatnonzero(x[1:] != x[:-1]) + 1])
    lengths = np.diff(np.append(starts, x.size))
    return x[starts], lengths


def supported_runs(supported: np.ndarray, grid: np.ndarray) -> List[Tuple[float, float]]:
    """
    Bounds of each contiguous run of supported grid points.

    Parameters
    ----------
    supported : bool array
        Support indicator per grid point (missing entries already removed)
    grid : array
        Grid points matching `supported`

    Returns
    -------
    runs : list of (lower, upper)
        One entry per run of True values, in grid order
    """
    values, lengths = run_lengths(supported)
    ends = np.cumsum(lengths)
    starts = ends - lengths
    return [
        (float(grid[s]), float(grid[e - 1]))
        for v, s, e in zip(values, starts, ends)
        if v
    ]


def extract_interval(
    ratio: np.ndarray,
    grid: np.ndarray,
    BF: float = DEFAULT_CONFIG["BF"],
) -> SupportInterval:
    """
    Extract the support interval from a density ratio curve.

    Grid points with ratio >= BF are supported; points with an undefined
    ratio are dropped before any run analysis. The returned interval is the
    smallest interval enclosing all supported points. The individual
    supported runs are listed in `intervals`. The result is flagged as
    multimodal when the thresholded ratio changes value more than twice,
    i.e. it splits into more than 3 runs; support touching both grid edges
    around a single gap (3 runs) is not flagged.

    Parameters
    ----------
    ratio : array
        Posterior/prior density ratio at each grid point
    grid : array
        Grid points
    BF : float
        Support threshold

    Returns
    -------
    interval : SupportInterval
        (NaN, NaN) if fewer than two grid points are supported or the
        grid has zero width
    """
    BF = validate_threshold(BF)
    ratio = np.asarray(ratio, dtype=float)
    grid = np.asarray(grid, dtype=float)
    if ratio.shape != grid.shape:
        raise ValueError(
            f"ratio and grid must have the same shape, got {ratio.shape} and {grid.shape}"
        )

    if is_degenerate_grid(grid):
        return SupportInterval(BF=BF)

    valid = np.isfinite(ratio)
    x_axis = grid[valid]
    crit = ratio[valid] >= BF

    x_supported = x_axis[crit]
    if x_supported.size < 2:
        return SupportInterval(BF=BF)

    # flag only when support switches on and off more than twice along the grid
    _, lengths = run_lengths(crit)
    return SupportInterval(
        lower=float(np.min(x_supported)),
        upper=float(np.max(x_supported)),
        BF=BF,
        intervals=supported_runs(crit, x_axis),
        multimodal=len(lengths) > 3,
    )


# =============================================================================
# Single-parameter driver
# =============================================================================

def identical_draws(prior, posterior) -> bool:
    """True if two samples have the same length, values and order."""
    prior = as_sample(prior)
    posterior = as_sample(posterior)
    return prior.shape == posterior.shape and bool(np.array_equal(prior, posterior))


def density_kwargs(bw_method) -> dict:
    return {} if bw_method is None else {"bw_method": bw_method}


def identity_curve(
    sample,
    extend_scale: float = DEFAULT_CONFIG["extend_scale"],
    precision: int = DEFAULT_CONFIG["precision"],
    density: DensityFitter = fit_density,
    bw_method=DEFAULT_CONFIG["bw_method"],
) -> Optional[SupportCurve]:
    """Curve of a sample against itself, used as plot data for identical draws.

    The ratio is 1 wherever the density is positive. Returns None when the
    sample cannot be drawn (non-finite values, no spread, or a failed fit).
    """
    sample = as_sample(sample)
    if sample.size == 0 or not np.all(np.isfinite(sample)):
        return None
    grid = build_grid(sample, sample, extend_scale=extend_scale, precision=precision)
    if is_degenerate_grid(grid):
        return None
    try:
        f_sample = density(sample, **density_kwargs(bw_method))
    except DensityFittingError:
        # identical draws report no interval, so only the plot data is lost
        return None

    d_sample = np.asarray(f_sample(grid), dtype=float)
    return SupportCurve(
        grid=grid,
        prior_density=d_sample,
        posterior_density=d_sample.copy(),
        ratio=density_ratio(d_sample, d_sample),
        identical=True,
    )


def support_curve(
    prior,
    posterior,
    extend_scale: float = DEFAULT_CONFIG["extend_scale"],
    precision: int = DEFAULT_CONFIG["precision"],
    density: DensityFitter = fit_density,
    bw_method=DEFAULT_CONFIG["bw_method"],
    keep_identical: bool = False,
) -> Optional[SupportCurve]:
    """
    Fit both densities and evaluate their ratio on the shared grid.

    The curve does not depend on the threshold, so one curve can be reused
    for every requested BF.

    Parameters
    ----------
    prior, posterior : array-like
        Prior and posterior draws of one parameter
    extend_scale : float
        Fraction of the range width added on each side of the grid
    precision : int
        Number of grid points
    density : callable
        Density fitter, called as density(sample) or
        density(sample, bw_method=...)
    bw_method : str or float, optional
        Bandwidth rule forwarded to the density fitter
    keep_identical : bool
        For identical draws, return an identity curve (see identity_curve)
        for plotting instead of None

    Returns
    -------
    curve : SupportCurve or None
        None if the samples are identical (unless keep_identical), if the
        pooled draws have no spread, or if the grid collapses because the
        pooled MAD is zero. Only the last case fits the densities first.

    Raises
    ------
    DensityFittingError
        If either density cannot be fitted
    """
    prior = as_sample(prior)
    posterior = as_sample(posterior)

    if identical_draws(prior, posterior):
        if keep_identical:
            return identity_curve(
                posterior,
                extend_scale=extend_scale,
                precision=precision,
                density=density,
                bw_method=bw_method,
            )
        return None

    for label, sample in (("prior", prior), ("posterior", posterior)):
        if not np.all(np.isfinite(sample)):
            raise DensityFittingError(f"{label} draws contain non-finite values")

    lower, upper = combined_range(pooled_draws(prior, posterior))
    if upper - lower <= 0:
        return None

    grid = build_grid(prior, posterior, extend_scale=extend_scale, precision=precision)

    f_prior = density(prior, **density_kwargs(bw_method))
    f_posterior = density(posterior, **density_kwargs(bw_method))

    # MAD = 0 with spread in the draws; the fits above still reject constant samples
    if is_degenerate_grid(grid):
        return None

    d_prior = np.asarray(f_prior(grid), dtype=float)
    d_posterior = np.asarray(f_posterior(grid), dtype=float)

    return SupportCurve(
        grid=grid,
        prior_density=d_prior,
        posterior_density=d_posterior,
        ratio=density_ratio(d_prior, d_posterior),
    )


def compute_interval(
    prior,
    posterior,
    BF: float = DEFAULT_CONFIG["BF"],
    extend_scale: float = DEFAULT_CONFIG["extend_scale"],
    precision: int = DEFAULT_CONFIG["precision"],
    density: DensityFitter = fit_density,
    bw_method=DEFAULT_CONFIG["bw_method"],
) -> SupportInterval:
    """
    Compute the support interval of one parameter at one threshold.

    Parameters
    ----------
    prior, posterior : array-like
        Prior and posterior draws of one parameter
    BF : float
        Amount of support required to be included in the interval
    extend_scale : float
        Fraction of the range width added on each side of the grid
    precision : int
        Number of grid points
    density : callable
        Density fitter (default: Gaussian KDE)
    bw_method : str or float, optional
        Bandwidth rule forwarded to the density fitter

    Returns
    -------
    interval : SupportInterval
        (NaN, NaN) when prior and posterior draws are identical, when the
        draws have no spread, or when fewer than two grid points reach BF

    Raises
    ------
    DensityFittingError
        If either density cannot be fitted
    """
    BF = validate_threshold(BF)
    curve = support_curve(
        prior,
        posterior,
        extend_scale=extend_scale,
        precision=precision,
        density=density,
        bw_method=bw_method,
    )
    if curve is None:
        return SupportInterval(BF=BF)
    return curve.interval(BF)
