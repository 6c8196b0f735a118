"""
Evaluation grid for posterior/prior density ratios.

This module provides the shared numeric domain on which both densities
are evaluated:
- Combined range of the prior and posterior draws
- Robust (median +/- k MAD) range resistant to extreme draws
- The extended, evenly spaced evaluation grid
"""

import numpy as np
from scipy import stats
from typing import Tuple, Union

from .config import DEFAULT_CONFIG
from .density import as_sample

ArrayLike = Union[float, np.ndarray]


def pooled_draws(prior, posterior) -> np.ndarray:
    """Concatenate prior and posterior draws into one flat array."""
    return np.concatenate([as_sample(prior), as_sample(posterior)])


def combined_range(x: np.ndarray) -> Tuple[float, float]:
    """
    Compute the full range of the pooled draws.

    Parameters
    ----------
    x : array
        Pooled draws

    Returns
    -------
    lower, upper : float
        min(x), max(x)
    """
    return float(np.min(x)), float(np.max(x))


def robust_range(
    x: np.ndarray,
    mad_width: float = DEFAULT_CONFIG["mad_width"],
) -> Tuple[float, float]:
    """
    Compute an outlier-resistant range of the pooled draws.

    range = median(x) +/- mad_width * MAD(x)

    MAD is scaled by 1.4826 so that it estimates the standard deviation
    for normally distributed draws.

    Parameters
    ----------
    x : array
        Pooled draws
    mad_width : float
        Half-width of the range in MAD units

    Returns
    -------
    lower, upper : float
        Robust range bounds
    """
    center = float(np.median(x))
    spread = float(stats.median_abs_deviation(x, scale="normal"))
    return center - mad_width * spread, center + mad_width * spread


def grid_range(
    prior,
    posterior,
    extend_scale: float = DEFAULT_CONFIG["extend_scale"],
    mad_width: float = DEFAULT_CONFIG["mad_width"],
) -> Tuple[float, float]:
    """
    Compute the bounds of the evaluation grid.

    The combined range is intersected with the robust range, so a single
    extreme draw cannot stretch the grid, and the result is then extended
    by extend_scale * width on each side so density tails are not cut at
    the data boundary.

    Parameters
    ----------
    prior, posterior : array-like
        Prior and posterior draws of one parameter
    extend_scale : float
        Fraction of the range width added on each side
    mad_width : float
        Half-width of the robust range in MAD units

    Returns
    -------
    lower, upper : float
        Grid bounds (equal when the pooled draws have no spread)
    """
    if extend_scale < 0:
        raise ValueError(f"extend_scale must be non-negative, got {extend_scale}")

    x = pooled_draws(prior, posterior)
    full_lo, full_hi = combined_range(x)
    robust_lo, robust_hi = robust_range(x, mad_width)

    lower = max(full_lo, robust_lo)
    upper = min(full_hi, robust_hi)

    extension = (upper - lower) * extend_scale
    return lower - extension, upper + extension


def build_grid(
    prior,
    posterior,
    extend_scale: float = DEFAULT_CONFIG["extend_scale"],
    precision: int = DEFAULT_CONFIG["precision"],
    mad_width: float = DEFAULT_CONFIG["mad_width"],
) -> np.ndarray:
    """
    Build the shared evaluation grid for one parameter.

    Parameters
    ----------
    prior, posterior : array-like
        Prior and posterior draws of one parameter
    extend_scale : float
        Fraction of the range width added on each side
    precision : int
        Number of grid points (endpoints included)
    mad_width : float
        Half-width of the robust range in MAD units

    Returns
    -------
    grid : array
        Evenly spaced points. If the pooled draws have no spread, all
        points are equal (see is_degenerate_grid).
    """
    if precision < 2:
        raise ValueError(f"precision must be at least 2, got {precision}")

    lower, upper = grid_range(prior, posterior, extend_scale, mad_width)
    return np.linspace(lower, upper, int(precision))


def is_degenerate_grid(grid: np.ndarray) -> bool:
    """True if the grid has zero width, so no support can be distinguished."""
    return bool(grid.size == 0 or grid[-1] - grid[0] <= 0)
