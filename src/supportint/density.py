"""
Continuous density estimates for a sample of draws.

Densities are fitted with a Gaussian kernel density estimator
(scipy.stats.gaussian_kde). The estimate is smooth and strictly positive
over the region covered by the sample, which keeps the posterior/prior
ratio well defined across the evaluation grid.
"""

import numpy as np
from scipy import stats
from typing import Callable, Optional, Union

from .diagnostics import DensityFittingError

ArrayLike = Union[float, np.ndarray]

# Any callable mapping a sample to an evaluable density
DensityFitter = Callable[..., Callable[[np.ndarray], np.ndarray]]


def as_sample(draws) -> np.ndarray:
    """
    Convert draws to a 1-D float array.

    Parameters
    ----------
    draws : array-like
        Draws of one scalar parameter

    Returns
    -------
    sample : ndarray
        Flat float array (a copy is not guaranteed)
    """
    sample = np.asarray(draws, dtype=float)
    if sample.ndim != 1:
        sample = sample.ravel()
    return sample


class KDEDensity:
    """
    Gaussian kernel density estimate of a 1-D sample.

    Parameters
    ----------
    sample : array-like
        Draws to fit. Must contain at least two finite, non-identical values.
    bw_method : str, float or callable, optional
        Bandwidth rule passed to scipy.stats.gaussian_kde
        (default: Scott's rule).

    Raises
    ------
    DensityFittingError
        If the sample is too small, contains non-finite values, or is
        degenerate (zero variance).
    """

    def __init__(self, sample, bw_method=None):
        sample = as_sample(sample)

        if sample.size < 2:
            raise DensityFittingError(
                f"At least 2 draws are needed to fit a density, got {sample.size}"
            )
        if not np.all(np.isfinite(sample)):
            n_bad = int(np.sum(~np.isfinite(sample)))
            raise DensityFittingError(
                f"Cannot fit a density to a sample with {n_bad} non-finite draw(s)"
            )
        if np.ptp(sample) == 0:
            raise DensityFittingError(
                f"Cannot fit a density to a constant sample (all draws = {sample[0]:g})"
            )

        try:
            self._kde = stats.gaussian_kde(sample, bw_method=bw_method)
        except (np.linalg.LinAlgError, ValueError) as e:
            raise DensityFittingError(f"Density fitting failed: {e}") from e

        self.n = sample.size

    @property
    def bandwidth(self) -> float:
        """Kernel standard deviation in data units."""
        return float(np.sqrt(self._kde.covariance[0, 0]))

    def evaluate(self, x: ArrayLike) -> np.ndarray:
        """Evaluate the density at x (always returns an array)."""
        x = np.atleast_1d(np.asarray(x, dtype=float))
        return self._kde.evaluate(x)

    __call__ = evaluate

    def __repr__(self) -> str:
        return f"KDEDensity(n={self.n}, bandwidth={self.bandwidth:.4g})"


def fit_density(sample, bw_method: Optional[Union[str, float]] = None) -> KDEDensity:
    """
    Fit a continuous density to a sample.

    This is the default density fitter used by the support interval drivers.
    Any callable with the same signature returning an object that can be
    called on an array of points may be used instead.

    Parameters
    ----------
    sample : array-like
        Draws of one scalar parameter
    bw_method : str or float, optional
        Bandwidth rule for the kernel density estimate

    Returns
    -------
    density : KDEDensity
        Fitted density
    """
    return KDEDensity(sample, bw_method=bw_method)
