"""
Support intervals for many parameters and thresholds.

compute_table() runs the single-parameter computation over every
(threshold, parameter) pair and assembles one result table, ordered by
threshold first and parameter second, in the caller's order. Non-fatal
conditions are returned as Diagnostic records; si() is the user-facing
wrapper that turns them into Python warnings.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Union

import numpy as np
import pandas as pd
from tqdm import tqdm

from .config import DEFAULT_CONFIG
from .density import DensityFitter, fit_density
from .diagnostics import (
    ConfigurationWarning,
    DensityFittingError,
    Diagnostic,
    MultiModalSupportWarning,
    MISSING_PRIOR_MESSAGE,
    MULTIMODAL_MESSAGE,
    emit_diagnostics,
)
from .draws import align_parameter_sets, as_parameter_set, is_single_parameter
from .support import (
    SupportCurve,
    SupportInterval,
    compute_interval,
    identical_draws,
    identity_curve,
    support_curve,
    validate_threshold,
)


ThresholdLike = Union[float, Sequence[float], np.ndarray]

# CI holds the support level BF, as downstream SI tables expect
TABLE_COLUMNS = ["Parameter", "CI", "CI_low", "CI_high"]


@dataclass
class SupportIntervalResult:
    """Output of compute_table().

    Attributes:
        table: One row per (threshold, parameter) with columns
            Parameter, CI (the BF threshold), CI_low, CI_high (and Error
            when errors are recorded)
        diagnostics: Non-fatal conditions found during the computation
        curves: Evaluated density curve per parameter. Identical prior and
            posterior draws (including a missing prior) get a plot-only curve
            with ratio 1; None when no curve could be evaluated.
        intervals: SupportInterval objects aligned with the table rows
    """
    table: pd.DataFrame
    diagnostics: List[Diagnostic] = field(default_factory=list)
    curves: Dict[str, Optional[SupportCurve]] = field(default_factory=dict)
    intervals: List[SupportInterval] = field(default_factory=list)

    def warnings_of(self, category: type) -> List[Diagnostic]:
        """Diagnostics of a given category."""
        return [d for d in self.diagnostics if issubclass(d.category, category)]

    def plot_data(self) -> pd.DataFrame:
        """Long-format densities and ratio per parameter for plotting layers."""
        frames = []
        for name, curve in self.curves.items():
            if curve is None:
                continue
            frame = curve.to_frame()
            frame.insert(0, "Parameter", name)
            frames.append(frame)
        if not frames:
            return pd.DataFrame(columns=["Parameter", "x", "prior", "posterior", "ratio"])
        return pd.concat(frames, ignore_index=True)


def as_thresholds(BF: ThresholdLike) -> List[float]:
    """Convert one or several support thresholds to a validated list."""
    values = np.atleast_1d(np.asarray(BF, dtype=float)).ravel()
    if values.size == 0:
        raise ValueError("At least one BF threshold is required")
    return [validate_threshold(b) for b in values]


def compute_table(
    prior,
    posterior,
    BF: ThresholdLike = DEFAULT_CONFIG["BF"],
    verbose: bool = True,
    extend_scale: float = DEFAULT_CONFIG["extend_scale"],
    precision: int = DEFAULT_CONFIG["precision"],
    density: DensityFitter = fit_density,
    bw_method=DEFAULT_CONFIG["bw_method"],
    reuse_densities: bool = True,
    on_error: str = "raise",
    progress: bool = False,
) -> SupportIntervalResult:
    """Compute support intervals for every parameter and threshold.

    Args:
        prior: Prior draws, column-aligned with posterior. If None, the
            posterior is used as its own prior (and a ConfigurationWarning
            diagnostic is recorded when verbose).
        posterior: Posterior draws (see draws.as_parameter_set for formats)
        BF: One threshold or an ordered sequence of thresholds
        verbose: Record the missing-prior diagnostic
        extend_scale: Fraction of the range width added on each grid side
        precision: Number of grid points
        density: Density fitter (default: Gaussian KDE)
        bw_method: Bandwidth rule forwarded to the density fitter
        reuse_densities: Fit each parameter's densities once and reuse them
            for every threshold. Output is the same either way.
        on_error: "raise" aborts the whole batch on the first density
            fitting failure; "record" marks the failing parameter's rows with
            NaN bounds and the error message in an Error column
        progress: Show a progress bar

    Returns:
        SupportIntervalResult with rows ordered by threshold, then parameter

    Raises:
        ShapeMismatchError: Prior and posterior have different column counts
        DensityFittingError: A density could not be fitted (on_error="raise")
    """
    if on_error not in ("raise", "record"):
        raise ValueError(f"on_error must be 'raise' or 'record', got {on_error!r}")

    posterior = as_parameter_set(posterior)
    prior = None if prior is None else as_parameter_set(prior)
    prior, posterior = align_parameter_sets(prior, posterior)
    thresholds = as_thresholds(BF)

    diagnostics: List[Diagnostic] = []
    if prior is None:
        prior = posterior.copy()
        if verbose:
            diagnostics.append(Diagnostic(ConfigurationWarning, MISSING_PRIOR_MESSAGE))

    names = list(posterior.columns)
    settings = dict(
        extend_scale=extend_scale,
        precision=precision,
        density=density,
        bw_method=bw_method,
    )

    curves: Dict[str, Optional[SupportCurve]] = {}
    errors: Dict[str, str] = {}

    def record_error(name: str, error: DensityFittingError):
        if on_error == "raise":
            raise error
        errors[name] = str(error)
        diagnostics.append(Diagnostic(DensityFittingError, str(error), parameter=name))

    if reuse_densities:
        for name in tqdm(names, desc="Fitting densities", disable=not progress):
            try:
                curves[name] = support_curve(
                    prior[name].to_numpy(),
                    posterior[name].to_numpy(),
                    keep_identical=True,
                    **settings,
                )
            except DensityFittingError as e:
                curves[name] = None
                record_error(name, e)

        def interval_for(name: str, bf: float) -> SupportInterval:
            curve = curves[name]
            if curve is None:
                return SupportInterval(BF=bf)
            return curve.interval(bf)
    else:
        def interval_for(name: str, bf: float) -> SupportInterval:
            prior_draws = prior[name].to_numpy()
            posterior_draws = posterior[name].to_numpy()
            interval = compute_interval(prior_draws, posterior_draws, bf, **settings)
            if name not in curves:
                curve = interval.curve
                if curve is None and identical_draws(prior_draws, posterior_draws):
                    curve = identity_curve(posterior_draws, **settings)
                curves[name] = curve
            return interval

    rows = []
    intervals = []
    pbar = tqdm(
        total=len(thresholds) * len(names),
        desc="Support intervals",
        disable=not progress or reuse_densities,
    )
    for bf in thresholds:
        for name in names:
            interval = SupportInterval(BF=bf)
            if name not in errors:
                try:
                    interval = interval_for(name, bf)
                except DensityFittingError as e:
                    curves.setdefault(name, None)
                    record_error(name, e)

            if interval.multimodal:
                diagnostics.append(
                    Diagnostic(MultiModalSupportWarning, MULTIMODAL_MESSAGE, parameter=name, BF=bf)
                )

            row = {
                "Parameter": name,
                "CI": bf,
                "CI_low": interval.lower,
                "CI_high": interval.upper,
            }
            if on_error == "record":
                row["Error"] = errors.get(name)
            rows.append(row)
            intervals.append(interval)
            pbar.update(1)
    pbar.close()

    columns = TABLE_COLUMNS + (["Error"] if on_error == "record" else [])
    table = pd.DataFrame(rows, columns=columns)

    return SupportIntervalResult(
        table=table,
        diagnostics=diagnostics,
        curves={name: curves.get(name) for name in names},
        intervals=intervals,
    )


def si(
    posterior,
    prior=None,
    BF: ThresholdLike = DEFAULT_CONFIG["BF"],
    verbose: bool = True,
    **kwargs,
) -> pd.DataFrame:
    """Compute support intervals.

    A support interval contains only the parameter values that predict the
    observed data better than average by some degree BF: values whose
    posterior density is at least BF times their prior density.

    Choosing BF:
        - BF = 1 contains values whose credibility is not decreased by the data
        - BF > 1 contains values that received more impressive support
        - BF < 1 contains values whose credibility has not been impressively
          decreased; if an SI at BF = 1/3 excludes 0, the Bayes factor
          against the point null is larger than 3

    Priors must be proper (at the very least not flat) for the interval to
    be meaningful.

    Args:
        posterior: Posterior draws: a 1-D array for one parameter, or a
            2-D array, dict or DataFrame with one column per parameter
        prior: Prior draws with columns matching posterior by position
        BF: Amount of support required to be included in the interval
            (one value or a sequence)
        verbose: Warn when no prior is given
        **kwargs: Passed to compute_table (extend_scale, precision, ...)

    Returns:
        DataFrame with columns Parameter (omitted for 1-D input), CI (the
        BF threshold), CI_low, CI_high. If the requested support is higher
        than observed, the bounds are NaN. attrs["plot_data"] holds the
        evaluated densities.

    Example:
        >>> rng = np.random.default_rng(0)
        >>> prior = rng.normal(0, 1, 1000)
        >>> posterior = rng.normal(0.5, 0.3, 1000)
        >>> si(posterior, prior)  # doctest: +SKIP
    """
    result = compute_table(prior, posterior, BF=BF, verbose=verbose, **kwargs)
    emit_diagnostics(result.diagnostics)

    table = result.table
    if is_single_parameter(posterior):
        table = table.drop(columns="Parameter")

    table.attrs["ci_method"] = "SI"
    table.attrs["plot_data"] = result.plot_data()
    return table
