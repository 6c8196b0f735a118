"""
Support Intervals

Savage-Dickey support intervals from prior and posterior draws: the
parameter values whose posterior density exceeds their prior density by
at least a factor BF.
"""

from .core import (
    combined_range,
    robust_range,
    grid_range,
    build_grid,
    is_degenerate_grid,
)

from .density import (
    KDEDensity,
    fit_density,
)

from .support import (
    SupportCurve,
    SupportInterval,
    evaluate_ratio,
    run_lengths,
    supported_runs,
    extract_interval,
    support_curve,
    compute_interval,
)

from .batch import (
    SupportIntervalResult,
    compute_table,
    si,
)

from .draws import (
    as_parameter_set,
    align_parameter_sets,
)

from .diagnostics import (
    SupportIntervalWarning,
    ConfigurationWarning,
    MultiModalSupportWarning,
    DensityFittingError,
    ShapeMismatchError,
    Diagnostic,
)

from .config import DEFAULT_CONFIG

__version__ = "0.1.0"

__all__ = [
    # Grid
    "combined_range",
    "robust_range",
    "grid_range",
    "build_grid",
    "is_degenerate_grid",
    # Densities
    "KDEDensity",
    "fit_density",
    # Single parameter
    "SupportCurve",
    "SupportInterval",
    "evaluate_ratio",
    "run_lengths",
    "supported_runs",
    "extract_interval",
    "support_curve",
    "compute_interval",
    # Batch
    "SupportIntervalResult",
    "compute_table",
    "si",
    # Draws
    "as_parameter_set",
    "align_parameter_sets",
    # Diagnostics
    "SupportIntervalWarning",
    "ConfigurationWarning",
    "MultiModalSupportWarning",
    "DensityFittingError",
    "ShapeMismatchError",
    "Diagnostic",
    "DEFAULT_CONFIG",
]
