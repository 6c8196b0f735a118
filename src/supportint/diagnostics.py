"""
Warnings, errors and diagnostics for support interval computation.

Non-fatal conditions are collected as `Diagnostic` records instead of being
printed or warned about where they occur. The user-facing `si()` entry point
forwards them to the `warnings` module in one place.
"""

import warnings
from dataclasses import dataclass
from typing import Iterable, Optional


class SupportIntervalWarning(UserWarning):
    """Base class for non-fatal support interval conditions."""


class ConfigurationWarning(SupportIntervalWarning):
    """The prior was omitted and the posterior used in its place."""


class MultiModalSupportWarning(SupportIntervalWarning):
    """More than one disjoint supported region was found."""


class DensityFittingError(ValueError):
    """A density could not be fitted to a sample."""


class ShapeMismatchError(ValueError):
    """Prior and posterior draws have different numbers of parameters."""


MISSING_PRIOR_MESSAGE = (
    "Prior not specified! "
    "Support intervals ('si') can only be computed for Bayesian models with proper priors. "
    "Please specify priors (with column order matching 'posterior')."
)

MULTIMODAL_MESSAGE = "More than 1 SI detected. Plot the result to investigate."


@dataclass
class Diagnostic:
    """A single recorded condition.

    Attributes:
        category: Warning or error class describing the condition
        message: Human-readable message
        parameter: Parameter the condition refers to (None for the whole call)
        BF: Support threshold the condition refers to (None if not specific)
    """
    category: type
    message: str
    parameter: Optional[str] = None
    BF: Optional[float] = None

    def format(self) -> str:
        context = []
        if self.parameter is not None:
            context.append(f"parameter={self.parameter}")
        if self.BF is not None:
            context.append(f"BF={self.BF:g}")
        if not context:
            return self.message
        return f"{self.message} ({', '.join(context)})"


def emit_diagnostics(diagnostics: Iterable[Diagnostic], stacklevel: int = 3) -> None:
    """Forward recorded diagnostics to the warnings module.

    Error diagnostics (recorded per row) are reported as RuntimeWarning so
    that emitting never raises.
    """
    for diag in diagnostics:
        category = diag.category
        if not issubclass(category, Warning):
            category = RuntimeWarning
        warnings.warn(diag.format(), category, stacklevel=stacklevel)
