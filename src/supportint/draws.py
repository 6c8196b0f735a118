"""
Adapters from user-held draws to aligned parameter tables.

Prior and posterior draws arrive as 1-D arrays (one parameter), 2-D arrays
(draws x parameters), dicts of columns, or pandas DataFrames. Every form is
converted to a DataFrame with one float column per parameter. Prior and
posterior tables correspond by column position; the posterior's column names
label the results.
"""

from typing import Optional, Tuple

import numpy as np
import pandas as pd

from .diagnostics import ShapeMismatchError


def as_parameter_set(draws, name: str = "X") -> pd.DataFrame:
    """Convert draws to a DataFrame with one column per parameter.

    Args:
        draws: 1-D array-like, 2-D array (rows are draws), dict of columns,
            pandas Series or DataFrame
        name: Column name used for 1-D input

    Returns:
        DataFrame of float draws (a new object; the input is not modified)
    """
    if isinstance(draws, pd.DataFrame):
        frame = draws.copy()
    elif isinstance(draws, pd.Series):
        frame = draws.to_frame(name=draws.name if draws.name is not None else name)
    elif isinstance(draws, dict):
        frame = pd.DataFrame({k: np.asarray(v, dtype=float) for k, v in draws.items()})
    else:
        try:
            array = np.asarray(draws, dtype=float)
        except (TypeError, ValueError) as e:
            raise TypeError(
                f"Cannot interpret draws of type {type(draws).__name__} as numeric"
            ) from e
        if array.ndim == 1:
            frame = pd.DataFrame({name: array})
        elif array.ndim == 2:
            frame = pd.DataFrame(array, columns=[f"V{i + 1}" for i in range(array.shape[1])])
        else:
            raise ValueError(f"Draws must be 1-D or 2-D, got {array.ndim}-D")

    frame.columns = [str(c) for c in frame.columns]
    if frame.columns.duplicated().any():
        dupes = sorted(set(frame.columns[frame.columns.duplicated()]))
        raise ValueError(f"Parameter names must be unique, duplicated: {dupes}")

    return frame.astype(float)


def is_single_parameter(draws) -> bool:
    """True if draws describe exactly one parameter as a flat sequence."""
    if isinstance(draws, (pd.DataFrame, dict)):
        return False
    if isinstance(draws, pd.Series):
        return True
    return np.ndim(draws) == 1


def align_parameter_sets(
    prior: Optional[pd.DataFrame],
    posterior: pd.DataFrame,
) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """Match prior columns to posterior columns by position.

    Args:
        prior: Prior draws (None is passed through unchanged)
        posterior: Posterior draws

    Returns:
        (prior, posterior) with prior columns relabelled to the posterior's

    Raises:
        ShapeMismatchError: If the number of parameters differs
    """
    if prior is None:
        return None, posterior

    if prior.shape[1] != posterior.shape[1]:
        raise ShapeMismatchError(
            f"Prior has {prior.shape[1]} parameter(s) but posterior has "
            f"{posterior.shape[1]}; priors must match 'posterior' column by column"
        )

    prior = prior.copy()
    prior.columns = list(posterior.columns)
    return prior, posterior
