"""
Input variants for the risk engine.

A computation is driven by a model, its parameters and the observed history.
These can come from a bare specification with user-supplied parameters, from
a point estimate, or from a posterior ensemble of parameter draws. The variant
is resolved once here; the engine downstream only sees a RiskSource.
"""

import numpy as np
import pandas as pd
from typing import Any, Optional, Union
from dataclasses import dataclass
from enum import Enum

from ..exceptions import ConfigurationError, DataError
from .results import future_index, is_calendar_index


class SourceKind(Enum):
    """Origin of the parameters used for a risk computation."""
    SPECIFICATION = "specification"
    POINT_ESTIMATE = "point_estimate"
    POSTERIOR_ENSEMBLE = "posterior_ensemble"


@dataclass
class FittedModel:
    """Estimation result: a model, its estimated parameters and the data used.

    ``par`` is a parameter vector for a point estimate or a matrix of
    posterior draws (one row per draw).
    """

    model: Any
    par: np.ndarray
    data: Union[np.ndarray, pd.Series]

    @property
    def is_ensemble(self) -> bool:
        par = np.asarray(self.par)
        return par.ndim == 2 and par.shape[0] > 1

    def with_newdata(self, newdata) -> Union[np.ndarray, pd.Series]:
        """History extended with observations that arrived after the fit."""
        if newdata is None:
            return self.data
        return append_observations(self.data, newdata)


@dataclass(frozen=True)
class RiskSource:
    """Resolved (model, parameters, history) triple."""

    kind: SourceKind
    model: Any
    params: np.ndarray
    data: Union[np.ndarray, pd.Series]

    @classmethod
    def from_specification(cls, model, params, data) -> 'RiskSource':
        """Use a model specification with explicitly supplied parameters."""
        return cls(
            kind=SourceKind.SPECIFICATION,
            model=model,
            params=as_parameter_matrix(params),
            data=data
        )

    @classmethod
    def from_fit(cls, fit: FittedModel, newdata=None) -> 'RiskSource':
        """Use a fitted model, optionally extending its history with newdata."""
        kind = SourceKind.POSTERIOR_ENSEMBLE if fit.is_ensemble else SourceKind.POINT_ESTIMATE
        return cls(
            kind=kind,
            model=fit.model,
            params=as_parameter_matrix(fit.par),
            data=fit.with_newdata(newdata)
        )

    @property
    def n_draws(self) -> int:
        return self.params.shape[0]

    @property
    def index(self) -> Optional[pd.Index]:
        """Time index of the history when it carries one."""
        if isinstance(self.data, pd.Series):
            return self.data.index
        return None

    def history(self) -> np.ndarray:
        """History as a 1-D float array."""
        return coerce_history(self.data)


def as_parameter_matrix(params) -> np.ndarray:
    """Parameters as a 2-D (draws x parameters) float matrix."""
    par = np.asarray(params, dtype=float)
    if par.ndim == 1:
        par = par.reshape(1, -1)
    if par.ndim != 2 or par.size == 0:
        raise ConfigurationError(
            f"Parameters must be a vector or a matrix of draws, got shape {np.shape(params)}"
        )
    return par


def coerce_history(data) -> np.ndarray:
    """Convert the observed history to a finite 1-D float array."""
    if isinstance(data, pd.DataFrame):
        if data.shape[1] != 1:
            raise DataError(f"Expected a single column of observations, got {data.shape[1]}")
        data = data.iloc[:, 0]

    try:
        y = np.asarray(data, dtype=float)
    except (TypeError, ValueError) as e:
        raise DataError(f"Observations must be numeric: {e}") from e

    if y.ndim != 1:
        raise DataError(f"Observations must be one-dimensional, got shape {y.shape}")
    if len(y) < 2:
        raise DataError(f"At least 2 observations are required, got {len(y)}")
    if not np.all(np.isfinite(y)):
        raise DataError("Observations contain missing or non-finite values")
    return y


def append_observations(data, newdata):
    """
    Concatenate new observations to a history, extending its index if any.

    A series whose index has no dates or integer steps to continue is
    flattened to a plain array.
    """
    if isinstance(data, pd.Series):
        if isinstance(newdata, pd.Series):
            return pd.concat([data, newdata])
        if not (is_calendar_index(data.index) or pd.api.types.is_integer_dtype(data.index)):
            return append_observations(data.to_numpy(dtype=float), newdata)
        values = np.asarray(newdata, dtype=float).ravel()
        index = future_index(data.index, len(values))
        return pd.concat([data, pd.Series(values, index=index, name=data.name)])

    return np.concatenate([
        np.asarray(data, dtype=float).ravel(),
        np.asarray(newdata, dtype=float).ravel()
    ])
