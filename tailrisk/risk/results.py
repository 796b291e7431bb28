"""
Risk result assembly and labelling.

The engine produces plain matrices; this module packages them into labelled
DataFrames (rows ``t=1..T`` in-sample or ``h=1..nahead`` out-of-sample,
columns the confidence levels) and optionally re-labels rows with the time
index of the underlying series.
"""

import dataclasses
import numpy as np
import pandas as pd
from typing import Dict, Any, Optional, Sequence, Tuple
from dataclasses import dataclass

from ..exceptions import DataError


@dataclass(frozen=True)
class RiskResult:
    """Value-at-Risk and Expected Shortfall tables for one computation."""

    var: pd.DataFrame
    es: Optional[pd.DataFrame]
    alpha: Tuple[float, ...]
    nahead: int
    in_sample: bool
    cumulative: bool = False
    nmesh: Optional[int] = None
    nsim: Optional[int] = None
    source: Optional[str] = None

    @property
    def has_es(self) -> bool:
        return self.es is not None

    def to_frame(self) -> pd.DataFrame:
        """VaR and ES side by side under a ('VaR' | 'ES', alpha) column index."""
        frames = {'VaR': self.var}
        if self.es is not None:
            frames['ES'] = self.es
        return pd.concat(frames, axis=1)

    def head(self, n: int = 5) -> pd.DataFrame:
        return self.to_frame().head(n)

    def summary(self) -> str:
        """Human readable summary of the risk tables."""
        mode = "in-sample" if self.in_sample else f"out-of-sample, {self.nahead} step(s) ahead"
        if self.cumulative:
            mode += ", cumulative"

        lines = [f"Risk measures ({mode})"]
        if self.source:
            lines.append(f"Parameter source: {self.source}")
        lines.append(f"Levels: {', '.join(f'{a:g}' for a in self.alpha)}")
        lines.append("")
        lines.append("Value-at-Risk:")
        lines.append(self.var.to_string())
        if self.es is not None:
            lines.append("")
            lines.append("Expected Shortfall:")
            lines.append(self.es.to_string())
        return "\n".join(lines)

    def export_metadata(self) -> Dict[str, Any]:
        return {
            'alpha': list(self.alpha),
            'nahead': self.nahead,
            'in_sample': self.in_sample,
            'cumulative': self.cumulative,
            'nmesh': self.nmesh,
            'nsim': self.nsim,
            'source': self.source,
            'rows': len(self.var)
        }

    def __str__(self) -> str:
        return self.summary()


def row_labels(n_rows: int, in_sample: bool) -> pd.Index:
    prefix = "t" if in_sample else "h"
    return pd.Index([f"{prefix}={i}" for i in range(1, n_rows + 1)])


def assemble_result(var: np.ndarray,
                    es: Optional[np.ndarray],
                    alpha: Sequence[float],
                    in_sample: bool,
                    nahead: int,
                    cumulative: bool = False,
                    nmesh: Optional[int] = None,
                    nsim: Optional[int] = None,
                    source: Optional[str] = None) -> RiskResult:
    """
    Package VaR and ES matrices into a RiskResult.

    Args:
        var: VaR matrix (rows x levels)
        es: ES matrix (rows x levels) or None
        alpha: Confidence levels, in the column order of the matrices
        in_sample: Rows are observations rather than horizon steps
        nahead: Forecast horizon

    Returns:
        RiskResult with labelled tables
    """
    index = row_labels(var.shape[0], in_sample)
    columns = pd.Index(list(alpha))

    var_frame = pd.DataFrame(var, index=index, columns=columns)
    es_frame = None if es is None else pd.DataFrame(es, index=index.copy(), columns=columns.copy())

    return RiskResult(
        var=var_frame,
        es=es_frame,
        alpha=tuple(alpha),
        nahead=nahead,
        in_sample=in_sample,
        cumulative=cumulative,
        nmesh=nmesh,
        nsim=nsim,
        source=source
    )


def date_step(index: pd.DatetimeIndex):
    """
    Spacing between consecutive dates: the index frequency, else the
    inferred frequency, else the median spacing. None when the spacing is
    missing, zero or negative.
    """
    if index.freq is not None:
        return index.freq
    if len(index) < 2 or index.hasnans:
        return None
    if len(index) >= 3 and index.is_unique and index.is_monotonic_increasing:
        freq = pd.infer_freq(index)
        if freq is not None:
            return freq
    spacing = pd.Series(index).diff().median()
    if pd.isna(spacing) or spacing <= pd.Timedelta(0):
        return None
    return spacing


def is_calendar_index(index) -> bool:
    """Whether the index carries dates that future rows can be labelled with."""
    if isinstance(index, pd.PeriodIndex):
        return len(index) > 0 and index.freq is not None
    if isinstance(index, pd.DatetimeIndex):
        return len(index) > 0 and date_step(index) is not None
    return False


def future_index(index: pd.Index, periods: int) -> pd.Index:
    """
    The ``periods`` index positions following the end of ``index``.

    Date indices advance by their frequency (inferred when not set, else the
    median spacing); integer indices advance by their step.
    """
    if len(index) == 0:
        raise DataError("Cannot extend an empty index")

    if isinstance(index, pd.PeriodIndex):
        return pd.period_range(start=index[-1] + 1, periods=periods, freq=index.freq)

    if isinstance(index, pd.DatetimeIndex):
        freq = date_step(index)
        if freq is None:
            raise DataError("Cannot infer a positive spacing from the date index")
        return pd.date_range(start=index[-1], periods=periods + 1, freq=freq)[1:]

    if isinstance(index, pd.RangeIndex):
        start = index[-1] + index.step
        return pd.RangeIndex(start, start + periods * index.step, index.step)

    if pd.api.types.is_integer_dtype(index):
        return pd.Index(index[-1] + np.arange(1, periods + 1))

    raise DataError(f"Cannot extend index of type {type(index).__name__}")


def label_with_index(result: RiskResult, index: pd.Index) -> RiskResult:
    """
    Re-label result rows with the time index of the analysed series.

    In-sample rows take the series index; out-of-sample rows take the
    positions following its last observation. Returns a new RiskResult.
    """
    if result.in_sample:
        if len(index) != len(result.var):
            raise DataError(
                f"Index length {len(index)} does not match {len(result.var)} in-sample rows"
            )
        new_index = pd.Index(index)
    else:
        new_index = future_index(pd.Index(index), result.nahead)

    var = result.var.copy()
    var.index = new_index
    es = None
    if result.es is not None:
        es = result.es.copy()
        es.index = new_index

    return dataclasses.replace(result, var=var, es=es)
