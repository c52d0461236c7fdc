from dataclasses import dataclass
from typing import Dict, Iterable, Optional

import pandas as pd
from statsmodels.tsa.seasonal import seasonal_decompose

from generation_eda.constants.parsed_fields import (
    DEFAULT_PERIOD,
    DEFAULT_RESAMPLE_FREQ,
    LOCAL_TIMEZONE,
    MIN_PERIOD_COVERAGE,
)
from generation_eda.utils.errors import InsufficientDataError


@dataclass
class DecompositionResult:
    """
    Descomposición aditiva observed = trend + seasonal + residual.
    trend y residual usan dtype Float64 con pd.NA en las posiciones del borde.
    """

    observed: pd.Series
    trend: pd.Series
    seasonal: pd.Series
    residual: pd.Series
    period: int

    @property
    def edge(self) -> int:
        return self.period // 2

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            {
                "observed": self.observed,
                "trend": self.trend,
                "seasonal": self.seasonal,
                "residual": self.residual,
            }
        )


def _with_absent(values, index, name: str) -> pd.Series:
    # NaN de statsmodels -> pd.NA explícito
    return pd.Series(values, index=index, name=name).astype("Float64")


def decompose(series: pd.Series, period: int = DEFAULT_PERIOD) -> DecompositionResult:
    """
    Descomposición clásica aditiva de una serie completa.

    La tendencia es una media móvil centrada de ancho `period` (2xP para
    periodos pares), la componente estacional es la media por fase del
    detrended centrada en cero y repetida a lo largo de la serie.

    Args:
        series: Serie sin valores faltantes, muestreada a intervalo fijo.
        period: Número de muestras por ciclo (365 para datos diarios).

    Raises:
        ValueError: Si la serie tiene NaN o period < 2.
        InsufficientDataError: Si len(series) < 2 * period.
    """
    period = int(period)
    if period < 2:
        raise ValueError(f"period debe ser >= 2, recibido {period}")
    if series.isna().any():
        raise ValueError(
            f"La serie '{series.name}' tiene {int(series.isna().sum())} valores faltantes"
        )
    if len(series) < 2 * period:
        raise InsufficientDataError(len(series), period)

    observed = series.astype(float)
    res = seasonal_decompose(
        observed.to_numpy(), model="additive", period=period, two_sided=True
    )

    return DecompositionResult(
        observed=observed,
        trend=_with_absent(res.trend, observed.index, "trend"),
        seasonal=pd.Series(res.seasonal, index=observed.index, name="seasonal"),
        residual=_with_absent(res.resid, observed.index, "residual"),
        period=period,
    )


def resample_series(
    df: pd.DataFrame,
    column: str,
    freq: Optional[str] = DEFAULT_RESAMPLE_FREQ,
    tz: str = LOCAL_TIMEZONE,
    min_coverage: float = MIN_PERIOD_COVERAGE,
) -> pd.Series:
    """
    Media por periodo (diaria por defecto) de una columna horaria.

    Los periodos se cortan en hora local (`tz`). El primer y el último periodo se
    descartan si tienen menos de `min_coverage` de las muestras de un periodo
    completo: un día local con una sola hora no es una media diaria.
    """
    series = df[column]
    if freq is None:
        return series.rename(column)
    if series.index.tz is not None:
        series = series.tz_convert(tz)

    resampler = series.resample(freq)
    means = resampler.mean()
    counts = resampler.count()
    if len(counts) > 0:
        partial = counts < min_coverage * counts.max()
        keep = pd.Series(True, index=counts.index)
        keep.iloc[0] = not partial.iloc[0]
        keep.iloc[-1] = keep.iloc[-1] and not partial.iloc[-1]
        means = means[keep]
    return means.rename(column)


def decompose_sources(
    df: pd.DataFrame,
    columns: Iterable[str],
    period: int = DEFAULT_PERIOD,
    freq: Optional[str] = DEFAULT_RESAMPLE_FREQ,
) -> Dict[str, DecompositionResult]:
    """
    Descompone cada fuente por separado y devuelve {fuente: resultado}.
    """
    results = {}
    for col in columns:
        results[col] = decompose(resample_series(df, col, freq), period)
        print(f"[DECOMPOSER] {col}: {len(results[col].observed)} muestras, period={period}")
    return results
