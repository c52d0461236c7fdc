from typing import List

import numpy as np
import pandas as pd
from scipy.stats import iqr

from generation_eda.constants.parsed_fields import (
    DEAD_COLUMN_EPS,
    GENERATION_PREFIX,
    IQR_MULTIPLIER,
    MAX_ZERO_SHARE,
    MIN_ZERO_SOURCES,
)
from generation_eda.utils.data_filter import find_dead_columns


class DataCleaning:
    """
    Métodos para limpiar el dataset de generación: eliminación de columnas sin
    información y anulación de ceros anómalos antes de interpolar.
    """

    class AnomalyResult:
        """
        Clase interna para encapsular el resultado de la corrección de anomalías.
        """

        def __init__(
            self,
            df_clean: pd.DataFrame,
            total_generation: pd.Series,
            lower_bound: float,
            total_outlier: pd.Series,
            zero_anomaly: pd.Series,
            nulled: pd.DataFrame,
            flagged: pd.Series = None,
            passes: int = 1,
        ):
            self.df = df_clean  # alias
            self.df_clean = df_clean
            self.total_generation = total_generation
            self.lower_bound = lower_bound
            self.total_outlier = total_outlier
            self.zero_anomaly = zero_anomaly
            # Máscara booleana (mismas filas/columnas que df_clean) de celdas anuladas
            self.nulled = nulled
            self.flagged = (total_outlier & zero_anomaly) if flagged is None else flagged
            self.passes = passes

        @property
        def flagged_rows(self) -> pd.DatetimeIndex:
            """Filas marcadas por ambos tests."""
            return self.flagged.index[self.flagged]

        def nulled_cells(self) -> pd.DataFrame:
            """Una fila por celda anulada: timestamp y columna."""
            stacked = self.nulled.stack()
            stacked = stacked[stacked]
            return pd.DataFrame(
                {
                    "time": stacked.index.get_level_values(0),
                    "column": stacked.index.get_level_values(1),
                }
            )

    def __init__(
        self,
        dead_column_eps: float = DEAD_COLUMN_EPS,
        iqr_multiplier: float = IQR_MULTIPLIER,
        max_zero_share: float = MAX_ZERO_SHARE,
        min_zero_sources: int = MIN_ZERO_SOURCES,
        source_prefix: str = GENERATION_PREFIX,
    ):
        self.dead_column_eps = dead_column_eps
        self.iqr_multiplier = iqr_multiplier
        self.max_zero_share = max_zero_share
        self.min_zero_sources = min_zero_sources
        self.source_prefix = source_prefix

    def source_columns(self, df: pd.DataFrame) -> List[str]:
        return [c for c in df.columns if c.startswith(self.source_prefix)]

    def drop_dead_columns(self, df: pd.DataFrame) -> tuple[pd.DataFrame, List[str]]:
        dead = find_dead_columns(df, self.dead_column_eps)
        if dead:
            print(f"[CLEANER] Columnas sin información eliminadas ({len(dead)}): {dead}")
        return df.drop(columns=dead), dead

    def total_outliers(
        self, total: pd.Series, reference: pd.Series = None
    ) -> tuple[pd.Series, float]:
        """
        Outliers bajos de la generación total por fila (regla del boxplot).
        Los cuartiles se estiman sobre `reference` (por defecto el propio total).

        Returns:
            (máscara booleana, límite inferior)
        """
        observed = (total if reference is None else reference).dropna().to_numpy()
        if len(observed) == 0:
            return pd.Series(False, index=total.index), float("nan")
        q1 = float(np.percentile(observed, 25))
        lower = q1 - self.iqr_multiplier * float(iqr(observed))
        return (total < lower).fillna(False).astype(bool), lower

    def implausible_zeros(self, sources: pd.DataFrame) -> pd.DataFrame:
        """
        Ceros exactos en fuentes que casi nunca valen cero, en filas donde alguna
        otra fuente está produciendo. Solar de noche o el bombeo no entran aquí.
        """
        is_zero = sources.eq(0)
        observed = sources.notna().sum().replace(0, np.nan)
        zero_share = is_zero.sum() / observed
        normally_active = (zero_share <= self.max_zero_share).fillna(False)

        others_active = sources.gt(0).sum(axis=1) >= 1
        mask = (
            is_zero.to_numpy()
            & normally_active.to_numpy()[None, :]
            & others_active.to_numpy()[:, None]
        )
        return pd.DataFrame(mask, index=sources.index, columns=sources.columns)

    def correct_anomalies(self, df: pd.DataFrame) -> "DataCleaning.AnomalyResult":
        """
        Anula (NaN) los ceros implausibles de las filas cuya generación total es
        un outlier bajo. Solo se corrigen las filas marcadas por los dos tests.

        Args:
            df: DataFrame con DatetimeIndex y columnas numéricas.

        Returns:
            AnomalyResult con el DataFrame corregido y el detalle de lo anulado.
        """
        sources = df[self.source_columns(df)]
        total = sources.sum(axis=1, min_count=1)

        # Filas con alguna fuente en NaN tienen un total artificialmente bajo:
        # los cuartiles salen solo de las filas completas
        complete = sources.notna().all(axis=1)
        reference = total[complete] if complete.any() else total
        total_outlier, lower = self.total_outliers(total, reference)
        zeros = self.implausible_zeros(sources)
        zero_anomaly = zeros.sum(axis=1) >= self.min_zero_sources

        flagged = total_outlier & zero_anomaly
        cells = zeros.to_numpy() & flagged.to_numpy()[:, None]
        nulled = pd.DataFrame(False, index=df.index, columns=df.columns)
        nulled[zeros.columns] = cells

        df_clean = df.mask(nulled)
        print(
            f"[CLEANER] Filas con outlier de generación total: {int(total_outlier.sum())}, "
            f"corregidas: {int(flagged.sum())}, celdas anuladas: {int(nulled.to_numpy().sum())}"
        )

        return self.AnomalyResult(
            df_clean=df_clean,
            total_generation=total,
            lower_bound=lower,
            total_outlier=total_outlier,
            zero_anomaly=zero_anomaly,
            nulled=nulled,
            flagged=flagged,
        )
