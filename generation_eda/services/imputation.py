import warnings
from typing import List, Optional

import pandas as pd

from generation_eda.utils.gap_marker import find_gaps, gap_summary

warnings.filterwarnings("ignore", category=FutureWarning)


class ImputationResult:
    """Contiene el DataFrame imputado, la máscara de imputación y un DataFrame de logs."""

    def __init__(
        self,
        df: pd.DataFrame,
        imputed: pd.DataFrame,
        logs: pd.DataFrame = None,
        boundary_columns: Optional[List[str]] = None,
    ):
        self.df = df
        self.imputed = imputed
        self.logs = logs
        self.boundary_columns = boundary_columns or []

    @property
    def complete(self) -> bool:
        return not self.boundary_columns


class ImputationService:
    """
    Imputación de huecos en series horarias por interpolación lineal:
    - Cada columna se trata de forma independiente.
    - Un hueco de longitud L entre los anclajes a y b recibe a + (b - a) * k / (L + 1).
    - Los huecos que tocan el inicio o el final no tienen vecino y se dejan en NaN;
      se informan en `boundary_columns` para que el llamador decida.
    """

    def __init__(self, columns: Optional[List[str]] = None):
        self.columns = columns

    @staticmethod
    def interpolate_series(series: pd.Series) -> pd.Series:
        """Rellena solo los huecos interiores (con vecino a ambos lados)."""
        return series.interpolate(method="linear", limit_area="inside")

    def impute(self, df: pd.DataFrame) -> ImputationResult:
        """
        Interpola todas las columnas numéricas (o las configuradas).

        Args:
            df: DataFrame con DatetimeIndex horario.

        Returns:
            ImputationResult; `logs` tiene un hueco por fila con columna, posición,
            longitud y si toca el borde.
        """
        columns = self.columns or list(df.select_dtypes("number").columns)
        df_imp = df.copy()
        logs = gap_summary(df[columns])

        boundary_columns = []
        for col in columns:
            gaps = find_gaps(df[col])
            if not gaps:
                continue
            df_imp[col] = self.interpolate_series(df[col])
            if any(g.at_boundary for g in gaps):
                boundary_columns.append(col)

        imputed = df.isna() & df_imp.notna()
        logs["filled"] = ~logs["at_boundary"].astype(bool)

        n_filled = int(imputed.to_numpy().sum())
        n_gaps = int(logs["filled"].sum())
        print(f"[IMPUTATION] {n_gaps} huecos interiores rellenados ({n_filled} valores)")
        if boundary_columns:
            print(f"[IMPUTATION] Huecos en el borde sin rellenar en: {boundary_columns}")

        return ImputationResult(
            df=df_imp,
            imputed=imputed,
            logs=logs,
            boundary_columns=boundary_columns,
        )
