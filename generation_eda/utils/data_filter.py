from typing import List, Optional

import pandas as pd

from generation_eda.constants.parsed_fields import DEAD_COLUMN_EPS


def find_dead_columns(df: pd.DataFrame, eps: float = DEAD_COLUMN_EPS) -> List[str]:
    """Columnas con fracción de no nulos < eps o cuyos valores no nulos son todos 0."""
    numeric = df.select_dtypes("number")
    non_null_share = numeric.notna().mean()
    all_zero = numeric.abs().max(skipna=True).fillna(0) == 0
    dead = (non_null_share < eps) | all_zero
    return [c for c in numeric.columns if dead[c]]


def trim_boundary_gaps(
    df: pd.DataFrame, columns_required: Optional[list] = None
) -> pd.DataFrame:
    """
    Recorta las filas iniciales y finales donde alguna columna requerida es NaN.
    Es la salida natural ante un BoundaryGapError.
    """
    columns_required = list(df.columns) if columns_required is None else columns_required
    valid = df[columns_required].dropna().index
    if len(valid) == 0:
        return df.iloc[0:0]
    return df[(df.index >= valid.min()) & (df.index <= valid.max())]
