import os
from dataclasses import dataclass
from pathlib import Path
from typing import List

import numpy as np
import pandas as pd


@dataclass(frozen=True)
class Gap:
    """Run máximo de NaN consecutivos en una columna."""

    column: str
    start: int
    length: int
    first_missing: pd.Timestamp
    last_missing: pd.Timestamp
    at_boundary: bool

    @property
    def end(self) -> int:
        """Índice posicional no inclusivo."""
        return self.start + self.length


def find_gaps(series: pd.Series) -> List[Gap]:
    """
    Detecta los huecos (runs de NaN contiguos) de una serie.

    Args:
        series: Serie ordenada por tiempo.

    Returns:
        Lista de Gap en orden de aparición.
    """
    missing = series.isna().to_numpy()
    if not missing.any():
        return []

    # Bordes de cada run: +1 entra en hueco, -1 sale de hueco
    edges = np.diff(np.r_[0, missing.astype(int), 0])
    starts = np.where(edges == 1)[0]
    ends = np.where(edges == -1)[0]

    n = len(series)
    idx = series.index
    return [
        Gap(
            column=str(series.name),
            start=int(s),
            length=int(e - s),
            first_missing=idx[s],
            last_missing=idx[e - 1],
            at_boundary=bool(s == 0 or e == n),
        )
        for s, e in zip(starts, ends)
    ]


def gap_summary(df: pd.DataFrame) -> pd.DataFrame:
    """Tabla con un hueco por fila para todas las columnas del DataFrame."""
    rows = [
        {
            "column": g.column,
            "start": g.start,
            "length": g.length,
            "first_missing": g.first_missing,
            "last_missing": g.last_missing,
            "at_boundary": g.at_boundary,
        }
        for col in df.columns
        for g in find_gaps(df[col])
    ]
    return pd.DataFrame(
        rows,
        columns=["column", "start", "length", "first_missing", "last_missing", "at_boundary"],
    )


def save_imputation_marks(imputed: pd.DataFrame, stage_dir: Path, name: str) -> Path:
    """
    Guarda las banderas de imputación (1 = valor sintetizado) como
    marks/imputed_{name}.csv, con una columna imputed_<fuente> por fuente.
    """
    marks_dir = Path(stage_dir) / "marks"
    os.makedirs(marks_dir, exist_ok=True)

    marks = imputed.astype(int).add_prefix("imputed_").rename_axis("time")
    path = marks_dir / f"imputed_{name}.csv"
    marks.to_csv(path, date_format="%Y-%m-%dT%H:%M:%S%z")

    print(f"[GAP MARKER] Guardado: {path}")
    return path
