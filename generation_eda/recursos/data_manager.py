import re
from typing import Iterable, Optional

import pandas as pd

from generation_eda.constants.parsed_fields import GENERATION_SOURCES, TIME_COLUMN
from generation_eda.utils.errors import ParseError, SchemaError


def normalize_column_name(name: str) -> str:
    """'generation fossil brown coal/lignite' -> 'generation.fossil.brown.coal.lignite'"""
    return re.sub(r"[\s_/\-]+", ".", str(name).strip().lower()).strip(".")


class DataManager:
    """
    Recurso para cargar el CSV horario de generación y convertirlo a time series.
    Se encarga únicamente de la carga, el parseo de fechas y la validación del esquema.
    """

    def __init__(
        self,
        time_column: str = TIME_COLUMN,
        required_columns: Optional[Iterable[str]] = None,
    ) -> None:
        """
        Parameters:
        - time_column: Nombre de la columna de fecha en el CSV
        - required_columns: Columnas que deben existir tras normalizar nombres
          (por defecto las 14 fuentes de generación)
        """
        self.time_column = time_column
        self.required_columns = list(
            GENERATION_SOURCES if required_columns is None else required_columns
        )

    def parse_time(self, raw: pd.Series) -> pd.DatetimeIndex:
        """
        Convierte textos ISO-8601 con offsets mixtos (+01:00 / +02:00) a instantes UTC.
        Un texto sin offset es ambiguo (hora local o UTC) y se rechaza.
        """
        no_offset = raw.notna() & ~raw.str.strip().str.contains(
            r"(?:Z|[+-]\d{2}:?\d{2})$", regex=True
        ).fillna(False).astype(bool)
        if no_offset.any():
            pos = int(no_offset.to_numpy().nonzero()[0][0])
            raise ParseError(f"Timestamp sin offset horario en la fila {pos}: {raw.iloc[pos]!r}")

        parsed = pd.to_datetime(raw, utc=True, errors="coerce", format="ISO8601")
        bad = parsed.isna()
        if bad.any():
            pos = int(bad.to_numpy().nonzero()[0][0])
            raise ParseError(
                f"Timestamp ilegible en la fila {pos}: {raw.iloc[pos]!r} "
                f"({int(bad.sum())} filas con error)"
            )
        return pd.DatetimeIndex(parsed, name=self.time_column)

    def load_data(self, file_path: str) -> pd.DataFrame:
        """
        Carga todo el CSV y convierte la columna de tiempo a índice UTC horario.

        Returns:
        - DataFrame numérico con DatetimeIndex UTC ordenado, sin duplicados y
          con frecuencia horaria
        """
        df = pd.read_csv(file_path, encoding="utf-8")
        df.columns = [normalize_column_name(c) for c in df.columns]

        if self.time_column not in df.columns:
            raise SchemaError(
                f"Columna de fecha '{self.time_column}' no existe en el CSV. "
                f"Columnas disponibles: {list(df.columns)}"
            )

        missing = [c for c in self.required_columns if c not in df.columns]
        if missing:
            raise SchemaError(f"Faltan columnas esperadas en el CSV: {missing}")

        index = self.parse_time(df[self.time_column].astype("string"))
        df = df.drop(columns=[self.time_column])
        df.index = index

        if df.index.has_duplicates:
            dup = df.index[df.index.duplicated()][0]
            raise ParseError(f"Timestamp duplicado en la columna de tiempo: {dup}")

        off_grid = df.index != df.index.floor("h")
        if off_grid.any():
            pos = int(off_grid.nonzero()[0][0])
            raise ParseError(
                f"Timestamp fuera de la rejilla horaria en la fila {pos}: {df.index[pos]}"
            )

        # Convertir todas las columnas a numérico
        df = df.apply(pd.to_numeric, errors="coerce").astype(float)
        df = df.sort_index()

        # Horas ausentes en el índice pasan a ser huecos explícitos
        n_rows = len(df)
        df = df.asfreq("h")
        if len(df) != n_rows:
            print(f"[LOADER] {len(df) - n_rows} horas ausentes añadidas como NaN")

        print(
            f"[LOADER] {file_path}: {len(df)} filas, {df.shape[1]} columnas, "
            f"{df.index.min()} a {df.index.max()}"
        )
        return df

    def save(self, df: pd.DataFrame, file_path: str, index: bool = True) -> None:
        """
        Guarda un DataFrame en CSV con la columna de tiempo en ISO-8601 UTC.
        """
        out = df.rename_axis(self.time_column) if index else df
        out.to_csv(file_path, index=index, date_format="%Y-%m-%dT%H:%M:%S%z")
