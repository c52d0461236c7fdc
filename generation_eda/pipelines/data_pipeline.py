import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import pandas as pd

from generation_eda.constants.parsed_fields import (
    DEFAULT_PERIOD,
    DEFAULT_RESAMPLE_FREQ,
    GENERATION_PREFIX,
    MAX_CLEANING_PASSES,
    STAGE_DIR,
)
from generation_eda.recursos.data_manager import DataManager
from generation_eda.services.decomposition import DecompositionResult, decompose_sources
from generation_eda.services.imputation import ImputationService
from generation_eda.services.outlier_cleaner import DataCleaning
from generation_eda.utils.data_filter import trim_boundary_gaps
from generation_eda.utils.errors import BoundaryGapError
from generation_eda.utils.gap_marker import save_imputation_marks


@dataclass
class CleanedDataset:
    df: pd.DataFrame
    imputed: pd.DataFrame
    dropped_columns: List[str] = field(default_factory=list)
    anomalies: Optional[DataCleaning.AnomalyResult] = None
    gaps: Optional[pd.DataFrame] = None
    boundary_columns: List[str] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.df)

    @property
    def source_columns(self) -> List[str]:
        return [c for c in self.df.columns if c.startswith(GENERATION_PREFIX)]

    def observed_only(self) -> pd.DataFrame:
        """Valores observados; los sintetizados vuelven a NaN."""
        return self.df.mask(self.imputed)

    def trimmed(self) -> "CleanedDataset":
        """Copia sin las filas iniciales/finales que quedaron con huecos en el borde."""
        df = trim_boundary_gaps(self.df)
        return CleanedDataset(
            df=df,
            imputed=self.imputed.loc[df.index],
            dropped_columns=self.dropped_columns,
            anomalies=self.anomalies,
            gaps=self.gaps,
        )


class DataPipeline:
    def __init__(
        self,
        dm: Optional[DataManager] = None,
        cleaner: Optional[DataCleaning] = None,
        imputer: Optional[ImputationService] = None,
        max_passes: int = MAX_CLEANING_PASSES,
    ):
        self.dm = dm or DataManager()
        self.cleaner = cleaner or DataCleaning()
        self.imputer = imputer or ImputationService()
        self.max_passes = max_passes

    def clean(self, df: pd.DataFrame) -> CleanedDataset:
        """
        Limpia un DataFrame ya cargado: columnas muertas, anomalías y huecos.
        No elimina filas.

        Anomalías e interpolación se repiten hasta que una ronda no anula ninguna
        celda nueva: los huecos rellenados cambian la distribución de totales y
        pueden destapar ceros que la primera ronda no marcaba. El resultado es un
        punto fijo, limpiarlo otra vez no cambia nada.

        Raises:
            BoundaryGapError: si quedan huecos en el borde; `error.result` lleva
            el CleanedDataset con el resto de huecos rellenados.
        """
        df_alive, dropped = self.cleaner.drop_dead_columns(df)

        anomalies = self._correct_until_stable(df_alive)
        imputation = self.imputer.impute(anomalies.df_clean)

        result = CleanedDataset(
            df=imputation.df,
            imputed=imputation.imputed,
            dropped_columns=dropped,
            anomalies=anomalies,
            gaps=imputation.logs,
            boundary_columns=imputation.boundary_columns,
        )
        if not imputation.complete:
            raise BoundaryGapError(imputation.boundary_columns, result=result)

        print(f"[PIPELINE] Dataset limpio: {len(result.df)} filas, {result.df.shape[1]} columnas")
        return result

    def _correct_until_stable(self, df: pd.DataFrame) -> DataCleaning.AnomalyResult:
        nulled = pd.DataFrame(False, index=df.index, columns=df.columns)
        flagged = pd.Series(False, index=df.index)
        current = df

        for n_pass in range(1, self.max_passes + 1):
            anomalies = self.cleaner.correct_anomalies(current)
            new_cells = anomalies.nulled & ~nulled
            nulled = nulled | anomalies.nulled
            flagged = flagged | anomalies.flagged
            if not new_cells.to_numpy().any():
                break
            # Siguiente ronda sobre la serie ya interpolada
            current = self.imputer.impute(df.mask(nulled)).df

        return DataCleaning.AnomalyResult(
            df_clean=df.mask(nulled),
            total_generation=anomalies.total_generation,
            lower_bound=anomalies.lower_bound,
            total_outlier=anomalies.total_outlier,
            zero_anomaly=anomalies.zero_anomaly,
            nulled=nulled,
            flagged=flagged,
            passes=n_pass,
        )

    def run(self, path) -> CleanedDataset:
        df = self.dm.load_data(path)
        return self.clean(df)

    def decompose(
        self,
        cleaned: CleanedDataset,
        columns: Optional[Iterable[str]] = None,
        period: int = DEFAULT_PERIOD,
        freq: Optional[str] = DEFAULT_RESAMPLE_FREQ,
    ) -> Dict[str, DecompositionResult]:
        columns = cleaned.source_columns if columns is None else list(columns)
        return decompose_sources(cleaned.df, columns, period=period, freq=freq)

    def save(
        self,
        cleaned: CleanedDataset,
        name: str = "energy_dataset",
        stage_dir: Path = STAGE_DIR,
        decompositions: Optional[Dict[str, DecompositionResult]] = None,
    ) -> Path:
        """
        Guarda el dataset limpio, las banderas de imputación y, si se pasan,
        las descomposiciones (una por fuente).
        """
        folder_path = Path(stage_dir) / "clean"
        os.makedirs(folder_path, exist_ok=True)
        out = folder_path / f"{name}.csv"
        self.dm.save(cleaned.df, file_path=out)
        print(f"[PIPELINE] Guardado: {out}")

        save_imputation_marks(cleaned.imputed, stage_dir, name)

        if decompositions:
            dec_dir = Path(stage_dir) / "decomposition"
            os.makedirs(dec_dir, exist_ok=True)
            for source, res in decompositions.items():
                self.dm.save(res.to_frame(), file_path=dec_dir / f"{source}.csv")
            print(f"[PIPELINE] {len(decompositions)} descomposiciones en {dec_dir}")

        return out


def clean_frame(df: pd.DataFrame, **kwargs) -> CleanedDataset:
    return DataPipeline(cleaner=DataCleaning(**kwargs)).clean(df)


def load_and_clean(path, **kwargs) -> CleanedDataset:
    """
    Carga el CSV horario y lo deja completo: sin columnas muertas, con las
    anomalías anuladas y todos los huecos interiores interpolados.
    """
    return DataPipeline(cleaner=DataCleaning(**kwargs)).run(path)
