#!/usr/bin/env python3
"""
Script para limpiar el dataset horario de generación y descomponer cada fuente.

Uso:
  python clean_dataset.py [ruta_csv]
"""

import sys

from generation_eda.constants.parsed_fields import RAW_PATH, STAGE_DIR
from generation_eda.pipelines.data_pipeline import DataPipeline
from generation_eda.utils.errors import BoundaryGapError


def main(path=RAW_PATH):
    pipeline = DataPipeline()

    try:
        cleaned = pipeline.run(path)
    except BoundaryGapError as err:
        print(f"Huecos en el borde en {err.columns}, recortando filas")
        cleaned = err.result.trimmed()

    print("=== RESUMEN DE LIMPIEZA ===")
    print(f"Filas: {len(cleaned)}")
    print(f"Columnas eliminadas: {cleaned.dropped_columns}")
    print(f"Filas con anomalías corregidas: {len(cleaned.anomalies.flagged_rows)}")
    print("Valores imputados por columna:")
    counts = cleaned.imputed.sum()
    for col, count in counts[counts > 0].items():
        print(f"  {col}: {count}")

    decompositions = pipeline.decompose(cleaned)
    pipeline.save(cleaned, stage_dir=STAGE_DIR, decompositions=decompositions)


if __name__ == "__main__":
    main(sys.argv[1] if len(sys.argv) > 1 else RAW_PATH)
