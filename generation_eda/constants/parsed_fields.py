"""
Configuración centralizada para el análisis de generación eléctrica en España.

Este módulo contiene las constantes, rutas y umbrales por defecto utilizados
en la limpieza del dataset horario y en la descomposición estacional.
"""

from pathlib import Path

# =============================================================================
# CONFIGURACIÓN DE RUTAS DEL PROYECTO
# =============================================================================

# Raíz del proyecto (este archivo vive en: generation_eda/constants/parsed_fields.py)
PROJECT_ROOT = Path(__file__).resolve().parents[2]

# Directorio principal de datos
DATA_DIR = PROJECT_ROOT / "data"

# Directorio de datos procesados (stage)
STAGE_DIR = DATA_DIR / "stage"

# Dataset horario original (ENTSO-E / REE, 2015-2018)
RAW_PATH: Path = DATA_DIR / "raw/energy_dataset.csv"

# =============================================================================
# CONFIGURACIÓN DE COLUMNAS DEL DATASET
# =============================================================================

# Columna de fecha/hora en el CSV (texto ISO-8601 con offset +01:00 / +02:00)
TIME_COLUMN: str = "time"

# Prefijo de las columnas de generación por fuente
GENERATION_PREFIX: str = "generation."

# Las 14 fuentes de generación que sobreviven a la limpieza (usado en data_manager.py)
GENERATION_SOURCES = [
    "generation.biomass",
    "generation.fossil.brown.coal.lignite",
    "generation.fossil.gas",
    "generation.fossil.hard.coal",
    "generation.fossil.oil",
    "generation.hydro.pumped.storage.consumption",
    "generation.hydro.run.of.river.and.poundage",
    "generation.hydro.water.reservoir",
    "generation.nuclear",
    "generation.other",
    "generation.other.renewable",
    "generation.solar",
    "generation.waste",
    "generation.wind.onshore",
]

# Columnas sin información en el dataset de referencia.
# No se usan para eliminar columnas (ver utils/data_filter.py), solo como
# fixture de regresión de la regla genérica.
DEAD_COLUMNS = [
    "generation.fossil.coal.derived.gas",
    "generation.fossil.oil.shale",
    "generation.fossil.peat",
    "generation.geothermal",
    "generation.hydro.pumped.storage.aggregated",
    "generation.marine",
    "generation.wind.offshore",
    "forecast.wind.offshore.eday.ahead",
]

# =============================================================================
# CONFIGURACIÓN DE LIMPIEZA
# =============================================================================

# Fracción mínima de valores no nulos para conservar una columna (usado en data_filter.py)
DEAD_COLUMN_EPS: float = 0.01

# Multiplicador IQR del test de outliers sobre la generación total por fila (usado en outlier_cleaner.py)
IQR_MULTIPLIER: float = 1.5

# Proporción máxima de ceros para considerar que una fuente "normalmente produce"
# (solar de noche tiene ~50% de ceros y queda fuera)
MAX_ZERO_SHARE: float = 0.05

# Número mínimo de ceros implausibles en una fila para marcarla
MIN_ZERO_SOURCES: int = 1

# Máximo de rondas anomalías -> interpolación hasta que no se anule nada nuevo (usado en data_pipeline.py)
MAX_CLEANING_PASSES: int = 5

# =============================================================================
# CONFIGURACIÓN DE DESCOMPOSICIÓN ESTACIONAL
# =============================================================================

# Frecuencia de re-muestreo antes de descomponer (usado en decomposition.py)
DEFAULT_RESAMPLE_FREQ: str = "D"

# Zona horaria local del dataset; los días se cortan en hora peninsular
LOCAL_TIMEZONE: str = "Europe/Madrid"

# Un periodo del borde con menos de esta fracción de muestras se descarta
MIN_PERIOD_COVERAGE: float = 0.9

# Periodo anual en muestras diarias
DEFAULT_PERIOD: int = 365
