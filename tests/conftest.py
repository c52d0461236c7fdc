"""Configuración de pytest y fixtures compartidas."""

import numpy as np
import pandas as pd
import pytest

from generation_eda.constants.parsed_fields import DEAD_COLUMNS

# 2015-01-01 00:00+01:00 .. 2018-12-31 23:00+01:00
FULL_START = "2014-12-31 23:00"
FULL_PERIODS = 35064


def build_generation_frame(periods: int = 24 * 30, start: str = FULL_START, seed: int = 0):
    """Frame horario sintético con la forma del dataset español (nombres con puntos, índice UTC)."""
    index = pd.date_range(start, periods=periods, freq="h", tz="UTC")
    rng = np.random.default_rng(seed)
    t = np.arange(periods)
    daily = np.sin(2 * np.pi * t / 24)
    yearly = np.sin(2 * np.pi * t / (24 * 365.25))
    hour = index.hour.to_numpy()

    def series(base, amp_d, amp_y, sd):
        values = base + amp_d * daily + amp_y * yearly + rng.normal(0, sd, periods)
        return np.clip(values, 1.0, None)

    night = (hour < 7) | (hour >= 19)
    pumping_off = (hour >= 8) & (hour <= 21)
    solar = np.where(night, 0.0, series(1500, 300, 400, 20))

    data = {
        "generation.biomass": series(400, 20, 30, 5),
        "generation.fossil.brown.coal.lignite": series(500, 50, 100, 10),
        "generation.fossil.coal.derived.gas": np.zeros(periods),
        "generation.fossil.gas": series(5600, 800, 600, 50),
        "generation.fossil.hard.coal": series(4200, 400, 800, 40),
        "generation.fossil.oil": series(300, 30, 20, 5),
        "generation.fossil.oil.shale": np.zeros(periods),
        "generation.fossil.peat": np.zeros(periods),
        "generation.geothermal": np.zeros(periods),
        "generation.hydro.pumped.storage.aggregated": np.full(periods, np.nan),
        "generation.hydro.pumped.storage.consumption": np.where(
            pumping_off, 0.0, series(800, 100, 100, 20)
        ),
        "generation.hydro.run.of.river.and.poundage": series(1000, 100, 300, 15),
        "generation.hydro.water.reservoir": series(2600, 700, 900, 40),
        "generation.marine": np.zeros(periods),
        "generation.nuclear": series(6300, 50, 400, 30),
        "generation.other": series(60, 5, 5, 2),
        "generation.other.renewable": series(85, 5, 10, 2),
        "generation.solar": solar,
        "generation.waste": series(270, 10, 20, 4),
        "generation.wind.offshore": np.zeros(periods),
        "generation.wind.onshore": series(5400, 600, 1500, 60),
        "forecast.solar.day.ahead": np.where(night, 0.0, series(1500, 300, 400, 40)),
        "forecast.wind.offshore.eday.ahead": np.full(periods, np.nan),
        "forecast.wind.onshore.day.ahead": series(5400, 600, 1500, 80),
        "total.load.forecast": series(28700, 4000, 1500, 200),
        "total.load.actual": series(28700, 4000, 1500, 150),
        "price.day.ahead": series(50, 10, 8, 2),
        "price.actual": series(57, 10, 8, 2),
    }
    df = pd.DataFrame(data, index=index)
    df.index.name = "time"
    return df


def write_generation_csv(df: pd.DataFrame, path, dotted: bool = True):
    """Escribe el CSV con timestamps locales de Madrid ('2015-01-01 00:00:00+01:00')."""
    out = df.copy()
    if not dotted:
        out.columns = [c.replace(".", " ") for c in out.columns]
    local = df.index.tz_convert("Europe/Madrid")
    out.insert(0, "time", [ts.isoformat(sep=" ") for ts in local])
    out.to_csv(path, index=False)
    return path


@pytest.fixture
def make_frame():
    return build_generation_frame


@pytest.fixture
def write_csv():
    return write_generation_csv


@pytest.fixture
def generation_frame():
    return build_generation_frame()


@pytest.fixture
def dead_columns():
    return sorted(DEAD_COLUMNS)


@pytest.fixture(scope="session")
def full_dataset_csv(tmp_path_factory):
    """Cuatro años horarios con huecos, anomalías y columnas muertas inyectados."""
    df = build_generation_frame(periods=FULL_PERIODS, seed=42)

    # Hueco interior de 3 horas en nuclear y de 1 en price.actual
    df.iloc[1000:1003, df.columns.get_loc("generation.nuclear")] = np.nan
    df.iloc[5000, df.columns.get_loc("price.actual")] = np.nan

    # Fila anómala: casi todas las fuentes a cero
    zeroed = [
        "generation.fossil.brown.coal.lignite",
        "generation.fossil.gas",
        "generation.fossil.hard.coal",
        "generation.hydro.run.of.river.and.poundage",
        "generation.hydro.water.reservoir",
        "generation.nuclear",
        "generation.wind.onshore",
    ]
    df.iloc[20000, [df.columns.get_loc(c) for c in zeroed]] = 0.0

    path = tmp_path_factory.mktemp("raw") / "energy_dataset.csv"
    write_generation_csv(df, path)
    return {"path": path, "frame": df, "anomaly_row": 20000, "zeroed": zeroed}
