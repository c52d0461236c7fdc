import numpy as np
import pandas as pd
import pytest

from generation_eda.services.outlier_cleaner import DataCleaning

BIG_SOURCES = [
    "generation.fossil.gas",
    "generation.fossil.hard.coal",
    "generation.hydro.water.reservoir",
    "generation.nuclear",
    "generation.wind.onshore",
]


@pytest.fixture
def alive_frame(generation_frame):
    df, _ = DataCleaning().drop_dead_columns(generation_frame)
    return df


def _night_row(df):
    hours = df.index.hour
    return int(np.flatnonzero((hours >= 0) & (hours < 5))[3])


def test_anomalous_row_zeros_are_nulled(alive_frame):
    df = alive_frame.copy()
    row = 200
    df.iloc[row, [df.columns.get_loc(c) for c in BIG_SOURCES]] = 0.0

    result = DataCleaning().correct_anomalies(df)

    assert list(result.flagged_rows) == [df.index[row]]
    assert result.df_clean.iloc[row][BIG_SOURCES].isna().all()
    # El resto de la fila se conserva
    assert result.df_clean.iloc[row]["generation.biomass"] == df.iloc[row]["generation.biomass"]
    cells = result.nulled_cells()
    assert sorted(cells["column"]) == sorted(BIG_SOURCES)
    assert (cells["time"] == df.index[row]).all()


def test_night_solar_zero_is_preserved(alive_frame):
    row = _night_row(alive_frame)
    assert alive_frame["generation.solar"].iloc[row] == 0.0

    result = DataCleaning().correct_anomalies(alive_frame)

    assert result.df_clean["generation.solar"].iloc[row] == 0.0
    assert not result.nulled.to_numpy().any()
    assert len(result.flagged_rows) == 0


def test_night_solar_zero_preserved_in_anomalous_row(alive_frame):
    df = alive_frame.copy()
    row = _night_row(df)
    df.iloc[row, [df.columns.get_loc(c) for c in BIG_SOURCES]] = 0.0

    result = DataCleaning().correct_anomalies(df)

    assert df.index[row] in result.flagged_rows
    assert result.df_clean["generation.solar"].iloc[row] == 0.0
    assert not result.nulled["generation.solar"].any()


def test_isolated_zero_without_total_outlier_is_kept(alive_frame):
    df = alive_frame.copy()
    df.iloc[100, df.columns.get_loc("generation.biomass")] = 0.0

    result = DataCleaning().correct_anomalies(df)

    assert not bool(result.total_outlier.iloc[100])
    assert bool(result.zero_anomaly.iloc[100])
    assert result.df_clean["generation.biomass"].iloc[100] == 0.0


def test_low_total_without_zeros_is_not_corrected(alive_frame):
    df = alive_frame.copy()
    df.iloc[150, [df.columns.get_loc(c) for c in BIG_SOURCES]] = np.nan

    result = DataCleaning().correct_anomalies(df)

    assert bool(result.total_outlier.iloc[150])
    assert len(result.flagged_rows) == 0
    pd.testing.assert_frame_equal(result.df_clean, df)


def test_non_generation_columns_are_never_nulled(alive_frame):
    df = alive_frame.copy()
    df.iloc[200, [df.columns.get_loc(c) for c in BIG_SOURCES]] = 0.0
    df.iloc[200, df.columns.get_loc("price.actual")] = 0.0

    result = DataCleaning().correct_anomalies(df)

    assert result.df_clean["price.actual"].iloc[200] == 0.0


def test_lower_bound_uses_iqr_rule(alive_frame):
    result = DataCleaning(iqr_multiplier=1.5).correct_anomalies(alive_frame)

    total = result.total_generation
    q1, q3 = np.percentile(total, [25, 75])
    assert result.lower_bound == pytest.approx(q1 - 1.5 * (q3 - q1))


def test_drop_dead_columns_reports_names(generation_frame, dead_columns):
    df, dropped = DataCleaning().drop_dead_columns(generation_frame)

    assert sorted(dropped) == dead_columns
    assert not set(dead_columns) & set(df.columns)
    assert len(df) == len(generation_frame)


def test_rows_with_missing_sources_do_not_lower_the_bound(alive_frame):
    df = alive_frame.copy()
    df.iloc[10:400, df.columns.get_loc("generation.nuclear")] = np.nan

    result = DataCleaning(iqr_multiplier=1.5).correct_anomalies(df)

    complete = result.total_generation.iloc[np.r_[0:10, 400:len(df)]]
    q1, q3 = np.percentile(complete, [25, 75])
    assert result.lower_bound == pytest.approx(q1 - 1.5 * (q3 - q1))
    assert not result.flagged.any()
