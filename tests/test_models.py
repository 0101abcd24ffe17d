"""
Tests for src/precision_ag/models.py
"""

import numpy as np
import pandas as pd
import pytest

from conftest import make_raw_frame
from precision_ag.cleaning import clean, clean_names
from precision_ag.common import CONTROLS, HIGH_PRECISION, MODEL_TABLES, OUTCOME, PA_MIDPOINT, OutputPaths
from precision_ag.errors import RankDeficiencyError
from precision_ag.models import FIT_SUMMARY_TABLE, MODEL_SPECS, fit_models, fit_ols, glance, run_models, tidy


def make_clean_frame(n_rows: int = 60, seed: int = 0) -> pd.DataFrame:
    df = make_raw_frame(n_rows=n_rows, seed=seed)
    df.columns = clean_names(df.columns)
    return clean(df)


def test_m1_recovers_perfect_line():
    midpoint = np.array([0.0, 5.0, 10.0, 20.0, 40.0])
    df = pd.DataFrame({PA_MIDPOINT: midpoint, OUTCOME: 100 + 2 * midpoint})

    res = fit_ols(df, OUTCOME, [PA_MIDPOINT], name="m1")

    assert res.params["const"] == pytest.approx(100.0)
    assert res.params[PA_MIDPOINT] == pytest.approx(2.0)
    assert res.rsquared == pytest.approx(1.0)


def test_listwise_deletion_is_per_model():
    df = make_clean_frame()
    df.loc[0, CONTROLS[2]] = np.nan
    df.loc[1, HIGH_PRECISION] = pd.NA

    fits = {fit.name: fit.result for fit in fit_models(df)}

    assert int(fits["m1"].nobs) == 60
    assert int(fits["m2"].nobs) == 59
    assert int(fits["m3"].nobs) == 58


def test_model_specs_use_fixed_predictors():
    assert MODEL_SPECS["m1"] == [PA_MIDPOINT]
    assert MODEL_SPECS["m2"] == [PA_MIDPOINT] + CONTROLS
    assert MODEL_SPECS["m3"] == [HIGH_PRECISION] + CONTROLS


def test_duplicated_column_raises_and_writes_nothing(tmp_path):
    paths = OutputPaths(tmp_path / "data", tmp_path / "output")
    paths.ensure_dirs()
    df = make_clean_frame()
    df[CONTROLS[0]] = df[HIGH_PRECISION].astype(float)

    with pytest.raises(RankDeficiencyError) as exc_info:
        run_models(df, paths)

    assert "m3" in str(exc_info.value)
    assert not paths.table(MODEL_TABLES["m3"]).exists()
    assert not paths.table(FIT_SUMMARY_TABLE).exists()


def test_too_few_rows_is_rank_deficient():
    df = pd.DataFrame({PA_MIDPOINT: [1.0, 2.0], OUTCOME: [3.0, 5.0]})
    with pytest.raises(RankDeficiencyError):
        fit_ols(df, OUTCOME, [PA_MIDPOINT])


def test_tidy_and_glance_shapes():
    df = make_clean_frame()
    res = fit_ols(df, OUTCOME, MODEL_SPECS["m2"], name="m2")

    coefs = tidy(res)
    assert list(coefs.columns) == ["term", "estimate", "std_error", "statistic", "p_value", "conf_low", "conf_high"]
    assert coefs["term"].tolist() == ["(Intercept)"] + MODEL_SPECS["m2"]
    assert (coefs["conf_low"] < coefs["estimate"]).all()
    assert (coefs["estimate"] < coefs["conf_high"]).all()

    stats = glance(res, "m2")
    assert stats["df"] == 6
    assert stats["df_residual"] == 60 - 7
    assert stats["aic"] == pytest.approx(res.aic + 2)
    assert stats["bic"] == pytest.approx(res.bic + np.log(60))
    assert 0 <= stats["r_squared"] <= 1


def test_run_models_writes_all_tables(tmp_path):
    paths = OutputPaths(tmp_path / "data", tmp_path / "output")
    paths.ensure_dirs()

    summary = run_models(make_clean_frame(), paths)

    for table in MODEL_TABLES.values():
        assert paths.table(table).exists()
    back = pd.read_csv(paths.table(FIT_SUMMARY_TABLE))
    assert back["model"].tolist() == ["m1", "m2", "m3"]
    assert summary["nobs"].tolist() == [60, 60, 60]
