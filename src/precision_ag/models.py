from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import pandas as pd
import statsmodels.api as sm

from .cleaning import load_clean
from .common import (
    CONTROLS,
    HIGH_PRECISION,
    MODEL_TABLES,
    OUTCOME,
    PA_MIDPOINT,
    OutputPaths,
    write_table,
)
from .config import CONF_LEVEL, DATA_DIR, OUTPUT_DIR
from .errors import RankDeficiencyError

FIT_SUMMARY_TABLE = "model_fit_summary"

MODEL_SPECS = {
    "m1": [PA_MIDPOINT],
    "m2": [PA_MIDPOINT] + CONTROLS,
    "m3": [HIGH_PRECISION] + CONTROLS,
}


@dataclass(frozen=True)
class ModelFit:
    name: str
    predictors: list[str]
    result: sm.regression.linear_model.RegressionResultsWrapper


def fit_ols(
    df: pd.DataFrame, outcome: str, predictors: list[str], name: str = "ols"
) -> sm.regression.linear_model.RegressionResultsWrapper:
    """OLS on the rows complete for ``outcome`` and ``predictors`` (listwise deletion)."""
    sample = df.dropna(subset=[outcome] + predictors)
    X = sm.add_constant(sample[predictors].astype(float), has_constant="add")
    y = sample[outcome].astype(float)

    n, k = X.shape
    if n <= k:
        raise RankDeficiencyError(f"{name}: {n} complete rows for {k} coefficients")
    rank = np.linalg.matrix_rank(X.to_numpy())
    if rank < k:
        raise RankDeficiencyError(f"{name}: design matrix has rank {rank} < {k} columns (collinear predictors)")
    return sm.OLS(y, X).fit()


def tidy(res, conf_level: float = CONF_LEVEL) -> pd.DataFrame:
    ci = res.conf_int(alpha=1 - conf_level)
    out = pd.DataFrame(
        {
            "term": res.params.index,
            "estimate": res.params.to_numpy(),
            "std_error": res.bse.to_numpy(),
            "statistic": res.tvalues.to_numpy(),
            "p_value": res.pvalues.to_numpy(),
            "conf_low": ci.iloc[:, 0].to_numpy(),
            "conf_high": ci.iloc[:, 1].to_numpy(),
        }
    )
    out["term"] = out["term"].replace({"const": "(Intercept)"})
    return out


def glance(res, name: str) -> dict:
    n = float(res.nobs)
    # residual variance counts as an estimated parameter
    n_params = len(res.params) + 1
    return {
        "model": name,
        "r_squared": float(res.rsquared),
        "adj_r_squared": float(res.rsquared_adj),
        "sigma": float(np.sqrt(res.scale)),
        "statistic": float(res.fvalue),
        "p_value": float(res.f_pvalue),
        "df": int(res.df_model),
        "df_residual": int(res.df_resid),
        "nobs": int(n),
        "log_lik": float(res.llf),
        "aic": float(-2 * res.llf + 2 * n_params),
        "bic": float(-2 * res.llf + np.log(n) * n_params),
    }


def fit_models(df: pd.DataFrame) -> list[ModelFit]:
    return [
        ModelFit(name, predictors, fit_ols(df, OUTCOME, predictors, name=name))
        for name, predictors in MODEL_SPECS.items()
    ]


def run_models(df: pd.DataFrame, paths: OutputPaths) -> pd.DataFrame:
    fits = fit_models(df)

    for fit in fits:
        write_table(tidy(fit.result), paths.table(MODEL_TABLES[fit.name]))
    summary = pd.DataFrame([glance(fit.result, fit.name) for fit in fits])
    write_table(summary, paths.table(FIT_SUMMARY_TABLE))

    for fit in fits:
        print(f"\n--- Model {fit.name.upper()} Summary ---")
        print(fit.result.summary().as_text())
    return summary


def main() -> None:
    paths = OutputPaths(DATA_DIR, OUTPUT_DIR)
    paths.ensure_dirs()
    run_models(load_clean(paths.clean_data), paths)
    print("Model tables saved to", paths.tables_dir)


if __name__ == "__main__":
    main()
