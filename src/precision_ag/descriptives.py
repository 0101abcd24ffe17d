from __future__ import annotations

import numpy as np
import pandas as pd

from .common import OUTCOME, PA_MIDPOINT, OutputPaths, write_table

PROFILE_PERCENTILES = [0.0, 0.25, 0.5, 0.75, 1.0]


def missingness_summary(df: pd.DataFrame) -> pd.DataFrame:
    counts = df.isna().sum()
    out = pd.DataFrame({"variable": counts.index, "n_missing": counts.to_numpy(dtype=int)})
    return out.sort_values("n_missing", ascending=False, kind="stable").reset_index(drop=True)


def _mean_sd(values: pd.Series) -> tuple[float, float]:
    v = values.dropna().astype(float)
    mean = float(v.mean()) if not v.empty else np.nan
    sd = float(v.std(ddof=1)) if len(v) > 1 else np.nan
    return mean, sd


def descriptive_summary(df: pd.DataFrame) -> pd.DataFrame:
    yield_mean, yield_sd = _mean_sd(df[OUTCOME])
    pa_mean, pa_sd = _mean_sd(df[PA_MIDPOINT])
    return pd.DataFrame(
        [
            {
                "n": int(len(df)),
                "yield_mean": yield_mean,
                "yield_sd": yield_sd,
                "pa_mid_mean": pa_mean,
                "pa_mid_sd": pa_sd,
            }
        ]
    )


def profile_table(df: pd.DataFrame) -> pd.DataFrame:
    """Per-column distributional profile: completeness plus quantiles or string lengths."""
    rows = []
    n = len(df)
    for col in df.columns:
        s = df[col]
        n_missing = int(s.isna().sum())
        row: dict[str, object] = {
            "variable": col,
            "n_missing": n_missing,
            "complete_rate": (n - n_missing) / n if n else np.nan,
        }
        present = s.dropna()
        if pd.api.types.is_numeric_dtype(s):
            present = present.astype(float)
            row["type"] = "numeric"
            row["mean"], row["sd"] = _mean_sd(present)
            for q in PROFILE_PERCENTILES:
                row[f"p{int(q * 100)}"] = float(present.quantile(q)) if not present.empty else np.nan
        else:
            lengths = present.astype(str).str.len()
            row["type"] = "character"
            row["n_unique"] = int(present.nunique())
            row["min_length"] = int(lengths.min()) if not lengths.empty else np.nan
            row["max_length"] = int(lengths.max()) if not lengths.empty else np.nan
        rows.append(row)

    columns = ["variable", "type", "n_missing", "complete_rate", "mean", "sd"]
    columns += [f"p{int(q * 100)}" for q in PROFILE_PERCENTILES]
    columns += ["n_unique", "min_length", "max_length"]
    return pd.DataFrame(rows).reindex(columns=columns)


def run_descriptives(df: pd.DataFrame, paths: OutputPaths) -> dict[str, pd.DataFrame]:
    tables = {
        "missingness_summary": missingness_summary(df),
        "descriptive_summary": descriptive_summary(df),
        "variable_profile": profile_table(df),
    }
    print("\nDistributional profile:")
    print(tables["variable_profile"].to_string(index=False))
    for name, table in tables.items():
        write_table(table, paths.table(name))
    return tables
