"""Two-group comparison of corn yield by the high precision usage flag.

The difference is reported as group 0 minus group 1 with a Welch
(unequal-variance) standard error and Welch-Satterthwaite degrees of freedom.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass

import numpy as np
import pandas as pd
import scipy.stats as st

from .cleaning import load_clean
from .common import HIGH_PRECISION, OUTCOME, OutputPaths, write_table
from .config import CONF_LEVEL, DATA_DIR, OUTPUT_DIR
from .errors import InsufficientDataError

TTEST_TABLE = "ttest_yield_by_high_precision"


@dataclass(frozen=True)
class WelchResult:
    estimate: float
    estimate1: float
    estimate2: float
    statistic: float
    p_value: float
    parameter: float
    conf_low: float
    conf_high: float
    method: str = "Welch Two Sample t-test"
    alternative: str = "two-sided"

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame([asdict(self)])

    def describe(self) -> str:
        return (
            f"{self.method}\n"
            f"t = {self.statistic:.4f}, df = {self.parameter:.2f}, p-value = {self.p_value:.4g}\n"
            f"{CONF_LEVEL:.0%} CI for mean(0) - mean(1): [{self.conf_low:.4f}, {self.conf_high:.4f}]\n"
            f"mean in group 0 = {self.estimate1:.4f}, mean in group 1 = {self.estimate2:.4f}"
        )


def welch_ttest(a: np.ndarray, b: np.ndarray, conf_level: float = CONF_LEVEL) -> WelchResult:
    a = np.asarray(a, dtype=float)
    b = np.asarray(b, dtype=float)
    n_a, n_b = len(a), len(b)
    if n_a < 2 or n_b < 2:
        raise InsufficientDataError(f"Welch t-test needs at least 2 observations per group, got {n_a} and {n_b}")

    va = a.var(ddof=1) / n_a
    vb = b.var(ddof=1) / n_b
    se = np.sqrt(va + vb)
    if se == 0:
        raise InsufficientDataError("Both groups are constant; the t statistic is undefined")

    diff = a.mean() - b.mean()
    dof = (va + vb) ** 2 / (va**2 / (n_a - 1) + vb**2 / (n_b - 1))
    t_stat, p_value = st.ttest_ind(a, b, equal_var=False)
    t_crit = st.t.ppf(0.5 + conf_level / 2, dof)
    return WelchResult(
        estimate=float(diff),
        estimate1=float(a.mean()),
        estimate2=float(b.mean()),
        statistic=float(t_stat),
        p_value=float(p_value),
        parameter=float(dof),
        conf_low=float(diff - t_crit * se),
        conf_high=float(diff + t_crit * se),
    )


def yield_by_flag(df: pd.DataFrame, outcome: str = OUTCOME, flag: str = HIGH_PRECISION) -> WelchResult:
    d = df.dropna(subset=[outcome, flag])
    return welch_ttest(
        d.loc[d[flag] == 0, outcome].to_numpy(dtype=float),
        d.loc[d[flag] == 1, outcome].to_numpy(dtype=float),
    )


def run_ttest(df: pd.DataFrame, paths: OutputPaths) -> WelchResult:
    result = yield_by_flag(df)
    write_table(result.to_frame(), paths.table(TTEST_TABLE))
    print("\n--- T-test: Yield by High Precision Usage ---")
    print(result.describe())
    return result


def main() -> None:
    paths = OutputPaths(DATA_DIR, OUTPUT_DIR)
    paths.ensure_dirs()
    run_ttest(load_clean(paths.clean_data), paths)


if __name__ == "__main__":
    main()
