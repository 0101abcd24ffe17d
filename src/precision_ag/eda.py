from __future__ import annotations

import logging

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import statsmodels.api as sm

from .cleaning import load_clean
from .common import HIGH_PRECISION, OUTCOME, PA_MIDPOINT, OutputPaths, save_figure
from .config import (
    BOXPLOT_FIGSIZE,
    CONF_LEVEL,
    DATA_DIR,
    FIGURE_DPI,
    HIST_BINS,
    HIST_FIGSIZE,
    OUTPUT_DIR,
    SCATTER_FIGSIZE,
)

logger = logging.getLogger(__name__)

FIT_GRID_POINTS = 100


def plot_yield_histogram(df: pd.DataFrame, paths: OutputPaths) -> None:
    values = df[OUTCOME].dropna()
    plt.figure(figsize=HIST_FIGSIZE)
    plt.hist(values, bins=HIST_BINS)
    plt.title("Distribution of Corn Yield (Bu/Acre, 2022)")
    plt.xlabel("Corn Yield (Bu/Acre)")
    plt.ylabel("Count")
    save_figure(paths.figure("yield_histogram"), dpi=FIGURE_DPI)


def linear_fit_band(x: pd.Series, y: pd.Series, conf_level: float = CONF_LEVEL) -> pd.DataFrame:
    """OLS line of y on x over an even grid with pointwise mean confidence bounds."""
    res = sm.OLS(y.astype(float), sm.add_constant(x.astype(float))).fit()
    grid = np.linspace(float(x.min()), float(x.max()), FIT_GRID_POINTS)
    pred = res.get_prediction(sm.add_constant(grid, has_constant="add"))
    frame = pred.summary_frame(alpha=1 - conf_level)
    return pd.DataFrame(
        {
            "x": grid,
            "fit": frame["mean"].to_numpy(),
            "lower": frame["mean_ci_lower"].to_numpy(),
            "upper": frame["mean_ci_upper"].to_numpy(),
        }
    )


def plot_yield_vs_midpoint(df: pd.DataFrame, paths: OutputPaths) -> None:
    d = df.dropna(subset=[PA_MIDPOINT, OUTCOME])
    plt.figure(figsize=SCATTER_FIGSIZE)
    plt.scatter(d[PA_MIDPOINT], d[OUTCOME], alpha=0.5)
    if len(d) >= 3 and d[PA_MIDPOINT].nunique() > 1:
        band = linear_fit_band(d[PA_MIDPOINT], d[OUTCOME])
        plt.fill_between(band["x"], band["lower"], band["upper"], alpha=0.3)
        plt.plot(band["x"], band["fit"])
    else:
        logger.warning("Only %d usable points for the yield/midpoint fit line; drawing points only", len(d))
    plt.title("Corn Yield vs Precision Ag Usage (Midpoint, %)")
    plt.xlabel("Precision Ag Usage Midpoint (%)")
    plt.ylabel("Corn Yield (Bu/Acre, 2022)")
    save_figure(paths.figure("yield_vs_precision_midpoint"), dpi=FIGURE_DPI)


def plot_yield_by_high_precision(df: pd.DataFrame, paths: OutputPaths) -> None:
    d = df.dropna(subset=[HIGH_PRECISION, OUTCOME])
    levels = sorted(d[HIGH_PRECISION].unique())
    groups = [d.loc[d[HIGH_PRECISION] == lvl, OUTCOME].to_numpy(dtype=float) for lvl in levels]
    plt.figure(figsize=BOXPLOT_FIGSIZE)
    if groups:
        plt.boxplot(groups)
        plt.xticks(range(1, len(levels) + 1), [str(int(lvl)) for lvl in levels])
    plt.title("Corn Yield by High Precision Usage Group")
    plt.xlabel("High Precision Usage (0 = No, 1 = Yes)")
    plt.ylabel("Corn Yield (Bu/Acre, 2022)")
    save_figure(paths.figure("yield_by_high_precision_boxplot"), dpi=FIGURE_DPI)


def run_eda(df: pd.DataFrame, paths: OutputPaths) -> None:
    plot_yield_histogram(df, paths)
    plot_yield_vs_midpoint(df, paths)
    plot_yield_by_high_precision(df, paths)


def main() -> None:
    paths = OutputPaths(DATA_DIR, OUTPUT_DIR)
    paths.ensure_dirs()
    run_eda(load_clean(paths.clean_data), paths)
    print("EDA figures saved to", paths.figures_dir)


if __name__ == "__main__":
    main()
