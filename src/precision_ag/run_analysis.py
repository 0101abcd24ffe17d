#!/usr/bin/env python3
"""Run the corn yield / precision agriculture analysis end to end.

Stages run in order in a single process: load, clean, describe, plot,
t-test, regression models. Each stage writes its own tables and figures,
and a stage that fails leaves none of its outputs behind.
"""

from __future__ import annotations

import argparse
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Sequence

import pandas as pd

from .cleaning import clean, load_raw, validate
from .common import OutputPaths, output_batch, write_json, write_table
from .config import DATA_DIR, OUTPUT_DIR, RAW_DATA_PATH
from .descriptives import run_descriptives
from .eda import run_eda
from .errors import PipelineError
from .hypothesis import run_ttest
from .models import run_models

logger = logging.getLogger(__name__)


@contextmanager
def phase(description: str) -> Iterator[None]:
    logger.info("Starting phase: %s", description)
    try:
        with output_batch():
            yield
    except PipelineError as exc:
        if exc.stage is None:
            exc.stage = description
        raise
    logger.info("Completed phase: %s", description)


def run_pipeline(raw_path: Path, paths: OutputPaths) -> dict:
    with phase("Load raw data"):
        df_raw = load_raw(raw_path)
        print("\nRows / Cols:")
        print(df_raw.shape)
        print("\nColumn names:")
        print(list(df_raw.columns))

    with phase("Clean and standardize"):
        paths.ensure_dirs()
        df = clean(df_raw)
        write_table(df, paths.clean_data)
        validation = validate(df_raw, df)
        write_json(paths.tables_dir / "data_validation.json", validation)

    with phase("Descriptive statistics"):
        tables = run_descriptives(df, paths)

    with phase("Exploratory plots"):
        run_eda(df, paths)

    with phase("Welch t-test"):
        ttest = run_ttest(df, paths)

    with phase("Regression models"):
        fit_summary = run_models(df, paths)

    return {
        "validation": validation,
        "descriptive": tables["descriptive_summary"],
        "ttest": ttest,
        "fit_summary": fit_summary,
    }


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Clean the county corn yield sheet and write descriptive, t-test and regression outputs."
    )
    parser.add_argument("--raw-data", type=Path, default=RAW_DATA_PATH, help="Raw CSV with a header row.")
    parser.add_argument("--data-dir", type=Path, default=DATA_DIR, help="Root for data/processed outputs.")
    parser.add_argument("--output-dir", type=Path, default=OUTPUT_DIR, help="Root for tables/ and figures/.")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> None:
    logging.basicConfig(level=logging.INFO, format="[%(asctime)s] %(levelname)s:%(message)s")
    pd.set_option("display.width", 160)
    args = parse_args(argv)
    paths = OutputPaths(args.data_dir, args.output_dir)

    try:
        run_pipeline(args.raw_data, paths)
    except PipelineError as exc:
        logger.error("Analysis aborted: %s", exc)
        raise SystemExit(f"Analysis failed: {exc}") from exc

    logger.info("Done. Outputs saved to %s and %s", paths.figures_dir, paths.tables_dir)


if __name__ == "__main__":
    main()
