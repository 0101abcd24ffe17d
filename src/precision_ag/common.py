from __future__ import annotations

import json
import os
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import pandas as pd  # noqa: E402

from .errors import DataIOError

COMMODITY = "commodity"
OUTCOME = "corn_yield_bu_acre_2022"
PA_MIDPOINT = "precision_ag_usage_midpoint_2022_percent"
HIGH_PRECISION = "high_precision_usage"
HIGH_CSP = "high_csp_incentive"

CONTROLS = [
    "net_csp_incentive_2021",
    "controlled_traffic_farming_2021",
    "soil_moisture_monitoring_y2_y5_2021",
    "precision_pesticide_application_2021",
    "precision_ag_nutrient_loss_reduction_2021",
]

NUMERIC_COLUMNS = [OUTCOME, PA_MIDPOINT] + CONTROLS
FLAG_COLUMNS = [HIGH_CSP, HIGH_PRECISION]

MODEL_TABLES = {
    "m1": "model_m1_precision_midpoint",
    "m2": "model_m2_controls_precision_midpoint",
    "m3": "model_m3_high_precision_controls",
}


@dataclass(frozen=True)
class OutputPaths:
    data_dir: Path
    output_dir: Path

    @property
    def processed_dir(self) -> Path:
        return Path(self.data_dir) / "processed"

    @property
    def tables_dir(self) -> Path:
        return Path(self.output_dir) / "tables"

    @property
    def figures_dir(self) -> Path:
        return Path(self.output_dir) / "figures"

    @property
    def clean_data(self) -> Path:
        return self.processed_dir / "corn_yields_clean.csv"

    def table(self, name: str) -> Path:
        return self.tables_dir / f"{name}.csv"

    def figure(self, name: str) -> Path:
        return self.figures_dir / f"{name}.png"

    def ensure_dirs(self) -> None:
        for d in (self.processed_dir, self.tables_dir, self.figures_dir):
            try:
                d.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                raise DataIOError(f"Cannot create output directory {d}: {exc}") from exc


# Open output batches; writes inside one are staged until the batch commits.
_batches: list[list[tuple[Path, Path]]] = []


def _discard(pending: list[tuple[Path, Path]]) -> None:
    for tmp, _ in pending:
        if tmp.exists():
            tmp.unlink()


@contextmanager
def output_batch() -> Iterator[None]:
    """Move every file written in the block into place only if the whole block succeeds."""
    pending: list[tuple[Path, Path]] = []
    _batches.append(pending)
    try:
        yield
    except BaseException:
        _discard(pending)
        raise
    finally:
        _batches.pop()

    try:
        for tmp, path in pending:
            os.replace(tmp, path)
    except OSError as exc:
        _discard(pending)
        raise DataIOError(f"Failed to move outputs into place: {exc}") from exc


@contextmanager
def atomic_path(path: Path) -> Iterator[Path]:
    """Yield a temporary sibling of ``path`` and move it into place on success."""
    path = Path(path)
    tmp = path.with_name(f".{path.name}.tmp")
    staged = False
    try:
        yield tmp
        if _batches:
            if (tmp, path) not in _batches[-1]:
                _batches[-1].append((tmp, path))
            staged = True
        else:
            os.replace(tmp, path)
    except OSError as exc:
        raise DataIOError(f"Failed to write {path}: {exc}") from exc
    finally:
        if not staged and tmp.exists():
            tmp.unlink()


def write_table(df: pd.DataFrame, path: Path) -> Path:
    with atomic_path(path) as tmp:
        df.to_csv(tmp, index=False)
    return path


def write_json(path: Path, obj: dict) -> Path:
    with atomic_path(path) as tmp:
        tmp.write_text(json.dumps(obj, indent=2, default=str), encoding="utf-8")
    return path


def save_figure(path: Path, dpi: int) -> Path:
    """Save the current pyplot figure to ``path`` and close it."""
    path = Path(path)
    try:
        plt.tight_layout()
        with atomic_path(path) as tmp:
            plt.savefig(tmp, dpi=dpi, format=path.suffix.lstrip(".") or "png")
    finally:
        plt.close()
    return path
