"""
Pytest configuration file.

Puts src/ on sys.path so that 'import precision_ag' works from a checkout,
and provides a small synthetic county table.
"""
import sys
from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pandas as pd
import pytest

src_root = Path(__file__).parent.parent / "src"
if str(src_root) not in sys.path:
    sys.path.insert(0, str(src_root))

RAW_HEADER = [
    "County",
    "State",
    "Commodity",
    "Corn Yield (Bu/Acre) 2022",
    "Precision Ag Usage Range",
    "Precision Ag Usage Midpoint 2022 (%)",
    "Controlled Traffic Farming 2021",
    "Soil Moisture Monitoring Y2-Y5 2021",
    "Precision Pesticide Application 2021",
    "Precision Ag Nutrient Loss Reduction 2021",
    "Net CSP Incentive 2021",
    "High CSP Incentive",
    "High Precision Usage",
]


def make_raw_frame(n_rows: int = 60, seed: int = 0) -> pd.DataFrame:
    """
    Raw-looking county sheet (original header spelling, text values).
    Yield depends linearly on the midpoint plus noise so every model is full rank.
    """
    rng = np.random.default_rng(seed)
    midpoint = rng.uniform(5, 60, n_rows)
    flag = (midpoint > 30).astype(int)
    controls = rng.normal(50, 10, size=(n_rows, 5))
    yield_ = 140 + 0.5 * midpoint + rng.normal(0, 8, n_rows)

    return pd.DataFrame(
        {
            "County": [f"County {i}" for i in range(n_rows)],
            "State": ["IOWA"] * n_rows,
            "Commodity": ["CORN"] * n_rows,
            "Corn Yield (Bu/Acre) 2022": yield_.round(2).astype(str),
            "Precision Ag Usage Range": np.where(flag == 1, "30-60%", "0-30%"),
            "Precision Ag Usage Midpoint 2022 (%)": midpoint.round(2).astype(str),
            "Controlled Traffic Farming 2021": controls[:, 0].round(2).astype(str),
            "Soil Moisture Monitoring Y2-Y5 2021": controls[:, 1].round(2).astype(str),
            "Precision Pesticide Application 2021": controls[:, 2].round(2).astype(str),
            "Precision Ag Nutrient Loss Reduction 2021": controls[:, 3].round(2).astype(str),
            "Net CSP Incentive 2021": (controls[:, 4] * 1000).round(0).astype(str),
            "High CSP Incentive": (controls[:, 4] > 50).astype(int).astype(str),
            "High Precision Usage": flag.astype(str),
        },
        columns=RAW_HEADER,
    )


@pytest.fixture
def raw_frame() -> pd.DataFrame:
    return make_raw_frame()


@pytest.fixture
def raw_csv(tmp_path, raw_frame) -> Path:
    path = tmp_path / "raw" / "corn_yields_raw.csv"
    path.parent.mkdir(parents=True)
    raw_frame.to_csv(path, index=False)
    return path
