"""Load the raw county sheet, standardize names, and coerce column types.

The raw file is read entirely as text; the cleaner decides which columns are
numeric. Individual cells that fail to parse become missing values.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable

import numpy as np
import pandas as pd

from .common import COMMODITY, FLAG_COLUMNS, NUMERIC_COLUMNS
from .config import TARGET_COMMODITY
from .errors import DataIOError, SchemaError

_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_GROUPED_NUMBER = re.compile(r"^[-+]?\d{1,3}(,\d{3})+(\.\d*)?$")


def clean_name(name: object) -> str:
    s = str(name).strip().replace("%", " percent ").replace("#", " number ")
    s = _NON_ALNUM.sub("_", s.lower()).strip("_")
    return s or "x"


def clean_names(columns: Iterable[object]) -> list[str]:
    seen: dict[str, int] = {}
    out = []
    for col in columns:
        name = clean_name(col)
        seen[name] = seen.get(name, 0) + 1
        out.append(name if seen[name] == 1 else f"{name}_{seen[name]}")
    return out


def _read_text_csv(path: Path) -> pd.DataFrame:
    """Read every cell as text, keeping header cells exactly as written."""
    path = Path(path)
    try:
        table = pd.read_csv(path, dtype=str, header=None)
    except pd.errors.EmptyDataError as exc:
        raise SchemaError(f"{path} has no header row") from exc
    except (pd.errors.ParserError, UnicodeDecodeError) as exc:
        raise SchemaError(f"Could not parse {path}: {exc}") from exc
    except OSError as exc:
        raise DataIOError(f"Could not read {path}: {exc}") from exc

    df = table.iloc[1:].reset_index(drop=True)
    df.columns = ["" if pd.isna(v) else v for v in table.iloc[0]]
    return df


def load_raw(path: Path) -> pd.DataFrame:
    df = _read_text_csv(path)
    if len(df.columns) == 0:
        raise SchemaError(f"{path} has an empty header")
    df.columns = clean_names(df.columns)
    return df


def require_columns(df: pd.DataFrame, columns: Iterable[str]) -> None:
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise SchemaError(f"Missing required columns: {', '.join(missing)}")


def _strip_text(series: pd.Series) -> pd.Series:
    if not pd.api.types.is_numeric_dtype(series):
        return series.map(lambda v: v.strip() if isinstance(v, str) else v)
    return series


def _drop_grouping(value: object) -> object:
    if isinstance(value, str) and _GROUPED_NUMBER.match(value):
        return value.replace(",", "")
    return value


def to_numeric(series: pd.Series) -> pd.Series:
    text = _strip_text(series)
    if not pd.api.types.is_numeric_dtype(text):
        text = text.map(_drop_grouping)
    values = pd.to_numeric(text, errors="coerce").astype(float)
    return values.replace([np.inf, -np.inf], np.nan)


def to_flag(series: pd.Series) -> pd.Series:
    values = to_numeric(series)
    return values.where(values.isin([0, 1])).astype("Int64")


def filter_commodity(df: pd.DataFrame, commodity: str = TARGET_COMMODITY) -> pd.DataFrame:
    if COMMODITY not in df.columns:
        return df.copy()
    col = _strip_text(df[COMMODITY]).replace("", np.nan)
    keep = col.isna() | (col.astype(str).str.upper() == commodity.upper())
    out = df.assign(**{COMMODITY: col})
    return out.loc[keep].reset_index(drop=True)


def coerce_types(df: pd.DataFrame) -> pd.DataFrame:
    require_columns(df, NUMERIC_COLUMNS + FLAG_COLUMNS)
    out = df.copy()
    for col in NUMERIC_COLUMNS:
        out[col] = to_numeric(out[col])
    for col in FLAG_COLUMNS:
        out[col] = to_flag(out[col])
    return out


def clean(df_raw: pd.DataFrame) -> pd.DataFrame:
    require_columns(df_raw, NUMERIC_COLUMNS + FLAG_COLUMNS)
    return coerce_types(filter_commodity(df_raw))


def validate(df_raw: pd.DataFrame, df: pd.DataFrame) -> dict:
    """Row accounting for the commodity filter and cells lost to coercion."""
    kept = filter_commodity(df_raw)
    coerced = {}
    for col in NUMERIC_COLUMNS + FLAG_COLUMNS:
        present = _strip_text(kept[col]).replace("", np.nan).notna()
        coerced[col] = int((present & df[col].isna()).sum())
    return {
        "rows_raw": int(len(df_raw)),
        "rows_dropped_commodity": int(len(df_raw) - len(kept)),
        "rows_clean": int(len(df)),
        "coerced_to_missing": coerced,
        "missing_by_col": {k: int(v) for k, v in df.isna().sum().to_dict().items()},
    }


def load_clean(path: Path) -> pd.DataFrame:
    """Read the processed copy back with the cleaned column types."""
    return coerce_types(_read_text_csv(path))
