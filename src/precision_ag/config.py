"""Project-wide configuration for the precision agriculture / corn yield analysis.

Point ``RAW_DATA_PATH`` at the county-level submission sheet before running.
Every root can also be overridden from the command line.
"""

import os
from pathlib import Path

# Raw county-level CSV (header row, one county record per line)
RAW_DATA_PATH = Path(os.getenv("PRECISION_AG_RAW_DATA", "data/raw/corn_yields_raw.csv"))

# Roots for the processed copy and for tables/figures
DATA_DIR = Path(os.getenv("PRECISION_AG_DATA_DIR", "data"))
OUTPUT_DIR = Path(os.getenv("PRECISION_AG_OUTPUT_DIR", "output"))

# Rows whose commodity is set to anything else are dropped
TARGET_COMMODITY = "CORN"

HIST_BINS = 40
CONF_LEVEL = 0.95

FIGURE_DPI = 300
HIST_FIGSIZE = (8, 5)
SCATTER_FIGSIZE = (8, 5)
BOXPLOT_FIGSIZE = (7, 5)
