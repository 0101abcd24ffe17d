#!/usr/bin/env python3
"""Run the analysis from a source checkout without installing the package."""

from __future__ import annotations

import sys
from pathlib import Path

SRC_PATH = Path(__file__).resolve().parent / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from precision_ag.run_analysis import main  # noqa: E402

if __name__ == "__main__":
    main()
