"""Precision agriculture adoption vs. corn yields: county-level analysis pipeline."""

__version__ = "0.1.0"
