"""Failures that abort an analysis run.

Cell-level coercion problems never show up here; they become missing values
in the cleaned table.
"""

from __future__ import annotations


class PipelineError(Exception):
    def __init__(self, message: str, stage: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.stage = stage

    def __str__(self) -> str:
        if self.stage:
            return f"[{self.stage}] {self.message}"
        return self.message


class DataIOError(PipelineError, OSError):
    """Input could not be read or an output could not be written."""


class SchemaError(PipelineError):
    """Header is empty/unparseable or a required column is absent."""


class InsufficientDataError(PipelineError):
    """A comparison group has too few usable observations."""


class RankDeficiencyError(PipelineError):
    """A regression design matrix is singular or under-determined."""
