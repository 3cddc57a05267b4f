"""Exceptions raised by the study data pipeline."""

from __future__ import annotations

from pathlib import Path


class StudyDataError(Exception):
    """Base class for pipeline errors that abort a run."""
    pass


class UnsupportedFormatError(StudyDataError, ValueError):
    """Raised when an input file's JSON root matches none of the accepted shapes."""

    def __init__(self, accepted: list[str], path: Path | str | None = None, what: str = "JSON"):
        self.accepted = list(accepted)
        self.path = str(path) if path is not None else None

        lines = [f"Unsupported {what} format.", "Expected:"]
        for i, shape in enumerate(self.accepted):
            prefix = " - " if i == 0 else " - OR "
            lines.append(f"{prefix}{shape}")
        if self.path:
            lines.append(f"Input file: {self.path}")
        super().__init__("\n".join(lines))
