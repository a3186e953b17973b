"""
Error taxonomy
==============

Fatal archive problems are exceptions; they abort the whole run and carry the
line number of the offending archive line so the file (or the code tables)
can be fixed.

Non-fatal problems are not raised. The decoder records them as
`DecodeIssue` entries (see `models.py`) and the run report lists them.
"""

from __future__ import annotations
from typing import Optional

# Kinds of non-fatal decode issues
UNKNOWN_RECORD_CODE = "UnknownRecordCode"
UNKNOWN_STATUS_CODE = "UnknownStatusCode"
UNPARSEABLE_NUMBER = "UnparseableNumber"


class ArchiveError(ValueError):
    """Base class for fatal problems found in the archive."""

    def __init__(self, message: str, line_number: Optional[int] = None) -> None:
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


class MalformedHeader(ArchiveError):
    pass


class UncoveredDataLine(ArchiveError):
    """Declared observation counts do not match the lines in the file."""


class InvalidTimestamp(ArchiveError):
    pass


class InvalidCoordinate(ArchiveError):
    pass


class LayoutMismatch(ArchiveError):
    """The file does not look like the HURDAT2 layout this package reads."""
