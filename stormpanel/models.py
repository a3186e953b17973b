"""
Data model
==========

The pipeline passes immutable records (`frozen=True`) from stage to stage:

    RawLine -> HeaderDescriptor -> TaggedLine -> Observation -> StormMonth

No stage edits a record in place; enrichment builds new records with
`dataclasses.replace`.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple

from .codes import Category, RecordIdentifier, Status


@dataclass(frozen=True)
class RawLine:
    """One archive line, split on commas."""
    line_number: int
    fields: Tuple[str, ...]

    def field(self, i: int) -> str:
        """Return field `i` (0-based), or "" if the line is shorter."""
        return self.fields[i] if i < len(self.fields) else ""


@dataclass(frozen=True)
class HeaderDescriptor:
    """A storm header line: id, name and how many data lines follow it."""
    storm_id: str
    storm_name: str
    declared_obs_count: int
    header_line_number: int

    @property
    def data_start(self) -> int:
        return self.header_line_number + 1

    @property
    def data_end(self) -> int:
        return self.data_start + self.declared_obs_count - 1


@dataclass(frozen=True)
class TaggedLine:
    """A data line with the identity of the storm block it belongs to."""
    storm_id: str
    storm_name: str
    line: RawLine


@dataclass(frozen=True)
class DecodeIssue:
    """Non-fatal decode problem (unknown code, unparseable number)."""
    kind: str
    line_number: int
    value: str


@dataclass(frozen=True)
class Observation:
    """One decoded best-track fix.

    Distances are nautical miles as in the archive, except the two force
    diameters, which are statute miles. Wind is mph.
    """
    storm_id: str
    storm_name: str
    line_number: int
    timestamp: datetime
    record_identifier: Optional[RecordIdentifier]
    status: Optional[Status]
    latitude: float
    longitude: float
    wind: Optional[float]
    pressure: Optional[int]
    r34_ne: Optional[int] = None
    r34_se: Optional[int] = None
    r34_sw: Optional[int] = None
    r34_nw: Optional[int] = None
    r50_ne: Optional[int] = None
    r50_se: Optional[int] = None
    r50_sw: Optional[int] = None
    r50_nw: Optional[int] = None
    r64_ne: Optional[int] = None
    r64_se: Optional[int] = None
    r64_sw: Optional[int] = None
    r64_nw: Optional[int] = None
    radius_max_wind: Optional[int] = None
    # filled in by metrics.enrich()
    category: Optional[Category] = None
    ts_diameter: Optional[float] = None
    hu_diameter: Optional[float] = None
    exposure_time: Optional[float] = None
    wind_max: Optional[float] = None
    wind_sd: Optional[float] = None

    def month_key(self) -> str:
        """Return the calendar month as "YYYY-MM"."""
        return f"{self.timestamp.year:04d}-{self.timestamp.month:02d}"


@dataclass(frozen=True)
class StormMonth:
    """All observations of one storm name within one calendar month."""
    storm_name: str
    month: str
    n_obs: int
    # means
    wind: Optional[float]
    latitude: Optional[float]
    longitude: Optional[float]
    ts_diameter: Optional[float]
    hu_diameter: Optional[float]
    pressure: Optional[float]
    # maxima
    status: Optional[Status]
    category: Optional[Category]
    record_identifier: Optional[RecordIdentifier]
    exposure_time: Optional[float]
    wind_max: Optional[float]
    wind_sd: Optional[float]
