"""
Field decoder (TaggedLine -> Observation)
=========================================

Data line layout (0-based field index):

    0 date YYYYMMDD    1 time HHMM      2 record identifier   3 status
    4 latitude 28.5N   5 longitude 79.0W  6 wind (kt)         7 pressure (mb)
    8-11  34 kt radii NE, SE, SW, NW (nm)
    12-15 50 kt radii NE, SE, SW, NW (nm)
    16-19 64 kt radii NE, SE, SW, NW (nm)
    20 radius of maximum wind (nm, newer files only)

Key ideas:
- `decode_line` is a pure function of the line, so lines can be decoded in
  any order or in parallel.
- Date/time and coordinates are load-bearing; bad values raise.
- Unknown codes and unreadable numbers become None plus a `DecodeIssue`.
- -99 and -999 mean "not recorded" and become None before anything else
  touches the value.
"""

from __future__ import annotations
import logging
import re
from concurrent.futures import ProcessPoolExecutor
from datetime import datetime
from typing import List, Optional, Sequence, Tuple

from .codes import RecordIdentifier, Status, from_letter
from .errors import (InvalidCoordinate, InvalidTimestamp, UNKNOWN_RECORD_CODE,
                     UNKNOWN_STATUS_CODE, UNPARSEABLE_NUMBER)
from .models import DecodeIssue, Observation, TaggedLine

logger = logging.getLogger(__name__)

KNOTS_TO_MPH = 1.15078
SENTINELS = (-99, -999)

RADII_FIELDS = (
    "r34_ne", "r34_se", "r34_sw", "r34_nw",
    "r50_ne", "r50_se", "r50_sw", "r50_nw",
    "r64_ne", "r64_se", "r64_sw", "r64_nw",
)
_RADII_OFFSET = 8
_RMW_INDEX = 20

_DATE_RE = re.compile(r"^\d{8}$")
_TIME_RE = re.compile(r"^\d{4}$")
_COORD_RE = re.compile(r"^(\d+(?:\.\d+)?)([A-Za-z])$")
_INT_RE = re.compile(r"^-?\d+$")

# ---------------- Field helpers ----------------

def parse_timestamp(date: str, time: str, line_number: Optional[int] = None) -> datetime:
    """Combine YYYYMMDD and HHMM into a minute-resolution datetime."""
    if not _DATE_RE.match(date) or not _TIME_RE.match(time):
        raise InvalidTimestamp(f"bad date/time {date!r} {time!r}", line_number=line_number)
    try:
        return datetime(int(date[:4]), int(date[4:6]), int(date[6:8]),
                        int(time[:2]), int(time[2:4]))
    except ValueError as e:
        raise InvalidTimestamp(f"bad date/time {date!r} {time!r} ({e})",
                               line_number=line_number) from e


def parse_coordinate(raw: str, axis: str, line_number: Optional[int] = None) -> float:
    """Convert '28.5N' / '79.0W' into signed decimal degrees.

    `axis` is "NS" for latitude or "EW" for longitude.
    """
    m = _COORD_RE.match(raw)
    if not m or m.group(2).upper() not in axis:
        raise InvalidCoordinate(f"bad coordinate {raw!r}", line_number=line_number)
    sign = 1.0 if m.group(2).upper() in ("N", "E") else -1.0
    return sign * float(m.group(1))


def parse_number(raw: str, line_number: int, issues: List[DecodeIssue]) -> Optional[int]:
    """Parse an integer field; sentinels and blanks become None."""
    if raw == "":
        return None
    if not _INT_RE.match(raw):
        issues.append(DecodeIssue(kind=UNPARSEABLE_NUMBER, line_number=line_number, value=raw))
        return None
    v = int(raw)
    if v in SENTINELS:
        return None
    return v


def knots_to_mph(kt: Optional[int]) -> Optional[float]:
    if kt is None:
        return None
    return kt * KNOTS_TO_MPH

# ---------------- Line decoding ----------------

def decode_line(tagged: TaggedLine) -> Tuple[Observation, List[DecodeIssue]]:
    """Decode one tagged data line into an Observation plus non-fatal issues."""
    line = tagged.line
    n = line.line_number
    f = line.field
    issues: List[DecodeIssue] = []

    timestamp = parse_timestamp(f(0), f(1), line_number=n)

    record = None
    if f(2):
        record = from_letter(RecordIdentifier, f(2))
        if record is None:
            issues.append(DecodeIssue(kind=UNKNOWN_RECORD_CODE, line_number=n, value=f(2)))

    status = from_letter(Status, f(3))
    if status is None:
        issues.append(DecodeIssue(kind=UNKNOWN_STATUS_CODE, line_number=n, value=f(3)))

    lat = parse_coordinate(f(4), "NS", line_number=n)
    lon = parse_coordinate(f(5), "EW", line_number=n)

    radii = {name: parse_number(f(_RADII_OFFSET + i), n, issues)
             for i, name in enumerate(RADII_FIELDS)}

    obs = Observation(
        storm_id=tagged.storm_id,
        storm_name=tagged.storm_name,
        line_number=n,
        timestamp=timestamp,
        record_identifier=record,
        status=status,
        latitude=lat,
        longitude=lon,
        wind=knots_to_mph(parse_number(f(6), n, issues)),
        pressure=parse_number(f(7), n, issues),
        radius_max_wind=parse_number(f(_RMW_INDEX), n, issues),
        **radii,
    )
    return obs, issues


def decode_lines(tagged: Sequence[TaggedLine], workers: int = 1) -> Tuple[List[Observation], List[DecodeIssue]]:
    """Decode all lines, keeping line order. `workers > 1` uses a process pool."""
    if workers > 1 and len(tagged) > 1:
        chunk = max(1, len(tagged) // (workers * 4))
        with ProcessPoolExecutor(max_workers=workers) as pool:
            results = list(pool.map(decode_line, tagged, chunksize=chunk))
    else:
        results = [decode_line(t) for t in tagged]

    observations: List[Observation] = []
    issues: List[DecodeIssue] = []
    for obs, found in results:
        observations.append(obs)
        issues.extend(found)
    for issue in issues:
        logger.warning("line %d: %s %r", issue.line_number, issue.kind, issue.value)
    logger.info("Decoded %d observations (%d issues)", len(observations), len(issues))
    return observations, issues

# ---------------- Data-quality filters ----------------

def exclusion_reason(obs: Observation, first_year: int = 1980,
                     last_year: Optional[int] = None) -> Optional[str]:
    """Return why an observation is left out of the panel, or None to keep it."""
    if obs.timestamp.year < first_year:
        return "before_first_year"
    if last_year is not None and obs.timestamp.year > last_year:
        return "after_last_year"
    if obs.longitude < -180:
        return "longitude_below_-180"
    if not (-90 <= obs.latitude <= 90) or obs.longitude > 180:
        return "coordinate_out_of_range"
    return None
