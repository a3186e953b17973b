"""
Header extractor
================

HURDAT2 interleaves storm header lines with data lines:

    AL011980,            ALLEN,     57,
    19800731, 1200,  , TD, 11.0N,  35.0W,  30, 1009, ...

A header only has id, name and observation count, so its 4th field is
missing; data lines always carry a status code there. That is the whole
detection rule.

This module also pins the layout: `validate_layout` refuses files where the
rule clearly does not describe the content.
"""

from __future__ import annotations
import logging
import re
from typing import List, Sequence

from .errors import LayoutMismatch, MalformedHeader
from .models import HeaderDescriptor, RawLine

logger = logging.getLogger(__name__)

# Basin (2 letters) + cyclone number (2 digits) + year (4 digits)
_STORM_ID_RE = re.compile(r"^[A-Z]{2}\d{6}$")
_COUNT_RE = re.compile(r"^\d+$")

# Data lines carry 20 fields, or 21 with radius of maximum wind
DATA_FIELD_COUNTS = (20, 21)

# Share of irregular lines tolerated before the file is rejected
LAYOUT_TOLERANCE = 0.05


def is_header(line: RawLine) -> bool:
    """Return True if the line is a storm header (4th field absent/empty)."""
    return line.field(3) == ""


def extract_headers(lines: Sequence[RawLine]) -> List[HeaderDescriptor]:
    """Scan the lines and return one HeaderDescriptor per header, in file order."""
    out: List[HeaderDescriptor] = []
    for line in lines:
        if not is_header(line):
            continue
        count = line.field(2)
        if not _COUNT_RE.match(count):
            raise MalformedHeader(f"observation count {count!r} is not a non-negative integer",
                                  line_number=line.line_number)
        out.append(HeaderDescriptor(
            storm_id=line.field(0),
            storm_name=line.field(1),
            declared_obs_count=int(count),
            header_line_number=line.line_number,
        ))
    logger.info("Found %d storm headers", len(out))
    return out


def validate_layout(lines: Sequence[RawLine], headers: Sequence[HeaderDescriptor]) -> None:
    """Fail fast if the file does not look like a HURDAT2 archive."""
    if not headers:
        raise LayoutMismatch("no storm header lines found")

    bad_ids = [h for h in headers if not _STORM_ID_RE.match(h.storm_id)]
    if len(bad_ids) > LAYOUT_TOLERANCE * len(headers):
        raise LayoutMismatch(
            f"{len(bad_ids)} of {len(headers)} header lines have no storm id "
            f"(first: {bad_ids[0].storm_id!r})",
            line_number=bad_ids[0].header_line_number,
        )

    data = [ln for ln in lines if not is_header(ln)]
    bad_width = [ln for ln in data if len(ln.fields) not in DATA_FIELD_COUNTS]
    if data and len(bad_width) > LAYOUT_TOLERANCE * len(data):
        raise LayoutMismatch(
            f"{len(bad_width)} of {len(data)} data lines do not have "
            f"{' or '.join(map(str, DATA_FIELD_COUNTS))} fields",
            line_number=bad_width[0].line_number,
        )
    if bad_width:
        logger.warning("%d data lines have an unexpected field count", len(bad_width))
