"""
Block tagger
============

Attaches storm identity to data lines. HURDAT2 never repeats the storm id
on data lines; a line belongs to a storm only because of where it sits
after that storm's header. We turn the headers into intervals and merge
them against the line numbers.

A count mismatch anywhere means every later block would be shifted onto
the wrong storm, so it is fatal (`UncoveredDataLine`), never skipped.
"""

from __future__ import annotations
import logging
from typing import List, Sequence

from .errors import UncoveredDataLine
from .headers import is_header
from .intervals import build_intervals, merge_join
from .models import HeaderDescriptor, RawLine, TaggedLine

logger = logging.getLogger(__name__)


def tag_blocks(lines: Sequence[RawLine], headers: Sequence[HeaderDescriptor]) -> List[TaggedLine]:
    """Tag every data line with the id/name of the header block covering it."""
    intervals = build_intervals(headers)
    owners = merge_join([ln.line_number for ln in lines], intervals)

    out: List[TaggedLine] = []
    for line, k in zip(lines, owners):
        if is_header(line):
            if k is not None:
                iv = intervals[k]
                raise UncoveredDataLine(
                    f"storm {iv.storm_id} declares {len(iv)} observations "
                    f"but its block ends before the next header",
                    line_number=line.line_number,
                )
            continue
        if k is None:
            raise UncoveredDataLine("data line is not covered by any storm header",
                                    line_number=line.line_number)
        iv = intervals[k]
        out.append(TaggedLine(storm_id=iv.storm_id, storm_name=iv.storm_name, line=line))

    last = lines[-1].line_number if lines else 0
    for iv in intervals:
        if len(iv) and iv.end > last:
            raise UncoveredDataLine(
                f"storm {iv.storm_id} declares {len(iv)} observations "
                f"but the file ends at line {last}",
                line_number=iv.start - 1,
            )

    logger.info("Tagged %d data lines across %d storms", len(out), len(intervals))
    return out
