"""
Raw line source (HURDAT2 text -> RawLine list)
==============================================

Reads the archive and splits every line on commas. The archive has no
quoting, so a plain `str.split(",")` is exact.

Key ideas:
- Line numbers are physical 1-based file line numbers, so error messages
  point at the line an operator would open in an editor.
- Every archive line ends with a trailing comma; the empty field it
  produces is dropped.
- Fully blank lines are skipped but still counted. A blank line inside a
  storm block therefore takes one of the header's declared slots, and the
  tagger reports the block as corrupt (`UncoveredDataLine`).
"""

from __future__ import annotations
import logging
from typing import Iterable, Iterator, List

from .models import RawLine

logger = logging.getLogger(__name__)


def split_line(line_number: int, text: str) -> RawLine:
    """Split one archive line into stripped fields."""
    fields = [p.strip() for p in text.rstrip("\r\n").split(",")]
    if len(fields) > 1 and fields[-1] == "":
        fields.pop()
    return RawLine(line_number=line_number, fields=tuple(fields))


def iter_lines(lines: Iterable[str]) -> Iterator[RawLine]:
    """Yield RawLine records for an iterable of text lines."""
    for i, text in enumerate(lines, start=1):
        if not text.strip():
            continue
        yield split_line(i, text)


def read_archive(path: str) -> List[RawLine]:
    """Read a HURDAT2 archive file into a list of RawLine records."""
    with open(path, "r", encoding="utf-8") as f:
        lines = list(iter_lines(f))
    logger.info("Read %d lines from %s", len(lines), path)
    return lines
