"""
Interval utilities
==================

Each storm header owns a block of line numbers `[start, end]`. Because
headers come in file order, those blocks form a sorted list, and matching
every line to its block is a merge of two sorted sequences:

- `build_intervals`: one linear pass over the headers
- `merge_join`: two-pointer walk over sorted points and sorted intervals

Both are O(n); nothing here searches per line.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .models import HeaderDescriptor


@dataclass(frozen=True)
class Interval:
    """Inclusive line-number range owned by one storm."""
    start: int
    end: int
    storm_id: str
    storm_name: str

    def __contains__(self, n: int) -> bool:
        return self.start <= n <= self.end

    def __len__(self) -> int:
        return max(0, self.end - self.start + 1)


def build_intervals(headers: Sequence[HeaderDescriptor]) -> List[Interval]:
    """Build the interval list from headers already in file order."""
    out: List[Interval] = []
    prev = 0
    for h in headers:
        if h.header_line_number <= prev:
            raise ValueError("headers must be sorted by line number")
        prev = h.header_line_number
        out.append(Interval(start=h.data_start, end=h.data_end,
                            storm_id=h.storm_id, storm_name=h.storm_name))
    return out


def merge_join(points: Sequence[int], intervals: Sequence[Interval]) -> List[Optional[int]]:
    """For each sorted point, return the index of the interval containing it.

    Points outside every interval map to None. Empty intervals are skipped.
    """
    out: List[Optional[int]] = []
    # j only moves forward: both sequences are sorted
    j = 0
    for p in points:
        while j < len(intervals) and (intervals[j].end < p or len(intervals[j]) == 0):
            j += 1
        if j < len(intervals) and p in intervals[j]:
            out.append(j)
        else:
            out.append(None)
    return out


def covered_points(intervals: Sequence[Interval]) -> List[int]:
    """Return every line number covered by some interval, in order.

    Used to check the coverage invariant: for a well-formed archive this is
    exactly the list of non-header line numbers.
    """
    out: List[int] = []
    for iv in intervals:
        out.extend(range(iv.start, iv.end + 1))
    return out
