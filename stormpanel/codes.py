"""
Code tables (categorical columns)
=================================

HURDAT2 packs several categorical fields into short letter codes. We keep
each table as an `IntEnum` so that:
- the integer value is what gets written to the panels and aggregated, and
- the member name is the letter code found in the archive.

Status codes are numbered by increasing severity, so `max()` over a month
picks the most severe status seen in it.

Labels are kept in plain dicts next to each enum; `label()` looks them up.
After aggregation only integer codes survive, and `from_value()` turns them
back into members.
"""

from __future__ import annotations
from enum import IntEnum
from typing import Dict, Optional, Tuple, Type, TypeVar

E = TypeVar("E", bound=IntEnum)


class RecordIdentifier(IntEnum):
    """Column 3 of a data line (optional special-entry marker)."""
    C = 1
    G = 2
    I = 3
    L = 4
    P = 5
    R = 6
    S = 7
    T = 8
    W = 9


class Status(IntEnum):
    """Column 4 of a data line (system status), least to most severe."""
    DB = 1
    WV = 2
    LO = 3
    EX = 4
    SD = 5
    SS = 6
    TD = 7
    TS = 8
    HU = 9


class Category(IntEnum):
    """Saffir-Simpson category derived from wind speed (mph)."""
    CAT1 = 1
    CAT2 = 2
    CAT3 = 3
    CAT4 = 4
    CAT5 = 5


RECORD_LABELS: Dict[RecordIdentifier, str] = {
    RecordIdentifier.C: "Closest approach to a coast, not followed by a landfall",
    RecordIdentifier.G: "Genesis",
    RecordIdentifier.I: "An intensity peak in terms of both pressure and wind",
    RecordIdentifier.L: "Landfall (center of system crossing a coastline)",
    RecordIdentifier.P: "Minimum in central pressure",
    RecordIdentifier.R: "Additional detail on the intensity during rapid changes",
    RecordIdentifier.S: "Change of status of the system",
    RecordIdentifier.T: "Additional detail on the position of the system",
    RecordIdentifier.W: "Maximum sustained wind speed",
}

STATUS_LABELS: Dict[Status, str] = {
    Status.DB: "Disturbance",
    Status.WV: "Tropical wave",
    Status.LO: "Low",
    Status.EX: "Extratropical cyclone",
    Status.SD: "Subtropical depression",
    Status.SS: "Subtropical storm",
    Status.TD: "Tropical depression",
    Status.TS: "Tropical storm",
    Status.HU: "Hurricane",
}

CATEGORY_LABELS: Dict[Category, str] = {c: f"Category {c.value}" for c in Category}

_LABELS = {
    RecordIdentifier: RECORD_LABELS,
    Status: STATUS_LABELS,
    Category: CATEGORY_LABELS,
}

# Column name -> enum class; used by export and the monthly aggregator.
CATEGORICAL_COLUMNS: Dict[str, Type[IntEnum]] = {
    "record_identifier": RecordIdentifier,
    "status": Status,
    "category": Category,
}


def label(member: Optional[IntEnum]) -> Optional[str]:
    """Return the human-readable label for a code table member."""
    if member is None:
        return None
    return _LABELS[type(member)][member]


def from_letter(enum_cls: Type[E], letter: str) -> Optional[E]:
    """Look up a member by its archive letter code, or None if unknown."""
    try:
        return enum_cls[letter.upper()]
    except KeyError:
        return None


def from_value(enum_cls: Type[E], value) -> Optional[E]:
    """Re-attach a member from an aggregated numeric code (NaN/None -> None)."""
    if value is None or value != value:
        return None
    return enum_cls(int(value))


def codebook() -> Dict[str, Dict[int, Tuple[str, str]]]:
    """Return {column: {code: (letter, label)}} for every categorical column."""
    out: Dict[str, Dict[int, Tuple[str, str]]] = {}
    for col, enum_cls in CATEGORICAL_COLUMNS.items():
        labels = _LABELS[enum_cls]
        out[col] = {m.value: (m.name, labels[m]) for m in enum_cls}
    return out
