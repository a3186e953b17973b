"""
Panel export (records -> DataFrames -> files)
=============================================

Both panels are written as flat tables. Categorical columns keep their
integer code and get a `<column>_label` companion, and `codebook.json`
lists every code with its letter and label, so nothing is lost when the
enum types are gone.

CSV is the primary format (easy to load from Stata, R or pandas); JSON is
used for the codebook and run report; Excel (openpyxl) is optional.
"""

from __future__ import annotations
import json
from dataclasses import asdict
from typing import Any, Dict, List, Sequence

import pandas as pd

from .codes import CATEGORICAL_COLUMNS, codebook, label
from .decoder import RADII_FIELDS
from .models import Observation, StormMonth

OBSERVATION_COLUMNS = (
    ["storm_id", "storm_name", "line_number", "timestamp", "month",
     "record_identifier", "record_identifier_label", "status", "status_label",
     "latitude", "longitude", "wind", "pressure"]
    + list(RADII_FIELDS)
    + ["radius_max_wind", "category", "category_label",
       "ts_diameter", "hu_diameter", "exposure_time", "wind_max", "wind_sd"]
)

STORM_MONTH_COLUMNS = [
    "storm_name", "month", "n_obs",
    "wind", "latitude", "longitude", "ts_diameter", "hu_diameter", "pressure",
    "status", "status_label", "category", "category_label",
    "record_identifier", "record_identifier_label",
    "exposure_time", "wind_max", "wind_sd",
]

# Nullable integer columns (written without a trailing ".0")
OBSERVATION_INT_COLUMNS = (["line_number", "pressure", "radius_max_wind"]
                           + list(RADII_FIELDS) + list(CATEGORICAL_COLUMNS))
# pressure is a monthly mean here, so it stays float
STORM_MONTH_INT_COLUMNS = ["n_obs"] + list(CATEGORICAL_COLUMNS)


def _row(record) -> Dict[str, Any]:
    row = asdict(record)
    for col in CATEGORICAL_COLUMNS:
        if col in row:
            member = getattr(record, col)
            row[col] = None if member is None else member.value
            row[f"{col}_label"] = label(member)
    return row


def _to_frame(rows: List[Dict[str, Any]], columns: Sequence[str],
              int_columns: Sequence[str]) -> pd.DataFrame:
    df = pd.DataFrame(rows, columns=list(columns))
    for col in int_columns:
        if col in df.columns:
            df[col] = pd.array(df[col].tolist(), dtype="Int64")
    return df


def observations_frame(observations: Sequence[Observation]) -> pd.DataFrame:
    """Observation panel, one row per observation."""
    rows = []
    for o in observations:
        row = _row(o)
        row["month"] = o.month_key()
        rows.append(row)
    df = _to_frame(rows, OBSERVATION_COLUMNS, OBSERVATION_INT_COLUMNS)
    df["timestamp"] = pd.to_datetime(df["timestamp"])
    return df


def storm_months_frame(storm_months: Sequence[StormMonth]) -> pd.DataFrame:
    """Storm-month panel, one row per (storm_name, month)."""
    return _to_frame([_row(s) for s in storm_months], STORM_MONTH_COLUMNS, STORM_MONTH_INT_COLUMNS)


def write_csv(df: pd.DataFrame, path: str) -> None:
    df.to_csv(path, index=False, encoding="utf-8")


def write_json(payload: Any, path: str) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=2)


def codebook_payload() -> Dict[str, Dict[str, Dict[str, str]]]:
    """Codebook in a JSON-friendly shape: {column: {code: {letter, label}}}."""
    return {
        col: {str(code): {"letter": letter, "label": text} for code, (letter, text) in table.items()}
        for col, table in codebook().items()
    }


def write_excel(observations: pd.DataFrame, storm_months: pd.DataFrame, path: str) -> None:
    """Write both panels plus a `labels` sheet to one workbook."""
    labels = pd.DataFrame(
        [(col, code, letter, text)
         for col, table in codebook().items()
         for code, (letter, text) in table.items()],
        columns=["column", "code", "letter", "label"],
    )
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        observations.to_excel(writer, sheet_name="observations", index=False)
        storm_months.to_excel(writer, sheet_name="storm_months", index=False)
        labels.to_excel(writer, sheet_name="labels", index=False)
