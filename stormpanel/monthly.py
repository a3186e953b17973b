"""
Monthly aggregator (Observation list -> StormMonth list)
========================================================

Collapses observations to one row per (storm_name, calendar month):

- continuous fields -> mean over non-missing values
- ordinal / storm-level fields -> max

Status codes are numbered by increasing severity, so the max is the most
severe status of the month. The record identifier max follows the same rule
even though its codes carry no severity order.

Aggregation runs on plain integer codes; the enum members are attached
again afterwards with `codes.from_value`.
"""

from __future__ import annotations
import logging
from typing import List, Sequence

import numpy as np
import pandas as pd

from .codes import CATEGORICAL_COLUMNS, from_value
from .models import Observation, StormMonth

logger = logging.getLogger(__name__)

MEAN_FIELDS = ("wind", "latitude", "longitude", "ts_diameter", "hu_diameter", "pressure")
MAX_FIELDS = ("status", "category", "record_identifier", "exposure_time", "wind_max", "wind_sd")
GROUP_KEYS = ["storm_name", "month"]


def _code(member) -> float:
    return np.nan if member is None else float(member.value)


def _value(v) -> float:
    return np.nan if v is None else float(v)


def _frame(observations: Sequence[Observation]) -> pd.DataFrame:
    """Numeric frame of the fields the aggregation needs."""
    rows = []
    for o in observations:
        row = {"storm_name": o.storm_name, "month": o.month_key()}
        for name in MEAN_FIELDS + MAX_FIELDS:
            v = getattr(o, name)
            row[name] = _code(v) if name in CATEGORICAL_COLUMNS else _value(v)
        rows.append(row)
    return pd.DataFrame(rows, columns=GROUP_KEYS + list(MEAN_FIELDS) + list(MAX_FIELDS))


def _opt(v):
    return None if pd.isna(v) else float(v)


def aggregate_monthly(observations: Sequence[Observation]) -> List[StormMonth]:
    """Group by (storm_name, month) and apply the mean/max rules."""
    if not observations:
        return []
    df = _frame(observations)
    rules = {name: "mean" for name in MEAN_FIELDS}
    rules.update({name: "max" for name in MAX_FIELDS})
    grouped = df.groupby(GROUP_KEYS, sort=True)
    agg = grouped.agg(rules)
    agg["n_obs"] = grouped.size()
    agg = agg.reset_index()

    out: List[StormMonth] = []
    for r in agg.itertuples(index=False):
        out.append(StormMonth(
            storm_name=r.storm_name,
            month=r.month,
            n_obs=int(r.n_obs),
            wind=_opt(r.wind),
            latitude=_opt(r.latitude),
            longitude=_opt(r.longitude),
            ts_diameter=_opt(r.ts_diameter),
            hu_diameter=_opt(r.hu_diameter),
            pressure=_opt(r.pressure),
            status=from_value(CATEGORICAL_COLUMNS["status"], r.status),
            category=from_value(CATEGORICAL_COLUMNS["category"], r.category),
            record_identifier=from_value(CATEGORICAL_COLUMNS["record_identifier"], r.record_identifier),
            exposure_time=_opt(r.exposure_time),
            wind_max=_opt(r.wind_max),
            wind_sd=_opt(r.wind_sd),
        ))
    logger.info("Collapsed %d observations into %d storm-months", len(observations), len(out))
    return out
