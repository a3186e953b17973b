"""
Derived metrics
===============

Two passes over the decoded observations:

1) Per observation: Saffir-Simpson category from wind (mph), and the
   tropical-storm-force (34 kt) and hurricane-force (64 kt) diameters from
   the quadrant radii.
2) Per storm (grouped by storm_id): exposure time, maximum wind and wind
   standard deviation, copied back onto every row of the storm.

The storm grouping follows the usual dict-of-lists pattern:
`groups.setdefault(key, []).append(...)`.
"""

from __future__ import annotations
import logging
from dataclasses import replace
from typing import Dict, List, Optional, Sequence

import numpy as np

from .codes import Category
from .models import Observation

logger = logging.getLogger(__name__)

# nautical miles -> statute miles
NM_TO_MILES = 1.15078

# Lower bounds (mph), highest first
CATEGORY_THRESHOLDS = (
    (157.0, Category.CAT5),
    (130.0, Category.CAT4),
    (111.0, Category.CAT3),
    (96.0, Category.CAT2),
    (74.0, Category.CAT1),
)


def intensity_category(wind_mph: Optional[float]) -> Optional[Category]:
    """Return the Saffir-Simpson category, or None below 74 mph / no wind."""
    if wind_mph is None:
        return None
    for lower, cat in CATEGORY_THRESHOLDS:
        if wind_mph >= lower:
            return cat
    return None


def force_diameter(ne: Optional[int], se: Optional[int],
                   sw: Optional[int], nw: Optional[int]) -> Optional[float]:
    """Widest extent across opposite quadrants, in statute miles.

    Any missing radius makes the diameter missing.
    """
    if ne is None or se is None or sw is None or nw is None:
        return None
    return max(ne + sw, nw + se) * NM_TO_MILES


def storm_summary(group: Sequence[Observation]) -> Dict[str, Optional[float]]:
    """Exposure time (h), max wind and wind SD for one storm's observations."""
    times = [o.timestamp for o in group]
    exposure = (max(times) - min(times)).total_seconds() / 3600.0

    winds = np.array([o.wind for o in group if o.wind is not None], dtype=float)
    wind_max = float(winds.max()) if winds.size else None
    # sample SD, undefined for a single value
    wind_sd = float(np.std(winds, ddof=1)) if winds.size > 1 else None
    return {"exposure_time": exposure, "wind_max": wind_max, "wind_sd": wind_sd}


def enrich(observations: Sequence[Observation]) -> List[Observation]:
    """Return new observations with category, diameters and storm-level fields."""
    per_obs = [
        replace(
            o,
            category=intensity_category(o.wind),
            ts_diameter=force_diameter(o.r34_ne, o.r34_se, o.r34_sw, o.r34_nw),
            hu_diameter=force_diameter(o.r64_ne, o.r64_se, o.r64_sw, o.r64_nw),
        )
        for o in observations
    ]

    groups: Dict[str, List[Observation]] = {}
    for o in per_obs:
        groups.setdefault(o.storm_id, []).append(o)
    summaries = {sid: storm_summary(g) for sid, g in groups.items()}

    out = [replace(o, **summaries[o.storm_id]) for o in per_obs]
    logger.info("Enriched %d observations across %d storms", len(out), len(groups))
    return out
