"""
Indices (precomputed lookup tables)
===================================

Built once per loaded dataset (never on a filter change), the indices map
values to sorted lists of event IDs:

- `by_country["Chile"]` gives a sorted list of row IDs for Chile.
- `year_to_ids[2021]` gives IDs for all events in 2021.

They also provide the dropdown values and the year extent, which must come
from the *full* dataset rather than the filtered subset.

Why sorted lists?
- Sorted ID lists allow fast intersections using the two-pointer technique,
  and mapping sorted IDs back to events preserves the original record order.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List
from bisect import bisect_left, bisect_right
from .config import ALL, DEFAULT_YEAR_RANGE
from .dsa import intersect_sorted
from .filters import FilterState, YearRange
from .models import DisasterEvent

@dataclass
class Indices:
    """Container of precomputed indices for fast filtering."""
    by_country: Dict[str, List[int]]
    by_type: Dict[str, List[int]]
    year_to_ids: Dict[int, List[int]]
    years_sorted: List[int]

    @property
    def year_extent(self) -> YearRange:
        if not self.years_sorted:
            return DEFAULT_YEAR_RANGE
        return (self.years_sorted[0], self.years_sorted[-1])

    def type_options(self) -> List[str]:
        """Disaster types sorted ascending, with "All" first."""
        if not self.by_type:
            return []
        return [ALL] + sorted(self.by_type)

    def country_options(self) -> List[str]:
        """Countries sorted ascending, with "All" first."""
        if not self.by_country:
            return []
        return [ALL] + sorted(self.by_country)

def build_indices(events: List[DisasterEvent]) -> Indices:
    """Build indices from the loaded dataset.

    Returns:
        Indices object containing maps like by_country, by_type, year_to_ids.
    """
    by_country: Dict[str, List[int]] = {}
    by_type: Dict[str, List[int]] = {}
    year_to_ids: Dict[int, List[int]] = {}

    for e in events:
        by_country.setdefault(e.country, []).append(e.event_id)
        by_type.setdefault(e.disaster_type, []).append(e.event_id)
        year_to_ids.setdefault(e.year, []).append(e.event_id)

    for d in (by_country, by_type, year_to_ids):
        for k in d:
            d[k].sort()

    years_sorted = sorted(year_to_ids.keys())
    return Indices(by_country=by_country, by_type=by_type, year_to_ids=year_to_ids, years_sorted=years_sorted)

def year_range_ids(idx: Indices, y1: int, y2: int) -> List[int]:
    """Return sorted event IDs with year in [y1, y2].

    We use binary search on `years_sorted` and then merge the ID lists.
    """
    # Find the slice of years that fall inside the range
    lo = bisect_left(idx.years_sorted, y1)
    hi = bisect_right(idx.years_sorted, y2)
    out: List[int] = []
    for y in idx.years_sorted[lo:hi]:
        out.extend(idx.year_to_ids.get(y, []))
    out.sort()
    return out

def filter_ids(idx: Indices, state: FilterState) -> List[int]:
    """Index-backed equivalent of `filters.filtered`, returning sorted IDs."""
    ids = year_range_ids(idx, *state.year_range)
    if state.selected_type != ALL:
        ids = intersect_sorted(ids, idx.by_type.get(state.selected_type, []))
    if state.selected_country != ALL:
        ids = intersect_sorted(ids, idx.by_country.get(state.selected_country, []))
    return ids
