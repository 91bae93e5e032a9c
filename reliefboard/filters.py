"""
Filter state (year range + type + country selectors)
====================================================

`FilterState` is an immutable selector triple. Setters return a *new*
state, so a caller can keep old snapshots (undo/redo) without copying.

`filtered(events, state)` is the pure filter used by every chart: it never
mutates `events` and returns records in their original order.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Iterable, List, Optional, Sequence, Tuple
from .config import ALL, DEFAULT_YEAR_RANGE
from .models import DisasterEvent

YearRange = Tuple[int, int]

def year_extent(events: Iterable[DisasterEvent]) -> YearRange:
    """(min year, max year) of the dataset, or the default range when empty."""
    years = [e.year for e in events]
    if not years:
        return DEFAULT_YEAR_RANGE
    return (min(years), max(years))

def _clamp(year: int, extent: Optional[YearRange]) -> int:
    if extent is None:
        return year
    return max(extent[0], min(extent[1], year))

@dataclass(frozen=True)
class FilterState:
    """Current selectors. `year_range` is inclusive and always well-ordered."""
    year_range: YearRange = DEFAULT_YEAR_RANGE
    selected_type: str = ALL
    selected_country: str = ALL

    def __post_init__(self) -> None:
        lo, hi = self.year_range
        if lo > hi:
            raise ValueError(f"year range must be ordered, got {self.year_range}")
        object.__setattr__(self, "year_range", (int(lo), int(hi)))

    @classmethod
    def initial(cls, extent: YearRange) -> "FilterState":
        """Natural extent of the dataset with both categorical selectors on "All"."""
        return cls(year_range=tuple(extent))

    # Each setter first clamps into the dataset extent (slider bounds) and
    # then rejects a value that would cross the other end of the range.
    def with_year_min(self, year: int, extent: Optional[YearRange] = None) -> "FilterState":
        year = _clamp(int(year), extent)
        if year > self.year_range[1]:
            return self
        return replace(self, year_range=(year, self.year_range[1]))

    def with_year_max(self, year: int, extent: Optional[YearRange] = None) -> "FilterState":
        year = _clamp(int(year), extent)
        if year < self.year_range[0]:
            return self
        return replace(self, year_range=(self.year_range[0], year))

    def with_year_range(self, y1: int, y2: int, extent: Optional[YearRange] = None) -> "FilterState":
        y1, y2 = _clamp(int(y1), extent), _clamp(int(y2), extent)
        if y1 > y2:
            return self
        return replace(self, year_range=(y1, y2))

    def with_type(self, dtype: str) -> "FilterState":
        return replace(self, selected_type=dtype)

    def with_country(self, country: str) -> "FilterState":
        return replace(self, selected_country=country)

    def matches(self, e: DisasterEvent) -> bool:
        lo, hi = self.year_range
        return (
            lo <= e.year <= hi
            and (self.selected_type == ALL or e.disaster_type == self.selected_type)
            and (self.selected_country == ALL or e.country == self.selected_country)
        )

def filtered(events: Sequence[DisasterEvent], state: FilterState) -> List[DisasterEvent]:
    """Records passing all three selectors (linear scan, order preserved)."""
    return [e for e in events if state.matches(e)]
