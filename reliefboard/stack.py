"""
Stack builder (year x disaster type -> cumulative bands)
========================================================

Steps:
1) Cross-tabulate record counts by (year, disaster_type).
2) Densify: every year present x every type present, missing cells = 0.
3) Stack the *visible* keys in the caller's order. Hidden keys are removed
   from the key set, so they change the total height instead of leaving a
   zero-height layer.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple
from .models import DisasterEvent

@dataclass(frozen=True)
class Band:
    year: int
    low: int
    high: int

    @property
    def value(self) -> int:
        return self.high - self.low

@dataclass(frozen=True)
class Layer:
    """All bands of one disaster type, one per year."""
    key: str
    bands: Tuple[Band, ...]

@dataclass(frozen=True)
class StackTable:
    years: List[int]
    types: List[str]
    # counts[year][type], dense over years x types
    counts: Dict[int, Dict[str, int]]
    layers: List[Layer]

    @property
    def keys(self) -> List[str]:
        return [layer.key for layer in self.layers]

    def totals(self) -> Dict[int, int]:
        """Visible stacked height per year."""
        if not self.layers:
            return {y: 0 for y in self.years}
        return {b.year: b.high for b in self.layers[-1].bands}

    def max_height(self) -> int:
        return max(self.totals().values(), default=0)

def cross_tab(events: Iterable[DisasterEvent]) -> Dict[int, Dict[str, int]]:
    """Sparse counts: {year: {disaster_type: count}}."""
    out: Dict[int, Dict[str, int]] = {}
    for e in events:
        row = out.setdefault(e.year, {})
        row[e.disaster_type] = row.get(e.disaster_type, 0) + 1
    return out

def build_stack(
    events: Sequence[DisasterEvent],
    keys: Optional[Sequence[str]] = None,
    hidden: Iterable[str] = (),
) -> StackTable:
    """Dense count table plus cumulative bands for the visible keys.

    `keys` defaults to every type present (ascending); `hidden` is removed
    from whichever key order is used. A key with no records stacks as 0.
    """
    sparse = cross_tab(events)
    years = sorted(sparse)
    types = sorted({e.disaster_type for e in events})
    counts = {y: {t: sparse[y].get(t, 0) for t in types} for y in years}

    hidden = set(hidden)
    order = list(keys) if keys is not None else types
    visible = [k for k in order if k not in hidden]

    layers: List[Layer] = []
    base = {y: 0 for y in years}
    for k in visible:
        bands = []
        for y in years:
            top = base[y] + counts[y].get(k, 0)
            bands.append(Band(year=y, low=base[y], high=top))
            base[y] = top
        layers.append(Layer(key=k, bands=tuple(bands)))
    return StackTable(years=years, types=types, counts=counts, layers=layers)
