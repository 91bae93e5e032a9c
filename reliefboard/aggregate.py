"""
Aggregation, KPI totals and top-N ranking
=========================================

`aggregate()` groups a record subset by an exact key projection and computes
per-group measures (mean or sum of a numeric field, optionally scaled) plus
a record count. Groups appear in first-seen order, which is the order the
rank selector falls back to on ties.

Empty input gives an empty table; the mean of nothing is defined as 0.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, Dict, Hashable, List, Mapping, Sequence
from .config import MILLIONS, RANKING_METRICS, TOP_N
from .dsa import merge_sort
from .models import DisasterEvent

@dataclass(frozen=True)
class Measure:
    """One aggregated column: `how` is "mean" or "sum" over `getter`, times `scale`."""
    name: str
    getter: Callable[[DisasterEvent], float]
    how: str = "mean"
    scale: float = 1.0

    def __post_init__(self) -> None:
        if self.how not in ("mean", "sum"):
            raise ValueError(f"how must be 'mean' or 'sum', got {self.how!r}")

@dataclass(frozen=True)
class GroupRow:
    """Summary statistics of one categorical key."""
    key: Hashable
    values: Mapping[str, float] = field(default_factory=dict)
    count: int = 0

    def __getitem__(self, name: str) -> float:
        if name == "count":
            return self.count
        return self.values[name]

def mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0

def aggregate(
    events: Sequence[DisasterEvent],
    key: Callable[[DisasterEvent], Hashable],
    measures: Sequence[Measure],
) -> Dict[Hashable, GroupRow]:
    """Group `events` by `key` and compute each measure per group.

    Summation runs in record order, so results are reproducible for a
    fixed input.
    """
    groups: Dict[Hashable, List[DisasterEvent]] = {}
    for e in events:
        groups.setdefault(key(e), []).append(e)

    out: Dict[Hashable, GroupRow] = {}
    for k, members in groups.items():
        values: Dict[str, float] = {}
        for m in measures:
            total = sum(m.getter(e) for e in members)
            if m.how == "mean":
                total = total / len(members)
            values[m.name] = total / m.scale if m.scale != 1.0 else total
        out[k] = GroupRow(key=k, values=values, count=len(members))
    return out

# ---------------- Chart presets ----------------

# `scale` divides: MILLIONS turns US$ into US$ millions
TYPE_SEVERITY_MEASURES = (
    Measure("avg_casualties", lambda e: e.casualties),
    Measure("avg_economic_loss", lambda e: e.economic_loss_usd, scale=MILLIONS),
)

COUNTRY_MEASURES = (
    Measure("avg_response_time", lambda e: e.response_time_hours),
    Measure("avg_casualties", lambda e: e.casualties),
    Measure("avg_economic_loss", lambda e: e.economic_loss_usd, scale=MILLIONS),
)

def by_type(events: Sequence[DisasterEvent]) -> List[GroupRow]:
    """Severity per disaster type, sorted by mean casualties (descending)."""
    groups = aggregate(events, lambda e: e.disaster_type, TYPE_SEVERITY_MEASURES)
    return merge_sort(list(groups.values()), key=lambda g: g["avg_casualties"], reverse=True)

def by_country(events: Sequence[DisasterEvent]) -> Dict[Hashable, GroupRow]:
    return aggregate(events, lambda e: e.country, COUNTRY_MEASURES)

def rank(groups: Mapping[Hashable, GroupRow] | Sequence[GroupRow], metric_key: str, top_n: int = TOP_N) -> List[GroupRow]:
    """Sort groups descending by `metric_key` and keep the first `top_n`.

    Ties keep aggregator emission order. The direction is never inverted,
    even for metrics where lower is better.
    """
    if top_n < 0:
        raise ValueError("top_n must be >= 0")
    rows = list(groups.values()) if isinstance(groups, Mapping) else list(groups)
    return merge_sort(rows, key=lambda g: g[metric_key], reverse=True)[:top_n]

def rank_countries(events: Sequence[DisasterEvent], metric: str, top_n: int = TOP_N) -> List[GroupRow]:
    """Country ranking for a raw metric name (e.g. "response_time_hours")."""
    if metric not in RANKING_METRICS:
        raise ValueError(f"metric must be one of: {', '.join(RANKING_METRICS)}")
    return rank(by_country(events), RANKING_METRICS[metric], top_n)

# ---------------- KPI totals ----------------

@dataclass(frozen=True)
class Kpis:
    total_events: int
    total_casualties: float
    total_economic_loss: float
    avg_response_time: float

def kpis(events: Sequence[DisasterEvent]) -> Kpis:
    return Kpis(
        total_events=len(events),
        total_casualties=sum(e.casualties for e in events),
        total_economic_loss=sum(e.economic_loss_usd for e in events),
        avg_response_time=mean([e.response_time_hours for e in events]),
    )
