"""
Dashboard engine
================

This is the heart of the project. The engine is a small in-memory
"dashboard session":

1) Load dataset -> list of DisasterEvent records (immutable, shared read-only)
2) Build indices -> dropdown values, year extent, fast filters
3) Maintain the current selectors (FilterState) and chart options
4) Recompute per-chart tables from the filtered subset on demand

Every view method returns a fresh table; nothing is cached between calls,
so a changed selector can never leave a stale chart behind.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Dict, FrozenSet, List, Optional, Tuple
import csv, json, time
from .aggregate import GroupRow, Kpis, by_type, kpis, rank_countries
from .config import (
    ALL, DEFAULT_RANKING_METRIC, DEFAULT_SCATTER_METRIC, MAX_SCATTER_POINTS,
    MILLIONS, RANKING_METRICS, SCATTER_METRICS, TOP_N,
)
from .dsa import systematic_sample
from .filters import FilterState, filtered
from .indices import Indices, build_indices, filter_ids
from .models import DisasterEvent, FIELD_NAMES
from .stack import StackTable, build_stack

@dataclass(frozen=True)
class ChartOptions:
    ranking_metric: str = DEFAULT_RANKING_METRIC
    scatter_metric: str = DEFAULT_SCATTER_METRIC
    hidden_types: FrozenSet[str] = frozenset()

@dataclass(frozen=True)
class ScatterView:
    """Sampled points for the response-time vs impact scatter.

    Axis maxima come from the full filtered subset, not the sample.
    """
    points: List[DisasterEvent]
    x: List[float]
    y: List[float]
    y_metric: str
    total: int
    x_max: float
    y_max: float

    @property
    def shown(self) -> int:
        return len(self.points)

    @property
    def is_sampled(self) -> bool:
        return self.shown < self.total

def scatter_y(e: DisasterEvent, metric: str) -> float:
    """Y value for the scatter: casualties, or economic loss in US$ millions."""
    if metric == "casualties":
        return e.casualties
    return e.economic_loss_usd / MILLIONS

@dataclass
class Dashboard:
    """Dashboard session over one loaded dataset.

    The engine stores:
    - events: all DisasterEvent records
    - idx: precomputed indices (rebuilt only when the dataset changes)
    - state: current selectors
    - options: per-chart options (ranking metric, scatter Y, hidden types)
    """
    events: List[DisasterEvent]
    idx: Indices
    dataset_path: Optional[str] = None
    # Stores CLI commands (for reproducibility in reports)
    command_log: List[str] = field(default_factory=list)
    state: FilterState = field(init=False)
    options: ChartOptions = field(init=False, default_factory=ChartOptions)

    # Stacks for undo/redo (store FilterState snapshots)
    _undo: List[FilterState] = field(default_factory=list, init=False)
    _redo: List[FilterState] = field(default_factory=list, init=False)

    def __post_init__(self) -> None:
        # current() maps index IDs back by list position
        if any(e.event_id != i for i, e in enumerate(self.events)):
            raise ValueError("event_id must equal list position; use Dashboard.from_events to renumber")
        self.state = FilterState.initial(self.idx.year_extent)

    @classmethod
    def from_events(cls, events: List[DisasterEvent], dataset_path: Optional[str] = None) -> "Dashboard":
        """Build a session over any event list, renumbering IDs to list positions."""
        events = [e if e.event_id == i else replace(e, event_id=i) for i, e in enumerate(events)]
        return cls(events=events, idx=build_indices(events), dataset_path=dataset_path)

    # ---------------- History (Stacks) ----------------
    def _set_state(self, new: FilterState) -> None:
        if new == self.state:
            return
        self._undo.append(self.state)
        self._redo.clear()
        self.state = new

    def undo(self) -> bool:
        if not self._undo:
            return False
        self._redo.append(self.state)
        self.state = self._undo.pop()
        return True

    def redo(self) -> bool:
        if not self._redo:
            return False
        self._undo.append(self.state)
        self.state = self._redo.pop()
        return True

    # ---------------- Selectors ----------------
    @property
    def year_extent(self) -> Tuple[int, int]:
        return self.idx.year_extent

    def set_year_min(self, year: int) -> None:
        self._set_state(self.state.with_year_min(year, self.year_extent))

    def set_year_max(self, year: int) -> None:
        self._set_state(self.state.with_year_max(year, self.year_extent))

    def set_year_range(self, y1: int, y2: int) -> None:
        self._set_state(self.state.with_year_range(y1, y2, self.year_extent))

    def set_type(self, dtype: str) -> None:
        if dtype != ALL and dtype not in self.idx.by_type:
            raise ValueError(f"Unknown disaster type: {dtype!r}")
        self._set_state(self.state.with_type(dtype))

    def set_country(self, country: str) -> None:
        if country != ALL and country not in self.idx.by_country:
            raise ValueError(f"Unknown country: {country!r}")
        self._set_state(self.state.with_country(country))

    def reset(self) -> None:
        """Restore the natural year extent, "All"/"All" and default chart options."""
        self._set_state(FilterState.initial(self.year_extent))
        self.options = ChartOptions()

    # ---------------- Chart options ----------------
    def set_ranking_metric(self, metric: str) -> None:
        if metric not in RANKING_METRICS:
            raise ValueError(f"ranking metric must be one of: {', '.join(RANKING_METRICS)}")
        self.options = ChartOptions(metric, self.options.scatter_metric, self.options.hidden_types)

    def set_scatter_metric(self, metric: str) -> None:
        if metric not in SCATTER_METRICS:
            raise ValueError(f"scatter metric must be one of: {', '.join(SCATTER_METRICS)}")
        self.options = ChartOptions(self.options.ranking_metric, metric, self.options.hidden_types)

    def toggle_type(self, dtype: str) -> bool:
        """Show/hide one layer of the time trend. Returns True if it is now hidden."""
        if dtype not in self.idx.by_type:
            raise ValueError(f"Unknown disaster type: {dtype!r}")
        hidden = set(self.options.hidden_types)
        if dtype in hidden:
            hidden.discard(dtype)
        else:
            hidden.add(dtype)
        self.options = ChartOptions(self.options.ranking_metric, self.options.scatter_metric, frozenset(hidden))
        return dtype in hidden

    # ---------------- Views ----------------
    def current(self) -> List[DisasterEvent]:
        """Filtered subset for the current selectors (index-backed, original order)."""
        return [self.events[i] for i in filter_ids(self.idx, self.state)]

    def kpis(self) -> Kpis:
        return kpis(self.current())

    def type_severity(self) -> List[GroupRow]:
        return by_type(self.current())

    def country_ranking(self, top_n: int = TOP_N) -> List[GroupRow]:
        return rank_countries(self.current(), self.options.ranking_metric, top_n)

    def time_trend(self) -> StackTable:
        return build_stack(self.current(), hidden=self.options.hidden_types)

    def scatter(self, max_points: int = MAX_SCATTER_POINTS) -> ScatterView:
        data = self.current()
        metric = self.options.scatter_metric
        points = systematic_sample(data, max_points)
        return ScatterView(
            points=points,
            x=[e.response_time_hours for e in points],
            y=[scatter_y(e, metric) for e in points],
            y_metric=metric,
            total=len(data),
            x_max=max((e.response_time_hours for e in data), default=0.0),
            y_max=max((scatter_y(e, metric) for e in data), default=0.0),
        )

    # ---------------- Export ----------------
    def export_csv(self, path: str) -> None:
        rows = self.current()
        with open(path, "w", newline="", encoding="utf-8") as f:
            w = csv.DictWriter(f, fieldnames=FIELD_NAMES)
            w.writeheader()
            for e in rows:
                w.writerow(e.to_dict())

    def export_json(self, path: str) -> None:
        """Export the current selection to a JSON file (list of objects)."""
        payload = [e.to_dict() for e in self.current()]
        with open(path, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=2)

    def bench(self, rounds: int = 30) -> Dict[str, float]:
        """Time the linear-scan filter against the index-backed one."""
        t0 = time.perf_counter()
        for _ in range(rounds): filtered(self.events, self.state)
        t1 = time.perf_counter()
        for _ in range(rounds): filter_ids(self.idx, self.state)
        t2 = time.perf_counter()
        return {"naive_ms": (t1-t0)*1000/rounds, "indexed_ms": (t2-t1)*1000/rounds}
