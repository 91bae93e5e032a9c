"""
Dataset loader (raw rows -> DisasterEvent list)
===============================================

This module turns the raw tabular dataset into `DisasterEvent` objects.

Key ideas:
- Ingestion (`read_rows`) only tokenizes the file into string-keyed rows.
  Any failure there is an `IngestionError` and nothing is returned.
- Normalization (`normalize_rows`) is lenient: unparsable numbers become 0,
  rows without a valid date, country or disaster type are dropped and counted.
- The loader returns a list of immutable records in input order; the
  dataset file is never modified.
"""

from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Union
from datetime import datetime
import logging
import math
import pandas as pd
from .config import NUMERIC_COLUMNS, REQUIRED_COLUMNS
from .models import DisasterEvent

logger = logging.getLogger(__name__)

Row = Mapping[str, object]

class IngestionError(RuntimeError):
    """The dataset could not be delivered at all (missing, unreadable, wrong shape)."""

@dataclass
class NormalizeResult:
    events: List[DisasterEvent]
    dropped: int

    def __len__(self) -> int:
        return len(self.events)

def _to_float(x) -> float:
    """Convert a cell to float, returning 0.0 if missing/invalid."""
    if x is None: return 0.0
    # float() accepts "1_000"; a dataset cell with underscores is not a number
    if isinstance(x, str) and "_" in x: return 0.0
    try: v = float(x)
    except (TypeError, ValueError): return 0.0
    return v if math.isfinite(v) else 0.0

def _to_str(x) -> str:
    if x is None: return ""
    if isinstance(x, float) and math.isnan(x): return ""
    return str(x).strip()

def _parse_dates(values: Sequence[object]) -> List[Optional[datetime]]:
    """Parse a whole column of date strings at once.

    Unparsable values become None. Offsets are converted to UTC and
    dropped so every timestamp is naive.
    """
    parsed = pd.to_datetime(
        pd.Series(list(values), dtype="object"),
        errors="coerce", format="mixed", utc=True,
    ).dt.tz_localize(None)
    return [None if pd.isna(ts) else ts.to_pydatetime() for ts in parsed]

def normalize_rows(rows: Iterable[Row]) -> NormalizeResult:
    """Convert raw rows into valid events (order preserved) plus a dropped count.

    Duplicates are kept as distinct events. Nothing here raises for bad data.
    """
    rows = list(rows)
    dates = _parse_dates([r.get("date") for r in rows])

    events: List[DisasterEvent] = []
    for row, date in zip(rows, dates):
        country = _to_str(row.get("country"))
        dtype = _to_str(row.get("disaster_type"))
        if date is None or not country or not dtype:
            continue
        nums = {c: _to_float(row.get(c)) for c in NUMERIC_COLUMNS}
        events.append(DisasterEvent(
            event_id=len(events),
            date=date,
            country=country,
            disaster_type=dtype,
            year=date.year,
            month=date.month,
            year_month=f"{date.year}-{date.month:02d}",
            **nums,
        ))
    return NormalizeResult(events=events, dropped=len(rows) - len(events))

def read_rows(path: Union[str, Path]) -> List[Dict[str, object]]:
    """Read a CSV or Excel export into string-keyed rows (all values as text)."""
    p = Path(path)
    if not p.is_file():
        raise IngestionError(f"Dataset not found: {p}")

    suffix = p.suffix.lower()
    if suffix not in (".csv", ".xlsx"):
        raise IngestionError(f"Unsupported dataset format {suffix!r} (expected .csv or .xlsx)")
    try:
        if suffix == ".csv":
            df = pd.read_csv(p, dtype=str, keep_default_na=False)
        else:
            df = pd.read_excel(p, dtype=str, keep_default_na=False, engine="openpyxl")
    except Exception as e:
        raise IngestionError(f"Could not read dataset {p}: {e}") from e

    df.rename(columns={c: str(c).strip() for c in df.columns}, inplace=True)
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise IngestionError(f"Dataset {p.name} is missing required columns: {missing}")
    return df.to_dict(orient="records")

def load_dataset(path: Union[str, Path]) -> NormalizeResult:
    """Read + normalize a dataset file. Raises IngestionError on read failure."""
    result = normalize_rows(read_rows(path))
    events = result.events
    logger.info("Loaded %d disaster events (%d rows dropped)", len(events), result.dropped)
    if events:
        years = [e.year for e in events]
        logger.info("Years range: %d-%d", min(years), max(years))
        logger.info("Unique disaster types: %d | unique countries: %d",
                    len({e.disaster_type for e in events}), len({e.country for e in events}))
    return result
