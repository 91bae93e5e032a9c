"""
Data model (DisasterEvent)
=========================

Each valid raw row is converted into a `DisasterEvent` object.
We keep it immutable (`frozen=True`) so that:
- events cannot be accidentally modified after loading, and
- filters/aggregations build new tables instead of editing data.

The derived calendar fields (year, month, year_month) are computed once by
the loader and never recomputed afterwards.
"""

from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Any, Dict

@dataclass(frozen=True)
class DisasterEvent:
    """Immutable record for one disaster/response observation."""
    event_id: int
    date: datetime
    country: str
    disaster_type: str
    severity_index: float
    casualties: float
    economic_loss_usd: float
    response_time_hours: float
    aid_amount_usd: float
    response_efficiency_score: float
    recovery_days: float
    latitude: float
    longitude: float
    # derived from `date`
    year: int
    month: int
    year_month: str

    def to_dict(self) -> Dict[str, Any]:
        """Plain dict with the date as an ISO string (for CSV/JSON export)."""
        d = asdict(self)
        d["date"] = self.date.isoformat()
        return d

FIELD_NAMES = list(DisasterEvent.__dataclass_fields__)
