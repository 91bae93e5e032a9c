from __future__ import annotations

from datetime import datetime

import pytest

from reliefboard.models import DisasterEvent


def make_row(**overrides) -> dict:
    row = {
        "date": "2020-03-15",
        "country": "Chile",
        "disaster_type": "Flood",
        "severity_index": "5.5",
        "casualties": "10",
        "economic_loss_usd": "2000000",
        "response_time_hours": "12",
        "aid_amount_usd": "50000",
        "response_efficiency_score": "80",
        "recovery_days": "30",
        "latitude": "-33.4",
        "longitude": "-70.6",
    }
    row.update(overrides)
    return row


def make_event(event_id: int = 0, *, year: int = 2020, month: int = 1, country: str = "Chile",
               disaster_type: str = "Flood", casualties: float = 0.0, economic_loss_usd: float = 0.0,
               response_time_hours: float = 0.0) -> DisasterEvent:
    return DisasterEvent(
        event_id=event_id,
        date=datetime(year, month, 1),
        country=country,
        disaster_type=disaster_type,
        severity_index=0.0,
        casualties=casualties,
        economic_loss_usd=economic_loss_usd,
        response_time_hours=response_time_hours,
        aid_amount_usd=0.0,
        response_efficiency_score=0.0,
        recovery_days=0.0,
        latitude=0.0,
        longitude=0.0,
        year=year,
        month=month,
        year_month=f"{year}-{month:02d}",
    )


@pytest.fixture
def events() -> list[DisasterEvent]:
    specs = [
        (2019, "Chile", "Flood", 2, 1_000_000, 10),
        (2019, "Peru", "Wildfire", 4, 3_000_000, 30),
        (2020, "Chile", "Flood", 6, 5_000_000, 20),
        (2020, "Peru", "Earthquake", 100, 9_000_000, 5),
        (2021, "Japan", "Earthquake", 50, 7_000_000, 8),
        (2022, "Chile", "Wildfire", 0, 0, 40),
    ]
    return [
        make_event(i, year=y, country=c, disaster_type=t, casualties=cas,
                   economic_loss_usd=loss, response_time_hours=rt)
        for i, (y, c, t, cas, loss, rt) in enumerate(specs)
    ]
