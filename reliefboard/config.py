"""
Configuration: constants, metric names, environment overrides.
"""
import os
from pathlib import Path

# ---------------------------------------------------------------------------
# Paths / logging -- override with env vars
# ---------------------------------------------------------------------------
DATA_PATH = Path(os.environ.get("RELIEFBOARD_DATA", str(Path("data") / "disasters.csv")))
LOG_LEVEL = os.environ.get("RELIEFBOARD_LOG_LEVEL", "INFO")

# ---------------------------------------------------------------------------
# Selectors
# ---------------------------------------------------------------------------
ALL = "All"
# used when the dataset is empty and has no year extent
DEFAULT_YEAR_RANGE = (2018, 2024)

# ---------------------------------------------------------------------------
# Raw column names delivered by the ingestion side
# ---------------------------------------------------------------------------
REQUIRED_COLUMNS = ("date", "country", "disaster_type")

NUMERIC_COLUMNS = (
    "severity_index",
    "casualties",
    "economic_loss_usd",
    "response_time_hours",
    "aid_amount_usd",
    "response_efficiency_score",
    "recovery_days",
    "latitude",
    "longitude",
)

# ---------------------------------------------------------------------------
# Chart options
# ---------------------------------------------------------------------------
MILLIONS = 1_000_000
MAX_SCATTER_POINTS = 2000
TOP_N = 15

# ranking metric (raw field) -> aggregated measure name
RANKING_METRICS = {
    "response_time_hours": "avg_response_time",
    "casualties": "avg_casualties",
    "economic_loss_usd": "avg_economic_loss",
}
DEFAULT_RANKING_METRIC = "response_time_hours"

SCATTER_METRICS = ("casualties", "economic_loss_usd")
DEFAULT_SCATTER_METRIC = "casualties"
