"""Processing thresholds and logging settings for track cleaning.

Speed filtering, dwell detection and investigation point limits are read once
at import. Each setting falls back to the value tuned for ride tracks when its
environment variable (or `.env` entry) is unset or unparseable.
"""

from __future__ import annotations

import importlib
import os


def _env_float(key: str, default: float) -> float:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _env_int(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _env_bool(key: str, default: bool) -> bool:
    value = os.getenv(key)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    return default


# Load .env variables when python-dotenv is available.
_load_dotenv = None
try:
    _dotenv_mod = importlib.import_module("dotenv")
    _load_dotenv = getattr(_dotenv_mod, "load_dotenv", None)
except Exception:
    _load_dotenv = None

if callable(_load_dotenv):
    # Load .env from the current directory or any parent folder.
    _load_dotenv()


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
LOG_LEVEL = os.getenv("RIDETRACK_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"


# ---------------------------------------------------------------------------
# Speed outlier rejection
# ---------------------------------------------------------------------------
# Speeds above mean + SIGMA * stddev are treated as GPS teleports.
SPEED_OUTLIER_SIGMA = _env_float("SPEED_OUTLIER_SIGMA", 3.0)

# Skip the speed filter entirely (CLI default can still be overridden).
SPEED_FILTER_ENABLED = _env_bool("SPEED_FILTER_ENABLED", True)


# ---------------------------------------------------------------------------
# Track normalisation
# ---------------------------------------------------------------------------
# Collinear removal strength used when the caller does not pick one.
# One of "low", "medium", "high".
DEFAULT_COLLINEAR_LEVEL = os.getenv("DEFAULT_COLLINEAR_LEVEL", "medium").lower()

# A span of points is stationary while it stays within this radius of its
# first point for at least STATIONARY_TIME_THRESHOLD_S.
STATIONARY_DISTANCE_THRESHOLD_M = _env_float("STATIONARY_DISTANCE_THRESHOLD_M", 100.0)
STATIONARY_TIME_THRESHOLD_S = _env_float("STATIONARY_TIME_THRESHOLD_S", 10 * 60.0)


# ---------------------------------------------------------------------------
# Investigation point selection
# ---------------------------------------------------------------------------
# Upper bound on the number of points returned.
INVESTIGATION_MAX_POINTS = _env_int("INVESTIGATION_MAX_POINTS", 50)

# Dwell detection used for the stationary heuristic (longer and wider than the
# normalisation defaults; only real stops are worth a visit).
INVESTIGATION_STATIONARY_MIN_DURATION_S = _env_float(
    "INVESTIGATION_STATIONARY_MIN_DURATION_S", 30 * 60.0
)
INVESTIGATION_STATIONARY_MAX_RADIUS_M = _env_float(
    "INVESTIGATION_STATIONARY_MAX_RADIUS_M", 200.0
)

# Elevation peak detection is quadratic; longer tracks are evenly decimated
# down to this many points for that heuristic only.
INVESTIGATION_MAX_PEAK_SCAN_POINTS = _env_int(
    "INVESTIGATION_MAX_PEAK_SCAN_POINTS", 5000
)

# Maximum number of memoised point-pair distances kept per selection run.
DISTANCE_CACHE_MAX_ENTRIES = _env_int("DISTANCE_CACHE_MAX_ENTRIES", 200_000)
