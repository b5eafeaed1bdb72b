"""
Centralized configuration for the Salary Compass backend.

Single source of truth for:
  - Reference database path and connection management
  - Location-resolution and compensation constants
  - Logging configuration
"""

import logging
import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path

# ─── Database ────────────────────────────────────────────────────────────────

DB_PATH = Path(os.environ.get("SALARY_ENGINE_DB", Path(__file__).parent / "salary_compass.db"))

DATA_DIR = Path(__file__).parent / "data"


@contextmanager
def get_db():
    """
    Context-managed database connection.

    Usage:
        with get_db() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT ...")

    The connection is automatically closed when the block exits,
    even if an exception occurs.
    """
    conn = sqlite3.connect(DB_PATH)
    conn.row_factory = sqlite3.Row
    try:
        yield conn
    finally:
        conn.close()


# ─── Location Resolution Constants ───────────────────────────────────────────

# Lowest confidence a resolution can carry after validation penalties
MIN_CONFIDENCE = 0.05

# Sentinels for locations that cannot be pinned to a city
REMOTE_CITY = "Remote"
GLOBAL_COUNTRY = "Global"
REMOTE_SENTINEL_COUNTRIES = (GLOBAL_COUNTRY, REMOTE_CITY)

# Country used when a remote job has no location at all
DEFAULT_REMOTE_COUNTRY = "United States"

MAX_ALTERNATIVES = 5


# ─── Compensation Constants ──────────────────────────────────────────────────

REFERENCE_CURRENCY = "USD"

# Cost-of-living index of the global reference location
BASELINE_COST_INDEX = 100.0

# Annual net spend of one adult living comfortably at index 100
BASELINE_ANNUAL_COST_USD = 40_000.0

# Share of the local baseline that each dependent adds
DEPENDENT_COST_FRACTION = 0.25

# Family multiplier: +30% per extra household member, +40% per dependent
FAMILY_MEMBER_WEIGHT = 0.3
DEPENDENT_WEIGHT = 0.4
MAX_FAMILY_MULTIPLIER = 3.0

# Annual rent for one adult at rent index 100; +25% per extra household member
BASE_ANNUAL_RENT_USD = 30_000.0
HOUSING_MEMBER_WEIGHT = 0.25

MAX_TAX_RATE = 60.0
DEFAULT_TAX_COUNTRY = "United States"

# Working-time conversions used when parsing salary strings
HOURS_PER_YEAR = 2080
DAYS_PER_YEAR = 260
WEEKS_PER_YEAR = 52
MONTHS_PER_YEAR = 12


# ─── Recommendation Thresholds ───────────────────────────────────────────────

LOW_COMFORT_SCORE = 40
HIGH_COMFORT_SCORE = 80
HIGH_COST_INDEX = 120
LOW_COST_INDEX = 60
ABOVE_LOCAL_AVERAGE_PCT = 150
BELOW_LOCAL_AVERAGE_PCT = 80
# Housing above this share of net pay is flagged
MAX_HOUSING_SHARE_PCT = 50


# ─── Logging ─────────────────────────────────────────────────────────────────

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level=logging.INFO):
    """Configure logging for the application."""
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
    )


def get_logger(name: str) -> logging.Logger:
    """Get a named logger instance."""
    return logging.getLogger(name)
