"""Configuration for jury assignment and ranking."""

import os

from dotenv import load_dotenv

load_dotenv()


def _env_int(name: str, default: int) -> int:
    """Read an integer env var, failing loudly on junk values."""
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise EnvironmentError(
            f"Invalid value for {name}: {raw!r} (expected an integer). "
            "Check your .env file."
        ) from None


# Default distribution parameters (R and Lmax)
DEFAULT_MIN_RATINGS = _env_int("JURY_MIN_RATINGS", 3)
DEFAULT_MAX_PER_JURY = _env_int("JURY_MAX_PER_JURY", 70)

# Request-level upper bounds accepted from admins
MAX_MIN_RATINGS = _env_int("JURY_MIN_RATINGS_LIMIT", 20)
MAX_PER_JURY_LIMIT = _env_int("JURY_MAX_PER_JURY_LIMIT", 500)

DEFAULT_STRATEGY_NAME = os.environ.get("JURY_STRATEGY", "least-loaded")

# ilp-balanced solver limit (seconds)
ILP_TIME_LIMIT = _env_int("ILP_TIME_LIMIT", 30)

# Jury scores
RATING_MIN = 1
RATING_MAX = 10

# Ranking
AVERAGE_DECIMALS = 1  # matches ROUND(AVG(rating), 1)
TOP_RATED_LIMIT = 10
TOP_RATED_MIN_COUNT = 3

# ---------------------------------------------------------------------------
# Workbook layout (excel_io.py)
# ---------------------------------------------------------------------------

SHEET_FILMS = "Films"
SHEET_JURIES = "Juries"
SHEET_RATINGS = "Ratings"
SHEET_ASSIGNMENTS = "Assignments"
SHEET_JURY_LOAD = "Jury Load"

FILM_COLUMNS = {"id": "ID", "title": "Title", "submitted_at": "Submitted At"}
JURY_COLUMNS = {"id": "ID", "name": "Name", "email": "Email"}
RATING_COLUMNS = {"film_id": "Film ID", "jury_id": "Jury ID", "score": "Score"}
