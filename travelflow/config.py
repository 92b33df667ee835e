"""Runtime configuration read from the environment (and an optional .env file)."""

import os
from datetime import datetime
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

# Base URL of the trips backend (Netlify functions in production)
API_BASE_URL = os.environ.get("TRAVELFLOW_API_URL", "http://localhost:8888/.netlify/functions")

# Bearer token forwarded to the backend on every request
API_TOKEN = os.environ.get("TRAVELFLOW_API_TOKEN")

REQUEST_TIMEOUT = float(os.environ.get("TRAVELFLOW_REQUEST_TIMEOUT", "15"))

# SQLite file holding session-scoped cache entries
SESSION_DB_PATH = Path(
    os.environ.get("TRAVELFLOW_SESSION_DB", Path(__file__).parent.parent / "travelflow_session.db")
)

SESSION_TTL = int(os.environ.get("TRAVELFLOW_SESSION_TTL", str(24 * 60 * 60)))  # 24 hours in seconds

DEFAULT_LANG = os.environ.get("TRAVELFLOW_LANG", "en")

# Overrides "today" for manual testing of the dashboard (YYYY-MM-DD)
TEST_DATE = os.environ.get("TRAVELFLOW_TEST_DATE")


def get_now(test_date: Optional[str] = None) -> datetime:
    """Return the current local time, or midnight of the test date override if set."""
    override = test_date or TEST_DATE
    if override:
        try:
            return datetime.strptime(override, "%Y-%m-%d")
        except ValueError:
            print(f"[CONFIG] Ignoring invalid test date: {override}")
    return datetime.now()
