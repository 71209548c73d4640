"""
tracker/config.py
-----------------
Central configuration. Loads environment variables from the .env file
and exposes them as typed constants.
"""

import os

from dotenv import load_dotenv

load_dotenv()


# ── Storage ───────────────────────────────────────────────
STORE_PATH: str = os.getenv("EXPENSE_TRACKER_STORE", os.path.join("data", "store.json"))

# ── Logging ───────────────────────────────────────────────
LOG_LEVEL: str = os.getenv("EXPENSE_TRACKER_LOG_LEVEL", "INFO").upper()

# ── Dashboard ─────────────────────────────────────────────
PAGE_SIZE: int = int(os.getenv("EXPENSE_TRACKER_PAGE_SIZE", "10"))
EXPORT_FILENAME: str = "expense-data.csv"
