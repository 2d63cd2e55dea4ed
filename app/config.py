# app/config.py
"""
Runtime settings, read once from the environment (a local .env is honoured).
"""

import os
from decimal import Decimal
from zoneinfo import ZoneInfo

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


APP_TIMEZONE = os.getenv("APP_TIMEZONE", "Asia/Kolkata").strip()
TZ = ZoneInfo(APP_TIMEZONE)

DEFAULT_GST_PERCENT = Decimal(os.getenv("DEFAULT_GST_PERCENT", "18").strip())

# Start every new app with the three demo RMs
SEED_MOCK_RMS = _env_bool("SEED_MOCK_RMS", True)

DATA_DIR = os.getenv("DATA_DIR", "data").strip()
RMS_FILE_PATH = os.path.join(DATA_DIR, "rms.csv")
INVOICES_FILE_PATH = os.path.join(DATA_DIR, "invoices.csv")

MOCK_RMS = [
    {
        "name": "John Smith",
        "email": "john.smith@company.com",
        "phone": "+1-555-0123",
        "is_active": True,
    },
    {
        "name": "Sarah Johnson",
        "email": "sarah.johnson@company.com",
        "phone": "+1-555-0124",
        "is_active": True,
    },
    {
        "name": "Michael Brown",
        "email": "michael.brown@company.com",
        "phone": "+1-555-0125",
        "is_active": True,
    },
]
