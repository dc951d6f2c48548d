"""
Runtime configuration read from environment variables.
"""

import os


def _flag(name, default):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Config:
    DATABASE_URL = os.environ.get("BEDRESERVE_DATABASE_URL") or "sqlite:///./bedreserve.db"

    # SQLite busy timeout (seconds) while another connection holds the write lock
    DB_TIMEOUT = float(os.environ.get("BEDRESERVE_DB_TIMEOUT", 30))

    LOG_LEVEL = os.environ.get("BEDRESERVE_LOG_LEVEL", "INFO").upper()

    SEED_DEMO = _flag("BEDRESERVE_SEED_DEMO", True)

    APP_NAME = "Hospital Bed Reservation API"
    APP_VERSION = "0.1.0"


config = Config
