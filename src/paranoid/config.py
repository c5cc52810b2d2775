"""
Soft Delete Configuration

Process-wide defaults read from the environment at import time.
"""

import os
from datetime import datetime, timezone

DEFAULT_DELETE_COLUMN = os.getenv("PARANOID_DELETE_COLUMN", "deleted_at")
AUTOCOMMIT = os.getenv("PARANOID_AUTOCOMMIT", "true").lower() in ("1", "true", "yes")

# Execution option that bypasses the default scope for a single statement
INCLUDE_DELETED_OPTION = "include_deleted"


def utcnow() -> datetime:
    """Timestamp written into the deletion marker"""
    return datetime.now(timezone.utc)
