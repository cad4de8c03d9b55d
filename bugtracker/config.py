"""
Bug Tracker Configuration

Centralized configuration for the bug tracker CLI.
"""

import os

# =============================================================================
# Storage Configuration
# =============================================================================

# Single SQLite file in the working directory (can be overridden by env var)
DB_PATH = os.environ.get("BUGTRACKER_DB", "bugs.db")


# =============================================================================
# Field Limits
# =============================================================================

TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 1000


# =============================================================================
# Logging Configuration
# =============================================================================

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

LOG_LEVEL = os.environ.get("BUGTRACKER_LOG_LEVEL", "WARNING").upper()
if LOG_LEVEL not in LOG_LEVELS:
    # Unknown names fall back to the default
    LOG_LEVEL = "WARNING"
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


if __name__ == "__main__":
    print("Bug Tracker Configuration")
    print("=" * 50)
    print(f"Database: {DB_PATH}")
    print(f"Log level: {LOG_LEVEL}")
    print(f"Title limit: {TITLE_MAX_LENGTH}")
    print(f"Description limit: {DESCRIPTION_MAX_LENGTH}")
