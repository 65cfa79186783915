"""Shared constants for the IronLog workout tracker core."""

from __future__ import annotations

from pathlib import Path

# Version written into every backup snapshot
APP_VERSION = "1.0.0"

# Local SQLite file backing the key/value persistence store
DEFAULT_DB_PATH = Path(__file__).resolve().parent.parent / "data" / "ironlog.db"

# Default destination for backup files when no location is chosen
BACKUP_DIR = Path(__file__).resolve().parent.parent / "backups"
BACKUP_EXTENSION = ".gymdata"

# Rest timer duration used before the user picks one (milliseconds)
DEFAULT_REST_DURATION_MS = 60000

# Seconds between timer display refreshes
TICK_INTERVAL = 0.1

UNKNOWN_EXERCISE = "Unknown Exercise"
UNTITLED_WORKOUT = "Untitled Workout"
CUSTOM_WORKOUT = "Custom Workout"

__all__ = [
    "APP_VERSION",
    "DEFAULT_DB_PATH",
    "BACKUP_DIR",
    "BACKUP_EXTENSION",
    "DEFAULT_REST_DURATION_MS",
    "TICK_INTERVAL",
    "UNKNOWN_EXERCISE",
    "UNTITLED_WORKOUT",
    "CUSTOM_WORKOUT",
]
