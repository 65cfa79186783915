"""Export and import of the full data set as a ``.gymdata`` snapshot.

A snapshot is a JSON document::

    {"appVersion": "1.0.0", "exportDate": <iso instant>,
     "workouts": [...], "exercises": [...], "globalNotes": [...]}

Import accepts that shape as well as older files whose workouts lack
``status``/``id`` or store set numbers as strings; every workout is repaired
by :func:`ironlog.normalize.normalize_workout`.  A document whose
``workouts`` or ``exercises`` entry is not a list is rejected as a whole.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Iterable

from ironlog import APP_VERSION, BACKUP_EXTENSION
from ironlog.errors import BackupValidationError, ExportCancelled
from ironlog.models import Exercise, Note, Workout
from ironlog.normalize import normalize_exercise, normalize_note, normalize_workout
from ironlog.utils import now_iso


def export_snapshot(
    workouts: Iterable[Workout],
    exercises: Iterable[Exercise],
    notes: Iterable[Note],
    include_photos: bool = True,
) -> dict:
    """Build the snapshot document; photos are left out unless requested."""

    return {
        "appVersion": APP_VERSION,
        "exportDate": now_iso(),
        "workouts": [w.to_dict(include_photo=include_photos) for w in workouts],
        "exercises": [e.to_dict() for e in exercises],
        "globalNotes": [n.to_dict() for n in notes],
    }


def import_snapshot(document: Any) -> dict:
    """Validate and decode ``document``.

    Returns a mapping with ``workouts``, ``exercises`` and ``notes`` lists
    of model objects.  Raises :class:`BackupValidationError` before anything
    is returned if the document is malformed, so callers can apply the
    result all at once or not at all.
    """

    if not isinstance(document, dict):
        raise BackupValidationError("Backup file must contain a JSON object")
    raw_workouts = document.get("workouts")
    raw_exercises = document.get("exercises")
    if not isinstance(raw_workouts, list):
        raise BackupValidationError("Backup file has no 'workouts' list")
    if not isinstance(raw_exercises, list):
        raise BackupValidationError("Backup file has no 'exercises' list")

    workouts = [normalize_workout(w) for w in raw_workouts]
    exercises = [e for e in map(normalize_exercise, raw_exercises) if e is not None]
    if len(exercises) < len(raw_exercises):
        logging.warning(
            "Skipped %d exercise(s) without a name in backup",
            len(raw_exercises) - len(exercises),
        )
    raw_notes = document.get("globalNotes")
    notes = (
        [n for n in map(normalize_note, raw_notes) if n is not None]
        if isinstance(raw_notes, list)
        else []
    )
    if isinstance(raw_notes, list) and len(notes) < len(raw_notes):
        logging.warning(
            "Skipped %d note(s) without text in backup", len(raw_notes) - len(notes)
        )
    return {"workouts": workouts, "exercises": exercises, "notes": notes}


def make_export_name() -> str:
    """Return an auto-generated backup filename.

    The name follows ``ironlog_YYYY_MM_DD_HH__MM__SS.gymdata`` using the
    current local time.
    """

    return datetime.now().strftime("ironlog_%Y_%m_%d_%H__%M__%S") + BACKUP_EXTENSION


def write_backup(document: dict, dest_dir: Path) -> Path:
    """Write ``document`` into ``dest_dir`` and return the file path.

    File-system errors are logged with their stack trace and re-raised so
    the caller can tell the user what went wrong.
    """

    dest = (Path(dest_dir) / make_export_name()).resolve()
    try:
        with dest.open("w", encoding="utf-8") as fh:
            json.dump(document, fh)
    except FileNotFoundError:
        logging.exception("Backup destination not found: %s", dest)
        raise
    except PermissionError:
        logging.exception("Permission denied writing backup to %s", dest)
        raise
    except OSError:
        logging.exception("OS error writing backup to %s", dest)
        raise
    logging.info("Exported backup to %s", dest)
    return dest


def export_to(
    document: dict, choose_destination: Callable[[], Path | str | None]
) -> Path:
    """Write ``document`` to a directory picked by ``choose_destination``.

    The chooser returns ``None`` when the user backs out, which raises
    :class:`ExportCancelled` instead of an error.
    """

    dest_dir = choose_destination()
    if dest_dir is None:
        logging.info("Backup export cancelled by user")
        raise ExportCancelled()
    return write_backup(document, Path(dest_dir))


def read_backup(path: Path) -> dict:
    """Read and decode the backup file at ``path`` without applying it."""

    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as fh:
            document = json.load(fh)
    except FileNotFoundError:
        logging.exception("Backup file not found: %s", path)
        raise
    except PermissionError:
        logging.exception("Permission denied reading backup %s", path)
        raise
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        logging.error("Backup file %s is not valid JSON: %s", path, exc)
        raise BackupValidationError(f"Backup file is not valid JSON: {exc}") from exc
    except OSError:
        logging.exception("OS error reading backup %s", path)
        raise
    return import_snapshot(document)
