"""Application state container passed to the UI layer.

:class:`AppState` loads everything from the key/value store once at startup,
repairing stored records through :mod:`ironlog.normalize`, and hands out the
mutator objects that keep the store in sync.  There is no module-level state;
callers create one ``AppState`` and pass it around.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable

from ironlog import BACKUP_DIR, DEFAULT_DB_PATH
from ironlog import backup
from ironlog import settings as app_settings
from ironlog.errors import BackupValidationError
from ironlog.models import Workout
from ironlog.normalize import (
    normalize_exercise,
    normalize_note,
    normalize_presets,
    normalize_timer,
    normalize_workout,
)
from ironlog.notes import NotesJournal
from ironlog.sessions import SessionManager
from ironlog.storage import (
    EXERCISES_KEY,
    NOTES_KEY,
    TIMER_KEY,
    TIMER_PRESETS_KEY,
    WORKOUTS_KEY,
    KeyValueStore,
)
from ironlog.templates import DEFAULT_EXERCISES
from ironlog.timer import DEFAULT_PRESETS, TimerEngine


def _load_list(store: KeyValueStore, key: str, normalize, default: list) -> list:
    raw = store.get(key)
    if not isinstance(raw, list):
        return list(default)
    return [item for item in map(normalize, raw) if item is not None]


def _normalize_stored_workout(raw: Any) -> Workout | None:
    """Normalise a stored workout, skipping entries that are not objects."""

    if not isinstance(raw, (dict, Workout)):
        return None
    return normalize_workout(raw)


def _recover_active(workouts: list[Workout]) -> str | None:
    """Return the id of the most recent in-progress workout, if any."""

    for workout in workouts:
        if not workout.is_finished:
            return workout.id
    return None


class AppState:
    """Everything the UI needs, reachable from one object."""

    def __init__(
        self,
        store: KeyValueStore,
        sessions: SessionManager,
        timer: TimerEngine,
        journal: NotesJournal,
        unit_system: str = app_settings.DEFAULT_UNIT_SYSTEM,
    ) -> None:
        self.store = store
        self.sessions = sessions
        self.timer = timer
        self.journal = journal
        self.unit_system = unit_system

    @classmethod
    def load(cls, store: KeyValueStore | None = None) -> "AppState":
        """Read every key from ``store`` and build the state.

        Missing keys fall back to the built-in defaults.  The active workout
        pointer is restored to the newest in-progress workout so a restart
        does not leave an in-progress workout without an owner.
        """

        store = store or KeyValueStore(DEFAULT_DB_PATH)
        workouts = _load_list(store, WORKOUTS_KEY, _normalize_stored_workout, [])
        exercises = _load_list(store, EXERCISES_KEY, normalize_exercise, DEFAULT_EXERCISES)
        notes = _load_list(store, NOTES_KEY, normalize_note, [])
        raw_presets = store.get(TIMER_PRESETS_KEY)
        presets = (
            normalize_presets(raw_presets)
            if isinstance(raw_presets, list)
            else list(DEFAULT_PRESETS)
        )
        return cls(
            store=store,
            sessions=SessionManager(
                store,
                workouts=workouts,
                exercises=exercises,
                active_workout_id=_recover_active(workouts),
            ),
            timer=TimerEngine(
                store, timer=normalize_timer(store.get(TIMER_KEY)), presets=presets
            ),
            journal=NotesJournal(store, notes),
            unit_system=app_settings.get_unit_system(store),
        )

    # ------------------------------------------------------------------
    # Preferences
    # ------------------------------------------------------------------

    def toggle_unit_system(self) -> str:
        self.unit_system = app_settings.toggle_unit_system(self.store)
        return self.unit_system

    # ------------------------------------------------------------------
    # Backup
    # ------------------------------------------------------------------

    def snapshot(self, include_photos: bool = True) -> dict:
        return backup.export_snapshot(
            self.sessions.workouts,
            self.sessions.exercises,
            self.journal.notes,
            include_photos,
        )

    def export_backup(self, include_photos: bool = True, dest_dir: Path | None = None) -> Path:
        """Write a backup into ``dest_dir`` (the default backup folder)."""

        dest_dir = Path(dest_dir or BACKUP_DIR)
        dest_dir.mkdir(parents=True, exist_ok=True)
        return backup.write_backup(self.snapshot(include_photos), dest_dir)

    def export_backup_to(
        self,
        choose_destination: Callable[[], Path | str | None],
        include_photos: bool = True,
    ) -> Path:
        """Write a backup to a user-chosen folder.

        Raises :class:`~ironlog.errors.ExportCancelled` if the user backs
        out of the chooser.
        """

        return backup.export_to(self.snapshot(include_photos), choose_destination)

    def import_backup(self, source: Path | str | dict[str, Any]) -> dict:
        """Replace workouts, exercises and notes with a backup's contents.

        ``source`` is a path to a backup file or an already decoded
        document.  Nothing changes unless the whole document is valid.
        """

        try:
            if isinstance(source, dict):
                data = backup.import_snapshot(source)
            else:
                data = backup.read_backup(Path(source))
        except BackupValidationError:
            logging.exception("Import failed validation")
            raise

        self.store.set_many(
            {
                WORKOUTS_KEY: [w.to_dict() for w in data["workouts"]],
                EXERCISES_KEY: [e.to_dict() for e in data["exercises"]],
                NOTES_KEY: [n.to_dict() for n in data["notes"]],
            }
        )
        self.sessions.replace_all(data["workouts"], data["exercises"], persist=False)
        self.journal.replace_all(data["notes"], persist=False)
        if self.sessions.active_workout_id is None:
            self.sessions.active_workout_id = _recover_active(self.sessions.workouts)
        logging.info(
            "Imported %d workouts, %d exercises, %d notes",
            len(data["workouts"]),
            len(data["exercises"]),
            len(data["notes"]),
        )
        return data

