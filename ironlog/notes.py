"""Free-text training journal kept apart from individual workouts."""

from __future__ import annotations

from dataclasses import replace

from ironlog.models import Note
from ironlog.storage import NOTES_KEY, KeyValueStore
from ironlog.utils import new_id, now_iso


class NotesJournal:
    """Ordered journal entries, newest first by construction."""

    def __init__(self, store: KeyValueStore, notes: list[Note] | None = None) -> None:
        self.store = store
        self.notes: list[Note] = list(notes or [])

    def _save(self) -> None:
        self.store.set(NOTES_KEY, [n.to_dict() for n in self.notes])

    def add_note(self, text: str) -> Note:
        if not text.strip():
            raise ValueError("Note text is required")
        note = Note(id=new_id(), text=text, date=now_iso())
        self.notes.insert(0, note)
        self._save()
        return note

    def update_note(self, note_id: str, text: str) -> Note:
        """Replace the text of ``note_id``; the creation date is kept."""

        if not text.strip():
            raise ValueError("Note text is required")
        for idx, note in enumerate(self.notes):
            if note.id == note_id:
                updated = replace(note, text=text)
                self.notes[idx] = updated
                self._save()
                return updated
        raise KeyError(f"Note '{note_id}' not found")

    def delete_note(self, note_id: str) -> None:
        self.notes = [n for n in self.notes if n.id != note_id]
        self._save()

    def replace_all(self, notes: list[Note], *, persist: bool = True) -> None:
        self.notes = list(notes)
        if persist:
            self._save()
