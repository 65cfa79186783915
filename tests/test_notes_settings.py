import pytest

from ironlog import settings
from ironlog.notes import NotesJournal
from ironlog.storage import NOTES_KEY


def test_notes_are_prepended_and_persisted(store, clock):
    journal = NotesJournal(store)
    first = journal.add_note("Warm up longer")
    clock.advance(1000)
    second = journal.add_note("Try belt on squats")

    assert [n.id for n in journal.notes] == [second.id, first.id]
    assert [n["text"] for n in store.get(NOTES_KEY)] == [
        "Try belt on squats",
        "Warm up longer",
    ]


def test_update_note_keeps_date(store, clock):
    journal = NotesJournal(store)
    note = journal.add_note("draft")
    clock.advance(60000)
    updated = journal.update_note(note.id, "final")
    assert updated.text == "final"
    assert updated.date == note.date

    with pytest.raises(KeyError):
        journal.update_note("missing", "x")
    with pytest.raises(ValueError):
        journal.add_note("  ")


def test_delete_note(store):
    journal = NotesJournal(store)
    note = journal.add_note("temp")
    journal.delete_note(note.id)
    assert journal.notes == []
    assert store.get(NOTES_KEY) == []


def test_unit_system_settings(store):
    assert settings.get_unit_system(store) == "lb"
    settings.set_unit_system(store, "kg")
    assert settings.get_unit_system(store) == "kg"
    assert settings.toggle_unit_system(store) == "lb"
    with pytest.raises(ValueError):
        settings.set_unit_system(store, "stone")
