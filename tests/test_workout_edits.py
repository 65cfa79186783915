import pytest

from ironlog import workout_edits as edits
from ironlog.errors import WorkoutFinishedError
from ironlog.sessions import SessionManager
from ironlog.templates import DEFAULT_EXERCISES


@pytest.fixture
def sessions(store):
    return SessionManager(store, exercises=DEFAULT_EXERCISES)


@pytest.fixture
def workout(sessions):
    return sessions.start_workout("Leg Day")


def test_add_exercise_appends_with_one_empty_set(workout):
    edited = edits.add_exercise(workout, "e6")
    assert [ex.exercise_id for ex in edited.exercises] == ["e2", "e6"]
    new = edited.exercises[-1]
    assert len(new.sets) == 1 and new.sets[0].reps == 0
    assert len(workout.exercises) == 1


def test_add_set_copies_previous_values(workout):
    entry = workout.exercises[0]
    first = entry.sets[0]
    edited = edits.update_set(workout, entry.id, first.id, reps=5, weight=225, completed=True)
    edited = edits.add_set(edited, entry.id)

    sets = edited.find_exercise(entry.id).sets
    assert len(sets) == 2
    assert (sets[1].reps, sets[1].weight, sets[1].completed) == (5, 225, False)
    assert sets[1].id != sets[0].id


def test_add_set_to_exercise_without_sets(workout):
    entry = workout.exercises[0]
    edited = edits.remove_set(workout, entry.id, entry.sets[0].id)
    assert edited.find_exercise(entry.id).sets == []
    edited = edits.add_set(edited, entry.id)
    assert len(edited.find_exercise(entry.id).sets) == 1


def test_update_set_rejects_bad_input(workout):
    entry = workout.exercises[0]
    set_id = entry.sets[0].id
    with pytest.raises(KeyError):
        edits.update_set(workout, entry.id, set_id, tempo=3)
    with pytest.raises(ValueError):
        edits.update_set(workout, entry.id, set_id, weight=-5)
    with pytest.raises(KeyError):
        edits.update_set(workout, entry.id, "nope", reps=1)
    with pytest.raises(KeyError):
        edits.update_set(workout, "nope", set_id, reps=1)


def test_remove_exercise(workout):
    entry = workout.exercises[0]
    assert edits.remove_exercise(workout, entry.id).exercises == []


def test_notes_photo_and_rename(workout):
    entry = workout.exercises[0]
    edited = edits.set_exercise_notes(workout, entry.id, "slow eccentric")
    edited = edits.set_workout_notes(edited, "felt strong")
    edited = edits.set_photo(edited, "file:///photo.jpg")
    edited = edits.rename_workout(edited, " Heavy Legs ")

    assert edited.find_exercise(entry.id).notes == "slow eccentric"
    assert edited.notes == "felt strong"
    assert edited.photo_url == "file:///photo.jpg"
    assert edited.name == "Heavy Legs"
    assert edits.set_photo(edited, None).photo_url is None

    with pytest.raises(ValueError):
        edits.rename_workout(edited, "  ")


def test_finished_workout_is_read_only_except_notes(sessions, workout):
    finished = sessions.finish_workout()
    entry = finished.exercises[0]

    with pytest.raises(WorkoutFinishedError):
        edits.add_exercise(finished, "e1")
    with pytest.raises(WorkoutFinishedError):
        edits.add_set(finished, entry.id)
    with pytest.raises(WorkoutFinishedError):
        edits.update_set(finished, entry.id, entry.sets[0].id, reps=3)
    with pytest.raises(WorkoutFinishedError):
        edits.set_photo(finished, "file:///late.jpg")

    annotated = edits.set_workout_notes(finished, "good session")
    sessions.update_workout(annotated)
    assert sessions.get_workout(finished.id).notes == "good session"
    assert sessions.active_workout_id is None


def test_edits_flow_through_update_workout(sessions, workout):
    entry = workout.exercises[0]
    edited = edits.update_set(workout, entry.id, entry.sets[0].id, reps=8, weight=185)
    sessions.update_workout(edited)
    stored = sessions.active_workout.find_exercise(entry.id).sets[0]
    assert (stored.reps, stored.weight) == (8, 185)
