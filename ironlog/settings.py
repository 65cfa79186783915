"""Helpers for reading and changing user preferences.

Preferences live in the key/value store next to the workout data.  Only the
weight unit is tracked; values are labels and logged weights are never
converted when it changes.
"""

from __future__ import annotations

from ironlog.storage import UNIT_SYSTEM_KEY, KeyValueStore

UNIT_SYSTEMS = ("kg", "lb")
DEFAULT_UNIT_SYSTEM = "lb"


def get_unit_system(store: KeyValueStore) -> str:
    """Return the stored unit, falling back to :data:`DEFAULT_UNIT_SYSTEM`."""

    value = store.get(UNIT_SYSTEM_KEY)
    return value if value in UNIT_SYSTEMS else DEFAULT_UNIT_SYSTEM


def set_unit_system(store: KeyValueStore, unit: str) -> str:
    if unit not in UNIT_SYSTEMS:
        raise ValueError(f"Unknown unit system '{unit}'")
    store.set(UNIT_SYSTEM_KEY, unit)
    return unit


def toggle_unit_system(store: KeyValueStore) -> str:
    """Switch between kilograms and pounds and return the new unit."""

    current = get_unit_system(store)
    return set_unit_system(store, "kg" if current == "lb" else "lb")
