from types import SimpleNamespace

import pytest

from keys import normalize_event, normalize_key


@pytest.mark.parametrize(
    "key, shift, expected",
    [
        ("J", False, "j"),
        ("G", True, "G"),
        ("Arrow Down", False, "Down"),
        ("Arrow Up", False, "Up"),
        ("Escape", False, "Esc"),
        ("Enter", False, "Enter"),
        ("Tab", False, "Tab"),
        ("Backspace", False, "Backspace"),
        (" ", False, " "),
        ("Space", False, " "),
        ("3", False, "3"),
        ("/", False, "/"),
        ("F5", False, None),
        ("Arrow Left", False, None),
    ],
)
def test_normalize_key(key, shift, expected):
    assert normalize_key(key, shift=shift) == expected


def test_chords_are_dropped():
    assert normalize_key("C", ctrl=True) is None
    assert normalize_key("Q", meta=True) is None


def test_normalize_event_reads_flet_fields():
    event = SimpleNamespace(key="D", shift=True, ctrl=False, alt=False, meta=False)
    assert normalize_event(event) == "D"
