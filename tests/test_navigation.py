import random

import pytest

from models import Package
from navigation import Cursor, PackagesState


def test_cursor_saturates_at_both_ends():
    cursor = Cursor()
    cursor.up()
    assert cursor.pos == 0
    for _ in range(10):
        cursor.down(3)
    assert cursor.pos == 2
    cursor.top()
    assert cursor.pos == 0
    cursor.bottom(3)
    assert cursor.pos == 2


def test_cursor_on_empty_collection_stays_at_zero():
    cursor = Cursor()
    cursor.down(0)
    assert cursor.pos == 0
    cursor.bottom(0)
    assert cursor.pos == 0


@pytest.mark.parametrize("seed", range(5))
def test_cursor_stays_in_range_for_any_sequence(seed):
    rng = random.Random(seed)
    cursor = Cursor()
    count = 5
    for _ in range(300):
        op = rng.choice(["j", "k", "g", "G", "Down", "Up", "shrink", "grow"])
        if op == "shrink":
            count = max(0, count - rng.randint(1, 3))
            cursor.clamp(count)
        elif op == "grow":
            count += rng.randint(1, 3)
        else:
            cursor.move(op, count)
        assert 0 <= cursor.pos <= max(0, count - 1)


def test_move_reports_unknown_keys():
    cursor = Cursor()
    assert cursor.move("j", 3) is True
    assert cursor.move("x", 3) is False
    assert cursor.pos == 1


def test_filter_matching_nothing_gives_empty_list_and_cursor_zero():
    state = PackagesState()
    state.load([Package("firefox", "122.0"), Package("git", "2.43")], 8, None)
    state.cursor.bottom(state.visible_count)

    state.set_filter("zzz")

    assert state.visible() == []
    assert state.cursor.pos == 0


def test_filter_is_case_insensitive_substring():
    state = PackagesState()
    state.load([Package("Firefox", "122.0"), Package("fish", "3.7"), Package("git", "2.43")], 8, None)
    state.set_filter("FI")
    assert [p.name for p in state.visible()] == ["Firefox", "fish"]
