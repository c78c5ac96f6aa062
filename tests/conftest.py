"""Shared test fixtures."""

import pytest

from room_logic.catalog import Clue, Item, RoomDefinition
from room_logic.session import GameSession

KEY = Item("key", "Old Key", "An ornate brass key")
CODE = Item("code", "Code Fragment", "A piece of paper with numbers")
VIAL = Item("vial", "Chemical Vial")
NOTE = Clue("desk-note", "The year the library was founded: 1847")

TWO_ROOMS = (
    RoomDefinition(0, "Study", "Books.", 5, ("key", "code"), "1847"),
    RoomDefinition(1, "Lab", "Beakers.", 8, ("vial",), "Science"),
)


@pytest.fixture()
def rooms():
    return TWO_ROOMS


@pytest.fixture()
def session() -> GameSession:
    """A started session on the two-room test catalog."""
    s = GameSession(TWO_ROOMS)
    s.start()
    return s


@pytest.fixture()
def in_last_room(session) -> GameSession:
    """Session already moved into the final room."""
    session.collect_item(KEY)
    session.collect_item(CODE)
    session.attempt_escape()
    session.submit_code("1847")
    session.drain_notifications()
    return session
