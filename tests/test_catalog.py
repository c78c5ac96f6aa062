import pytest

from room_logic.catalog import (
    HOTSPOTS,
    ROOMS,
    CatalogError,
    Clue,
    Hotspot,
    Item,
    RoomDefinition,
    activate_hotspot,
    find_hotspot,
    validate_catalog,
)
from room_logic.session import GameSession, Phase


def test_builtin_catalog_is_valid():
    validate_catalog(ROOMS, HOTSPOTS)


def test_builtin_rooms():
    assert [r.name for r in ROOMS] == ["The Study", "The Laboratory", "The Vault"]
    assert [r.time_limit for r in ROOMS] == [300, 420, 600]
    assert [r.code for r in ROOMS] == ["1847", "SCIENCE", "ESCAPE"]


def test_rooms_are_immutable():
    with pytest.raises(AttributeError):
        ROOMS[0].code = "0000"


def _room(**overrides):
    fields = dict(id=0, name="Room", description="", time_limit=10, required_items=("a",), code="x")
    fields.update(overrides)
    return RoomDefinition(**fields)


A = Hotspot("shelf", "Shelf", item=Item("a", "A"))


@pytest.mark.parametrize(
    "rooms, hotspots, message",
    [
        ((), {}, "empty"),
        ((_room(id=1),), {1: (A,)}, "expected 0"),
        ((_room(time_limit=0),), {0: (A,)}, "time limit"),
        ((_room(code=""),), {0: (A,)}, "unlock code"),
        ((_room(required_items=("a", "a")),), {0: (A,)}, "twice"),
        ((_room(),), {0: (A,), 3: ()}, "unknown room index 3"),
        ((_room(),), {0: (A, Hotspot("shelf", "Again", clue=Clue("c", "c")))}, "duplicate hotspot"),
        ((_room(),), {0: (A, Hotspot("desk", "Desk", clue=Clue("a", "clue")))}, "duplicate item/clue"),
        ((_room(),), {0: (Hotspot("empty", "Nothing"),)}, "exactly one"),
        ((_room(),), {0: (Hotspot("desk", "Desk", clue=Clue("a", "clue")),)}, "cannot be found"),
    ],
)
def test_validate_catalog_rejects(rooms, hotspots, message):
    with pytest.raises(CatalogError, match=message):
        validate_catalog(rooms, hotspots)


def test_original_duplicate_formula_is_rejected():
    lab = _room(required_items=("formula",))
    spots = {0: (
        Hotspot("whiteboard", "Click the whiteboard", clue=Clue("formula", "H2SO4 + NaCl = SCIENCE")),
        Hotspot("cabinet", "Click the cabinet", item=Item("formula", "Formula Notes")),
    )}
    with pytest.raises(CatalogError, match="formula"):
        validate_catalog((lab,), spots)


def test_find_hotspot():
    assert find_hotspot(HOTSPOTS, 0, "desk").clue.id == "desk-note"
    assert find_hotspot(HOTSPOTS, 1, "desk") is None
    assert find_hotspot(HOTSPOTS, 9, "desk") is None


def test_activate_hotspot_uses_current_room():
    s = GameSession()
    s.start()
    assert activate_hotspot(s, "bookshelf")
    assert activate_hotspot(s, "desk")
    assert not activate_hotspot(s, "cabinet")
    assert [i.id for i in s.inventory] == ["key"]
    assert [c.id for c in s.clues] == ["desk-note"]


def test_hotspots_can_clear_every_room():
    s = GameSession()
    s.start()
    for room in ROOMS:
        for spot in HOTSPOTS[room.id]:
            activate_hotspot(s, spot.id)
        s.attempt_escape()
        assert s.awaiting_code
        s.submit_code(room.code.lower())
    assert s.phase is Phase.WON
    assert s.time_remaining == 600
