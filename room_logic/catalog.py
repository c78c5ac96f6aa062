"""Escape room world definition: rooms, items, clues, and the hotspots that reveal them."""

from dataclasses import dataclass


class CatalogError(ValueError):
    """Raised when room or hotspot data breaks an authoring rule."""


@dataclass(frozen=True)
class Item:
    id: str
    name: str
    description: str = ""


@dataclass(frozen=True)
class Clue:
    id: str
    text: str
    found: bool = False


@dataclass(frozen=True)
class RoomDefinition:
    id: int
    name: str
    description: str
    time_limit: int
    required_items: tuple[str, ...]
    code: str


@dataclass(frozen=True)
class Hotspot:
    """A clickable spot in a room. Yields exactly one of an item or a clue."""

    id: str
    title: str
    item: Item | None = None
    clue: Clue | None = None

    @property
    def target_id(self) -> str:
        return self.item.id if self.item is not None else self.clue.id


ROOMS = (
    RoomDefinition(
        id=0,
        name="The Study",
        description="A mysterious study filled with books and secrets...",
        time_limit=300,
        required_items=("key", "code"),
        code="1847",
    ),
    RoomDefinition(
        id=1,
        name="The Laboratory",
        description="An abandoned laboratory with strange equipment...",
        time_limit=420,
        required_items=("vial", "formula", "keycard"),
        code="SCIENCE",
    ),
    RoomDefinition(
        id=2,
        name="The Vault",
        description="The final challenge - a high-security vault...",
        time_limit=600,
        required_items=("masterkey", "blueprint", "scanner"),
        code="ESCAPE",
    ),
)

# Keyed by room index. Layout and art belong to whoever renders these.
HOTSPOTS = {
    0: (
        Hotspot("bookshelf", "Click the bookshelf",
                item=Item("key", "Old Key", "An ornate brass key")),
        Hotspot("desk", "Click the desk",
                clue=Clue("desk-note", "A note reads: 'The year the library was founded: 1847'")),
        Hotspot("painting", "Click the painting",
                clue=Clue("painting-clue",
                          "Behind the painting: 'When books and time align, the truth you'll find'")),
        Hotspot("fireplace", "Click the fireplace",
                item=Item("code", "Code Fragment", "A piece of paper with numbers")),
    ),
    1: (
        Hotspot("lab-equipment", "Click the lab equipment",
                item=Item("vial", "Chemical Vial", "A vial containing a mysterious liquid")),
        # Clue id must not collide with the "formula" item from the cabinet.
        Hotspot("whiteboard", "Click the whiteboard",
                clue=Clue("whiteboard-formula", "Chemical formula on the board: H2SO4 + NaCl = SCIENCE")),
        Hotspot("computer", "Click the computer",
                item=Item("keycard", "Access Keycard", "A security keycard")),
        Hotspot("cabinet", "Click the cabinet",
                item=Item("formula", "Formula Notes", "Research notes with formulas")),
    ),
    2: (
        Hotspot("security-panel", "Click the security panel",
                item=Item("masterkey", "Master Key", "The ultimate key")),
        Hotspot("control-desk", "Click the control desk",
                item=Item("blueprint", "Vault Blueprint", "Detailed vault schematics")),
        Hotspot("scanner", "Click the scanner",
                item=Item("scanner", "Biometric Scanner", "A portable scanner device")),
        Hotspot("vault-door", "Click the vault door",
                clue=Clue("final-clue", "Final message: 'To ESCAPE, you must believe in yourself'")),
    ),
}


def check_rooms(rooms) -> None:
    """Structural checks on the room sequence alone."""
    if not rooms:
        raise CatalogError("room catalog is empty")
    for index, room in enumerate(rooms):
        if room.id != index:
            raise CatalogError(f"room '{room.name}' has id {room.id}, expected {index}")
        if room.time_limit <= 0:
            raise CatalogError(f"room '{room.name}' has non-positive time limit {room.time_limit}")
        if not room.code:
            raise CatalogError(f"room '{room.name}' has no unlock code")
        if len(set(room.required_items)) != len(room.required_items):
            raise CatalogError(f"room '{room.name}' lists a required item twice")


def validate_catalog(rooms=ROOMS, hotspots=HOTSPOTS) -> None:
    """Raise CatalogError if the rooms and their hotspots break an authoring rule.

    Hotspot ids and the item/clue ids they yield must each be unique within
    a room, and every required item must be obtainable in its room.
    """
    check_rooms(rooms)

    unknown = sorted(set(hotspots) - set(range(len(rooms))))
    if unknown:
        raise CatalogError(f"hotspots defined for unknown room index {unknown[0]}")

    for room in rooms:
        spots = hotspots.get(room.id, ())
        seen_spots: set[str] = set()
        seen_targets: set[str] = set()

        for spot in spots:
            if (spot.item is None) == (spot.clue is None):
                raise CatalogError(
                    f"hotspot '{spot.id}' in '{room.name}' must yield exactly one item or clue"
                )
            if spot.id in seen_spots:
                raise CatalogError(f"duplicate hotspot id '{spot.id}' in '{room.name}'")
            if spot.target_id in seen_targets:
                raise CatalogError(f"duplicate item/clue id '{spot.target_id}' in '{room.name}'")
            seen_spots.add(spot.id)
            seen_targets.add(spot.target_id)

        obtainable = {spot.item.id for spot in spots if spot.item is not None}
        for item_id in room.required_items:
            if item_id not in obtainable:
                raise CatalogError(f"required item '{item_id}' cannot be found in '{room.name}'")


def find_hotspot(hotspots, room_index: int, hotspot_id: str) -> Hotspot | None:
    for spot in hotspots.get(room_index, ()):
        if spot.id == hotspot_id:
            return spot
    return None


def activate_hotspot(session, hotspot_id: str, hotspots=HOTSPOTS) -> bool:
    """Run the discovery bound to a hotspot in the session's current room.

    Returns False when the current room has no such hotspot.
    """
    spot = find_hotspot(hotspots, session.current_room_index, hotspot_id)
    if spot is None:
        return False
    if spot.item is not None:
        session.collect_item(spot.item)
    else:
        session.discover_clue(spot.clue)
    return True
