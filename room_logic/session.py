"""Core game session — room progression state machine, no I/O, no clock."""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable

from room_logic.catalog import ROOMS, Clue, Item, RoomDefinition, check_rooms


class Phase(Enum):
    NOT_STARTED = "not_started"
    PLAYING = "playing"
    WON = "won"
    LOST = "lost"


@dataclass(frozen=True)
class Notification:
    title: str
    body: str
    kind: str = "info"


WRONG_CODE_BODY = "The code is incorrect. Keep searching for clues!"


def format_time(seconds: int) -> str:
    mins, secs = divmod(max(seconds, 0), 60)
    return f"{mins}:{secs:02d}"


class GameSession:
    """Owns all mutable game state for one play-through.

    Driven by player actions and by ``tick()``, which an outside scheduler
    calls once per second. Calls that arrive in the wrong phase are ignored.
    """

    def __init__(self, rooms: Iterable[RoomDefinition] = ROOMS):
        self.rooms = tuple(rooms)
        check_rooms(self.rooms)
        self._notifications: list[Notification] = []
        self._clear()

    def _clear(self):
        self.phase = Phase.NOT_STARTED
        self.current_room_index = 0
        self._inventory: dict[str, Item] = {}
        self._clues: dict[str, Clue] = {}
        self.time_remaining = self.rooms[0].time_limit
        self.awaiting_code = False
        self._notifications.clear()

    # -- observable state --

    @property
    def room_count(self) -> int:
        return len(self.rooms)

    @property
    def current_room(self) -> RoomDefinition:
        return self.rooms[self.current_room_index]

    @property
    def is_last_room(self) -> bool:
        return self.current_room_index == self.room_count - 1

    @property
    def inventory(self) -> tuple[Item, ...]:
        return tuple(self._inventory.values())

    @property
    def clues(self) -> tuple[Clue, ...]:
        return tuple(self._clues.values())

    @property
    def notifications(self) -> tuple[Notification, ...]:
        return tuple(self._notifications)

    def drain_notifications(self) -> list[Notification]:
        """Return pending notifications, oldest first, and clear the queue."""
        pending = list(self._notifications)
        self._notifications.clear()
        return pending

    def missing_items(self) -> list[str]:
        return [i for i in self.current_room.required_items if i not in self._inventory]

    def get_state(self) -> dict:
        return {
            "phase": self.phase.value,
            "room_index": self.current_room_index,
            "room_name": self.current_room.name,
            "room_label": f"Room {self.current_room_index + 1}/{self.room_count}",
            "time_remaining": self.time_remaining,
            "time_display": format_time(self.time_remaining),
            "inventory": list(self._inventory),
            "clues": list(self._clues),
            "awaiting_code": self.awaiting_code,
            "pending_notifications": len(self._notifications),
        }

    # -- lifecycle --

    def start(self):
        self._clear()
        self.phase = Phase.PLAYING

    def reset(self):
        self._clear()

    def tick(self):
        if self.phase is not Phase.PLAYING or self.time_remaining <= 0:
            return
        self.time_remaining -= 1
        if self.time_remaining == 0:
            self.phase = Phase.LOST
            self.awaiting_code = False

    # -- player actions --

    def collect_item(self, item: Item):
        if self.phase is not Phase.PLAYING or item.id in self._inventory:
            return
        self._inventory[item.id] = item
        self._notify("Item Found!", f"You found: {item.name}", "item")

    def discover_clue(self, clue: Clue):
        if self.phase is not Phase.PLAYING or clue.id in self._clues:
            return
        self._clues[clue.id] = replace(clue, found=True)
        self._notify("Clue Discovered!", clue.text, "clue")

    def attempt_escape(self):
        if self.phase is not Phase.PLAYING:
            return
        missing = self.missing_items()
        if missing:
            self._notify("Missing Items", "You need: " + ", ".join(missing), "missing")
            return
        self.awaiting_code = True

    def cancel_code(self):
        if self.phase is not Phase.PLAYING:
            return
        self.awaiting_code = False

    def submit_code(self, text: str):
        if self.phase is not Phase.PLAYING or not self.awaiting_code:
            return
        self.awaiting_code = False

        if text.upper() != self.current_room.code.upper():
            self._notify("Wrong Code", WRONG_CODE_BODY, "wrong_code")
            return

        if self.is_last_room:
            # time_remaining is left as it was
            self.phase = Phase.WON
            return

        self.current_room_index += 1
        self.time_remaining = self.current_room.time_limit
        self._inventory.clear()
        self._clues.clear()
        self._notify("Room Escaped!", f"Moving to {self.current_room.name}...", "escaped")

    def _notify(self, title: str, body: str, kind: str):
        self._notifications.append(Notification(title, body, kind))
