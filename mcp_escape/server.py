#!/usr/bin/env python3
"""MCP server for the escape room game."""

import sys
import os
import threading

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from mcp.server.fastmcp import FastMCP
from room_logic.catalog import HOTSPOTS, activate_hotspot, find_hotspot
from room_logic.config import load_settings
from room_logic.logger import Logger
from room_logic.scheduler import TickScheduler
from room_logic.session import GameSession, Phase, format_time

settings = load_settings()
# stdout carries the MCP protocol, so the log goes to stderr
log = Logger(settings.resolve(settings.log_dir) if settings.server_log else None,
             "server", "mcp", stream=sys.stderr)

mcp = FastMCP("Escape Room")
session = GameSession()
lock = threading.Lock()


def _on_tick(s: GameSession):
    if s.phase is Phase.LOST:
        log.log(f"[TIME UP] room {s.current_room_index} ({s.current_room.name})")


scheduler = TickScheduler(session, settings.tick_interval, on_tick=_on_tick, lock=lock)


def _messages() -> str:
    lines = [f"** {n.title} ** {n.body}" for n in session.drain_notifications()]
    return "\n".join(lines)


def _reply(text: str) -> str:
    """Append pending notifications, and stop the clock once play is over."""
    parts = [text, _messages()]
    if session.phase is not Phase.PLAYING:
        scheduler.stop(timeout=0)
    if session.phase is Phase.WON:
        parts.append(
            "*** YOU ESCAPED ALL ROOMS ***\n"
            f"Time remaining: {format_time(session.time_remaining)}"
        )
    elif session.phase is Phase.LOST:
        parts.append("*** TIME'S UP *** You couldn't escape in time. Use reset_game to try again.")
    return "\n\n".join(p for p in parts if p)


def _not_playing() -> str | None:
    if session.phase is Phase.NOT_STARTED:
        return "The game hasn't started. Use start_game."
    if session.phase is not Phase.PLAYING:
        return _reply("The game is over.")
    return None


def _describe_room() -> str:
    room = session.current_room
    spots = HOTSPOTS.get(session.current_room_index, ())
    lines = [
        f"{room.name} (Room {session.current_room_index + 1}/{session.room_count}) "
        f"- {format_time(session.time_remaining)} left",
        room.description,
        "",
        "Things to search:",
    ]
    lines += [f"  {s.id} - {s.title}" for s in spots]
    return "\n".join(lines)


@mcp.tool()
def start_game() -> str:
    """Start a new game in the first room. The countdown begins immediately."""
    with lock:
        scheduler.stop(timeout=0)
        session.start()
        scheduler.start()
        log.log(f"[START] {session.current_room.name}, {session.time_remaining}s")
        return _reply("Game started. Can you solve the puzzles and escape in time?\n\n" + _describe_room())


@mcp.tool()
def reset_game() -> str:
    """Abandon the current game and return to the start screen."""
    with lock:
        scheduler.stop(timeout=0)
        session.reset()
        log.log("[RESET]")
        return "Game reset. Use start_game to play again."


@mcp.tool()
def look() -> str:
    """Describe the current room, the time left, and the spots you can search."""
    with lock:
        return _not_playing() or _reply(_describe_room())


@mcp.tool()
def search(spot: str) -> str:
    """Search a spot in the current room (e.g. 'bookshelf', 'desk'). Use look to list spots."""
    with lock:
        blocked = _not_playing()
        if blocked:
            return blocked
        hotspot = find_hotspot(HOTSPOTS, session.current_room_index, spot.strip().lower())
        if hotspot is None:
            return f"There's no '{spot}' to search here."
        activate_hotspot(session, hotspot.id)
        log.log(f"[SEARCH] {hotspot.id} -> {hotspot.target_id}")
        if not session.notifications:
            return _reply(f"You search the {hotspot.id} again. Nothing new.")
        return _reply("")


@mcp.tool()
def inventory() -> str:
    """List the items you have found in this room."""
    with lock:
        blocked = _not_playing()
        if blocked:
            return blocked
        if not session.inventory:
            return "No items found yet..."
        lines = [f"- {i.name}: {i.description}" for i in session.inventory]
        return f"Inventory ({len(lines)}):\n" + "\n".join(lines)


@mcp.tool()
def clues() -> str:
    """List the clues you have discovered in this room."""
    with lock:
        blocked = _not_playing()
        if blocked:
            return blocked
        if not session.clues:
            return "No clues discovered yet..."
        lines = [f"- {c.text}" for c in session.clues]
        return f"Clues ({len(lines)}):\n" + "\n".join(lines)


@mcp.tool()
def try_escape() -> str:
    """Try the exit. If you hold every required item you'll be asked for the exit code."""
    with lock:
        blocked = _not_playing()
        if blocked:
            return blocked
        session.attempt_escape()
        if session.awaiting_code:
            return _reply("You have all the required items! Enter the code to escape this room (enter_code).")
        return _reply("The exit won't open yet.")


@mcp.tool()
def enter_code(code: str) -> str:
    """Enter the exit code. Only works right after try_escape succeeds. Case-insensitive."""
    with lock:
        blocked = _not_playing()
        if blocked:
            return blocked
        if not session.awaiting_code:
            return "There's no code prompt open. Use try_escape first."
        room = session.current_room
        session.submit_code(code)
        log.log(f"[CODE] {room.name}: {session.phase.value}, room {session.current_room_index}")
        if session.phase is Phase.PLAYING and session.current_room is not room:
            return _reply(_describe_room())
        return _reply("")


@mcp.tool()
def cancel_code() -> str:
    """Close the exit code prompt without entering a code."""
    with lock:
        blocked = _not_playing()
        if blocked:
            return blocked
        session.cancel_code()
        return "You step back from the exit."


@mcp.tool()
def status() -> str:
    """Get current game state: phase, room, time left, items, clues, code prompt."""
    with lock:
        state = session.get_state()
        lines = [
            f"Phase: {state['phase']}",
            f"Room: {state['room_name']} ({state['room_label']})",
            f"Time: {state['time_display']}",
            f"Inventory: {', '.join(state['inventory']) or 'empty'}",
            f"Clues: {', '.join(state['clues']) or 'none'}",
            f"Awaiting code: {state['awaiting_code']}",
        ]
        return "\n".join(lines)


@mcp.tool()
def help() -> str:
    """Show available commands and how to play."""
    return (
        "Escape Room:\n"
        "  - Search spots in each room to find items and clues\n"
        "  - Collect the required items to unlock the exit\n"
        "  - Solve the clues and enter the code to progress\n"
        "  - Beat the timer to escape!\n\n"
        "Tools: start_game, look, search <spot>, inventory, clues, try_escape,\n"
        "       enter_code <code>, cancel_code, status, reset_game"
    )


def main():
    mcp.run()


if __name__ == "__main__":
    main()
