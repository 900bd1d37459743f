"""
errors.py

PURPOSE: Exception hierarchy shared across the engine, sessions and players.
DEPENDENCIES: pydantic (for validation error details)

ARCHITECTURE NOTES:
Only defects and malformed input are raised. Unrecognized actions and
resource shortfalls are expected outcomes and are reported through the
narrative text instead.
"""

from typing import Any


class PlaytestError(Exception):
    """Base class for all playtest errors."""


class ActionValidationError(PlaytestError):
    """An action payload does not match its declared argument shape."""

    def __init__(self, action: str, message: str, errors: list[Any] | None = None):
        super().__init__(f"Invalid arguments for '{action}': {message}")
        self.action = action
        self.errors = errors or []


class SessionStateError(PlaytestError):
    """A session method was called in the wrong lifecycle state."""


class InvalidRoomError(PlaytestError):
    """The world state references a room that does not exist."""

    def __init__(self, room_id: str):
        super().__init__(f"Room not found: {room_id}")
        self.room_id = room_id


class PlayerError(PlaytestError):
    """A player adapter could not produce an action."""
