"""
scripted.py

PURPOSE: Replays a fixed list of actions, for regression play-tests and demos.
DEPENDENCIES: models

ARCHITECTURE NOTES:
A script is a JSON list. Each entry is one of:
- "look"                                  (action without arguments)
- ["move", {"direction": "east"}]
- {"action": "take", "args": {"item": "key"}}
Running out of actions before the game ends raises PlayerError.
"""

import json
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from playtest.errors import PlayerError
from playtest.models.action import ActionRegistry
from playtest.player.base import Player, PlayerAction

logger = logging.getLogger(__name__)


def _normalize(entry: Any) -> PlayerAction:
    if isinstance(entry, str):
        return entry, {}
    if isinstance(entry, dict) and "action" in entry:
        return str(entry["action"]), dict(entry.get("args") or {})
    if isinstance(entry, (list, tuple)) and 1 <= len(entry) <= 2:
        name = entry[0]
        args = entry[1] if len(entry) == 2 else {}
        return str(name), dict(args or {})
    raise PlayerError(f"Invalid script entry: {entry!r}")


class ScriptedPlayer(Player):
    """
    Plays a predetermined sequence of actions.

    Attributes:
        narratives: Every narrative the player was shown, in order
        results: Final outcomes passed to output_result()
    """

    def __init__(self, script: Iterable[Any]):
        self._script = [_normalize(entry) for entry in script]
        self._position = 0
        self.narratives: list[str] = []
        self.results: list[str] = []

    @classmethod
    def from_file(cls, path: str | Path) -> "ScriptedPlayer":
        """Load a script from a JSON file."""
        with open(path) as f:
            data = json.load(f)
        if not isinstance(data, list):
            raise PlayerError(f"Script {path} must contain a JSON list")
        return cls(data)

    @property
    def remaining(self) -> int:
        return len(self._script) - self._position

    async def ask_for_action(self, narrative: str, actions: ActionRegistry) -> PlayerAction:
        self.narratives.append(narrative)
        if self._position >= len(self._script):
            raise PlayerError(f"Script exhausted after {len(self._script)} actions")
        name, args = self._script[self._position]
        self._position += 1
        logger.debug(f"Script step {self._position}: {name} {args}")
        return name, dict(args)

    def output_result(self, text: str) -> None:
        self.results.append(text)
