"""
human.py

PURPOSE: Terminal player: reads typed commands and turns them into actions.
DEPENDENCIES: rich, models

ARCHITECTURE NOTES:
A line is "<action> <rest...>". How the rest becomes a payload depends on
the action's fields:
- No fields: the rest is ignored
- A JSON object: used as the payload as-is
- One required field: the whole rest is its value
  ("take small key" -> {"item": "small key"})
- One required and one optional field: "<required> on <optional>"
  ("use key on pedestal")
- Otherwise the words fill the required fields in order

Required fields that are still missing are prompted for one at a time and
coerced to their declared JSON type. Unknown action names re-prompt.
"""

import json
import logging
from collections.abc import Callable
from typing import Any

from rich.console import Console

from playtest.models.action import ActionField, ActionRegistry
from playtest.player.base import Player, PlayerAction
from playtest.ui import plain

logger = logging.getLogger(__name__)

LOCAL_HELP = "?"
HELP_COMMANDS = (LOCAL_HELP, "help")


def coerce_value(field: ActionField, text: str) -> Any:
    """
    Convert typed text to a field's declared type.

    Raises:
        ValueError: If the text cannot be read as that type
    """
    text = text.strip()
    if field.type == "integer":
        try:
            return int(text)
        except ValueError:
            raise ValueError(f"{field.name} must be a whole number, got '{text}'") from None
    if field.type == "number":
        try:
            return float(text)
        except ValueError:
            raise ValueError(f"{field.name} must be a number, got '{text}'") from None
    if field.type == "boolean":
        return text.lower() in ("true", "yes", "y", "1")
    if field.choices:
        # Case-insensitive match against enums ("North" -> "north")
        for choice in field.choices:
            if choice.lower() == text.lower():
                return choice
    return text


def parse_action_line(line: str, actions: ActionRegistry) -> PlayerAction:
    """
    Parse a typed command into an action name and a (possibly partial) payload.

    Args:
        line: The raw input line
        actions: The legal actions

    Returns:
        (action name, payload). Required fields may be missing from the payload.

    Raises:
        ValueError: On an unknown action, invalid JSON or an uncoercible value
    """
    name, _, rest = line.strip().partition(" ")
    rest = rest.strip()

    if name not in actions:
        # Accept "Move" for "move" and "endturn" for "endTurn"
        matches = [a for a in actions if a.lower() == name.lower()]
        if not matches:
            raise ValueError(f"Unknown action: {name}")
        name = matches[0]

    fields = actions[name].fields()
    if not fields or not rest:
        return name, {}

    if rest.startswith("{") and rest.endswith("}"):
        try:
            payload = json.loads(rest)
        except json.JSONDecodeError:
            raise ValueError(f"Invalid JSON: {rest}") from None
        if not isinstance(payload, dict):
            raise ValueError(f"Invalid JSON: {rest}")
        return name, payload

    required = [f for f in fields if f.required]
    optional = [f for f in fields if not f.required]

    if len(required) == 1 and len(optional) == 1 and " on " in f" {rest} ":
        first, _, second = f" {rest} ".partition(" on ")
        args = {required[0].name: coerce_value(required[0], first)}
        if second.strip():
            args[optional[0].name] = coerce_value(optional[0], second)
        return name, args

    if len(required) == 1:
        return name, {required[0].name: coerce_value(required[0], rest)}

    words = rest.split(maxsplit=max(len(required) - 1, 0))
    return name, {f.name: coerce_value(f, word) for f, word in zip(required, words)}


class HumanPlayer(Player):
    """
    Plays from the terminal.

    Args:
        console: Rich console for output (defaults to the shared one)
        read_line: Reads one line given a prompt (defaults to console.input)
        show_help: Show the command list after a mistake
    """

    def __init__(
        self,
        console: Console | None = None,
        read_line: Callable[[str], str] | None = None,
        show_help: bool = True,
    ):
        self.console = console or plain.console
        self._read_line = read_line or (lambda prompt: self.console.input(prompt))
        self.show_help = show_help

    async def ask_for_action(self, narrative: str, actions: ActionRegistry) -> PlayerAction:
        plain.print_header("Game State", console=self.console)
        plain.print_message(narrative, console=self.console)

        while True:
            line = self._read_line("Enter action: ").strip()
            if not line:
                continue

            # "?" never reaches the game; "help" does when the game declares it
            if line == LOCAL_HELP or (line.lower() in HELP_COMMANDS and line.lower() not in actions):
                plain.print_help(actions, console=self.console)
                continue

            try:
                name, args = parse_action_line(line, actions)
                args = self._fill_missing(name, args, actions)
            except ValueError as e:
                plain.print_error(str(e), console=self.console)
                if self.show_help:
                    plain.print_help(actions, console=self.console)
                continue

            logger.debug(f"Human chose {name} {args}")
            return name, args

    def _fill_missing(self, name: str, args: dict[str, Any], actions: ActionRegistry) -> dict[str, Any]:
        """Prompt for each required field the line did not provide."""
        for field in actions[name].fields():
            if field.required and field.name not in args:
                value = self._read_line(f"Enter {field.name} ({field.type}): ")
                args[field.name] = coerce_value(field, value)
        return args

    def output_result(self, text: str) -> None:
        plain.print_header("Game Finished", console=self.console)
        plain.print_message(text, console=self.console)
