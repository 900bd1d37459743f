"""
saves.py

PURPOSE: Save and resume adventure games as JSON files.
DEPENDENCIES: models, engine, config

ARCHITECTURE NOTES:
A save file holds exactly one AdventureSave in its camelCase shape:

    {"currentRoomId": ..., "inventory": [...], "visitedRooms": [...],
     "gameMap": {...}, "turns": 0, "lastActionResult": ""}

The map travels with the save, so a save keeps playing the same way even
if the bundled dataset changes. Files are written to a temp file and
renamed into place so an interrupted write never leaves a torn save.
"""

import logging
import re
from pathlib import Path

from playtest.config import Settings, get_settings
from playtest.engine.adventure import AdventureGame
from playtest.games import load_map
from playtest.models.state import AdventureSave

logger = logging.getLogger(__name__)

SAVE_ID_PATTERN = re.compile(r"[A-Za-z0-9_-]+")


def save_path(save_id: str, settings: Settings | None = None) -> Path:
    """
    Path of a named save in the configured saves directory.

    Raises:
        ValueError: If the id contains anything but letters, digits, '-' and '_'
    """
    if not SAVE_ID_PATTERN.fullmatch(save_id):
        raise ValueError(f"Invalid save id '{save_id}': use letters, digits, '-' and '_'")
    return (settings or get_settings()).saves_dir() / f"{save_id}.json"


def save_game(game: AdventureGame, path: str | Path) -> Path:
    """Write the game's current state to a save file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_text(game.save().to_json(), encoding="utf-8")
    tmp.replace(path)
    logger.debug(f"Saved game to {path}")
    return path


def load_game(path: str | Path) -> AdventureGame:
    """
    Resume a game from a save file.

    Raises:
        FileNotFoundError: If the file does not exist
        pydantic.ValidationError: If the file is not a valid save
        InvalidRoomError: If the saved room is not in the saved map
    """
    save = AdventureSave.model_validate_json(Path(path).read_text(encoding="utf-8"))
    game = AdventureGame.from_save(save)
    logger.debug(f"Loaded save {path}: room={game.state.current_room}, turns={game.state.turns}")
    return game


def load_or_create(path: str | Path, adventure: str) -> tuple[AdventureGame, bool]:
    """
    Resume a save, or start the named adventure if there is none yet.

    Returns:
        (game, created)
    """
    path = Path(path)
    if path.exists():
        return load_game(path), False
    logger.info(f"No save at {path}; starting '{adventure}'")
    return AdventureGame(load_map(adventure)), True
