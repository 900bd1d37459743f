"""
games

PURPOSE: Bundled games and the factories that build sessions for them.
DEPENDENCIES: models, engine, importlib.resources

ARCHITECTURE NOTES:
Adventure datasets ship as JSON under games/data/ and are validated
against GameMap on load, so a broken dataset fails before play starts.
The strategy game has no dataset; its rules live in StrategyGame.
"""

import logging
import random
from importlib import resources
from pathlib import Path

from playtest.engine.adventure import AdventureGame
from playtest.engine.session import Game, GameSession
from playtest.engine.strategy import StrategyGame
from playtest.models.adventure import GameMap

logger = logging.getLogger(__name__)

ADVENTURES: dict[str, str] = {
    "cave": "cave.json",
    "temple": "temple.json",
}

GAMES: dict[str, str] = {
    "cave": "Compact cave puzzle: light the torch, find the idol or solve the pedestal",
    "temple": "The Ancient Maze Temple: collect relics and find the Golden Chalice",
    "strategy": "Tribe Strategy: feed, house and grow your tribe to 20 people",
}


def load_map(name: str) -> GameMap:
    """
    Load a bundled adventure dataset.

    Raises:
        KeyError: If no adventure has that name
        pydantic.ValidationError: If the dataset is inconsistent
    """
    if name not in ADVENTURES:
        raise KeyError(f"Unknown adventure '{name}'. Available: {', '.join(ADVENTURES)}")
    text = resources.files("playtest.games").joinpath("data", ADVENTURES[name]).read_text(encoding="utf-8")
    game_map = GameMap.model_validate_json(text)
    logger.debug(f"Loaded adventure '{name}': {len(game_map.rooms)} rooms")
    return game_map


def load_map_file(path: str | Path) -> GameMap:
    """Load and validate a custom adventure dataset from disk."""
    return GameMap.model_validate_json(Path(path).read_text(encoding="utf-8"))


def create_game(name: str, rng: random.Random | None = None) -> Game:
    """
    Build a fresh game by name.

    Args:
        name: One of GAMES
        rng: Random source for games with random outcomes

    Raises:
        KeyError: If no game has that name
    """
    if name == "strategy":
        return StrategyGame(rng=rng)
    if name in ADVENTURES:
        return AdventureGame(load_map(name))
    raise KeyError(f"Unknown game '{name}'. Available: {', '.join(GAMES)}")


def create_session(name: str, rng: random.Random | None = None) -> GameSession:
    """Build an unstarted session for a game by name."""
    return GameSession(create_game(name, rng=rng))


__all__ = [
    "ADVENTURES",
    "GAMES",
    "create_game",
    "create_session",
    "load_map",
    "load_map_file",
]
