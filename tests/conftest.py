"""
conftest.py

Shared pytest fixtures for playtest tests.
"""

import random

import pytest

from playtest.engine.adventure import AdventureGame
from playtest.engine.session import GameSession
from playtest.engine.strategy import StrategyGame
from playtest.games import load_map
from playtest.models.adventure import GameMap


@pytest.fixture
def cave_map() -> GameMap:
    """The bundled compact cave dataset."""
    return load_map("cave")


@pytest.fixture
def temple_map() -> GameMap:
    """The bundled temple dataset."""
    return load_map("temple")


@pytest.fixture
def cave_game(cave_map: GameMap) -> AdventureGame:
    """A fresh cave adventure."""
    return AdventureGame(cave_map)


@pytest.fixture
def cave_session(cave_game: AdventureGame) -> GameSession:
    """A started cave session."""
    session = GameSession(cave_game)
    session.start()
    return session


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source for repeatable yields."""
    return random.Random(1234)


@pytest.fixture
def strategy_game(rng: random.Random) -> StrategyGame:
    """A fresh strategy game on day 1."""
    return StrategyGame(rng=rng)


@pytest.fixture
def strategy_session(strategy_game: StrategyGame) -> GameSession:
    """A started strategy session."""
    session = GameSession(strategy_game)
    session.start()
    return session


@pytest.fixture
def minimal_map_dict() -> dict:
    """A minimal valid two-room map, in the camelCase file format."""
    return {
        "title": "Minimal Test Map",
        "startRoom": "start",
        "rooms": {
            "start": {
                "id": "start",
                "name": "Starting Room",
                "description": "A simple room.",
                "exits": {"north": "end"},
                "items": ["coin"],
            },
            "end": {
                "id": "end",
                "name": "End Room",
                "description": "The last room.",
                "exits": {"south": "start"},
            },
        },
        "items": {
            "coin": {
                "id": "coin",
                "name": "Gold Coin",
                "description": "A shiny coin.",
                "points": 10,
            }
        },
    }
