"""Domain models for playtest games."""

from playtest.models.action import (
    ADVENTURE_ACTIONS,
    STRATEGY_ACTIONS,
    ActionField,
    ActionRegistry,
    ActionSpec,
)
from playtest.models.adventure import GameMap, Interaction, Item, LightSource, Puzzle, Room
from playtest.models.session import GameResult, SessionState, StepResult
from playtest.models.state import AdventureSave, AdventureState, StrategyState

__all__ = [
    "ADVENTURE_ACTIONS",
    "STRATEGY_ACTIONS",
    "ActionField",
    "ActionRegistry",
    "ActionSpec",
    "AdventureSave",
    "AdventureState",
    "GameMap",
    "GameResult",
    "Interaction",
    "Item",
    "LightSource",
    "Puzzle",
    "Room",
    "SessionState",
    "StepResult",
    "StrategyState",
]
