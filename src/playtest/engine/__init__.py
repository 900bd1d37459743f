"""Game engine module."""

from playtest.engine.actions import execute_action
from playtest.engine.adventure import AdventureGame
from playtest.engine.matching import resolve_reference
from playtest.engine.session import ActionResult, Game, GameSession, SessionPhase
from playtest.engine.strategy import StrategyGame

__all__ = [
    "ActionResult",
    "AdventureGame",
    "Game",
    "GameSession",
    "SessionPhase",
    "StrategyGame",
    "execute_action",
    "resolve_reference",
]
