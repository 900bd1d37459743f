"""
session.py

PURPOSE: The step result contract every game session produces.
DEPENDENCIES: action.py

ARCHITECTURE NOTES:
A step either continues the game (SessionState: narrative plus the legal
actions for the next step) or ends it (GameResult). Callers branch with
isinstance(); to_dict() gives the tagged {"state": ...} / {"result": ...}
form for anything that needs plain data.
"""

from dataclasses import dataclass, field
from typing import Any

from playtest.models.action import ActionRegistry


@dataclass
class SessionState:
    """The game continues."""

    narrative: str  # Full text to show the player
    legal_actions: ActionRegistry
    feedback: str = ""  # Outcome of the last action only
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def is_terminal(self) -> bool:
        return False

    def to_dict(self) -> dict[str, Any]:
        return {
            "state": {
                "narrative": self.narrative,
                "legal_actions": self.legal_actions.describe(),
            }
        }


@dataclass
class GameResult:
    """The game has ended."""

    description: str
    success: bool = False
    turns: int = 0
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def is_terminal(self) -> bool:
        return True

    def to_dict(self) -> dict[str, Any]:
        return {
            "result": {
                "description": self.description,
                "success": self.success,
                "turns": self.turns,
                "metadata": dict(self.metadata),
            }
        }


StepResult = SessionState | GameResult
