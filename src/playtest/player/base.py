"""
base.py

PURPOSE: The contract between a game session and whoever plays it.
DEPENDENCIES: models

ARCHITECTURE NOTES:
A Player sees only the narrative and the legal actions of the current
step, and answers with an action name plus a JSON-like payload. It never
touches the world state, so humans, scripts and LLMs are interchangeable.
"""

from abc import ABC, abstractmethod
from typing import Any

from playtest.models.action import ActionRegistry
from playtest.models.session import GameResult

PlayerAction = tuple[str, dict[str, Any]]


class Player(ABC):
    """Something that can choose actions for a game session."""

    @abstractmethod
    async def ask_for_action(self, narrative: str, actions: ActionRegistry) -> PlayerAction:
        """
        Choose the next action.

        Args:
            narrative: What the player currently sees
            actions: Legal actions and their argument schemas

        Returns:
            (action name, argument payload)

        Raises:
            PlayerError: If no action could be produced
        """
        ...

    @abstractmethod
    def output_result(self, text: str) -> None:
        """Show the final outcome of the game."""
        ...

    async def ask_for_feedback(self, result: GameResult) -> str | None:
        """Comment on a finished game. Players with nothing to say return None."""
        return None

    async def cleanup(self) -> None:
        """Release resources. Safe to call more than once."""
        return None
