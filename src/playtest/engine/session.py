"""
session.py

PURPOSE: Uniform start/step/cleanup contract around any game.
DEPENDENCIES: models, observability

ARCHITECTURE NOTES:
A Game is the resolver plus its world state. A GameSession wraps one Game
and owns the lifecycle:

    UNINITIALIZED --start()--> READY --step()--> READY ... --> TERMINAL

The session validates payloads against the game's ActionRegistry before
the game sees them. Unknown action names are soft failures: the player
gets a "not recognized" narrative and the same legal actions, and no turn
is consumed. Malformed payloads raise ActionValidationError.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any

from playtest.errors import SessionStateError
from playtest.models.action import ActionArgs, ActionRegistry
from playtest.models.session import GameResult, SessionState, StepResult
from playtest.observability import get_tracer

logger = logging.getLogger(__name__)
tracer = get_tracer(__name__)


@dataclass
class ActionResult:
    """Result of resolving one action."""

    message: str
    success: bool = True


class Game(ABC):
    """A game the session can drive: legal actions, a resolver, a narrative."""

    @property
    @abstractmethod
    def title(self) -> str:
        """Display name of the game."""
        ...

    @property
    @abstractmethod
    def actions(self) -> ActionRegistry:
        """Actions that are legal right now."""
        ...

    @abstractmethod
    def describe(self) -> str:
        """Narrative for the current state, including the last feedback."""
        ...

    @abstractmethod
    def apply(self, name: str, args: ActionArgs) -> ActionResult:
        """Resolve one validated action against the world state."""
        ...

    @abstractmethod
    def result(self) -> GameResult | None:
        """The terminal result once the game is over, else None."""
        ...

    def metadata(self) -> dict[str, Any]:
        """Game-specific data attached to each continuation state."""
        return {}


class SessionPhase(Enum):
    UNINITIALIZED = auto()
    READY = auto()
    TERMINAL = auto()


class GameSession:
    """
    Drives one game from start to result.

    A session is single-use: start() once, step() until a GameResult,
    cleanup() any number of times.
    """

    def __init__(self, game: Game):
        self.game = game
        self.phase = SessionPhase.UNINITIALIZED
        self.steps = 0
        self._result: GameResult | None = None

    @property
    def result(self) -> GameResult | None:
        """The terminal result, once reached."""
        return self._result

    def start(self) -> SessionState:
        """
        Start the session.

        Returns:
            The opening narrative and legal actions

        Raises:
            SessionStateError: If the session was already started
        """
        if self.phase is not SessionPhase.UNINITIALIZED:
            raise SessionStateError("Session already started")

        self.phase = SessionPhase.READY
        logger.info(f"Session started: {self.game.title}")
        return self._state()

    def step(self, name: str, args: dict[str, Any] | None = None) -> StepResult:
        """
        Apply one action.

        Args:
            name: Action name
            args: Action payload, validated against the action's schema

        Returns:
            SessionState if the game continues, GameResult if it ended

        Raises:
            SessionStateError: Before start() or after a terminal result
            ActionValidationError: If the payload does not match the schema
        """
        if self.phase is SessionPhase.UNINITIALIZED:
            raise SessionStateError("Session not started; call start() first")
        if self.phase is SessionPhase.TERMINAL:
            raise SessionStateError("Game is over; no further steps are accepted")

        with tracer.start_as_current_span("session.step") as span:
            span.set_attribute("game.title", self.game.title)
            span.set_attribute("game.action", name)
            span.set_attribute("game.step", self.steps + 1)

            spec = self.game.actions.get(name)
            if spec is None:
                logger.warning(f"Unrecognized action '{name}'")
                span.set_attribute("game.recognized", False)
                return self._state(
                    feedback=f'Action "{name}" not recognized. '
                    f"Available actions: {', '.join(self.game.actions)}."
                )

            parsed = spec.parse(args)
            outcome = self.game.apply(name, parsed)
            self.steps += 1

            logger.debug(f"Step {self.steps}: {name} {args or {}} -> {outcome.message!r}")
            span.set_attribute("game.success", outcome.success)

            result = self.game.result()
            if result is not None:
                self.phase = SessionPhase.TERMINAL
                self._result = result
                span.set_attribute("game.over", True)
                span.set_attribute("game.won", result.success)
                logger.info(f"Game over after {self.steps} steps: success={result.success}")
                return result

            return self._state(feedback=outcome.message)

    def cleanup(self) -> None:
        """Release resources. These games hold none; safe to call repeatedly."""
        logger.debug(f"Session cleanup: {self.game.title}")

    def _state(self, feedback: str = "") -> SessionState:
        narrative = self.game.describe()
        if feedback and feedback not in narrative:
            narrative = f"{narrative}\n\n{feedback}"
        return SessionState(
            narrative=narrative,
            legal_actions=self.game.actions,
            feedback=feedback,
            metadata=self.game.metadata(),
        )
