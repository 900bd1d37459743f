"""
runner.py

PURPOSE: The loop that connects a player to a game session.
DEPENDENCIES: engine, models, observability

ARCHITECTURE NOTES:
play_game() is the only place that drives a session end to end:

    start() -> ask player -> step() -> ... -> GameResult

A payload the session rejects (ActionValidationError) is shown back to the
player with the same legal actions; it counts against max_steps but not as
a game turn. Reaching max_steps ends the run with a non-success result
tagged termination_reason="max_steps". The session and the player are
always cleaned up, even when the player raises.
"""

import logging
from collections.abc import Callable
from typing import Any

from playtest.engine.session import GameSession
from playtest.errors import ActionValidationError
from playtest.models.session import GameResult, SessionState, StepResult
from playtest.observability import get_tracer
from playtest.player.base import Player

logger = logging.getLogger(__name__)
tracer = get_tracer(__name__)

StepCallback = Callable[[int, str, dict[str, Any], StepResult], None]


async def play_game(
    session: GameSession,
    player: Player,
    max_steps: int | None = None,
    on_step: StepCallback | None = None,
    collect_feedback: bool = False,
) -> GameResult:
    """
    Play a session to completion.

    Args:
        session: An unstarted session
        player: Who chooses the actions
        max_steps: Stop after this many player actions (None for no limit)
        on_step: Called after each accepted step with (step, name, args, outcome)
        collect_feedback: Ask the player for feedback and store it in the
            result metadata under "feedback"

    Returns:
        The game's result, or a max_steps result

    Raises:
        PlayerError: If the player cannot produce an action
        SessionStateError: If the session was already started
    """
    with tracer.start_as_current_span("play_game") as span:
        span.set_attribute("game.title", session.game.title)
        span.set_attribute("game.player", type(player).__name__)
        if max_steps is not None:
            span.set_attribute("game.max_steps", max_steps)

        try:
            state = session.start()
            narrative = state.narrative
            steps = 0
            result: GameResult | None = None

            while result is None:
                if max_steps is not None and steps >= max_steps:
                    logger.info(f"Stopping after {steps} steps (max_steps)")
                    result = GameResult(
                        description=f"Stopped after {steps} steps without reaching an ending.",
                        success=False,
                        turns=session.steps,
                        metadata={**state.metadata, "termination_reason": "max_steps"},
                    )
                    break

                name, args = await player.ask_for_action(narrative, state.legal_actions)
                steps += 1

                try:
                    outcome = session.step(name, args)
                except ActionValidationError as e:
                    logger.warning(f"Rejected payload from {type(player).__name__}: {e}")
                    narrative = f"{state.narrative}\n\n{e}"
                    continue

                if on_step:
                    on_step(steps, name, args, outcome)

                if isinstance(outcome, SessionState):
                    state = outcome
                    narrative = outcome.narrative
                else:
                    result = outcome

            span.set_attribute("game.steps", steps)
            span.set_attribute("game.success", result.success)

            player.output_result(result.description)
            if collect_feedback:
                feedback = await player.ask_for_feedback(result)
                if feedback is not None:
                    result.metadata["feedback"] = feedback

            return result
        finally:
            session.cleanup()
            await player.cleanup()
