"""
strategy.py

PURPOSE: Resource-management strategy game: feed, house and grow a tribe.
DEPENDENCIES: models

ARCHITECTURE NOTES:
Within a day the player spends free workers on gather/chop and wood on
build. Those are immediate; a rejected one changes nothing. endTurn then
settles the day in a fixed order:

1. Advance the day, free every worker
2. Eat: sheltered people eat 1, unsheltered people eat 2
3. Score: shelter bonus plus half the surplus
4. Loss if food < 0, else win if population >= 20 and shelters >= 10,
   else grow by one when food and housing allow

Yields are random per call. Pass a seeded random.Random for repeatable play.
"""

import logging
import random

from playtest.engine.session import ActionResult, Game
from playtest.models.action import STRATEGY_ACTIONS, ActionArgs, ActionRegistry, BuildArgs, WorkersArgs
from playtest.models.session import GameResult
from playtest.models.state import StrategyState

logger = logging.getLogger(__name__)

WOOD_PER_SHELTER = 5
PEOPLE_PER_SHELTER = 2
GATHER_YIELD = (2, 4)  # food per worker, inclusive
CHOP_YIELD = (1, 2)  # wood per worker, inclusive
WIN_POPULATION = 20
WIN_SHELTERS = 10


class StrategyGame(Game):
    """
    The strategy game's resolver and world state.

    Args:
        state: Optional starting state (defaults to day 1)
        rng: Random source for yields
    """

    def __init__(self, state: StrategyState | None = None, rng: random.Random | None = None):
        self.state = state or StrategyState()
        self.rng = rng or random.Random()
        self._last_feedback = "Your tribe settles into a clearing. Keep them fed and sheltered."
        self._result: GameResult | None = None

    @property
    def title(self) -> str:
        return "Tribe Strategy"

    @property
    def actions(self) -> ActionRegistry:
        return STRATEGY_ACTIONS

    def apply(self, name: str, args: ActionArgs) -> ActionResult:
        match name:
            case "gather":
                assert isinstance(args, WorkersArgs)
                result = self.gather(args.workers)
            case "chop":
                assert isinstance(args, WorkersArgs)
                result = self.chop(args.workers)
            case "build":
                assert isinstance(args, BuildArgs)
                result = self.build(args.shelters)
            case "endTurn":
                result = self.end_turn()
            case _:
                result = ActionResult(
                    message="Action not recognized. Please try a different action.",
                    success=False,
                )
        self._last_feedback = result.message
        return result

    def _check_workers(self, workers: int) -> str | None:
        if workers < 1:
            return "You need to send at least 1 worker."
        if workers > self.state.free_workers:
            return f"You only have {self.state.free_workers} people available!"
        return None

    def gather(self, workers: int) -> ActionResult:
        """Send workers to gather food."""
        shortfall = self._check_workers(workers)
        if shortfall:
            return ActionResult(message=shortfall, success=False)

        food = workers * self.rng.randint(*GATHER_YIELD)
        self.state.food += food
        self.state.free_workers -= workers
        return ActionResult(
            message=f"Your gatherers collected {food} food! "
            f"({self.state.free_workers} workers remaining)"
        )

    def chop(self, workers: int) -> ActionResult:
        """Send workers to chop wood."""
        shortfall = self._check_workers(workers)
        if shortfall:
            return ActionResult(message=shortfall, success=False)

        wood = workers * self.rng.randint(*CHOP_YIELD)
        self.state.wood += wood
        self.state.free_workers -= workers
        return ActionResult(
            message=f"Your workers chopped {wood} wood! "
            f"({self.state.free_workers} workers remaining)"
        )

    def build(self, shelters: int) -> ActionResult:
        """Spend wood on shelters."""
        if shelters < 1:
            return ActionResult(message="You need to build at least 1 shelter.", success=False)

        wood_needed = shelters * WOOD_PER_SHELTER
        if wood_needed > self.state.wood:
            return ActionResult(
                message=f"Not enough wood! Need {wood_needed} but only have {self.state.wood}.",
                success=False,
            )

        self.state.wood -= wood_needed
        self.state.shelters += shelters
        plural = "s" if shelters > 1 else ""
        return ActionResult(
            message=f"You built {shelters} new shelter{plural}! "
            f"({self.state.free_workers} workers remaining)"
        )

    def end_turn(self) -> ActionResult:
        """Settle the day: consumption, score, then loss, win or growth."""
        s = self.state
        lines = [f"Day {s.day} summary:"]

        s.day += 1
        s.free_workers = s.population

        sheltered = min(s.shelters * PEOPLE_PER_SHELTER, s.population)
        unsheltered = s.population - sheltered
        consumed = sheltered + unsheltered * 2
        s.food -= consumed
        lines.append(f"Food consumed: {consumed} ({sheltered} sheltered, {unsheltered} unsheltered)")

        gained = sheltered + max(0, s.food - consumed) // 2
        s.score += gained
        lines.append(f"Score increased by {gained}.")

        if s.food < 0:
            lines.append(
                f"Your tribe has run out of food and perished. Final Score: {s.score}\n"
                f"Survived {s.day} days"
            )
            return self._finish(
                won=False,
                message="\n\n".join(lines),
                metadata={"score": s.score, "survived_days": s.day, "population": s.population},
            )

        if s.population >= WIN_POPULATION and s.shelters >= WIN_SHELTERS:
            lines.append(
                "\n".join(
                    [
                        "Victory! Your tribe has grown strong and prosperous with proper housing!",
                        f"Final Score: {s.score}",
                        f"Completed in {s.day} days",
                        f"Final Population: {s.population}",
                        f"Shelters Built: {s.shelters}",
                        f"Resources Remaining: {s.food} food, {s.wood} wood",
                    ]
                )
            )
            return self._finish(
                won=True,
                message="\n\n".join(lines),
                metadata={
                    "score": s.score,
                    "days": s.day,
                    "population": s.population,
                    "shelters": s.shelters,
                    "food": s.food,
                    "wood": s.wood,
                },
            )

        if s.food > s.population * 3 and s.shelters * PEOPLE_PER_SHELTER >= s.population:
            s.population += 1
            lines.append(f"Your tribe has grown! Population increased to {s.population}.")

        return ActionResult(message="\n\n".join(lines))

    def _finish(self, won: bool, message: str, metadata: dict) -> ActionResult:
        self.state.game_over = True
        self.state.won = won
        self._result = GameResult(
            description=message,
            success=won,
            turns=self.state.day,
            metadata=metadata,
        )
        logger.info(f"Strategy game over on day {self.state.day}: won={won}")
        return ActionResult(message=message)

    def result(self) -> GameResult | None:
        return self._result

    def metadata(self) -> dict:
        return self.state.model_dump(exclude={"game_over", "won"})

    def describe(self) -> str:
        s = self.state
        return "\n".join(
            [
                f"Day {s.day}",
                "Objectives:",
                f"- Grow your population to {WIN_POPULATION}",
                f"- Build at least {WIN_SHELTERS} shelters",
                "- Don't run out of food!",
                "",
                f"Score: {s.score}",
                f"Population: {s.population} ({s.free_workers} available)",
                f"Shelters: {s.shelters}",
                f"Food: {s.food}",
                f"Wood: {s.wood}",
                "",
                f"[Last action] {self._last_feedback}",
            ]
        )
