"""
adventure.py

PURPOSE: The configurable room-based adventure engine.
DEPENDENCIES: models, actions

ARCHITECTURE NOTES:
AdventureGame plays any GameMap. Dataset differences (the cave's dark room
and pedestal, the temple's scoring) live in the map, not in subclasses.

After every action, including look/help/inventory, the engine counts the
turn and runs the end-of-step checks. Win is evaluated before loss, so
picking up the treasure on the last allowed turn still wins.
"""

import logging

from playtest.engine.actions import execute_action
from playtest.engine.session import ActionResult, Game
from playtest.models.action import ADVENTURE_ACTIONS, ActionArgs, ActionRegistry
from playtest.models.adventure import GameMap, Room
from playtest.models.session import GameResult
from playtest.models.state import AdventureSave, AdventureState

logger = logging.getLogger(__name__)


class AdventureGame(Game):
    """
    An adventure session's resolver and world state.

    Args:
        game_map: The dataset to play
        state: Optional existing state (for resuming saves)
    """

    def __init__(self, game_map: GameMap, state: AdventureState | None = None):
        self.game_map = game_map
        self.state = state or AdventureState.from_map(game_map)

    @classmethod
    def from_save(cls, save: AdventureSave) -> "AdventureGame":
        """Resume from save data."""
        return cls(save.game_map, AdventureState.from_save(save))

    def save(self) -> AdventureSave:
        """Snapshot the current state."""
        return self.state.to_save()

    @property
    def title(self) -> str:
        return self.game_map.title

    @property
    def actions(self) -> ActionRegistry:
        return ADVENTURE_ACTIONS

    def apply(self, name: str, args: ActionArgs) -> ActionResult:
        """Resolve an action, count the turn and check for the end of the game."""
        result = execute_action(name, args, self.state)
        self.state.last_action = result.message
        self.state.turns += 1
        self._check_game_end()
        return result

    def _check_game_end(self) -> None:
        """Win (puzzle or treasure) takes priority over the turn limit."""
        state = self.state
        if state.won:
            return

        if self.game_map.treasure_item and state.has_item(self.game_map.treasure_item):
            logger.debug("Treasure in inventory")
            state.end_game(won=True, message=self.game_map.treasure_message)
            return

        if self.game_map.turn_limit and state.turns >= self.game_map.turn_limit:
            logger.debug(f"Turn limit reached ({state.turns})")
            state.end_game(won=False, message=self.game_map.turn_limit_message)

    def result(self) -> GameResult | None:
        if not self.state.game_over:
            return None
        return GameResult(
            description=self.state.last_action,
            success=self.state.won,
            turns=self.state.turns,
            metadata=self.state.summary(),
        )

    def metadata(self) -> dict:
        return self.state.summary()

    def describe(self) -> str:
        """Render the current room with the last action's feedback."""
        room = self.state.room()
        lines: list[str] = [f"== {room.name} ==", ""]

        if self.state.last_action:
            lines += [f"[Last action] {self.state.last_action}", ""]

        if not self.state.can_see(room):
            lines += [
                "It's pitch black. You can't see anything without a light source.",
                "",
                self._describe_exits(room),
            ]
        else:
            lines += [room.description, ""]
            names = [item.name for item in map(self.state.item, room.items) if item]
            if names:
                lines.append("You can see:")
                lines += [f"- {name}" for name in names]
                lines.append("")
            lines.append(self._describe_exits(room))

        if self.state.score:
            lines += ["", f"Score: {self.state.score}"]

        lines += ["", 'Type "inventory" to see what you\'re carrying or "help" for commands.']
        return "\n".join(lines)

    def _describe_exits(self, room: Room) -> str:
        if not room.exits:
            return "There are no obvious exits."
        return f"Exits: {', '.join(room.exits)}"
