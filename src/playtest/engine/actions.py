"""
actions.py

PURPOSE: Action handlers for the adventure engine.
DEPENDENCIES: models, matching

ARCHITECTURE NOTES:
Each action name has a handler that:
- Validates the action is possible in the current state
- Updates the AdventureState
- Returns narrative text

Handlers never raise for game-level failures ("You can't go north.");
those come back as ActionResult(success=False). Turn counting and the
win/loss checks run afterwards in AdventureGame, for every action.
"""

import logging
from collections.abc import Callable
from typing import Any

from playtest.engine.matching import item_candidates, resolve_reference
from playtest.engine.session import ActionResult
from playtest.models.action import ADVENTURE_ACTIONS, ExamineArgs, MoveArgs, TakeArgs, UseArgs
from playtest.models.state import AdventureState

logger = logging.getLogger(__name__)


def execute_action(name: str, args: Any, state: AdventureState) -> ActionResult:
    """
    Execute a validated action.

    This is the main dispatch function that routes to specific handlers.

    Args:
        name: The action name
        args: Parsed arguments for that action
        state: The current adventure state (will be modified)

    Returns:
        ActionResult with message and success status
    """
    handler = HANDLERS.get(name)
    if handler:
        return handler(args, state)

    return ActionResult(
        message="Action not recognized. Please try a different action.",
        success=False,
    )


def handle_move(args: MoveArgs, state: AdventureState) -> ActionResult:
    """Handle movement through an exit of the current room."""
    room = state.room()
    target = room.exits.get(args.direction)
    if not target:
        return ActionResult(message=f"You can't go {args.direction}.", success=False)

    new_room = state.move_to(target)
    return ActionResult(message=f"You move {args.direction} to the {new_room.name}.")


def handle_look(_args: Any, state: AdventureState) -> ActionResult:
    """Handle LOOK. The room description is part of every narrative anyway."""
    return ActionResult(message=state.game_map.look_message)


def handle_examine(args: ExamineArgs, state: AdventureState) -> ActionResult:
    """
    Handle EXAMINE.

    Resolution order: room interaction, inventory item, room item.
    """
    room = state.room()
    target = args.target

    if not state.can_see(room):
        return ActionResult(message="It's too dark to see anything clearly.", success=False)

    key = resolve_reference(target, {k: [] for k in room.interactions})
    if key is not None:
        interaction = room.interactions[key]
        # Adding a present id or removing a missing one is a no-op
        for item_id in interaction.add_items:
            if item_id not in room.items:
                room.items.append(item_id)
        for item_id in interaction.remove_items:
            if item_id in room.items:
                room.items.remove(item_id)
        return ActionResult(message=interaction.message or interaction.description)

    for pool in (state.inventory, room.items):
        item_id = resolve_reference(target, item_candidates(pool, state.item))
        if item_id is not None:
            item = state.item(item_id)
            assert item is not None
            return ActionResult(message=f"{item.name}: {item.description}")

    return ActionResult(message=f"You don't see anything special about the {target}.")


def handle_take(args: TakeArgs, state: AdventureState) -> ActionResult:
    """Handle TAKE."""
    room = state.room()

    if not state.can_see(room):
        return ActionResult(message="It's too dark to find anything.", success=False)

    held_id = resolve_reference(args.item, item_candidates(state.inventory, state.item))
    if held_id is not None:
        held = state.item(held_id)
        name = held.name if held else args.item
        return ActionResult(message=f"You already have the {name}.", success=False)

    item_id = resolve_reference(args.item, item_candidates(room.items, state.item))
    item = state.item(item_id) if item_id else None
    if item_id is None or item is None:
        return ActionResult(message=f"You don't see a {args.item} here.", success=False)

    if not item.takeable:
        return ActionResult(message=f"You can't take the {item.name}.", success=False)

    room.items.remove(item_id)
    state.add_to_inventory(item_id)

    message = f"You take the {item.name}."
    if item.points:
        state.score += item.points
        message += f" (+{item.points} points)"
    return ActionResult(message=message)


def handle_use(args: UseArgs, state: AdventureState) -> ActionResult:
    """
    Handle USE, with or without a target.

    Special cases come first: lighting the light source, using the lit
    light source in the dark, and puzzle solutions.
    """
    room = state.room()
    game_map = state.game_map

    item_id = resolve_reference(args.item, item_candidates(state.inventory, state.item))
    item = state.item(item_id) if item_id else None
    if item_id is None or item is None:
        return ActionResult(message=f"You don't have a {args.item}.", success=False)

    target = args.target.strip() if args.target else None

    light = game_map.light
    if light is not None:
        if item_id == light.unlit_item and not target:
            # One-way: the unlit item never comes back
            state.remove_from_inventory(light.unlit_item)
            state.add_to_inventory(light.lit_item.id)
            logger.debug(f"Light source lit: {light.unlit_item} -> {light.lit_item.id}")
            return ActionResult(message=light.lit_message)

        if item_id == light.lit_item.id:
            if room.dark or (target and target.lower() == light.dark_target.lower()):
                return ActionResult(message=light.illuminate_message)
            if not target:
                return ActionResult(message=light.already_lit_message)

    matched_target = target
    if target:
        key = resolve_reference(target, {k: [] for k in room.interactions})
        if key is not None:
            matched_target = key

    if matched_target:
        for puzzle in game_map.puzzles:
            if (
                item_id == puzzle.item
                and matched_target.lower() == puzzle.target.lower()
                and state.current_room == puzzle.room
            ):
                state.end_game(won=True, message=puzzle.message)
                return ActionResult(message=puzzle.message)

    if not matched_target:
        return ActionResult(
            message=f"You need to specify what to use the {item.name} on.",
            success=False,
        )

    if any(t.lower() == matched_target.lower() for t in item.usable_with):
        return ActionResult(
            message=f"You use the {item.name} on the {matched_target}, but nothing happens."
        )

    return ActionResult(message=f"You can't use the {item.name} on that.", success=False)


def handle_inventory(_args: Any, state: AdventureState) -> ActionResult:
    """Handle INVENTORY."""
    names = []
    for item_id in state.inventory:
        item = state.item(item_id)
        names.append(item.name if item else item_id)

    if not names:
        return ActionResult(message="Your inventory is empty.")
    return ActionResult(message=f"You are carrying: {', '.join(names)}.")


def handle_help(_args: Any, _state: AdventureState) -> ActionResult:
    """Handle HELP."""
    return ActionResult(message=f"Available commands: {', '.join(ADVENTURE_ACTIONS)}.")


HANDLERS: dict[str, Callable[[Any, AdventureState], ActionResult]] = {
    "move": handle_move,
    "look": handle_look,
    "examine": handle_examine,
    "take": handle_take,
    "use": handle_use,
    "inventory": handle_inventory,
    "help": handle_help,
}
