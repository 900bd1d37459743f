"""
state.py

PURPOSE: Mutable world state that changes during play.
DEPENDENCIES: pydantic, adventure.py

ARCHITECTURE NOTES:
AdventureState owns a private deep copy of its GameMap, because room item
lists change as items are taken or revealed. The engine is the only writer.

AdventureSave is the persisted shape (currentRoomId, inventory,
visitedRooms, gameMap). Loading a save rebuilds an AdventureState that
plays on exactly like the in-memory session it was taken from.

StrategyState is the whole world of the strategy game: a handful of
resource counters.
"""

from typing import Any

from pydantic import BaseModel, Field, model_validator

from playtest.errors import InvalidRoomError
from playtest.models.adventure import AdventureModel, GameMap, Item, Room


class AdventureSave(AdventureModel):
    """Serializable snapshot of an adventure in progress."""

    current_room_id: str
    inventory: list[str] = Field(default_factory=list)
    visited_rooms: list[str] = Field(default_factory=list)
    game_map: GameMap
    turns: int = Field(default=0, ge=0)
    last_action_result: str = Field(default="")

    def to_json(self) -> str:
        """Serialize with the camelCase keys of the save format."""
        return self.model_dump_json(by_alias=True, indent=2)


class AdventureState(BaseModel):
    """
    Complete mutable state of an adventure in progress.

    Invariants: the current room exists in the map, and every item id in
    the inventory exists in the item registry and appears at most once.
    """

    game_map: GameMap
    current_room: str
    inventory: list[str] = Field(default_factory=list)
    visited: list[str] = Field(default_factory=list, description="Room ids in visit order")
    turns: int = Field(default=0, ge=0)
    score: int = Field(default=0)
    game_over: bool = Field(default=False)
    won: bool = Field(default=False)
    last_action: str = Field(default="", description="Narrative of the last action")

    @model_validator(mode="after")
    def validate_invariants(self) -> "AdventureState":
        """Check references against the owned map."""
        if self.current_room not in self.game_map.rooms:
            raise ValueError(f"Current room '{self.current_room}' not found")
        known = self.game_map.item_ids()
        for item_id in self.inventory:
            if item_id not in known:
                raise ValueError(f"Inventory references unknown item '{item_id}'")
        if len(set(self.inventory)) != len(self.inventory):
            raise ValueError("Inventory contains duplicate items")
        for room_id in self.visited:
            if room_id not in self.game_map.rooms:
                raise ValueError(f"Visited rooms reference unknown room '{room_id}'")
        return self

    @classmethod
    def from_map(cls, game_map: GameMap) -> "AdventureState":
        """Create the initial state for a dataset."""
        return cls(
            game_map=game_map.model_copy(deep=True),
            current_room=game_map.start_room,
            inventory=[],
            visited=[game_map.start_room],
            last_action=game_map.welcome,
        )

    @classmethod
    def from_save(cls, save: AdventureSave) -> "AdventureState":
        """
        Rebuild a state from save data.

        Raises:
            InvalidRoomError: If the saved current room is not in the saved map
        """
        if save.current_room_id not in save.game_map.rooms:
            raise InvalidRoomError(save.current_room_id)

        visited = list(dict.fromkeys(save.visited_rooms))
        if save.current_room_id not in visited:
            visited.append(save.current_room_id)

        return cls(
            game_map=save.game_map.model_copy(deep=True),
            current_room=save.current_room_id,
            inventory=list(save.inventory),
            visited=visited,
            turns=save.turns,
            # Score is derived from what has been collected so far
            score=sum(item.points for item in map(save.game_map.get_item, save.inventory) if item),
            last_action=save.last_action_result,
        )

    def to_save(self) -> AdventureSave:
        """Snapshot this state in the persisted shape."""
        return AdventureSave(
            current_room_id=self.current_room,
            inventory=list(self.inventory),
            visited_rooms=list(self.visited),
            game_map=self.game_map.model_copy(deep=True),
            turns=self.turns,
            last_action_result=self.last_action,
        )

    def room(self) -> Room:
        """The room the player is in."""
        return self.game_map.require_room(self.current_room)

    def item(self, item_id: str) -> Item | None:
        """Look up an item template."""
        return self.game_map.get_item(item_id)

    def has_item(self, item_id: str) -> bool:
        """Check if an item is in the inventory."""
        return item_id in self.inventory

    def add_to_inventory(self, item_id: str) -> None:
        """Append an item to the inventory, keeping pickup order."""
        if item_id not in self.inventory:
            self.inventory.append(item_id)

    def remove_from_inventory(self, item_id: str) -> None:
        """Remove an item from the inventory if present."""
        if item_id in self.inventory:
            self.inventory.remove(item_id)

    def move_to(self, room_id: str) -> Room:
        """Move the player and mark the room visited."""
        room = self.game_map.require_room(room_id)
        self.current_room = room_id
        if room_id not in self.visited:
            self.visited.append(room_id)
        return room

    def has_light(self) -> bool:
        """True while the lit light source is carried."""
        light = self.game_map.light
        return light is not None and light.lit_item.id in self.inventory

    def can_see(self, room: Room | None = None) -> bool:
        """Visibility is derived from the inventory each time, never cached."""
        room = room or self.room()
        return not room.dark or self.has_light()

    def end_game(self, won: bool, message: str) -> None:
        """Mark the game as over."""
        self.game_over = True
        self.won = won
        self.last_action = message

    def summary(self) -> dict[str, Any]:
        """Metadata reported with results and debug output."""
        return {
            "visited_rooms": list(self.visited),
            "inventory": list(self.inventory),
            "current_room": self.current_room,
            "score": self.score,
        }


class StrategyState(BaseModel):
    """
    Resource counters of the strategy game.

    free_workers stays within [0, population] between actions. Food may go
    negative at the end of a day, which ends the game.
    """

    day: int = Field(default=1, ge=1)
    population: int = Field(default=5, ge=0)
    free_workers: int = Field(default=5, ge=0)
    shelters: int = Field(default=1, ge=0)
    food: int = Field(default=10)
    wood: int = Field(default=5)
    score: int = Field(default=0)
    game_over: bool = Field(default=False)
    won: bool = Field(default=False)

    @model_validator(mode="after")
    def validate_workers(self) -> "StrategyState":
        """Free workers can never exceed the population."""
        if self.free_workers > self.population:
            raise ValueError(
                f"free_workers ({self.free_workers}) exceeds population ({self.population})"
            )
        return self
