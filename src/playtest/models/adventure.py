"""
adventure.py

PURPOSE: Pydantic models for the static adventure content (rooms, items, rules).
DEPENDENCIES: pydantic

ARCHITECTURE NOTES:
A GameMap is a complete dataset for the adventure engine. Every rule that
differs between adventures (treasure, turn limit, puzzles, light source,
dark rooms) is declared here, so one engine plays every dataset.

Items are immutable templates looked up by id. Rooms hold mutable item
lists; the engine works on a deep copy owned by the AdventureState, so the
dataset itself is never modified during play.

Field names are camelCase on the wire (startRoom, usableWith, addItems)
to match the persisted save shape; Python code uses snake_case.
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from playtest.errors import InvalidRoomError
from playtest.models.action import Direction


class AdventureModel(BaseModel):
    """Base config: camelCase aliases, population by field name allowed."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Item(AdventureModel):
    """An item template."""

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=50)
    description: str = Field(..., min_length=1)
    takeable: bool = Field(default=True)
    usable_with: list[str] = Field(
        default_factory=list,
        description="Targets this item can meaningfully be used with",
    )
    aliases: list[str] = Field(
        default_factory=list,
        description="Extra words that refer to this item (e.g. 'torch')",
    )
    points: int = Field(default=0, ge=0, description="Score awarded when taken")


class Interaction(AdventureModel):
    """
    Something in a room that can be examined.

    Examining it shows `message` (falling back to `description`) and may
    add or remove items in the room.
    """

    description: str = Field(..., min_length=1)
    message: str | None = Field(default=None)
    add_items: list[str] = Field(default_factory=list)
    remove_items: list[str] = Field(default_factory=list)


class Room(AdventureModel):
    """A location in the game world."""

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1)
    exits: dict[Direction, str] = Field(
        default_factory=dict,
        description="Map of direction -> room id (exits may be one-way)",
    )
    items: list[str] = Field(default_factory=list, description="Item ids currently here")
    interactions: dict[str, Interaction] = Field(default_factory=dict)
    dark: bool = Field(
        default=False,
        description="Items and interactions are hidden unless a lit light source is carried",
    )


class LightSource(AdventureModel):
    """
    A one-way light source: using the unlit item with no target replaces
    it in the inventory with the lit template.
    """

    unlit_item: str
    lit_item: Item
    lit_message: str = "You light the torch. It flickers brightly, illuminating the area around you."
    already_lit_message: str = "The torch is already lit and burning brightly."
    illuminate_message: str = "The torch illuminates the dark room, revealing its contents."
    dark_target: str = "darkness"


class Puzzle(AdventureModel):
    """Using `item` on `target` while in `room` wins the game."""

    item: str
    target: str
    room: str
    message: str


class GameMap(AdventureModel):
    """
    A complete adventure dataset.

    This is the root model. Datasets are loaded from JSON and validated
    against it; a save file embeds a snapshot of it.
    """

    title: str = Field(..., min_length=1, max_length=100)
    description: str = Field(default="")
    welcome: str = Field(default="", description="Opening feedback shown on start")
    start_room: str
    rooms: dict[str, Room] = Field(..., min_length=1)
    items: dict[str, Item] = Field(default_factory=dict)

    look_message: str = Field(default="You look around carefully.")
    treasure_item: str | None = Field(
        default=None,
        description="Holding this item at the end of any step wins the game",
    )
    treasure_message: str = Field(default="You found the treasure. You win!")
    turn_limit: int | None = Field(
        default=None,
        gt=0,
        description="The game is lost once this many turns have been taken",
    )
    turn_limit_message: str = Field(default="You've run out of time. Game over.")
    light: LightSource | None = Field(default=None)
    puzzles: list[Puzzle] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_references(self) -> "GameMap":
        """Ensure all id references point at defined rooms and items."""
        room_ids = set(self.rooms)
        item_ids = set(self.items)
        if self.light:
            if self.light.unlit_item not in item_ids:
                raise ValueError(f"Light source references unknown item '{self.light.unlit_item}'")
            if self.light.lit_item.id in item_ids:
                raise ValueError(f"Lit item id '{self.light.lit_item.id}' collides with an item")
            item_ids.add(self.light.lit_item.id)

        if self.start_room not in room_ids:
            raise ValueError(f"Start room '{self.start_room}' not found")

        for item_id, item in self.items.items():
            if item.id != item_id:
                raise ValueError(f"Item key '{item_id}' does not match its id '{item.id}'")

        for room_id, room in self.rooms.items():
            if room.id != room_id:
                raise ValueError(f"Room key '{room_id}' does not match its id '{room.id}'")
            for direction, target in room.exits.items():
                if target not in room_ids:
                    raise ValueError(
                        f"Room '{room_id}' has exit '{direction}' to unknown room '{target}'"
                    )
            for item_id in room.items:
                if item_id not in item_ids:
                    raise ValueError(f"Room '{room_id}' references unknown item '{item_id}'")
            for key, interaction in room.interactions.items():
                for item_id in interaction.add_items + interaction.remove_items:
                    if item_id not in item_ids:
                        raise ValueError(
                            f"Interaction '{key}' in room '{room_id}' references unknown item '{item_id}'"
                        )

        if self.treasure_item and self.treasure_item not in item_ids:
            raise ValueError(f"Treasure references unknown item '{self.treasure_item}'")

        for puzzle in self.puzzles:
            if puzzle.item not in item_ids:
                raise ValueError(f"Puzzle references unknown item '{puzzle.item}'")
            if puzzle.room not in room_ids:
                raise ValueError(f"Puzzle references unknown room '{puzzle.room}'")

        return self

    def get_room(self, room_id: str) -> Room | None:
        """Get a room by ID."""
        return self.rooms.get(room_id)

    def require_room(self, room_id: str) -> Room:
        """Get a room by ID, treating a missing room as a fatal inconsistency."""
        room = self.rooms.get(room_id)
        if room is None:
            raise InvalidRoomError(room_id)
        return room

    def get_item(self, item_id: str) -> Item | None:
        """Get an item template by ID, including the lit light-source variant."""
        item = self.items.get(item_id)
        if item is None and self.light and self.light.lit_item.id == item_id:
            return self.light.lit_item
        return item

    def item_ids(self) -> set[str]:
        """All item ids that may appear in a room or inventory."""
        ids = set(self.items)
        if self.light:
            ids.add(self.light.lit_item.id)
        return ids
