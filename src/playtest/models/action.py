"""
action.py

PURPOSE: Action Schema Registry - the legal actions of a game and their argument shapes.
DEPENDENCIES: pydantic

ARCHITECTURE NOTES:
Each action is an ActionSpec: a name, a description and a pydantic model for
its arguments. Specs are module-level constants, never rebuilt per call.
A game publishes an immutable ActionRegistry of its specs.

The same registry serves three consumers:
- GameSession validates incoming payloads with ActionSpec.parse()
- HumanPlayer reads ActionSpec.fields() to parse typed input
- The LLM bridge turns specs into tool declarations with to_tool()

Numeric lower bounds (workers >= 1) are advertised as JSON schema
"minimum" but not enforced here. The resolver rejects them with narrative
feedback, which keeps them a business rule rather than a malformed payload.
"""

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from playtest.errors import ActionValidationError

Direction = Literal["north", "south", "east", "west"]

DIRECTIONS: tuple[str, ...] = ("north", "south", "east", "west")


class ActionArgs(BaseModel):
    """Base for all action argument models. Unknown keys are ignored."""

    model_config = ConfigDict(extra="ignore", frozen=True)


class NoArgs(ActionArgs):
    """Arguments for actions that take none."""


# Adventure actions


class MoveArgs(ActionArgs):
    direction: Direction = Field(..., description="Direction to move (north, south, east, west)")


class ExamineArgs(ActionArgs):
    target: str = Field(..., description="Object, feature or item to examine")


class TakeArgs(ActionArgs):
    item: str = Field(..., description="Item to take")


class UseArgs(ActionArgs):
    item: str = Field(..., description="Item from your inventory to use")
    target: str | None = Field(default=None, description="Target to use the item on (optional)")


# Strategy actions


class WorkersArgs(ActionArgs):
    workers: int = Field(
        ...,
        description="Number of people to send",
        json_schema_extra={"minimum": 1},
    )


class BuildArgs(ActionArgs):
    shelters: int = Field(
        ...,
        description="Number of shelters to build (costs 5 wood each)",
        json_schema_extra={"minimum": 1},
    )


@dataclass(frozen=True)
class ActionField:
    """Descriptor of a single action argument."""

    name: str
    type: str  # JSON schema primitive: string, integer, number, boolean
    required: bool
    description: str = ""
    choices: tuple[str, ...] | None = None
    minimum: int | float | None = None


@dataclass(frozen=True)
class ActionSpec:
    """
    Declaration of one legal action.

    Attributes:
        name: Action name as sent by players (e.g. "move", "endTurn")
        description: Human/LLM readable description
        args: Pydantic model describing the argument payload
    """

    name: str
    description: str
    args: type[ActionArgs] = NoArgs

    def parse(self, data: Mapping[str, Any] | None) -> ActionArgs:
        """
        Validate a payload against this action's argument model.

        Raises:
            ActionValidationError: If the payload is structurally invalid
        """
        if data is None:
            data = {}
        if not isinstance(data, Mapping):
            raise ActionValidationError(self.name, f"expected an object, got {type(data).__name__}")
        try:
            return self.args.model_validate(dict(data))
        except ValidationError as e:
            details = "; ".join(
                f"{'.'.join(str(x) for x in err['loc']) or '(root)'}: {err['msg']}"
                for err in e.errors()
            )
            raise ActionValidationError(self.name, details, e.errors()) from e

    def json_schema(self) -> dict[str, Any]:
        """JSON schema of the argument payload."""
        schema = self.args.model_json_schema()
        schema.pop("title", None)
        schema.setdefault("properties", {})
        return schema

    def fields(self) -> list[ActionField]:
        """Describe each argument: type, required flag, allowed values."""
        schema = self.json_schema()
        required = set(schema.get("required", []))
        result: list[ActionField] = []
        for name, prop in schema["properties"].items():
            # Optional fields are rendered as anyOf [<type>, null]
            variants = prop.get("anyOf", [prop])
            primary = next((v for v in variants if v.get("type") != "null"), prop)
            enum = primary.get("enum")
            result.append(
                ActionField(
                    name=name,
                    type=primary.get("type", "string"),
                    required=name in required,
                    description=prop.get("description", ""),
                    choices=tuple(enum) if enum else None,
                    minimum=prop.get("minimum", primary.get("minimum")),
                )
            )
        return result

    def to_tool(self) -> dict[str, Any]:
        """Tool declaration for LLM function calling."""
        return {
            "name": self.name,
            "description": self.description,
            "input_schema": self.json_schema(),
        }

    def usage(self) -> str:
        """One-line usage string, e.g. 'use <item> [target]'."""
        parts = [self.name]
        for f in self.fields():
            label = "|".join(f.choices) if f.choices else f.name
            parts.append(f"<{label}>" if f.required else f"[{label}]")
        return " ".join(parts)


class ActionRegistry(Mapping[str, ActionSpec]):
    """Read-only mapping of action name -> ActionSpec."""

    def __init__(self, specs: Iterable[ActionSpec]):
        self._specs: dict[str, ActionSpec] = {}
        for spec in specs:
            if spec.name in self._specs:
                raise ValueError(f"Duplicate action '{spec.name}'")
            self._specs[spec.name] = spec

    def __getitem__(self, name: str) -> ActionSpec:
        return self._specs[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._specs)

    def __len__(self) -> int:
        return len(self._specs)

    def __repr__(self) -> str:
        return f"ActionRegistry({list(self._specs)})"

    def to_tools(self) -> list[dict[str, Any]]:
        """Tool declarations for every action."""
        return [spec.to_tool() for spec in self._specs.values()]

    def describe(self) -> dict[str, dict[str, Any]]:
        """Serializable name -> JSON schema map."""
        return {name: spec.json_schema() for name, spec in self._specs.items()}

    def help_text(self) -> str:
        """Usage line per action."""
        return "\n".join(
            f"  {spec.usage()} - {spec.description}" for spec in self._specs.values()
        )


MOVE = ActionSpec("move", "Move in a direction (north, south, east, west)", MoveArgs)
LOOK = ActionSpec("look", "Look around the current room")
EXAMINE = ActionSpec("examine", "Examine an object, feature or item for more detail", ExamineArgs)
TAKE = ActionSpec("take", "Take an item and add it to your inventory", TakeArgs)
USE = ActionSpec("use", "Use an item from your inventory, optionally on a target", UseArgs)
INVENTORY = ActionSpec("inventory", "Check the items in your inventory")
HELP = ActionSpec("help", "Get help about how to play the game")

ADVENTURE_ACTIONS = ActionRegistry([MOVE, LOOK, EXAMINE, TAKE, USE, INVENTORY, HELP])

GATHER = ActionSpec("gather", "Send people to gather food", WorkersArgs)
CHOP = ActionSpec("chop", "Send people to chop wood", WorkersArgs)
BUILD = ActionSpec("build", "Build shelters to improve living conditions", BuildArgs)
END_TURN = ActionSpec("endTurn", "End the current day and process results")

STRATEGY_ACTIONS = ActionRegistry([GATHER, CHOP, BUILD, END_TURN])
