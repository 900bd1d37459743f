"""
cli.py

PURPOSE: Command-line interface for playing and play-testing games.
DEPENDENCIES: typer, rich

ARCHITECTURE NOTES:
The CLI provides commands for:
- games: List the bundled games
- play: Play a game as a human, replay a script, or let an LLM play-test it
- step: Apply one action to a save file (for agents that play turn by turn)
- validate: Validate a custom adventure map
- config: Show the effective configuration
"""

import asyncio
import json
import logging
import random
from pathlib import Path
from typing import Annotated, Any

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table
from rich.text import Text

from playtest import __version__
from playtest.config import Settings, get_settings
from playtest.engine.adventure import AdventureGame
from playtest.engine.session import Game, GameSession
from playtest.errors import ActionValidationError, InvalidRoomError, PlayerError
from playtest.games import ADVENTURES, GAMES, create_game, load_map_file
from playtest.llm.anthropic import create_anthropic_client
from playtest.models.session import GameResult, SessionState, StepResult
from playtest.observability import init_telemetry, shutdown_telemetry
from playtest.player import HumanPlayer, LLMPlayer, Player, PlayerEvent, ScriptedPlayer, play_game
from playtest.player.human import parse_action_line
from playtest.saves import load_or_create, save_game, save_path
from playtest.ui import plain

app = typer.Typer(
    name="playtest",
    help="Play and play-test text games as a human, a script or an LLM.",
    add_completion=False,
)

console = Console()


def configure_logging(settings: Settings) -> None:
    """Configure the root logger from settings."""
    level = logging.DEBUG if settings.debug else getattr(logging, settings.log_level.upper(), logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"playtest version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    _version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
) -> None:
    """Playtest - play games through one uniform action interface."""
    configure_logging(get_settings())


@app.command("games")
def list_games() -> None:
    """List the bundled games."""
    table = Table(title="Games")
    table.add_column("Name", style="bold cyan")
    table.add_column("Description")
    for name, description in GAMES.items():
        table.add_row(name, description)
    console.print(table)


def _build_game(name: str, map_file: Path | None, seed: int | None) -> Game:
    if map_file is not None:
        try:
            return AdventureGame(load_map_file(map_file))
        except ValidationError as e:
            plain.print_error(f"Invalid map file: {e}")
            raise typer.Exit(1) from None

    rng = random.Random(seed) if seed is not None else None
    try:
        return create_game(name, rng=rng)
    except KeyError:
        plain.print_error(f"Unknown game '{name}'. Available: {', '.join(GAMES)}")
        raise typer.Exit(1) from None


def _show_event(event: PlayerEvent, verbose: bool) -> None:
    """Display LLM player activity."""
    if event.type == "prompt":
        if verbose:
            plain.print_header("Game State")
            plain.print_message(event.content)
    elif event.type == "response":
        console.print(Text(event.content, style="italic dim"))
    elif event.type == "action" and event.data:
        args = json.dumps(event.data.get("args") or {})
        console.print(Text.assemble((f"> {event.data.get('action')} ", "bold cyan"), args))
    elif event.type == "error":
        plain.print_error(event.content)
    elif event.type == "system" and verbose:
        console.print(Text(event.content, style="dim"))


@app.command()
def play(
    game: Annotated[
        str | None,
        typer.Argument(help="Game to play (see 'playtest games')"),
    ] = None,
    ai: Annotated[
        bool,
        typer.Option("--ai", help="Let an LLM play-test the game"),
    ] = False,
    script: Annotated[
        Path | None,
        typer.Option(
            "--script",
            "-s",
            help="Replay actions from a JSON script",
            exists=True,
            readable=True,
        ),
    ] = None,
    max_steps: Annotated[
        int | None,
        typer.Option("--max-steps", "-m", help="Stop after this many actions", min=1),
    ] = None,
    map_file: Annotated[
        Path | None,
        typer.Option(
            "--map",
            help="Play a custom adventure map instead of a bundled game",
            exists=True,
            readable=True,
        ),
    ] = None,
    seed: Annotated[
        int | None,
        typer.Option("--seed", help="Random seed for games with random outcomes"),
    ] = None,
    feedback: Annotated[
        bool,
        typer.Option("--feedback/--no-feedback", help="Ask the LLM for play-test feedback at the end"),
    ] = True,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Show every narrative for AI and scripted play"),
    ] = False,
    debug: Annotated[
        bool,
        typer.Option("--debug", "-d", help="Show debug information after each step"),
    ] = False,
) -> None:
    """Play a game interactively, from a script, or with an LLM."""
    settings = get_settings()
    init_telemetry(settings.otel)

    if ai and script:
        plain.print_error("Use either --ai or --script, not both.")
        raise typer.Exit(1)

    session = GameSession(_build_game(game or settings.default_game, map_file, seed))
    limit = max_steps if max_steps is not None else settings.max_steps

    player: Player
    if ai:
        if not settings.llm.anthropic_api_key:
            plain.print_error("ANTHROPIC_API_KEY environment variable not set.")
            plain.print_error("Please set it to use --ai.")
            raise typer.Exit(1)
        client = create_anthropic_client(
            api_key=settings.llm.anthropic_api_key,
            model=settings.llm.model,
        )
        player = LLMPlayer(
            client,
            max_retries=settings.llm.max_retries,
            temperature=settings.llm.temperature,
            max_tokens=settings.llm.max_tokens,
            on_event=lambda event: _show_event(event, verbose),
        )
    elif script:
        try:
            player = ScriptedPlayer.from_file(script)
        except (json.JSONDecodeError, PlayerError) as e:
            plain.print_error(f"Invalid script: {e}")
            raise typer.Exit(1) from None
    else:
        player = HumanPlayer()

    interactive = isinstance(player, HumanPlayer)

    def on_step(step: int, name: str, args: dict[str, Any], outcome: StepResult) -> None:
        if not interactive:
            console.print(Text.assemble((f"Step {step}: ", "bold cyan"), (name, "yellow"), " ", json.dumps(args)))
            if isinstance(outcome, SessionState):
                plain.print_message(outcome.narrative if verbose else outcome.feedback)
            console.print()
        if debug:
            plain.print_debug(outcome.to_dict())

    plain.print_title(session.game.title)
    console.print()

    try:
        result = asyncio.run(
            play_game(
                session,
                player,
                max_steps=limit,
                on_step=on_step,
                collect_feedback=ai and feedback,
            )
        )
    except PlayerError as e:
        plain.print_error(f"Player error: {e}")
        raise typer.Exit(1) from None
    except (EOFError, KeyboardInterrupt):
        console.print()
        plain.print_message("Thanks for playing!")
        raise typer.Exit(0) from None
    finally:
        shutdown_telemetry()

    _print_result(result, show_description=not interactive)
    if isinstance(player, LLMPlayer):
        console.print(f"Tokens used: {player.usage.total_tokens} ({player.usage.calls} calls)")


def _print_result(result: GameResult, show_description: bool = True) -> None:
    console.print()
    if show_description:
        plain.print_game_over(result.success, result.description)
    console.print("[bold]─── Results ───[/bold]")
    console.print(f"Outcome: {'won' if result.success else 'not won'}")
    console.print(f"Turns: {result.turns}")
    for key, value in result.metadata.items():
        if key == "feedback":
            continue
        console.print(Text(f"{key}: {value}"))
    if "feedback" in result.metadata:
        console.print()
        plain.print_header("Play-test feedback")
        plain.print_message(result.metadata["feedback"])


@app.command()
def step(
    save_id: Annotated[str, typer.Argument(help="Name of the save file to play")],
    action: Annotated[
        list[str] | None,
        typer.Argument(help='Action and its arguments, e.g. "take key" (omit to show the state)'),
    ] = None,
    game: Annotated[
        str,
        typer.Option("--game", "-g", help="Adventure to start when the save does not exist"),
    ] = "cave",
) -> None:
    """Apply one action to a saved adventure, then save it again."""
    settings = get_settings()
    if game not in ADVENTURES:
        plain.print_error(f"Only adventures can be saved. Available: {', '.join(ADVENTURES)}")
        raise typer.Exit(1)

    try:
        path = save_path(save_id, settings)
        adventure, created = load_or_create(path, game)
    except ValueError as e:
        plain.print_error(str(e))
        raise typer.Exit(1) from None
    except (ValidationError, InvalidRoomError) as e:
        plain.print_error(f"Corrupt save file {save_id}: {e}")
        raise typer.Exit(1) from None

    session = GameSession(adventure)
    state = session.start()
    if created:
        console.print(f"[dim]New game '{adventure.title}' saved as {save_id}[/dim]")

    if not action:
        save_game(adventure, path)
        plain.print_message(state.narrative)
        plain.print_help(state.legal_actions)
        return

    try:
        name, args = parse_action_line(" ".join(action), state.legal_actions)
        outcome = session.step(name, args)
    except (ValueError, ActionValidationError) as e:
        plain.print_error(str(e))
        plain.print_help(state.legal_actions)
        raise typer.Exit(1) from None

    if isinstance(outcome, GameResult):
        # A finished game cannot be resumed
        path.unlink(missing_ok=True)
        _print_result(outcome)
        return

    save_game(adventure, path)
    plain.print_message(outcome.narrative)


@app.command()
def validate(
    map_file: Annotated[
        Path,
        typer.Argument(
            help="Path to the adventure map JSON file",
            exists=True,
            readable=True,
        ),
    ],
) -> None:
    """Validate an adventure map JSON file."""
    try:
        with open(map_file) as f:
            json.load(f)
    except json.JSONDecodeError as e:
        plain.print_error(f"Invalid JSON at line {e.lineno}: {e.msg}")
        raise typer.Exit(1) from None

    try:
        game_map = load_map_file(map_file)
    except ValidationError as e:
        plain.print_error("Validation errors:")
        for error in e.errors():
            loc = " -> ".join(str(x) for x in error["loc"])
            plain.print_error(f"  {loc}: {error['msg']}")
        raise typer.Exit(1) from None

    plain.print_success(f"Valid map: {game_map.title}")
    console.print(f"  Rooms: {len(game_map.rooms)}")
    console.print(f"  Items: {len(game_map.items)}")
    console.print(f"  Treasure: {game_map.treasure_item or '(none)'}")
    console.print(f"  Turn limit: {game_map.turn_limit or '(none)'}")
    console.print(f"  Puzzles: {len(game_map.puzzles)}")


@app.command("config")
def config_cmd() -> None:
    """Show the current configuration."""
    settings = get_settings()
    console.print("[bold]Current Configuration:[/bold]")
    console.print(f"  Data directory: {settings.data_dir}")
    console.print(f"  Log level: {settings.log_level}")
    console.print(f"  Debug: {settings.debug}")
    console.print(f"  Default game: {settings.default_game}")
    console.print(f"  Max steps: {settings.max_steps or '(unlimited)'}")
    console.print()
    console.print("[bold]LLM Settings:[/bold]")
    console.print(f"  Model: {settings.llm.model}")
    console.print(f"  Temperature: {settings.llm.temperature}")
    console.print(f"  Max tokens: {settings.llm.max_tokens}")
    console.print(f"  Max retries: {settings.llm.max_retries}")
    api_key_status = "set" if settings.llm.anthropic_api_key else "not set"
    console.print(f"  API Key: {api_key_status}")
    console.print()
    console.print("[bold]OpenTelemetry Settings:[/bold]")
    console.print(f"  Enabled: {settings.otel.enabled}")
    console.print(f"  Service name: {settings.otel.service_name}")
    endpoint_status = settings.otel.endpoint if settings.otel.endpoint else "(console only)"
    console.print(f"  Endpoint: {endpoint_status}")


if __name__ == "__main__":
    app()
