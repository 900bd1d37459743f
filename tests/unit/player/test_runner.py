"""
TEST DOC: Driving Loop

WHAT: Tests for play_game() and the scripted player
WHY: The loop is shared by every way of playing; it must end cleanly in every case
HOW: Replay scripts against the bundled games

CASES:
- Scripted cave puzzle win
- Step callback sees every accepted step
- max_steps forced termination
- Player cleanup always runs

EDGE CASES:
- Script runs out before the game ends
- Rejected payloads are shown back to the player
- Script entries in each supported format
"""

import json
from pathlib import Path
from typing import Any

import pytest

from playtest.engine.session import GameSession
from playtest.errors import PlayerError, SessionStateError
from playtest.games import create_session
from playtest.models.action import ActionRegistry
from playtest.models.session import GameResult
from playtest.player.base import Player, PlayerAction
from playtest.player.runner import play_game
from playtest.player.scripted import ScriptedPlayer

CAVE_PUZZLE = [
    ["move", {"direction": "east"}],
    ["move", {"direction": "east"}],
    {"action": "take", "args": {"item": "key"}},
    ["use", {"item": "key", "target": "pedestal"}],
]


class RecordingPlayer(ScriptedPlayer):
    """ScriptedPlayer that records cleanup and feedback requests."""

    def __init__(self, script: list[Any]):
        super().__init__(script)
        self.cleaned_up = 0
        self.feedback_requests = 0

    async def ask_for_feedback(self, result: GameResult) -> str | None:
        self.feedback_requests += 1
        return "Fun puzzle."

    async def cleanup(self) -> None:
        self.cleaned_up += 1


class TestScriptedPlayer:
    """Tests for script loading and replay."""

    @pytest.mark.asyncio
    async def test_entry_formats(self):
        player = ScriptedPlayer(["look", ["move", {"direction": "east"}], {"action": "take", "args": {"item": "x"}}])
        actions = ActionRegistry([])
        assert await player.ask_for_action("", actions) == ("look", {})
        assert await player.ask_for_action("", actions) == ("move", {"direction": "east"})
        assert await player.ask_for_action("", actions) == ("take", {"item": "x"})
        assert player.remaining == 0

    @pytest.mark.asyncio
    async def test_exhausted(self):
        player = ScriptedPlayer([])
        with pytest.raises(PlayerError, match="exhausted"):
            await player.ask_for_action("", ActionRegistry([]))

    def test_invalid_entry(self):
        with pytest.raises(PlayerError, match="Invalid script entry"):
            ScriptedPlayer([42])

    def test_from_file(self, tmp_path: Path):
        path = tmp_path / "script.json"
        path.write_text(json.dumps(CAVE_PUZZLE))
        assert ScriptedPlayer.from_file(path).remaining == 4

    def test_from_file_requires_list(self, tmp_path: Path):
        path = tmp_path / "script.json"
        path.write_text(json.dumps({"action": "look"}))
        with pytest.raises(PlayerError, match="JSON list"):
            ScriptedPlayer.from_file(path)


class TestPlayGame:
    """Tests for play_game()."""

    @pytest.mark.asyncio
    async def test_cave_puzzle(self):
        player = ScriptedPlayer(CAVE_PUZZLE)
        result = await play_game(create_session("cave"), player)
        assert result.success
        assert "solved the puzzle" in result.description
        assert player.results == [result.description]
        assert "== Cave Entrance ==" in player.narratives[0]

    @pytest.mark.asyncio
    async def test_on_step(self):
        seen: list[tuple[int, str]] = []
        await play_game(
            create_session("cave"),
            ScriptedPlayer(CAVE_PUZZLE),
            on_step=lambda step, name, args, outcome: seen.append((step, name)),
        )
        assert seen == [(1, "move"), (2, "move"), (3, "take"), (4, "use")]

    @pytest.mark.asyncio
    async def test_max_steps(self):
        player = RecordingPlayer(["look"] * 10)
        result = await play_game(create_session("cave"), player, max_steps=3)
        assert not result.success
        assert result.metadata["termination_reason"] == "max_steps"
        assert result.turns == 3
        assert player.remaining == 7
        assert player.cleaned_up == 1

    @pytest.mark.asyncio
    async def test_strategy_max_steps(self):
        result = await play_game(create_session("strategy"), ScriptedPlayer(["endTurn"]), max_steps=1)
        assert result.metadata["termination_reason"] == "max_steps"
        assert result.metadata["day"] == 2

    @pytest.mark.asyncio
    async def test_script_exhausted(self):
        player = RecordingPlayer(["look"])
        session = create_session("cave")
        with pytest.raises(PlayerError):
            await play_game(session, player)
        assert player.cleaned_up == 1

    @pytest.mark.asyncio
    async def test_rejected_payload_reshown(self):
        player = ScriptedPlayer([["move", {"direction": "up"}], *CAVE_PUZZLE])
        session = create_session("cave")
        result = await play_game(session, player)
        assert result.success
        assert "Invalid arguments for 'move'" in player.narratives[1]
        assert result.turns == 4

    @pytest.mark.asyncio
    async def test_unknown_action_is_soft(self):
        player = ScriptedPlayer(["dance", *CAVE_PUZZLE])
        result = await play_game(create_session("cave"), player)
        assert result.success
        assert 'Action "dance" not recognized' in player.narratives[1]

    @pytest.mark.asyncio
    async def test_feedback_collected(self):
        player = RecordingPlayer(CAVE_PUZZLE)
        result = await play_game(create_session("cave"), player, collect_feedback=True)
        assert result.metadata["feedback"] == "Fun puzzle."
        assert player.feedback_requests == 1

    @pytest.mark.asyncio
    async def test_started_session_rejected(self, cave_session: GameSession):
        player = RecordingPlayer(CAVE_PUZZLE)
        with pytest.raises(SessionStateError, match="already started"):
            await play_game(cave_session, player)
        assert player.cleaned_up == 1


class TestPlayerContract:
    """The base class supplies no-op defaults."""

    @pytest.mark.asyncio
    async def test_defaults(self):
        class Minimal(Player):
            async def ask_for_action(self, narrative: str, actions: ActionRegistry) -> PlayerAction:
                return "look", {}

            def output_result(self, text: str) -> None:
                pass

        player = Minimal()
        assert await player.ask_for_feedback(GameResult(description="x")) is None
        await player.cleanup()
