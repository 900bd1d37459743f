"""
TEST DOC: LLM Player

WHAT: Tests for the tool-calling LLM player against a mocked Anthropic API
WHY: The conversation must stay well-formed across turns, retries and extra tool calls
HOW: Use respx to return scripted messages API responses and inspect the requests sent

CASES:
- A tool call becomes the chosen action
- The next observation answers the previous tool call
- Events reach the callback
- Full cave playthrough with feedback

EDGE CASES:
- Several tool calls in one response
- Responses with no tool call
- API errors are retried
- Retries exhausted
- Feedback request fails after the game is won
"""

import json
from typing import Any

import pytest
import respx
from httpx import Response

from playtest.errors import PlayerError
from playtest.games import create_session
from playtest.llm.anthropic import AnthropicClient
from playtest.models.action import ADVENTURE_ACTIONS
from playtest.player.llm_player import (
    IGNORED_TOOL_MESSAGE,
    NO_ACTION_MESSAGE,
    LLMPlayer,
    PlayerEvent,
)
from playtest.player.runner import play_game

MODEL = "claude-sonnet-4-20250514"


def reply(*content: dict[str, Any]) -> Response:
    """A messages API response carrying the given content blocks."""
    has_tool = any(block["type"] == "tool_use" for block in content)
    return Response(
        200,
        json={
            "id": "msg_123",
            "type": "message",
            "role": "assistant",
            "model": MODEL,
            "content": list(content),
            "stop_reason": "tool_use" if has_tool else "end_turn",
            "usage": {"input_tokens": 20, "output_tokens": 7},
        },
    )


def tool_use(tool_id: str, name: str, **args: Any) -> dict[str, Any]:
    return {"type": "tool_use", "id": tool_id, "name": name, "input": args}


def text(value: str) -> dict[str, Any]:
    return {"type": "text", "text": value}


def body(route: respx.Route, index: int = -1) -> dict[str, Any]:
    """The JSON body of a recorded request."""
    return json.loads(route.calls[index].request.content)


@pytest.fixture
def mock_anthropic():
    """Set up respx mock for Anthropic API."""
    with respx.mock(base_url="https://api.anthropic.com") as respx_mock:
        yield respx_mock


@pytest.fixture
def client():
    return AnthropicClient(api_key="test-api-key", model=MODEL)


class TestAskForAction:
    """Tests for choosing actions."""

    @pytest.mark.asyncio
    async def test_tool_call_returned(self, mock_anthropic, client):
        route = mock_anthropic.post("/v1/messages").mock(
            return_value=reply(text("Let me go east."), tool_use("toolu_1", "move", direction="east"))
        )
        player = LLMPlayer(client)

        action = await player.ask_for_action("You are at the cave entrance.", ADVENTURE_ACTIONS)

        assert action == ("move", {"direction": "east"})
        sent = body(route)
        assert sent["messages"] == [
            {"role": "user", "content": [{"type": "text", "text": "You are at the cave entrance."}]}
        ]
        assert {tool["name"] for tool in sent["tools"]} == set(ADVENTURE_ACTIONS)
        assert "play-tester" in sent["system"]
        assert player.usage.calls == 1
        assert player.usage.total_tokens == 27

    @pytest.mark.asyncio
    async def test_observation_answers_tool_call(self, mock_anthropic, client):
        route = mock_anthropic.post("/v1/messages").mock(
            side_effect=[
                reply(tool_use("toolu_1", "move", direction="east")),
                reply(tool_use("toolu_2", "look")),
            ]
        )
        player = LLMPlayer(client)

        await player.ask_for_action("Entrance", ADVENTURE_ACTIONS)
        await player.ask_for_action("Main Chamber", ADVENTURE_ACTIONS)

        messages = body(route)["messages"]
        assert [m["role"] for m in messages] == ["user", "assistant", "user"]
        assert messages[1]["content"] == [tool_use("toolu_1", "move", direction="east")]
        assert messages[2]["content"] == [
            {"type": "tool_result", "tool_use_id": "toolu_1", "content": "Main Chamber"}
        ]

    @pytest.mark.asyncio
    async def test_extra_tool_calls_ignored(self, mock_anthropic, client):
        route = mock_anthropic.post("/v1/messages").mock(
            side_effect=[
                reply(tool_use("toolu_1", "move", direction="east"), tool_use("toolu_2", "take", item="key")),
                reply(tool_use("toolu_3", "look")),
            ]
        )
        player = LLMPlayer(client)

        assert await player.ask_for_action("Entrance", ADVENTURE_ACTIONS) == ("move", {"direction": "east"})
        await player.ask_for_action("Main Chamber", ADVENTURE_ACTIONS)

        last_user = body(route)["messages"][-1]
        assert last_user["role"] == "user"
        answered = {block["tool_use_id"]: block["content"] for block in last_user["content"]}
        assert answered == {"toolu_2": IGNORED_TOOL_MESSAGE, "toolu_1": "Main Chamber"}

    @pytest.mark.asyncio
    async def test_nudged_after_monologue(self, mock_anthropic, client):
        route = mock_anthropic.post("/v1/messages").mock(
            side_effect=[
                reply(text("Hmm, I wonder what is east.")),
                reply(tool_use("toolu_1", "move", direction="east")),
            ]
        )
        player = LLMPlayer(client)

        assert await player.ask_for_action("Entrance", ADVENTURE_ACTIONS) == ("move", {"direction": "east"})
        assert route.call_count == 2
        messages = body(route)["messages"]
        assert [m["role"] for m in messages] == ["user", "assistant", "user"]
        assert messages[2]["content"] == [{"type": "text", "text": NO_ACTION_MESSAGE}]

    @pytest.mark.asyncio
    async def test_retries_exhausted(self, mock_anthropic, client):
        route = mock_anthropic.post("/v1/messages").mock(return_value=reply(text("Just thinking.")))
        events: list[PlayerEvent] = []
        player = LLMPlayer(client, max_retries=2, on_event=events.append)

        with pytest.raises(PlayerError, match="No valid tool use found after 2 retries"):
            await player.ask_for_action("Entrance", ADVENTURE_ACTIONS)
        assert route.call_count == 2
        assert events[-1].type == "error"

    @pytest.mark.asyncio
    async def test_api_error_retried(self, mock_anthropic, client):
        route = mock_anthropic.post("/v1/messages").mock(
            side_effect=[
                Response(400, json={"type": "error", "error": {"type": "invalid_request_error", "message": "bad"}}),
                reply(tool_use("toolu_1", "look")),
            ]
        )
        events: list[PlayerEvent] = []
        player = LLMPlayer(client, on_event=events.append)

        assert await player.ask_for_action("Entrance", ADVENTURE_ACTIONS) == ("look", {})
        assert route.call_count == 2
        assert "error" in [event.type for event in events]
        # Failed calls leave no trace in the conversation
        assert [m.role for m in player.messages] == ["user", "assistant"]

    @pytest.mark.asyncio
    async def test_events(self, mock_anthropic, client):
        mock_anthropic.post("/v1/messages").mock(
            return_value=reply(text("East looks promising."), tool_use("toolu_1", "move", direction="east"))
        )
        events: list[PlayerEvent] = []
        player = LLMPlayer(client, on_event=events.append)

        await player.ask_for_action("Entrance", ADVENTURE_ACTIONS)

        assert [event.type for event in events] == ["prompt", "thinking", "response", "action"]
        assert events[0].content == "Entrance"
        assert events[2].content == "East looks promising."
        assert events[3].data == {"action": "move", "args": {"direction": "east"}}


class TestFullGame:
    """End-to-end play through play_game()."""

    @pytest.mark.asyncio
    async def test_cave_with_feedback(self, mock_anthropic, client):
        route = mock_anthropic.post("/v1/messages").mock(
            side_effect=[
                reply(tool_use("toolu_1", "move", direction="east")),
                reply(tool_use("toolu_2", "move", direction="east")),
                reply(tool_use("toolu_3", "take", item="key")),
                reply(tool_use("toolu_4", "use", item="key", target="pedestal")),
                reply(text("A short but satisfying puzzle.")),
            ]
        )
        player = LLMPlayer(client)

        result = await play_game(create_session("cave"), player, collect_feedback=True)

        assert result.success
        assert result.turns == 4
        assert result.metadata["feedback"] == "A short but satisfying puzzle."
        assert route.call_count == 5

        feedback_request = body(route)
        assert "tools" not in feedback_request
        final_user = feedback_request["messages"][-1]["content"]
        assert final_user[0]["type"] == "tool_result"
        assert final_user[0]["tool_use_id"] == "toolu_4"
        assert final_user[-1] == {"type": "text", "text": "Please provide feedback on the game."}

        # cleanup() cleared the conversation
        assert player.messages == []

    @pytest.mark.asyncio
    async def test_feedback_failure_keeps_result(self, mock_anthropic, client):
        route = mock_anthropic.post("/v1/messages").mock(
            side_effect=[
                reply(tool_use("toolu_1", "move", direction="east")),
                reply(tool_use("toolu_2", "move", direction="east")),
                reply(tool_use("toolu_3", "take", item="key")),
                reply(tool_use("toolu_4", "use", item="key", target="pedestal")),
                Response(400, json={"type": "error", "error": {"type": "invalid_request_error", "message": "bad"}}),
            ]
        )
        events: list[PlayerEvent] = []
        player = LLMPlayer(client, on_event=events.append)

        result = await play_game(create_session("cave"), player, collect_feedback=True)

        assert result.success
        assert "solved the puzzle" in result.description
        assert "feedback" not in result.metadata
        assert route.call_count == 5
        assert events[-1].type == "error"
        assert "Could not collect feedback" in events[-1].content

    @pytest.mark.asyncio
    async def test_bad_arguments_shown_to_model(self, mock_anthropic, client):
        route = mock_anthropic.post("/v1/messages").mock(
            side_effect=[
                reply(tool_use("toolu_1", "move", direction="up")),
                reply(tool_use("toolu_2", "look")),
            ]
        )
        player = LLMPlayer(client)

        result = await play_game(create_session("cave"), player, max_steps=2)

        assert result.metadata["termination_reason"] == "max_steps"
        answer = body(route)["messages"][-1]["content"][0]
        assert answer["tool_use_id"] == "toolu_1"
        assert "Invalid arguments for 'move'" in answer["content"]
