"""
TEST DOC: LLM Client

WHAT: Tests for the Anthropic client wrapper
WHY: The LLM player depends on text and tool calls being parsed correctly
HOW: Use respx to mock HTTP calls to Anthropic API

CASES:
- Basic completion
- System prompt is forwarded
- Tool declarations are sent and tool_use blocks parsed

EDGE CASES:
- Mixed text and tool_use content
- API error status codes
"""

import json

import anthropic
import pytest
import respx
from httpx import Response

from playtest.llm.anthropic import AnthropicClient, create_anthropic_client
from playtest.llm.client import LLMMessage, LLMRequest
from playtest.models.action import ADVENTURE_ACTIONS

MODEL = "claude-sonnet-4-20250514"


def message(content: list[dict], stop_reason: str = "end_turn") -> dict:
    """Build an Anthropic messages API response body."""
    return {
        "id": "msg_123",
        "type": "message",
        "role": "assistant",
        "model": MODEL,
        "content": content,
        "stop_reason": stop_reason,
        "usage": {"input_tokens": 10, "output_tokens": 5},
    }


@pytest.fixture
def mock_anthropic():
    """Set up respx mock for Anthropic API."""
    with respx.mock(base_url="https://api.anthropic.com") as respx_mock:
        yield respx_mock


@pytest.fixture
def client():
    """Create a test client with a dummy API key."""
    return AnthropicClient(api_key="test-api-key", model=MODEL)


class TestAnthropicClient:
    """Tests for the Anthropic client."""

    @pytest.mark.asyncio
    async def test_complete_basic(self, mock_anthropic, client):
        """Basic completion returns response."""
        mock_anthropic.post("/v1/messages").mock(
            return_value=Response(200, json=message([{"type": "text", "text": "Hello, world!"}]))
        )

        response = await client.complete(LLMRequest(messages=[LLMMessage(role="user", content="Say hello")]))

        assert response.content == "Hello, world!"
        assert response.model == MODEL
        assert response.input_tokens == 10
        assert response.output_tokens == 5
        assert response.tool_calls == []
        assert response.content_blocks == [{"type": "text", "text": "Hello, world!"}]

    @pytest.mark.asyncio
    async def test_system_forwarded(self, mock_anthropic, client):
        """The system prompt goes in the top-level field, not the messages."""
        route = mock_anthropic.post("/v1/messages").mock(
            return_value=Response(200, json=message([{"type": "text", "text": "ok"}]))
        )

        await client.complete(
            LLMRequest(messages=[LLMMessage(role="user", content="Hi")], system="You are a tester.")
        )

        body = json.loads(route.calls.last.request.content)
        assert body["system"] == "You are a tester."
        assert [m["role"] for m in body["messages"]] == ["user"]
        assert "tools" not in body

    @pytest.mark.asyncio
    async def test_tools_sent(self, mock_anthropic, client):
        """Tool declarations and automatic tool choice are sent."""
        route = mock_anthropic.post("/v1/messages").mock(
            return_value=Response(200, json=message([{"type": "text", "text": "ok"}]))
        )

        await client.complete(
            LLMRequest(
                messages=[LLMMessage(role="user", content="Play")],
                tools=ADVENTURE_ACTIONS.to_tools(),
            )
        )

        body = json.loads(route.calls.last.request.content)
        assert [tool["name"] for tool in body["tools"]] == list(ADVENTURE_ACTIONS)
        assert body["tool_choice"] == {"type": "auto"}

    @pytest.mark.asyncio
    async def test_tool_use_parsed(self, mock_anthropic, client):
        """tool_use blocks become ToolCalls and are kept as content blocks."""
        mock_anthropic.post("/v1/messages").mock(
            return_value=Response(
                200,
                json=message(
                    [
                        {"type": "text", "text": "Heading east."},
                        {"type": "tool_use", "id": "toolu_1", "name": "move", "input": {"direction": "east"}},
                    ],
                    stop_reason="tool_use",
                ),
            )
        )

        response = await client.complete(LLMRequest(messages=[LLMMessage(role="user", content="Play")]))

        assert response.content == "Heading east."
        assert response.stop_reason == "tool_use"
        assert len(response.tool_calls) == 1
        call = response.tool_calls[0]
        assert (call.id, call.name, call.input) == ("toolu_1", "move", {"direction": "east"})
        assert response.content_blocks[1] == {
            "type": "tool_use",
            "id": "toolu_1",
            "name": "move",
            "input": {"direction": "east"},
        }

    @pytest.mark.asyncio
    async def test_list_content_passed_through(self, mock_anthropic, client):
        """Block-list message content (tool results) is sent unchanged."""
        route = mock_anthropic.post("/v1/messages").mock(
            return_value=Response(200, json=message([{"type": "text", "text": "ok"}]))
        )
        tool_result = {"type": "tool_result", "tool_use_id": "toolu_1", "content": "You move east."}

        await client.complete(LLMRequest(messages=[LLMMessage(role="user", content=[tool_result])]))

        body = json.loads(route.calls.last.request.content)
        assert body["messages"][0]["content"] == [tool_result]

    @pytest.mark.asyncio
    async def test_api_error(self, mock_anthropic, client):
        """Client errors surface as anthropic.APIError."""
        mock_anthropic.post("/v1/messages").mock(
            return_value=Response(
                400,
                json={"type": "error", "error": {"type": "invalid_request_error", "message": "bad"}},
            )
        )

        with pytest.raises(anthropic.APIError):
            await client.complete(LLMRequest(messages=[LLMMessage(role="user", content="Hi")]))

    def test_model_name(self, client):
        """Model name is accessible."""
        assert client.model_name == MODEL

    def test_factory(self):
        assert create_anthropic_client(api_key="k", model="claude-x").model_name == "claude-x"
