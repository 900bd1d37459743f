"""
llm_player.py

PURPOSE: LLM-based player that play-tests games through tool calling.
DEPENDENCIES: LLM client, anthropic SDK (error types), models

ARCHITECTURE NOTES:
The player is game-agnostic: the legal actions of each step become tool
declarations, and the model answers by calling one of them. The whole
conversation is kept so the model remembers what it has tried.

Conversation shape (Anthropic messages):
- The narrative of each step is sent as the tool_result of the previous
  tool call (plain user text for the first step)
- Only the first tool call of a response is played; any extra calls get
  an "ignored" tool_result so the conversation stays well-formed
- A response with no tool call is treated as inner monologue: the model is
  nudged to act and asked again, up to max_retries times

Events (prompt, response, action, system, error) are reported to an
optional callback so a UI can show the model's reasoning live.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Literal

import anthropic

from playtest.errors import PlayerError
from playtest.llm.client import LLMClient, LLMMessage, LLMRequest, ToolCall
from playtest.models.action import ActionRegistry
from playtest.models.session import GameResult
from playtest.observability import get_tracer
from playtest.player.base import Player, PlayerAction

logger = logging.getLogger(__name__)
tracer = get_tracer(__name__)


DEFAULT_SYSTEM_PROMPT = (
    "You are a play-tester for a text-based game. You can take actions using tool usage, "
    "as any player. You can also output text as your inner monologue, either as your chain "
    "of thought to help you plan your actions, or as comment intended for the game "
    "developers. However, your text output will not advance the game. Only one tool can be "
    "used at a time."
)

IGNORED_TOOL_MESSAGE = "Please only use one tool at a time. This tool call has been ignored."
NO_ACTION_MESSAGE = (
    "Assistant inner monologue has been noted, but no in-game action was taken. "
    "Proceed with your next action."
)
FEEDBACK_PROMPT = "Please provide feedback on the game."

EventType = Literal["thinking", "response", "error", "action", "prompt", "system"]


@dataclass
class PlayerEvent:
    """Something that happened while the LLM player was deciding."""

    type: EventType
    content: str
    data: dict[str, Any] | None = None


@dataclass
class TokenUsage:
    """Running token totals for a play session."""

    input_tokens: int = 0
    output_tokens: int = 0
    calls: int = 0
    per_call: list[tuple[int, int]] = field(default_factory=list)

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens


class LLMPlayer(Player):
    """
    A player that lets an LLM choose every action.

    Args:
        client: The LLM client used for decisions
        max_retries: Attempts to get a tool call before giving up
        temperature: Sampling temperature
        max_tokens: Response limit per call
        system_prompt: Overrides the default play-tester prompt
        on_event: Optional callback for PlayerEvents
    """

    def __init__(
        self,
        client: LLMClient,
        max_retries: int = 3,
        temperature: float = 0.3,
        max_tokens: int = 1024,
        system_prompt: str | None = None,
        on_event: Callable[[PlayerEvent], None] | None = None,
    ):
        self._client = client
        self._max_retries = max_retries
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._system = system_prompt or DEFAULT_SYSTEM_PROMPT
        self._on_event = on_event
        self._messages: list[LLMMessage] = []
        self._last_tool_id: str | None = None
        self.usage = TokenUsage()

    @property
    def messages(self) -> list[LLMMessage]:
        """A copy of the conversation so far."""
        return list(self._messages)

    async def ask_for_action(self, narrative: str, actions: ActionRegistry) -> PlayerAction:
        with tracer.start_as_current_span("llm_player.ask_for_action") as span:
            span.set_attribute("player.action_count", len(actions))

            self._push_observation(narrative)
            self._emit("prompt", narrative)
            self._emit("thinking", "Analyzing game state...")

            try:
                call = await self._get_tool_call(actions.to_tools())
            except PlayerError as e:
                span.record_exception(e)
                self._emit("error", f"Error selecting action: {e}")
                raise

            self._last_tool_id = call.id
            span.set_attribute("player.action", call.name)
            self._emit("action", f"Selected action: {call.name}", {"action": call.name, "args": call.input})
            logger.debug(f"LLM chose {call.name} {call.input}")
            return call.name, dict(call.input)

    async def _get_tool_call(self, tools: list[dict[str, Any]]) -> ToolCall:
        for attempt in range(1, self._max_retries + 1):
            request = LLMRequest(
                messages=list(self._messages),
                system=self._system,
                temperature=self._temperature,
                max_tokens=self._max_tokens,
                tools=tools,
            )
            try:
                response = await self._client.complete(request)
            except anthropic.APIError as e:
                logger.warning(f"LLM call failed (attempt {attempt}/{self._max_retries}): {e}")
                self._emit("error", str(e))
                continue

            self._track_usage(response.input_tokens, response.output_tokens)
            self._push_assistant(response.content_blocks)
            if response.content:
                self._emit("response", response.content)

            first, *rest = response.tool_calls or [None]
            if rest:
                self._push_user(
                    [self._tool_result(extra.id, IGNORED_TOOL_MESSAGE) for extra in rest]
                )
                self._emit("system", IGNORED_TOOL_MESSAGE)

            if first is not None:
                return first

            logger.warning(f"No tool call in response (attempt {attempt}/{self._max_retries})")
            self._push_user([{"type": "text", "text": NO_ACTION_MESSAGE}])
            self._emit("system", NO_ACTION_MESSAGE)

        raise PlayerError(f"No valid tool use found after {self._max_retries} retries")

    async def ask_for_feedback(self, result: GameResult) -> str | None:
        """
        Ask the model for play-test feedback once the game is over.

        Returns:
            The model's free-text feedback, or None if the API call failed
        """
        with tracer.start_as_current_span("llm_player.ask_for_feedback") as span:
            self._push_observation(f"Game result:\n\n{result.description}")
            self._push_user([{"type": "text", "text": FEEDBACK_PROMPT}])

            try:
                response = await self._client.complete(
                    LLMRequest(
                        messages=list(self._messages),
                        system=self._system,
                        temperature=self._temperature,
                        max_tokens=self._max_tokens,
                    )
                )
            except anthropic.APIError as e:
                # The game is already decided; feedback is optional
                span.record_exception(e)
                logger.warning(f"Feedback request failed: {e}")
                self._emit("error", f"Could not collect feedback: {e}")
                return None
            self._track_usage(response.input_tokens, response.output_tokens)
            self._push_assistant(response.content_blocks)
            self._emit("response", response.content)
            return response.content

    def output_result(self, text: str) -> None:
        self._push_observation(text)
        self._emit("system", text)

    async def cleanup(self) -> None:
        self._messages = []
        self._last_tool_id = None

    def _push_observation(self, text: str) -> None:
        """Send game text, answering the outstanding tool call if there is one."""
        if self._last_tool_id:
            self._push_user([self._tool_result(self._last_tool_id, text)])
            self._last_tool_id = None
        else:
            self._push_user([{"type": "text", "text": text}])

    def _push_assistant(self, blocks: list[dict[str, Any]]) -> None:
        # The API rejects empty assistant turns
        self._messages.append(LLMMessage(role="assistant", content=blocks or [{"type": "text", "text": "..."}]))

    def _push_user(self, blocks: list[dict[str, Any]]) -> None:
        """Append user content, merging consecutive user turns."""
        if self._messages and self._messages[-1].role == "user":
            previous = self._messages[-1].content
            if isinstance(previous, str):
                previous = [{"type": "text", "text": previous}]
            blocks = previous + blocks
            self._messages.pop()
        # tool_result blocks must lead the user turn
        ordered = [b for b in blocks if b["type"] == "tool_result"]
        ordered += [b for b in blocks if b["type"] != "tool_result"]
        self._messages.append(LLMMessage(role="user", content=ordered))

    @staticmethod
    def _tool_result(tool_id: str, text: str) -> dict[str, Any]:
        return {"type": "tool_result", "tool_use_id": tool_id, "content": text}

    def _track_usage(self, input_tokens: int, output_tokens: int) -> None:
        self.usage.input_tokens += input_tokens
        self.usage.output_tokens += output_tokens
        self.usage.calls += 1
        self.usage.per_call.append((input_tokens, output_tokens))

    def _emit(self, event_type: EventType, content: str, data: dict[str, Any] | None = None) -> None:
        if self._on_event:
            self._on_event(PlayerEvent(type=event_type, content=content, data=data))
