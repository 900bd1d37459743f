"""
anthropic.py

PURPOSE: Claude-backed LLMClient with tool calling.
DEPENDENCIES: anthropic SDK

ARCHITECTURE NOTES:
Requests are translated into Messages API parameters by _build_params().
When the request declares tools the model may answer with tool_use blocks;
_parse_content() turns them into ToolCall objects and also keeps every block
in plain dict form, so the caller can echo the assistant turn back verbatim
on the next request.

Each call runs inside an "llm.complete" span carrying model, token and
latency attributes.
"""

import logging
import time
from typing import Any

import anthropic

from playtest.llm.client import LLMClient, LLMRequest, LLMResponse, ToolCall
from playtest.observability import get_tracer

logger = logging.getLogger(__name__)
tracer = get_tracer(__name__)

DEFAULT_MODEL = "claude-sonnet-4-20250514"


def _build_params(model: str, request: LLMRequest) -> dict[str, Any]:
    """Messages API keyword arguments for a request."""
    params: dict[str, Any] = {
        "model": model,
        "max_tokens": request.max_tokens,
        # System text travels in its own field
        "messages": [{"role": m.role, "content": m.content} for m in request.messages if m.role != "system"],
    }
    if request.system:
        params["system"] = request.system
    if request.temperature is not None:
        params["temperature"] = request.temperature
    if request.tools:
        params["tools"] = request.tools
        params["tool_choice"] = {"type": "auto"}
    return params


def _parse_content(content: list[Any]) -> tuple[str, list[ToolCall], list[dict[str, Any]]]:
    """Split response blocks into (text, tool calls, echoable blocks)."""
    text_parts: list[str] = []
    calls: list[ToolCall] = []
    blocks: list[dict[str, Any]] = []
    for block in content:
        if block.type == "text":
            text_parts.append(block.text)
            blocks.append({"type": "text", "text": block.text})
        elif block.type == "tool_use":
            args = dict(block.input) if isinstance(block.input, dict) else {}
            calls.append(ToolCall(id=block.id, name=block.name, input=args))
            blocks.append({"type": "tool_use", "id": block.id, "name": block.name, "input": args})
    return "".join(text_parts), calls, blocks


class AnthropicClient(LLMClient):
    """
    LLMClient talking to the Anthropic Messages API.

    Args:
        api_key: API key; the SDK reads ANTHROPIC_API_KEY when None
        model: Model id used for every request
    """

    def __init__(self, api_key: str | None = None, model: str = DEFAULT_MODEL):
        self._client = anthropic.AsyncAnthropic(api_key=api_key)
        self._model = model

    @property
    def model_name(self) -> str:
        return self._model

    async def complete(self, request: LLMRequest) -> LLMResponse:
        """
        Run one Messages API call.

        Raises:
            anthropic.APIError: On transport or API failures (after the SDK's own retries)
        """
        with tracer.start_as_current_span("llm.complete") as span:
            span.set_attribute("llm.model", self._model)
            span.set_attribute("llm.max_tokens", request.max_tokens)
            span.set_attribute("llm.message_count", len(request.messages))
            span.set_attribute("llm.tool_count", len(request.tools or []))

            params = _build_params(self._model, request)
            logger.debug(f"Calling {self._model} with {len(params['messages'])} messages")

            started = time.perf_counter()
            try:
                response = await self._client.messages.create(**params)
            except anthropic.APIError as e:
                span.record_exception(e)
                raise
            latency_ms = (time.perf_counter() - started) * 1000

            text, calls, blocks = _parse_content(response.content)
            usage = response.usage

            span.set_attribute("llm.input_tokens", usage.input_tokens)
            span.set_attribute("llm.output_tokens", usage.output_tokens)
            span.set_attribute("llm.latency_ms", latency_ms)
            span.set_attribute("llm.stop_reason", response.stop_reason or "unknown")
            span.set_attribute("llm.tool_calls", len(calls))
            logger.debug(
                f"{self._model} answered in {latency_ms:.0f}ms "
                f"({usage.input_tokens} in / {usage.output_tokens} out, {len(calls)} tool calls)"
            )

            return LLMResponse(
                content=text,
                model=response.model,
                input_tokens=usage.input_tokens,
                output_tokens=usage.output_tokens,
                stop_reason=response.stop_reason,
                tool_calls=calls,
                content_blocks=blocks,
                raw_response=response,
            )


def create_anthropic_client(api_key: str | None = None, model: str = DEFAULT_MODEL) -> AnthropicClient:
    """Build an AnthropicClient (API key from the environment when omitted)."""
    return AnthropicClient(api_key=api_key, model=model)
