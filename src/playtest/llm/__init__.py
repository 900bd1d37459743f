"""LLM client module."""

from playtest.llm.anthropic import AnthropicClient, create_anthropic_client
from playtest.llm.client import LLMClient, LLMMessage, LLMRequest, LLMResponse, ToolCall

__all__ = [
    "AnthropicClient",
    "LLMClient",
    "LLMMessage",
    "LLMRequest",
    "LLMResponse",
    "ToolCall",
    "create_anthropic_client",
]
