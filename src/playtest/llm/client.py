"""
client.py

PURPOSE: Abstract LLM client interface.
DEPENDENCIES: None (pure Python + typing)

ARCHITECTURE NOTES:
This module defines the interface that all LLM clients must implement.
Messages use the Anthropic content-block shape: content is either a plain
string or a list of blocks ({"type": "text"}, {"type": "tool_use"},
{"type": "tool_result"}). A response carries its content blocks so the
caller can append them to the conversation unchanged.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


@dataclass
class ToolCall:
    """One tool invocation requested by the model."""

    id: str
    name: str
    input: dict[str, Any] = field(default_factory=dict)


@dataclass
class LLMResponse:
    """Response from an LLM call."""

    content: str
    model: str
    input_tokens: int = 0
    output_tokens: int = 0
    stop_reason: str | None = None
    tool_calls: list[ToolCall] = field(default_factory=list)
    content_blocks: list[dict[str, Any]] = field(default_factory=list)
    raw_response: Any = None


@dataclass
class LLMMessage:
    """A message in a conversation."""

    role: str  # "user" or "assistant"
    content: str | list[dict[str, Any]]


@dataclass
class LLMRequest:
    """Request to an LLM."""

    messages: list[LLMMessage] = field(default_factory=list)
    system: str | None = None
    temperature: float = 0.7
    max_tokens: int = 4096
    tools: list[dict[str, Any]] | None = None  # Tool declarations for function calling


class LLMClient(ABC):
    """Abstract base class for LLM clients."""

    @abstractmethod
    async def complete(self, request: LLMRequest) -> LLMResponse:
        """
        Send a completion request to the LLM.

        When the request declares tools the model may answer with tool
        calls instead of (or alongside) text; they are returned in
        LLMResponse.tool_calls in the order the model produced them.

        Args:
            request: The request containing messages and parameters

        Returns:
            LLMResponse with the generated content
        """
        ...

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Return the name of the model being used."""
        ...
