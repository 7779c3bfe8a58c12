"""Core provider abstractions.

This module defines the base types for model invocations:
- TokenUsage: token counts for a single call
- AgentResult: output of a call plus usage and timing
- AgentProvider: abstract base class for provider implementations

No pydantic-ai dependency here.
"""

from abc import ABC, abstractmethod

from pydantic import BaseModel, ConfigDict


class TokenUsage(BaseModel):
    """Token usage for one model call.

    Maps directly to Pydantic AI RunUsage. All counts default to 0.
    """

    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0
    requests: int = 1

    model_config = ConfigDict(frozen=True)


class AgentResult[OutputT](BaseModel):
    """Result from a provider invocation.

    Generic over output type; summaries use ``str``.
    """

    output: OutputT
    usage: TokenUsage
    model: str
    provider: str
    duration_ms: int


class AgentProvider[OutputT](ABC):
    """Abstract base class for all model providers."""

    @abstractmethod
    async def invoke(
        self,
        prompt: str,
        **kwargs: object,
    ) -> AgentResult[OutputT]:
        """Invoke the model with a prompt.

        Args:
            prompt: User prompt to send to the model
            **kwargs: Additional provider-specific arguments

        Returns:
            AgentResult with typed output, usage stats, and metadata
        """
        ...
