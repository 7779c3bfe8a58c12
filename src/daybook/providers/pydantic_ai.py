"""Pydantic AI provider implementation.

Wraps Pydantic AI Agent for standardized usage tracking and timing.
"""

import time
from typing import Any

from pydantic_ai import Agent
from pydantic_ai.models import KnownModelName, Model
from pydantic_ai.models.test import TestModel

from daybook.providers.base import AgentProvider, AgentResult, TokenUsage


class PydanticAIProvider[OutputT](AgentProvider[OutputT]):
    """Pydantic AI implementation of AgentProvider.

    Example:
        provider = PydanticAIProvider(
            model="anthropic:claude-3-5-sonnet-20241022",
            output_type=str,
            model_settings={"max_tokens": 100, "temperature": 0.7},
        )
    """

    def __init__(
        self,
        model: Model | KnownModelName | TestModel | str,
        output_type: type[OutputT],
        system_prompt: str = "",
        model_settings: dict[str, object] | None = None,
    ) -> None:
        """Initialize provider with model and output type.

        Args:
            model: Pydantic AI model (Model, shorthand string or TestModel)
            output_type: Type of output (str for summaries)
            system_prompt: Optional system prompt for the agent
            model_settings: Default pydantic-ai model settings for every run
        """
        self._agent: Agent[None, OutputT] = Agent(
            model=model, output_type=output_type, system_prompt=system_prompt
        )
        self._model_settings = model_settings

        self._model_name, self._provider_name = self._parse_model_name(model)

    def _parse_model_name(
        self, model: Model | KnownModelName | TestModel | str
    ) -> tuple[str, str]:
        """Extract model name and provider from model identifier.

        Args:
            model: Model specification

        Returns:
            Tuple of (model_name, provider_name)
        """
        if isinstance(model, TestModel):
            return ("test", "test")

        if isinstance(model, str):
            # Handle shorthand like "anthropic:claude-3-5-sonnet"
            if ":" in model:
                provider, model_name = model.split(":", 1)
                return (model_name, provider)
            return (model, "unknown")

        model_str = str(model)
        if ":" in model_str:
            provider, model_name = model_str.split(":", 1)
            return (model_name, provider)
        return (model_str, "unknown")

    @property
    def model_name(self) -> str:
        return self._model_name

    async def invoke(
        self,
        prompt: str,
        **kwargs: Any,
    ) -> AgentResult[OutputT]:
        """Invoke the agent with a prompt.

        Args:
            prompt: User prompt
            **kwargs: Additional arguments (passed to agent.run)

        Returns:
            AgentResult with output, usage and timing
        """
        if self._model_settings is not None and "model_settings" not in kwargs:
            kwargs["model_settings"] = self._model_settings

        start = time.monotonic()
        result = await self._agent.run(prompt, **kwargs)
        duration_ms = int((time.monotonic() - start) * 1000)

        run_usage = result.usage()
        usage = TokenUsage(
            input_tokens=run_usage.input_tokens or 0,
            output_tokens=run_usage.output_tokens or 0,
            total_tokens=run_usage.total_tokens or 0,
            requests=run_usage.requests or 1,
        )

        return AgentResult(
            output=result.output,
            usage=usage,
            model=self._model_name,
            provider=self._provider_name,
            duration_ms=duration_ms,
        )
