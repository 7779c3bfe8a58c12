"""Daybook providers: AI provider abstraction layer."""

from daybook.providers.base import AgentProvider, AgentResult, TokenUsage
from daybook.providers.config import ProviderConfig, resolve_default_model
from daybook.providers.pydantic_ai import PydanticAIProvider

__all__ = [
    "AgentProvider",
    "AgentResult",
    "ProviderConfig",
    "PydanticAIProvider",
    "TokenUsage",
    "resolve_default_model",
]
