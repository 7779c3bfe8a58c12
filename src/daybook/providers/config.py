"""Provider configuration models.

Uses BaseModel, not BaseSettings. Environment lookups are explicit.
"""

import os

from pydantic import BaseModel

DEFAULT_SUMMARY_MODEL = "anthropic:claude-3-5-sonnet-20241022"


def resolve_default_model() -> str:
    """Resolve the summarization model from the environment.

    Checks in order:
    1. DAYBOOK_MODEL set → that model string, verbatim
    2. ANTHROPIC_API_KEY set → the default Anthropic model
    3. Neither → raise RuntimeError with clear instructions

    Returns:
        Full model string ready for PydanticAIProvider.
    """
    override = os.environ.get("DAYBOOK_MODEL")
    if override:
        return override

    if os.environ.get("ANTHROPIC_API_KEY"):
        return DEFAULT_SUMMARY_MODEL

    msg = (
        "No summarization model configured. Either:\n"
        "  1. Set ANTHROPIC_API_KEY environment variable, or\n"
        "  2. Set DAYBOOK_MODEL (e.g. DAYBOOK_MODEL=openai:gpt-4o-mini), or\n"
        "  3. Pass --model explicitly"
    )
    raise RuntimeError(msg)


class ProviderConfig(BaseModel):
    """Configuration for the summarization model call.

    Replies are a single sentence, so max_tokens stays small.
    """

    model: str = DEFAULT_SUMMARY_MODEL
    max_tokens: int = 100
    temperature: float | None = 0.7
    timeout_seconds: int = 30

    def model_settings(self) -> dict[str, object]:
        """Build the pydantic-ai ``model_settings`` mapping for a run."""
        settings: dict[str, object] = {
            "max_tokens": self.max_tokens,
            "timeout": self.timeout_seconds,
        }
        if self.temperature is not None:
            settings["temperature"] = self.temperature
        return settings
