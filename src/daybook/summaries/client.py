"""Summarization client: one model call per project summary.

Failures are raised as SummarizationError subclasses so callers can tell a
rate limit from a bad reply; the coordinator treats them all alike.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Protocol

from pydantic_ai.exceptions import AgentRunError, ModelHTTPError, UnexpectedModelBehavior

from daybook.journal.models import Entry
from daybook.providers.base import AgentProvider, TokenUsage
from daybook.summaries.prompts import build_prompt

logger = logging.getLogger(__name__)


class SummarizationError(Exception):
    """Base class for summarization backend failures."""


class NoEntriesError(SummarizationError):
    """Raised when asked to summarize a project without entries."""


class RateLimitError(SummarizationError):
    """Raised when the backend rejects the call with HTTP 429."""


class BackendUnavailableError(SummarizationError):
    """Raised on transport failures and non-success responses."""


class MalformedReplyError(SummarizationError):
    """Raised when the backend reply holds no usable summary."""


class SummaryBackend(Protocol):
    """Anything that can turn a project's entries into summary text."""

    async def summarize(self, project_name: str, entries: Sequence[Entry]) -> str: ...


class SummarizationClient:
    """SummaryBackend built on an AgentProvider."""

    def __init__(self, provider: AgentProvider[str]) -> None:
        self.provider = provider
        self.last_usage: TokenUsage | None = None

    async def summarize(self, project_name: str, entries: Sequence[Entry]) -> str:
        """Summarize a project's entries.

        Args:
            project_name: Display name of the project
            entries: The project's entries

        Returns:
            Summary text, stripped of surrounding whitespace

        Raises:
            NoEntriesError: If ``entries`` is empty (no call is made)
            RateLimitError: If the backend is rate limiting
            MalformedReplyError: If the reply is empty or unusable
            BackendUnavailableError: On any other backend failure
        """
        if not entries:
            raise NoEntriesError("No entries to summarize")

        prompt = build_prompt(project_name, entries)
        try:
            result = await self.provider.invoke(prompt)
        except ModelHTTPError as exc:
            if exc.status_code == 429:
                raise RateLimitError("Rate limit exceeded. Please try again later.") from exc
            raise BackendUnavailableError(
                f"Summary backend returned HTTP {exc.status_code}"
            ) from exc
        except UnexpectedModelBehavior as exc:
            raise MalformedReplyError(f"Invalid reply from summary backend: {exc}") from exc
        except AgentRunError as exc:
            raise BackendUnavailableError(str(exc)) from exc
        except Exception as exc:
            raise BackendUnavailableError(
                f"Summary backend unreachable: {type(exc).__name__}: {exc}"
            ) from exc

        self.last_usage = result.usage
        summary = result.output.strip() if isinstance(result.output, str) else ""
        if not summary:
            raise MalformedReplyError("Summary backend returned an empty reply")

        logger.debug(
            "Summarized %r (%d entries, %d tokens, %d ms)",
            project_name,
            len(entries),
            result.usage.total_tokens,
            result.duration_ms,
        )
        return summary
