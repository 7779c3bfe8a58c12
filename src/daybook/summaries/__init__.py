"""Daybook summaries: AI project summaries with cache-aware generation."""

from daybook.summaries.client import (
    BackendUnavailableError,
    MalformedReplyError,
    NoEntriesError,
    RateLimitError,
    SummarizationClient,
    SummarizationError,
    SummaryBackend,
)
from daybook.summaries.coordinator import (
    CoordinatorState,
    CoordinatorStats,
    SummaryCoordinator,
    SummaryStatus,
    WarmReport,
)
from daybook.summaries.prompts import build_prompt

__all__ = [
    "BackendUnavailableError",
    "CoordinatorState",
    "CoordinatorStats",
    "MalformedReplyError",
    "NoEntriesError",
    "RateLimitError",
    "SummarizationClient",
    "SummarizationError",
    "SummaryBackend",
    "SummaryCoordinator",
    "SummaryStatus",
    "WarmReport",
    "build_prompt",
]
