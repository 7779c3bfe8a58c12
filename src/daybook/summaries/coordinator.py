"""Summary coordinator: decide when a project summary is generated.

Owns the in-memory concurrency state for summary generation:
- cache validity (a stored record counts only while its fingerprint matches)
- single-flight generation per project
- debounced generation for the interactive edit path
- a staggered bulk warm-up over all projects

Everything runs on one asyncio event loop. Between checking ``in_flight`` and
claiming it there is no await, so two callers can never both start a
generation for the same project.

Backend failures never escape: they are logged, recorded for ``status()`` and
reported as "no summary" (None). Store failures do escape.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict

from daybook.config import DaybookSettings
from daybook.journal.models import Project, SummaryRecord
from daybook.journal.store import SummaryStore
from daybook.summaries.client import SummaryBackend

logger = logging.getLogger(__name__)


class CoordinatorStats(BaseModel):
    """Counters of generation outcomes since the coordinator was created."""

    generated: int = 0
    failed: int = 0
    deduplicated: int = 0
    cache_hits: int = 0


@dataclass
class CoordinatorState:
    """Process-local coordinator state. Never persisted.

    ``in_flight`` maps a project to the attempt number holding its
    single-flight marker; membership is the lock.
    """

    in_flight: dict[str, int] = field(default_factory=dict)
    pending_timers: dict[str, asyncio.Task[None]] = field(default_factory=dict)
    bulk_running: bool = False
    last_failures: dict[str, str] = field(default_factory=dict)
    stats: CoordinatorStats = field(default_factory=CoordinatorStats)
    attempts: int = 0


class SummaryStatus(BaseModel):
    """Point-in-time view of one project's summary state."""

    has_cached: bool
    is_generating: bool
    is_debouncing: bool
    last_failure: str | None = None

    model_config = ConfigDict(frozen=True)


class WarmReport(BaseModel):
    """Outcome of one bulk warm-up pass.

    - generated: projects that ended the pass with a summary available
    - skipped: projects with no entries or an already valid summary
    - failed: projects whose generation produced no summary
    """

    generated: list[str] = []
    skipped: list[str] = []
    failed: list[str] = []

    model_config = ConfigDict(frozen=True)


class SummaryCoordinator:
    """Cache-and-generation coordinator for project summaries."""

    def __init__(
        self,
        store: SummaryStore,
        backend: SummaryBackend,
        settings: DaybookSettings | None = None,
        state: CoordinatorState | None = None,
    ) -> None:
        self.store = store
        self.backend = backend
        self.settings = settings or DaybookSettings()
        self.state = state or CoordinatorState()
        self._background: set[asyncio.Task[None]] = set()

    # --- Cache lookup ---

    def lookup(self, project_id: str) -> str | None:
        """Return the cached summary if it matches the current entries.

        Pure read: never mutates state and never triggers generation.
        """
        record = self.store.get_summary(project_id)
        if record is None:
            return None
        if record.fingerprint != self.store.content_fingerprint(project_id):
            return None
        return record.summary

    def is_generating(self, project_id: str) -> bool:
        return project_id in self.state.in_flight

    def is_debouncing(self, project_id: str) -> bool:
        return project_id in self.state.pending_timers

    # --- Single-flight generation ---

    def _claim(self, project_id: str) -> int:
        self.state.attempts += 1
        self.state.in_flight[project_id] = self.state.attempts
        return self.state.attempts

    def _release(self, project_id: str, attempt: int) -> None:
        # A cancelled marker may already have been replaced by a newer attempt
        if self.state.in_flight.get(project_id) == attempt:
            del self.state.in_flight[project_id]

    async def generate_now(self, project_id: str) -> str | None:
        """Generate a project's summary immediately, at most once at a time.

        Args:
            project_id: Project to summarize

        Returns:
            The summary, or None if the project is already generating, has no
            entries, doesn't exist, or the backend failed

        Raises:
            StoreError: If the summary cannot be persisted
        """
        if project_id in self.state.in_flight:
            self.state.stats.deduplicated += 1
            logger.debug("Summary for %s already generating, skipping", project_id)
            return None

        cached = self.lookup(project_id)
        if cached is not None:
            self.state.stats.cache_hits += 1
            return cached

        project = self.store.get_project(project_id)
        if project is None:
            logger.warning("Cannot summarize unknown project %s", project_id)
            return None

        entries = self.store.get_entries(project_id)
        if not entries:
            logger.debug("Project %r has no entries, nothing to summarize", project.name)
            return None

        # Taken from the entries being sent; edits during the call make the
        # stored record stale on the next lookup.
        fingerprint = self.store.content_fingerprint(project_id)
        attempt = self._claim(project_id)
        try:
            try:
                summary = await self.backend.summarize(project.name, entries)
            except Exception as exc:
                self.state.stats.failed += 1
                self.state.last_failures[project_id] = f"{type(exc).__name__}: {exc}"
                logger.warning("Summary generation failed for %r: %s", project.name, exc)
                return None

            self.store.save_summary(
                SummaryRecord(project_id=project_id, summary=summary, fingerprint=fingerprint)
            )
            self.state.last_failures.pop(project_id, None)
            self.state.stats.generated += 1
            logger.info("Generated summary for %r (%d entries)", project.name, len(entries))
            return summary
        finally:
            self._release(project_id, attempt)

    # --- Debounced generation ---

    def _track(self, task: asyncio.Task[None]) -> None:
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    def schedule_generate(self, project_id: str) -> None:
        """Generate after a quiet period, restarting the period on every call.

        Must be called from inside a running event loop.
        """
        existing = self.state.pending_timers.pop(project_id, None)
        if existing is not None:
            existing.cancel()

        task = asyncio.get_running_loop().create_task(
            self._fire_after_quiet_period(project_id),
            name=f"summary-debounce-{project_id}",
        )
        self.state.pending_timers[project_id] = task
        self._track(task)

    async def _fire_after_quiet_period(self, project_id: str) -> None:
        await asyncio.sleep(self.settings.debounce_seconds)

        # The timer has fired: from here on cancel() must not interrupt the
        # backend call, so the handle is released before generating.
        if self.state.pending_timers.get(project_id) is asyncio.current_task():
            del self.state.pending_timers[project_id]

        try:
            await self.generate_now(project_id)
        except Exception:
            logger.exception("Debounced summary generation failed for %s", project_id)

    # --- Cancellation ---

    def cancel(self, project_id: str) -> None:
        """Stop waiting on a project's summary.

        Drops the pending timer and the in-flight marker. A backend call that
        is already running is not interrupted and may still store its result.
        """
        timer = self.state.pending_timers.pop(project_id, None)
        if timer is not None:
            timer.cancel()
        self.state.in_flight.pop(project_id, None)

    def cancel_all(self) -> None:
        for project_id in set(self.state.pending_timers) | set(self.state.in_flight):
            self.cancel(project_id)

    async def drain(self) -> None:
        """Wait until every debounce task has finished or been cancelled."""
        while self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)

    # --- Bulk warm-up ---

    def _needs_generation(self, project_id: str) -> bool:
        if not self.store.get_entries(project_id):
            return False
        return self.lookup(project_id) is None

    async def _warm_one(self, project: Project, delay: float) -> bool:
        if delay > 0:
            await asyncio.sleep(delay)
        try:
            summary = await self.generate_now(project.id)
        except Exception as exc:
            logger.warning("Failed to pre-generate summary for %r: %s", project.name, exc)
            return False
        return summary is not None

    async def warm_all(self) -> WarmReport | None:
        """Generate summaries for every project that needs one.

        Starts are staggered by ``stagger_seconds`` per project so the backend
        sees a spread of requests rather than a burst. One project failing
        never stops the others.

        Returns:
            WarmReport for the pass, or None if a pass was already running
        """
        if self.state.bulk_running:
            logger.info("Summary warm-up already in progress, skipping")
            return None

        self.state.bulk_running = True
        try:
            due: list[Project] = []
            skipped: list[str] = []
            for project in self.store.get_projects():
                if self._needs_generation(project.id):
                    due.append(project)
                else:
                    skipped.append(project.id)

            logger.info(
                "Warming summaries for %d of %d projects", len(due), len(due) + len(skipped)
            )
            stagger = self.settings.stagger_seconds
            outcomes = await asyncio.gather(
                *(self._warm_one(project, index * stagger) for index, project in enumerate(due))
            )

            report = WarmReport(
                generated=[p.id for p, ok in zip(due, outcomes, strict=True) if ok],
                skipped=skipped,
                failed=[p.id for p, ok in zip(due, outcomes, strict=True) if not ok],
            )
            logger.info(
                "Finished warming summaries: %d generated, %d failed",
                len(report.generated),
                len(report.failed),
            )
            return report
        finally:
            self.state.bulk_running = False

    # --- Consumer helpers ---

    async def wait_for_summary(self, project_id: str) -> str | None:
        """Poll the cache while another caller generates this project's summary.

        Returns:
            The summary once cached, or None when nothing is pending anymore or
            ``poll_timeout_seconds`` has elapsed
        """
        interval = self.settings.poll_interval_seconds
        polls = max(1, int(self.settings.poll_timeout_seconds / interval))
        for _ in range(polls):
            await asyncio.sleep(interval)
            summary = self.lookup(project_id)
            if summary is not None:
                return summary
            if not (self.is_generating(project_id) or self.is_debouncing(project_id)):
                return None
        return None

    async def resolve(self, project_id: str) -> str | None:
        """Get a project's summary the way a summary widget does.

        Cached → returned as is. Generating elsewhere → wait for it.
        Otherwise → generate now.
        """
        cached = self.lookup(project_id)
        if cached is not None:
            return cached
        if self.is_generating(project_id):
            return await self.wait_for_summary(project_id)
        return await self.generate_now(project_id)

    def clear_cache(self, project_id: str) -> bool:
        return self.store.delete_summary(project_id)

    def clear_all_caches(self) -> int:
        """Delete every stored summary. Returns how many were removed."""
        removed = 0
        for record in self.store.get_summaries():
            if self.store.delete_summary(record.project_id):
                removed += 1
        return removed

    # --- Introspection ---

    def status(self, project_id: str) -> SummaryStatus:
        return SummaryStatus(
            has_cached=self.lookup(project_id) is not None,
            is_generating=self.is_generating(project_id),
            is_debouncing=self.is_debouncing(project_id),
            last_failure=self.state.last_failures.get(project_id),
        )

    def stats(self) -> CoordinatorStats:
        return self.state.stats.model_copy()
