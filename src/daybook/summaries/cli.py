"""CLI commands for project summaries."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import TYPE_CHECKING

from rich import print as rprint

from daybook.config import DaybookSettings
from daybook.journal.store import JournalStore, StoreError
from daybook.summaries.coordinator import SummaryCoordinator

if TYPE_CHECKING:
    from daybook.summaries.client import SummaryBackend

_NO_BACKEND = "Summaries require an AI model. Set ANTHROPIC_API_KEY or pass --model."


def _error(message: str, format: str) -> int:
    if format == "human":
        rprint(f"[red]Error:[/red] {message}")
    else:
        print(json.dumps({"error": message}))
    return 1


def _coordinator(
    root: Path,
    backend: SummaryBackend | None,
    settings: DaybookSettings | None,
) -> SummaryCoordinator:
    settings = settings or DaybookSettings()
    store = JournalStore(root, max_storage_bytes=settings.max_storage_bytes)
    return SummaryCoordinator(store, backend or _NullBackend(), settings)


class _NullBackend:
    """Backend for read-only commands that never generate."""

    async def summarize(self, project_name: str, entries: object) -> str:
        raise RuntimeError(_NO_BACKEND)


def show_command(
    root: Path,
    project_id: str,
    backend: SummaryBackend | None = None,
    settings: DaybookSettings | None = None,
    format: str = "human",
) -> int:
    """Show a project's summary, generating it if the cache is stale.

    A valid cached summary is shown without a backend; one is only needed
    when the summary has to be generated.

    Args:
        root: Journal root directory
        project_id: Project to summarize
        backend: Summarization backend (DI), None when no model is configured
        settings: Coordinator settings
        format: Output format (human, json)

    Returns:
        Exit code (0 = success, 1 = failure)
    """
    coordinator = _coordinator(root, backend, settings)
    project = coordinator.store.get_project(project_id)
    if project is None:
        return _error(f"Project not found: {project_id}", format)

    summary = coordinator.lookup(project_id)
    if summary is None and coordinator.store.get_entries(project_id):
        if backend is None:
            return _error(_NO_BACKEND, format)
        try:
            summary = asyncio.run(coordinator.resolve(project_id))
        except StoreError as e:
            return _error(str(e), format)

    status = coordinator.status(project_id)
    if format == "json":
        print(
            json.dumps(
                {
                    "project_id": project_id,
                    "summary": summary,
                    "last_failure": status.last_failure,
                },
                indent=2,
            )
        )
        return 0

    if summary is None:
        # Absent summary is not an error; explain why when we know
        if status.last_failure:
            rprint(f"[yellow]No summary available[/yellow] [dim]({status.last_failure})[/dim]")
        else:
            rprint("[yellow]No summary available yet.[/yellow] Add an entry first.")
        return 0

    rprint(f"[bold]{project.name}[/bold]")
    rprint(summary)
    return 0


def refresh_summary(
    root: Path,
    project_id: str,
    backend: SummaryBackend,
    settings: DaybookSettings | None = None,
) -> str | None:
    """Regenerate a project's summary after one of its entries was saved.

    Goes through the debounced path and waits for it to settle, so the
    summary returned already reflects the saved entry.

    Returns:
        The fresh summary, or None if generation produced nothing
    """
    coordinator = _coordinator(root, backend, settings)

    async def run() -> str | None:
        coordinator.schedule_generate(project_id)
        await coordinator.drain()
        return coordinator.lookup(project_id)

    return asyncio.run(run())


def warm_command(
    root: Path,
    backend: SummaryBackend | None = None,
    settings: DaybookSettings | None = None,
    format: str = "human",
) -> int:
    """Pre-generate summaries for every project that needs one."""
    if backend is None:
        return _error(_NO_BACKEND, format)

    coordinator = _coordinator(root, backend, settings)
    try:
        report = asyncio.run(coordinator.warm_all())
    except StoreError as e:
        return _error(str(e), format)

    if report is None:  # pragma: no cover
        return _error("A warm-up pass is already running", format)

    exit_code = 1 if report.failed else 0
    if format == "json":
        print(report.model_dump_json(indent=2))
        return exit_code

    mark = "[red]✗[/red]" if report.failed else "[green]✓[/green]"
    rprint(
        f"{mark} Generated {len(report.generated)}, "
        f"skipped {len(report.skipped)}, failed {len(report.failed)}"
    )
    return exit_code


def status_command(
    root: Path,
    project_id: str,
    settings: DaybookSettings | None = None,
    format: str = "human",
) -> int:
    coordinator = _coordinator(root, None, settings)
    if coordinator.store.get_project(project_id) is None:
        return _error(f"Project not found: {project_id}", format)

    status = coordinator.status(project_id)
    record = coordinator.store.get_summary(project_id)
    if format == "json":
        data = status.model_dump()
        data["last_updated"] = record.last_updated.isoformat() if record else None
        print(json.dumps(data, indent=2))
        return 0

    cached = "[green]valid[/green]" if status.has_cached else "[yellow]missing or stale[/yellow]"
    rprint(f"Cached summary: {cached}")
    if record is not None:
        rprint(f"Last updated: {record.last_updated.isoformat()}")
    return 0


def clear_command(
    root: Path,
    project_id: str | None = None,
    format: str = "human",
) -> int:
    coordinator = _coordinator(root, None, None)
    try:
        if project_id is None:
            removed = coordinator.clear_all_caches()
        else:
            removed = 1 if coordinator.clear_cache(project_id) else 0
    except StoreError as e:
        return _error(str(e), format)

    if format == "json":
        print(json.dumps({"removed": removed}))
    else:
        rprint(f"[green]✓[/green] Removed {removed} cached summaries")
    return 0
