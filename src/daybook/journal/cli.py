"""CLI commands for projects and entries."""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path
from typing import TYPE_CHECKING

from rich import print as rprint
from rich.table import Table

from daybook.journal.store import JournalStore, StoreError

if TYPE_CHECKING:
    from daybook.config import DaybookSettings
    from daybook.journal.models import Entry
    from daybook.summaries.client import SummaryBackend


def _error(message: str, format: str) -> int:
    if format == "human":
        rprint(f"[red]Error:[/red] {message}")
    else:
        print(json.dumps({"error": message}))
    return 1


def _print_saved(
    root: Path,
    entry: Entry,
    message: str,
    backend: SummaryBackend | None,
    settings: DaybookSettings | None,
    format: str,
) -> None:
    """Print a saved entry, refreshing the project summary when a backend is given."""
    summary: str | None = None
    if backend is not None:
        from daybook.summaries.cli import refresh_summary

        summary = refresh_summary(root, entry.project_id, backend, settings)

    if format == "json":
        data = entry.model_dump(mode="json")
        if backend is not None:
            data["summary"] = summary
        print(json.dumps(data, indent=2))
        return

    rprint(message)
    if backend is not None:
        if summary is None:
            rprint("[yellow]Summary not updated.[/yellow] Run [bold]daybook summary status[/bold].")
        else:
            rprint(f"[dim]Summary:[/dim] {summary}")


def project_add_command(root: Path, name: str, format: str = "human") -> int:
    """Create a project.

    Returns:
        Exit code (0 = success, 1 = failure)
    """
    name = name.strip()
    if not name:
        return _error("Project name is required", format)

    try:
        project = JournalStore(root).create_project(name)
    except StoreError as e:
        return _error(str(e), format)

    if format == "json":
        print(project.model_dump_json(indent=2))
    else:
        rprint(f"[green]✓[/green] Created project [bold]{project.name}[/bold] ({project.id})")
    return 0


def project_list_command(root: Path, format: str = "human") -> int:
    store = JournalStore(root)
    projects = store.get_projects()

    if format == "json":
        print(json.dumps([p.model_dump(mode="json") for p in projects], indent=2))
        return 0

    if not projects:
        rprint("No projects yet. Create one with [bold]daybook project add NAME[/bold].")
        return 0

    table = Table(title="Projects")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="bold")
    table.add_column("Entries", justify="right")
    table.add_column("Updated")
    for project in projects:
        table.add_row(
            project.id,
            project.name,
            str(len(store.get_entries(project.id))),
            project.updated_at.strftime("%Y-%m-%d %H:%M"),
        )
    rprint(table)
    return 0


def project_delete_command(root: Path, project_id: str, format: str = "human") -> int:
    try:
        deleted = JournalStore(root).delete_project(project_id)
    except StoreError as e:
        return _error(str(e), format)

    if not deleted:
        return _error(f"Project not found: {project_id}", format)

    if format == "json":
        print(json.dumps({"deleted": project_id}))
    else:
        rprint(f"[green]✓[/green] Deleted project {project_id}")
    return 0


def entry_add_command(
    root: Path,
    project_id: str,
    reflection: str,
    day: date | None = None,
    format: str = "human",
    backend: SummaryBackend | None = None,
    settings: DaybookSettings | None = None,
) -> int:
    """Add a dated reflection to a project.

    One entry per project per day: adding to a day that already has an
    entry fails rather than overwriting it. With a backend, the project's
    summary is regenerated once the entry is saved.

    Returns:
        Exit code (0 = success, 1 = failure)
    """
    if not reflection.strip():
        return _error("Reflection is required", format)

    day = day or date.today()
    store = JournalStore(root)
    if store.get_entry_by_date(project_id, day) is not None:
        return _error(
            f"An entry for {day.isoformat()} already exists. Use `daybook entry edit`.",
            format,
        )

    try:
        entry = store.create_entry(project_id, day, reflection)
    except StoreError as e:
        return _error(str(e), format)

    _print_saved(
        root,
        entry,
        f"[green]✓[/green] Added entry for {entry.date.isoformat()} ({entry.id})",
        backend,
        settings,
        format,
    )
    return 0


def entry_edit_command(
    root: Path,
    entry_id: str,
    reflection: str,
    format: str = "human",
    backend: SummaryBackend | None = None,
    settings: DaybookSettings | None = None,
) -> int:
    if not reflection.strip():
        return _error("Reflection is required", format)

    try:
        entry = JournalStore(root).update_entry(entry_id, reflection=reflection)
    except StoreError as e:
        return _error(str(e), format)

    _print_saved(
        root,
        entry,
        f"[green]✓[/green] Updated entry for {entry.date.isoformat()}",
        backend,
        settings,
        format,
    )
    return 0


def entry_list_command(root: Path, project_id: str, format: str = "human") -> int:
    store = JournalStore(root)
    project = store.get_project(project_id)
    if project is None:
        return _error(f"Project not found: {project_id}", format)

    entries = store.get_entries(project_id)
    if format == "json":
        print(json.dumps([e.model_dump(mode="json") for e in entries], indent=2))
        return 0

    rprint(f"[bold]{project.name}[/bold] ({len(entries)} entries)\n")
    for entry in entries:
        rprint(f"[cyan]{entry.date.isoformat()}[/cyan] [dim]{entry.id}[/dim]")
        rprint(f"  {entry.reflection}")
    return 0
