"""Daybook CLI application."""

from __future__ import annotations

import logging
from datetime import datetime
from enum import StrEnum
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer
from rich import print as rprint
from rich.logging import RichHandler

import daybook as daybook_pkg

if TYPE_CHECKING:
    from daybook.config import DaybookSettings
    from daybook.summaries.client import SummaryBackend


class OutputFormat(StrEnum):
    """Output format for CLI commands."""

    human = "human"
    json = "json"


app = typer.Typer(
    name="daybook",
    help="Project journal with AI-generated project summaries.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    if value:
        rprint(f"daybook {daybook_pkg.__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    """Route library logging through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option("--version", "-v", callback=version_callback, is_eager=True),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Show debug logging."),
    ] = False,
) -> None:
    """Daybook: project journal with AI-generated summaries."""
    from dotenv import load_dotenv

    load_dotenv()
    configure_logging(verbose)


ProjectRootOption = Annotated[
    str | None,
    typer.Option("--project-root", "-p", help="Directory holding the .daybook/ journal"),
]
FormatOption = Annotated[
    OutputFormat,
    typer.Option("--format", "-f", help="Output format"),
]
ModelOption = Annotated[
    str | None,
    typer.Option("--model", "-m", help="AI model for summaries (default: from environment)"),
]
SummarizeOption = Annotated[
    bool,
    typer.Option("--summarize", "-s", help="Regenerate the project summary after saving"),
]


def _root(project_root: str | None) -> Path:
    return Path(project_root) if project_root else Path.cwd()


def _build_settings(model: str | None) -> DaybookSettings:
    from daybook.config import DaybookSettings
    from daybook.providers.config import ProviderConfig, resolve_default_model

    return DaybookSettings(provider=ProviderConfig(model=model or resolve_default_model()))


def _build_backend(settings: DaybookSettings) -> SummaryBackend:
    """Build a SummarizationClient from settings using PydanticAIProvider.

    Args:
        settings: Settings carrying the provider configuration

    Returns:
        SummaryBackend for the coordinator
    """
    from daybook.providers.pydantic_ai import PydanticAIProvider
    from daybook.summaries.client import SummarizationClient
    from daybook.summaries.prompts import SYSTEM_PROMPT

    provider: PydanticAIProvider[str] = PydanticAIProvider(
        model=settings.provider.model,
        output_type=str,
        system_prompt=SYSTEM_PROMPT,
        model_settings=settings.provider.model_settings(),
    )
    return SummarizationClient(provider)


def _summary_runtime(model: str | None) -> tuple[DaybookSettings, SummaryBackend]:
    try:
        settings = _build_settings(model)
    except RuntimeError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from None
    return settings, _build_backend(settings)


def _optional_runtime(model: str | None) -> tuple[DaybookSettings, SummaryBackend | None]:
    """Like _summary_runtime, but a missing model yields no backend instead of exit 1."""
    from daybook.config import DaybookSettings

    try:
        settings = _build_settings(model)
    except RuntimeError:
        return DaybookSettings(), None
    return settings, _build_backend(settings)


# --- Projects ---

project_app = typer.Typer(help="Create, list and delete projects.", no_args_is_help=True)
app.add_typer(project_app, name="project")


@project_app.command("add")
def project_add(
    name: Annotated[str, typer.Argument(help="Project name")],
    project_root: ProjectRootOption = None,
    format: FormatOption = OutputFormat.human,
) -> None:
    """Create a new project."""
    from daybook.journal.cli import project_add_command

    raise typer.Exit(project_add_command(_root(project_root), name, format=format.value))


@project_app.command("list")
def project_list(
    project_root: ProjectRootOption = None,
    format: FormatOption = OutputFormat.human,
) -> None:
    """List all projects."""
    from daybook.journal.cli import project_list_command

    raise typer.Exit(project_list_command(_root(project_root), format=format.value))


@project_app.command("delete")
def project_delete(
    project_id: Annotated[str, typer.Argument(help="Project ID")],
    project_root: ProjectRootOption = None,
    format: FormatOption = OutputFormat.human,
) -> None:
    """Delete a project with all its entries and its summary."""
    from daybook.journal.cli import project_delete_command

    raise typer.Exit(project_delete_command(_root(project_root), project_id, format=format.value))


# --- Entries ---

entry_app = typer.Typer(help="Write and edit daily reflections.", no_args_is_help=True)
app.add_typer(entry_app, name="entry")


@entry_app.command("add")
def entry_add(
    project_id: Annotated[str, typer.Argument(help="Project ID")],
    text: Annotated[str, typer.Option("--text", "-t", help="Reflection text")],
    day: Annotated[
        datetime | None,
        typer.Option("--date", "-d", formats=["%Y-%m-%d"], help="Entry date (default: today)"),
    ] = None,
    summarize: SummarizeOption = False,
    model: ModelOption = None,
    project_root: ProjectRootOption = None,
    format: FormatOption = OutputFormat.human,
) -> None:
    """Add a reflection for a day."""
    from daybook.journal.cli import entry_add_command

    settings, backend = _summary_runtime(model) if summarize else (None, None)
    exit_code = entry_add_command(
        _root(project_root),
        project_id,
        text,
        day=day.date() if day else None,
        format=format.value,
        backend=backend,
        settings=settings,
    )
    raise typer.Exit(exit_code)


@entry_app.command("edit")
def entry_edit(
    entry_id: Annotated[str, typer.Argument(help="Entry ID")],
    text: Annotated[str, typer.Option("--text", "-t", help="New reflection text")],
    summarize: SummarizeOption = False,
    model: ModelOption = None,
    project_root: ProjectRootOption = None,
    format: FormatOption = OutputFormat.human,
) -> None:
    """Replace the text of a reflection."""
    from daybook.journal.cli import entry_edit_command

    settings, backend = _summary_runtime(model) if summarize else (None, None)
    exit_code = entry_edit_command(
        _root(project_root),
        entry_id,
        text,
        format=format.value,
        backend=backend,
        settings=settings,
    )
    raise typer.Exit(exit_code)


@entry_app.command("list")
def entry_list(
    project_id: Annotated[str, typer.Argument(help="Project ID")],
    project_root: ProjectRootOption = None,
    format: FormatOption = OutputFormat.human,
) -> None:
    """List a project's reflections by date."""
    from daybook.journal.cli import entry_list_command

    raise typer.Exit(entry_list_command(_root(project_root), project_id, format=format.value))


# --- Summaries ---

summary_app = typer.Typer(help="AI-generated project summaries.", no_args_is_help=True)
app.add_typer(summary_app, name="summary")


@summary_app.command("show")
def summary_show(
    project_id: Annotated[str, typer.Argument(help="Project ID")],
    model: ModelOption = None,
    project_root: ProjectRootOption = None,
    format: FormatOption = OutputFormat.human,
) -> None:
    """Show a project's summary, generating it if needed."""
    from daybook.summaries.cli import show_command

    settings, backend = _optional_runtime(model)
    exit_code = show_command(
        _root(project_root),
        project_id,
        backend=backend,
        settings=settings,
        format=format.value,
    )
    raise typer.Exit(exit_code)


@summary_app.command("warm")
def summary_warm(
    model: ModelOption = None,
    project_root: ProjectRootOption = None,
    format: FormatOption = OutputFormat.human,
) -> None:
    """Generate summaries for every project that needs one."""
    from daybook.summaries.cli import warm_command

    settings, backend = _summary_runtime(model)
    exit_code = warm_command(
        _root(project_root),
        backend=backend,
        settings=settings,
        format=format.value,
    )
    raise typer.Exit(exit_code)


@summary_app.command("status")
def summary_status(
    project_id: Annotated[str, typer.Argument(help="Project ID")],
    project_root: ProjectRootOption = None,
    format: FormatOption = OutputFormat.human,
) -> None:
    """Show whether a project's cached summary is still valid."""
    from daybook.summaries.cli import status_command

    raise typer.Exit(status_command(_root(project_root), project_id, format=format.value))


@summary_app.command("clear")
def summary_clear(
    project_id: Annotated[
        str | None,
        typer.Argument(help="Project ID (all projects if not specified)"),
    ] = None,
    project_root: ProjectRootOption = None,
    format: FormatOption = OutputFormat.human,
) -> None:
    """Delete cached summaries."""
    from daybook.summaries.cli import clear_command

    raise typer.Exit(clear_command(_root(project_root), project_id, format=format.value))


if __name__ == "__main__":  # pragma: no cover
    app()
