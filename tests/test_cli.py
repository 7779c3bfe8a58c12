"""Smoke tests for the daybook CLI."""

import json
from datetime import date
from pathlib import Path

import pytest
from typer.testing import CliRunner

from daybook.cli.main import app
from daybook.journal.models import SummaryRecord
from daybook.journal.store import JournalStore

runner = CliRunner()


def test_version() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert "0.1.0-dev" in result.output


def test_help() -> None:
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "daybook" in result.output.lower()


def test_subcommands_listed_in_help() -> None:
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    for cmd in ("project", "entry", "summary"):
        assert cmd in result.output


def test_project_and_entry_flow(tmp_path: Path) -> None:
    """Create a project, add an entry and list it back."""
    result = runner.invoke(app, ["project", "add", "Pottery", "-p", str(tmp_path), "-f", "json"])
    assert result.exit_code == 0
    project_id = json.loads(result.output)["id"]

    result = runner.invoke(
        app,
        [
            "entry", "add", project_id,
            "--text", "Threw my first bowl.",
            "--date", "2025-03-01",
            "-p", str(tmp_path),
        ],
    )  # fmt: skip
    assert result.exit_code == 0

    result = runner.invoke(app, ["entry", "list", project_id, "-p", str(tmp_path), "-f", "json"])
    assert result.exit_code == 0
    entries = json.loads(result.output)
    assert entries[0]["date"] == "2025-03-01"
    assert entries[0]["reflection"] == "Threw my first bowl."


def test_project_list_json(tmp_path: Path) -> None:
    runner.invoke(app, ["project", "add", "Pottery", "-p", str(tmp_path)])
    result = runner.invoke(app, ["project", "list", "-p", str(tmp_path), "-f", "json"])
    assert result.exit_code == 0
    assert [p["name"] for p in json.loads(result.output)] == ["Pottery"]


def test_entry_add_bad_date(tmp_path: Path) -> None:
    result = runner.invoke(
        app, ["entry", "add", "p1", "--text", "x", "--date", "03/01/2025", "-p", str(tmp_path)]
    )
    assert result.exit_code != 0


def test_summary_status_unknown_project(tmp_path: Path) -> None:
    result = runner.invoke(app, ["summary", "status", "missing", "-p", str(tmp_path)])
    assert result.exit_code == 1


def test_summary_clear_empty(tmp_path: Path) -> None:
    result = runner.invoke(app, ["summary", "clear", "-p", str(tmp_path), "-f", "json"])
    assert result.exit_code == 0
    assert json.loads(result.output) == {"removed": 0}


@pytest.fixture
def no_model(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    monkeypatch.delenv("DAYBOOK_MODEL", raising=False)


@pytest.mark.usefixtures("no_model")
def test_summary_show_without_model(tmp_path: Path) -> None:
    """Stale summary and no model configured: clear error, exit 1."""
    store = JournalStore(tmp_path)
    project = store.create_project("Pottery")
    store.create_entry(project.id, date(2025, 3, 1), "Threw my first bowl.")

    result = runner.invoke(app, ["summary", "show", project.id, "-p", str(tmp_path)])

    assert result.exit_code == 1
    assert "ANTHROPIC_API_KEY" in result.output


@pytest.mark.usefixtures("no_model")
def test_summary_show_cached_without_model(tmp_path: Path) -> None:
    """A valid cached summary needs no model to be shown."""
    store = JournalStore(tmp_path)
    project = store.create_project("Pottery")
    store.create_entry(project.id, date(2025, 3, 1), "Threw my first bowl.")
    store.save_summary(
        SummaryRecord(
            project_id=project.id,
            summary="You are learning to center clay.",
            fingerprint=store.content_fingerprint(project.id),
        )
    )

    result = runner.invoke(app, ["summary", "show", project.id, "-p", str(tmp_path)])

    assert result.exit_code == 0
    assert "You are learning to center clay." in result.output


@pytest.mark.usefixtures("no_model")
def test_entry_add_summarize_without_model(tmp_path: Path) -> None:
    """--summarize checks for a model before anything is saved."""
    store = JournalStore(tmp_path)
    project = store.create_project("Pottery")

    result = runner.invoke(
        app,
        ["entry", "add", project.id, "--text", "Threw a vase.", "--summarize", "-p", str(tmp_path)],
    )

    assert result.exit_code == 1
    assert "ANTHROPIC_API_KEY" in result.output
    assert store.get_entries(project.id) == []
