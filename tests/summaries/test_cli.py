"""Tests for summary CLI commands."""

import json
from collections.abc import Sequence
from datetime import date
from pathlib import Path

import pytest

from daybook.config import DaybookSettings
from daybook.journal.models import Entry, Project, SummaryRecord
from daybook.journal.store import JournalStore
from daybook.summaries.client import RateLimitError

SETTINGS = DaybookSettings(debounce_seconds=0.0, stagger_seconds=0.0, poll_interval_seconds=0.01)


class StubBackend:
    """Returns a fixed reply; fails for chosen project names."""

    def __init__(self, fail_for: set[str] | None = None) -> None:
        self.fail_for = fail_for or set()
        self.calls: list[str] = []

    async def summarize(self, project_name: str, entries: Sequence[Entry]) -> str:
        self.calls.append(project_name)
        if project_name in self.fail_for:
            raise RateLimitError("Rate limit exceeded")
        return f"You keep showing up for {project_name}."


def _project(store: JournalStore, name: str, entries: int = 1) -> Project:
    project = store.create_project(name)
    for day in range(1, entries + 1):
        store.create_entry(project.id, date(2025, 2, day), f"{name} day {day}.")
    return project


# ===== show =====


def test_show_generates_and_caches(
    store: JournalStore, tmp_path: Path, capsys: pytest.CaptureFixture
) -> None:
    from daybook.summaries.cli import show_command

    project = _project(store, "Pottery", 2)
    backend = StubBackend()

    assert show_command(tmp_path, project.id, backend, SETTINGS, format="json") == 0
    data = json.loads(capsys.readouterr().out)
    assert data["summary"] == "You keep showing up for Pottery."
    assert data["last_failure"] is None

    assert show_command(tmp_path, project.id, backend, SETTINGS, format="json") == 0
    assert backend.calls == ["Pottery"]
    assert store.get_summary(project.id) is not None


def test_show_human(store: JournalStore, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
    from daybook.summaries.cli import show_command

    project = _project(store, "Pottery")

    assert show_command(tmp_path, project.id, StubBackend(), SETTINGS) == 0
    out = capsys.readouterr().out
    assert "Pottery" in out
    assert "You keep showing up" in out


def test_show_no_entries_is_not_error(
    store: JournalStore, tmp_path: Path, capsys: pytest.CaptureFixture
) -> None:
    from daybook.summaries.cli import show_command

    project = _project(store, "Empty", 0)

    assert show_command(tmp_path, project.id, StubBackend(), SETTINGS) == 0
    assert "No summary available" in capsys.readouterr().out


def test_show_backend_failure_reports_reason(
    store: JournalStore, tmp_path: Path, capsys: pytest.CaptureFixture
) -> None:
    """A failed generation exits 0 with no summary and the failure reason."""
    from daybook.summaries.cli import show_command

    project = _project(store, "Pottery")

    exit_code = show_command(
        tmp_path, project.id, StubBackend(fail_for={"Pottery"}), SETTINGS, format="json"
    )

    assert exit_code == 0
    data = json.loads(capsys.readouterr().out)
    assert data["summary"] is None
    assert "RateLimitError" in data["last_failure"]
    assert store.get_summary(project.id) is None


def test_show_stale_without_backend(
    store: JournalStore, tmp_path: Path, capsys: pytest.CaptureFixture
) -> None:
    """Generating needs a backend: missing one is an error."""
    from daybook.summaries.cli import show_command

    project = _project(store, "Pottery")

    assert show_command(tmp_path, project.id, None, format="json") == 1
    assert "ANTHROPIC_API_KEY" in json.loads(capsys.readouterr().out)["error"]


def test_show_cached_without_backend(
    store: JournalStore, tmp_path: Path, capsys: pytest.CaptureFixture
) -> None:
    """A valid cached summary is shown even when no model is configured."""
    from daybook.summaries.cli import show_command

    project = _project(store, "Pottery")
    store.save_summary(
        SummaryRecord(
            project_id=project.id,
            summary="You are throwing steadier bowls.",
            fingerprint=store.content_fingerprint(project.id),
        )
    )

    assert show_command(tmp_path, project.id, None, format="json") == 0
    assert json.loads(capsys.readouterr().out)["summary"] == "You are throwing steadier bowls."


def test_show_no_entries_without_backend(
    store: JournalStore, tmp_path: Path, capsys: pytest.CaptureFixture
) -> None:
    from daybook.summaries.cli import show_command

    project = _project(store, "Empty", 0)

    assert show_command(tmp_path, project.id, None) == 0
    assert "No summary available" in capsys.readouterr().out


def test_show_unknown_project(tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
    from daybook.summaries.cli import show_command

    assert show_command(tmp_path, "missing", StubBackend(), SETTINGS, format="json") == 1
    assert "Project not found" in json.loads(capsys.readouterr().out)["error"]


# ===== warm =====


def test_warm_all_succeed(
    store: JournalStore, tmp_path: Path, capsys: pytest.CaptureFixture
) -> None:
    from daybook.summaries.cli import warm_command

    a = _project(store, "A")
    b = _project(store, "B")
    empty = _project(store, "Empty", 0)

    assert warm_command(tmp_path, StubBackend(), SETTINGS, format="json") == 0
    data = json.loads(capsys.readouterr().out)
    assert data["generated"] == [a.id, b.id]
    assert data["skipped"] == [empty.id]
    assert data["failed"] == []


def test_warm_with_failure(
    store: JournalStore, tmp_path: Path, capsys: pytest.CaptureFixture
) -> None:
    from daybook.summaries.cli import warm_command

    _project(store, "A")
    _project(store, "B")

    exit_code = warm_command(tmp_path, StubBackend(fail_for={"B"}), SETTINGS)

    assert exit_code == 1
    assert "Generated 1" in capsys.readouterr().out


def test_warm_with_failure_json(
    store: JournalStore, tmp_path: Path, capsys: pytest.CaptureFixture
) -> None:
    """Exit code does not depend on the output format."""
    from daybook.summaries.cli import warm_command

    _project(store, "A")
    b = _project(store, "B")

    exit_code = warm_command(tmp_path, StubBackend(fail_for={"B"}), SETTINGS, format="json")

    assert exit_code == 1
    assert json.loads(capsys.readouterr().out)["failed"] == [b.id]


def test_warm_without_backend(tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
    from daybook.summaries.cli import warm_command

    assert warm_command(tmp_path, None) == 1
    assert "Error" in capsys.readouterr().out


# ===== refresh =====


def test_refresh_summary_after_edit(store: JournalStore, tmp_path: Path) -> None:
    from daybook.summaries.cli import refresh_summary

    project = _project(store, "Pottery", 2)
    backend = StubBackend()

    assert refresh_summary(tmp_path, project.id, backend, SETTINGS) == (
        "You keep showing up for Pottery."
    )
    assert backend.calls == ["Pottery"]
    assert store.get_summary(project.id) is not None


def test_refresh_summary_backend_failure(store: JournalStore, tmp_path: Path) -> None:
    from daybook.summaries.cli import refresh_summary

    project = _project(store, "Pottery")

    backend = StubBackend(fail_for={"Pottery"})

    assert refresh_summary(tmp_path, project.id, backend, SETTINGS) is None
    assert store.get_summary(project.id) is None


# ===== status =====


def test_status_json(store: JournalStore, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
    from daybook.summaries.cli import status_command

    project = _project(store, "Pottery")

    assert status_command(tmp_path, project.id, format="json") == 0
    data = json.loads(capsys.readouterr().out)
    assert data["has_cached"] is False
    assert data["is_generating"] is False
    assert data["is_debouncing"] is False
    assert data["last_updated"] is None


def test_status_with_valid_record(
    store: JournalStore, tmp_path: Path, capsys: pytest.CaptureFixture
) -> None:
    from daybook.summaries.cli import status_command

    project = _project(store, "Pottery")
    store.save_summary(
        SummaryRecord(
            project_id=project.id,
            summary="cached",
            fingerprint=store.content_fingerprint(project.id),
        )
    )

    assert status_command(tmp_path, project.id) == 0
    out = capsys.readouterr().out
    assert "valid" in out
    assert "Last updated" in out


def test_status_unknown_project(tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
    from daybook.summaries.cli import status_command

    assert status_command(tmp_path, "missing") == 1


# ===== clear =====


def test_clear_one(store: JournalStore, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
    from daybook.summaries.cli import clear_command

    store.save_summary(SummaryRecord(project_id="p1", summary="s", fingerprint="f"))
    store.save_summary(SummaryRecord(project_id="p2", summary="s", fingerprint="f"))

    assert clear_command(tmp_path, "p1", format="json") == 0
    assert json.loads(capsys.readouterr().out) == {"removed": 1}
    assert [r.project_id for r in store.get_summaries()] == ["p2"]


def test_clear_all(store: JournalStore, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
    from daybook.summaries.cli import clear_command

    store.save_summary(SummaryRecord(project_id="p1", summary="s", fingerprint="f"))
    store.save_summary(SummaryRecord(project_id="p2", summary="s", fingerprint="f"))

    assert clear_command(tmp_path) == 0
    assert "Removed 2" in capsys.readouterr().out
    assert store.get_summaries() == []
