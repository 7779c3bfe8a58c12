"""Journal store: persist projects, entries and summaries as one JSON document.

Everything lives in <root>/.daybook/data.json. Every operation reads the
document, applies the change and writes it back, so the file is always the
single source of truth between processes.
"""

from __future__ import annotations

import os
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Protocol

from pydantic import ValidationError

from daybook.journal.fingerprint import content_fingerprint
from daybook.journal.models import (
    Entry,
    Project,
    StorageData,
    SummaryRecord,
    utc_now,
)

DEFAULT_MAX_STORAGE_BYTES = 10 * 1024 * 1024


class StoreError(Exception):
    """Raised when the journal document cannot be read or written."""


class StorageLimitError(StoreError):
    """Raised when a write would grow the document past its size limit."""


class ProjectNotFoundError(StoreError):
    """Raised when a project id does not exist."""

    def __init__(self, project_id: str) -> None:
        self.project_id = project_id
        super().__init__(f"Project not found: {project_id}")


class EntryNotFoundError(StoreError):
    """Raised when an entry id does not exist."""

    def __init__(self, entry_id: str) -> None:
        self.entry_id = entry_id
        super().__init__(f"Entry not found: {entry_id}")


class SummaryStore(Protocol):
    """The slice of the store the summary coordinator depends on."""

    def get_projects(self) -> list[Project]: ...

    def get_project(self, project_id: str) -> Project | None: ...

    def get_entries(self, project_id: str) -> list[Entry]: ...

    def get_summary(self, project_id: str) -> SummaryRecord | None: ...

    def get_summaries(self) -> list[SummaryRecord]: ...

    def save_summary(self, record: SummaryRecord) -> None: ...

    def delete_summary(self, project_id: str) -> bool: ...

    def content_fingerprint(self, project_id: str) -> str: ...


def _later_than(previous: datetime) -> datetime:
    """Current time, nudged forward so it is strictly after ``previous``."""
    now = utc_now()
    if now > previous:
        return now
    return previous + timedelta(microseconds=1)


class JournalStore:
    """JSON-file journal store."""

    def __init__(
        self,
        root: Path,
        max_storage_bytes: int = DEFAULT_MAX_STORAGE_BYTES,
    ) -> None:
        """Initialize store rooted at a directory.

        Args:
            root: Directory that holds the .daybook/ folder
            max_storage_bytes: Largest document size accepted on write
        """
        self.root = root
        self.path = root / ".daybook" / "data.json"
        self.max_storage_bytes = max_storage_bytes

    # --- Document I/O ---

    def _read(self) -> StorageData:
        """Read the document for a read-modify-write cycle.

        Raises:
            StoreError: If the file exists but cannot be read or parsed
        """
        if not self.path.exists():
            return StorageData()
        try:
            return StorageData.model_validate_json(self.path.read_text(encoding="utf-8"))
        except (OSError, ValidationError, ValueError) as exc:
            raise StoreError(f"Could not read {self.path}: {exc}") from exc

    def _load(self) -> StorageData:
        """Read the document for a query.

        Returns an empty document if the file doesn't exist or is corrupt.
        """
        try:
            return self._read()
        except StoreError:
            return StorageData()

    def _save(self, data: StorageData) -> None:
        """Write the document, enforcing the size limit.

        Raises:
            StorageLimitError: If the serialized document is too large
            StoreError: If the file cannot be written
        """
        data = data.model_copy(update={"last_sync": utc_now()})
        payload = data.model_dump_json(indent=2)
        if len(payload.encode("utf-8")) > self.max_storage_bytes:
            raise StorageLimitError(
                f"Storage limit exceeded ({self.max_storage_bytes:,} bytes). "
                "Remove some projects or entries."
            )

        tmp_path = self.path.with_suffix(".json.tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(payload, encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as exc:
            raise StoreError(f"Could not write {self.path}: {exc}") from exc

    def storage_size(self) -> int:
        """Size of the document on disk in bytes (0 if absent)."""
        if not self.path.exists():
            return 0
        return self.path.stat().st_size

    def export_data(self) -> StorageData:
        return self._load()

    def import_data(self, data: StorageData) -> None:
        self._save(data)

    def clear_all_data(self) -> None:
        """Delete the document file."""
        if self.path.exists():
            self.path.unlink()

    # --- Projects ---

    def get_projects(self) -> list[Project]:
        return list(self._load().projects)

    def get_project(self, project_id: str) -> Project | None:
        return next((p for p in self._load().projects if p.id == project_id), None)

    def create_project(self, name: str) -> Project:
        """Create and persist a new project."""
        data = self._read()
        project = Project(name=name)
        data.projects.append(project)
        self._save(data)
        return project

    def update_project(self, project_id: str, **changes: object) -> Project:
        """Apply field changes to a project and bump its updated_at.

        Raises:
            ProjectNotFoundError: If no project has this id
        """
        data = self._read()
        index = self._project_index(data, project_id)
        current = data.projects[index]
        updated = current.model_copy(
            update={**changes, "updated_at": _later_than(current.updated_at)}
        )
        data.projects[index] = updated
        self._save(data)
        return updated

    def delete_project(self, project_id: str) -> bool:
        """Delete a project with its entries and summary.

        Returns:
            True if the project existed
        """
        data = self._read()
        if not any(p.id == project_id for p in data.projects):
            return False
        data.projects = [p for p in data.projects if p.id != project_id]
        data.entries = [e for e in data.entries if e.project_id != project_id]
        data.summaries = [s for s in data.summaries if s.project_id != project_id]
        self._save(data)
        return True

    @staticmethod
    def _project_index(data: StorageData, project_id: str) -> int:
        for index, project in enumerate(data.projects):
            if project.id == project_id:
                return index
        raise ProjectNotFoundError(project_id)

    def _touch_project(self, data: StorageData, project_id: str) -> None:
        for index, project in enumerate(data.projects):
            if project.id == project_id:
                data.projects[index] = project.model_copy(
                    update={"updated_at": _later_than(project.updated_at)}
                )
                return

    # --- Entries ---

    def get_entries(self, project_id: str) -> list[Entry]:
        """Entries of a project, ordered by date."""
        entries = [e for e in self._load().entries if e.project_id == project_id]
        return sorted(entries, key=lambda e: (e.date, e.created_at))

    def get_entry(self, entry_id: str) -> Entry | None:
        return next((e for e in self._load().entries if e.id == entry_id), None)

    def get_entry_by_date(self, project_id: str, day: date) -> Entry | None:
        return next(
            (e for e in self._load().entries if e.project_id == project_id and e.date == day),
            None,
        )

    def create_entry(self, project_id: str, day: date, reflection: str) -> Entry:
        """Create an entry and bump the owning project's updated_at.

        Raises:
            ProjectNotFoundError: If the project doesn't exist
        """
        data = self._read()
        self._project_index(data, project_id)
        entry = Entry(project_id=project_id, date=day, reflection=reflection)
        data.entries.append(entry)
        self._touch_project(data, project_id)
        self._save(data)
        return entry

    def update_entry(self, entry_id: str, **changes: object) -> Entry:
        """Apply field changes to an entry.

        The entry's updated_at always moves forward, so its project's
        content fingerprint changes.

        Raises:
            EntryNotFoundError: If no entry has this id
        """
        data = self._read()
        for index, entry in enumerate(data.entries):
            if entry.id == entry_id:
                updated = entry.model_copy(
                    update={**changes, "updated_at": _later_than(entry.updated_at)}
                )
                data.entries[index] = updated
                self._touch_project(data, updated.project_id)
                self._save(data)
                return updated
        raise EntryNotFoundError(entry_id)

    def delete_entry(self, entry_id: str) -> bool:
        data = self._read()
        entry = next((e for e in data.entries if e.id == entry_id), None)
        if entry is None:
            return False
        data.entries = [e for e in data.entries if e.id != entry_id]
        self._touch_project(data, entry.project_id)
        self._save(data)
        return True

    def content_fingerprint(self, project_id: str) -> str:
        """Fingerprint of the project's current entry set."""
        return content_fingerprint(self.get_entries(project_id))

    # --- Summaries ---

    def get_summary(self, project_id: str) -> SummaryRecord | None:
        return next((s for s in self._load().summaries if s.project_id == project_id), None)

    def get_summaries(self) -> list[SummaryRecord]:
        return list(self._load().summaries)

    def save_summary(self, record: SummaryRecord) -> None:
        """Persist a summary, replacing any existing record for the project."""
        data = self._read()
        data.summaries = [s for s in data.summaries if s.project_id != record.project_id]
        data.summaries.append(record)
        self._save(data)

    def delete_summary(self, project_id: str) -> bool:
        """Delete a project's summary record.

        Returns:
            True if a record was removed
        """
        data = self._read()
        remaining = [s for s in data.summaries if s.project_id != project_id]
        if len(remaining) == len(data.summaries):
            return False
        data.summaries = remaining
        self._save(data)
        return True
