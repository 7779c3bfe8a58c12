"""Daybook journal: projects, entries and the JSON document store."""

from daybook.journal.fingerprint import content_fingerprint
from daybook.journal.models import Entry, Project, StorageData, SummaryRecord
from daybook.journal.store import (
    EntryNotFoundError,
    JournalStore,
    ProjectNotFoundError,
    StorageLimitError,
    StoreError,
    SummaryStore,
)

__all__ = [
    "Entry",
    "EntryNotFoundError",
    "JournalStore",
    "Project",
    "ProjectNotFoundError",
    "StorageData",
    "StorageLimitError",
    "StoreError",
    "SummaryRecord",
    "SummaryStore",
    "content_fingerprint",
]
