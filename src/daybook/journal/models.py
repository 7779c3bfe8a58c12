"""Journal data models: projects, dated entries and cached summaries."""

from datetime import UTC, date, datetime
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


def new_id() -> str:
    """Generate a new opaque record identifier."""
    return uuid4().hex


def utc_now() -> datetime:
    return datetime.now(UTC)


class Project(BaseModel):
    """A journaled project."""

    id: str = Field(default_factory=new_id)
    name: str
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
    is_active: bool = True

    model_config = ConfigDict(frozen=True)


class Entry(BaseModel):
    """One dated reflection belonging to a project.

    ``updated_at`` is the modification time the content fingerprint is
    derived from; the store guarantees it strictly increases on every edit.
    """

    id: str = Field(default_factory=new_id)
    project_id: str
    date: date
    reflection: str
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    model_config = ConfigDict(frozen=True)


class SummaryRecord(BaseModel):
    """Cached AI summary for a project.

    Valid only while ``fingerprint`` equals the project's current content
    fingerprint. The fingerprint is compared for equality, never parsed.
    """

    project_id: str
    summary: str
    fingerprint: str
    last_updated: datetime = Field(default_factory=utc_now)

    model_config = ConfigDict(frozen=True)


class StorageData(BaseModel):
    """The whole persisted journal document."""

    projects: list[Project] = Field(default_factory=list)
    entries: list[Entry] = Field(default_factory=list)
    summaries: list[SummaryRecord] = Field(default_factory=list)
    last_sync: datetime = Field(default_factory=utc_now)
