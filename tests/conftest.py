"""Shared test fixtures."""

from collections.abc import Iterator
from pathlib import Path

import pytest
from pydantic_ai import models

from daybook.journal.store import JournalStore


@pytest.fixture(autouse=True)
def _prevent_real_api_calls() -> Iterator[None]:
    """Safety: block real model requests in all tests."""
    original = models.ALLOW_MODEL_REQUESTS
    models.ALLOW_MODEL_REQUESTS = False
    yield
    models.ALLOW_MODEL_REQUESTS = original


@pytest.fixture
def store(tmp_path: Path) -> JournalStore:
    """Empty journal store rooted in a temp directory."""
    return JournalStore(tmp_path)
