"""Content fingerprint: detect whether a project's entries changed.

The digest covers each entry's identity and modification time only, so it
changes when an entry is added, edited or removed and is independent of the
order entries are listed in.
"""

import hashlib
from collections.abc import Iterable

from daybook.journal.models import Entry


def _entry_signature(entry: Entry) -> str:
    """Build the per-entry signature: ``{id}:{updated_at}``."""
    return f"{entry.id}:{entry.updated_at.isoformat()}"


def content_fingerprint(entries: Iterable[Entry]) -> str:
    """Compute the fingerprint of an entry set.

    Args:
        entries: Entries of a single project, in any order

    Returns:
        Hex SHA-256 digest of the sorted entry signatures
    """
    digest = hashlib.sha256()
    for signature in sorted(_entry_signature(e) for e in entries):
        digest.update(signature.encode("utf-8"))
        digest.update(b"\n")
    return digest.hexdigest()
