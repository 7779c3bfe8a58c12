"""Prompt for project summarization."""

from collections.abc import Sequence

from daybook.journal.models import Entry

SYSTEM_PROMPT = "You write short, encouraging summaries of creative projects."


def build_prompt(project_name: str, entries: Sequence[Entry]) -> str:
    """Build the summarization prompt for a project.

    Entries are listed oldest first and numbered by position, so "Day 3" is
    the third entry written, not the third calendar day.

    Args:
        project_name: Display name of the project
        entries: The project's entries, in any order

    Returns:
        Prompt string for the model
    """
    ordered = sorted(entries, key=lambda e: (e.date, e.created_at))
    entries_text = "\n\n".join(
        f"Day {index} ({entry.date.isoformat()}): {entry.reflection}"
        for index, entry in enumerate(ordered, start=1)
    )

    return "\n".join(
        [
            f'Here are the daily entries for a creative project called "{project_name}":',
            "",
            entries_text,
            "",
            "Please write exactly 1 sentence that summarizes this project. "
            "The tone should be encouraging and supportive but neutral - not like it's "
            "coming from a person. Focus on what the project is about, what has been "
            "learned or accomplished, and where it seems to be headed. Use \"you\" to "
            "address the creator directly, but avoid phrases like \"I love how\" or "
            '"I can see" - keep it observational and encouraging without personal '
            "commentary.",
        ]
    )
