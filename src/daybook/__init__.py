"""Daybook: project journaling with cached AI project summaries."""

__version__ = "0.1.0-dev"
