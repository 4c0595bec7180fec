"""Daily submission checklist bot for a single Discord server."""

__version__ = "1.0.0"
