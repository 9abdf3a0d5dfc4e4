"""Build and validate compiled AGENTS.md documents from skill rule files."""

__version__ = "0.1.0"
