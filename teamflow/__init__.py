"""TeamFlow: sprint-tagged team messages with optional Trello links (SQLite)."""
from __future__ import annotations

__version__ = "0.1.0"
