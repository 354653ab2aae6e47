"""Repository layer: DB access for GEBRUIKER / SPRINT / BERICHT / TRELLO / TAAK (SQLite).

Keep classes thin, so services avoid SQL strings.
"""
from __future__ import annotations

from .base import EntityRepository
from .message_repo import MessageRepository
from .sprint_repo import SprintRepository
from .task_repo import TaskRepository
from .trello_repo import TrelloLinkRepository
from .user_repo import UserRepository

__all__ = [
    "EntityRepository",
    "MessageRepository",
    "SprintRepository",
    "TaskRepository",
    "TrelloLinkRepository",
    "UserRepository",
]
