from __future__ import annotations

from typing import List

from ..config import get_settings
from ..models import Message
from ..repository.message_repo import MessageRepository


class SearchService:
    """
    在全部消息中按子串过滤 content，保持仓储返回的顺序。
    空字符串匹配所有消息。大小写策略可配置（默认区分大小写）。
    """

    def __init__(self, messages: MessageRepository, case_sensitive: bool | None = None):
        self.messages = messages
        if case_sensitive is None:
            case_sensitive = get_settings()["search_case_sensitive"]
        self.case_sensitive = case_sensitive

    def search(self, term: str) -> List[Message]:
        term = term or ""
        all_messages = self.messages.get_all()
        if self.case_sensitive:
            return [m for m in all_messages if term in m.content]
        needle = term.casefold()
        return [m for m in all_messages if needle in m.content.casefold()]
