from __future__ import annotations

# teamflow/services/message_svc.py
import logging
from datetime import datetime
from typing import List, Optional

from ..db import ConnectionManager
from ..errors import StorageError, TeamFlowError
from ..logs import LogContext
from ..models import Message, TrelloLink
from ..repository import MessageRepository, TrelloLinkRepository

logger = logging.getLogger(__name__)

DATE_TIME_FORMAT = "%Y-%m-%d %H:%M"


def post_message(cm: ConnectionManager, content: str, sender_username: str, sprint_number: int,
                 trello_url: Optional[str] = None, log: Optional[LogContext] = None) -> Message:
    """发送消息；给了 trello_url 时同时保存一条关联到该消息的 Trello 链接（同一事务）。"""
    log = log or LogContext(cm, "POST_MESSAGE", user=sender_username or "system")
    msg = Message(
        id=0,
        content=content or "",
        timestamp=datetime.now(),
        sender_username=sender_username or "",
        sprint_number=sprint_number or 0,
    )
    log.set_payload({"content": msg.content, "sender": msg.sender_username,
                     "sprint": msg.sprint_number, "trello_url": trello_url})
    link = None
    try:
        # 消息、链接与操作日志一起提交
        with cm.transaction():
            msg_id = MessageRepository(cm).save(msg)
            if trello_url:
                link = TrelloLink(id=0, message_id=msg_id, url=trello_url)
                TrelloLinkRepository(cm).save(link)
            log.set_entity("MESSAGE", msg.id)
            log.set_after({"message": msg.model_dump(mode="json"),
                           "trello": link.model_dump(mode="json") if link else None})
            log.write()
    except TeamFlowError as e:
        msg.id = 0
        logger.warning(f"post_message failed for {msg.sender_username}: {e}")
        try:
            log.write("ERROR", str(e))
        except StorageError as log_err:
            logger.error(f"Writing operation log failed: {log_err}")
        raise
    return msg


def chat_history(cm: ConnectionManager) -> List[Message]:
    return MessageRepository(cm).get_all()


def sprint_history(cm: ConnectionManager, sprint_number: int) -> List[Message]:
    return MessageRepository(cm).get_by_sprint(sprint_number)


def sender_history(cm: ConnectionManager, sender_username: str) -> List[Message]:
    return MessageRepository(cm).get_by_sender(sender_username)


def format_message(m: Message) -> str:
    ts = m.timestamp.strftime(DATE_TIME_FORMAT) if m.timestamp else "----------------"
    return f"[{ts} | {m.sender_username}] {m.content}"
