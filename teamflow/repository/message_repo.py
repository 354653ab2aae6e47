from __future__ import annotations

from datetime import datetime
from sqlite3 import Row
from typing import Any, List, Tuple

from ..errors import ValidationError
from ..models import Message
from .base import EntityRepository, is_non_empty_str, is_positive_int


def _to_datetime(v) -> datetime | None:
    if v is None or v == "":
        return None
    if isinstance(v, datetime):
        return v
    if isinstance(v, (int, float)):
        # 旧库（JDBC）以毫秒时间戳保存 tijdstip
        return datetime.fromtimestamp(v / 1000)
    return datetime.fromisoformat(str(v))


class MessageRepository(EntityRepository[Message]):
    entity_name = "Message"
    table = "BERICHT"
    key_column = "berichtID"
    value_columns = ("inhoud", "tijdstip", "afzender", "sprintNummer")
    generated_key = True

    def is_valid_key(self, key: Any) -> bool:
        return is_positive_int(key)

    def key_of(self, entity: Message) -> int | None:
        return entity.id

    def set_key(self, entity: Message, key: Any) -> None:
        entity.id = key

    def from_row(self, row: Row) -> Message:
        return Message(
            id=row["berichtID"],
            content=row["inhoud"] or "",
            timestamp=_to_datetime(row["tijdstip"]),
            sender_username=row["afzender"] or "",
            sprint_number=row["sprintNummer"] or 0,
        )

    def to_values(self, entity: Message) -> Tuple[Any, ...]:
        return (
            entity.content,
            entity.timestamp.isoformat(),
            entity.sender_username,
            entity.sprint_number,
        )

    def validate(self, entity: Message) -> None:
        # 不校验 afzender / sprintNummer 是否存在于 GEBRUIKER / SPRINT
        if not is_non_empty_str(entity.content):
            raise ValidationError("content cannot be empty")
        if not is_non_empty_str(entity.sender_username):
            raise ValidationError("sender_username cannot be empty")
        if not is_positive_int(entity.sprint_number):
            raise ValidationError("sprint_number must be greater than 0")

    def prepare(self, entity: Message) -> None:
        if entity.timestamp is None:
            entity.timestamp = datetime.now()

    def get_by_sender(self, sender_username: str) -> List[Message]:
        """获取某个用户发送的所有消息"""
        return self.fetch_where("afzender = ?", (sender_username,))

    def get_by_sprint(self, sprint_number: int) -> List[Message]:
        """获取某个 sprint 内的所有消息"""
        return self.fetch_where("sprintNummer = ?", (sprint_number,))
