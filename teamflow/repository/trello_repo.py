"""
Trello 链接数据访问层
trelloID 可由调用方显式指定，也可留空由数据库生成；
berichtID 未设置时写入后回读数据库中的值并回填到对象上。
"""
from __future__ import annotations

from sqlite3 import Row
from typing import Any, List

from ..errors import NotFoundError, StorageError, ValidationError
from ..models import TrelloLink
from .base import EntityRepository, is_non_empty_str, is_positive_int


def _is_unset(v) -> bool:
    return v is None or v == 0


class TrelloLinkRepository(EntityRepository[TrelloLink]):
    entity_name = "TrelloLink"
    table = "TRELLO"
    key_column = "trelloID"
    value_columns = ("berichtID", "trelloURL")

    def is_valid_key(self, key: Any) -> bool:
        return is_positive_int(key)

    def key_of(self, entity: TrelloLink) -> int | None:
        return entity.id

    def set_key(self, entity: TrelloLink, key: Any) -> None:
        entity.id = key

    def from_row(self, row: Row) -> TrelloLink:
        return TrelloLink(
            id=row["trelloID"],
            message_id=row["berichtID"] or 0,
            url=row["trelloURL"] or "",
        )

    def validate(self, entity: TrelloLink) -> None:
        if not is_non_empty_str(entity.url):
            raise ValidationError("url cannot be empty")
        if not (_is_unset(entity.id) or is_positive_int(entity.id)):
            raise ValidationError("id must be greater than 0 or left unset")
        if not (_is_unset(entity.message_id) or is_positive_int(entity.message_id)):
            raise ValidationError("message_id must be greater than 0 or left unset")

    def save(self, entity: TrelloLink) -> int:
        """
        保存 Trello 链接（upsert）

        - id 有效且已存在：更新 URL（以及已设置的 message_id）
        - id 有效但不存在：按调用方给定的 id 插入
        - id 未设置：由数据库生成 id，并写回 entity.id
        message_id 未设置时，在同一事务内回读该行并回填 entity.message_id。

        Returns:
            保存后的 trelloID
        """
        self.validate(entity)
        with self.cm.transaction():
            key = entity.id
            if self.is_valid_key(key) and self.exists(key):
                self._update(entity, key)
            elif self.is_valid_key(key):
                self._insert_link(entity, explicit_id=key)
            else:
                key = self._insert_link(entity, explicit_id=None)
                self.set_key(entity, key)
            if _is_unset(entity.message_id):
                self._backfill_message_id(entity, key)
        return key

    def _update(self, entity: TrelloLink, key: Any) -> None:
        # 未设置的 message_id 不覆盖库中已有的关联
        if _is_unset(entity.message_id):
            sql, params = "UPDATE TRELLO SET trelloURL = ? WHERE trelloID = ?", (entity.url, key)
        else:
            sql = "UPDATE TRELLO SET berichtID = ?, trelloURL = ? WHERE trelloID = ?"
            params = (entity.message_id, entity.url, key)
        with self.cm.cursor() as cur:
            cur.execute(sql, params)

    def _insert_link(self, entity: TrelloLink, explicit_id: int | None) -> int:
        cols, params = [], []
        if explicit_id is not None:
            cols.append("trelloID")
            params.append(explicit_id)
        if not _is_unset(entity.message_id):
            cols.append("berichtID")
            params.append(entity.message_id)
        cols.append("trelloURL")
        params.append(entity.url)
        placeholders = ",".join(["?"] * len(cols))
        with self.cm.cursor() as cur:
            cur.execute(f"INSERT INTO TRELLO ({', '.join(cols)}) VALUES ({placeholders})", params)
            new_id = cur.lastrowid
        if explicit_id is not None:
            return explicit_id
        if not new_id:
            raise StorageError("Creating TrelloLink failed, no ID obtained.")
        return int(new_id)

    def _backfill_message_id(self, entity: TrelloLink, key: int) -> None:
        with self.cm.cursor() as cur:
            cur.execute("SELECT berichtID FROM TRELLO WHERE trelloID = ?", (key,))
            row = cur.fetchone()
        if row is None:
            raise StorageError(f"TrelloLink {key} vanished after write")
        entity.message_id = row["berichtID"] or 0

    def get_by_message(self, message_id: int) -> List[TrelloLink]:
        return self.fetch_where("berichtID = ?", (message_id,))

    def lookup_by_message(self, message_id: int) -> TrelloLink:
        """返回第一个关联到该消息的链接；不保证唯一。"""
        if not is_positive_int(message_id):
            raise NotFoundError(self.entity_name, message_id)
        links = self.get_by_message(message_id)
        if not links:
            raise NotFoundError(self.entity_name, message_id)
        return links[0]
