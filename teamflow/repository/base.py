"""
通用实体仓储：exists / lookup / get_all / save(upsert) / delete。
每个实体只需声明表名、主键列、字段列表以及行 <-> 实体的映射。
"""
from __future__ import annotations

import logging
from sqlite3 import Row
from typing import Any, Generic, List, Sequence, Tuple, TypeVar

from ..db import ConnectionManager
from ..errors import NotFoundError, StorageError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def is_positive_int(key: Any) -> bool:
    return isinstance(key, int) and not isinstance(key, bool) and key > 0


def is_non_empty_str(key: Any) -> bool:
    return isinstance(key, str) and key != ""


class EntityRepository(Generic[T]):
    entity_name: str = ""
    table: str = ""
    key_column: str = ""
    # 非主键列，顺序即 INSERT/UPDATE 的参数顺序
    value_columns: Tuple[str, ...] = ()
    # 主键由数据库生成（AUTOINCREMENT / INTEGER PRIMARY KEY）
    generated_key: bool = False

    def __init__(self, cm: ConnectionManager):
        self.cm = cm

    # ---- hooks ----

    def is_valid_key(self, key: Any) -> bool:
        raise NotImplementedError

    def key_of(self, entity: T) -> Any:
        raise NotImplementedError

    def set_key(self, entity: T, key: Any) -> None:
        raise NotImplementedError

    def from_row(self, row: Row) -> T:
        raise NotImplementedError

    def to_values(self, entity: T) -> Tuple[Any, ...]:
        raise NotImplementedError

    def validate(self, entity: T) -> None:
        """Raise ValidationError for missing/invalid fields. Must not touch storage."""

    def prepare(self, entity: T) -> None:
        """Fill in defaults on the entity after validation, before writing."""

    # ---- SQL helpers ----

    @property
    def columns(self) -> Tuple[str, ...]:
        return (self.key_column,) + tuple(self.value_columns)

    def _select_sql(self) -> str:
        return f"SELECT {', '.join(self.columns)} FROM {self.table}"

    def fetch_where(self, where: str, params: Sequence[Any]) -> List[T]:
        sql = self._select_sql()
        if where:
            sql += f" WHERE {where}"
        with self.cm.cursor() as cur:
            cur.execute(sql, tuple(params))
            rows = cur.fetchall()
        return [self.from_row(r) for r in rows]

    # ---- operations ----

    def exists(self, key: Any) -> bool:
        if not self.is_valid_key(key):
            return False
        with self.cm.cursor() as cur:
            cur.execute(f"SELECT COUNT(*) FROM {self.table} WHERE {self.key_column} = ?", (key,))
            row = cur.fetchone()
        return bool(row and row[0] > 0)

    def lookup(self, key: Any) -> T:
        if not self.exists(key):
            raise NotFoundError(self.entity_name, key)
        found = self.fetch_where(f"{self.key_column} = ?", (key,))
        if not found:
            # 两次查询之间被删除
            raise NotFoundError(self.entity_name, key)
        return found[0]

    def get_all(self) -> List[T]:
        return self.fetch_where("", ())

    def save(self, entity: T) -> Any:
        self.validate(entity)
        self.prepare(entity)
        key = self.key_of(entity)
        if self.is_valid_key(key) and self.exists(key):
            self._update(entity, key)
            logger.debug(f"{self.entity_name} {key!r} updated")
            return key
        new_key = self._insert(entity)
        logger.debug(f"{self.entity_name} {new_key!r} inserted")
        return new_key

    def delete(self, key: Any) -> bool:
        if not self.exists(key):
            return False
        with self.cm.cursor() as cur:
            cur.execute(f"DELETE FROM {self.table} WHERE {self.key_column} = ?", (key,))
            affected = cur.rowcount
        return affected > 0

    # ---- write paths ----

    def _update(self, entity: T, key: Any) -> None:
        assignments = ", ".join(f"{c} = ?" for c in self.value_columns)
        with self.cm.cursor() as cur:
            cur.execute(
                f"UPDATE {self.table} SET {assignments} WHERE {self.key_column} = ?",
                self.to_values(entity) + (key,),
            )

    def _insert_explicit(self, entity: T, key: Any) -> Any:
        placeholders = ",".join(["?"] * len(self.columns))
        with self.cm.cursor() as cur:
            cur.execute(
                f"INSERT INTO {self.table} ({', '.join(self.columns)}) VALUES ({placeholders})",
                (key,) + self.to_values(entity),
            )
        return key

    def _insert_generated(self, entity: T) -> int:
        placeholders = ",".join(["?"] * len(self.value_columns))
        with self.cm.cursor() as cur:
            cur.execute(
                f"INSERT INTO {self.table} ({', '.join(self.value_columns)}) VALUES ({placeholders})",
                self.to_values(entity),
            )
            new_id = cur.lastrowid
        if not new_id:
            raise StorageError(f"Creating {self.entity_name} failed, no ID obtained.")
        new_id = int(new_id)
        self.set_key(entity, new_id)
        return new_id

    def _insert(self, entity: T) -> Any:
        if self.generated_key:
            return self._insert_generated(entity)
        return self._insert_explicit(entity, self.key_of(entity))

