from __future__ import annotations

# teamflow/db.py
import logging
import sqlite3
from contextlib import contextmanager
from typing import Iterator

from .config import get_db_path
from .errors import StorageError

logger = logging.getLogger(__name__)

DDL = """
CREATE TABLE IF NOT EXISTS GEBRUIKER (
  gebruikersnaam TEXT PRIMARY KEY,
  weergavenaam TEXT
);
CREATE TABLE IF NOT EXISTS SPRINT (
  sprintNummer INTEGER PRIMARY KEY,
  beginDatum DATE,
  eindDatum DATE
);
CREATE TABLE IF NOT EXISTS BERICHT (
  berichtID INTEGER PRIMARY KEY AUTOINCREMENT,
  inhoud TEXT,
  tijdstip TIMESTAMP,
  afzender TEXT,
  sprintNummer INTEGER
);
CREATE TABLE IF NOT EXISTS TRELLO (
  trelloID INTEGER PRIMARY KEY,
  berichtID INTEGER DEFAULT 0,
  trelloURL TEXT
);
CREATE TABLE IF NOT EXISTS TAAK (
  berichtID INTEGER PRIMARY KEY,
  trelloID INTEGER,
  beschrijving TEXT
);
CREATE INDEX IF NOT EXISTS idx_bericht_afzender ON BERICHT(afzender);
CREATE INDEX IF NOT EXISTS idx_bericht_sprint ON BERICHT(sprintNummer);
CREATE INDEX IF NOT EXISTS idx_trello_bericht ON TRELLO(berichtID);
CREATE TABLE IF NOT EXISTS operation_log (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  ts TEXT NOT NULL,
  user TEXT NOT NULL,
  action TEXT NOT NULL,
  entity_type TEXT,
  entity_id TEXT,
  request_id TEXT,
  before_json TEXT,
  after_json TEXT,
  payload_json TEXT,
  result TEXT,
  err_msg TEXT,
  latency_ms INTEGER
);
CREATE INDEX IF NOT EXISTS idx_log_ts ON operation_log(ts);
CREATE INDEX IF NOT EXISTS idx_log_action ON operation_log(action);
"""


class ConnectionManager:
    """
    持有一个 SQLite 连接，首次使用时创建，close() 时释放。
    仓储层只通过 cursor()/transaction() 借用连接，从不关闭它。

    Not thread-safe: one logical caller at a time.
    """

    def __init__(self, db_path: str | None = None, timeout: float = 5.0):
        self.db_path = db_path
        self.timeout = timeout
        self._conn: sqlite3.Connection | None = None

    def __enter__(self) -> "ConnectionManager":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    def get_handle(self) -> sqlite3.Connection:
        if self._conn is not None:
            return self._conn
        path = self.db_path or get_db_path()
        try:
            conn = sqlite3.connect(
                path,
                timeout=self.timeout,
                check_same_thread=False,
                isolation_level=None,
            )
        except sqlite3.Error as e:
            # 保持 _conn 为空，下次调用会重新尝试连接
            logger.error(f"Connection error for {path}: {e}")
            raise StorageError(f"cannot open database {path}: {e}") from e
        try:
            conn.execute("PRAGMA foreign_keys = ON;")
        except sqlite3.Error as e:
            conn.close()
            raise StorageError(f"cannot configure database {path}: {e}") from e
        conn.row_factory = sqlite3.Row
        logger.info(f"Connected to SQLite: {path}")
        self.db_path = path
        self._conn = conn
        return conn

    def close(self) -> None:
        if self._conn is None:
            return
        conn, self._conn = self._conn, None
        try:
            conn.close()
        except sqlite3.Error as e:
            raise StorageError(f"error closing connection: {e}") from e
        logger.info("Database connection closed.")

    @contextmanager
    def cursor(self) -> Iterator[sqlite3.Cursor]:
        """
        获取单次调用范围内的游标。无论成功或失败都会关闭游标；
        sqlite3.Error 统一转换为 StorageError。
        """
        conn = self.get_handle()
        cur = None
        try:
            cur = conn.cursor()
            yield cur
        except sqlite3.Error as e:
            logger.error(f"SQLite error: {e}")
            raise StorageError(str(e)) from e
        finally:
            if cur is not None:
                cur.close()

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """BEGIN/COMMIT around the block, ROLLBACK on any exception. Joins an outer transaction."""
        conn = self.get_handle()
        if conn.in_transaction:
            yield conn
            return
        try:
            conn.execute("BEGIN")
        except sqlite3.Error as e:
            raise StorageError(f"cannot begin transaction: {e}") from e
        try:
            yield conn
        except BaseException:
            try:
                conn.execute("ROLLBACK")
            except sqlite3.Error as e:
                logger.error(f"Rollback failed: {e}")
            raise
        try:
            conn.execute("COMMIT")
        except sqlite3.Error as e:
            # COMMIT 失败（如 SQLITE_BUSY）时事务仍处于打开状态，必须回滚
            try:
                conn.execute("ROLLBACK")
            except sqlite3.Error as rb:
                logger.error(f"Rollback after failed commit failed: {rb}")
            raise StorageError(f"commit failed: {e}") from e

    def ensure_schema(self) -> None:
        try:
            self.get_handle().executescript(DDL)
        except sqlite3.Error as e:
            raise StorageError(f"schema creation failed: {e}") from e
