import os
import sys
import sqlite3
import pytest
from pathlib import Path

# Ensure project root on sys.path
_THIS_DIR = Path(__file__).resolve().parent
_PROJECT_ROOT = _THIS_DIR.parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))


@pytest.fixture(scope="session")
def tmp_db_path(tmp_path_factory):
    path = tmp_path_factory.mktemp("db") / "teamflow_test.db"
    # Point teamflow to this temp DB
    os.environ["TEAMFLOW_DB_PATH"] = str(path)
    from teamflow.db import ConnectionManager
    with ConnectionManager(str(path)) as cm:
        cm.ensure_schema()
    return str(path)


@pytest.fixture()
def cm(tmp_db_path):
    from teamflow.db import ConnectionManager
    manager = ConnectionManager()
    yield manager
    manager.close()


@pytest.fixture(autouse=True)
def _clean_db(tmp_db_path):
    # Clean tables before each test for isolation
    # Safety: ensure we only ever wipe the temp DB, never a real one
    assert os.environ.get("TEAMFLOW_DB_PATH") == tmp_db_path, "Refusing to clean non-temp DB"
    tables = [
        "GEBRUIKER",
        "SPRINT",
        "BERICHT",
        "TRELLO",
        "TAAK",
        "operation_log",
    ]
    conn = sqlite3.connect(tmp_db_path)
    try:
        for t in tables:
            conn.execute(f"DELETE FROM {t}")
        # AUTOINCREMENT counters restart per test
        conn.execute("DELETE FROM sqlite_sequence")
        conn.commit()
    finally:
        conn.close()
    yield


@pytest.fixture()
def row_count(tmp_db_path):
    def _count(table: str) -> int:
        conn = sqlite3.connect(tmp_db_path)
        try:
            return conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]
        finally:
            conn.close()
    return _count
