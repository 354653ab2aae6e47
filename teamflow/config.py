from __future__ import annotations

# teamflow/config.py
import os
import yaml

# DB 路径解析顺序：
# 1) 环境变量 TEAMFLOW_DB_PATH（最高优先级）
# 2) config.yaml 的 test_db_path（当检测到测试环境时）
# 3) config.yaml 的 db_path（生产默认）
# 4) 兜底：项目根 database/db.sqlite
_PROJECT_ROOT = os.path.dirname(os.path.dirname(__file__))
_DEFAULT_DB = os.path.join(_PROJECT_ROOT, "database", "db.sqlite")

DEFAULTS = {
    "search_case_sensitive": True,
}


def _config_path() -> str:
    return os.environ.get("TEAMFLOW_CONFIG") or os.path.join(_PROJECT_ROOT, "config.yaml")


def read_config_yaml(path: str | None = None) -> dict:
    cfg_path = path or _config_path()
    if not os.path.exists(cfg_path):
        return {}
    try:
        with open(cfg_path, "r", encoding="utf-8") as f:
            cfg = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError):
        return {}
    return cfg if isinstance(cfg, dict) else {}


def get_db_path() -> str:
    env_path = os.environ.get("TEAMFLOW_DB_PATH")
    cfg = read_config_yaml()
    cfg_db = cfg.get("db_path")
    cfg_test = cfg.get("test_db_path")
    is_test = (os.environ.get("APP_ENV") == "test") or (os.environ.get("PYTEST_CURRENT_TEST") is not None)

    if env_path:
        path = env_path
    elif is_test and isinstance(cfg_test, str) and cfg_test.strip():
        path = cfg_test.strip()
    elif isinstance(cfg_db, str) and cfg_db.strip():
        path = cfg_db.strip()
    else:
        path = _DEFAULT_DB

    if path != ":memory:":
        # 确保目录存在
        dirn = os.path.dirname(path) or "."
        os.makedirs(dirn, exist_ok=True)
    return path


_TRUE = {"true", "yes", "on", "1"}
_FALSE = {"false", "no", "off", "0"}


def _as_bool(v, default: bool) -> bool:
    if isinstance(v, bool):
        return v
    if isinstance(v, int):
        return v != 0
    s = str(v or "").strip().lower()
    if s in _TRUE:
        return True
    if s in _FALSE:
        return False
    return default


def get_settings() -> dict:
    cfg = read_config_yaml()
    search = cfg.get("search") if isinstance(cfg.get("search"), dict) else {}
    default = DEFAULTS["search_case_sensitive"]
    return {
        "search_case_sensitive": _as_bool(search.get("case_sensitive", default), default),
    }
