from __future__ import annotations

# teamflow/services/log_svc.py
import json
from typing import Any, Dict, List, Optional, Tuple

from ..db import ConnectionManager
from ..logs import search_logs

_JSON_COLUMNS = ("before_json", "after_json", "payload_json")


def _loads(s: Optional[str]):
    if s is None:
        return None
    try:
        return json.loads(s)
    except ValueError:
        return s


def list_operations(cm: ConnectionManager, query: Optional[str] = None, action: Optional[str] = None,
                    ts_from: Optional[str] = None, ts_to: Optional[str] = None,
                    page: int = 1, size: int = 20) -> Dict[str, Any]:
    """分页查询操作日志，JSON 列解码为对象（before/after/payload）。"""
    page = max(1, int(page or 1))
    size = max(1, int(size or 20))
    total, rows = search_logs(cm, query, action, ts_from, ts_to, page, size)
    items: List[Dict[str, Any]] = []
    for r in rows:
        item = {k: v for k, v in r.items() if k not in _JSON_COLUMNS}
        for col in _JSON_COLUMNS:
            item[col[:-len("_json")]] = _loads(r.get(col))
        items.append(item)
    return {"total": total, "page": page, "size": size, "items": items}
