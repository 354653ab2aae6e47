import json, time, uuid, datetime as dt
from typing import Optional, Tuple, List, Dict, Any

from .db import ConnectionManager

def _dumps(obj) -> Optional[str]:
    if obj is None:
        return None
    return json.dumps(obj, ensure_ascii=False, default=str)


class LogContext:
    def __init__(self, cm: ConnectionManager, action: str, user: str = "system"):
        self.cm = cm
        self.action = action
        self.user = user
        self.request_id = str(uuid.uuid4())
        self.start = time.perf_counter()
        self.before = None
        self.after = None
        self.payload = None
        self.entity_type = None
        self.entity_id = None

    def set_entity(self, etype: str, eid):
        self.entity_type = etype
        self.entity_id = str(eid)

    def set_before(self, obj): self.before = obj
    def set_after(self, obj): self.after = obj
    def set_payload(self, obj): self.payload = obj

    def write(self, result: str = "OK", err: Optional[str] = None):
        elapsed_ms = int((time.perf_counter() - self.start) * 1000)
        rec = {
            "ts": dt.datetime.now(dt.timezone.utc).isoformat(),
            "user": self.user,
            "action": self.action,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "request_id": self.request_id,
            "before_json": _dumps(self.before),
            "after_json": _dumps(self.after),
            "payload_json": _dumps(self.payload),
            "result": result,
            "err_msg": err,
            "latency_ms": elapsed_ms,
        }
        with self.cm.cursor() as cur:
            cur.execute(
                """INSERT INTO operation_log
                (ts,user,action,entity_type,entity_id,request_id,before_json,after_json,payload_json,result,err_msg,latency_ms)
                VALUES(:ts,:user,:action,:entity_type,:entity_id,:request_id,:before_json,:after_json,:payload_json,:result,:err_msg,:latency_ms)""",
                rec
            )


def search_logs(cm: ConnectionManager, q: str|None, action: str|None, ts_from: str|None, ts_to: str|None,
                page: int = 1, size: int = 20) -> Tuple[int, List[Dict[str, Any]]]:
    where = []
    params = {}
    if q:
        where.append("(payload_json LIKE :q OR before_json LIKE :q OR after_json LIKE :q)")
        params["q"] = f"%{q}%"
    if action:
        where.append("action = :action")
        params["action"] = action
    if ts_from:
        where.append("ts >= :from")
        params["from"] = ts_from
    if ts_to:
        where.append("ts <= :to")
        params["to"] = ts_to
    wh = " WHERE " + " AND ".join(where) if where else ""
    sql = f"SELECT * FROM operation_log{wh} ORDER BY ts DESC, id DESC LIMIT :limit OFFSET :offset"
    count_sql = f"SELECT COUNT(1) AS cnt FROM operation_log{wh}"
    with cm.cursor() as cur:
        total = cur.execute(count_sql, params).fetchone()["cnt"]
        rows = cur.execute(sql, {**params, "limit": size, "offset": (page-1)*size}).fetchall()
    return total, [dict(r) for r in rows]
