from __future__ import annotations

from datetime import date
from sqlite3 import Row
from typing import Any, Tuple

from ..errors import ValidationError
from ..models import Sprint
from .base import EntityRepository, is_positive_int


def _to_date(v) -> date | None:
    if v is None or v == "":
        return None
    if isinstance(v, date):
        return v
    # 兼容 "YYYY-MM-DD HH:MM:SS" 形式
    return date.fromisoformat(str(v)[:10])


class SprintRepository(EntityRepository[Sprint]):
    entity_name = "Sprint"
    table = "SPRINT"
    key_column = "sprintNummer"
    value_columns = ("beginDatum", "eindDatum")

    def is_valid_key(self, key: Any) -> bool:
        return is_positive_int(key)

    def key_of(self, entity: Sprint) -> int:
        return entity.number

    def set_key(self, entity: Sprint, key: Any) -> None:
        entity.number = key

    def from_row(self, row: Row) -> Sprint:
        return Sprint(
            number=row["sprintNummer"],
            start_date=_to_date(row["beginDatum"]),
            end_date=_to_date(row["eindDatum"]),
        )

    def to_values(self, entity: Sprint) -> Tuple[Any, ...]:
        return (entity.start_date.isoformat(), entity.end_date.isoformat())

    def validate(self, entity: Sprint) -> None:
        # start/end 先后顺序由调用方负责
        if not is_positive_int(entity.number):
            raise ValidationError("sprint number must be greater than 0")
        if entity.start_date is None:
            raise ValidationError("start_date is required")
        if entity.end_date is None:
            raise ValidationError("end_date is required")
