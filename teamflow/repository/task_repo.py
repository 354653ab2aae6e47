from __future__ import annotations

from sqlite3 import Row
from typing import Any, List, Tuple

from ..errors import ValidationError
from ..models import Task
from .base import EntityRepository, is_positive_int


class TaskRepository(EntityRepository[Task]):
    """TAAK: keyed by the message it was raised from; trelloID is not checked against TRELLO."""
    entity_name = "Task"
    table = "TAAK"
    key_column = "berichtID"
    value_columns = ("trelloID", "beschrijving")

    def is_valid_key(self, key: Any) -> bool:
        return is_positive_int(key)

    def key_of(self, entity: Task) -> int:
        return entity.message_id

    def set_key(self, entity: Task, key: Any) -> None:
        entity.message_id = key

    def from_row(self, row: Row) -> Task:
        return Task(
            message_id=row["berichtID"],
            trello_id=row["trelloID"] or 0,
            description=row["beschrijving"] or "",
        )

    def to_values(self, entity: Task) -> Tuple[Any, ...]:
        return (entity.trello_id, entity.description)

    def validate(self, entity: Task) -> None:
        if not is_positive_int(entity.message_id):
            raise ValidationError("message_id must be greater than 0")
        if not is_positive_int(entity.trello_id):
            raise ValidationError("trello_id must be greater than 0")
        if entity.description is None:
            raise ValidationError("description cannot be None")

    def get_by_trello(self, trello_id: int) -> List[Task]:
        return self.fetch_where("trelloID = ?", (trello_id,))
