from __future__ import annotations

from sqlite3 import Row
from typing import Any, Tuple

from ..errors import ValidationError
from ..models import User
from .base import EntityRepository, is_non_empty_str


class UserRepository(EntityRepository[User]):
    entity_name = "User"
    table = "GEBRUIKER"
    key_column = "gebruikersnaam"
    value_columns = ("weergavenaam",)

    def is_valid_key(self, key: Any) -> bool:
        return is_non_empty_str(key)

    def key_of(self, entity: User) -> str:
        return entity.username

    def set_key(self, entity: User, key: Any) -> None:
        entity.username = key

    def from_row(self, row: Row) -> User:
        return User(username=row["gebruikersnaam"], display_name=row["weergavenaam"] or "")

    def to_values(self, entity: User) -> Tuple[Any, ...]:
        return (entity.display_name,)

    def validate(self, entity: User) -> None:
        if not is_non_empty_str(entity.username):
            raise ValidationError("username cannot be empty")
        if not is_non_empty_str(entity.display_name):
            raise ValidationError("display_name cannot be empty")
