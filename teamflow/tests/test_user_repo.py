"""
用户仓储层测试
"""

import pytest

from teamflow.errors import NotFoundError, ValidationError
from teamflow.models import User
from teamflow.repository import UserRepository


class TestUserRepo:

    def test_save_then_lookup(self, cm):
        repo = UserRepository(cm)
        key = repo.save(User(username="alice", display_name="Alice A"))
        assert key == "alice"
        assert repo.exists("alice")
        u = repo.lookup("alice")
        assert u.username == "alice"
        assert u.display_name == "Alice A"

    def test_save_twice_upserts_single_row(self, cm, row_count):
        repo = UserRepository(cm)
        repo.save(User(username="bob", display_name="Bob"))
        repo.save(User(username="bob", display_name="Robert"))
        assert row_count("GEBRUIKER") == 1
        assert repo.lookup("bob").display_name == "Robert"

    def test_exists_invalid_key_is_false(self, cm):
        repo = UserRepository(cm)
        assert repo.exists("") is False
        assert repo.exists(None) is False
        assert repo.exists("nobody") is False

    def test_lookup_missing_raises_not_found(self, cm):
        with pytest.raises(NotFoundError):
            UserRepository(cm).lookup("ghost")

    @pytest.mark.parametrize("username,display_name", [("", "X"), ("carol", "")])
    def test_save_validation(self, cm, row_count, username, display_name):
        with pytest.raises(ValidationError):
            UserRepository(cm).save(User(username=username, display_name=display_name))
        assert row_count("GEBRUIKER") == 0

    def test_delete(self, cm):
        repo = UserRepository(cm)
        assert repo.delete("dave") is False
        repo.save(User(username="dave", display_name="Dave"))
        assert repo.delete("dave") is True
        assert repo.exists("dave") is False
        assert repo.delete("dave") is False

    def test_get_all(self, cm):
        repo = UserRepository(cm)
        assert repo.get_all() == []
        repo.save(User(username="a", display_name="A"))
        repo.save(User(username="b", display_name="B"))
        assert sorted(u.username for u in repo.get_all()) == ["a", "b"]

    def test_resave_after_delete(self, cm):
        repo = UserRepository(cm)
        u = User(username="eve", display_name="Eve")
        repo.save(u)
        repo.delete("eve")
        repo.save(u)
        assert repo.lookup("eve").display_name == "Eve"
