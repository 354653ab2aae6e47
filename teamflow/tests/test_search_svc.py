from unittest.mock import MagicMock

import pytest

from teamflow.errors import StorageError
from teamflow.models import Message
from teamflow.repository import MessageRepository
from teamflow.services.search_svc import SearchService


def _save(repo, content):
    repo.save(Message(id=0, content=content, sender_username="alice", sprint_number=1))


def test_search_substring_preserves_order(cm):
    repo = MessageRepository(cm)
    _save(repo, "hello world")
    _save(repo, "bye")
    _save(repo, "world peace")
    hits = SearchService(repo, case_sensitive=True).search("world")
    assert [m.content for m in hits] == ["hello world", "world peace"]


def test_search_hello_world_bye(cm):
    repo = MessageRepository(cm)
    _save(repo, "hello world")
    _save(repo, "bye")
    hits = SearchService(repo).search("world")
    assert len(hits) == 1
    assert hits[0].content == "hello world"


def test_empty_term_matches_everything(cm):
    repo = MessageRepository(cm)
    _save(repo, "a")
    _save(repo, "b")
    assert len(SearchService(repo).search("")) == 2


def test_case_sensitive_by_default(cm):
    repo = MessageRepository(cm)
    _save(repo, "Hello World")
    svc = SearchService(repo)
    assert svc.case_sensitive is True
    assert svc.search("world") == []


def test_case_insensitive_policy(cm):
    repo = MessageRepository(cm)
    _save(repo, "Hello World")
    _save(repo, "nothing")
    hits = SearchService(repo, case_sensitive=False).search("WORLD")
    assert [m.content for m in hits] == ["Hello World"]


def test_search_only_uses_get_all():
    repo = MagicMock(spec=MessageRepository)
    repo.get_all.return_value = [
        Message(id=1, content="sprint demo", sender_username="a", sprint_number=1),
        Message(id=2, content="retro", sender_username="b", sprint_number=1),
    ]
    hits = SearchService(repo, case_sensitive=True).search("demo")
    assert [m.id for m in hits] == [1]
    repo.get_all.assert_called_once_with()


def test_storage_error_propagates():
    repo = MagicMock(spec=MessageRepository)
    repo.get_all.side_effect = StorageError("disk I/O error")
    with pytest.raises(StorageError):
        SearchService(repo, case_sensitive=True).search("x")
