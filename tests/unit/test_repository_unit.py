# tests/unit/test_repository_unit.py
import uuid
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.exc import OperationalError

from docanalytics.docs.repository import DocumentRepository
from docanalytics.errors import PersistenceFailure


@pytest.fixture
def repo(db_session):
    return DocumentRepository(db_session)


@pytest.fixture
def user_id():
    return str(uuid.uuid4())


def _fields(user_id, content="", title="t", minutes_ago=0, **extra):
    fields = {
        "user_id": user_id,
        "title": title,
        "filename": f"{title}.pdf",
        "storage_name": f"{uuid.uuid4().hex}.pdf",
        "url": "file:///tmp/x.pdf",
        "content": content,
        "size_bytes": 10,
        "uploaded_at": datetime.now(timezone.utc) - timedelta(minutes=minutes_ago),
        "classification": "Unclassified",
        "classification_ms": 0.1,
    }
    fields.update(extra)
    return fields


def test_insert_assigns_id(repo, user_id):
    rec = repo.insert(_fields(user_id))
    assert rec.id
    assert repo.find_by_id(rec.id).user_id == user_id


def test_find_all_by_user_is_scoped_and_newest_first(repo, user_id):
    older = repo.insert(_fields(user_id, title="older", minutes_ago=5))
    newer = repo.insert(_fields(user_id, title="newer", minutes_ago=1))
    repo.insert(_fields(str(uuid.uuid4()), title="someone-else"))
    assert [r.id for r in repo.find_all_by_user(user_id)] == [newer.id, older.id]


def test_text_search_is_case_insensitive_substring(repo, user_id):
    hit = repo.insert(_fields(user_id, content="Distributed REPLICATION notes"))
    repo.insert(_fields(user_id, content="unrelated"))
    assert [r.id for r in repo.find_by_text_and_user("replication", user_id)] == [hit.id]


def test_text_search_is_scoped_to_user(repo, user_id):
    repo.insert(_fields(str(uuid.uuid4()), content="secret keyword"))
    assert repo.find_by_text_and_user("keyword", user_id) == []


def test_like_wildcards_match_literally(repo, user_id):
    literal = repo.insert(_fields(user_id, content="discount 100% off"))
    repo.insert(_fields(user_id, content="discount 1000 off"))
    underscored = repo.insert(_fields(user_id, content="snake_case name"))
    repo.insert(_fields(user_id, content="snakeXcase name"))

    assert [r.id for r in repo.find_by_text_and_user("100%", user_id)] == [literal.id]
    assert [r.id for r in repo.find_by_text_and_user("e_c", user_id)] == [underscored.id]


def test_replace_by_id_keeps_id_and_owner(repo, user_id):
    rec = repo.insert(_fields(user_id, title="v1", content="old"))
    replaced = repo.replace_by_id(
        rec.id,
        {"title": "v2", "content": "new", "classification": "X", "user_id": "someone-else", "id": "nope"},
    )
    assert replaced.id == rec.id
    assert replaced.user_id == user_id
    assert replaced.title == "v2"
    assert replaced.content == "new"
    assert replaced.classification == "X"


def test_replace_unknown_id_returns_none(repo):
    assert repo.replace_by_id("missing", {"title": "x"}) is None


def test_delete_by_id(repo, user_id):
    rec = repo.insert(_fields(user_id))
    assert repo.delete_by_id(rec.id) is True
    assert repo.find_by_id(rec.id) is None
    assert repo.delete_by_id(rec.id) is False


def test_database_errors_become_persistence_failure(repo, user_id, monkeypatch):
    def boom(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(repo.db, "query", boom)
    with pytest.raises(PersistenceFailure):
        repo.find_all_by_user(user_id)


def test_text_search_folds_non_ascii_case(repo, user_id):
    hit = repo.insert(_fields(user_id, content="Notes from the École Polytechnique"))
    repo.insert(_fields(user_id, content="Notes from the ecole primaire"))

    assert [r.id for r in repo.find_by_text_and_user("École", user_id)] == [hit.id]
    assert [r.id for r in repo.find_by_text_and_user("école", user_id)] == [hit.id]
    assert [r.id for r in repo.find_by_text_and_user("ÉCOLE POLY", user_id)] == [hit.id]
