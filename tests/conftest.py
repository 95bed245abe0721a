"""
In-memory stand-in for the Motor database.
Implements only the collection operations the service uses, including
session transactions that roll every collection back when the block raises.
"""

import copy
from types import SimpleNamespace

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from jose import jwt

from inspira import config
from inspira.database import get_db
from inspira.main import app

TEST_SECRET = "test-secret"


def _matches(doc: dict, query: dict) -> bool:
    for key, cond in query.items():
        value = doc.get(key)
        if isinstance(cond, dict) and "$in" in cond:
            if value not in cond["$in"]:
                return False
        elif value != cond:
            return False
    return True


def _sort_key(field):
    def key(doc):
        value = doc.get(field)
        return (value is None, value if value is not None else 0)
    return key


def _apply_update(doc: dict, update: dict, inserting: bool):
    for op, fields in update.items():
        if op == "$set":
            doc.update(copy.deepcopy(fields))
        elif op == "$setOnInsert":
            if inserting:
                doc.update(copy.deepcopy(fields))
        elif op == "$inc":
            for k, v in fields.items():
                doc[k] = doc.get(k, 0) + v
        elif op == "$addToSet":
            for k, v in fields.items():
                values = doc.setdefault(k, [])
                if v not in values:
                    values.append(copy.deepcopy(v))
        elif op == "$push":
            for k, modifier in fields.items():
                values = doc.setdefault(k, [])
                if isinstance(modifier, dict) and "$each" in modifier:
                    values.extend(copy.deepcopy(modifier["$each"]))
                    for field, direction in reversed(list(modifier.get("$sort", {}).items())):
                        values.sort(key=lambda item: item[field], reverse=direction < 0)
                else:
                    values.append(copy.deepcopy(modifier))
        else:
            raise NotImplementedError(op)


class FakeCursor:
    def __init__(self, docs):
        self.docs = docs

    def sort(self, field, direction=1):
        self.docs = sorted(self.docs, key=_sort_key(field), reverse=direction < 0)
        return self

    async def to_list(self, length=None):
        docs = [copy.deepcopy(d) for d in self.docs]
        return docs if length is None else docs[:length]


class FakeCollection:
    def __init__(self, name):
        self.name = name
        self.docs = []
        self.fail_on = {}

    def _check(self, op):
        if op in self.fail_on:
            raise self.fail_on[op]

    async def create_index(self, *args, **kwargs):
        return "index"

    async def find_one(self, query, session=None):
        self._check("find_one")
        for doc in self.docs:
            if _matches(doc, query):
                return copy.deepcopy(doc)
        return None

    def find(self, query=None):
        self._check("find")
        return FakeCursor([d for d in self.docs if _matches(d, query or {})])

    async def insert_one(self, doc, session=None):
        self._check("insert_one")
        stored = copy.deepcopy(doc)
        stored.setdefault("_id", ObjectId())
        self.docs.append(stored)
        return SimpleNamespace(inserted_id=stored["_id"])

    async def update_one(self, query, update, upsert=False, session=None):
        self._check("update_one")
        for doc in self.docs:
            if _matches(doc, query):
                before = copy.deepcopy(doc)
                _apply_update(doc, update, inserting=False)
                return SimpleNamespace(matched_count=1, modified_count=int(before != doc), upserted_id=None)

        if not upsert:
            return SimpleNamespace(matched_count=0, modified_count=0, upserted_id=None)

        doc = {k: v for k, v in query.items() if not isinstance(v, dict)}
        doc["_id"] = ObjectId()
        _apply_update(doc, update, inserting=True)
        self.docs.append(doc)
        return SimpleNamespace(matched_count=0, modified_count=0, upserted_id=doc["_id"])

    async def delete_one(self, query, session=None):
        self._check("delete_one")
        for i, doc in enumerate(self.docs):
            if _matches(doc, query):
                del self.docs[i]
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)

    async def delete_many(self, query, session=None):
        self._check("delete_many")
        kept = [d for d in self.docs if not _matches(d, query)]
        deleted = len(self.docs) - len(kept)
        self.docs = kept
        return SimpleNamespace(deleted_count=deleted)


class FakeTransaction:
    def __init__(self, db):
        self.db = db

    async def __aenter__(self):
        self.snapshot = {name: copy.deepcopy(c.docs) for name, c in self.db.collections.items()}
        return self

    async def __aexit__(self, exc_type, exc, tb):
        if exc_type is not None:
            for name, collection in self.db.collections.items():
                # collections first touched inside the transaction start out empty
                collection.docs = self.snapshot.get(name, [])
            self.db.aborted += 1
        else:
            self.db.committed += 1
        return False


class FakeSession:
    def __init__(self, db):
        self.db = db

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    def start_transaction(self):
        return FakeTransaction(self.db)


class FakeClient:
    def __init__(self, db):
        self.db = db

    async def start_session(self):
        return FakeSession(self.db)


class FakeDatabase:
    def __init__(self):
        self.collections = {}
        self.client = FakeClient(self)
        self.committed = 0
        self.aborted = 0
        self.ping_error = None

    def __getattr__(self, name):
        if name.startswith("_"):
            raise AttributeError(name)
        return self.collections.setdefault(name, FakeCollection(name))

    async def command(self, name):
        if self.ping_error:
            raise self.ping_error
        return {"ok": 1}


@pytest.fixture
def db():
    return FakeDatabase()


@pytest.fixture
def jwt_secret(monkeypatch):
    monkeypatch.setattr(config, "JWT_SECRET_KEY", TEST_SECRET)
    monkeypatch.setattr(config, "JWT_AUDIENCE", None)
    return TEST_SECRET


def make_token(sub="u1", role=None, **claims):
    payload = {"sub": sub, "name": "Test Learner", "email": f"{sub}@example.com", **claims}
    if role:
        payload["role"] = role
    return jwt.encode(payload, TEST_SECRET, algorithm="HS256")


@pytest.fixture
def learner_headers(jwt_secret):
    return {"Authorization": f"Bearer {make_token('u1')}"}


@pytest.fixture
def admin_headers(jwt_secret):
    return {"Authorization": f"Bearer {make_token('admin-1', role=config.ADMIN_ROLE)}"}


@pytest.fixture
def client(db):
    app.dependency_overrides[get_db] = lambda: db
    yield TestClient(app)
    app.dependency_overrides.clear()


def quiz_module(title, correct_answers, video_url=None):
    """Module document whose quiz has one 3-option question per correct answer index"""
    return {
        "title": title,
        "content": f"{title} first paragraph\n\n{title} second paragraph",
        "video_url": video_url,
        "quiz": {
            "video_url": None,
            "questions": [
                {"question": f"{title} Q{i}", "options": ["A", "B", "C"], "correct_answer": answer}
                for i, answer in enumerate(correct_answers)
            ],
        },
    }


@pytest.fixture
def quiz_module_factory():
    return quiz_module
