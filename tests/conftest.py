import sys
from pathlib import Path
from types import SimpleNamespace

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from app.config import settings
from app.services import job_service
from app.utils import mongo_utils


def _matches(doc: dict, query: dict) -> bool:
    return all(doc.get(key) == value for key, value in query.items())


class FakeCollection:
    """Enough of pymongo's Collection for the job service."""

    def __init__(self, docs=None):
        self.docs = [dict(d) for d in (docs or [])]
        self.fail_writes = False

    def find(self, query=None):
        return [dict(d) for d in self.docs if _matches(d, query or {})]

    def find_one(self, query=None):
        for doc in self.docs:
            if _matches(doc, query or {}):
                return dict(doc)
        return None

    def insert_one(self, doc):
        if self.fail_writes:
            from pymongo.errors import PyMongoError
            raise PyMongoError("write failed")
        self.docs.append(dict(doc))
        return SimpleNamespace(inserted_id=doc.get("_id"))

    def update_one(self, query, update):
        if self.fail_writes:
            from pymongo.errors import PyMongoError
            raise PyMongoError("write failed")
        for doc in self.docs:
            if _matches(doc, query):
                doc.update(update.get("$set", {}))
                for key, value in update.get("$push", {}).items():
                    doc.setdefault(key, []).append(value)
                for key in update.get("$unset", {}):
                    doc.pop(key, None)
                return SimpleNamespace(matched_count=1, modified_count=1)
        return SimpleNamespace(matched_count=0, modified_count=0)


class FakeDB(dict):
    def __getitem__(self, item):
        if item not in self:
            self[item] = FakeCollection()
        return dict.__getitem__(self, item)


@pytest.fixture
def fake_db(monkeypatch):
    db = FakeDB()
    monkeypatch.setattr(mongo_utils, "get_collection", lambda name: db[name])
    job_service._match_generations.clear()
    original = {
        "MATCH_ZERO_LOCATION_FALLBACK": settings.MATCH_ZERO_LOCATION_FALLBACK,
        "MATCH_DEFAULT_LIMIT": settings.MATCH_DEFAULT_LIMIT,
    }
    try:
        yield db
    finally:
        for key, value in original.items():
            setattr(settings, key, value)
        job_service._match_generations.clear()
