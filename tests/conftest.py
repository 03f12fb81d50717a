"""
Pytest configuration and shared fixtures.
"""

from types import SimpleNamespace
from typing import Any, Dict, List

import pytest
from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from catalog.database import BOOK_ID_INDEX, BOOK_IDENTITY_INDEX, BookRepository
from catalog.models import BookDTO, BookRecord


class FakeCursor:
    """Cursor over a snapshot of documents."""

    def __init__(self, documents: List[Dict[str, Any]]):
        self.documents = documents

    async def to_list(self, length=None):
        return [dict(document) for document in self.documents]


class FakeCollection:
    """
    In-memory collection with the subset of the Motor API the catalog uses.
    Unique indexes registered through ``create_index`` are enforced.
    """

    def __init__(self):
        self.documents: List[Dict[str, Any]] = []
        self.unique_indexes: List[List[str]] = []

    async def create_index(self, keys, unique=False):
        fields = [field for field, _ in keys]
        if unique and fields not in self.unique_indexes:
            self.unique_indexes.append(fields)
        return "_".join(f"{field}_1" for field in fields)

    def _conflicts(self, candidate, ignore=None) -> bool:
        for fields in self.unique_indexes:
            key = tuple(candidate.get(field) for field in fields)
            for document in self.documents:
                if document is ignore:
                    continue
                if tuple(document.get(field) for field in fields) == key:
                    return True
        return False

    @staticmethod
    def _matches(document, query) -> bool:
        return all(document.get(field) == value for field, value in query.items())

    async def insert_one(self, document):
        if self._conflicts(document):
            raise DuplicateKeyError("E11000 duplicate key error")
        document["_id"] = ObjectId()
        self.documents.append(dict(document))
        return SimpleNamespace(inserted_id=document["_id"])

    def find(self, query=None):
        query = query or {}
        return FakeCursor([d for d in self.documents if self._matches(d, query)])

    async def update_one(self, query, update):
        for document in self.documents:
            if self._matches(document, query):
                updated = {**document, **update["$set"]}
                if self._conflicts(updated, ignore=document):
                    raise DuplicateKeyError("E11000 duplicate key error")
                modified = updated != document
                document.update(update["$set"])
                return SimpleNamespace(matched_count=1, modified_count=int(modified))
        return SimpleNamespace(matched_count=0, modified_count=0)

    async def delete_one(self, query):
        for document in self.documents:
            if self._matches(document, query):
                self.documents.remove(document)
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)

    async def distinct(self, field):
        values = []
        for document in self.documents:
            if field in document and document[field] not in values:
                values.append(document[field])
        return values


class RecordingRenderer:
    """Renderer that remembers what it was asked to render."""

    def __init__(self):
        self.calls = []

    def render(self, name: str, data: Any) -> bytes:
        self.calls.append((name, data))
        return f"<div id='{name}'></div>".encode("utf-8")


@pytest.fixture
def fake_collection():
    """Empty in-memory collection without indexes."""
    return FakeCollection()


@pytest.fixture
def indexed_collection():
    """In-memory collection with the catalog's two unique indexes."""
    collection = FakeCollection()
    collection.unique_indexes = [
        [field for field, _ in BOOK_ID_INDEX],
        [field for field, _ in BOOK_IDENTITY_INDEX],
    ]
    return collection


@pytest.fixture
def repository(indexed_collection):
    return BookRepository(indexed_collection)


@pytest.fixture
def recording_renderer():
    return RecordingRenderer()


@pytest.fixture
def sample_book_dto():
    """Create a sample wire book for testing."""
    return BookDTO(
        id="b1",
        title="T",
        author="A",
        pages="10",
        edition="e",
        year="2000",
    )


@pytest.fixture
def sample_book_record():
    """Create a sample stored book for testing."""
    return BookRecord(
        mongo_id="65a1b2c3d4e5f60718293a4b",
        book_id="example2",
        book_name="Frankenstein",
        book_author="Mary Shelley",
        book_edition="978-3-649-64609-9",
        book_pages="280",
        book_year="1818",
    )
