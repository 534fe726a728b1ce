"""Shared pytest fixtures.

Services run against an in-memory stand-in for the pymongo async database that
supports the queries the services issue: equality filters, sort/skip/limit,
unique indexes and `$set` updates.
"""

import copy
from collections.abc import AsyncIterator, Iterator
from typing import Any

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from pymongo.errors import DuplicateKeyError, NetworkTimeout
from pymongo.results import DeleteResult, InsertOneResult, UpdateResult

from todolist.app import App
from todolist.config import Config
from todolist.core.core import Core
from todolist.web.server import create_fastapi_app


def _matches(document: dict[str, Any], query: dict[str, Any]) -> bool:
    return all(document.get(key) == value for key, value in query.items())


def _sorted(documents: list[dict[str, Any]], keys: list[tuple[str, int]]) -> list[dict[str, Any]]:
    # Apply the least significant key first, sorting is stable
    for key, direction in reversed(keys):
        documents = sorted(documents, key=lambda d: d[key], reverse=direction < 0)
    return documents


class FakeCursor:
    def __init__(self, documents: list[dict[str, Any]]) -> None:
        self._documents = documents
        self._skip = 0
        self._limit = 0

    def sort(self, key: str, direction: int = 1) -> "FakeCursor":
        self._documents = _sorted(self._documents, [(key, direction)])
        return self

    def skip(self, skip: int) -> "FakeCursor":
        self._skip = skip
        return self

    def limit(self, limit: int) -> "FakeCursor":
        self._limit = limit
        return self

    async def _iterate(self) -> AsyncIterator[dict[str, Any]]:
        documents = self._documents[self._skip :]
        if self._limit:
            documents = documents[: self._limit]
        for document in documents:
            yield copy.deepcopy(document)

    def __aiter__(self) -> AsyncIterator[dict[str, Any]]:
        return self._iterate()


class FakeCollection:
    def __init__(self, name: str) -> None:
        self.name = name
        self.documents: list[dict[str, Any]] = []
        self.unique_keys: list[tuple[str, ...]] = []
        self.failing: set[str] = set()

    def fail(self, *methods: str) -> None:
        """Make the named methods raise a driver timeout from now on."""
        self.failing.update(methods)

    def _check(self, method: str) -> None:
        if method in self.failing:
            raise NetworkTimeout(f"{self.name}.{method} timed out")

    def _violates_unique(self, document: dict[str, Any]) -> bool:
        for fields in [("_id",), *self.unique_keys]:
            key = tuple(document.get(field) for field in fields)
            if any(tuple(other.get(field) for field in fields) == key for other in self.documents):
                return True
        return False

    async def create_index(self, keys: list[tuple[str, int]], unique: bool = False) -> str:
        self._check("create_index")
        if unique:
            self.unique_keys.append(tuple(field for field, _ in keys))
        return "_".join(f"{field}_{direction}" for field, direction in keys)

    async def insert_one(self, document: dict[str, Any]) -> InsertOneResult:
        self._check("insert_one")
        if self._violates_unique(document):
            raise DuplicateKeyError(f"E11000 duplicate key error collection: {self.name}", code=11000)
        self.documents.append(copy.deepcopy(document))
        return InsertOneResult(document["_id"], acknowledged=True)

    async def find_one(
        self, query: dict[str, Any], sort: list[tuple[str, int]] | None = None
    ) -> dict[str, Any] | None:
        self._check("find_one")
        found = [d for d in self.documents if _matches(d, query)]
        if sort:
            found = _sorted(found, sort)
        return copy.deepcopy(found[0]) if found else None

    def find(self, query: dict[str, Any]) -> FakeCursor:
        self._check("find")
        return FakeCursor([d for d in self.documents if _matches(d, query)])

    async def count_documents(self, query: dict[str, Any], limit: int = 0) -> int:
        self._check("count_documents")
        count = sum(1 for d in self.documents if _matches(d, query))
        return min(count, limit) if limit else count

    async def update_one(self, query: dict[str, Any], update: dict[str, Any]) -> UpdateResult:
        self._check("update_one")
        for document in self.documents:
            if _matches(document, query):
                document.update(copy.deepcopy(update["$set"]))
                return UpdateResult({"n": 1, "nModified": 1}, acknowledged=True)
        return UpdateResult({"n": 0, "nModified": 0}, acknowledged=True)

    async def delete_one(self, query: dict[str, Any]) -> DeleteResult:
        self._check("delete_one")
        for index, document in enumerate(self.documents):
            if _matches(document, query):
                del self.documents[index]
                return DeleteResult({"n": 1}, acknowledged=True)
        return DeleteResult({"n": 0}, acknowledged=True)


class FakeDatabase:
    def __init__(self) -> None:
        self._collections: dict[str, FakeCollection] = {}

    def get_collection(self, name: str) -> FakeCollection:
        if name not in self._collections:
            self._collections[name] = FakeCollection(name)
        return self._collections[name]


@pytest.fixture
def database() -> FakeDatabase:
    """Empty in-memory database."""
    return FakeDatabase()


@pytest.fixture
def config() -> Config:
    """Test configuration: cheap bcrypt cost and a fixed signing key."""
    return Config(
        _env_file=None,  # type: ignore[call-arg]
        database_url="mongodb://localhost:27017/todolist_test",
        host="127.0.0.1",
        port=3100,
        debug=False,
        jwt_secret="test-signing-key-that-is-long-enough-for-hs256",
        bcrypt_rounds=4,
    )


@pytest_asyncio.fixture
async def core(config: Config, database: FakeDatabase) -> AsyncIterator[Core]:
    """Started core with all services over the in-memory database."""
    instance = Core(config, database)  # type: ignore[arg-type]
    async with instance.lifespan():
        yield instance


@pytest_asyncio.fixture
async def app(config: Config, database: FakeDatabase) -> AsyncIterator[App]:
    """Started application facade over the in-memory database."""
    instance = App(config, database)  # type: ignore[arg-type]
    async with instance.lifespan():
        yield instance


@pytest.fixture
def client(config: Config, database: FakeDatabase) -> Iterator[TestClient]:
    """HTTP client for the FastAPI app; the context manager runs its lifespan."""
    fastapi_app = create_fastapi_app(App(config, database), config)  # type: ignore[arg-type]
    with TestClient(fastapi_app) as test_client:
        yield test_client
