from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Self
from uuid import UUID

import structlog
from pydantic import BaseModel, ConfigDict, Field
from pymongo.asynchronous.cursor import AsyncCursor
from pymongo.errors import PyMongoError

from todolist.errors import StoreError
from todolist.utils import uuid7

logger = structlog.get_logger(__name__)


class MongoModel(BaseModel):
    id: UUID = Field(alias="_id", serialization_alias="id", default_factory=uuid7)

    model_config = ConfigDict(
        populate_by_name=True,
        arbitrary_types_allowed=True,
        json_schema_serialization_defaults_required=True,
    )

    def to_mongo(self) -> dict[str, Any]:
        """Convert the model to a dictionary for MongoDB storage with _id field."""
        data = self.model_dump()
        if "id" in data:
            data["_id"] = data.pop("id")  # Rename id → _id for MongoDB
        return data

    @classmethod
    async def list_cursor(cls, cursor: AsyncCursor[dict[str, Any]]) -> list[Self]:
        """Iterate over an AsyncCursor and return a list of model instances."""
        return [cls.model_validate(item) async for item in cursor]


@contextmanager
def store_operation(operation: str) -> Iterator[None]:
    """Map driver failures (including timeouts) inside the block to StoreError.

    `operation` names the query, e.g. "sessions.find_by_token". Never put credentials in it.
    """
    try:
        yield
    except PyMongoError as e:
        # Driver messages can contain indexed values such as tokens
        logger.error("store_error", operation=operation, error_class=type(e).__name__, code=getattr(e, "code", None))
        raise StoreError(operation) from e
