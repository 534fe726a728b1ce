from datetime import datetime
from uuid import UUID

from pydantic import Field

from todolist.core.db import MongoModel
from todolist.utils import now


class Todo(MongoModel):
    """Todo item owned by a single user."""

    owner_id: UUID
    title: str
    completed: bool = False
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime = Field(default_factory=now)
