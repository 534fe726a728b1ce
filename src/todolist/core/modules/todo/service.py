from typing import Any
from uuid import UUID

from pymongo.asynchronous.database import AsyncDatabase

from todolist.core.core import Service
from todolist.core.db import store_operation
from todolist.core.modules.todo.models import Todo
from todolist.core.pagination import Page, PageRequest
from todolist.errors import NotFoundError, ValidationError
from todolist.utils import now


def validate_title(title: str) -> str:
    """Return the trimmed title, which must be 3 to 255 characters long."""
    title = title.strip()
    if not 3 <= len(title) <= 255:
        raise ValidationError("Title must be between 3 and 255 characters long")
    return title


class TodoService(Service):
    """Per-user todo items. Every method is scoped to the owner id it receives."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("todos")

    async def on_start(self) -> None:
        with store_operation("todos.create_indexes"):
            await self._collection.create_index([("owner_id", 1), ("created_at", -1)])

    async def create_todo(self, owner_id: UUID, title: str) -> Todo:
        todo = Todo(owner_id=owner_id, title=validate_title(title))
        with store_operation("todos.create_todo"):
            await self._collection.insert_one(todo.to_mongo())
        return todo

    async def get_todo(self, owner_id: UUID, todo_id: UUID) -> Todo:
        """Get a todo of the owner. Todos of other users are reported as not found."""
        with store_operation("todos.get_todo"):
            todo = await self._collection.find_one({"_id": todo_id, "owner_id": owner_id})
        if todo is None:
            raise NotFoundError(f"Todo '{todo_id}' not found")
        return Todo.model_validate(todo)

    async def list_todos(self, owner_id: UUID, request: PageRequest, completed: bool | None = None) -> Page[Todo]:
        """Get a page of the owner's todos, newest first, optionally filtered by completion."""
        query: dict[str, Any] = {"owner_id": owner_id}
        if completed is not None:
            query["completed"] = completed

        with store_operation("todos.count_todos"):
            total = await self._collection.count_documents(query)
        if total == 0:
            return Page[Todo].build([], 0, request)

        request = request.clamp(total)
        with store_operation("todos.list_todos"):
            cursor = self._collection.find(query).sort("created_at", -1).skip(request.offset).limit(request.limit)
            items = await Todo.list_cursor(cursor)
        return Page[Todo].build(items, total, request)

    async def update_title(self, owner_id: UUID, todo_id: UUID, title: str) -> Todo:
        return await self._update(owner_id, todo_id, {"title": validate_title(title)})

    async def set_completed(self, owner_id: UUID, todo_id: UUID, completed: bool) -> Todo:
        return await self._update(owner_id, todo_id, {"completed": completed})

    async def delete_todo(self, owner_id: UUID, todo_id: UUID) -> None:
        with store_operation("todos.delete_todo"):
            result = await self._collection.delete_one({"_id": todo_id, "owner_id": owner_id})
        if result.deleted_count == 0:
            raise NotFoundError(f"Todo '{todo_id}' not found")

    async def _update(self, owner_id: UUID, todo_id: UUID, changes: dict[str, Any]) -> Todo:
        with store_operation("todos.update_todo"):
            result = await self._collection.update_one(
                {"_id": todo_id, "owner_id": owner_id}, {"$set": {**changes, "updated_at": now()}}
            )
        if result.matched_count == 0:
            raise NotFoundError(f"Todo '{todo_id}' not found")
        return await self.get_todo(owner_id, todo_id)
