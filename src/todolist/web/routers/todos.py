"""Todo-related API endpoints. Every route requires a bearer token."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from todolist.core.modules.todo.models import Todo
from todolist.core.pagination import DEFAULT_LIMIT, Page
from todolist.web.deps import AppDep, IdentityDep, authenticate
from todolist.web.openapi import ErrorResponse

router = APIRouter(tags=["todos"], dependencies=[Depends(authenticate)])


class TodoRequest(BaseModel):
    """Request to create or rename a todo."""

    title: str = Field(..., description="Todo text, 3 to 255 characters")


class CompleteTodoRequest(BaseModel):
    """Request to change completion state."""

    completed: bool = Field(..., description="New completion state")


@router.get(
    "/todos",
    summary="List todos",
    description="Get a page of the current user's todos, newest first.",
    operation_id="listTodos",
    responses={
        200: {"description": "Page of todos"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def list_todos(
    app: AppDep,
    identity: IdentityDep,
    page: Annotated[int, Query(description="Page number, starting at 1")] = 1,
    limit: Annotated[int, Query(description="Items per page, at most 100")] = DEFAULT_LIMIT,
    completed: Annotated[bool | None, Query(description="Only todos with this completion state")] = None,
) -> Page[Todo]:
    return await app.list_todos(identity, page, limit, completed)


@router.post(
    "/todos",
    summary="Create todo",
    operation_id="createTodo",
    status_code=201,
    responses={
        201: {"description": "Todo created"},
        400: {"model": ErrorResponse, "description": "Invalid title"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def create_todo(request: TodoRequest, app: AppDep, identity: IdentityDep) -> Todo:
    return await app.create_todo(identity, request.title)


@router.put(
    "/todos/{todo_id}",
    summary="Rename todo",
    operation_id="updateTodo",
    responses={
        200: {"description": "Todo updated"},
        400: {"model": ErrorResponse, "description": "Invalid title"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "Todo not found"},
    },
)
async def update_todo(todo_id: UUID, request: TodoRequest, app: AppDep, identity: IdentityDep) -> Todo:
    return await app.update_todo(identity, todo_id, request.title)


@router.patch(
    "/todos/{todo_id}/complete",
    summary="Set todo completion",
    operation_id="completeTodo",
    responses={
        200: {"description": "Todo updated"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "Todo not found"},
    },
)
async def complete_todo(todo_id: UUID, request: CompleteTodoRequest, app: AppDep, identity: IdentityDep) -> Todo:
    return await app.complete_todo(identity, todo_id, request.completed)


@router.delete(
    "/todos/{todo_id}",
    summary="Delete todo",
    operation_id="deleteTodo",
    status_code=204,
    responses={
        204: {"description": "Todo deleted"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "Todo not found"},
    },
)
async def delete_todo(todo_id: UUID, app: AppDep, identity: IdentityDep) -> None:
    await app.delete_todo(identity, todo_id)
