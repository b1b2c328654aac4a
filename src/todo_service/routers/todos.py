from __future__ import annotations

from fastapi import APIRouter, Depends, Request, status

from ..schemas import (
    MessageOut,
    TodoCreate,
    TodoItemOut,
    TodoListOut,
    TodoMessageOut,
    TodoUpdate,
)
from ..services import TodoService
from ..utils import data_envelope, message_envelope

router = APIRouter(
    prefix="/todo",
    tags=["todos"],
)


# PUBLIC_INTERFACE
def get_todo_service(request: Request) -> TodoService:
    """
    Dependency returning the TodoService the application was composed with.
    """
    return request.app.state.todo_service


# PUBLIC_INTERFACE
@router.get(
    "/",
    response_model=TodoListOut,
    summary="List Todos",
    description="Return every todo item ordered by id.",
    responses={
        200: {"description": "List retrieved successfully"},
        500: {"description": "Storage failure"},
    },
)
def list_todos(service: TodoService = Depends(get_todo_service)) -> TodoListOut:
    """
    List all todos.
    """
    return TodoListOut(**data_envelope(service.list()))


# PUBLIC_INTERFACE
@router.get(
    "/{todo_id}",
    response_model=TodoItemOut,
    summary="Get Todo",
    description="Get a single Todo item by ID.",
    responses={
        200: {"description": "Todo found"},
        400: {"description": "Invalid ID"},
        404: {"description": "Todo not found"},
    },
)
def get_todo(todo_id: int, service: TodoService = Depends(get_todo_service)) -> TodoItemOut:
    return TodoItemOut(**data_envelope(service.get(todo_id)))


# PUBLIC_INTERFACE
@router.post(
    "/",
    response_model=TodoMessageOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create Todo",
    description="Create a new Todo item. The id must not be supplied and the title is required.",
    responses={
        201: {"description": "Todo created successfully"},
        400: {"description": "ID supplied or title missing"},
        500: {"description": "Todo could not be saved"},
    },
)
def create_todo(payload: TodoCreate, service: TodoService = Depends(get_todo_service)) -> TodoMessageOut:
    """
    Create a new Todo.
    """
    created = service.create(payload)
    return TodoMessageOut(**message_envelope("Todo created successfully", created))


# PUBLIC_INTERFACE
@router.put(
    "/{todo_id}",
    response_model=TodoMessageOut,
    summary="Update Todo",
    description=(
        "Merge the supplied fields over an existing Todo item. Empty titles and "
        "completed=false are treated as not supplied and leave the stored values unchanged."
    ),
    responses={
        200: {"description": "Todo updated successfully"},
        400: {"description": "Invalid ID"},
        404: {"description": "Todo not found"},
        500: {"description": "Todo could not be saved"},
    },
)
def update_todo(
    todo_id: int,
    payload: TodoUpdate,
    service: TodoService = Depends(get_todo_service),
) -> TodoMessageOut:
    """
    Update a Todo with merge semantics.
    """
    updated = service.update(todo_id, payload)
    return TodoMessageOut(**message_envelope("Todo updated successfully", updated))


# PUBLIC_INTERFACE
@router.delete(
    "/{todo_id}",
    response_model=MessageOut,
    summary="Delete Todo",
    description="Delete a Todo item by ID. Deleting an unknown ID succeeds.",
    responses={
        200: {"description": "Todo deleted successfully"},
        400: {"description": "Invalid ID"},
        500: {"description": "Todo could not be deleted"},
    },
)
def delete_todo(todo_id: int, service: TodoService = Depends(get_todo_service)) -> MessageOut:
    """
    Delete a Todo.
    """
    service.delete(todo_id)
    return MessageOut(**message_envelope("Todo deleted successfully"))
