from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


# PUBLIC_INTERFACE
class TodoCreate(BaseModel):
    """
    Schema for creating a new Todo item.

    id is accepted only so that a client-supplied identifier can be detected
    and rejected; it must be left out or set to 0.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Learn Go",
                "completed": False,
            }
        }
    )

    id: int = Field(default=0, description="Must be omitted or 0; ids are assigned by the store")
    title: Optional[str] = Field(default=None, description="Label of the todo item (required, non-empty)")
    completed: bool = Field(default=False, description="Completion status flag")


# PUBLIC_INTERFACE
class TodoUpdate(BaseModel):
    """
    Schema for updating an existing Todo item.

    Only non-zero values are applied: an empty title or completed=false
    leave the stored value unchanged.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Learn Go Updated",
                "completed": True,
            }
        }
    )

    title: Optional[str] = Field(default=None, description="New title; empty or null keeps the current one")
    completed: bool = Field(default=False, description="True marks the todo completed; false is ignored")


# PUBLIC_INTERFACE
class TodoOut(BaseModel):
    """
    Schema returned by the API for a Todo item.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": 1,
                "title": "Learn Go",
                "completed": False,
                "created_at": "2025-01-25T10:15:30.123456",
                "updated_at": "2025-01-25T10:15:30.123456",
            }
        }
    )

    id: int = Field(..., description="Unique identifier of the todo item")
    title: str = Field(..., description="Label of the todo item")
    completed: bool = Field(..., description="Completion status flag")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")


class TodoListOut(BaseModel):
    data: List[TodoOut] = Field(..., description="All todo items, ordered by id")


class TodoItemOut(BaseModel):
    data: TodoOut = Field(..., description="The requested todo item")


class TodoMessageOut(BaseModel):
    message: str = Field(..., description="Human readable outcome")
    todo: TodoOut = Field(..., description="The created or updated todo item")


class MessageOut(BaseModel):
    message: str = Field(..., description="Human readable outcome")


# PUBLIC_INTERFACE
class QuoteOriginator(BaseModel):
    """Author of a quote as reported by the quote API."""

    id: Optional[int] = None
    name: str = ""
    url: Optional[str] = None


# PUBLIC_INTERFACE
class Quote(BaseModel):
    """
    A random quote returned by the third-party quote API.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": 1294,
                "content": "Simplicity is prerequisite for reliability.",
                "originator": {"id": 7, "name": "Edsger W. Dijkstra", "url": None},
                "language_code": "en",
                "tags": ["software"],
                "url": None,
            }
        }
    )

    id: Optional[int] = Field(default=None, description="Identifier of the quote at the provider")
    content: str = Field(..., description="Quote text")
    originator: Optional[QuoteOriginator] = Field(default=None, description="Author of the quote")
    language_code: Optional[str] = Field(default=None, description="Language of the quote")
    tags: List[str] = Field(default_factory=list, description="Provider tags")
    url: Optional[str] = Field(default=None, description="Permalink at the provider")
