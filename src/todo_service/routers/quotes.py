from __future__ import annotations

from fastapi import APIRouter, Depends

from ..schemas import Quote
from ..services import TodoService
from .todos import get_todo_service

router = APIRouter(
    prefix="/quote",
    tags=["quotes"],
)


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=Quote,
    summary="Random Quote",
    description="Fetch a random quote from the third-party quote API.",
    responses={
        200: {"description": "Quote fetched"},
        502: {"description": "Quote API failed"},
        503: {"description": "Quote API not configured"},
    },
)
def get_quote(service: TodoService = Depends(get_todo_service)) -> Quote:
    return service.get_quote()
