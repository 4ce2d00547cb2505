"""
Tutorials API — Tutorial Route Handlers
========================================

What:  CRUD endpoints under /api/tutorials.
Why:   The HTTP surface of the service.
How:   Extracts path/query/body, delegates to TutorialService, returns JSON.

Route Inventory:
    POST   /api/tutorials               create
    GET    /api/tutorials?title=        list (optional title filter)
    GET    /api/tutorials/published     list published
    GET    /api/tutorials/{id}          fetch one
    PUT    /api/tutorials/{id}          partial update
    DELETE /api/tutorials/{id}          delete one
    DELETE /api/tutorials               delete all

/published is declared before /{tutorial_id} so it is not captured as an id.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.schemas.tutorial import (
    ErrorResponse,
    MessageResponse,
    TutorialCreate,
    TutorialResponse,
    TutorialUpdate,
)
from app.services.tutorial_service import tutorial_service

router = APIRouter(prefix="/api/tutorials", tags=["Tutorials"])


@router.post(
    "",
    response_model=TutorialResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"description": "Title missing", "model": ErrorResponse}},
    summary="Create a tutorial",
)
async def create_tutorial(
    payload: TutorialCreate,
    db: AsyncSession = Depends(get_db_session),
) -> TutorialResponse:
    return await tutorial_service.create(db, payload)


@router.get(
    "",
    response_model=List[TutorialResponse],
    summary="List tutorials",
    description="Returns every tutorial, optionally filtered by a case-insensitive title substring.",
)
async def list_tutorials(
    title: Optional[str] = Query(default=None, max_length=255, description="Title substring"),
    db: AsyncSession = Depends(get_db_session),
) -> List[TutorialResponse]:
    return await tutorial_service.list_tutorials(db, title=title)


@router.get(
    "/published",
    response_model=List[TutorialResponse],
    summary="List published tutorials",
)
async def list_published_tutorials(
    db: AsyncSession = Depends(get_db_session),
) -> List[TutorialResponse]:
    return await tutorial_service.list_published(db)


@router.get(
    "/{tutorial_id}",
    response_model=TutorialResponse,
    responses={404: {"description": "Tutorial not found", "model": ErrorResponse}},
    summary="Get a single tutorial by ID",
)
async def get_tutorial(
    tutorial_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> TutorialResponse:
    return await tutorial_service.get(db, tutorial_id)


@router.put(
    "/{tutorial_id}",
    response_model=MessageResponse,
    responses={
        400: {"description": "Empty update body", "model": ErrorResponse},
        404: {"description": "Tutorial not found", "model": ErrorResponse},
    },
    summary="Update a tutorial",
)
async def update_tutorial(
    tutorial_id: str,
    payload: TutorialUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    return await tutorial_service.update(db, tutorial_id, payload)


@router.delete(
    "/{tutorial_id}",
    response_model=MessageResponse,
    responses={404: {"description": "Tutorial not found", "model": ErrorResponse}},
    summary="Delete a tutorial",
)
async def delete_tutorial(
    tutorial_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    return await tutorial_service.delete(db, tutorial_id)


@router.delete(
    "",
    response_model=MessageResponse,
    summary="Delete all tutorials",
)
async def delete_all_tutorials(
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    return await tutorial_service.delete_all(db)
