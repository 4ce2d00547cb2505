"""
Tutorials API — Tutorial Service
=================================

What:  CRUD operations on tutorials, independent of HTTP concerns.
Why:   Routes stay thin; the rules (required title, non-empty update, not-found
       messages) live here and are tested against a mocked session.
How:   Each method receives the request's AsyncSession and returns response
       models. Commit/rollback is handled by Database.session().

Error Handling Strategy:
    Application errors (ValidationError, NotFoundError) propagate as-is.
    Anything else raised by the database is logged and wrapped in DatabaseError,
    which hides driver details from the client.
"""

import logging
import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import DatabaseError, NotFoundError, ValidationError
from app.models.tutorial import Tutorial
from app.schemas.tutorial import (
    MessageResponse,
    TutorialCreate,
    TutorialResponse,
    TutorialUpdate,
)

logger = logging.getLogger(__name__)


def _parse_id(raw: str) -> Optional[uuid.UUID]:
    """Ids are opaque to clients; a malformed one simply matches nothing."""
    try:
        return uuid.UUID(str(raw))
    except ValueError:
        return None


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class TutorialService:
    """
    Business logic layer for tutorial operations.

    Responsibilities:
        - create():         Insert with a required title
        - list_tutorials(): All tutorials, optional case-insensitive title filter
        - list_published(): Tutorials with published = true
        - get():            Single tutorial or NotFoundError
        - update():         Partial update; empty body rejected
        - delete():         Single delete or NotFoundError
        - delete_all():     Bulk delete, returns the row count in the message
    """

    async def create(self, db: AsyncSession, payload: TutorialCreate) -> TutorialResponse:
        if not payload.title or not payload.title.strip():
            raise ValidationError(message="Content can not be empty!", field="title")

        try:
            tutorial = Tutorial(
                title=payload.title,
                description=payload.description,
                published=payload.published,
            )
            db.add(tutorial)
            await db.flush()  # Assigns defaults without committing
            logger.info("Tutorial created: %s", tutorial.id)
            return TutorialResponse.model_validate(tutorial)
        except Exception as e:
            logger.error("Database error creating tutorial: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Some error occurred while creating the Tutorial.",
                context={"error_type": type(e).__name__},
            )

    async def list_tutorials(self, db: AsyncSession, title: Optional[str] = None) -> List[TutorialResponse]:
        query = select(Tutorial).order_by(Tutorial.created_at)
        if title:
            query = query.where(Tutorial.title.ilike(f"%{_escape_like(title)}%", escape="\\"))
        return await self._fetch_all(db, query, "Some error occurred while retrieving tutorials.")

    async def list_published(self, db: AsyncSession) -> List[TutorialResponse]:
        query = (
            select(Tutorial)
            .where(Tutorial.published.is_(True))
            .order_by(Tutorial.created_at)
        )
        return await self._fetch_all(db, query, "Some error occurred while retrieving tutorials.")

    async def get(self, db: AsyncSession, tutorial_id: str) -> TutorialResponse:
        tutorial = await self._find(db, tutorial_id)
        if tutorial is None:
            raise NotFoundError(
                resource="tutorial",
                resource_id=tutorial_id,
                message=f"Not found Tutorial with id {tutorial_id}",
            )
        return TutorialResponse.model_validate(tutorial)

    async def update(
        self, db: AsyncSession, tutorial_id: str, payload: TutorialUpdate
    ) -> MessageResponse:
        changes: Dict[str, Any] = payload.model_dump(exclude_unset=True)
        if not changes:
            raise ValidationError(message="Data to update can not be empty!")
        if "title" in changes and not (changes["title"] or "").strip():
            raise ValidationError(message="Content can not be empty!", field="title")
        if "published" in changes and changes["published"] is None:
            del changes["published"]

        tutorial = await self._find(db, tutorial_id)
        if tutorial is None:
            raise NotFoundError(
                resource="tutorial",
                resource_id=tutorial_id,
                message=(
                    f"Cannot update Tutorial with id={tutorial_id}. "
                    "Maybe Tutorial was not found!"
                ),
            )

        try:
            for field, value in changes.items():
                setattr(tutorial, field, value)
            await db.flush()
        except Exception as e:
            logger.error("Database error updating tutorial %s: %s", tutorial_id, str(e))
            raise DatabaseError(
                message=f"Error updating Tutorial with id={tutorial_id}",
                context={"tutorial_id": tutorial_id, "error_type": type(e).__name__},
            )

        logger.info("Tutorial %s updated: %s", tutorial_id, sorted(changes))
        return MessageResponse(message="Tutorial was updated successfully.")

    async def delete(self, db: AsyncSession, tutorial_id: str) -> MessageResponse:
        tutorial = await self._find(db, tutorial_id)
        if tutorial is None:
            raise NotFoundError(
                resource="tutorial",
                resource_id=tutorial_id,
                message=(
                    f"Cannot delete Tutorial with id={tutorial_id}. "
                    "Maybe Tutorial was not found!"
                ),
            )

        try:
            await db.delete(tutorial)
            await db.flush()
        except Exception as e:
            logger.error("Database error deleting tutorial %s: %s", tutorial_id, str(e))
            raise DatabaseError(
                message=f"Could not delete Tutorial with id={tutorial_id}",
                context={"tutorial_id": tutorial_id, "error_type": type(e).__name__},
            )

        logger.info("Tutorial %s deleted", tutorial_id)
        return MessageResponse(message="Tutorial was deleted successfully!")

    async def delete_all(self, db: AsyncSession) -> MessageResponse:
        try:
            result = await db.execute(delete(Tutorial))
            deleted = result.rowcount or 0
        except Exception as e:
            logger.error("Database error deleting all tutorials: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Some error occurred while removing all tutorials.",
                context={"error_type": type(e).__name__},
            )

        logger.info("Deleted %d tutorials", deleted)
        return MessageResponse(message=f"{deleted} Tutorials were deleted successfully!")

    # ── Helpers ───────────────────────────────────────────────────────────

    async def _find(self, db: AsyncSession, tutorial_id: str) -> Optional[Tutorial]:
        parsed = _parse_id(tutorial_id)
        if parsed is None:
            return None
        try:
            result = await db.execute(select(Tutorial).where(Tutorial.id == parsed))
            return result.scalar_one_or_none()
        except Exception as e:
            logger.error("Database error fetching tutorial %s: %s", tutorial_id, str(e))
            raise DatabaseError(
                message=f"Error retrieving Tutorial with id={tutorial_id}",
                context={"tutorial_id": tutorial_id, "error_type": type(e).__name__},
            )

    async def _fetch_all(self, db: AsyncSession, query, message: str) -> List[TutorialResponse]:
        try:
            result = await db.execute(query)
            tutorials = list(result.scalars().all())
        except Exception as e:
            logger.error("Database error listing tutorials: %s", str(e), exc_info=True)
            raise DatabaseError(message=message, context={"error_type": type(e).__name__})
        return [TutorialResponse.model_validate(t) for t in tutorials]


# ── Singleton Instance ────────────────────────────────────────────────────
# TutorialService is stateless; one instance serves every request
tutorial_service = TutorialService()
