"""
Tutorials API — Tutorial SQLAlchemy Model
==========================================

What:  ORM model representing the `tutorials` table.
Why:   Maps Python objects to rows for the CRUD routes.
How:   Inherits from the shared DeclarativeBase; Alembic reads this for migrations.

Column types are dialect-neutral (Uuid, DateTime(timezone=True)) so the same
model runs against PostgreSQL in production and SQLite in the tests.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Index, String, Text, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Tutorial(Base):
    """
    A tutorial entry.

    Query Patterns:
        - List / search by title: ILIKE '%term%' on title
        - Published only: WHERE published = true
        - Single row: WHERE id = :uuid (primary key)
    """

    __tablename__ = "tutorials"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    description: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        default=None,
    )

    published: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=text("false"),
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_tutorials_published", "published"),
    )

    def __repr__(self) -> str:
        return f"<Tutorial(id={self.id}, title='{self.title}', published={self.published})>"
