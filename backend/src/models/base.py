"""SQLAlchemy declarative base with common mixins."""
from datetime import datetime
from uuid import uuid4

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


def generate_uid() -> str:
    """Generate a stable external identifier for a row."""
    return str(uuid4())


class UidMixin:
    """
    Mixin that adds a unique `uid` column.

    The uid is the stable, environment-independent identifier (e.g., used in
    project config and field settings); the integer `id` is the internal key
    resolved from it at runtime.
    """

    uid: Mapped[str] = mapped_column(
        String(36),
        unique=True,
        nullable=False,
        default=generate_uid,
    )


class TimestampMixin:
    """
    Mixin that adds created_at and updated_at columns.

    All timestamps are timezone-aware (stored as TIMESTAMP WITH TIME ZONE in PostgreSQL).
    Uses CURRENT_TIMESTAMP so the same schema works on PostgreSQL and SQLite.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.current_timestamp(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.current_timestamp(),
        nullable=False,
    )
