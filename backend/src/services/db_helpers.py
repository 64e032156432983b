"""Helpers for resolving stable uids to internal ids."""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models.base import UidMixin
from models.field import Field
from services.exceptions import UidNotFoundError


async def id_by_uid(db: AsyncSession, model: type[UidMixin], uid: str) -> int:
    """
    Return the primary key of the `model` row whose uid is `uid`.

    Raises:
        UidNotFoundError: If no row has that uid.
    """
    result = await db.scalar(select(model.id).where(model.uid == uid))  # type: ignore[attr-defined]
    if result is None:
        raise UidNotFoundError(model.__tablename__, uid)  # type: ignore[attr-defined]
    return result


async def field_id_by_uid(db: AsyncSession, uid: str) -> int:
    """Resolve a field uid to its field key (fields.id)."""
    return await id_by_uid(db, Field, uid)
