"""Many-to-many field type: ties a field definition to the relation service."""
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.element_cache import ElementCache
from models.element import Element
from models.entry import SiteEntry
from models.field import MANY_TO_MANY_FIELD_TYPE, Field
from models.section import Section
from schemas.field import ManyToManyFieldSettings
from schemas.relation import PendingRelationChanges, ReconcileResult
from services.exceptions import (
    FieldNotFoundError,
    InvalidFieldSettingsError,
    InvalidFieldTypeError,
    UidNotFoundError,
)
from services.many_to_many_service import get_related_entries, save_relationship


class ManyToManyField:
    """
    A many-to-many field bound to its stored definition.

    The value of the field on an element is the list of source-section
    entries that relate to the element through the mirrored single field.
    """

    def __init__(self, field: Field) -> None:
        if field.type != MANY_TO_MANY_FIELD_TYPE:
            raise InvalidFieldTypeError(field.handle, field.type)
        try:
            self.settings = ManyToManyFieldSettings.model_validate(field.settings or {})
        except ValidationError as e:
            raise InvalidFieldSettingsError(field.handle, str(e)) from e
        self.field = field

    @property
    def handle(self) -> str:
        """Field handle."""
        return self.field.handle

    async def get_source_section(self, db: AsyncSession) -> Section:
        """
        Load the section whose entries this field shows.

        Raises:
            UidNotFoundError: If the configured section no longer exists.
        """
        uid = self.settings.source_section_uid
        section = await db.scalar(select(Section).where(Section.uid == uid))
        if section is None:
            raise UidNotFoundError(Section.__tablename__, uid)
        return section

    async def normalize_value(
        self,
        db: AsyncSession,
        element: Element,
        site_id: int,
    ) -> list[SiteEntry]:
        """Return the field's value for `element` in `site_id`."""
        section = await self.get_source_section(db)
        return await get_related_entries(
            db, element, section, self.settings.single_field_uid, site_id,
        )

    async def after_element_save(
        self,
        db: AsyncSession,
        element: Element,
        changes: PendingRelationChanges | Mapping[str, Any] | None,
        element_cache: ElementCache | None = None,
    ) -> ReconcileResult:
        """Apply the changes submitted for this field when `element` is saved."""
        return await save_relationship(
            db,
            self.handle,
            self.settings.single_field_uid,
            element,
            changes,
            element_cache=element_cache,
        )


async def get_many_to_many_field(db: AsyncSession, handle: str) -> ManyToManyField:
    """
    Load a many-to-many field by handle.

    Raises:
        FieldNotFoundError: If no field has that handle.
        InvalidFieldTypeError: If the field is not a many-to-many field.
        InvalidFieldSettingsError: If its settings are malformed.
    """
    field = await db.scalar(select(Field).where(Field.handle == handle))
    if field is None:
        raise FieldNotFoundError(handle)
    return ManyToManyField(field)
