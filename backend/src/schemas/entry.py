"""Pydantic schemas for entry responses."""
from datetime import datetime

from pydantic import BaseModel, ConfigDict


class EntryResponse(BaseModel):
    """An entry as seen in one site."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    uid: str
    section_id: int
    site_id: int | None
    title: str | None
    slug: str | None
    enabled: bool
    post_date: datetime | None


class RelatedEntriesResponse(BaseModel):
    """Entries related to an element through a many-to-many field."""

    element_id: int
    field_handle: str
    site_id: int
    items: list[EntryResponse]
    total: int
