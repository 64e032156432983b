"""Many-to-many field endpoints: read and edit relations from the target side."""
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session, get_current_element_cache
from core.element_cache import ElementCache
from models.element import Element
from models.entry import SiteEntry
from schemas.entry import EntryResponse, RelatedEntriesResponse
from schemas.relation import PendingRelationChanges
from services.element_service import get_element, invalidate_caches_for_element
from services.exceptions import (
    ElementNotFoundError,
    FieldNotFoundError,
    InvalidFieldSettingsError,
    InvalidFieldTypeError,
    UidNotFoundError,
)
from services.many_to_many_field import ManyToManyField, get_many_to_many_field

router = APIRouter(prefix="/entries", tags=["many-to-many"])


async def _load_element_and_field(
    db: AsyncSession,
    entry_id: int,
    field_handle: str,
) -> tuple[Element, ManyToManyField]:
    """Load the target element and field, translating lookup errors to HTTP errors."""
    try:
        element = await get_element(db, entry_id)
        field = await get_many_to_many_field(db, field_handle)
    except (ElementNotFoundError, FieldNotFoundError) as e:
        raise HTTPException(status_code=404, detail=str(e))
    except (InvalidFieldTypeError, InvalidFieldSettingsError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    return element, field


async def _related_entries(
    db: AsyncSession,
    field: ManyToManyField,
    element: Element,
    site_id: int,
) -> list[SiteEntry]:
    """Run the field lookup; a stale section/field uid in the settings is a 404."""
    try:
        return await field.normalize_value(db, element, site_id)
    except UidNotFoundError as e:
        raise HTTPException(
            status_code=404,
            detail={
                "message": str(e),
                "error_code": "FIELD_SETTINGS_REFERENCE_NOT_FOUND",
            },
        )


def _build_response(
    element: Element,
    field: ManyToManyField,
    site_id: int,
    items: list[EntryResponse],
) -> RelatedEntriesResponse:
    return RelatedEntriesResponse(
        element_id=element.canonical_element_id,
        field_handle=field.handle,
        site_id=site_id,
        items=items,
        total=len(items),
    )


@router.get(
    "/{entry_id}/many-to-many/{field_handle}",
    response_model=RelatedEntriesResponse,
)
async def get_related_entries(
    entry_id: int,
    field_handle: str,
    site_id: int = Query(..., ge=1, description="Site to load entries in"),
    db: AsyncSession = Depends(get_async_session),
    element_cache: ElementCache | None = Depends(get_current_element_cache),
) -> RelatedEntriesResponse:
    """Get the entries related to an entry through a many-to-many field."""
    element, field = await _load_element_and_field(db, entry_id, field_handle)
    target_id = element.canonical_element_id

    if element_cache is not None:
        cached = await element_cache.get_related(target_id, field.handle, site_id)
        if cached is not None:
            items = [EntryResponse.model_validate(item) for item in cached]
            return _build_response(element, field, site_id, items)

    entries = await _related_entries(db, field, element, site_id)
    items = [EntryResponse.model_validate(entry) for entry in entries]

    if element_cache is not None:
        await element_cache.set_related(
            target_id,
            field.handle,
            site_id,
            [item.model_dump(mode="json") for item in items],
        )

    return _build_response(element, field, site_id, items)


@router.put(
    "/{entry_id}/many-to-many/{field_handle}",
    response_model=RelatedEntriesResponse,
)
async def save_related_entries(
    entry_id: int,
    field_handle: str,
    changes: PendingRelationChanges,
    site_id: int = Query(..., ge=1, description="Site to load the refreshed entries in"),
    db: AsyncSession = Depends(get_async_session),
    element_cache: ElementCache | None = Depends(get_current_element_cache),
) -> RelatedEntriesResponse:
    """
    Apply submitted add/delete changes for a many-to-many field.

    Caches are invalidated before the changes are applied and again after the
    commit, since a GET racing the save may have cached pre-commit results.
    Returns the refreshed list of related entries without caching it.
    """
    element, field = await _load_element_and_field(db, entry_id, field_handle)

    try:
        await field.after_element_save(db, element, changes, element_cache)
    except UidNotFoundError as e:
        raise HTTPException(
            status_code=404,
            detail={
                "message": str(e),
                "error_code": "FIELD_SETTINGS_REFERENCE_NOT_FOUND",
            },
        )

    entries = await _related_entries(db, field, element, site_id)
    items = [EntryResponse.model_validate(entry) for entry in entries]

    await db.commit()
    await invalidate_caches_for_element(element, element_cache)
    return _build_response(element, field, site_id, items)
