"""
Service layer for many-to-many relations.

A many-to-many field lets the *target* side of a relation field edit the
relations that point at it. Two operations:

- get_related_entries(): entries of a section that relate to an element
  through the mirrored relation field.
- save_relationship(): apply submitted add/delete changes to the shared
  relations table for one (field, element) pair.
"""
import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy import delete, exists, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.element_cache import ElementCache
from models.element import Element
from models.entry import SiteEntry
from models.relation import Relation
from models.section import Section
from schemas.relation import PendingRelationChanges, ReconcileResult
from services.db_helpers import field_id_by_uid
from services.element_service import invalidate_caches_for_element
from services.entry_query import EntryQuery, RelatedTo

logger = logging.getLogger(__name__)

# Relations created from the target side have no meaningful position among
# the source field's other selections.
DEFAULT_SORT_ORDER = 1


async def get_related_entries(
    db: AsyncSession,
    element: Element,
    section: Section,
    field_uid: str,
    site_id: int,
) -> list[SiteEntry]:
    """
    Return entries in `section` related to `element` through the field `field_uid`.

    Entries of any status are returned, loaded in `site_id`, without a limit,
    in the entry query's natural order (newest post date first).

    Raises:
        UidNotFoundError: If `field_uid` is not a known field.
    """
    field_id = await field_id_by_uid(db, field_uid)

    query = EntryQuery(
        site_id=site_id,
        section_id=section.id,
        status=None,
        related_to=RelatedTo(target=element, field_id=field_id),
        limit=None,
    )
    return await query.all(db)


async def relation_exists(
    db: AsyncSession,
    field_id: int,
    source_id: int,
    target_id: int,
) -> bool:
    """Check whether a (field, source, target) relation row exists."""
    stmt = select(
        exists().where(
            Relation.field_id == field_id,
            Relation.source_id == source_id,
            Relation.target_id == target_id,
        ),
    )
    return bool(await db.scalar(stmt))


async def save_relationship(
    db: AsyncSession,
    field_handle: str,
    single_field_uid: str,
    element: Element,
    changes: PendingRelationChanges | Mapping[str, Any] | None,
    *,
    element_cache: ElementCache | None = None,
) -> ReconcileResult:
    """
    Reconcile the relations pointing at `element` through `single_field_uid`.

    For each id in `changes.add` a relation (field, source=id, target=element)
    is inserted unless one already exists. Then each id in `changes.delete`
    has its relation removed; deleting a missing relation is a no-op. The add
    pass runs before the delete pass, so an id present in both lists ends up
    unrelated.

    Relations are always stored against the element's canonical id, so saving
    a draft or autosave edits the published element's relations. Derived
    caches for the element are invalidated before any change is applied.

    Runs inside the caller's transaction; nothing is committed here.

    Args:
        db: Database session.
        field_handle: Handle of the many-to-many field being saved.
        single_field_uid: Uid of the relation field whose rows are edited.
        element: The element on the target side of the relations.
        changes: Submitted changes. Raw mappings are accepted; a missing or
            non-list side means no changes for that side.
        element_cache: Cache to invalidate; defaults to the global one.

    Raises:
        UidNotFoundError: If `single_field_uid` is not a known field.
    """
    target_id = element.canonical_element_id

    await invalidate_caches_for_element(element, element_cache)

    if not isinstance(changes, PendingRelationChanges):
        changes = PendingRelationChanges.from_payload(changes)

    field_id = await field_id_by_uid(db, single_field_uid)
    result = ReconcileResult(field_id=field_id, target_id=target_id)

    for source_id in changes.add:
        if await relation_exists(db, field_id, source_id, target_id):
            result.already_present.append(source_id)
            continue
        await db.execute(
            insert(Relation).values(
                field_id=field_id,
                source_id=source_id,
                source_site_id=None,
                target_id=target_id,
                sort_order=DEFAULT_SORT_ORDER,
            ),
        )
        result.added.append(source_id)
        logger.debug(
            "relation_added field_id=%s source_id=%s target_id=%s",
            field_id,
            source_id,
            target_id,
        )

    for source_id in changes.delete:
        deleted = await db.execute(
            delete(Relation).where(
                Relation.field_id == field_id,
                Relation.source_id == source_id,
                Relation.target_id == target_id,
            ),
        )
        result.deleted += deleted.rowcount

    logger.info(
        "relations_reconciled field=%s field_id=%s target_id=%s added=%d unchanged=%d deleted=%d",
        field_handle,
        field_id,
        target_id,
        len(result.added),
        len(result.already_present),
        result.deleted,
    )
    return result
