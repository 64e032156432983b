"""Element lookups and derived-cache invalidation."""
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.element_cache import ElementCache, get_element_cache
from models.element import Element
from services.exceptions import ElementNotFoundError

logger = logging.getLogger(__name__)


async def get_element(
    db: AsyncSession,
    element_id: int,
    include_trashed: bool = False,
) -> Element:
    """
    Get an element by id.

    Raises:
        ElementNotFoundError: If the element does not exist, or is trashed and
            include_trashed is False.
    """
    stmt = select(Element).where(Element.id == element_id)
    if not include_trashed:
        stmt = stmt.where(Element.deleted_at.is_(None))
    element = await db.scalar(stmt)
    if element is None:
        raise ElementNotFoundError(element_id)
    return element


async def invalidate_caches_for_element(
    element: Element,
    cache: ElementCache | None = None,
) -> None:
    """
    Invalidate all derived caches that reference an element.

    Covers both the element itself and, for drafts, the canonical element
    whose cached lookups would otherwise keep serving the old relations.
    Uses the global element cache when `cache` is not given; a missing cache
    (not configured) is a no-op.
    """
    if cache is None:
        cache = get_element_cache()
    if cache is None:
        logger.debug("element_cache_unavailable element_id=%s", element.id)
        return

    element_ids = [element.id]
    if element.is_derivative:
        element_ids.insert(0, element.canonical_element_id)
    for element_id in element_ids:
        await cache.invalidate_element(element_id)
