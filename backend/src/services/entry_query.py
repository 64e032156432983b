"""
Entry query builder.

Builds and runs the SELECT used to find entries for a site, optionally scoped
to a section and filtered to entries related to an element through a field.
"""
from dataclasses import dataclass
from typing import Literal

from sqlalchemy import and_, exists, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from models.element import Element, ElementSite
from models.entry import Entry, SiteEntry
from models.relation import Relation

EntryStatus = Literal['enabled', 'disabled']


@dataclass(frozen=True)
class RelatedTo:
    """
    Relation criteria: entries that point at `target` through a field.

    The entry is the relation source and `target` the relation target; the
    target's canonical id is used so drafts match their published element.
    `field_id=None` matches any relation field.
    """

    target: Element
    field_id: int | None = None


@dataclass
class EntryQuery:
    """
    Criteria for fetching entries in one site.

    Attributes:
        site_id: Site the entries are loaded for (required; content is per site).
        section_id: Restrict to one section, or None for all sections.
        status: 'enabled', 'disabled', or None for any status.
        related_to: Optional relation criteria.
        limit: Maximum number of entries, or None for no limit.
        include_trashed: Include soft-deleted entries.
    """

    site_id: int
    section_id: int | None = None
    status: EntryStatus | None = 'enabled'
    related_to: RelatedTo | None = None
    limit: int | None = None
    include_trashed: bool = False

    def build(self) -> Select:
        """Build the SELECT statement for these criteria."""
        stmt = (
            select(Entry, ElementSite)
            .join(Element, Element.id == Entry.id)
            .join(
                ElementSite,
                and_(
                    ElementSite.element_id == Entry.id,
                    ElementSite.site_id == self.site_id,
                ),
            )
            # Drafts and revisions are never query results
            .where(Element.canonical_id.is_(None))
        )

        if self.section_id is not None:
            stmt = stmt.where(Entry.section_id == self.section_id)

        if not self.include_trashed:
            stmt = stmt.where(Element.deleted_at.is_(None))

        if self.status == 'enabled':
            stmt = stmt.where(Element.enabled.is_(True), ElementSite.enabled.is_(True))
        elif self.status == 'disabled':
            stmt = stmt.where(or_(Element.enabled.is_(False), ElementSite.enabled.is_(False)))

        if self.related_to is not None:
            stmt = stmt.where(self._related_to_clause(self.related_to))

        stmt = stmt.order_by(Entry.post_date.desc().nulls_last(), Entry.id.desc())

        if self.limit is not None:
            stmt = stmt.limit(self.limit)
        return stmt

    def _related_to_clause(self, criteria: RelatedTo):  # noqa: ANN202
        """EXISTS clause matching entries that are the source of a relation to the target."""
        conditions = [
            Relation.source_id == Entry.id,
            Relation.target_id == criteria.target.canonical_element_id,
            # Site-specific relations only count in their own site
            or_(
                Relation.source_site_id.is_(None),
                Relation.source_site_id == self.site_id,
            ),
        ]
        if criteria.field_id is not None:
            conditions.append(Relation.field_id == criteria.field_id)
        return exists().where(*conditions)

    async def all(self, db: AsyncSession) -> list[SiteEntry]:
        """Run the query and return entries paired with their content in the site."""
        result = await db.execute(self.build())
        return [SiteEntry(entry, content) for entry, content in result.all()]

    async def ids(self, db: AsyncSession) -> list[int]:
        """Run the query and return only entry ids, in query order."""
        return [entry.id for entry in await self.all(db)]
