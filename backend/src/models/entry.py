"""Entry model - an element that lives in a section."""
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models.base import Base
from models.element import Element, ElementSite


class Entry(Base):
    """Section entry. Shares its primary key with its Element row."""

    __tablename__ = "entries"

    id: Mapped[int] = mapped_column(
        ForeignKey("elements.id", ondelete="CASCADE"),
        primary_key=True,
    )
    section_id: Mapped[int] = mapped_column(
        ForeignKey("sections.id", ondelete="CASCADE"),
        nullable=False,
    )
    post_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    element: Mapped[Element] = relationship(lazy="joined")

    __table_args__ = (
        Index("ix_entries_section_post_date", "section_id", "post_date"),
    )

    @property
    def uid(self) -> str:
        """Stable identifier of the underlying element."""
        return self.element.uid


@dataclass(frozen=True)
class SiteEntry:
    """
    An entry as loaded for one site: the entry row plus that site's content.

    Entry rows are shared through the session identity map, so per-site values
    live on this wrapper rather than on the Entry itself. Two queries for
    different sites in the same session each keep their own content.
    """

    entry: Entry
    content: ElementSite

    @property
    def id(self) -> int:
        return self.entry.id

    @property
    def uid(self) -> str:
        return self.entry.uid

    @property
    def section_id(self) -> int:
        return self.entry.section_id

    @property
    def post_date(self) -> datetime | None:
        return self.entry.post_date

    @property
    def site_id(self) -> int:
        return self.content.site_id

    @property
    def title(self) -> str | None:
        return self.content.title

    @property
    def slug(self) -> str | None:
        return self.content.slug

    @property
    def enabled(self) -> bool:
        """Enabled globally and in the loaded site."""
        return self.entry.element.enabled and self.content.enabled
