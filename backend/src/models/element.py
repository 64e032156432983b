"""Element models - the base record every piece of content shares."""
from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base, TimestampMixin, UidMixin


class Element(Base, UidMixin, TimestampMixin):
    """
    Site-agnostic element record.

    Drafts and autosaved revisions are separate element rows whose
    `canonical_id` points at the published element they derive from.
    Relations are always stored against the canonical element.
    """

    __tablename__ = "elements"

    id: Mapped[int] = mapped_column(primary_key=True)
    canonical_id: Mapped[int | None] = mapped_column(
        ForeignKey("elements.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    type: Mapped[str] = mapped_column(String(255), nullable=False)
    enabled: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    deleted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    @property
    def canonical_element_id(self) -> int:
        """Id of the persisted/published element (self for non-derivatives)."""
        return self.canonical_id if self.canonical_id is not None else self.id

    @property
    def is_derivative(self) -> bool:
        """True for drafts and revisions of another element."""
        return self.canonical_id is not None

    @property
    def is_trashed(self) -> bool:
        """Check if element is currently soft-deleted."""
        return self.deleted_at is not None


class ElementSite(Base, TimestampMixin):
    """Per-site content and status of an element."""

    __tablename__ = "elements_sites"

    id: Mapped[int] = mapped_column(primary_key=True)
    element_id: Mapped[int] = mapped_column(
        ForeignKey("elements.id", ondelete="CASCADE"),
        nullable=False,
    )
    site_id: Mapped[int] = mapped_column(
        ForeignKey("sites.id", ondelete="CASCADE"),
        nullable=False,
    )
    title: Mapped[str | None] = mapped_column(String(255), nullable=True)
    slug: Mapped[str | None] = mapped_column(String(255), nullable=True)
    enabled: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    __table_args__ = (
        UniqueConstraint("element_id", "site_id", name="uq_elements_sites_element_site"),
    )
