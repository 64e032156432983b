"""Relation model - the shared table linking elements through relation fields."""
from sqlalchemy import ForeignKey, Index, Integer
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base, TimestampMixin


class Relation(Base, TimestampMixin):
    """
    A directed link from a source element to a target element via a field.

    The source is the element that owns the relation field; the target is the
    element selected in it. Many-to-many fields edit these rows from the
    target side.

    (field_id, source_id, target_id) is kept unique by the services that write
    rows (check before insert); no unique constraint is declared here since
    the table is shared with writers that also key on source_site_id.
    """

    __tablename__ = "relations"

    id: Mapped[int] = mapped_column(primary_key=True)
    field_id: Mapped[int] = mapped_column(
        ForeignKey("fields.id", ondelete="CASCADE"),
        nullable=False,
    )
    source_id: Mapped[int] = mapped_column(
        ForeignKey("elements.id", ondelete="CASCADE"),
        nullable=False,
    )
    # NULL means the relation applies in every site
    source_site_id: Mapped[int | None] = mapped_column(
        ForeignKey("sites.id", ondelete="CASCADE"),
        nullable=True,
    )
    target_id: Mapped[int] = mapped_column(
        ForeignKey("elements.id", ondelete="CASCADE"),
        nullable=False,
    )
    sort_order: Mapped[int] = mapped_column(Integer, default=1, nullable=False)

    __table_args__ = (
        Index("ix_relations_field_source", "field_id", "source_id"),
        Index("ix_relations_field_target", "field_id", "target_id"),
    )
