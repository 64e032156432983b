"""Field model - custom field definitions, including relation fields."""
from typing import Any

from sqlalchemy import JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base, TimestampMixin, UidMixin

# Field type identifiers stored in fields.type
ENTRIES_FIELD_TYPE = "entries"
MANY_TO_MANY_FIELD_TYPE = "many-to-many"


class Field(Base, UidMixin, TimestampMixin):
    """
    A custom field definition.

    `type` selects the field implementation; `settings` holds its
    type-specific configuration (for many-to-many fields: the source section
    uid and the uid of the single relation field being mirrored).
    """

    __tablename__ = "fields"

    id: Mapped[int] = mapped_column(primary_key=True)
    handle: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[str] = mapped_column(String(100), nullable=False)
    settings: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict, nullable=False)
