"""Section model - the collection an entry belongs to."""
from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base, TimestampMixin, UidMixin


class Section(Base, UidMixin, TimestampMixin):
    """A section groups entries (e.g., 'blog', 'authors')."""

    __tablename__ = "sections"

    id: Mapped[int] = mapped_column(primary_key=True)
    handle: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[str] = mapped_column(String(20), default="channel", nullable=False)
