"""Site model - a locale/site context that element content is stored per."""
from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base, TimestampMixin, UidMixin


class Site(Base, UidMixin, TimestampMixin):
    """A site (locale) that elements can be propagated to."""

    __tablename__ = "sites"

    id: Mapped[int] = mapped_column(primary_key=True)
    handle: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    primary: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
