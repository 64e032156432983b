"""SQLAlchemy models."""
from models.base import Base, TimestampMixin, UidMixin
from models.site import Site
from models.section import Section
from models.field import ENTRIES_FIELD_TYPE, MANY_TO_MANY_FIELD_TYPE, Field
from models.element import Element, ElementSite
from models.entry import Entry, SiteEntry
from models.relation import Relation

__all__ = [
    "ENTRIES_FIELD_TYPE",
    "MANY_TO_MANY_FIELD_TYPE",
    "Base",
    "Element",
    "ElementSite",
    "Entry",
    "Field",
    "Relation",
    "Section",
    "Site",
    "SiteEntry",
    "TimestampMixin",
    "UidMixin",
]
