"""Pydantic schemas for many-to-many relation changes."""
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field, field_validator


class PendingRelationChanges(BaseModel):
    """
    Relation changes submitted for one many-to-many field on one element.

    `add` holds source element ids that must be related to the element,
    `delete` holds source element ids that must no longer be. A side that is
    missing or not a list means "no changes on that side".
    """

    add: list[int] = Field(default_factory=list)
    delete: list[int] = Field(default_factory=list)

    @field_validator('add', 'delete', mode='before')
    @classmethod
    def ignore_non_list(cls, v: Any) -> Any:
        """Treat a non-list side as empty; drop blank form values."""
        if not isinstance(v, list | tuple):
            return []
        return [item for item in v if item not in ('', None)]

    @classmethod
    def from_payload(cls, payload: Any) -> 'PendingRelationChanges':
        """
        Build changes from a raw submitted value.

        A value that is not a mapping, or a side that is not a list, means no
        changes. Items inside a list must still be integer ids.

        Raises:
            ValidationError: If a list side holds a non-integer id.
        """
        if not isinstance(payload, Mapping):
            return cls()
        return cls.model_validate(dict(payload))

    @property
    def is_empty(self) -> bool:
        """True when there is nothing to add or delete."""
        return not self.add and not self.delete


class ReconcileResult(BaseModel):
    """Summary of one reconciliation pass."""

    field_id: int
    target_id: int
    added: list[int] = Field(default_factory=list)
    already_present: list[int] = Field(default_factory=list)
    deleted: int = 0
