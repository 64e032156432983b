"""Shared exceptions for service layer operations."""


class UidNotFoundError(Exception):
    """
    Raised when a stable uid does not resolve to a row.

    Carries the table name so callers can tell an unknown field uid from an
    unknown section uid.
    """

    def __init__(self, table: str, uid: str) -> None:
        self.table = table
        self.uid = uid
        super().__init__(f"No row in {table} with uid: {uid}")


class ElementNotFoundError(Exception):
    """Raised when an element id does not exist (or is trashed)."""

    def __init__(self, element_id: int) -> None:
        self.element_id = element_id
        super().__init__(f"Element not found: {element_id}")


class FieldNotFoundError(Exception):
    """Raised when no field exists with the given handle."""

    def __init__(self, handle: str) -> None:
        self.handle = handle
        super().__init__(f"Field not found: {handle}")


class InvalidFieldTypeError(Exception):
    """Raised when a field is used as a many-to-many field but is of another type."""

    def __init__(self, handle: str, field_type: str) -> None:
        self.handle = handle
        self.field_type = field_type
        super().__init__(f"Field '{handle}' is of type '{field_type}', not many-to-many")


class InvalidFieldSettingsError(Exception):
    """Raised when a many-to-many field's stored settings are incomplete or malformed."""

    def __init__(self, handle: str, detail: str) -> None:
        self.handle = handle
        self.detail = detail
        super().__init__(f"Field '{handle}' has invalid settings: {detail}")
