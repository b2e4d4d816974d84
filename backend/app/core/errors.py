"""Typed domain errors raised by stores and services.

Each error carries the machine-readable ``code`` and the HTTP status the API
boundary reports for it, so routers never translate errors themselves.
"""

from __future__ import annotations


class KanbanError(Exception):
    """Base class for every classified failure."""

    code = "INTERNAL_ERROR"
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(KanbanError):
    """Input failed a shape, length or format check."""

    code = "VALIDATION_ERROR"
    status_code = 400

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class NotFoundError(KanbanError):
    """A referenced entity does not exist."""

    code = "NOT_FOUND"
    status_code = 404

    def __init__(self, entity: str, entity_id: object) -> None:
        super().__init__(f"{entity} with id {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class BusinessRuleError(KanbanError):
    """A mutation would break a domain invariant."""

    code = "BUSINESS_RULE_ERROR"
    status_code = 400


class StorageError(KanbanError):
    """The underlying store failed; the original exception is kept as ``cause``."""

    code = "STORAGE_ERROR"
    status_code = 500

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause
