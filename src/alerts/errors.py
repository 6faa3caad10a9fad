from __future__ import annotations


class AlertStoreError(Exception):
    """Base class for alert registry failures."""


class ValidationError(AlertStoreError, ValueError):
    """Malformed or missing alert field, or an unknown severity token."""

    def __init__(self, message: str, *, field: str | None = None, position: int | None = None) -> None:
        super().__init__(message)
        self.field = field
        self.position = position


class PersistenceError(AlertStoreError):
    """The alert document could not be read or written."""
