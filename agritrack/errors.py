"""Exception hierarchy for the inventory core.

Absence is not an error here: ``InventoryService.get_by_id`` returns ``None``.
File errors from CSV import/export are left as ``OSError``.
"""
from __future__ import annotations
from typing import Any, Dict, Optional


class AgriTrackError(Exception):
    """Base exception for all inventory errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(AgriTrackError, ValueError):
    """Input rejected before it reaches the store."""


class ItemNotFoundError(AgriTrackError):
    """A flow that needs an existing item could not find it."""

    def __init__(self, item_id: int):
        super().__init__(f'Item {item_id} not found', details={'item_id': item_id})
        self.item_id = item_id


class ItemTypeMismatchError(AgriTrackError):
    """Update tried to store a different variant than the one already persisted."""

    def __init__(self, item_id: int, stored_type: str, given_type: str):
        super().__init__(
            f'Item {item_id} is {stored_type}; cannot update it as {given_type}',
            details={'item_id': item_id, 'stored_type': stored_type, 'given_type': given_type},
        )
        self.item_id = item_id
        self.stored_type = stored_type
        self.given_type = given_type


class PersistenceError(AgriTrackError):
    """A store operation failed.

    Attributes:
        operation: gateway operation name (``create``, ``get_all``, ...)
        cause: the original exception raised by the driver or mapper
    """

    def __init__(self, operation: str, message: str, cause: Optional[BaseException] = None,
                 details: Optional[Dict[str, Any]] = None):
        full = f'{operation}: {message}'
        if cause is not None:
            full = f'{full} (cause: {cause})'
        super().__init__(full, details=details)
        self.operation = operation
        self.cause = cause


class IdentityCollisionError(PersistenceError):
    """Insert hit a duplicate identity and the one-shot repair did not fix it."""


class MalformedRowError(PersistenceError):
    """A stored row could not be rebuilt into an item."""

    def __init__(self, operation: str, item_id: Any, cause: BaseException):
        super().__init__(operation, f'row {item_id} is malformed', cause=cause, details={'item_id': item_id})
        self.item_id = item_id


__all__ = [
    'AgriTrackError', 'ValidationError', 'ItemNotFoundError', 'ItemTypeMismatchError',
    'PersistenceError', 'IdentityCollisionError', 'MalformedRowError',
]
