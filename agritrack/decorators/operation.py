from __future__ import annotations
"""Decorator giving every gateway operation the same logging and error shape.

Usage:

@persistence_operation('delete', item_id_arg='item_id')
def delete(self, item_id): ...

Parameters:
  name: operation name carried by ``PersistenceError.operation`` and log lines.
  item_id_arg: name of the argument holding the affected id, if any. An
    argument carrying an item object contributes its ``id`` attribute instead.

Errors already belonging to the inventory hierarchy pass through untouched;
SQLAlchemy errors are logged and re-raised as ``PersistenceError`` with the
original exception chained.
"""

import inspect
import logging
from functools import wraps
from typing import Any, Callable, Optional

from sqlalchemy.exc import SQLAlchemyError

from agritrack.errors import AgriTrackError, PersistenceError

logger = logging.getLogger('agritrack.services.inventory')


def _affected_id(sig: inspect.Signature, item_id_arg: Optional[str], args: tuple, kwargs: dict) -> Any:
    if not item_id_arg:
        return None
    try:
        bound = sig.bind_partial(*args, **kwargs)
    except TypeError:
        return None
    value = bound.arguments.get(item_id_arg)
    return getattr(value, 'id', value)


def persistence_operation(name: str, *, item_id_arg: Optional[str] = None):
    def outer(fn: Callable):
        sig = inspect.signature(fn)

        @wraps(fn)
        def wrapper(*args, **kwargs):
            item_id = _affected_id(sig, item_id_arg, args, kwargs)
            logger.debug('%s start id=%s', name, item_id)
            try:
                return fn(*args, **kwargs)
            except AgriTrackError:
                raise
            except SQLAlchemyError as exc:
                logger.exception('%s failed id=%s', name, item_id)
                details = {'item_id': item_id} if item_id is not None else None
                raise PersistenceError(name, 'store operation failed', cause=exc, details=details) from exc
        return wrapper
    return outer

__all__ = ['persistence_operation']
