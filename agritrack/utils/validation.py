from __future__ import annotations
"""Caller-side checks run before an item is handed to the gateway.

The gateway itself only enforces what the table columns enforce; these
helpers give callers (the command line, importers) consistent messages.
"""
import math
from typing import Iterable

from agritrack.constants.inventory import ALL_ITEM_TYPES
from agritrack.errors import ValidationError


def validate_choice(value: str, allowed: Iterable[str], field_name: str = 'status') -> str:
    """Validate that value is inside allowed.

    Returns the value (to enable inline usage) or raises ValidationError.
    """
    if value not in allowed:
        raise ValidationError(f"{field_name} invalid", details={field_name: value})
    return value


def validate_item(item):
    if not item.name or not item.name.strip():
        raise ValidationError('name required')
    if not item.unit or not item.unit.strip():
        raise ValidationError('unit required')
    validate_choice(item.item_type, ALL_ITEM_TYPES, 'item_type')
    return item


def parse_number(text: str) -> float:
    """Parse a plain decimal number.

    Stricter than ``float()``: digit separators, NaN and infinities are
    rejected with ValidationError (a ValueError).
    """
    if '_' in text:
        raise ValidationError(f'invalid number {text!r}')
    value = float(text)
    if not math.isfinite(value):
        raise ValidationError(f'invalid number {text!r}')
    return value

__all__ = ['validate_choice', 'validate_item', 'parse_number']
