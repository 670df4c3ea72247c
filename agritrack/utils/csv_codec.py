from __future__ import annotations
"""Flat text encoding of inventory items.

Encoding never quotes fields, while decoding honours double-quoted spans.
Decoding always produces harvest lots and drops the id column; the caller
gets fresh ids by submitting the result through ``InventoryService.create``.
"""
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Iterable, List, Optional

from agritrack.config.settings import (
    CSV_HEADER, DEFAULT_IMPORT_STATUS, DEFAULT_UNIT, MIN_CSV_FIELDS, PRIMARY_DATE_FORMAT,
)
from agritrack.constants.inventory import ITEM_TYPE_HARVEST, ITEM_TYPE_EQUIPMENT
from agritrack.errors import ValidationError
from agritrack.models.farm_item import FarmItem, HarvestLot
from agritrack.utils.dates import format_date, parse_date
from agritrack.utils.validation import parse_number

logger = logging.getLogger(__name__)


@dataclass
class LineError:
    line_number: int
    line: str
    reason: str


@dataclass
class DecodeResult:
    items: List[HarvestLot] = field(default_factory=list)
    errors: List[LineError] = field(default_factory=list)
    dropped: int = 0

    @property
    def skipped(self) -> int:
        return len(self.errors)


def encode_item(item: FarmItem) -> str:
    fields = [
        str(item.id),
        item.name,
        f'{item.quantity:.2f}',
        item.unit,
        format_date(item.date_added),
        item.notes or '',
    ]
    if item.item_type == ITEM_TYPE_HARVEST:
        price = item.price_per_unit if item.price_per_unit is not None else 0.0
        fields.append(item.status or '')
        fields.append(f'{price:.2f}')
    elif item.item_type == ITEM_TYPE_EQUIPMENT:
        fields.append(item.condition or '')
    else:
        raise ValidationError(f'Unknown item type {item.item_type!r}')
    return ','.join(fields)


def encode_items(items: Iterable[FarmItem]) -> List[str]:
    return [CSV_HEADER] + [encode_item(i) for i in items]


def split_csv_line(line: str) -> List[str]:
    """Split on commas outside double quotes; quote characters are dropped."""
    parts = []
    current = []
    in_quotes = False
    for ch in line:
        if ch == '"':
            in_quotes = not in_quotes
        elif ch == ',' and not in_quotes:
            parts.append(''.join(current))
            current = []
        else:
            current.append(ch)
    parts.append(''.join(current))
    return parts


def decode_line(line: str, today: Callable[[], date] = date.today) -> Optional[HarvestLot]:
    """Build a harvest lot from one data line.

    Returns None for lines that are too short or describe nothing (empty name,
    quantity not above zero). Raises ValueError for unparseable fields.
    """
    parts = split_csv_line(line)
    if len(parts) < MIN_CSV_FIELDS:
        return None

    def column(index: int, default: str) -> str:
        return parts[index].strip() if len(parts) > index else default

    name = column(1, '')
    quantity = parse_number(column(2, '0'))
    unit = column(3, DEFAULT_UNIT)
    date_text = column(4, '')
    if date_text:
        date_added = parse_date(date_text, (PRIMARY_DATE_FORMAT,))
        if date_added is None:
            raise ValueError(f'invalid date {date_text!r}')
    else:
        date_added = today()
    notes = column(5, '') or None
    status = column(6, DEFAULT_IMPORT_STATUS)
    price_text = column(7, '')
    # 0.00 is what the encoder writes for "no price"
    price = parse_number(price_text) if price_text else None
    if not price:
        price = None

    if not name or not quantity > 0:
        return None
    return HarvestLot(
        name=name,
        quantity=quantity,
        unit=unit,
        date_added=date_added,
        notes=notes,
        status=status,
        price_per_unit=price,
    )


def decode_lines(lines: Iterable[str], today: Callable[[], date] = date.today) -> DecodeResult:
    """Decode a header line followed by data lines.

    The first non-blank line is the header and is skipped; blank lines are
    ignored. A line that fails to parse is recorded in ``errors`` and decoding
    moves on to the next one.
    """
    result = DecodeResult()
    header_seen = False
    for number, raw in enumerate(lines, start=1):
        line = raw.rstrip('\r\n')
        if not line.strip():
            continue
        if not header_seen:
            header_seen = True
            continue
        try:
            item = decode_line(line, today)
        except ValueError as exc:
            logger.warning('Skipping CSV line %d %r: %s', number, line, exc)
            result.errors.append(LineError(number, line, str(exc)))
            continue
        if item is None:
            result.dropped += 1
            continue
        result.items.append(item)
    return result


def decode_text(text: str, today: Callable[[], date] = date.today) -> DecodeResult:
    return decode_lines(text.splitlines(), today)

__all__ = [
    'LineError', 'DecodeResult', 'encode_item', 'encode_items', 'split_csv_line',
    'decode_line', 'decode_lines', 'decode_text',
]
