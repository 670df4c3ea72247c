from __future__ import annotations
import logging
import re
from datetime import date, datetime
from typing import Callable, Optional, Sequence

from agritrack.config.settings import PRIMARY_DATE_FORMAT, SECONDARY_DATE_FORMAT

logger = logging.getLogger(__name__)

STORED_DATE_FORMATS = (PRIMARY_DATE_FORMAT, SECONDARY_DATE_FORMAT)

# strptime accepts single-digit months and days; these formats do not
DATE_SHAPES = {
    PRIMARY_DATE_FORMAT: re.compile(r"\d{4}-\d{2}-\d{2}"),
    SECONDARY_DATE_FORMAT: re.compile(r"\d{2}/\d{2}/\d{4}"),
}


def format_date(value: date) -> str:
    return value.strftime(PRIMARY_DATE_FORMAT)


def parse_date(value: Optional[str], formats: Sequence[str] = STORED_DATE_FORMATS) -> Optional[date]:
    """Try each format in order; None when none of them match."""
    if not value:
        return None
    text = value.strip()
    for fmt in formats:
        shape = DATE_SHAPES.get(fmt)
        if shape is not None and not shape.fullmatch(text):
            continue
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def parse_stored_date(value: Optional[str], today: Callable[[], date] = date.today) -> date:
    """Read a stored ``date_added`` value, falling back to today when unreadable.

    Rows edited by hand outside the application may carry either format, or
    garbage; the latter must not make the row unreadable.
    """
    parsed = parse_date(value)
    if parsed is None:
        fallback = today()
        logger.warning("Could not parse date %r; using %s instead", value, fallback.isoformat())
        return fallback
    return parsed

__all__ = ['format_date', 'parse_date', 'parse_stored_date', 'STORED_DATE_FORMATS', 'DATE_SHAPES']
