from __future__ import annotations
"""CSV export and best-effort batch import.

Import decodes the whole file first, then submits each item through
``InventoryService.create`` in order. One failing item is recorded and the
rest are still attempted; nothing is rolled back.
"""
import logging
import os
from dataclasses import dataclass, field
from typing import Iterable, List, Union

from agritrack.errors import AgriTrackError
from agritrack.models.farm_item import FarmItem
from agritrack.utils.csv_codec import DecodeResult, decode_lines, encode_items

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


@dataclass
class ImportFailure:
    item: FarmItem
    error: AgriTrackError


@dataclass
class ImportResult:
    created: List[FarmItem] = field(default_factory=list)
    failed: List[ImportFailure] = field(default_factory=list)
    decoded: DecodeResult = field(default_factory=DecodeResult)

    @property
    def imported_count(self) -> int:
        return len(self.created)

    @property
    def error_count(self) -> int:
        return len(self.failed)


def export_csv(path: PathLike, items: Iterable[FarmItem]) -> int:
    """Write a header plus one line per item; returns the number of items written."""
    lines = encode_items(items)
    with open(path, 'w', encoding='utf-8', newline='') as fh:
        for line in lines:
            fh.write(line + '\n')
    logger.info('Exported %d items to %s', len(lines) - 1, path)
    return len(lines) - 1


def submit_items(service, items: Iterable[FarmItem]) -> ImportResult:
    result = ImportResult()
    for item in items:
        try:
            new_id = service.create(item)
        except AgriTrackError as exc:
            logger.error('Error importing record %r: %s', item.name, exc)
            result.failed.append(ImportFailure(item, exc))
            continue
        result.created.append(item.with_id(new_id))
    return result


def import_csv(path: PathLike, service) -> ImportResult:
    with open(path, 'r', encoding='utf-8', newline='') as fh:
        decoded = decode_lines(fh)
    result = submit_items(service, decoded.items)
    result.decoded = decoded
    logger.info(
        'Imported %d records from %s (%d failed, %d lines skipped)',
        result.imported_count, path, result.error_count, decoded.skipped,
    )
    return result

__all__ = ['ImportFailure', 'ImportResult', 'export_csv', 'import_csv', 'submit_items']
