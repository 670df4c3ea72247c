from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Iterable

from agritrack.constants.inventory import (
    ITEM_TYPE_HARVEST, ITEM_TYPE_EQUIPMENT, STATUS_AVAILABLE, STATUS_INTERESTED, STATUS_SOLD_OUT,
)


@dataclass
class InventorySummary:
    total_items: int = 0
    harvest_count: int = 0
    equipment_count: int = 0
    total_quantity: float = 0.0
    status_counts: Dict[str, int] = field(default_factory=dict)

    @property
    def available(self) -> int:
        return self.status_counts.get(STATUS_AVAILABLE, 0)

    @property
    def interested(self) -> int:
        return self.status_counts.get(STATUS_INTERESTED, 0)

    @property
    def sold_out(self) -> int:
        return self.status_counts.get(STATUS_SOLD_OUT, 0)

    def as_dict(self):
        return {
            'total_items': self.total_items,
            'harvest_count': self.harvest_count,
            'equipment_count': self.equipment_count,
            'total_quantity': round(self.total_quantity, 2),
            'available': self.available,
            'interested': self.interested,
            'sold_out': self.sold_out,
            # Deterministic ordering
            'status_counts': dict(sorted(self.status_counts.items())),
        }


def summarize(items: Iterable) -> InventorySummary:
    """Counts per variant, total quantity across units, harvest status breakdown."""
    summary = InventorySummary()
    for item in items:
        summary.total_items += 1
        summary.total_quantity += item.quantity
        if item.item_type == ITEM_TYPE_HARVEST:
            summary.harvest_count += 1
            summary.status_counts[item.status] = summary.status_counts.get(item.status, 0) + 1
        elif item.item_type == ITEM_TYPE_EQUIPMENT:
            summary.equipment_count += 1
    return summary

__all__ = ['InventorySummary', 'summarize']
