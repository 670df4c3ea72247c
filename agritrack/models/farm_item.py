"""Inventory items as a closed, tagged pair of variants.

``HarvestLot`` and ``EquipmentItem`` share the common fields of ``FarmItem``;
the ``item_type`` tag is the only thing callers and mappers dispatch on.
Adding a third variant means updating the row mapping in
``agritrack.services.inventory`` and the encoder in ``agritrack.utils.csv_codec``.
"""
from __future__ import annotations
from dataclasses import dataclass, replace
from datetime import date
from typing import Any, ClassVar, Dict, Optional, Union

from agritrack.constants.inventory import (
    ITEM_TYPE_HARVEST, ITEM_TYPE_EQUIPMENT, DEFAULT_STATUS, DEFAULT_CONDITION,
)
from agritrack.errors import ValidationError


def _as_real(value: Any, field_name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f'{field_name} must be a number, got {value!r}')
    value = float(value)
    if value < 0:
        raise ValidationError(f'{field_name} must not be negative')
    return value


@dataclass
class FarmItem:
    name: str
    quantity: float
    unit: str
    date_added: date
    notes: Optional[str] = None
    id: int = 0

    ITEM_TYPE: ClassVar[str] = ''

    def __post_init__(self):
        if type(self) is FarmItem:
            raise TypeError('FarmItem is abstract; use HarvestLot or EquipmentItem')
        if not isinstance(self.name, str):
            raise ValidationError(f'name must be text, got {self.name!r}')
        if not isinstance(self.unit, str):
            raise ValidationError(f'unit must be text, got {self.unit!r}')
        if not isinstance(self.date_added, date):
            raise ValidationError(f'date_added must be a date, got {self.date_added!r}')
        self.quantity = _as_real(self.quantity, 'quantity')

    @property
    def item_type(self) -> str:
        return self.ITEM_TYPE

    def with_id(self, item_id: int):
        return replace(self, id=item_id)

    def to_row(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'item_type': self.item_type,
            'name': self.name,
            'quantity': self.quantity,
            'unit': self.unit,
            'date_added': self.date_added.isoformat(),
            'notes': self.notes,
        }


@dataclass
class HarvestLot(FarmItem):
    status: Optional[str] = DEFAULT_STATUS
    price_per_unit: Optional[float] = None

    ITEM_TYPE: ClassVar[str] = ITEM_TYPE_HARVEST

    def __post_init__(self):
        super().__post_init__()
        if self.status is None:
            self.status = DEFAULT_STATUS
        if self.price_per_unit is not None:
            self.price_per_unit = _as_real(self.price_per_unit, 'price_per_unit')

    def to_row(self) -> Dict[str, Any]:
        row = super().to_row()
        row['status'] = self.status
        row['price_per_unit'] = self.price_per_unit
        return row


@dataclass
class EquipmentItem(FarmItem):
    condition: Optional[str] = DEFAULT_CONDITION

    ITEM_TYPE: ClassVar[str] = ITEM_TYPE_EQUIPMENT

    def __post_init__(self):
        super().__post_init__()
        if self.condition is None:
            self.condition = DEFAULT_CONDITION

    def to_row(self) -> Dict[str, Any]:
        row = super().to_row()
        row['condition'] = self.condition
        return row


InventoryItem = Union[HarvestLot, EquipmentItem]

__all__ = ['FarmItem', 'HarvestLot', 'EquipmentItem', 'InventoryItem']
