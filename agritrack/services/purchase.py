from __future__ import annotations
"""Buying part of a harvest lot: validate, price, then write back the remainder."""
import logging
from dataclasses import dataclass

from agritrack.config.settings import SHIPPING_FEE_PER_UNIT
from agritrack.constants.inventory import ITEM_TYPE_HARVEST, STATUS_AVAILABLE, STATUS_SOLD_OUT
from agritrack.errors import ItemNotFoundError, ValidationError
from agritrack.models.farm_item import HarvestLot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PurchaseReceipt:
    item: HarvestLot
    quantity: float
    price_per_unit: float
    subtotal: float
    shipping_fee: float
    total: float

    @property
    def remaining_quantity(self) -> float:
        return self.item.quantity


def quote(lot: HarvestLot, quantity: float, delivery: bool = False):
    """Return (subtotal, shipping_fee, total) for buying ``quantity`` of ``lot``."""
    if isinstance(quantity, bool) or not isinstance(quantity, (int, float)):
        raise ValidationError('quantity must be a number')
    if quantity <= 0:
        raise ValidationError('Quantity must be greater than zero')
    if quantity > lot.quantity:
        raise ValidationError(
            f'Quantity exceeds available amount ({lot.quantity} {lot.unit})',
            details={'available': lot.quantity},
        )
    price = lot.price_per_unit
    if price is None or price <= 0:
        raise ValidationError('Price is not set for this item')
    subtotal = quantity * price
    shipping_fee = quantity * SHIPPING_FEE_PER_UNIT if delivery else 0.0
    return subtotal, shipping_fee, subtotal + shipping_fee


def purchase_harvest_lot(service, item_id: int, quantity: float, delivery: bool = False) -> PurchaseReceipt:
    item = service.get_by_id(item_id)
    if item is None:
        raise ItemNotFoundError(item_id)
    if item.item_type != ITEM_TYPE_HARVEST:
        raise ValidationError(f'Item {item_id} is not a harvest lot')
    subtotal, shipping_fee, total = quote(item, quantity, delivery)
    remaining = item.quantity - quantity
    updated = HarvestLot(
        id=item.id,
        name=item.name,
        quantity=remaining,
        unit=item.unit,
        date_added=item.date_added,
        notes=item.notes,
        status=STATUS_AVAILABLE if remaining > 0 else STATUS_SOLD_OUT,
        price_per_unit=item.price_per_unit,
    )
    service.update(updated)
    logger.info('Sold %.2f %s of %r (id %s); %.2f left', quantity, item.unit, item.name, item.id, remaining)
    return PurchaseReceipt(
        item=updated,
        quantity=float(quantity),
        price_per_unit=item.price_per_unit,
        subtotal=subtotal,
        shipping_fee=shipping_fee,
        total=total,
    )

__all__ = ['PurchaseReceipt', 'quote', 'purchase_harvest_lot']
