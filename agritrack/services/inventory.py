from __future__ import annotations
"""Persistence gateway for the single ``inventory_item`` table.

Every public operation opens its own session, does one unit of work and
closes it. The row mapping is keyed on ``item_type`` only: the shared
``status_or_condition`` column is a status for harvest lots and a condition
for equipment, and nothing is ever inferred from which field happens to be set.
"""
import logging
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy import delete as sa_delete, func, or_, select, text, update as sa_update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from agritrack import get_db
from agritrack.constants.inventory import ITEM_TYPE_HARVEST, ITEM_TYPE_EQUIPMENT
from agritrack.decorators.operation import persistence_operation
from agritrack.errors import (
    IdentityCollisionError, ItemTypeMismatchError, MalformedRowError, ValidationError,
)
from agritrack.models.farm_item import EquipmentItem, FarmItem, HarvestLot
from agritrack.models.inventory_record import InventoryRecord
from agritrack.utils.dates import format_date, parse_stored_date

logger = logging.getLogger(__name__)

TABLE_NAME = InventoryRecord.__tablename__

# Markers of a uniqueness violation on the identity column, across drivers.
IDENTITY_COLLISION_MARKERS = ('PRIMARY KEY', f'{TABLE_NAME}.item_id', f'{TABLE_NAME}_pkey', '23505')

LIST_ORDER = (InventoryRecord.date_added.desc(), InventoryRecord.item_id.desc())


def record_values(item: FarmItem) -> Dict[str, Any]:
    """Flatten an item into the column values shared by insert and update."""
    if item.item_type == ITEM_TYPE_HARVEST:
        shared, price = item.status, item.price_per_unit
    elif item.item_type == ITEM_TYPE_EQUIPMENT:
        shared, price = item.condition, None
    else:
        raise ValidationError(f'Unknown item type {item.item_type!r}')
    return {
        'name': item.name,
        'quantity': item.quantity,
        'unit': item.unit,
        'date_added': format_date(item.date_added),
        'status_or_condition': shared,
        'notes': item.notes,
        'price_per_unit': price,
    }


def effective_item_type(stored_type: Optional[str]) -> str:
    # Unknown or missing tags read back as harvest lots
    return ITEM_TYPE_EQUIPMENT if stored_type == ITEM_TYPE_EQUIPMENT else ITEM_TYPE_HARVEST


def record_to_item(record: InventoryRecord, operation: str = 'read') -> FarmItem:
    """Rebuild the variant a row stands for.

    An unreadable ``date_added`` falls back to today; any other bad field
    raises ``MalformedRowError`` for that row.
    """
    date_added = parse_stored_date(record.date_added)
    try:
        common = dict(
            id=record.item_id,
            name=record.name,
            quantity=record.quantity,
            unit=record.unit,
            date_added=date_added,
            notes=record.notes,
        )
        if effective_item_type(record.item_type) == ITEM_TYPE_EQUIPMENT:
            return EquipmentItem(condition=record.status_or_condition, **common)
        if record.item_type != ITEM_TYPE_HARVEST:
            logger.debug('Row %s has item_type %r; reading it as a harvest lot', record.item_id, record.item_type)
        return HarvestLot(status=record.status_or_condition, price_per_unit=record.price_per_unit, **common)
    except (ValueError, TypeError) as exc:
        raise MalformedRowError(operation, record.item_id, exc) from exc


def is_identity_collision(exc: IntegrityError) -> bool:
    orig = exc.orig
    if getattr(orig, 'pgcode', None) == '23505' or getattr(orig, 'sqlstate', None) == '23505':
        return True
    message = str(orig)
    return any(marker in message for marker in IDENTITY_COLLISION_MARKERS)


def reset_identity_sequence(session: Session, next_id: int):
    """Point the store's identity generator at ``next_id``."""
    dialect = session.get_bind().dialect.name
    if dialect == 'sqlite':
        # AUTOINCREMENT tables hand out sqlite_sequence.seq + 1
        result = session.execute(
            text('UPDATE sqlite_sequence SET seq = :seq WHERE name = :table'),
            {'seq': next_id - 1, 'table': TABLE_NAME},
        )
        if result.rowcount == 0:
            session.execute(
                text('INSERT INTO sqlite_sequence (name, seq) VALUES (:table, :seq)'),
                {'seq': next_id - 1, 'table': TABLE_NAME},
            )
    elif dialect == 'postgresql':
        session.execute(
            text("SELECT setval(pg_get_serial_sequence(:table, 'item_id'), :next_id, false)"),
            {'table': TABLE_NAME, 'next_id': next_id},
        )
    else:
        session.execute(text(f'ALTER TABLE {TABLE_NAME} ALTER COLUMN item_id RESTART WITH {int(next_id)}'))


class InventoryService:
    """CRUD and search over inventory items.

    ``session_factory`` is the connection-acquisition function; it defaults to
    ``agritrack.get_db``.
    """

    def __init__(self, session_factory: Optional[Callable[[], Session]] = None):
        self._session_factory = session_factory or get_db

    # ---------- Create ---------- #

    @persistence_operation('create', item_id_arg='item')
    def create(self, item: FarmItem) -> int:
        """Insert ``item`` and return the id the store assigned.

        A duplicate-identity failure triggers exactly one repair of the
        identity generator followed by one retry of the same insert.
        """
        record_values(item)
        try:
            return self._insert(item)
        except IntegrityError as exc:
            if not is_identity_collision(exc):
                raise
            original = exc
        logger.warning('Identity collision inserting %r; repairing the id sequence', item.name)
        try:
            self._repair_identity_sequence()
        except SQLAlchemyError as repair_exc:
            raise IdentityCollisionError(
                'create', 'identity sequence repair failed', cause=original
            ) from repair_exc
        try:
            return self._insert(item)
        except SQLAlchemyError as retry_exc:
            raise IdentityCollisionError(
                'create', 'insert failed again after identity sequence repair', cause=original
            ) from retry_exc

    def _insert(self, item: FarmItem) -> int:
        with self._session_factory() as session:
            record = InventoryRecord(item_type=item.item_type, **record_values(item))
            session.add(record)
            try:
                session.commit()
            except SQLAlchemyError:
                session.rollback()
                raise
            new_id = record.item_id
        logger.info('Added %s item %r with id %s', item.item_type, item.name, new_id)
        return new_id

    def _repair_identity_sequence(self) -> int:
        with self._session_factory() as session:
            max_id = session.execute(select(func.max(InventoryRecord.item_id))).scalar() or 0
            next_id = max_id + 1
            try:
                reset_identity_sequence(session, next_id)
                session.commit()
            except SQLAlchemyError:
                session.rollback()
                raise
        logger.warning('Identity sequence for %s reset; next id will be %d', TABLE_NAME, next_id)
        return next_id

    # ---------- Read ---------- #

    @persistence_operation('get_all')
    def get_all(self) -> List[FarmItem]:
        """Every item, most recent ``date_added`` first (ties: newest id first)."""
        with self._session_factory() as session:
            records = session.execute(select(InventoryRecord).order_by(*LIST_ORDER)).scalars().all()
            return [record_to_item(r, 'get_all') for r in records]

    @persistence_operation('get_by_id', item_id_arg='item_id')
    def get_by_id(self, item_id: int) -> Optional[FarmItem]:
        """The item with this id, or None."""
        with self._session_factory() as session:
            record = session.get(InventoryRecord, item_id)
            if record is None:
                return None
            return record_to_item(record, 'get_by_id')

    @persistence_operation('search')
    def search(self, query: Optional[str]) -> List[FarmItem]:
        """Items whose name, notes or item type contain ``query`` (case-sensitive).

        ``%`` and ``_`` in the query keep their LIKE meaning.
        """
        pattern = f"%{query or ''}%"
        stmt = (
            select(InventoryRecord)
            .where(or_(
                InventoryRecord.name.like(pattern),
                InventoryRecord.notes.like(pattern),
                InventoryRecord.item_type.like(pattern),
            ))
            .order_by(*LIST_ORDER)
        )
        with self._session_factory() as session:
            records = session.execute(stmt).scalars().all()
            return [record_to_item(r, 'search') for r in records]

    # ---------- Update / Delete ---------- #

    @persistence_operation('update', item_id_arg='item')
    def update(self, item: FarmItem) -> int:
        """Replace every non-identity field of the row ``item.id``.

        Returns the affected row count; 0 means no such id (not an error).
        The stored item type never changes: passing the other variant raises
        ``ItemTypeMismatchError`` and writes nothing.
        """
        values = record_values(item)
        with self._session_factory() as session:
            stored_type = session.execute(
                select(InventoryRecord.item_type).where(InventoryRecord.item_id == item.id)
            ).scalar_one_or_none()
            if stored_type is None:
                logger.info('Update skipped: no item with id %s', item.id)
                return 0
            if effective_item_type(stored_type) != item.item_type:
                raise ItemTypeMismatchError(item.id, stored_type, item.item_type)
            result = session.execute(
                sa_update(InventoryRecord)
                .where(InventoryRecord.item_id == item.id)
                .values(**values)
                .execution_options(synchronize_session=False)
            )
            session.commit()
        logger.info('Updated item %r (id %s)', item.name, item.id)
        return result.rowcount

    @persistence_operation('delete', item_id_arg='item_id')
    def delete(self, item_id: int) -> int:
        """Remove the row; returns the affected row count (0 if it was absent)."""
        with self._session_factory() as session:
            result = session.execute(
                sa_delete(InventoryRecord)
                .where(InventoryRecord.item_id == item_id)
                .execution_options(synchronize_session=False)
            )
            session.commit()
        if result.rowcount:
            logger.info('Deleted item id %s', item_id)
        return result.rowcount

    # ---------- Derived operations ---------- #

    def summary(self):
        from agritrack.services.reports import summarize
        return summarize(self.get_all())

    def purchase(self, item_id: int, quantity: float, delivery: bool = False):
        from agritrack.services.purchase import purchase_harvest_lot
        return purchase_harvest_lot(self, item_id, quantity, delivery=delivery)


__all__ = [
    'InventoryService', 'record_values', 'record_to_item', 'effective_item_type',
    'is_identity_collision', 'reset_identity_sequence',
]
