from __future__ import annotations
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import Integer, String, Float
from typing import Optional

from .base import Base


class InventoryRecord(Base):
    """One row of the shared inventory table.

    ``status_or_condition`` holds a harvest lot's status or a piece of
    equipment's condition; ``item_type`` says which.
    """
    __tablename__ = 'inventory_item'
    __table_args__ = {'sqlite_autoincrement': True}

    item_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    quantity: Mapped[float] = mapped_column(Float, nullable=False)
    unit: Mapped[str] = mapped_column(String(50), nullable=False)
    item_type: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    date_added: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    status_or_condition: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    price_per_unit: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

__all__ = ["InventoryRecord"]
