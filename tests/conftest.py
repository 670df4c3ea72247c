import os, sys, pytest
# Ensure project root is on path so 'agritrack' and 'scripts' can be imported
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)
from datetime import date
from agritrack import create_store, get_db
from agritrack.models.base import Base
import agritrack.models.inventory_record  # noqa: F401
from agritrack.models.farm_item import HarvestLot, EquipmentItem
from agritrack.services.inventory import InventoryService


@pytest.fixture()
def engine():
    # Fresh shared in-memory database for every test
    eng = create_store({'DATABASE_URL': 'sqlite+pysqlite:///:memory:'})
    Base.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture()
def service(engine):
    return InventoryService(get_db)


@pytest.fixture()
def make_harvest():
    def _make(name='Rice', quantity=50.0, unit='kg', date_added=date(2024, 1, 15), notes=None,
              status='Available', price_per_unit=None, item_id=0):
        return HarvestLot(name=name, quantity=quantity, unit=unit, date_added=date_added, notes=notes,
                          status=status, price_per_unit=price_per_unit, id=item_id)
    return _make


@pytest.fixture()
def make_equipment():
    def _make(name='Tractor', quantity=1.0, unit='pieces', date_added=date(2024, 2, 1), notes=None,
              condition='Good', item_id=0):
        return EquipmentItem(name=name, quantity=quantity, unit=unit, date_added=date_added, notes=notes,
                             condition=condition, id=item_id)
    return _make
