import pytest
from agritrack.errors import ItemNotFoundError, ValidationError
from agritrack.services.purchase import quote
from agritrack.services.reports import summarize


def test_summary_counts(service, make_harvest, make_equipment):
    service.create(make_harvest(name='Rice', quantity=50, status='Available'))
    service.create(make_harvest(name='Corn', quantity=10, status='Sold Out'))
    service.create(make_harvest(name='Okra', quantity=5, status='Interested'))
    service.create(make_harvest(name='Yam', quantity=2.5, status='Fresh'))
    service.create(make_equipment(name='Tractor', quantity=1))
    summary = service.summary()
    assert summary.total_items == 5
    assert summary.harvest_count == 4
    assert summary.equipment_count == 1
    assert summary.total_quantity == pytest.approx(68.5)
    assert (summary.available, summary.interested, summary.sold_out) == (1, 1, 1)
    assert summary.as_dict()['status_counts'] == {'Available': 1, 'Fresh': 1, 'Interested': 1, 'Sold Out': 1}


def test_summary_of_nothing():
    assert summarize([]).as_dict()['total_items'] == 0


def test_purchase_reduces_quantity(service, make_harvest):
    item_id = service.create(make_harvest(quantity=50, price_per_unit=57.0))
    receipt = service.purchase(item_id, 10)
    assert receipt.subtotal == pytest.approx(570.0)
    assert receipt.shipping_fee == 0.0
    assert receipt.total == pytest.approx(570.0)
    stored = service.get_by_id(item_id)
    assert stored.quantity == 40.0
    assert stored.status == 'Available'
    assert stored.price_per_unit == 57.0


def test_purchase_everything_marks_sold_out_with_delivery_fee(service, make_harvest):
    item_id = service.create(make_harvest(quantity=4, price_per_unit=10.0))
    receipt = service.purchase(item_id, 4, delivery=True)
    assert receipt.shipping_fee == pytest.approx(20.0)
    assert receipt.total == pytest.approx(60.0)
    assert receipt.remaining_quantity == 0.0
    assert service.get_by_id(item_id).status == 'Sold Out'


def test_purchase_rejections(service, make_harvest, make_equipment):
    priced = service.create(make_harvest(quantity=5, price_per_unit=2.0))
    unpriced = service.create(make_harvest(quantity=5, price_per_unit=None))
    tool = service.create(make_equipment())
    with pytest.raises(ItemNotFoundError):
        service.purchase(999, 1)
    with pytest.raises(ValidationError):
        service.purchase(tool, 1)
    with pytest.raises(ValidationError):
        service.purchase(priced, 0)
    with pytest.raises(ValidationError):
        service.purchase(priced, 6)
    with pytest.raises(ValidationError):
        service.purchase(unpriced, 1)
    assert service.get_by_id(priced).quantity == 5.0


def test_quote_rejects_zero_price(make_harvest):
    with pytest.raises(ValidationError):
        quote(make_harvest(price_per_unit=0.0), 1)
