from datetime import date
import pytest
from agritrack.constants.inventory import STATUS_FRESH
from agritrack.models.farm_item import HarvestLot, EquipmentItem
from agritrack.utils.csv_codec import (
    decode_line, decode_lines, decode_text, encode_item, encode_items, split_csv_line,
)

TODAY = date(2030, 1, 2)


def _today():
    return TODAY


def test_encode_harvest_lot_has_price_column(make_harvest):
    lot = make_harvest(item_id=3, name='Rice', quantity=50, notes=None, status='Available', price_per_unit=57)
    assert encode_item(lot) == '3,Rice,50.00,kg,2024-01-15,,Available,57.00'


def test_encode_harvest_lot_without_price_writes_zero(make_harvest):
    assert encode_item(make_harvest(price_per_unit=None)).endswith(',Available,0.00')


def test_encode_equipment_has_seven_columns(make_equipment):
    line = encode_item(make_equipment(item_id=9, notes='shed', condition='Needs Repair'))
    assert line == '9,Tractor,1.00,pieces,2024-02-01,shed,Needs Repair'


def test_encode_does_not_quote(make_harvest):
    line = encode_item(make_harvest(notes='dry, sorted'))
    assert '"' not in line
    assert line.split(',')[5:7] == ['dry', ' sorted']


def test_encode_items_starts_with_header(make_harvest):
    lines = encode_items([make_harvest()])
    assert lines[0] == 'ID,Name,Quantity,Unit,Date_Added,Notes,Status'
    assert len(lines) == 2


def test_split_honours_quotes():
    assert split_csv_line('1,"Corn, sweet",2') == ['1', 'Corn, sweet', '2']
    assert split_csv_line('a,,b,') == ['a', '', 'b', '']
    # no escaped quotes: "" just toggles twice
    assert split_csv_line('"say ""hi""",x') == ['say hi', 'x']


def test_decode_corn_scenario():
    result = decode_text('ID,Name,Quantity,Unit,Date_Added,Notes,Status\n1,Corn,100.00,kg,2024-01-15,,Fresh\n')
    assert result.errors == []
    assert result.items == [HarvestLot(name='Corn', quantity=100.0, unit='kg', date_added=date(2024, 1, 15),
                                       notes=None, status='Fresh')]
    assert result.items[0].id == 0


def test_decode_skips_bad_quantity_and_continues():
    text = (
        'ID,Name,Quantity,Unit,Date_Added,Notes,Status\n'
        '1,Beans,abc,kg,2024-01-15,,Fresh\n'
        '2,Okra,5,kg,2024-01-16,,Fresh\n'
    )
    result = decode_text(text)
    assert [i.name for i in result.items] == ['Okra']
    assert result.skipped == 1
    assert result.errors[0].line_number == 2
    assert 'Beans' in result.errors[0].line


def test_decode_skips_header_even_after_blank_lines():
    result = decode_text('\n\n  \nID,Name,Quantity,Unit,Date_Added,Notes,Status\n\n5,Rice,1,kg,2024-01-01,,Fresh\n\n')
    assert [i.name for i in result.items] == ['Rice']


def test_decode_drops_empty_name_and_non_positive_quantity():
    text = (
        'header\n'
        '1,,5,kg,2024-01-01,,Fresh\n'
        '2,Zero,0,kg,2024-01-01,,Fresh\n'
        '3,Negative,-2,kg,2024-01-01,,Fresh\n'
        '4,Short,1,kg\n'
    )
    result = decode_text(text)
    assert result.items == []
    assert result.dropped == 4
    assert result.errors == []


def test_decode_defaults_for_missing_columns():
    item = decode_line('7,Squash,3,sacks,,notes here', today=_today)
    assert item.date_added == TODAY
    assert item.status == STATUS_FRESH
    assert item.notes == 'notes here'
    assert item.price_per_unit is None


def test_decode_rejects_non_primary_date_format():
    with pytest.raises(ValueError):
        decode_line('1,Rice,1,kg,01/15/2024,,Fresh')


def test_decode_rejects_unpadded_date():
    result = decode_text('h\n1,Rice,1,kg,2024-1-5,,Fresh\n2,Okra,1,kg,2024-01-05,,Fresh\n')
    assert [i.name for i in result.items] == ['Okra']
    assert result.errors[0].line_number == 2


@pytest.mark.parametrize('quantity', ['1_000', 'inf', 'nan', 'Infinity'])
def test_decode_rejects_non_plain_quantity(quantity):
    result = decode_text(f'h\n1,Rice,{quantity},kg,2024-01-15,,Fresh\n')
    assert result.items == []
    assert result.dropped == 0
    assert result.skipped == 1


def test_decode_rejects_non_finite_price():
    with pytest.raises(ValueError):
        decode_line('1,Rice,1,kg,2024-01-15,,Available,inf')


def test_decode_blank_notes_are_absent():
    assert decode_line('1,Rice,1,kg,2024-01-15,,Fresh').notes is None
    assert decode_line('1,Rice,1,kg,2024-01-15,  ,Fresh').notes is None


def test_decode_quoted_fields():
    item = decode_line('1,"Corn, sweet",2.5,kg,2024-01-15,"picked, washed",Fresh')
    assert item.name == 'Corn, sweet'
    assert item.notes == 'picked, washed'
    assert item.quantity == 2.5


def test_decode_trims_fields():
    item = decode_line(' 1 , Rice , 4 , kg , 2024-01-15 , , Available ')
    assert item.name == 'Rice' and item.unit == 'kg' and item.status == 'Available'


def test_decode_reads_price_column():
    assert decode_line('1,Rice,1,kg,2024-01-15,,Available,57.00').price_per_unit == 57.0
    assert decode_line('1,Rice,1,kg,2024-01-15,,Available,0.00').price_per_unit is None


def test_decode_is_restartable():
    lines = ['h', '1,Rice,1,kg,2024-01-15,,Fresh']
    assert decode_lines(lines).items == decode_lines(lines).items


def test_harvest_round_trip_resets_identity(make_harvest):
    lot = make_harvest(item_id=12, name='Rice', quantity=50, notes='north', status='Available', price_per_unit=57)
    text = '\n'.join(encode_items([lot]))
    (decoded,) = decode_text(text).items
    assert decoded == lot.with_id(0)


def test_harvest_round_trip_without_price(make_harvest):
    lot = make_harvest(item_id=4, notes='x', price_per_unit=None)
    (decoded,) = decode_text('\n'.join(encode_items([lot]))).items
    assert decoded == lot.with_id(0)


def test_equipment_does_not_round_trip(make_equipment):
    eq = make_equipment(item_id=2, notes='shed', condition='Fair')
    (decoded,) = decode_text('\n'.join(encode_items([eq]))).items
    assert isinstance(decoded, HarvestLot)
    assert not isinstance(decoded, EquipmentItem)
    # the condition lands in the status field
    assert decoded.status == 'Fair'
    assert decoded.name == eq.name


def test_harvest_round_trip_with_default_notes(make_harvest):
    lot = make_harvest(item_id=3, price_per_unit=12.5)
    assert lot.notes is None
    (decoded,) = decode_text('\n'.join(encode_items([lot]))).items
    assert decoded == lot.with_id(0)
