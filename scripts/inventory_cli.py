#!/usr/bin/env python
"""Command line access to the farm inventory.

Usage:
  python -m scripts.inventory_cli list
  python -m scripts.inventory_cli search Rice
  python -m scripts.inventory_cli show 3
  python -m scripts.inventory_cli add harvest Rice 50 kg --price 57
  python -m scripts.inventory_cli add equipment Tractor 1 pieces --condition "Needs Repair"
  python -m scripts.inventory_cli delete 3
  python -m scripts.inventory_cli export inventory.csv
  python -m scripts.inventory_cli import inventory.csv
  python -m scripts.inventory_cli purchase 3 10 --delivery
  python -m scripts.inventory_cli summary

Options:
  --database-url URL   Override DATABASE_URL for this run

Exit Codes:
  0 success
  1 handled inventory or file error
"""
from __future__ import annotations
import argparse, json, logging, os, sys
from datetime import date

# Allow running from repo root
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from agritrack import create_store, init_schema  # noqa: E402
from agritrack.config.settings import PRIMARY_DATE_FORMAT, log_level  # noqa: E402
from agritrack.errors import AgriTrackError, ValidationError  # noqa: E402
from agritrack.models.farm_item import EquipmentItem, HarvestLot  # noqa: E402
from agritrack.services.csv_io import export_csv, import_csv  # noqa: E402
from agritrack.services.inventory import InventoryService  # noqa: E402
from agritrack.utils.dates import parse_date  # noqa: E402
from agritrack.utils.validation import parse_number, validate_item  # noqa: E402


def _print_items(items):
    for item in items:
        print(json.dumps(item.to_row(), sort_keys=True))
    print(f"{len(items)} item(s)")
    return 0


def cmd_list(service, args):
    return _print_items(service.get_all())


def cmd_search(service, args):
    return _print_items(service.search(args.query))


def cmd_show(service, args):
    item = service.get_by_id(args.item_id)
    if item is None:
        print(f"Item {args.item_id} not found", file=sys.stderr)
        return 1
    print(json.dumps(item.to_row(), indent=2, sort_keys=True))
    return 0


def _date_arg(value):
    if value is None:
        return date.today()
    parsed = parse_date(value, (PRIMARY_DATE_FORMAT,))
    if parsed is None:
        raise ValidationError(f'date must look like YYYY-MM-DD, got {value!r}')
    return parsed


def cmd_add(service, args):
    common = dict(
        name=args.name,
        quantity=args.quantity,
        unit=args.unit,
        date_added=_date_arg(args.date),
        notes=args.notes,
    )
    if args.kind == 'harvest':
        item = HarvestLot(status=args.status, price_per_unit=args.price, **common)
    else:
        item = EquipmentItem(condition=args.condition, **common)
    validate_item(item)
    new_id = service.create(item)
    print(f"Added {item.item_type} item {item.name!r} with id {new_id}")
    return 0


def cmd_delete(service, args):
    removed = service.delete(args.item_id)
    print(f"Deleted {removed} item(s)")
    return 0


def cmd_export(service, args):
    count = export_csv(args.path, service.get_all())
    print(f"Exported {count} item(s) to {args.path}")
    return 0


def cmd_import(service, args):
    result = import_csv(args.path, service)
    if not result.created and not result.failed:
        print("No valid records found in the file.")
        return 0
    print("Import completed!")
    print(f"Successfully imported: {result.imported_count} records")
    print(f"Errors: {result.error_count}")
    if result.decoded.skipped:
        print(f"Skipped lines: {result.decoded.skipped}")
    return 0


def cmd_purchase(service, args):
    receipt = service.purchase(args.item_id, args.quantity, delivery=args.delivery)
    print(json.dumps({
        'item_id': receipt.item.id,
        'quantity': receipt.quantity,
        'subtotal': round(receipt.subtotal, 2),
        'shipping_fee': round(receipt.shipping_fee, 2),
        'total': round(receipt.total, 2),
        'remaining_quantity': receipt.remaining_quantity,
        'status': receipt.item.status,
    }, sort_keys=True))
    return 0


def cmd_summary(service, args):
    print(json.dumps(service.summary().as_dict(), indent=2, sort_keys=True))
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Farm inventory tracker")
    p.add_argument('--database-url', dest='database_url', help='Override DATABASE_URL')
    sub = p.add_subparsers(dest='command', required=True)

    sub.add_parser('list', help='List every item, newest first').set_defaults(func=cmd_list)

    s = sub.add_parser('search', help='Case-sensitive search over name, notes and type')
    s.add_argument('query')
    s.set_defaults(func=cmd_search)

    s = sub.add_parser('show', help='Show one item')
    s.add_argument('item_id', type=int)
    s.set_defaults(func=cmd_show)

    s = sub.add_parser('add', help='Add a harvest lot or a piece of equipment')
    s.add_argument('kind', choices=('harvest', 'equipment'))
    s.add_argument('name')
    s.add_argument('quantity', type=parse_number)
    s.add_argument('unit')
    s.add_argument('--date', help='YYYY-MM-DD, defaults to today')
    s.add_argument('--notes')
    s.add_argument('--status', help='harvest only')
    s.add_argument('--price', type=parse_number, help='harvest only, price per unit')
    s.add_argument('--condition', help='equipment only')
    s.set_defaults(func=cmd_add)

    s = sub.add_parser('delete', help='Delete an item by id')
    s.add_argument('item_id', type=int)
    s.set_defaults(func=cmd_delete)

    s = sub.add_parser('export', help='Export every item to a CSV file')
    s.add_argument('path')
    s.set_defaults(func=cmd_export)

    s = sub.add_parser('import', help='Import harvest lots from a CSV file')
    s.add_argument('path')
    s.set_defaults(func=cmd_import)

    s = sub.add_parser('purchase', help='Buy part of a harvest lot')
    s.add_argument('item_id', type=int)
    s.add_argument('quantity', type=parse_number)
    s.add_argument('--delivery', action='store_true', help='Add the per-unit shipping fee')
    s.set_defaults(func=cmd_purchase)

    sub.add_parser('summary', help='Inventory statistics').set_defaults(func=cmd_summary)
    return p


def main(argv: list[str], service: InventoryService | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=log_level(), format='%(asctime)s %(levelname)s %(name)s: %(message)s')
    if service is None:
        create_store({'DATABASE_URL': args.database_url} if args.database_url else None)
        init_schema()
        service = InventoryService()
    try:
        return args.func(service, args)
    except (AgriTrackError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':  # pragma: no cover
    sys.exit(main(sys.argv[1:]))
