"""Item type tags and the status / condition values the application assigns.

Statuses and conditions are open-ended free text; only the values this code
sets or reports on are named here.
"""

ITEM_TYPE_HARVEST = 'HARVEST'
ITEM_TYPE_EQUIPMENT = 'EQUIPMENT'
ALL_ITEM_TYPES = (ITEM_TYPE_HARVEST, ITEM_TYPE_EQUIPMENT)

STATUS_AVAILABLE = 'Available'
STATUS_INTERESTED = 'Interested'
STATUS_SOLD_OUT = 'Sold Out'
STATUS_FRESH = 'Fresh'

CONDITION_GOOD = 'Good'

DEFAULT_STATUS = STATUS_AVAILABLE
DEFAULT_CONDITION = CONDITION_GOOD

__all__ = [
    'ITEM_TYPE_HARVEST', 'ITEM_TYPE_EQUIPMENT', 'ALL_ITEM_TYPES',
    'STATUS_AVAILABLE', 'STATUS_INTERESTED', 'STATUS_SOLD_OUT', 'STATUS_FRESH',
    'CONDITION_GOOD', 'DEFAULT_STATUS', 'DEFAULT_CONDITION',
]
