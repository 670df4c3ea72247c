import os

from agritrack.constants.inventory import STATUS_FRESH

PRIMARY_DATE_FORMAT = '%Y-%m-%d'
SECONDARY_DATE_FORMAT = '%m/%d/%Y'

# CSV import defaults
MIN_CSV_FIELDS = 6
DEFAULT_UNIT = 'kg'
DEFAULT_IMPORT_STATUS = STATUS_FRESH
CSV_HEADER = 'ID,Name,Quantity,Unit,Date_Added,Notes,Status'

SHIPPING_FEE_PER_UNIT = 5.00


def log_level(default: str = 'INFO') -> str:
    level = os.getenv('AGRITRACK_LOG_LEVEL', default).upper()
    if level not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
        raise ValueError('AGRITRACK_LOG_LEVEL must be a logging level name')
    return level
