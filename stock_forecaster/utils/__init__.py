from .date_utils import convert_to_date, convert_to_datetime, get_period_start, get_relative_period
from .validation import validate_item, validate_demand, validate_order

__all__ = [
    'convert_to_date',
    'convert_to_datetime',
    'get_period_start',
    'get_relative_period',
    'validate_item',
    'validate_demand',
    'validate_order'
]
