from datetime import date
from typing import Any, Dict, Mapping, Union

from stock_forecaster.models import InventoryItem, DemandHistory, Order, OrderStatus

NON_NEGATIVE_ITEM_FIELDS = (
    'current_stock', 'reorder_point', 'safety_stock',
    'holding_cost', 'ordering_cost', 'lead_time_days'
)
POSITIVE_ITEM_FIELDS = ('economic_order_quantity', 'unit_cost')
REQUIRED_ITEM_FIELDS = ('name', 'sku', 'category', 'supplier')

def _get(record: Union[Mapping, Any], key: str):
    if isinstance(record, Mapping):
        return record.get(key)
    return getattr(record, key, None)

def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)

def validate_item(item: Union[InventoryItem, Mapping], partial: bool = False) -> Dict[str, str]:
    """Validate an inventory item.
    
    Args:
        item: Item (model or mapping of column values) to validate
        partial: Only check the fields present, for partial updates
        
    Returns:
        Dictionary with validation errors
    """
    errors = {}
    
    def present(key):
        if isinstance(item, Mapping):
            return key in item or not partial
        return not partial
    
    for key in REQUIRED_ITEM_FIELDS:
        if present(key) and not _get(item, key):
            errors[key] = f'{key} is required'
    
    for key in NON_NEGATIVE_ITEM_FIELDS:
        if not present(key):
            continue
        value = _get(item, key)
        if not _is_number(value):
            errors[key] = f'{key} must be a number'
        elif value < 0:
            errors[key] = f'{key} must not be negative'
    
    for key in POSITIVE_ITEM_FIELDS:
        if not present(key):
            continue
        value = _get(item, key)
        if not _is_number(value):
            errors[key] = f'{key} must be a number'
        elif value <= 0:
            errors[key] = f'{key} must be positive'
    
    return errors

def validate_demand(demand: Union[DemandHistory, Mapping]) -> Dict[str, str]:
    """Validate a demand observation.
    
    Args:
        demand: Observation to validate
        
    Returns:
        Dictionary with validation errors
    """
    errors = {}
    
    if _get(demand, 'item_id') is None:
        errors['item_id'] = 'Item ID is required'
    
    demand_date = _get(demand, 'date')
    if demand_date is None:
        errors['date'] = 'Date is required'
    elif not isinstance(demand_date, date):
        errors['date'] = 'Date must be a date or datetime'
    
    quantity = _get(demand, 'quantity')
    if not _is_number(quantity):
        errors['quantity'] = 'Quantity must be a number'
    elif quantity < 0:
        errors['quantity'] = 'Quantity must not be negative'
    
    return errors

def validate_order(order: Union[Order, Mapping]) -> Dict[str, str]:
    """Validate an order.
    
    Args:
        order: Order to validate
        
    Returns:
        Dictionary with validation errors
    """
    errors = {}
    
    if _get(order, 'item_id') is None:
        errors['item_id'] = 'Item ID is required'
    
    quantity = _get(order, 'quantity')
    if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity <= 0:
        errors['quantity'] = 'Quantity must be a positive integer'
    
    cost = _get(order, 'cost')
    if cost is not None and (not _is_number(cost) or cost < 0):
        errors['cost'] = 'Cost must not be negative'
    
    status = _get(order, 'status')
    if status is not None and status not in {s.value for s in OrderStatus}:
        errors['status'] = f'Unknown order status: {status}'
    
    return errors
