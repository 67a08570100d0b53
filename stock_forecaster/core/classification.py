# stock_forecaster/core/classification.py
from typing import Dict, Iterable, List, Optional, Union

from ..exceptions import ValidationError
from ..models import StockStatus, ClassificationPolicy

# Stock within this multiple of the reorder point counts as low
LOW_STOCK_FACTOR = 1.5

def classify_absolute(stock: float, reorder_point: float) -> StockStatus:
    """Classify a stock level against fixed thresholds.
    
    Args:
        stock: Projected stock (may be negative)
        reorder_point: Reorder point of the item
        
    Returns:
        ORDER at or below the reorder point, LOW up to 1.5x, else ENOUGH
    """
    if stock <= 0 or stock <= reorder_point:
        return StockStatus.ORDER
    if stock <= reorder_point * LOW_STOCK_FACTOR:
        return StockStatus.LOW
    return StockStatus.ENOUGH

def classify_lookahead(
    stock: float,
    reorder_point: float,
    next_stock: Optional[float] = None
) -> StockStatus:
    """Classify a stock level by looking at the following period.
    
    Args:
        stock: Projected stock (may be negative)
        reorder_point: Reorder point of the item
        next_stock: Projected stock of the following period, if any
        
    Returns:
        ORDER at or below the reorder point, LOW when the next period
        reaches it, else ENOUGH
    """
    if stock <= 0 or stock <= reorder_point:
        return StockStatus.ORDER
    if next_stock is not None and (next_stock <= 0 or next_stock <= reorder_point):
        return StockStatus.LOW
    return StockStatus.ENOUGH

def classify_trajectory(
    trajectory: List[Dict],
    reorder_point: float,
    policy: Union[ClassificationPolicy, str] = ClassificationPolicy.ABSOLUTE
) -> List[Dict]:
    """Set a status on every entry of a stock trajectory using one policy.
    
    Under the look-ahead policy the last entry has no successor and keeps
    the absolute outcome for its own stock.
    
    Args:
        trajectory: Entries from project_stock, in period order
        reorder_point: Reorder point of the item
        policy: Classification policy for the whole trajectory
        
    Returns:
        The same entries, each with a `status`
    """
    policy = resolve_policy(policy)
    
    stocks = [_stock_of(entry) for entry in trajectory]
    last = len(trajectory) - 1
    
    for position, entry in enumerate(trajectory):
        stock = stocks[position]
        if policy is ClassificationPolicy.ABSOLUTE or position == last:
            entry['status'] = classify_absolute(stock, reorder_point)
        else:
            entry['status'] = classify_lookahead(stock, reorder_point, stocks[position + 1])
    
    return trajectory

def resolve_policy(policy: Union[ClassificationPolicy, str]) -> ClassificationPolicy:
    """Convert a policy name to a ClassificationPolicy."""
    if isinstance(policy, ClassificationPolicy):
        return policy
    try:
        return ClassificationPolicy(str(policy).lower())
    except ValueError:
        raise ValidationError(
            f"Unknown classification policy: {policy}",
            details={'valid': [p.value for p in ClassificationPolicy]}
        )

def worst_status(entries: Iterable[Dict], include_historical: bool = False) -> Optional[StockStatus]:
    """Get the most severe status in a trajectory, None if it is empty."""
    statuses = [
        entry['status'] for entry in entries
        if include_historical or not entry.get('is_historical')
    ]
    return max(statuses) if statuses else None

def has_order_status(entries: Iterable[Dict]) -> bool:
    """Check whether any forward period needs an order."""
    return worst_status(entries) is StockStatus.ORDER

def _stock_of(entry: Dict) -> float:
    return entry.get('running_stock', entry['projected_stock'])
