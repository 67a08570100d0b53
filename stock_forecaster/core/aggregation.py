# stock_forecaster/core/aggregation.py
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Union

from ..exceptions import ValidationError
from ..utils.date_utils import convert_to_date, get_period_start, get_trailing_periods

def aggregate_demand(
    observations: Iterable,
    period_days: int,
    periods: int,
    now: Optional[Union[date, datetime]] = None
) -> List[Dict]:
    """Reduce demand observations to per-period totals.
    
    The buckets are the `periods` complete periods before the one containing
    `now`, oldest first. Periods are aligned to the epoch, so a fixed `now`
    always yields the same buckets. Observations in the current period or
    later are left out; periods without observations total 0.
    
    Args:
        observations: Objects or mappings with `date` and `quantity`
        period_days: Period length in days (1=daily, 7=weekly)
        periods: Number of trailing periods
        now: Reference moment (defaults to the current time)
        
    Returns:
        List of dictionaries with period_start, period_end and total_quantity
    """
    if period_days <= 0:
        raise ValidationError(f"Period length must be positive, got {period_days}")
    if periods < 0:
        raise ValidationError(f"Number of periods must not be negative, got {periods}")
    
    now = now or datetime.now()
    bounds = get_trailing_periods(now, period_days, periods)
    buckets = [
        {'period_start': start, 'period_end': end, 'total_quantity': 0}
        for start, end in bounds
    ]
    if not buckets:
        return buckets
    
    first_start = buckets[0]['period_start']
    
    for observation in observations:
        quantity = _field(observation, 'quantity')
        if quantity is None or quantity < 0:
            raise ValidationError(
                f"Demand quantity must not be negative, got {quantity}",
                details={'observation': repr(observation)}
            )
        
        observed_on = convert_to_date(_field(observation, 'date'))
        index = (get_period_start(observed_on, period_days) - first_start).days // period_days
        if 0 <= index < len(buckets):
            buckets[index]['total_quantity'] += quantity
    
    return buckets

def _field(observation, key):
    if isinstance(observation, dict):
        return observation.get(key)
    return getattr(observation, key, None)
