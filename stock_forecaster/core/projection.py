# stock_forecaster/core/projection.py
from datetime import date, datetime
from typing import Dict, List, Sequence, Union

from ..exceptions import ValidationError
from ..utils.date_utils import get_relative_period

def project_stock(
    current_stock: float,
    forecast: Sequence[float],
    mean_demand: float = 0.0,
    historical_periods: int = 0
) -> List[Dict]:
    """Build one contiguous stock trajectory around the current stock.
    
    Historical entries come first (oldest to newest) and are reconstructed
    as current_stock + mean_demand * periods_ago. There is no stock ledger,
    so this is an approximation of what was on hand.
    
    Forward entries subtract each period's forecast in turn. Reported stock
    is clamped at zero. Without historical periods the clamped value carries
    into the next period; with historical periods the unclamped running
    value does.
    
    Args:
        current_stock: Stock on hand now
        forecast: Projected demand per forward period
        mean_demand: Demand estimate per period, for the historical leg
        historical_periods: Number of past periods to reconstruct
        
    Returns:
        List of dictionaries with period_index, running_stock,
        projected_stock and is_historical
    """
    if current_stock < 0:
        raise ValidationError(f"Current stock must not be negative, got {current_stock}")
    if historical_periods < 0:
        raise ValidationError(
            f"Historical periods must not be negative, got {historical_periods}"
        )
    
    trajectory = []
    
    for periods_ago in range(historical_periods, 0, -1):
        reconstructed = current_stock + mean_demand * periods_ago
        trajectory.append({
            'period_index': -periods_ago,
            'running_stock': reconstructed,
            'projected_stock': max(0, reconstructed),
            'is_historical': True
        })
    
    carry_unclamped = historical_periods > 0
    stock = current_stock
    
    for index, demand in enumerate(forecast, start=1):
        running = stock - demand
        clamped = max(0, running)
        trajectory.append({
            'period_index': index,
            'running_stock': running,
            'projected_stock': clamped,
            'is_historical': False
        })
        stock = running if carry_unclamped else clamped
    
    return trajectory

def attach_period_dates(
    trajectory: List[Dict],
    now: Union[date, datetime],
    period_days: int
) -> List[Dict]:
    """Add period_start and period_end to every trajectory entry.
    
    Entry -k maps to the k-th complete period before the one containing
    `now`, entry i to the i-th period after it.
    """
    for entry in trajectory:
        start, end = get_relative_period(now, period_days, entry['period_index'])
        entry['period_start'] = start
        entry['period_end'] = end
    
    return trajectory
