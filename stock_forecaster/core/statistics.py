# stock_forecaster/core/statistics.py
from typing import Dict, List, Optional, Sequence

import numpy as np

def _totals(periods: Sequence) -> List[float]:
    return [p['total_quantity'] if isinstance(p, dict) else p for p in periods]

def mean_demand(periods: Sequence) -> float:
    """Calculate mean demand per period.
    
    Args:
        periods: Period buckets or plain period totals
        
    Returns:
        Mean of the totals, 0.0 when there are none
    """
    totals = _totals(periods)
    if not totals:
        return 0.0
    
    return float(np.mean(totals))

def demand_variability(periods: Sequence) -> float:
    """Calculate demand variability as the population standard deviation.
    
    Args:
        periods: Period buckets or plain period totals
        
    Returns:
        Standard deviation (divisor N), 0.0 with fewer than 2 periods
    """
    totals = _totals(periods)
    if len(totals) < 2:
        return 0.0
    
    return float(np.std(totals, ddof=0))

def summarize_demand(
    periods: Sequence,
    demand_window: Optional[int] = None,
    variability_window: Optional[int] = None
) -> Dict[str, float]:
    """Calculate the demand estimate and variability over recent windows.
    
    Args:
        periods: Period buckets ordered oldest to newest
        demand_window: Most recent periods used for the mean (all if None)
        variability_window: Most recent periods used for the deviation (all if None)
        
    Returns:
        Dictionary with demand_estimate and demand_variability
    """
    totals = _totals(periods)
    
    recent_for_mean = totals[-demand_window:] if demand_window else totals
    recent_for_spread = totals[-variability_window:] if variability_window else totals
    
    return {
        'demand_estimate': mean_demand(recent_for_mean),
        'demand_variability': demand_variability(recent_for_spread)
    }
