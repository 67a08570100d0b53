# stock_forecaster/core/forecast.py
import math
from typing import Dict, List, Optional

import numpy as np

from ..exceptions import ValidationError

# Uniform trend jitter around the mean, +/-5%
TREND_JITTER = 0.05

def generate_forecast(
    mean_demand: float,
    variability: float,
    horizon: int,
    rng: Optional[np.random.Generator] = None,
    trend_jitter: float = TREND_JITTER
) -> List[Dict]:
    """Project per-period demand over the horizon.
    
    Each point is floor(mean * trend + noise), floored at zero, where trend
    is 1 + U(-jitter, jitter) and noise is U(0, 1) * variability.
    
    Args:
        mean_demand: Demand estimate per period
        variability: Demand standard deviation per period
        horizon: Number of periods to project
        rng: Random generator (a fresh unseeded one if None)
        trend_jitter: Half-width of the uniform trend factor
        
    Returns:
        List of dictionaries with period_index (1-based) and projected_demand
    """
    if horizon <= 0:
        raise ValidationError(f"Forecast horizon must be positive, got {horizon}")
    if mean_demand < 0 or variability < 0:
        raise ValidationError(
            "Demand estimate and variability must not be negative",
            details={'mean_demand': mean_demand, 'variability': variability}
        )
    if trend_jitter < 0:
        raise ValidationError(f"Trend jitter must not be negative, got {trend_jitter}")
    
    rng = rng if rng is not None else np.random.default_rng()
    
    forecast = []
    for index in range(1, horizon + 1):
        trend_factor = 1.0 + rng.uniform(-trend_jitter, trend_jitter)
        noise = rng.uniform(0.0, 1.0) * variability
        projected = max(0, math.floor(mean_demand * trend_factor + noise))
        forecast.append({'period_index': index, 'projected_demand': projected})
    
    return forecast

def forecast_values(forecast: List[Dict]) -> List[float]:
    """Extract the projected demand values from forecast points."""
    return [point['projected_demand'] for point in forecast]
