# stock_forecaster/core/engine.py
from datetime import date, datetime
from typing import Dict, Iterable, Optional, Union

import numpy as np

from ..exceptions import ValidationError, ConfigError
from ..models import PeriodUnit, ClassificationPolicy, item_to_dict
from ..utils.validation import validate_item
from .aggregation import aggregate_demand
from .statistics import summarize_demand
from .forecast import generate_forecast, forecast_values, TREND_JITTER
from .projection import project_stock, attach_period_dates
from .classification import classify_trajectory, resolve_policy
from .insights import generate_insights

# Defaults per period unit: forward horizon, mean window, variability window
MODE_DEFAULTS = {
    PeriodUnit.DAY: {'horizon': 7, 'demand_window': 7, 'variability_window': 14},
    PeriodUnit.WEEK: {'horizon': 8, 'demand_window': 4, 'variability_window': 8},
}

class ForecastMode:
    """Operating mode of the forecasting engine."""
    
    def __init__(
        self,
        period_unit: Union[PeriodUnit, str] = PeriodUnit.WEEK,
        horizon: Optional[int] = None,
        historical_periods: int = 0,
        classification_policy: Union[ClassificationPolicy, str] = ClassificationPolicy.ABSOLUTE,
        demand_window: Optional[int] = None,
        variability_window: Optional[int] = None,
        trend_jitter: float = TREND_JITTER
    ):
        try:
            self.period_unit = PeriodUnit(period_unit) if not isinstance(period_unit, PeriodUnit) else period_unit
        except ValueError:
            raise ValidationError(
                f"Unknown period unit: {period_unit}",
                details={'valid': [u.value for u in PeriodUnit]}
            )
        
        defaults = MODE_DEFAULTS[self.period_unit]
        self.horizon = defaults['horizon'] if horizon is None else horizon
        self.historical_periods = historical_periods
        self.classification_policy = resolve_policy(classification_policy)
        self.demand_window = defaults['demand_window'] if demand_window is None else demand_window
        self.variability_window = defaults['variability_window'] if variability_window is None else variability_window
        self.trend_jitter = trend_jitter
        
        errors = {}
        if not isinstance(self.horizon, int) or self.horizon <= 0:
            errors['horizon'] = 'Horizon must be a positive integer'
        if not isinstance(self.historical_periods, int) or self.historical_periods < 0:
            errors['historical_periods'] = 'Historical periods must be a non-negative integer'
        if not isinstance(self.demand_window, int) or self.demand_window <= 0:
            errors['demand_window'] = 'Demand window must be a positive integer'
        if not isinstance(self.variability_window, int) or self.variability_window <= 0:
            errors['variability_window'] = 'Variability window must be a positive integer'
        if self.trend_jitter is None or self.trend_jitter < 0:
            errors['trend_jitter'] = 'Trend jitter must not be negative'
        
        if errors:
            raise ValidationError("Invalid forecast mode", details=errors)
    
    @classmethod
    def daily(cls, **kwargs) -> 'ForecastMode':
        return cls(period_unit=PeriodUnit.DAY, **kwargs)
    
    @classmethod
    def weekly(cls, **kwargs) -> 'ForecastMode':
        return cls(period_unit=PeriodUnit.WEEK, **kwargs)
    
    @classmethod
    def from_config(cls, config) -> 'ForecastMode':
        """Build the mode from the [FORECAST] section of the configuration."""
        settings = config.forecast_config
        try:
            return cls(
                period_unit=settings['period_unit'],
                horizon=settings['horizon'],
                historical_periods=settings['historical_periods'],
                classification_policy=settings['classification_policy'],
                demand_window=settings['demand_window'],
                variability_window=settings['variability_window'],
                trend_jitter=settings['trend_jitter']
            )
        except ValidationError as e:
            raise ConfigError(f"Invalid [FORECAST] configuration: {e.message}", details=e.details)
    
    @property
    def period_days(self) -> int:
        return self.period_unit.days
    
    @property
    def history_periods(self) -> int:
        """Number of trailing periods needed for the demand statistics."""
        return max(self.demand_window, self.variability_window)
    
    def __repr__(self):
        return (
            f"ForecastMode({self.period_unit.value}, horizon={self.horizon}, "
            f"historical={self.historical_periods}, policy={self.classification_policy.value})"
        )

def compute_forecast(
    item,
    history: Iterable,
    mode: Optional[ForecastMode] = None,
    rng: Optional[np.random.Generator] = None,
    now: Optional[Union[date, datetime]] = None
) -> Dict:
    """Compute the forecast record of one inventory item.
    
    Args:
        item: Inventory item (model or mapping of its columns)
        history: Demand observations of the item, in any order
        mode: Operating mode (weekly defaults if None)
        rng: Random generator for the forecast noise
        now: Reference moment (defaults to the current time)
        
    Returns:
        Dictionary with the item columns plus forecast, demand_estimate,
        demand_variability, stock_status and ai_insights
    """
    mode = mode or ForecastMode()
    now = now or datetime.now()
    
    errors = validate_item(item)
    if errors:
        raise ValidationError("Invalid inventory item", details=errors)
    
    record = dict(item) if isinstance(item, dict) else item_to_dict(item)
    
    buckets = aggregate_demand(list(history), mode.period_days, mode.history_periods, now)
    stats = summarize_demand(buckets, mode.demand_window, mode.variability_window)
    
    forecast = generate_forecast(
        stats['demand_estimate'],
        stats['demand_variability'],
        mode.horizon,
        rng=rng,
        trend_jitter=mode.trend_jitter
    )
    
    trajectory = project_stock(
        record['current_stock'],
        forecast_values(forecast),
        mean_demand=stats['demand_estimate'],
        historical_periods=mode.historical_periods
    )
    classify_trajectory(trajectory, record['reorder_point'], mode.classification_policy)
    attach_period_dates(trajectory, now, mode.period_days)
    
    stock_status = [
        {
            'period_index': entry['period_index'],
            'period_start': entry['period_start'],
            'period_end': entry['period_end'],
            'status': entry['status'],
            'projected_stock': entry['projected_stock'],
            'is_historical': entry['is_historical'],
        }
        for entry in trajectory
    ]
    
    record.update({
        'forecast': forecast,
        'demand_estimate': stats['demand_estimate'],
        'demand_variability': stats['demand_variability'],
        'stock_status': stock_status,
        'ai_insights': generate_insights(record, stock_status, stats['demand_estimate'], mode.period_unit),
    })
    
    return record
