from .aggregation import aggregate_demand
from .statistics import mean_demand, demand_variability, summarize_demand
from .forecast import generate_forecast, forecast_values
from .projection import project_stock, attach_period_dates
from .classification import (
    classify_absolute, classify_lookahead, classify_trajectory,
    worst_status, has_order_status
)
from .insights import generate_insights
from .engine import ForecastMode, compute_forecast

__all__ = [
    'aggregate_demand',
    'mean_demand',
    'demand_variability',
    'summarize_demand',
    'generate_forecast',
    'forecast_values',
    'project_stock',
    'attach_period_dates',
    'classify_absolute',
    'classify_lookahead',
    'classify_trajectory',
    'worst_status',
    'has_order_status',
    'generate_insights',
    'ForecastMode',
    'compute_forecast'
]
