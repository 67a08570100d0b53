from .forecast_service import ForecastService
from .metrics_service import MetricsService
from .inventory_service import InventoryService

__all__ = [
    'ForecastService',
    'MetricsService',
    'InventoryService'
]
