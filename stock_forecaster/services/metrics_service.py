# stock_forecaster/services/metrics_service.py
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from stock_forecaster.core.classification import has_order_status
from stock_forecaster.models import OrderStatus
from stock_forecaster.storage.interface import InventoryStorage
from stock_forecaster.logging_setup import get_logger

logger = get_logger(__name__)

# Days of demand used for the annualised turnover rate
TURNOVER_DAYS = 30

class MetricsService:
    """Service for dashboard summary metrics."""
    
    def __init__(self, storage: InventoryStorage):
        self.storage = storage
    
    def get_dashboard_metrics(
        self,
        forecasts: Optional[List[Dict]] = None,
        now: Optional[datetime] = None
    ) -> Dict:
        """Summarise the inventory for the dashboard.
        
        Args:
            forecasts: Forecast records; when given, items with any forward
                ORDER period are counted
            now: Reference moment (defaults to the current time)
            
        Returns:
            Dictionary with total_items, low_stock_items, order_status_items,
            total_value, pending_orders, turnover_rate and stockout_frequency
        """
        now = now or datetime.now()
        items = self.storage.get_inventory_items()
        orders = self.storage.get_orders()
        
        total_items = len(items)
        low_stock_items = sum(1 for item in items if item.current_stock <= item.reorder_point)
        total_value = sum(item.current_stock * item.unit_cost for item in items)
        pending_orders = sum(1 for order in orders if order.status == OrderStatus.PENDING.value)
        
        since = now - timedelta(days=TURNOVER_DAYS)
        total_demand = sum(
            demand.quantity
            for item in items
            for demand in self.storage.get_demand_history(item.id, since=since)
            if demand.date <= now
        )
        
        average_stock = sum(item.current_stock for item in items) / total_items if total_items else 0.0
        if average_stock > 0:
            turnover_rate = total_demand / (average_stock * TURNOVER_DAYS) * 365
        else:
            turnover_rate = 0.0
        
        stockout_frequency = (low_stock_items / total_items) * 100 if total_items else 0.0
        
        order_status_items = None
        if forecasts is not None:
            order_status_items = sum(1 for record in forecasts if has_order_status(record['stock_status']))
        
        metrics = {
            'total_items': total_items,
            'low_stock_items': low_stock_items,
            'order_status_items': order_status_items,
            'total_value': total_value,
            'pending_orders': pending_orders,
            'turnover_rate': turnover_rate,
            'stockout_frequency': stockout_frequency
        }
        
        logger.info(f"Dashboard metrics: {metrics}")
        return metrics
