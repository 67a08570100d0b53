# stock_forecaster/services/forecast_service.py
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime, time
from typing import Dict, List, Optional, Union

import numpy as np

from stock_forecaster.config import config
from stock_forecaster.core.engine import ForecastMode, compute_forecast
from stock_forecaster.core.classification import worst_status
from stock_forecaster.exceptions import StockForecasterError, ForecastError, NotFoundError
from stock_forecaster.logging_setup import get_logger, logger as log_manager
from stock_forecaster.models import InventoryItem
from stock_forecaster.storage.interface import InventoryStorage
from stock_forecaster.utils.date_utils import get_relative_period

logger = get_logger(__name__)

def status_counts(records: List[Dict]) -> Dict[str, int]:
    """Count forecast records by the worst status of their forward periods."""
    counts = Counter()
    for record in records:
        worst = worst_status(record['stock_status'])
        if worst is not None:
            counts[worst.value] += 1
    return dict(counts)

class ForecastService:
    """Service computing forecast records for inventory items."""
    
    def __init__(
        self,
        storage: InventoryStorage,
        mode: Optional[ForecastMode] = None,
        seed: Optional[int] = None,
        max_workers: Optional[int] = None
    ):
        """Initialize the forecast service.
        
        Args:
            storage: Persistence adapter supplying items and demand history
            mode: Operating mode (from configuration if None)
            seed: Random seed for reproducible forecasts (configuration if None)
            max_workers: Worker threads for batch forecasts (configuration if None)
        """
        self.storage = storage
        self.mode = mode or ForecastMode.from_config(config)
        self.seed = seed if seed is not None else config.forecast_config['random_seed']
        self.max_workers = max_workers or config.batch_config['max_workers']
    
    def history_since(self, now: Union[date, datetime]) -> datetime:
        """Get the earliest moment whose demand affects a forecast made at `now`."""
        start, _ = get_relative_period(now, self.mode.period_days, -self.mode.history_periods)
        return datetime.combine(start, time.min)
    
    def rng_for(self, item_id: int) -> np.random.Generator:
        """Get the random generator of one item.
        
        With a seed every item gets its own reproducible stream, so an item
        forecast alone matches the same item in a batch.
        """
        if self.seed is None:
            return np.random.default_rng()
        return np.random.default_rng([self.seed, item_id])
    
    def get_item_forecast(self, item_id: int, now: Optional[datetime] = None) -> Dict:
        """Get the forecast record of one item.
        
        Args:
            item_id: Inventory item ID
            now: Reference moment (defaults to the current time)
            
        Returns:
            Forecast record dictionary
        """
        item = self.storage.get_inventory_item(item_id)
        if item is None:
            raise NotFoundError(f"Inventory item with id {item_id} not found")
        
        return self._forecast_item(item, now or datetime.now())
    
    def get_inventory_with_forecast(self, now: Optional[datetime] = None) -> List[Dict]:
        """Get forecast records for every item, in item order.
        
        Items are independent, so they are computed on a thread pool.
        
        Args:
            now: Reference moment shared by all items (defaults to the current time)
            
        Returns:
            List of forecast record dictionaries
        """
        now = now or datetime.now()
        items = self.storage.get_inventory_items()
        
        run = log_manager.start_forecast_run(self.mode, len(items), self.max_workers)

        try:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                futures = [executor.submit(self._forecast_item, item, now) for item in items]
                results = [future.result() for future in futures]
        except Exception as e:
            log_manager.end_forecast_run(run, error=e)
            raise

        log_manager.end_forecast_run(run, status_counts=status_counts(results))

        return results
    
    def _forecast_item(self, item: InventoryItem, now: datetime) -> Dict:
        try:
            history = self.storage.get_demand_history(item.id, since=self.history_since(now))
            record = compute_forecast(item, history, self.mode, rng=self.rng_for(item.id), now=now)
        except StockForecasterError as e:
            logger.error(f"Error forecasting item {item.sku}: {str(e)}")
            raise
        except Exception as e:
            logger.error(f"Error forecasting item {item.sku}: {str(e)}")
            raise ForecastError(f"Error forecasting item {item.sku}: {str(e)}", details={'item_id': item.id}) from e
        
        logger.debug(
            f"Forecast for {item.sku}: demand={record['demand_estimate']:.2f}, "
            f"variability={record['demand_variability']:.2f}"
        )
        return record
