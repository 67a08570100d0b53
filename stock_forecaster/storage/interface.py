# stock_forecaster/storage/interface.py
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, List, Optional

from stock_forecaster.models import InventoryItem, DemandHistory, Order

class InventoryStorage(ABC):
    """Persistence port for inventory items, demand history and orders.
    
    Adapters must fail closed: errors are raised, never replaced by
    empty or made-up results.
    """
    
    # Inventory items
    
    @abstractmethod
    def get_inventory_items(self) -> List[InventoryItem]:
        """Get all inventory items ordered by id."""
        pass
    
    @abstractmethod
    def get_inventory_item(self, item_id: int) -> Optional[InventoryItem]:
        """Get an inventory item by id, None if absent."""
        pass
    
    @abstractmethod
    def create_inventory_item(self, data: Dict[str, Any]) -> InventoryItem:
        """Create an inventory item."""
        pass
    
    @abstractmethod
    def update_inventory_item(self, item_id: int, updates: Dict[str, Any]) -> InventoryItem:
        """Apply a partial update to an item; raises NotFoundError if absent."""
        pass
    
    # Demand history
    
    @abstractmethod
    def get_demand_history(self, item_id: int, since: Optional[datetime] = None) -> List[DemandHistory]:
        """Get demand observations of an item ordered by date, optionally from `since` on."""
        pass
    
    @abstractmethod
    def add_demand_history(self, data: Dict[str, Any]) -> DemandHistory:
        """Record a demand observation."""
        pass
    
    # Orders
    
    @abstractmethod
    def get_orders(self) -> List[Order]:
        """Get all orders ordered by id."""
        pass
    
    @abstractmethod
    def get_order(self, order_id: int) -> Optional[Order]:
        """Get an order by id, None if absent."""
        pass
    
    @abstractmethod
    def create_order(self, data: Dict[str, Any]) -> Order:
        """Create an order."""
        pass
    
    @abstractmethod
    def update_order_status(self, order_id: int, status: str) -> Order:
        """Change the status of an order; raises NotFoundError if absent."""
        pass
