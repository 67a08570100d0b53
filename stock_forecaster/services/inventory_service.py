# stock_forecaster/services/inventory_service.py
from datetime import datetime
from typing import Any, Dict, Optional

from stock_forecaster.exceptions import ValidationError, NotFoundError, OrderError
from stock_forecaster.models import InventoryItem, DemandHistory, Order, OrderStatus
from stock_forecaster.storage.interface import InventoryStorage
from stock_forecaster.utils.validation import validate_item, validate_demand, validate_order
from stock_forecaster.logging_setup import get_logger

logger = get_logger(__name__)

# Orders in these states can no longer change
FINAL_ORDER_STATUSES = {OrderStatus.DELIVERED.value, OrderStatus.CANCELLED.value}

class InventoryService:
    """Service for maintaining items, demand history and orders."""
    
    def __init__(self, storage: InventoryStorage):
        """Initialize the inventory service.
        
        Args:
            storage: Persistence adapter
        """
        self.storage = storage
    
    def get_item(self, item_id: int) -> InventoryItem:
        """Get an item, raising NotFoundError if it does not exist."""
        item = self.storage.get_inventory_item(item_id)
        if item is None:
            raise NotFoundError(f"Inventory item with id {item_id} not found")
        return item
    
    def create_item(self, data: Dict[str, Any]) -> InventoryItem:
        """Validate and create an inventory item.
        
        Args:
            data: Column values of the new item
            
        Returns:
            Created item
        """
        errors = validate_item(data)
        if errors:
            raise ValidationError("Invalid inventory item", details=errors)
        
        item = self.storage.create_inventory_item(data)
        logger.info(f"Created inventory item {item.sku} (id={item.id})")
        return item
    
    def update_item(self, item_id: int, updates: Dict[str, Any]) -> InventoryItem:
        """Validate and apply a partial update to an item.
        
        Args:
            item_id: Inventory item ID
            updates: Column values to change
            
        Returns:
            Updated item
        """
        errors = validate_item(updates, partial=True)
        if errors:
            raise ValidationError("Invalid inventory item update", details=errors)
        
        item = self.storage.update_inventory_item(item_id, updates)
        logger.info(f"Updated inventory item {item.sku}: {sorted(updates)}")
        return item
    
    def record_demand(
        self,
        item_id: int,
        quantity: int,
        demand_date: Optional[datetime] = None
    ) -> DemandHistory:
        """Record a demand observation for an existing item.
        
        Args:
            item_id: Inventory item ID
            quantity: Units demanded
            demand_date: Date or datetime of the demand (defaults to now)
            
        Returns:
            Recorded observation
        """
        data = {
            'item_id': item_id,
            'date': demand_date or datetime.now(),
            'quantity': quantity
        }
        errors = validate_demand(data)
        if errors:
            raise ValidationError("Invalid demand observation", details=errors)
        
        self.get_item(item_id)
        return self.storage.add_demand_history(data)
    
    def create_order(
        self,
        item_id: int,
        quantity: Optional[int] = None,
        expected_delivery_date: Optional[datetime] = None,
        cost: Optional[float] = None,
        notes: Optional[str] = None
    ) -> Order:
        """Place a pending order for an item.
        
        Args:
            item_id: Inventory item ID
            quantity: Units to order (the item's EOQ if None)
            expected_delivery_date: Optional expected delivery date
            cost: Order cost (quantity * unit cost if None)
            notes: Optional notes
            
        Returns:
            Created order
        """
        item = self.get_item(item_id)
        
        quantity = item.economic_order_quantity if quantity is None else quantity
        data = {
            'item_id': item_id,
            'quantity': quantity,
            'expected_delivery_date': expected_delivery_date,
            'cost': cost,
            'notes': notes,
            'status': OrderStatus.PENDING.value
        }
        errors = validate_order(data)
        if errors:
            raise ValidationError("Invalid order", details=errors)
        
        if cost is None:
            data['cost'] = round(quantity * item.unit_cost, 2)
        
        order = self.storage.create_order(data)
        logger.info(f"Created order {order.id} for {quantity} x {item.sku} (cost={order.cost})")
        return order
    
    def update_order_status(self, order_id: int, status: str) -> Order:
        """Move an order to a new status.
        
        Args:
            order_id: Order ID
            status: New status value
            
        Returns:
            Updated order
        """
        if status not in {s.value for s in OrderStatus}:
            raise ValidationError(
                f"Unknown order status: {status}",
                details={'valid': [s.value for s in OrderStatus]}
            )
        
        order = self.storage.get_order(order_id)
        if order is None:
            raise NotFoundError(f"Order with id {order_id} not found")
        
        if order.status in FINAL_ORDER_STATUSES and order.status != status:
            raise OrderError(
                f"Order {order_id} is already {order.status}",
                code='ORDER_CLOSED'
            )
        
        previous = order.status
        updated = self.storage.update_order_status(order_id, status)
        logger.info(f"Order {order_id} status: {previous} -> {status}")
        return updated
