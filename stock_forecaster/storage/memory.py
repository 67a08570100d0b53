# stock_forecaster/storage/memory.py
import threading
from datetime import datetime
from typing import Any, Dict, List, Optional

from stock_forecaster.exceptions import NotFoundError, ItemError
from stock_forecaster.models import InventoryItem, DemandHistory, Order, OrderStatus, ITEM_FIELDS
from stock_forecaster.storage.interface import InventoryStorage
from stock_forecaster.utils.date_utils import convert_to_datetime

class MemoryStorage(InventoryStorage):
    """In-process storage backed by dictionaries."""
    
    def __init__(self):
        self._lock = threading.RLock()
        self._items: Dict[int, InventoryItem] = {}
        self._demand: Dict[int, List[DemandHistory]] = {}
        self._orders: Dict[int, Order] = {}
        self._next_item_id = 1
        self._next_demand_id = 1
        self._next_order_id = 1
    
    def get_inventory_items(self) -> List[InventoryItem]:
        with self._lock:
            return [self._items[key] for key in sorted(self._items)]
    
    def get_inventory_item(self, item_id: int) -> Optional[InventoryItem]:
        with self._lock:
            return self._items.get(item_id)
    
    def create_inventory_item(self, data: Dict[str, Any]) -> InventoryItem:
        with self._lock:
            if any(item.sku == data.get('sku') for item in self._items.values()):
                raise ItemError(f"SKU already exists: {data.get('sku')}", code='DUPLICATE_SKU')
            
            values = {key: value for key, value in data.items() if key in ITEM_FIELDS and key != 'id'}
            item = InventoryItem(id=self._next_item_id, last_updated=datetime.now(), **values)
            self._items[item.id] = item
            self._next_item_id += 1
            return item
    
    def update_inventory_item(self, item_id: int, updates: Dict[str, Any]) -> InventoryItem:
        with self._lock:
            existing = self._items.get(item_id)
            if existing is None:
                raise NotFoundError(f"Inventory item with id {item_id} not found")
            
            sku = updates.get('sku')
            if sku is not None and any(i.sku == sku and i.id != item_id for i in self._items.values()):
                raise ItemError(f"SKU already exists: {sku}", code='DUPLICATE_SKU')
            
            # Readers holding the previous object keep their snapshot
            values = {name: getattr(existing, name) for name in ITEM_FIELDS}
            values.update({k: v for k, v in updates.items() if k in ITEM_FIELDS and k != 'id'})
            values['last_updated'] = datetime.now()
            updated = InventoryItem(**values)
            self._items[item_id] = updated
            return updated
    
    def get_demand_history(self, item_id: int, since: Optional[datetime] = None) -> List[DemandHistory]:
        with self._lock:
            demands = list(self._demand.get(item_id, []))
        
        if since is not None:
            since = convert_to_datetime(since)
            demands = [d for d in demands if d.date >= since]
        return sorted(demands, key=lambda d: (d.date, d.id))
    
    def add_demand_history(self, data: Dict[str, Any]) -> DemandHistory:
        with self._lock:
            demand = DemandHistory(
                id=self._next_demand_id,
                item_id=data['item_id'],
                date=convert_to_datetime(data['date']),
                quantity=data['quantity']
            )
            self._demand.setdefault(demand.item_id, []).append(demand)
            self._next_demand_id += 1
            return demand
    
    def get_orders(self) -> List[Order]:
        with self._lock:
            return [self._orders[key] for key in sorted(self._orders)]
    
    def get_order(self, order_id: int) -> Optional[Order]:
        with self._lock:
            return self._orders.get(order_id)
    
    def create_order(self, data: Dict[str, Any]) -> Order:
        with self._lock:
            order = Order(
                id=self._next_order_id,
                item_id=data['item_id'],
                quantity=data['quantity'],
                status=data.get('status') or OrderStatus.PENDING.value,
                order_date=datetime.now(),
                expected_delivery_date=data.get('expected_delivery_date'),
                cost=data['cost'],
                notes=data.get('notes')
            )
            self._orders[order.id] = order
            self._next_order_id += 1
            return order
    
    def update_order_status(self, order_id: int, status: str) -> Order:
        with self._lock:
            existing = self._orders.get(order_id)
            if existing is None:
                raise NotFoundError(f"Order with id {order_id} not found")
            
            existing.status = status
            return existing
