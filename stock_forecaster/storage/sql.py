# stock_forecaster/storage/sql.py
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from stock_forecaster.db import Database
from stock_forecaster.exceptions import DatabaseError, NotFoundError, ItemError
from stock_forecaster.models import InventoryItem, DemandHistory, Order, OrderStatus, ITEM_FIELDS
from stock_forecaster.storage.interface import InventoryStorage
from stock_forecaster.utils.date_utils import convert_to_datetime
from stock_forecaster.logging_setup import get_logger

logger = get_logger(__name__)

class SqlStorage(InventoryStorage):
    """Relational storage on SQLAlchemy.
    
    Every call runs in its own session scope; returned objects are detached
    and safe to read from any thread.
    """
    
    def __init__(self, database: Database):
        self.database = database
    
    def _run(self, operation: str, func):
        try:
            with self.database.session_scope() as session:
                return func(session)
        except (NotFoundError, ItemError):
            raise
        except SQLAlchemyError as e:
            logger.error(f"Database error during {operation}: {str(e)}")
            raise DatabaseError(f"Database error during {operation}: {str(e)}")
    
    def get_inventory_items(self) -> List[InventoryItem]:
        return self._run(
            'get_inventory_items',
            lambda session: list(session.scalars(select(InventoryItem).order_by(InventoryItem.id)))
        )
    
    def get_inventory_item(self, item_id: int) -> Optional[InventoryItem]:
        return self._run('get_inventory_item', lambda session: session.get(InventoryItem, item_id))
    
    def create_inventory_item(self, data: Dict[str, Any]) -> InventoryItem:
        def create(session):
            values = {key: value for key, value in data.items() if key in ITEM_FIELDS and key != 'id'}
            item = InventoryItem(last_updated=datetime.now(), **values)
            session.add(item)
            try:
                session.flush()
            except IntegrityError:
                raise ItemError(f"SKU already exists: {data.get('sku')}", code='DUPLICATE_SKU')
            return item
        
        return self._run('create_inventory_item', create)
    
    def update_inventory_item(self, item_id: int, updates: Dict[str, Any]) -> InventoryItem:
        def update(session):
            item = session.get(InventoryItem, item_id)
            if item is None:
                raise NotFoundError(f"Inventory item with id {item_id} not found")
            
            for key, value in updates.items():
                if key in ITEM_FIELDS and key != 'id':
                    setattr(item, key, value)
            item.last_updated = datetime.now()
            try:
                session.flush()
            except IntegrityError:
                raise ItemError(f"SKU already exists: {updates.get('sku')}", code='DUPLICATE_SKU')
            return item
        
        return self._run('update_inventory_item', update)
    
    def get_demand_history(self, item_id: int, since: Optional[datetime] = None) -> List[DemandHistory]:
        def query(session):
            statement = select(DemandHistory).where(DemandHistory.item_id == item_id)
            if since is not None:
                statement = statement.where(DemandHistory.date >= convert_to_datetime(since))
            statement = statement.order_by(DemandHistory.date, DemandHistory.id)
            return list(session.scalars(statement))
        
        return self._run('get_demand_history', query)
    
    def add_demand_history(self, data: Dict[str, Any]) -> DemandHistory:
        def add(session):
            demand = DemandHistory(
                item_id=data['item_id'],
                date=convert_to_datetime(data['date']),
                quantity=data['quantity']
            )
            session.add(demand)
            session.flush()
            return demand
        
        return self._run('add_demand_history', add)
    
    def get_orders(self) -> List[Order]:
        return self._run(
            'get_orders',
            lambda session: list(session.scalars(select(Order).order_by(Order.id)))
        )
    
    def get_order(self, order_id: int) -> Optional[Order]:
        return self._run('get_order', lambda session: session.get(Order, order_id))
    
    def create_order(self, data: Dict[str, Any]) -> Order:
        def create(session):
            order = Order(
                item_id=data['item_id'],
                quantity=data['quantity'],
                status=data.get('status') or OrderStatus.PENDING.value,
                order_date=datetime.now(),
                expected_delivery_date=data.get('expected_delivery_date'),
                cost=data['cost'],
                notes=data.get('notes')
            )
            session.add(order)
            session.flush()
            return order
        
        return self._run('create_order', create)
    
    def update_order_status(self, order_id: int, status: str) -> Order:
        def update(session):
            order = session.get(Order, order_id)
            if order is None:
                raise NotFoundError(f"Order with id {order_id} not found")
            order.status = status
            session.flush()
            return order
        
        return self._run('update_order_status', update)
