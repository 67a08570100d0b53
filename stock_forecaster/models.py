# stock_forecaster/models.py
from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey, Text, Index
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func
import enum

Base = declarative_base()

class StockStatus(enum.Enum):
    """Stock status of one projected period.
    
    Values are ordered ENOUGH < LOW < ORDER, so the worst status of a
    trajectory is its maximum.
    
    Values:
        ENOUGH ('enough'): Stock comfortably above the reorder point
        LOW ('low'): Stock approaching the reorder point
        ORDER ('order'): Stock at or below the reorder point, order now
    """
    ENOUGH = 'enough'
    LOW = 'low'
    ORDER = 'order'

    def __str__(self):
        """Return the string value of the enum."""
        return self.value

    @property
    def rank(self) -> int:
        return _STATUS_RANK[self]

    def __lt__(self, other):
        if not isinstance(other, StockStatus):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, StockStatus):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, StockStatus):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, StockStatus):
            return NotImplemented
        return self.rank >= other.rank

    @classmethod
    def from_string(cls, value: str) -> 'StockStatus':
        """Create a StockStatus from a string value.
        
        Raises:
            ValueError if the string value is not valid
        """
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"Invalid stock status: {value}. Valid values are: enough, low, order")

_STATUS_RANK = {StockStatus.ENOUGH: 0, StockStatus.LOW: 1, StockStatus.ORDER: 2}

class PeriodUnit(enum.Enum):
    DAY = 'day'
    WEEK = 'week'

    @property
    def days(self) -> int:
        return 1 if self is PeriodUnit.DAY else 7

class ClassificationPolicy(enum.Enum):
    ABSOLUTE = 'absolute'    # thresholds on each period's own stock
    LOOKAHEAD = 'lookahead'  # LOW when the following period reaches the reorder point

class OrderStatus(enum.Enum):
    PENDING = 'pending'
    SHIPPED = 'shipped'
    DELIVERED = 'delivered'
    CANCELLED = 'cancelled'

class InventoryItem(Base):
    __tablename__ = 'inventory_items'
    
    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False)
    sku = Column(String(50), nullable=False, unique=True)
    
    # Stock position
    current_stock = Column(Integer, nullable=False, default=0)
    reorder_point = Column(Integer, nullable=False, default=0)
    safety_stock = Column(Integer, nullable=False, default=0)
    economic_order_quantity = Column(Integer, nullable=False)
    
    # Costs
    unit_cost = Column(Float, nullable=False)
    holding_cost = Column(Float, nullable=False, default=0.0)
    ordering_cost = Column(Float, nullable=False, default=0.0)
    lead_time_days = Column(Integer, nullable=False, default=0)
    
    category = Column(String(50), nullable=False)
    supplier = Column(String(100), nullable=False)
    last_updated = Column(DateTime, nullable=False, default=func.now())
    
    demand_history = relationship("DemandHistory", back_populates="item")
    orders = relationship("Order", back_populates="item")

    def __repr__(self):
        return f"<InventoryItem {self.sku} stock={self.current_stock}>"

class DemandHistory(Base):
    __tablename__ = 'demand_history'
    
    id = Column(Integer, primary_key=True)
    item_id = Column(Integer, ForeignKey('inventory_items.id'), nullable=False)
    date = Column(DateTime, nullable=False)
    quantity = Column(Integer, nullable=False)
    
    item = relationship("InventoryItem", back_populates="demand_history")
    
    __table_args__ = (
        Index('idx_demand_history_item_date', 'item_id', 'date'),
    )

class Order(Base):
    __tablename__ = 'orders'
    
    id = Column(Integer, primary_key=True)
    item_id = Column(Integer, ForeignKey('inventory_items.id'), nullable=False)
    quantity = Column(Integer, nullable=False)
    status = Column(String(20), nullable=False, default=OrderStatus.PENDING.value)
    order_date = Column(DateTime, nullable=False, default=func.now())
    expected_delivery_date = Column(DateTime)
    cost = Column(Float, nullable=False)
    notes = Column(Text)
    
    item = relationship("InventoryItem", back_populates="orders")

    @property
    def status_enum(self) -> OrderStatus:
        """Get the order status as an enum value."""
        return OrderStatus(self.status)

ITEM_FIELDS = [column.name for column in InventoryItem.__table__.columns]

def item_to_dict(item: InventoryItem) -> dict:
    """Convert an inventory item to a plain dictionary of its columns."""
    return {name: getattr(item, name) for name in ITEM_FIELDS}
