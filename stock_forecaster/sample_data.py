# stock_forecaster/sample_data.py
import math
from datetime import datetime, timedelta
from typing import Dict, List, Optional

import numpy as np

from stock_forecaster.logging_setup import get_logger

logger = get_logger(__name__)

SAMPLE_ITEMS = [
    {
        'name': 'Wireless Headphones', 'sku': 'WH-001',
        'current_stock': 156, 'reorder_point': 75, 'safety_stock': 25,
        'economic_order_quantity': 150, 'unit_cost': 45.99, 'holding_cost': 5.52,
        'ordering_cost': 25.00, 'lead_time_days': 7,
        'category': 'Electronics', 'supplier': 'TechCorp',
    },
    {
        'name': 'Smartphone Case', 'sku': 'SC-024',
        'current_stock': 89, 'reorder_point': 50, 'safety_stock': 15,
        'economic_order_quantity': 100, 'unit_cost': 12.99, 'holding_cost': 1.56,
        'ordering_cost': 20.00, 'lead_time_days': 5,
        'category': 'Accessories', 'supplier': 'AccessoryPlus',
    },
    {
        'name': 'USB-C Cable', 'sku': 'UC-012',
        'current_stock': 45, 'reorder_point': 60, 'safety_stock': 20,
        'economic_order_quantity': 200, 'unit_cost': 8.99, 'holding_cost': 1.08,
        'ordering_cost': 15.00, 'lead_time_days': 3,
        'category': 'Cables', 'supplier': 'CableTech',
    },
    {
        'name': 'Bluetooth Speaker', 'sku': 'BS-089',
        'current_stock': 234, 'reorder_point': 100, 'safety_stock': 30,
        'economic_order_quantity': 120, 'unit_cost': 89.99, 'holding_cost': 10.80,
        'ordering_cost': 30.00, 'lead_time_days': 10,
        'category': 'Electronics', 'supplier': 'AudioCorp',
    },
    {
        'name': 'Power Bank', 'sku': 'PB-056',
        'current_stock': 67, 'reorder_point': 40, 'safety_stock': 15,
        'economic_order_quantity': 80, 'unit_cost': 29.99, 'holding_cost': 3.60,
        'ordering_cost': 22.00, 'lead_time_days': 6,
        'category': 'Electronics', 'supplier': 'PowerTech',
    },
]

# Typical daily demand by SKU; anything else sells about 5 a day
BASE_DAILY_DEMAND = {
    'UC-012': 12,
    'WH-001': 8,
    'BS-089': 3,
}
DEFAULT_DAILY_DEMAND = 5

def generate_daily_demand(
    base_demand: float,
    days: int,
    rng: np.random.Generator
) -> List[int]:
    """Generate daily demand quantities scattered +/-3 around a base."""
    return [max(0, math.floor(base_demand + rng.uniform(0, 6) - 3)) for _ in range(days)]

def seed_sample_data(
    storage,
    days: int = 30,
    items: Optional[List[Dict]] = None,
    rng: Optional[np.random.Generator] = None,
    now: Optional[datetime] = None
) -> Dict:
    """Populate a storage with the demo catalogue and its demand history.
    
    Args:
        storage: InventoryStorage to fill
        days: Days of demand history per item, ending yesterday
        items: Item definitions (SAMPLE_ITEMS if None)
        rng: Random generator for the demand quantities
        now: Reference moment (defaults to the current time)
        
    Returns:
        Dictionary with the number of items and observations created
    """
    rng = rng if rng is not None else np.random.default_rng()
    now = now or datetime.now()
    items = items if items is not None else SAMPLE_ITEMS
    
    results = {'items': 0, 'observations': 0}
    
    for definition in items:
        item = storage.create_inventory_item(definition)
        results['items'] += 1
        
        base = BASE_DAILY_DEMAND.get(item.sku, DEFAULT_DAILY_DEMAND)
        quantities = generate_daily_demand(base, days, rng)
        
        for days_ago, quantity in zip(range(days, 0, -1), quantities):
            storage.add_demand_history({
                'item_id': item.id,
                'date': now - timedelta(days=days_ago),
                'quantity': quantity
            })
            results['observations'] += 1
    
    logger.info(f"Seeded {results['items']} items with {results['observations']} demand observations")
    return results
