"""
Tests for the forecast, metrics and inventory services.
"""
import unittest
from datetime import date, datetime, timedelta
from unittest.mock import MagicMock

import numpy as np

from stock_forecaster.core.engine import ForecastMode
from stock_forecaster.exceptions import ValidationError, NotFoundError, OrderError, ForecastError
from stock_forecaster.models import InventoryItem, StockStatus
from stock_forecaster.sample_data import seed_sample_data, SAMPLE_ITEMS
from stock_forecaster.services import ForecastService, MetricsService, InventoryService
from stock_forecaster.storage import MemoryStorage

NOW = datetime(2024, 1, 10, 15, 0)

def seeded_storage():
    storage = MemoryStorage()
    seed_sample_data(storage, days=60, rng=np.random.default_rng(1), now=NOW)
    return storage

def make_item_data(**overrides):
    data = dict(SAMPLE_ITEMS[4])
    data.update(overrides)
    return data

class TestForecastService(unittest.TestCase):
    
    def setUp(self):
        self.storage = seeded_storage()
        self.service = ForecastService(self.storage, mode=ForecastMode.weekly(), seed=42, max_workers=2)
    
    def test_batch_returns_records_in_item_order(self):
        records = self.service.get_inventory_with_forecast(now=NOW)
        
        self.assertEqual([r['sku'] for r in records], [item['sku'] for item in SAMPLE_ITEMS])
        for record in records:
            self.assertEqual(len(record['forecast']), 8)
            self.assertEqual(len(record['stock_status']), 8)
            self.assertTrue(record['ai_insights'])
    
    def test_batch_is_reproducible(self):
        first = self.service.get_inventory_with_forecast(now=NOW)
        second = self.service.get_inventory_with_forecast(now=NOW)
        
        self.assertEqual(first, second)
    
    def test_worker_count_does_not_change_results(self):
        serial = ForecastService(self.storage, mode=ForecastMode.weekly(), seed=42, max_workers=1)
        parallel = ForecastService(self.storage, mode=ForecastMode.weekly(), seed=42, max_workers=4)
        
        self.assertEqual(
            serial.get_inventory_with_forecast(now=NOW),
            parallel.get_inventory_with_forecast(now=NOW)
        )
    
    def test_single_item_matches_batch(self):
        records = self.service.get_inventory_with_forecast(now=NOW)
        
        single = self.service.get_item_forecast(3, now=NOW)
        
        self.assertEqual(single, records[2])
    
    def test_fast_mover_needs_order(self):
        record = self.service.get_item_forecast(3, now=NOW)
        
        # UC-012 sells about 80 a week against 45 on hand
        self.assertIs(record['stock_status'][0]['status'], StockStatus.ORDER)
        self.assertGreater(record['demand_estimate'], 50)
    
    def test_missing_item(self):
        with self.assertRaises(NotFoundError):
            self.service.get_item_forecast(999, now=NOW)
    
    def test_history_since(self):
        self.assertEqual(self.service.history_since(NOW), datetime(2023, 11, 9))
        
        daily = ForecastService(self.storage, mode=ForecastMode.daily(), seed=1)
        self.assertEqual(daily.history_since(NOW), datetime(2023, 12, 27))
    
    def test_requests_only_needed_history(self):
        storage = MagicMock()
        storage.get_inventory_item.return_value = InventoryItem(id=1, **make_item_data())
        storage.get_demand_history.return_value = []
        service = ForecastService(storage, mode=ForecastMode.weekly(), seed=1, max_workers=1)
        
        service.get_item_forecast(1, now=NOW)
        
        storage.get_demand_history.assert_called_once_with(1, since=datetime(2023, 11, 9))
    
    def test_unexpected_failure_becomes_forecast_error(self):
        storage = MagicMock()
        storage.get_inventory_item.return_value = InventoryItem(id=1, **make_item_data())
        storage.get_demand_history.side_effect = RuntimeError("connection reset")
        service = ForecastService(storage, mode=ForecastMode.weekly(), seed=1, max_workers=1)
        
        with self.assertRaises(ForecastError) as context:
            service.get_item_forecast(1, now=NOW)
        
        self.assertEqual(context.exception.details, {'item_id': 1})
    
    def test_batch_propagates_item_failure(self):
        self.storage.update_inventory_item(2, {'current_stock': -5})
        
        with self.assertRaises(ValidationError):
            self.service.get_inventory_with_forecast(now=NOW)

class TestMetricsService(unittest.TestCase):
    
    def setUp(self):
        self.storage = MemoryStorage()
        low = self.storage.create_inventory_item(
            make_item_data(sku='A-1', current_stock=10, reorder_point=20, unit_cost=5.0)
        )
        stocked = self.storage.create_inventory_item(
            make_item_data(sku='B-1', current_stock=100, reorder_point=10, unit_cost=1.2)
        )
        
        self.storage.add_demand_history({'item_id': low.id, 'date': NOW - timedelta(days=1), 'quantity': 10})
        self.storage.add_demand_history({'item_id': stocked.id, 'date': NOW - timedelta(days=5), 'quantity': 20})
        # Outside the 30 day window
        self.storage.add_demand_history({'item_id': stocked.id, 'date': NOW - timedelta(days=40), 'quantity': 500})
        self.storage.add_demand_history({'item_id': stocked.id, 'date': NOW + timedelta(days=1), 'quantity': 500})
        
        self.storage.create_order({'item_id': low.id, 'quantity': 80, 'cost': 400.0})
        delivered = self.storage.create_order({'item_id': stocked.id, 'quantity': 80, 'cost': 96.0})
        self.storage.update_order_status(delivered.id, 'delivered')
        
        self.service = MetricsService(self.storage)
    
    def test_dashboard_metrics(self):
        metrics = self.service.get_dashboard_metrics(now=NOW)
        
        self.assertEqual(metrics['total_items'], 2)
        self.assertEqual(metrics['low_stock_items'], 1)
        self.assertAlmostEqual(metrics['total_value'], 170.0)
        self.assertEqual(metrics['pending_orders'], 1)
        self.assertAlmostEqual(metrics['turnover_rate'], 30 / (55 * 30) * 365)
        self.assertAlmostEqual(metrics['stockout_frequency'], 50.0)
        self.assertIsNone(metrics['order_status_items'])
    
    def test_counts_items_needing_order(self):
        forecasts = [
            {'stock_status': [{'status': StockStatus.ENOUGH, 'is_historical': False},
                              {'status': StockStatus.ORDER, 'is_historical': False}]},
            {'stock_status': [{'status': StockStatus.ORDER, 'is_historical': True},
                              {'status': StockStatus.LOW, 'is_historical': False}]},
        ]
        
        metrics = self.service.get_dashboard_metrics(forecasts=forecasts, now=NOW)
        
        self.assertEqual(metrics['order_status_items'], 1)
    
    def test_empty_inventory(self):
        metrics = MetricsService(MemoryStorage()).get_dashboard_metrics(now=NOW)
        
        self.assertEqual(metrics['total_items'], 0)
        self.assertEqual(metrics['total_value'], 0)
        self.assertEqual(metrics['turnover_rate'], 0.0)
        self.assertEqual(metrics['stockout_frequency'], 0.0)

class TestInventoryService(unittest.TestCase):
    
    def setUp(self):
        self.storage = MemoryStorage()
        self.service = InventoryService(self.storage)
        self.item = self.service.create_item(make_item_data())
    
    def test_create_item_validates(self):
        with self.assertRaises(ValidationError) as context:
            self.service.create_item(make_item_data(sku='X-1', name='', unit_cost=0))
        
        self.assertIn('name', context.exception.details)
        self.assertIn('unit_cost', context.exception.details)
    
    def test_create_item_requires_all_fields(self):
        data = make_item_data(sku='X-2')
        del data['supplier']
        
        with self.assertRaises(ValidationError):
            self.service.create_item(data)
    
    def test_update_item(self):
        updated = self.service.update_item(self.item.id, {'current_stock': 5})
        
        self.assertEqual(updated.current_stock, 5)
    
    def test_update_item_validates_present_fields(self):
        with self.assertRaises(ValidationError):
            self.service.update_item(self.item.id, {'reorder_point': -1})
        with self.assertRaises(NotFoundError):
            self.service.update_item(999, {'current_stock': 5})
    
    def test_record_demand(self):
        self.service.record_demand(self.item.id, 4, NOW)
        
        history = self.storage.get_demand_history(self.item.id)
        self.assertEqual([(d.date, d.quantity) for d in history], [(NOW, 4)])
    
    def test_record_demand_rejects_bad_input(self):
        with self.assertRaises(ValidationError):
            self.service.record_demand(self.item.id, -1, NOW)
        with self.assertRaises(NotFoundError):
            self.service.record_demand(999, 1, NOW)
    
    def test_demand_recorded_by_date_can_be_forecast(self):
        self.service.record_demand(self.item.id, 5, date(2024, 1, 3))
        forecasts = ForecastService(self.storage, mode=ForecastMode.weekly(), seed=1, max_workers=1)
        
        record = forecasts.get_item_forecast(self.item.id, now=NOW)
        metrics = MetricsService(self.storage).get_dashboard_metrics(now=NOW)
        
        history = self.storage.get_demand_history(self.item.id)
        self.assertEqual(history[0].date, datetime(2024, 1, 3))
        # One observation in the last complete week, averaged over 4 weeks
        self.assertEqual(record['demand_estimate'], 1.25)
        self.assertAlmostEqual(metrics['turnover_rate'], 5 / (67 * 30) * 365)
    
    def test_record_demand_rejects_non_date(self):
        with self.assertRaises(ValidationError) as context:
            self.service.record_demand(self.item.id, 5, '2024-01-03')
        
        self.assertIn('date', context.exception.details)
        self.assertEqual(self.storage.get_demand_history(self.item.id), [])
    
    def test_create_order_defaults_to_eoq(self):
        order = self.service.create_order(self.item.id)
        
        self.assertEqual(order.quantity, 80)
        self.assertEqual(order.cost, round(80 * 29.99, 2))
        self.assertEqual(order.status, 'pending')
    
    def test_create_order_rejects_bad_quantity(self):
        with self.assertRaises(ValidationError):
            self.service.create_order(self.item.id, quantity=0)
    
    def test_order_lifecycle(self):
        order = self.service.create_order(self.item.id, quantity=10, cost=100.0)
        
        self.service.update_order_status(order.id, 'shipped')
        delivered = self.service.update_order_status(order.id, 'delivered')
        
        self.assertEqual(delivered.status, 'delivered')
        with self.assertRaises(OrderError) as context:
            self.service.update_order_status(order.id, 'cancelled')
        self.assertEqual(context.exception.code, 'ORDER_CLOSED')
    
    def test_update_order_status_rejects_bad_input(self):
        order = self.service.create_order(self.item.id)
        
        with self.assertRaises(ValidationError):
            self.service.update_order_status(order.id, 'lost')
        with self.assertRaises(NotFoundError):
            self.service.update_order_status(999, 'shipped')

if __name__ == '__main__':
    unittest.main()
