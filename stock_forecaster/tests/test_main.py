"""
Tests for the command line interface.
"""
import io
import unittest
from contextlib import redirect_stdout, redirect_stderr
from datetime import datetime
from unittest.mock import patch

import numpy as np

from stock_forecaster.main import main, build_mode
from stock_forecaster.models import PeriodUnit, ClassificationPolicy
from stock_forecaster.sample_data import seed_sample_data
from stock_forecaster.storage import MemoryStorage

def sample_storage():
    storage = MemoryStorage()
    seed_sample_data(storage, days=30, rng=np.random.default_rng(3), now=datetime.now())
    return storage

class TestMain(unittest.TestCase):
    
    def run_main(self, argv):
        stdout, stderr = io.StringIO(), io.StringIO()
        with redirect_stdout(stdout), redirect_stderr(stderr):
            code = main(argv)
        return code, stdout.getvalue(), stderr.getvalue()
    
    @patch('stock_forecaster.storage.create_storage')
    def test_forecast_all_items(self, mock_create_storage):
        mock_create_storage.return_value = sample_storage()
        
        code, output, _ = self.run_main(['forecast', '--mode', 'day', '--seed', '1'])
        
        self.assertEqual(code, 0)
        for sku in ('WH-001', 'SC-024', 'UC-012', 'BS-089', 'PB-056'):
            self.assertIn(sku, output)
        self.assertIn('Demand/day', output)
    
    @patch('stock_forecaster.storage.create_storage')
    def test_forecast_single_item_with_insights(self, mock_create_storage):
        mock_create_storage.return_value = sample_storage()
        
        code, output, _ = self.run_main(['forecast', '--item-id', '3', '--seed', '1', '-v'])
        
        self.assertEqual(code, 0)
        self.assertIn('UC-012', output)
        self.assertNotIn('WH-001', output)
        self.assertIn('Will be out of stock', output)
    
    @patch('stock_forecaster.storage.create_storage')
    def test_forecast_missing_item(self, mock_create_storage):
        mock_create_storage.return_value = sample_storage()
        
        code, _, errors = self.run_main(['forecast', '--item-id', '999'])
        
        self.assertEqual(code, 1)
        self.assertIn('not found', errors)
    
    @patch('stock_forecaster.storage.create_storage')
    def test_metrics(self, mock_create_storage):
        mock_create_storage.return_value = sample_storage()
        
        code, output, _ = self.run_main(['metrics', '--seed', '1'])
        
        self.assertEqual(code, 0)
        self.assertIn('Total items', output)
        self.assertIn('Stockout frequency', output)
    
    @patch('stock_forecaster.storage.create_storage')
    def test_seed_requires_database(self, mock_create_storage):
        mock_create_storage.return_value = MemoryStorage()
        
        code, _, _ = self.run_main(['seed'])
        
        self.assertEqual(code, 1)
        mock_create_storage.assert_called_once_with(seed_memory=False)
    
    def test_no_command_prints_help(self):
        code, output, _ = self.run_main([])
        
        self.assertEqual(code, 0)
        self.assertIn('usage', output)

class TestBuildMode(unittest.TestCase):
    
    def parse(self, **overrides):
        args = {'mode': None, 'horizon': None, 'history': None, 'policy': None}
        args.update(overrides)
        return type('Args', (), args)()
    
    @patch('stock_forecaster.main.config')
    def test_command_line_overrides_config(self, mock_config):
        mock_config.forecast_config = {
            'period_unit': 'week',
            'horizon': 12,
            'historical_periods': 0,
            'classification_policy': 'absolute',
            'demand_window': None,
            'variability_window': None,
            'random_seed': None,
            'trend_jitter': 0.05,
        }
        
        mode = build_mode(self.parse(policy='lookahead', history=2))
        
        self.assertIs(mode.period_unit, PeriodUnit.WEEK)
        self.assertEqual(mode.horizon, 12)
        self.assertEqual(mode.historical_periods, 2)
        self.assertIs(mode.classification_policy, ClassificationPolicy.LOOKAHEAD)
    
    @patch('stock_forecaster.main.config')
    def test_switching_unit_uses_its_defaults(self, mock_config):
        mock_config.forecast_config = {
            'period_unit': 'week',
            'horizon': 12,
            'historical_periods': 0,
            'classification_policy': 'absolute',
            'demand_window': 6,
            'variability_window': 10,
            'random_seed': None,
            'trend_jitter': 0.05,
        }
        
        mode = build_mode(self.parse(mode='day'))
        
        self.assertIs(mode.period_unit, PeriodUnit.DAY)
        self.assertEqual(mode.horizon, 7)
        self.assertEqual(mode.demand_window, 7)
        self.assertEqual(mode.variability_window, 14)

if __name__ == '__main__':
    unittest.main()
