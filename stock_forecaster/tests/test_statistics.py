"""
Unit tests for demand mean and variability.
"""
import unittest

from stock_forecaster.core.statistics import mean_demand, demand_variability, summarize_demand

class TestDemandStatistics(unittest.TestCase):
    
    def test_mean_of_empty_history_is_zero(self):
        self.assertEqual(mean_demand([]), 0.0)
    
    def test_mean_of_totals(self):
        self.assertEqual(mean_demand([5, 0, 4]), 3.0)
    
    def test_mean_of_buckets(self):
        buckets = [{'total_quantity': 10}, {'total_quantity': 20}]
        self.assertEqual(mean_demand(buckets), 15.0)
    
    def test_variability_uses_population_divisor(self):
        # Mean 5, squared deviations sum to 32 over 8 periods
        self.assertAlmostEqual(demand_variability([2, 4, 4, 4, 5, 5, 7, 9]), 2.0)
    
    def test_variability_guards_short_history(self):
        self.assertEqual(demand_variability([]), 0.0)
        self.assertEqual(demand_variability([12]), 0.0)
    
    def test_variability_of_flat_demand_is_zero(self):
        self.assertEqual(demand_variability([12, 12, 12, 12]), 0.0)
    
    def test_summary_uses_separate_windows(self):
        totals = [100, 2, 4, 4, 4, 5, 5, 7, 9]
        
        summary = summarize_demand(totals, demand_window=2, variability_window=8)
        
        self.assertEqual(summary['demand_estimate'], 8.0)
        self.assertAlmostEqual(summary['demand_variability'], 2.0)
    
    def test_summary_without_windows_uses_everything(self):
        summary = summarize_demand([1, 3])
        
        self.assertEqual(summary['demand_estimate'], 2.0)
        self.assertEqual(summary['demand_variability'], 1.0)
    
    def test_summary_returns_plain_floats(self):
        summary = summarize_demand([1, 2, 3])
        
        self.assertIs(type(summary['demand_estimate']), float)
        self.assertIs(type(summary['demand_variability']), float)

if __name__ == '__main__':
    unittest.main()
