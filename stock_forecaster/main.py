import argparse
import sys

from tabulate import tabulate

from stock_forecaster.config import config
from stock_forecaster.exceptions import StockForecasterError
from stock_forecaster.logging_setup import logger, get_logger

STATUS_MARKS = {'enough': '+', 'low': '~', 'order': '!'}

def build_mode(args):
    """Build the forecast mode from configuration and command-line overrides."""
    from stock_forecaster.core.engine import ForecastMode
    
    settings = dict(config.forecast_config)
    configured_unit = settings['period_unit']
    overrides = {
        'period_unit': args.mode,
        'horizon': args.horizon,
        'historical_periods': args.history,
        'classification_policy': args.policy,
    }
    for key, value in overrides.items():
        if value is not None:
            settings[key] = value
    
    if args.mode and args.mode != configured_unit:
        # Switching unit on the command line uses that unit's own defaults
        settings['demand_window'] = None
        settings['variability_window'] = None
        if args.horizon is None:
            settings['horizon'] = None
    
    return ForecastMode(
        period_unit=settings['period_unit'],
        horizon=settings['horizon'],
        historical_periods=settings['historical_periods'],
        classification_policy=settings['classification_policy'],
        demand_window=settings['demand_window'],
        variability_window=settings['variability_window'],
        trend_jitter=settings['trend_jitter']
    )

def generate_forecast(args):
    """Print forecast records for one or all items.
    
    Args:
        args: Command-line arguments with forecast parameters
    """
    from stock_forecaster.storage import create_storage
    from stock_forecaster.services.forecast_service import ForecastService
    
    log = get_logger('forecast')
    log.info(f"Starting forecast with parameters: {args}")
    
    service = ForecastService(create_storage(), mode=build_mode(args), seed=args.seed)
    
    if args.item_id:
        records = [service.get_item_forecast(args.item_id)]
    else:
        records = service.get_inventory_with_forecast()
    
    unit = service.mode.period_unit.value
    table_data = []
    for record in records:
        trajectory = ' '.join(
            f"{entry['projected_stock']:g}{STATUS_MARKS[entry['status'].value]}"
            for entry in record['stock_status']
        )
        table_data.append([
            record['sku'],
            record['name'],
            record['current_stock'],
            record['reorder_point'],
            f"{record['demand_estimate']:.1f}",
            f"{record['demand_variability']:.1f}",
            trajectory
        ])
    
    print(tabulate(
        table_data,
        headers=['SKU', 'Name', 'Stock', 'Reorder Pt', f'Demand/{unit}', 'Std Dev', 'Projection']
    ))
    print(f"\n{STATUS_MARKS['enough']} enough  {STATUS_MARKS['low']} low  {STATUS_MARKS['order']} order")
    
    if args.verbose:
        for record in records:
            print(f"\n{record['sku']} - {record['name']}")
            for insight in record['ai_insights']:
                print(f"  * {insight}")
    
    log.info(f"Forecast completed for {len(records)} items")
    return records

def show_metrics(args):
    """Print dashboard summary metrics."""
    from stock_forecaster.storage import create_storage
    from stock_forecaster.services.forecast_service import ForecastService
    from stock_forecaster.services.metrics_service import MetricsService
    
    storage = create_storage()
    forecasts = ForecastService(storage, seed=args.seed).get_inventory_with_forecast()
    metrics = MetricsService(storage).get_dashboard_metrics(forecasts=forecasts)
    
    print(tabulate(
        [
            ['Total items', metrics['total_items']],
            ['At or below reorder point', metrics['low_stock_items']],
            ['Needing an order in horizon', metrics['order_status_items']],
            ['Total stock value', f"{metrics['total_value']:,.2f}"],
            ['Pending orders', metrics['pending_orders']],
            ['Turnover rate (annual)', f"{metrics['turnover_rate']:.1f}"],
            ['Stockout frequency (%)', f"{metrics['stockout_frequency']:.1f}"],
        ],
        headers=['Metric', 'Value']
    ))
    return metrics

def seed_database(args):
    """Load the sample catalogue into the configured database."""
    from stock_forecaster.storage import create_storage, SqlStorage
    from stock_forecaster.sample_data import seed_sample_data
    
    storage = create_storage(seed_memory=False)
    if not isinstance(storage, SqlStorage):
        logger.app_logger.error("No database available; configure [DATABASE] url first")
        return False
    
    results = seed_sample_data(storage, days=args.days)
    print(f"Seeded {results['items']} items and {results['observations']} demand observations")
    return results

def setup_database(drop=False):
    """Create (and optionally drop first) the database tables."""
    from stock_forecaster.db import db
    
    if drop:
        db.drop_all_tables()
        logger.app_logger.info("Dropped existing tables")
    db.create_all_tables()
    logger.app_logger.info("Database tables created")

def main(argv=None):
    """Main application entry point."""
    parser = argparse.ArgumentParser(description='Stock Forecaster')
    
    parser.add_argument('--setup-db', action='store_true',
                      help='Set up the database schema')
    parser.add_argument('--drop-db', action='store_true',
                      help='Drop existing tables before setup')
    
    subparsers = parser.add_subparsers(dest='command', help='Commands')
    
    # Forecast command
    forecast_parser = subparsers.add_parser('forecast', help='Show stock forecasts')
    forecast_parser.add_argument('--item-id', type=int, help='Specific item ID to forecast')
    forecast_parser.add_argument('--mode', choices=['day', 'week'], help='Period unit')
    forecast_parser.add_argument('--policy', choices=['absolute', 'lookahead'],
                               help='Stock status classification policy')
    forecast_parser.add_argument('--horizon', type=int, help='Number of periods to project')
    forecast_parser.add_argument('--history', type=int,
                               help='Number of past periods to reconstruct')
    forecast_parser.add_argument('--seed', type=int, help='Random seed for reproducible forecasts')
    forecast_parser.add_argument('--verbose', '-v', action='store_true',
                               help='Display insights for every item')
    
    # Metrics command
    metrics_parser = subparsers.add_parser('metrics', help='Show dashboard metrics')
    metrics_parser.add_argument('--seed', type=int, help='Random seed for reproducible forecasts')
    
    # Seed command
    seed_parser = subparsers.add_parser('seed', help='Load sample data into the database')
    seed_parser.add_argument('--days', type=int, default=30, help='Days of demand history per item')
    
    args = parser.parse_args(argv)
    
    try:
        if args.setup_db:
            setup_database(args.drop_db)
            return 0
        
        if args.command == 'forecast':
            generate_forecast(args)
        elif args.command == 'metrics':
            show_metrics(args)
        elif args.command == 'seed':
            return 0 if seed_database(args) else 1
        else:
            parser.print_help()
    except StockForecasterError as e:
        logger.log_error('app', e, "Command failed")
        print(f"Error: {e}", file=sys.stderr)
        return 1
    
    return 0

if __name__ == "__main__":
    sys.exit(main())
