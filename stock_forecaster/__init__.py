from .config import config
from .logging_setup import logger, get_logger
from .exceptions import (
    StockForecasterError, ValidationError, NotFoundError,
    ForecastError, DatabaseError, OrderError, ItemError
)
from .core.engine import ForecastMode, compute_forecast

__version__ = '0.1.0'

__all__ = [
    'config',
    'logger',
    'get_logger',
    'StockForecasterError',
    'ValidationError',
    'NotFoundError',
    'ForecastError',
    'DatabaseError',
    'OrderError',
    'ItemError',
    'ForecastMode',
    'compute_forecast'
]
