import logging
import logging.handlers
from pathlib import Path
from datetime import datetime

from stock_forecaster.config import config
from stock_forecaster.exceptions import StockForecasterError

class Logger:
    """Logging manager for the Stock Forecaster.

    Every named logger writes to its own rotating file under the configured
    directory, plus the console when enabled. Forecast runs over the whole
    catalogue are reported on the 'forecast_run' logger.
    """

    _instance = None
    _loggers = {}

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(Logger, cls).__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return

        settings = config.log_config
        self._directory = Path(settings['directory'])
        self._directory.mkdir(parents=True, exist_ok=True)

        self._level = getattr(logging, settings['level'].upper(), logging.INFO)
        self._formatter = logging.Formatter(settings['format'])
        self._max_bytes = settings['max_size_mb'] * 1024 * 1024
        self._backup_count = settings['backup_count']
        self._console = settings['console_output']

        self._app_logger = self.get_logger('app')
        self._initialized = True

    def get_logger(self, name):
        """Get the logger for a module or channel, creating its handlers once.

        Args:
            name: Logger name; also the log file name

        Returns:
            Configured logger instance
        """
        if name in self._loggers:
            return self._loggers[name]

        log = logging.getLogger(name)
        log.setLevel(self._level)
        for handler in log.handlers[:]:
            log.removeHandler(handler)

        file_handler = logging.handlers.RotatingFileHandler(
            self._directory / f"{name}.log",
            maxBytes=self._max_bytes,
            backupCount=self._backup_count
        )
        file_handler.setFormatter(self._formatter)
        log.addHandler(file_handler)

        if self._console:
            console_handler = logging.StreamHandler()
            console_handler.setFormatter(self._formatter)
            log.addHandler(console_handler)

        log.propagate = False

        self._loggers[name] = log
        return log

    @property
    def app_logger(self):
        return self._app_logger

    def log_error(self, logger_name, error, message=None):
        """Log a failed command.

        Domain errors are logged with their code and details. Anything else
        is unexpected and gets the stack trace.

        Args:
            logger_name: Logger name
            error: Exception raised
            message: Optional prefix
        """
        log = self.get_logger(logger_name)
        prefix = f"{message}: " if message else ""

        if isinstance(error, StockForecasterError):
            log.error(f"{prefix}{error.to_dict()}")
        else:
            log.exception(f"{prefix}{error}", exc_info=error)

    def start_forecast_run(self, mode, item_count, workers):
        """Log the start of a forecast over the whole catalogue.

        Returns:
            Dictionary describing the run, passed to end_forecast_run
        """
        run = {
            'mode': repr(mode),
            'items': item_count,
            'workers': workers,
            'started': datetime.now()
        }
        self.get_logger('forecast_run').info(
            f"Forecasting {item_count} items with {run['mode']} on {workers} workers"
        )
        return run

    def end_forecast_run(self, run, status_counts=None, error=None):
        """Log the outcome of a forecast run.

        Args:
            run: Dictionary from start_forecast_run
            status_counts: Number of items per worst forward status
            error: Exception that aborted the run, if any
        """
        run_logger = self.get_logger('forecast_run')
        elapsed = datetime.now() - run['started']

        if error is not None:
            run_logger.error(f"Forecast of {run['items']} items failed after {elapsed}: {error}")
            return

        counts = ', '.join(f"{status}={count}" for status, count in sorted((status_counts or {}).items()))
        run_logger.info(f"Forecast of {run['items']} items done in {elapsed} ({counts or 'no items'})")

# Global logger instance
logger = Logger()

def get_logger(name):
    """Get a logger with the specified name."""
    return logger.get_logger(name)
