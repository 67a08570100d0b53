import os
import configparser
from pathlib import Path

class Config:
    """Configuration manager for the Stock Forecaster."""
    
    _instance = None
    
    def __new__(cls):
        """Singleton pattern implementation."""
        if cls._instance is None:
            cls._instance = super(Config, cls).__new__(cls)
            cls._instance._initialized = False
        return cls._instance
    
    def __init__(self):
        """Initialize the configuration if not already initialized."""
        if self._initialized:
            return
            
        self._config_path = Path(os.environ.get('STOCK_FORECASTER_CONFIG', 'config/settings.ini'))
        self._config_dir = self._config_path.parent
        self._config = configparser.ConfigParser(interpolation=None)
        
        # Create config directory if it doesn't exist
        if not self._config_dir.exists():
            self._config_dir.mkdir(parents=True)
        
        # Load config or create default
        if self._config_path.exists():
            self._config.read(self._config_path)
        else:
            self._create_default_config()
            
        self._initialized = True
    
    def _create_default_config(self):
        """Create default configuration file."""
        self._config['DATABASE'] = {
            'url': '',
            'echo': 'False'
        }
        
        self._config['LOGGING'] = {
            'level': 'INFO',
            'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            'directory': 'logs',
            'max_size_mb': '10',
            'backup_count': '5',
            'console_output': 'True'
        }
        
        self._config['FORECAST'] = {
            'period_unit': 'week',
            'horizon': '',           # blank = mode default (7 daily, 8 weekly)
            'historical_periods': '0',
            'classification_policy': 'absolute',
            'demand_window': '',
            'variability_window': '',
            'random_seed': '',       # blank = unseeded
            'trend_jitter': '0.05'
        }
        
        self._config['BATCH_PROCESS'] = {
            'max_workers': '4'
        }
        
        self._save_config()
    
    def _save_config(self):
        """Save configuration to file."""
        with open(self._config_path, 'w') as configfile:
            self._config.write(configfile)
    
    def get(self, section, key, default=None):
        """Get configuration value.
        
        A blank value counts as unset and returns `default`. In [FORECAST]
        a blank horizon or window means the period unit's own default, and a
        blank random_seed means unseeded.
        """
        try:
            value = self._config.get(section, key)
        except (configparser.NoSectionError, configparser.NoOptionError):
            return default
        return value if value != '' else default
    
    def get_int(self, section, key, default=None):
        """Get configuration value as integer (`default` when blank or invalid)."""
        try:
            return self._config.getint(section, key)
        except (configparser.NoSectionError, configparser.NoOptionError, ValueError):
            return default
    
    def get_float(self, section, key, default=None):
        """Get configuration value as float."""
        try:
            return self._config.getfloat(section, key)
        except (configparser.NoSectionError, configparser.NoOptionError, ValueError):
            return default
    
    def get_boolean(self, section, key, default=None):
        """Get configuration value as boolean."""
        try:
            return self._config.getboolean(section, key)
        except (configparser.NoSectionError, configparser.NoOptionError, ValueError):
            return default
    
    def set(self, section, key, value):
        """Set configuration value."""
        if not self._config.has_section(section):
            self._config.add_section(section)
        
        self._config.set(section, key, str(value))
        self._save_config()
    
    def get_db_url(self):
        """Get the SQLAlchemy database URL, or None for in-memory storage."""
        return os.environ.get('DATABASE_URL') or self.get('DATABASE', 'url')
    
    @property
    def log_config(self):
        """Get logging configuration."""
        return {
            'level': self.get('LOGGING', 'level', 'INFO'),
            'format': self.get('LOGGING', 'format', '%(asctime)s - %(name)s - %(levelname)s - %(message)s'),
            'directory': self.get('LOGGING', 'directory', 'logs'),
            'max_size_mb': self.get_int('LOGGING', 'max_size_mb', 10),
            'backup_count': self.get_int('LOGGING', 'backup_count', 5),
            'console_output': self.get_boolean('LOGGING', 'console_output', True)
        }
    
    @property
    def forecast_config(self):
        """Get forecasting configuration."""
        return {
            'period_unit': self.get('FORECAST', 'period_unit', 'week'),
            'horizon': self.get_int('FORECAST', 'horizon'),
            'historical_periods': self.get_int('FORECAST', 'historical_periods', 0),
            'classification_policy': self.get('FORECAST', 'classification_policy', 'absolute'),
            'demand_window': self.get_int('FORECAST', 'demand_window'),
            'variability_window': self.get_int('FORECAST', 'variability_window'),
            'random_seed': self.get_int('FORECAST', 'random_seed'),
            'trend_jitter': self.get_float('FORECAST', 'trend_jitter', 0.05)
        }
    
    @property
    def batch_config(self):
        """Get batch processing configuration."""
        return {
            'max_workers': self.get_int('BATCH_PROCESS', 'max_workers', 4)
        }

# Global config instance
config = Config()
