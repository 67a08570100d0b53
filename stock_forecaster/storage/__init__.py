from typing import Optional

from stock_forecaster.config import config
from stock_forecaster.db import Database
from stock_forecaster.logging_setup import get_logger
from .interface import InventoryStorage
from .memory import MemoryStorage
from .sql import SqlStorage

logger = get_logger(__name__)

def create_storage(connection_string: Optional[str] = None, seed_memory: bool = True) -> InventoryStorage:
    """Create the storage adapter for the configured database.
    
    Uses SqlStorage when a database URL is configured and answers a test
    query. Otherwise falls back to MemoryStorage, seeded with the sample
    catalogue unless `seed_memory` is False.
    
    Args:
        connection_string: Database URL (configuration if None)
        seed_memory: Seed the in-memory fallback with sample data
        
    Returns:
        InventoryStorage adapter
    """
    connection_string = connection_string or config.get_db_url()
    
    if connection_string:
        try:
            database = Database(connection_string)
            database.create_all_tables()
            database.test_connection()
            logger.info("Database connection established")
            return SqlStorage(database)
        except Exception as e:
            logger.warning(f"Database connection failed, falling back to in-memory storage: {str(e)}")
    else:
        logger.warning("No database URL configured, falling back to in-memory storage")
    
    storage = MemoryStorage()
    if seed_memory:
        from stock_forecaster.sample_data import seed_sample_data
        seed_sample_data(storage)
    return storage

__all__ = [
    'InventoryStorage',
    'MemoryStorage',
    'SqlStorage',
    'create_storage'
]
