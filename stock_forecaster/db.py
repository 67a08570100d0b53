from contextlib import contextmanager

from sqlalchemy import create_engine, select
from sqlalchemy.orm import sessionmaker, scoped_session
from sqlalchemy.pool import StaticPool

from stock_forecaster.config import config
from stock_forecaster.exceptions import DatabaseError

class Database:
    """Database connection manager for the Stock Forecaster.
    
    One instance per connection string; the module-level ``db`` instance is
    bound to the configured URL on first use.
    """
    
    def __init__(self, connection_string=None):
        self._connection_string = connection_string
        self._engine = None
        self._session = None
    
    def initialize(self, connection_string=None):
        """Initialize database connection.
        
        Args:
            connection_string: Optional database connection string.
                              If not provided, will use configuration.
        """
        connection_string = connection_string or self._connection_string or config.get_db_url()
        if not connection_string:
            raise DatabaseError("No database URL configured", code='DB_URL_MISSING')
        
        echo = config.get_boolean('DATABASE', 'echo', False)
        
        if connection_string.startswith('sqlite'):
            # Single shared connection so in-memory databases survive across sessions
            self._engine = create_engine(
                connection_string,
                echo=echo,
                connect_args={'check_same_thread': False},
                poolclass=StaticPool
            )
        else:
            self._engine = create_engine(
                connection_string,
                echo=echo,
                pool_size=config.get_int('DATABASE', 'pool_size', 10),
                max_overflow=config.get_int('DATABASE', 'max_overflow', 20),
                pool_timeout=config.get_int('DATABASE', 'pool_timeout', 30),
                pool_recycle=config.get_int('DATABASE', 'pool_recycle', 1800),
                pool_pre_ping=True
            )
        
        self._connection_string = connection_string
        self._session = scoped_session(
            sessionmaker(bind=self._engine, expire_on_commit=False)
        )
    
    def create_all_tables(self):
        """Create all tables defined in the models."""
        from stock_forecaster.models import Base
        Base.metadata.create_all(self.engine)
    
    def drop_all_tables(self):
        """Drop all tables from the database."""
        from stock_forecaster.models import Base
        Base.metadata.drop_all(self.engine)
    
    def test_connection(self) -> bool:
        """Run a trivial query against the inventory table."""
        from stock_forecaster.models import InventoryItem
        with self.session_scope() as session:
            session.execute(select(InventoryItem.id).limit(1))
        return True
    
    @property
    def session(self):
        """Get the current database session factory."""
        if self._session is None:
            self.initialize()
        return self._session
    
    @property
    def engine(self):
        """Get the database engine."""
        if self._engine is None:
            self.initialize()
        return self._engine
    
    @contextmanager
    def session_scope(self):
        """Provide a transactional scope around a series of operations."""
        session = self.session()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            self.session.remove()

# Global database instance
db = Database()

@contextmanager
def session_scope():
    """Session scope context manager."""
    with db.session_scope() as session:
        yield session
