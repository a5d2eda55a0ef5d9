from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import declarative_base, sessionmaker
from .config import settings
import logging

logger = logging.getLogger(__name__)

# =============================================================================
# DATABASE ENGINE CONFIGURATION
# =============================================================================


def build_engine(database_url: str, echo: bool = settings.DB_ECHO_SQL) -> Engine:
    """
    Create the SQLAlchemy engine for a connection string.

    The backend is whatever DATABASE_URL points at. Only driver-level
    connect options differ: SQLite files are opened from FastAPI's thread
    pool, network databases get pool sizing and a connect timeout.
    """
    url = make_url(database_url)

    if url.get_backend_name() == "sqlite":
        engine = create_engine(
            url,
            echo=echo,
            connect_args={"check_same_thread": False},
        )
    else:
        engine = create_engine(
            url,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_timeout=settings.DB_POOL_TIMEOUT,
            pool_recycle=settings.DB_POOL_RECYCLE,
            pool_pre_ping=True,  # detect connections dropped by the server
            echo=echo,
            connect_args={"connect_timeout": settings.DB_CONNECT_TIMEOUT},
        )

    event.listen(engine, "connect", _on_connect)
    return engine


def _on_connect(dbapi_conn, connection_record):
    logger.debug("New database connection established")


engine = build_engine(settings.DATABASE_URL)


# =============================================================================
# SESSION CONFIGURATION
# =============================================================================

SessionLocal = sessionmaker(
    autocommit=False,  # Don't auto-commit transactions
    autoflush=False,   # Don't auto-flush before queries
    bind=engine,
    expire_on_commit=False  # Don't expire objects after commit
)

# Create Base class for models
Base = declarative_base()


# =============================================================================
# DATABASE UTILITIES
# =============================================================================

def create_database_tables(bind: Engine = engine):
    """Create all tables defined in models that do not exist yet."""
    # Models must be imported so they are registered on Base.metadata
    import app.models.student  # noqa: F401

    logger.info("Creating database tables...")
    Base.metadata.create_all(bind=bind)
    logger.info("Database tables ready")


def drop_database_tables(bind: Engine = engine):
    """
    Drop all database tables.

    DANGER: This will delete all data! Only use in development/testing.
    """
    logger.warning("Dropping all database tables...")
    Base.metadata.drop_all(bind=bind)
    logger.info("Database tables dropped")


def check_database_connection(bind: Engine = engine) -> bool:
    """
    Check if database connection is working.

    Returns:
        bool: True if connection successful, False otherwise
    """
    try:
        with bind.connect() as connection:
            connection.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Database connection failed: {e}")
        return False


# =============================================================================
# INITIALIZATION
# =============================================================================

def init_db(bind: Engine = engine, create_tables: bool = settings.AUTO_CREATE_TABLES):
    """
    Initialize database.
    Run this when starting the application.
    """
    logger.info(f"Initializing database at {bind.url.render_as_string(hide_password=True)}")

    if not check_database_connection(bind):
        raise RuntimeError("Cannot connect to database!")

    if create_tables:
        create_database_tables(bind)

    logger.info("Database initialized successfully")
