"""
Database connection and session management for Film Recipes.

This module provides:
- Database engine creation and configuration
- Session factory and transactional session scope
- Conflict-tolerant insert helpers (upsert / insert-or-ignore)
- Database initialization, reset and truncation of recipe-scoped rows
- SQLite configuration: foreign key enforcement, WAL mode and driver-level
  transaction control so SAVEPOINTs behave
"""

from typing import Any, Dict, Iterable, List, Optional, Sequence
from contextlib import contextmanager
import logging

from sqlalchemy import create_engine, delete, event, func, inspect, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from film_recipes.utils.config import get_config
from film_recipes.models.base import Base

logger = logging.getLogger(__name__)

# Global engine and session factory
_engine: Optional[Engine] = None
_SessionFactory: Optional[sessionmaker] = None


def _configure_sqlite(engine: Engine) -> None:
    """
    Attach SQLite connection listeners to an engine.

    The pysqlite driver normally issues its own BEGIN lazily and defers
    SAVEPOINT handling; turning that off and emitting BEGIN from the engine
    gives real nested transactions for per-row isolation.
    """

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

        cursor = dbapi_connection.cursor()

        # Enable foreign key constraints (critical for referential integrity)
        cursor.execute("PRAGMA foreign_keys=ON")

        # Set WAL (Write-Ahead Logging) mode for better concurrency
        cursor.execute("PRAGMA journal_mode=WAL")

        # Set synchronous mode for better performance while maintaining safety
        cursor.execute("PRAGMA synchronous=NORMAL")

        cursor.close()

    @event.listens_for(engine, "begin")
    def _do_begin(conn):
        conn.exec_driver_sql("BEGIN")


def create_database_engine(database_url: Optional[str] = None, echo: bool = False) -> Engine:
    """
    Create and configure the database engine.

    Args:
        database_url: Optional database URL. If None, uses config default.
        echo: If True, log all SQL statements (useful for debugging)

    Returns:
        Configured SQLAlchemy Engine
    """
    if database_url is None:
        config = get_config()
        config.ensure_directories()
        database_url = config.database_url

    logger.info(f"Creating database engine: {database_url}")

    if not database_url.startswith("sqlite"):
        return create_engine(database_url, echo=echo, pool_pre_ping=True)

    if ":memory:" in database_url or "mode=memory" in database_url:
        # For in-memory databases (testing), use StaticPool
        engine = create_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        engine = create_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False, "timeout": 30},
        )

    _configure_sqlite(engine)
    return engine


def init_database(engine: Optional[Engine] = None) -> None:
    """
    Initialize the database by creating all tables.

    Safe to call multiple times - existing tables won't be recreated.

    Args:
        engine: Optional engine to use. If None, uses global engine.
    """
    if engine is None:
        engine = get_engine()

    logger.info("Initializing database tables")

    # Import all models to ensure they're registered with Base
    from film_recipes import models  # noqa: F401

    Base.metadata.create_all(engine)

    logger.info("Database tables initialized successfully")


def get_engine(force_recreate: bool = False) -> Engine:
    """
    Get the global database engine.

    Args:
        force_recreate: If True, recreate the engine even if one exists

    Returns:
        Database engine
    """
    global _engine

    if _engine is None or force_recreate:
        _engine = create_database_engine()

    return _engine


def get_session_factory() -> sessionmaker:
    """
    Get the global session factory.

    Returns:
        Session factory (sessionmaker)
    """
    global _SessionFactory

    if _SessionFactory is None:
        engine = get_engine()
        _SessionFactory = sessionmaker(bind=engine, expire_on_commit=False)

    return _SessionFactory


def get_session() -> Session:
    """
    Create a new database session.

    Returns:
        New Session instance

    Example:
        session = get_session()
        try:
            recipe = session.get(Recipe, 1)
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
    """
    session_factory = get_session_factory()
    return session_factory()


@contextmanager
def session_scope():
    """
    Provide a transactional scope for database operations.

    This context manager handles session lifecycle automatically:
    - Creates a new session
    - Commits on success
    - Rolls back on exception
    - Always closes the session

    Yields:
        Database session

    Example:
        with session_scope() as session:
            session.add(Author(name="Jane Doe", slug="jane-doe"))
            # Commit happens automatically if no exception
    """
    session = get_session()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


# ============================================================================
# Conflict-tolerant inserts
# ============================================================================


def _dialect_insert(session: Session, model):
    """Return the dialect-specific INSERT construct supporting ON CONFLICT."""
    dialect_name = session.get_bind().dialect.name
    if dialect_name == "postgresql":
        return postgresql.insert(model)
    if dialect_name == "sqlite":
        return sqlite.insert(model)
    raise NotImplementedError(f"Upsert is not supported for dialect '{dialect_name}'")


def insert_or_update(
    session: Session,
    model,
    values: Dict[str, Any],
    conflict_columns: Sequence[str],
    update_columns: Optional[Iterable[str]] = None,
) -> int:
    """
    Insert a row, or update it when the natural key already exists.

    Emits a single ``INSERT ... ON CONFLICT (...) DO UPDATE ... RETURNING id``
    so concurrent batches racing on the same natural key converge on one row.

    Args:
        session: Active session
        model: Mapped model class
        values: Column values for the insert
        conflict_columns: Columns of the unique constraint that identifies the row
        update_columns: Columns overwritten on conflict. When empty, the conflict
            columns are re-assigned so RETURNING still yields the existing id.

    Returns:
        Surrogate id of the inserted or existing row
    """
    stmt = _dialect_insert(session, model).values(**values)
    columns = list(update_columns or []) or list(conflict_columns)
    set_ = {column: stmt.excluded[column] for column in columns}
    if "updated_at" in model.__table__.columns and update_columns:
        set_["updated_at"] = stmt.excluded["updated_at"]
    stmt = stmt.on_conflict_do_update(index_elements=list(conflict_columns), set_=set_)
    stmt = stmt.returning(model.__table__.c.id)
    return session.execute(stmt).scalar_one()


def insert_or_ignore(
    session: Session,
    model,
    values: Dict[str, Any],
    conflict_columns: Sequence[str],
) -> bool:
    """
    Insert a row unless its unique key already exists.

    Returns:
        True if a row was inserted, False if it already existed
    """
    stmt = _dialect_insert(session, model).values(**values)
    stmt = stmt.on_conflict_do_nothing(index_elements=list(conflict_columns))
    result = session.execute(stmt)
    return bool(result.rowcount)


# ============================================================================
# Maintenance
# ============================================================================


def truncate_recipe_data(session: Session) -> Dict[str, int]:
    """
    Delete every recipe and its recipe-scoped rows.

    Reference data (authors, systems, film simulations, setting definitions)
    is kept. Runs inside the caller's transaction.

    Returns:
        Number of rows deleted per table
    """
    from film_recipes.models import (
        Image,
        Recipe,
        RecipeSettingRange,
        RecipeSettingValue,
        RecipeTag,
        Tag,
    )

    deleted: Dict[str, int] = {}
    for model in (RecipeSettingValue, RecipeSettingRange, RecipeTag, Image, Recipe):
        result = session.execute(delete(model))
        deleted[model.__tablename__] = result.rowcount
    session.execute(update(Tag).values(usage_count=0))
    return deleted


def table_names(engine: Optional[Engine] = None) -> List[str]:
    """List the tables present in the database."""
    if engine is None:
        engine = get_engine()
    return inspect(engine).get_table_names()


def verify_database() -> bool:
    """
    Verify that the database is accessible and has tables.

    Returns:
        True if database is valid, False otherwise
    """
    try:
        tables = table_names()
        expected_tables = ["recipes", "setting_definitions"]
        return all(table in tables for table in expected_tables)
    except Exception as e:
        logger.error(f"Database verification failed: {e}")
        return False


def count_rows(session: Session, model) -> int:
    """Count rows of a mapped model."""
    return session.execute(select(func.count()).select_from(model)).scalar_one()


def reset_database(confirm: bool = False, engine: Optional[Engine] = None) -> None:
    """
    Drop all tables and recreate them empty.

    Args:
        confirm: Must be True to actually reset
        engine: Optional engine to use. If None, uses global engine.

    Raises:
        ValueError: If confirm is not True
    """
    if not confirm:
        raise ValueError("Must pass confirm=True to reset database. This will delete all data!")

    logger.warning("RESETTING DATABASE - ALL DATA WILL BE LOST")

    if engine is None:
        engine = get_engine()

    from film_recipes import models  # noqa: F401

    Base.metadata.drop_all(engine)
    logger.info("All tables dropped")

    Base.metadata.create_all(engine)
    logger.info("Tables recreated")


def initialize_app_database() -> None:
    """
    Initialize the application database.

    Creates the database and tables if they don't exist.
    """
    config = get_config()

    if not config.database_exists():
        logger.info(f"Creating new database at: {config.database_path}")

    engine = get_engine()
    init_database(engine)

    if verify_database():
        logger.info("Database initialized and verified successfully")
    else:
        logger.warning("Database verification failed - tables may not exist")
