from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base

from podcast_generator.core.config import settings

# Create the SQLAlchemy engine.
# The `connect_args` is specific to SQLite and is needed to allow
# the same connection to be used across different threads, which is
# a requirement for FastAPI's threadpool-run sync endpoints.
engine = create_engine(
    settings.DATABASE_URL,
    connect_args={"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}
)

# Create a configured "Session" class.
# This is not a session instance, but a factory for creating them.
# autocommit=False and autoflush=False are standard settings for
# web applications, giving more control over transaction management.
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Create a Base class for our SQLAlchemy models to inherit from.
# All of our schema/table models will be subclasses of this Base.
Base = declarative_base()


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    """SQLite ignores ON DELETE CASCADE unless foreign keys are switched on per connection."""
    if type(dbapi_connection).__module__.startswith("sqlite3"):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


# --- Dependency for getting a DB session ---
def get_db():
    """
    A dependency function that creates and yields a new database session
    for each request. It ensures the session is always closed, even if
    an error occurs.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
