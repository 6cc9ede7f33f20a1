from pathlib import Path
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine

from hackorsnooze.core.config import DB_URL


def enable_sqlite_foreign_keys(engine: Engine) -> None:
    """SQLite ignores ON DELETE CASCADE unless foreign keys are switched on per connection."""
    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


if DB_URL.startswith("sqlite:///.data/"):
    # Ensure the .data directory exists
    Path(".data").mkdir(exist_ok=True)

if DB_URL.startswith("sqlite"):
    engine = create_engine(DB_URL, echo=False, connect_args={"check_same_thread": False})
else:
    engine = create_engine(
        DB_URL,
        echo=False,
        pool_size=10,
        max_overflow=20,
        pool_pre_ping=True,
        pool_recycle=3600,
    )
enable_sqlite_foreign_keys(engine)

# Create all tables on import
from hackorsnooze.core.db.tables.base import Base
from hackorsnooze.core.db.tables.user import User
from hackorsnooze.core.db.tables.story import Story
from hackorsnooze.core.db.tables.favorite import Favorite
from hackorsnooze.core.db.tables.recovery import Recovery

Base.metadata.create_all(engine)
