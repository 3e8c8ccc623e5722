"""Database session and engine configuration."""
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from selva_app.core.config import get_settings
from selva_app.core.logger import setup_logger
from selva_app.database.models import Base

settings = get_settings()
logger = setup_logger(__name__)

# If using SQLite, allow cross-thread usage (FastAPI runs sync routes in a threadpool)
connect_args = {}
if settings.DATABASE_URL.startswith("sqlite"):
    connect_args = {"check_same_thread": False}

engine = create_engine(settings.DATABASE_URL, connect_args=connect_args)

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    """SQLite ignores ON DELETE CASCADE unless foreign keys are switched on per connection."""
    module = type(dbapi_connection).__module__
    if module.startswith("sqlite3") or module.startswith("pysqlite"):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def init_db(bind=None):
    """Create tables and apply development migrations."""
    bind = bind or engine
    Base.metadata.create_all(bind=bind)
    _run_dev_migrations(bind)


def _run_dev_migrations(bind):
    """Run simple ALTER TABLE migrations for development SQLite DBs.

    Databases created before roles and the onboarding quiz existed lack
    `users.role` and `profiles.quiz_completed`. For anything beyond adding
    columns, use a proper migration tool (Alembic).
    """
    if not str(bind.url).startswith('sqlite'):
        return
    statements = (
        ("users.role", "ALTER TABLE users ADD COLUMN role VARCHAR DEFAULT 'user' NOT NULL"),
        ("profiles.quiz_completed", "ALTER TABLE profiles ADD COLUMN quiz_completed INTEGER DEFAULT 0"),
    )
    with bind.connect() as conn:
        existing = {}
        for table in ("users", "profiles"):
            rows = conn.exec_driver_sql(f"PRAGMA table_info('{table}')").fetchall()
            existing[table] = {r[1] for r in rows}
        for column, sql in statements:
            table, name = column.split(".")
            if name in existing[table]:
                continue
            conn.exec_driver_sql(sql)
            conn.commit()
            logger.info(f"[MIGRATION] Added {column} column")


def get_db():
    """Dependency for database sessions."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
