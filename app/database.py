from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from app.config import settings
import logging

# Set up logging
logger = logging.getLogger(__name__)


def _engine_kwargs(url: str) -> dict:
    """SQLite (local runs and tests) needs a shared connection; PostgreSQL gets a real pool."""
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return kwargs
    return {
        "pool_pre_ping": True,  # Auto-reconnect on broken connections
        "pool_size": 5,
        "max_overflow": 10,
        "pool_timeout": 30,
        "pool_recycle": 1800,
    }


database_url = settings.DATABASE_URL

# For Neon.tech, ensure SSL is configured
if "neon.tech" in database_url and "sslmode" not in database_url:
    database_url += "&sslmode=require" if "?" in database_url else "?sslmode=require"
    logger.info("Added sslmode=require to Neon database URL")

engine = create_engine(database_url, **_engine_kwargs(database_url))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

# Registers models on Base.metadata before Alembic autogenerate / create_all
from app import models  # noqa: E402,F401
