from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker
from core.config import settings
from core.errors import PersistenceError
from core.logging_config import get_logger
# Use the same Base as models to ensure one metadata registry
from models.base import Base

logger = get_logger(__name__)

_connect_args = {}
if settings.SQLALCHEMY_DATABASE_URI.startswith("sqlite"):
    # FastAPI runs sync endpoints in a threadpool
    _connect_args = {"check_same_thread": False}

engine = create_engine(
    settings.SQLALCHEMY_DATABASE_URI,
    pool_pre_ping=True,
    pool_recycle=3600,
    connect_args=_connect_args,
    future=True
)

SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, future=True)

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def commit_or_raise(db, action: str):
    """Commit, or roll back and surface the failure as a PersistenceError."""
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("%s failed", action)
        raise PersistenceError(f"Could not {action}") from e
