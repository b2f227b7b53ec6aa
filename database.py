import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Text, Uuid, create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.types import TypeDecorator

from config import DATABASE_URL

logger = logging.getLogger(__name__)

TODOS_TABLE = "todos"

# Shown to the user when the table has not been provisioned yet.
SETUP_SQL = """CREATE TABLE IF NOT EXISTS todos (
  id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
  title TEXT NOT NULL,
  description TEXT,
  completed BOOLEAN DEFAULT FALSE,
  created_at TIMESTAMP WITH TIME ZONE DEFAULT NOW(),
  updated_at TIMESTAMP WITH TIME ZONE DEFAULT NOW()
);"""

Base = declarative_base()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


class UTCDateTime(TypeDecorator):
    """Timezone-aware UTC datetimes on every backend (SQLite drops tzinfo)."""

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value

    def process_result_value(self, value, dialect):
        if value is not None and value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value


class TodoRecord(Base):
    __tablename__ = TODOS_TABLE

    # Native uuid on Postgres, CHAR(32) elsewhere; always a str in Python
    id = Column(Uuid(as_uuid=False), primary_key=True, default=new_id)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    completed = Column(Boolean, nullable=False, default=False)
    created_at = Column(UTCDateTime(), nullable=False, default=utcnow)
    updated_at = Column(UTCDateTime(), nullable=False, default=utcnow)


def make_engine(url: str = DATABASE_URL) -> Engine:
    connect_args = {}
    if url.startswith("sqlite"):
        # FastAPI runs sync endpoints in a threadpool
        connect_args["check_same_thread"] = False
    return create_engine(url, connect_args=connect_args, pool_pre_ping=True)


def make_session_factory(bind: Engine) -> sessionmaker:
    return sessionmaker(bind=bind, autocommit=False, autoflush=False, expire_on_commit=False)


def create_tables(bind: Engine) -> None:
    """Provision the todos table (no-op when it already exists)."""
    Base.metadata.create_all(bind=bind)
    logger.info("✓ Ensured table '%s' exists", TODOS_TABLE)


engine = make_engine()
SessionLocal = make_session_factory(engine)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    create_tables(engine)
