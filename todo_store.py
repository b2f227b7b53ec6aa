import logging
import uuid
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import OperationalError, ProgrammingError, SQLAlchemyError
from sqlalchemy.orm import Session

from database import SETUP_SQL, TODOS_TABLE, TodoRecord, new_id, utcnow
from errors import NotFound, StoreError, StoreUnavailable, ValidationError

logger = logging.getLogger(__name__)

# Fields a PATCH may change; id and timestamps are managed here.
UPDATABLE_FIELDS = ("title", "description", "completed")

# Kept in every StoreUnavailable message so clients matching on the
# Postgres error text still detect the "setup required" case.
MISSING_TABLE_MARKER = f'relation "{TODOS_TABLE}" does not exist'


def _is_missing_table(exc: Exception) -> bool:
    text = str(getattr(exc, "orig", None) or exc).lower()
    return "no such table" in text or ("relation" in text and "does not exist" in text)


@contextmanager
def _store_errors(db: Session) -> Iterator[None]:
    """Translate database failures into StoreUnavailable or StoreError."""
    try:
        yield
    except (OperationalError, ProgrammingError) as e:
        db.rollback()
        if _is_missing_table(e):
            message = MISSING_TABLE_MARKER
            logger.warning("⚠️  Table '%s' is missing, setup required", TODOS_TABLE)
        else:
            message = f"{MISSING_TABLE_MARKER} or the database is unreachable: {e.orig or e}"
            logger.error("❌ Database unavailable: %s", e.orig or e)
        raise StoreUnavailable(message, setup_sql=SETUP_SQL) from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("❌ Database error: %s", e.__class__.__name__)
        raise StoreError(f"Database error: {e.__class__.__name__}") from e


def _clean_title(title: Any) -> str:
    if not isinstance(title, str) or not title.strip():
        raise ValidationError("Title is required")
    return title.strip()


def _load(db: Session, todo_id: str) -> TodoRecord:
    # Ids are UUIDs; anything else cannot exist and must not reach the database
    try:
        key = str(uuid.UUID(str(todo_id)))
    except ValueError:
        raise NotFound(todo_id) from None
    record = db.get(TodoRecord, key)
    if record is None:
        raise NotFound(todo_id)
    return record


def list_todos(db: Session, completed: Optional[bool] = None) -> List[TodoRecord]:
    """All todos, newest first; optionally only completed or only pending ones."""
    stmt = select(TodoRecord)
    if completed is not None:
        stmt = stmt.where(TodoRecord.completed == completed)
    stmt = stmt.order_by(TodoRecord.created_at.desc(), TodoRecord.id)

    with _store_errors(db):
        return list(db.scalars(stmt).all())


def get_todo(db: Session, todo_id: str) -> TodoRecord:
    with _store_errors(db):
        return _load(db, todo_id)


def create_todo(db: Session, title: str, description: Optional[str] = None) -> TodoRecord:
    clean_title = _clean_title(title)
    now = utcnow()
    record = TodoRecord(
        id=new_id(),
        title=clean_title,
        description=description,
        completed=False,
        created_at=now,
        updated_at=now,
    )

    with _store_errors(db):
        db.add(record)
        db.commit()

    logger.info("✓ Created todo %s", record.id)
    return record


def update_todo(db: Session, todo_id: str, fields: Dict[str, Any]) -> TodoRecord:
    """
    Apply a partial update.

    Only keys in UPDATABLE_FIELDS are applied, anything else in `fields` is
    ignored. `updated_at` is refreshed on every call, even when the values
    written are the ones already stored.
    """
    changes = {k: v for k, v in fields.items() if k in UPDATABLE_FIELDS}
    if "title" in changes:
        changes["title"] = _clean_title(changes["title"])
    if "completed" in changes and not isinstance(changes["completed"], bool):
        raise ValidationError("completed must be a boolean")

    with _store_errors(db):
        record = _load(db, todo_id)
        for name, value in changes.items():
            setattr(record, name, value)
        record.updated_at = utcnow()
        db.commit()

    logger.info("✓ Updated todo %s (%s)", todo_id, ", ".join(sorted(changes)) or "touch")
    return record


def delete_todo(db: Session, todo_id: str) -> None:
    with _store_errors(db):
        record = _load(db, todo_id)
        db.delete(record)
        db.commit()

    logger.info("🗑️  Deleted todo %s", todo_id)
