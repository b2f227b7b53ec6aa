"""
View-state helpers for clients of the todo API.

These mirror what the web client decides on: which tab a todo belongs to,
whether the summarize button is enabled, and whether a failed list call means
"the database table still has to be created" rather than a generic error.
"""
from enum import Enum
from typing import Any, Iterable, List, Mapping, Optional, Tuple

from errors import StoreUnavailable
from utils import is_http_url


class ViewState(str, Enum):
    READY = "ready"
    SETUP_REQUIRED = "setup_required"
    ERROR = "error"


def _completed(todo: Any) -> bool:
    if isinstance(todo, Mapping):
        return bool(todo.get("completed"))
    return bool(getattr(todo, "completed", False))


def split_todos(todos: Iterable[Any]) -> Tuple[List[Any], List[Any]]:
    """Split into (pending, completed), keeping the input order in both."""
    pending, completed = [], []
    for todo in todos:
        (completed if _completed(todo) else pending).append(todo)
    return pending, completed


def classify_list_error(body: Optional[Mapping[str, Any]]) -> ViewState:
    if not body:
        return ViewState.ERROR
    if body.get("code") == StoreUnavailable.code:
        return ViewState.SETUP_REQUIRED

    # Older servers only send the database error text
    message = str(body.get("error") or "")
    if "relation" in message and "does not exist" in message:
        return ViewState.SETUP_REQUIRED
    return ViewState.ERROR


def list_view_state(status_code: int, body: Any) -> ViewState:
    if 200 <= status_code < 300:
        return ViewState.READY
    return classify_list_error(body if isinstance(body, Mapping) else None)


def can_summarize(todos: Iterable[Any], webhook_url: Optional[str]) -> bool:
    pending, _ = split_todos(todos)
    return bool(pending) and is_http_url(webhook_url)
