"""
Error taxonomy shared by the store, the summarizer, the notifier and the HTTP layer.

Each error carries a stable `code` that is returned to clients next to the
human-readable message, plus the HTTP status the server answers with.
"""
from typing import Any, Dict, Optional


class TodoAppError(Exception):
    code = "internal_error"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_body(self) -> Dict[str, Any]:
        return {"error": self.message, "code": self.code}


class ValidationError(TodoAppError):
    code = "validation_error"
    status_code = 400


class NotFound(TodoAppError):
    code = "not_found"
    status_code = 404

    def __init__(self, todo_id: str):
        super().__init__(f"Todo {todo_id} not found")
        self.todo_id = todo_id


class StoreUnavailable(TodoAppError):
    """The todos table is missing or the database cannot be reached."""

    code = "store_unavailable"
    status_code = 500

    def __init__(self, message: str, setup_sql: Optional[str] = None):
        super().__init__(message)
        self.setup_sql = setup_sql

    def to_body(self) -> Dict[str, Any]:
        body = super().to_body()
        if self.setup_sql:
            body["setup_sql"] = self.setup_sql
        return body


class StoreError(TodoAppError):
    """Any other database failure (constraint violation, bad data, driver error)."""

    code = "store_error"
    status_code = 500


class NoPendingItems(TodoAppError):
    code = "no_pending_items"
    status_code = 400

    def __init__(self, message: str = "No pending todos to summarize"):
        super().__init__(message)


class UpstreamUnavailable(TodoAppError):
    code = "upstream_unavailable"
    status_code = 500


class EmptyCompletion(TodoAppError):
    code = "empty_completion"
    status_code = 500

    def __init__(self, message: str = "Claude returned an empty summary"):
        super().__init__(message)


class InvalidDestination(TodoAppError):
    code = "invalid_destination"
    status_code = 400


class DeliveryFailed(TodoAppError):
    code = "delivery_failed"
    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        # HTTP status returned by the webhook, None when the request never completed
        self.delivery_status = status_code

    def to_body(self) -> Dict[str, Any]:
        body = super().to_body()
        if self.delivery_status is not None:
            body["delivery_status"] = self.delivery_status
        return body
