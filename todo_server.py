"""
Todo Summary Server
CRUD API over the todos table, plus an endpoint that summarizes pending todos
with Claude and posts the summary to a Slack-compatible webhook

Run with `python todo_server.py` or `uvicorn todo_server:app`; logging is set up
in either case.

Errors are returned as {"error": ..., "code": ...}. Clients can feed a failed
GET /todos response to todo_view.list_view_state() to tell "setup required"
(code store_unavailable) apart from other errors, and use split_todos() and
can_summarize() for the pending/completed tabs and the summarize button.
"""
import logging
from contextlib import asynccontextmanager
from typing import Iterator, Optional

import requests
from anthropic import Anthropic
from fastapi import Depends, FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

import config
from claude_client import make_client
from database import SessionLocal, create_tables, engine
from errors import TodoAppError, ValidationError
from logging_setup import ensure_logging
from models import SummarizeRequest, SummarizeResponse, Todo, TodoCreate, TodoUpdate
from summary_pipeline import run_summary
from todo_store import create_todo, delete_todo, get_todo, list_todos, update_todo

logger = logging.getLogger(__name__)

# Initialize clients
claude = make_client()
http_session = requests.Session()


@asynccontextmanager
async def lifespan(app: FastAPI):
    ensure_logging(config.LOG_LEVEL, config.LOG_FILE)
    if config.AUTO_CREATE_TABLES:
        create_tables(engine)
    if claude is None:
        logger.warning("⚠️  ANTHROPIC_API_KEY not set, /summarize will fail")
    yield
    http_session.close()


app = FastAPI(title="Todo Summary Assistant", lifespan=lifespan)


def get_db() -> Iterator[Session]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_claude() -> Optional[Anthropic]:
    return claude


def get_http_session() -> requests.Session:
    return http_session


@app.exception_handler(TodoAppError)
async def todo_app_error_handler(request: Request, exc: TodoAppError):
    if exc.status_code >= 500:
        logger.error("❌ %s %s -> %s: %s", request.method, request.url.path, exc.code, exc.message)
    else:
        logger.info("ℹ️  %s %s -> %s: %s", request.method, request.url.path, exc.code, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    details = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ())[1:]) or 'body'}: {err.get('msg')}"
        for err in exc.errors()
    )
    error = ValidationError(f"Invalid request: {details}")
    return JSONResponse(status_code=error.status_code, content=error.to_body())


@app.get("/")
def root():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": "Todo Summary Assistant",
        "version": "1.0.0"
    }


@app.get("/health")
def health():
    """Detailed health check"""
    return {
        "status": "healthy",
        "claude_configured": bool(config.ANTHROPIC_API_KEY),
        "database_backend": engine.url.get_backend_name(),
        "auto_create_tables": config.AUTO_CREATE_TABLES,
    }


@app.get("/todos", response_model=list[Todo])
def get_todos(completed: Optional[bool] = None, db: Session = Depends(get_db)):
    return list_todos(db, completed=completed)


@app.post("/todos", response_model=Todo, status_code=201)
def post_todo(body: TodoCreate, db: Session = Depends(get_db)):
    return create_todo(db, body.title, body.description)


@app.get("/todos/{todo_id}", response_model=Todo)
def get_one_todo(todo_id: str, db: Session = Depends(get_db)):
    return get_todo(db, todo_id)


@app.patch("/todos/{todo_id}", response_model=Todo)
def patch_todo(todo_id: str, body: TodoUpdate, db: Session = Depends(get_db)):
    # exclude_unset keeps "description": null (clear) apart from an omitted field
    return update_todo(db, todo_id, body.model_dump(exclude_unset=True))


@app.delete("/todos/{todo_id}", status_code=204)
def remove_todo(todo_id: str, db: Session = Depends(get_db)):
    delete_todo(db, todo_id)
    return Response(status_code=204)


@app.post("/summarize", response_model=SummarizeResponse)
def summarize(
    body: SummarizeRequest,
    db: Session = Depends(get_db),
    claude_client: Optional[Anthropic] = Depends(get_claude),
    session: requests.Session = Depends(get_http_session),
):
    """
    Summarize all pending todos and send the summary to the given webhook
    """
    outcome = run_summary(db, claude_client, body.webhook_url, session=session)
    return SummarizeResponse(todo_count=outcome.todo_count, status=outcome.status)


if __name__ == "__main__":
    import uvicorn
    from logging_setup import setup_logging

    setup_logging(config.LOG_LEVEL, config.LOG_FILE)
    logger.info("🚀 Starting todo server on port %s", config.PORT)
    uvicorn.run(app, host="0.0.0.0", port=config.PORT, log_config=None)
