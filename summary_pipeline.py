"""
Summarize-and-notify workflow.

validate destination -> list pending todos -> summarize with Claude -> post to webhook

Every stage is a hard gate: the first error propagates unchanged and the
remaining stages never run, so a summary is either generated and delivered
or the caller learns exactly which stage failed.
"""
import logging
from dataclasses import dataclass
from typing import Optional

import requests
from anthropic import Anthropic
from sqlalchemy.orm import Session

from claude_client import summarize_todos
from errors import NoPendingItems
from slack_notifier import build_payload, post_summary, validate_webhook_url
from todo_store import list_todos
from utils import get_formatted_date

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SummaryOutcome:
    todo_count: int
    status: str = "success"


def run_summary(
    db: Session,
    claude: Optional[Anthropic],
    webhook_url: Optional[str],
    session: Optional[requests.Session] = None,
) -> SummaryOutcome:
    url = validate_webhook_url(webhook_url)

    pending = list_todos(db, completed=False)
    if not pending:
        logger.info("ℹ️  No pending todos, nothing to summarize")
        raise NoPendingItems()

    # Oldest first reads more naturally in the summary
    pending = sorted(pending, key=lambda t: (t.created_at, t.id))
    logger.info("📝 Summarizing %d pending todo(s)", len(pending))

    date_label, full_date = get_formatted_date()
    summary = summarize_todos(claude, pending, full_date)

    post_summary(url, build_payload(summary.text, summary.todo_count, date_label), session=session)

    logger.info("✅ Summary of %d todo(s) sent", summary.todo_count)
    return SummaryOutcome(todo_count=summary.todo_count)
