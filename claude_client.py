import logging
from dataclasses import dataclass
from typing import Optional, Sequence

import anthropic
from anthropic import Anthropic

from config import ANTHROPIC_API_KEY, CLAUDE_MAX_TOKENS, CLAUDE_MODEL, CLAUDE_TIMEOUT_SECONDS
from database import TodoRecord
from errors import EmptyCompletion, NoPendingItems, UpstreamUnavailable

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are a helpful assistant that summarizes a personal todo list.

Write a short, friendly status update suitable for posting in a team chat channel.

Guidelines:
* Open with one sentence stating how many tasks are pending
* Group related tasks together and call out anything that looks urgent
* Mention every task by its title so nothing gets lost
* Keep it under 200 words and use plain text with simple bullet points
* Do not invent tasks, deadlines or details that are not in the list"""


@dataclass(frozen=True)
class TodoSummary:
    text: str
    todo_count: int


def make_client(api_key: Optional[str] = ANTHROPIC_API_KEY) -> Optional[Anthropic]:
    """Build the Claude client, or None when no API key is configured."""
    if not api_key:
        return None
    # Single attempt: failures are reported to the user, who retries by hand
    return Anthropic(api_key=api_key, timeout=CLAUDE_TIMEOUT_SECONDS, max_retries=0)


def build_prompt(todos: Sequence[TodoRecord], current_date: str) -> str:
    """Deterministic prompt listing each todo's title and description in order."""
    lines = [f"Current date: {current_date}", "", f"Pending todos ({len(todos)}):"]
    for i, todo in enumerate(todos, start=1):
        lines.append(f"{i}. {todo.title}")
        if todo.description:
            lines.append(f"   Description: {todo.description}")
    lines.append("")
    lines.append("Summarize these pending todos.")
    return "\n".join(lines)


def _extract_text(response) -> str:
    parts = []
    for block in getattr(response, "content", None) or []:
        if getattr(block, "type", None) == "text" and getattr(block, "text", None):
            parts.append(block.text)
    return "".join(parts).strip()


def summarize_todos(
    client: Optional[Anthropic],
    todos: Sequence[TodoRecord],
    current_date: str,
    model: str = CLAUDE_MODEL,
    max_tokens: int = CLAUDE_MAX_TOKENS,
) -> TodoSummary:
    """Summarize pending todos through the Claude API (one request, no streaming)"""
    if not todos:
        raise NoPendingItems()
    if client is None:
        raise UpstreamUnavailable("Claude is not configured: set ANTHROPIC_API_KEY")

    prompt = build_prompt(todos, current_date)

    logger.info("🤖 Sending %d todo(s) to Claude (%s)", len(todos), model)
    try:
        response = client.messages.create(
            model=model,
            max_tokens=max_tokens,
            system=SYSTEM_PROMPT,
            messages=[
                {"role": "user", "content": prompt}
            ],
        )
    except anthropic.APIError as e:
        logger.error("❌ Claude request failed: %s", e)
        raise UpstreamUnavailable(f"Failed to generate summary: {e}") from e

    text = _extract_text(response)
    if not text:
        logger.error("❌ Claude returned no text (stop_reason=%s)", getattr(response, "stop_reason", None))
        raise EmptyCompletion()

    logger.info("✓ Summary generated (%d chars)", len(text))
    return TodoSummary(text=text, todo_count=len(todos))
