from types import SimpleNamespace

import anthropic
import httpx
import pytest

from claude_client import SYSTEM_PROMPT, build_prompt, make_client, summarize_todos
from database import TodoRecord
from errors import EmptyCompletion, NoPendingItems, UpstreamUnavailable

from .fakes import FakeClaudeClient


def _todos():
    return [
        TodoRecord(id="1", title="Write report", description="Q3 numbers for finance"),
        TodoRecord(id="2", title="Call plumber", description=None),
    ]


def test_build_prompt_lists_titles_and_descriptions_in_order() -> None:
    prompt = build_prompt(_todos(), "October 27, 2025")

    assert prompt.startswith("Current date: October 27, 2025")
    assert "Pending todos (2):" in prompt
    assert "1. Write report\n   Description: Q3 numbers for finance" in prompt
    assert "2. Call plumber" in prompt
    assert prompt.index("Write report") < prompt.index("Call plumber")
    assert build_prompt(_todos(), "October 27, 2025") == prompt


def test_summarize_sends_one_request_and_returns_text() -> None:
    client = FakeClaudeClient(next_text="  You have 2 things to do.  ")

    summary = summarize_todos(client, _todos(), "October 27, 2025", model="test-model", max_tokens=300)

    assert summary.text == "You have 2 things to do."
    assert summary.todo_count == 2
    assert len(client.calls) == 1
    call = client.calls[0]
    assert call["model"] == "test-model"
    assert call["max_tokens"] == 300
    assert call["system"] == SYSTEM_PROMPT
    assert "Write report" in call["messages"][0]["content"]
    assert "stream" not in call


def test_summarize_without_todos_never_calls_claude() -> None:
    client = FakeClaudeClient()
    with pytest.raises(NoPendingItems):
        summarize_todos(client, [], "today")
    assert client.calls == []


def test_summarize_without_client_is_upstream_unavailable() -> None:
    with pytest.raises(UpstreamUnavailable):
        summarize_todos(None, _todos(), "today")


def test_api_errors_become_upstream_unavailable() -> None:
    request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
    client = FakeClaudeClient(error=anthropic.APIConnectionError(request=request))

    with pytest.raises(UpstreamUnavailable):
        summarize_todos(client, _todos(), "today")
    assert len(client.calls) == 1


def test_blank_completion_is_empty_completion() -> None:
    client = FakeClaudeClient(next_text="   ")
    with pytest.raises(EmptyCompletion):
        summarize_todos(client, _todos(), "today")


def test_non_text_blocks_are_ignored() -> None:
    client = FakeClaudeClient()
    client.messages.create = lambda **kwargs: SimpleNamespace(
        content=[SimpleNamespace(type="tool_use", input={})], stop_reason="tool_use"
    )
    with pytest.raises(EmptyCompletion):
        summarize_todos(client, _todos(), "today")


def test_make_client_needs_an_api_key() -> None:
    assert make_client(None) is None
    assert make_client("") is None
    assert make_client("sk-ant-test").max_retries == 0
