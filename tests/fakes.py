from types import SimpleNamespace
from typing import Any, Dict, List, Optional


class FakeMessages:
    def __init__(self, owner: "FakeClaudeClient") -> None:
        self._owner = owner

    def create(self, **kwargs: Any):
        self._owner.calls.append(kwargs)
        if self._owner.error is not None:
            raise self._owner.error

        if self._owner.next_text is None:
            # Echo the prompt so tests can check which todos were sent
            prompt = kwargs["messages"][0]["content"]
            text = f"Here is your summary:\n{prompt}"
        else:
            text = self._owner.next_text

        return SimpleNamespace(
            content=[SimpleNamespace(type="text", text=text)],
            stop_reason="end_turn",
        )


class FakeClaudeClient:
    """
    Deterministic stand-in for anthropic.Anthropic.

    - Records every messages.create(...) call
    - Returns `next_text`, or an echo of the prompt when it is None
    - Raises `error` instead when set
    """

    def __init__(self, next_text: Optional[str] = None, error: Optional[Exception] = None) -> None:
        self.next_text = next_text
        self.error = error
        self.calls: List[Dict[str, Any]] = []
        self.messages = FakeMessages(self)


class FakeHTTPSession:
    """Stand-in for requests.Session that records POSTs instead of sending them."""

    def __init__(self, status_code: int = 200, error: Optional[Exception] = None) -> None:
        self.status_code = status_code
        self.error = error
        self.posts: List[Dict[str, Any]] = []

    def post(self, url: str, json: Any = None, timeout: Optional[float] = None, **kwargs: Any):
        self.posts.append({"url": url, "json": json, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return SimpleNamespace(status_code=self.status_code, text="ok")
