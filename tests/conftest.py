from typing import Any, List, Optional

import pytest

from insight_copilot.agent.router import ResponseRouter
from insight_copilot.agent.state import ConversationState


class FakeClient:
    """Completion client that replays canned replies and records calls."""

    def __init__(self, replies: Optional[List[str]] = None, error: Optional[Exception] = None) -> None:
        self.replies = list(replies or [])
        self.error = error
        self.calls: List[Any] = []

    async def generate(self, contents: Any) -> str:
        self.calls.append(contents)
        if self.error is not None:
            raise self.error
        if self.replies:
            return self.replies.pop(0)
        return "Here is an answer."

    def prompt(self, index: int = -1) -> str:
        return self.calls[index][0]["parts"][0]["text"]


class FakeClassifier:
    def __init__(self, verdict: bool = True) -> None:
        self.verdict = verdict
        self.calls: List[str] = []

    async def is_analytics(self, query: str) -> bool:
        self.calls.append(query)
        return self.verdict


@pytest.fixture
def client() -> FakeClient:
    return FakeClient()


@pytest.fixture
def classifier() -> FakeClassifier:
    return FakeClassifier()


@pytest.fixture
def router(client: FakeClient, classifier: FakeClassifier) -> ResponseRouter:
    return ResponseRouter(client, state=ConversationState(), classifier=classifier)
