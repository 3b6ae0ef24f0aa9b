import asyncio

import pytest

from conftest import FakeClient
from insight_copilot.agent.remote_intent import PERMISSIVE_DEFAULT, RemoteIntentClassifier


@pytest.mark.parametrize(
    "reply, expected",
    [("YES", True), ("yes.", True), ("  Yes, it is about data", True), ("NO", False), ("No.", False)],
)
def test_reply_is_normalised(reply: str, expected: bool) -> None:
    client = FakeClient(replies=[reply])
    classifier = RemoteIntentClassifier(client)
    assert asyncio.run(classifier.is_analytics("How do I read a histogram?")) is expected
    assert "How do I read a histogram?" in client.prompt()
    assert "YES or NO" in client.prompt()


def test_failure_uses_permissive_default() -> None:
    classifier = RemoteIntentClassifier(FakeClient(error=TimeoutError("slow")))
    assert PERMISSIVE_DEFAULT is True
    assert asyncio.run(classifier.is_analytics("anything")) is True


def test_failure_honours_configured_default() -> None:
    classifier = RemoteIntentClassifier(FakeClient(error=RuntimeError("down")), safe_default=False)
    assert asyncio.run(classifier.is_analytics("anything")) is False
