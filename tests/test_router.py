import asyncio

import pytest

from conftest import FakeClassifier, FakeClient
from insight_copilot.agent import router as router_module
from insight_copilot.agent.router import ResponseRouter
from insight_copilot.agent.state import ConversationState

SALES = [{"month": "Jan", "sales": 100}, {"month": "Feb", "sales": 150}]


def route(router: ResponseRouter, query: str, dataset=None, file_name=None):
    return asyncio.run(router.route(query, dataset, file_name))


def roles(router: ResponseRouter) -> list:
    return [t.role for t in router.state.turns]


@pytest.mark.parametrize(
    "query", ["hi", "hello", "thanks", "thank you", "bye", "good morning", "how are you"]
)
def test_casual_never_calls_out(router, client, classifier, query: str) -> None:
    reply = route(router, query)
    assert reply.kind == "casual"
    assert reply.answer == router_module.CASUAL_ANSWER
    assert reply.follow_ups == router_module.CASUAL_FOLLOW_UPS
    assert reply.chart is None
    assert client.calls == []
    assert classifier.calls == []


@pytest.mark.parametrize("query", ["zzzz", "xkqpmn", "hi-zzzz"])
def test_gibberish_short_circuits(router, client, classifier, query: str) -> None:
    reply = route(router, query)
    assert reply.kind == "gibberish"
    assert reply.follow_ups == router_module.GIBBERISH_FOLLOW_UPS
    assert client.calls == []
    assert classifier.calls == []


def test_analytics_hint_skips_remote_classifier(router, client, classifier) -> None:
    client.replies = ['Regression fits a line.\nFOLLOW_UPS: ["What is R²?"]']
    reply = route(router, "Explain regression")
    assert reply.kind == "analytics"
    assert reply.answer == "Regression fits a line."
    assert reply.follow_ups == ["What is R²?"]
    assert classifier.calls == []
    assert len(client.calls) == 1
    assert "Explain regression" in client.prompt()


def test_out_of_domain_refusal() -> None:
    client, classifier = FakeClient(), FakeClassifier(verdict=False)
    router = ResponseRouter(client, classifier=classifier)
    reply = route(router, "Who won the football match")
    assert reply.kind == "out-of-domain"
    assert reply.follow_ups == router_module.OUT_OF_DOMAIN_FOLLOW_UPS
    assert classifier.calls == ["Who won the football match"]
    assert client.calls == []


def test_remote_classifier_can_admit_query(router, client, classifier) -> None:
    reply = route(router, "How should I read a histogram bin width")
    assert classifier.calls == ["How should I read a histogram bin width"]
    assert reply.kind == "analytics"
    assert len(client.calls) == 1


def test_dataset_upload_builds_bar_chart(router, client, classifier) -> None:
    reply = route(router, "here you go", dataset=SALES, file_name="sales.csv")
    assert reply.kind == "analytics"
    assert "sales.csv" in reply.answer
    assert reply.chart is not None
    assert reply.chart.type == "bar"
    assert (reply.chart.x_key, reply.chart.y_key) == ("month", "sales")
    assert reply.chart.data == SALES
    assert router.state.last_chart is reply.chart
    assert client.calls == []
    assert classifier.calls == []


def test_dataset_out_of_domain_text_still_charts() -> None:
    classifier = FakeClassifier(verdict=False)
    router = ResponseRouter(FakeClient(), classifier=classifier)
    reply = route(router, "here you go", dataset=SALES, file_name="sales.csv")
    assert reply.kind == "analytics"
    assert reply.chart is not None


def test_upload_without_plottable_rows(router, client) -> None:
    reply = route(router, "here you go", dataset=[{}], file_name="blank.json")
    assert reply.kind == "analytics"
    assert reply.chart is None
    assert router.state.last_chart is None
    assert client.calls == []


def test_reuse_returns_cached_chart(router, client) -> None:
    uploaded = route(router, "chart this data", dataset=SALES, file_name="sales.csv")
    reply = route(router, "show me the above data as a pie chart")
    assert reply.kind == "analytics"
    assert reply.chart is uploaded.chart
    assert reply.follow_ups == router_module.CHART_FOLLOW_UPS
    assert client.calls == []


def test_reuse_without_cached_chart_delegates(router, client) -> None:
    reply = route(router, "show me the previous data")
    assert reply.kind == "analytics"
    assert reply.chart is None
    assert len(client.calls) == 1


def test_elaboration_rewrites_prompt(router, client) -> None:
    client.replies = ["Regression models relationships.", "Longer answer."]
    route(router, "What is regression?")
    reply = route(router, "Tell me more")
    assert reply.answer == "Longer answer."
    prompt = client.prompt()
    assert "What is regression?" in prompt
    assert "Regression models relationships." in prompt
    assert "Tell me more" in prompt


def test_elaboration_without_history_sends_query_as_is(router, client) -> None:
    route(router, "Explain clustering")
    assert "Earlier in this conversation" not in client.prompt()


def test_delegated_chart_is_cached(router, client) -> None:
    client.replies = [
        'Here.\nCHART: {"type":"line","data":[{"d":"Mon","v":2}],"xKey":"d","yKey":"v"}'
    ]
    reply = route(router, "plot a weekly trend example")
    assert reply.chart is not None
    assert router.state.last_chart is reply.chart


def test_completion_failure_becomes_error_reply() -> None:
    client = FakeClient(error=ConnectionError("boom"))
    router = ResponseRouter(client, classifier=FakeClassifier())
    reply = route(router, "Explain regression")
    assert reply.kind == "error"
    assert reply.answer == router_module.ERROR_ANSWER
    assert reply.follow_ups == router_module.ERROR_FOLLOW_UPS
    assert "boom" not in reply.answer
    # user turn kept, no model turn for the failed exchange
    assert roles(router) == ["user"]
    assert router.state.turns[-1].content == "Explain regression"


def test_turns_are_appended_in_order(router, client) -> None:
    route(router, "hi")
    route(router, "Explain regression")
    route(router, "zzzz")
    assert roles(router) == ["user", "model"] * 3
    assert [t.content for t in router.state.turns[::2]] == ["hi", "Explain regression", "zzzz"]


def test_router_uses_injected_state(client, classifier) -> None:
    state = ConversationState()
    router = ResponseRouter(client, state=state, classifier=classifier)
    route(router, "hello")
    assert len(state) == 2


class FlakyClient(FakeClient):
    """Fails the first call only, then replays like FakeClient."""

    async def generate(self, contents):
        if not self.calls:
            self.calls.append(contents)
            raise TimeoutError("intent check timed out")
        return await super().generate(contents)


def test_unknown_query_with_failing_service_reaches_delegation() -> None:
    client = FakeClient(error=ConnectionError("down"))
    router = ResponseRouter(client)
    reply = route(router, "How should I read a histogram bin width")
    # classifier fell back to in-domain, so the completion was attempted too
    assert reply.kind == "error"
    assert len(client.calls) == 2
    assert roles(router) == ["user"]


def test_failed_intent_check_still_answers_unknown_query() -> None:
    client = FlakyClient(replies=["Bin width sets how coarse the histogram is."])
    router = ResponseRouter(client)
    reply = route(router, "How should I read a histogram bin width")
    assert reply.kind == "analytics"
    assert reply.answer == "Bin width sets how coarse the histogram is."
    assert len(client.calls) == 2
    assert roles(router) == ["user", "model"]


def test_routing_follows_lexical_class(monkeypatch, router, client, classifier) -> None:
    monkeypatch.setattr(router_module.intent, "classify", lambda q: router_module.QueryClass.CASUAL)
    reply = route(router, "Explain regression")
    assert reply.kind == "casual"
    assert client.calls == []
    assert classifier.calls == []
