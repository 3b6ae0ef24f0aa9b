import pytest

from insight_copilot.agent.intent import (
    QueryClass,
    asks_for_elaboration,
    classify,
    has_analytics_hint,
    is_casual,
    is_gibberish,
    references_prior_result,
)


@pytest.mark.parametrize(
    "query",
    ["hi", "Hello", "hey there!", "thanks", "Thank you so much", "bye", "good morning",
     "how are you?", "ok", "see you tomorrow"],
)
def test_casual_phrases(query: str) -> None:
    assert classify(query) is QueryClass.CASUAL


@pytest.mark.parametrize(
    "query",
    ["zzzz", "xkqpmn", "a", "", "asdfgh", "hiiii", "abc123", "q"],
)
def test_gibberish(query: str) -> None:
    assert is_gibberish(query)
    assert classify(query) is QueryClass.GIBBERISH


@pytest.mark.parametrize(
    "query",
    ["hi", "ok", "yes", "ty", "gm", "sql", "thanks", "regression", "data",
     "hello!", "What is a p-value?", "strength of association"],
)
def test_not_gibberish(query: str) -> None:
    assert not is_gibberish(query)


def test_gibberish_checked_before_casual() -> None:
    query = "hi-zzzz"
    assert is_casual(query)
    assert is_gibberish(query)
    assert classify(query) is QueryClass.GIBBERISH


def test_casual_needs_whole_words() -> None:
    assert not is_casual("this book is long")


@pytest.mark.parametrize(
    "query",
    ["Explain linear regression", "What's a p-value?", "top trends in my datasets",
     "Compare Tableau and Power BI", "write a SQL join", "give me an insight"],
)
def test_analytics_hints(query: str) -> None:
    assert has_analytics_hint(query)
    assert classify(query) is QueryClass.ANALYTICS_HINT


@pytest.mark.parametrize(
    "query",
    ["What an excellent movie", "What's the meaning of life?", "Who won the football match"],
)
def test_unknown(query: str) -> None:
    assert classify(query) is QueryClass.UNKNOWN


def test_reuse_and_elaboration_patterns() -> None:
    assert references_prior_result("show me the above data as a pie chart")
    assert references_prior_result("use the previous numbers")
    assert not references_prior_result("plot my sales")
    assert asks_for_elaboration("Can you explain that in detail?")
    assert asks_for_elaboration("tell me more")
    assert not asks_for_elaboration("List SQL joins")
