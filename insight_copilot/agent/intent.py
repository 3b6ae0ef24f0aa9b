"""Lexical intent classification: gibberish, small talk, analytics hints.

Everything here is pure and offline so it can run before any network call.
"""
from __future__ import annotations
from enum import Enum
from typing import Iterable, Pattern
import re

CASUAL_PHRASES = {
    # Greetings
    "hi", "hello", "hey", "hiya", "howdy", "yo", "gm", "gn",
    "good morning", "good afternoon", "good evening", "good night",
    "how are you", "how's it going", "what's up",

    # Thanks
    "thanks", "thank you", "thx", "ty", "cheers", "appreciate it",

    # Farewells
    "bye", "goodbye", "see you", "see ya", "take care",

    # Acknowledgements
    "ok", "okay", "got it", "sounds good", "no worries",
}

ANALYTICS_TERMS = {
    # Statistics
    "statistics", "statistical", "regression", "correlation", "p-value",
    "hypothesis testing", "a/b testing", "confidence interval", "variance",
    "standard deviation", "mean", "median", "distribution", "outlier",
    "anova", "t-test", "chi-square", "forecast", "forecasting", "time series",

    # BI and reporting
    "analytics", "analysis", "business intelligence", "dashboard", "kpi",
    "metrics", "reporting", "tableau", "power bi", "looker", "excel",
    "visualization", "visualisation", "graph", "plot",

    # Data tooling
    "dataset", "database", "sql", "mysql", "postgresql", "mongodb",
    "snowflake", "spark", "etl", "data warehouse", "data mining",
    "big data", "data cleaning", "feature engineering", "python",
    "pandas", "numpy", "matplotlib", "seaborn", "machine learning",
    "clustering", "data science",

    # Generic
    "data", "chart", "trend", "insight", "pattern",
}

SHORT_WORDS = {"hi", "ok", "no", "yes", "yo", "hey", "bye", "gm", "gn", "ty"}

REUSE_PHRASES = ("above", "previous", "earlier", "that data")

ELABORATION_PHRASES = (
    "explain", "in detail", "elaborate", "why", "how", "tell me more",
    "more detail", "expand on", "go deeper", "clarify",
)

VOWELS = set("aeiou")


class QueryClass(str, Enum):
    CASUAL = "casual"
    GIBBERISH = "gibberish"
    ANALYTICS_HINT = "analytics-hint"
    UNKNOWN = "unknown"


def _phrase_pattern(phrases: Iterable[str], plurals: bool = False) -> Pattern[str]:
    # Longest first so "thank you" wins over "thank"
    ordered = sorted(phrases, key=len, reverse=True)
    tail = r"(?:e?s)?(?!\w)" if plurals else r"(?!\w)"
    body = "|".join(re.escape(p) for p in ordered)
    return re.compile(rf"(?<!\w)(?:{body}){tail}", re.IGNORECASE)


_CASUAL_RE = _phrase_pattern(CASUAL_PHRASES)
# "trends", "datasets" still count; "excellent", "meaning" do not
_ANALYTICS_RE = _phrase_pattern(ANALYTICS_TERMS, plurals=True)
_REUSE_RE = _phrase_pattern(REUSE_PHRASES)
_ELABORATION_RE = _phrase_pattern(ELABORATION_PHRASES)

_KNOWN_WORDS = SHORT_WORDS | {
    p for p in CASUAL_PHRASES | ANALYTICS_TERMS if " " not in p
}

_REPEATED_CHAR_RE = re.compile(r"(.)\1{2,}")
_CONSONANT_RUN_RE = re.compile(r"[b-df-hj-np-tv-z]{4,}")
_LETTERS_WITH_DIGITS_RE = re.compile(r"(?=.*\d)(?=.*[a-z]{3,})")


def is_gibberish(query: str) -> bool:
    """Return True when a single-token input looks like keyboard mashing.

    Multi-word input is never treated as gibberish; the heuristics below
    misfire on ordinary sentences ("strength" has four consonants in a row).
    """
    text = query.strip().lower()
    if any(ch.isspace() for ch in text):
        return False
    token = text.strip(".,!?;:'\"()[]{}")
    if token in _KNOWN_WORDS:
        return False
    if len(token) < 3:
        return True
    if not any(ch in VOWELS for ch in token):
        return True
    if _REPEATED_CHAR_RE.search(token):
        return True
    if _CONSONANT_RUN_RE.search(token):
        return True
    consonants = sum(1 for ch in token if ch.isalpha() and ch not in VOWELS)
    if consonants / len(token) > 0.7:
        return True
    return bool(_LETTERS_WITH_DIGITS_RE.match(token))


def is_casual(query: str) -> bool:
    return bool(_CASUAL_RE.search(query))


def has_analytics_hint(query: str) -> bool:
    return bool(_ANALYTICS_RE.search(query))


def references_prior_result(query: str) -> bool:
    """True when the query points back at something already shown."""
    return bool(_REUSE_RE.search(query))


def asks_for_elaboration(query: str) -> bool:
    return bool(_ELABORATION_RE.search(query))


def classify(query: str) -> QueryClass:
    """Classify a query without touching the network.

    Order matters: gibberish short-circuits everything, then small talk,
    then the analytics vocabulary. Anything else is UNKNOWN and left to
    the remote classifier.
    """
    if is_gibberish(query):
        return QueryClass.GIBBERISH
    if is_casual(query):
        return QueryClass.CASUAL
    if has_analytics_hint(query):
        return QueryClass.ANALYTICS_HINT
    return QueryClass.UNKNOWN


__all__ = [
    "QueryClass",
    "asks_for_elaboration",
    "classify",
    "has_analytics_hint",
    "is_casual",
    "is_gibberish",
    "references_prior_result",
]
