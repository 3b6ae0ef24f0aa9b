"""Prompt construction utilities for Gemini calls."""
from __future__ import annotations
import textwrap

SYSTEM_PROMPT = textwrap.dedent(
    """
    You are a specialized data analytics expert chatbot covering statistics,
    visualization, business intelligence, and data science.

    Instructions:
    - Provide a clear, structured, professional answer.
    - Use emojis/icons for sections (📊, ✅, ⚠️).
    - Avoid markdown symbols (#, *, **).
    - If a small illustrative chart helps, add ONE line at the end:
    CHART: {"type": "bar", "data": [{"label": "A", "value": 1}], "xKey": "label", "yKey": "value"}
      type is one of bar, line, pie, scatter, area; every row must contain xKey and yKey.
    - After answering, suggest 3 short follow-up questions relevant to the query,
      formatted as a JSON array on its own line:
    FOLLOW_UPS: ["Question 1", "Question 2", "Question 3"]
    """
).strip()

INTENT_PROMPT = textwrap.dedent(
    """
    Decide whether the user message below is about data analytics, statistics,
    data visualization, business intelligence, databases, or data science.
    Answer strictly with YES or NO and nothing else.

    Message: {query}
    """
).strip()

ELABORATION_TEMPLATE = textwrap.dedent(
    """
    Earlier in this conversation the user asked:
    {question}

    You answered:
    {answer}

    The user now says: "{query}"
    Expand on your previous answer in more depth, with concrete examples.
    """
).strip()


def build_intent_prompt(query: str) -> str:
    return INTENT_PROMPT.format(query=query)


def build_elaboration_request(query: str, question: str, answer: str) -> str:
    """Restate the previous exchange so the model can build on it."""
    return ELABORATION_TEMPLATE.format(question=question, answer=answer, query=query)


def assemble_prompt(request: str) -> str:
    """Combine system instructions with the (possibly rewritten) request."""
    return f"{SYSTEM_PROMPT}\n\nNow answer this query:\n\n{request}"


__all__ = [
    "SYSTEM_PROMPT",
    "assemble_prompt",
    "build_elaboration_request",
    "build_intent_prompt",
]
