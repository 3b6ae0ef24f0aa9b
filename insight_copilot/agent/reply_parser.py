"""Pull CHART:/FOLLOW_UPS: blocks out of free-form model text.

The blocks are a loose convention inside unstructured text, so every step
here is best-effort: a malformed block is dropped from the answer and the
corresponding field falls back, nothing raises.
"""
from __future__ import annotations
import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

from insight_copilot.agent.types import ChartSpec

__all__ = ["DEFAULT_FOLLOW_UPS", "EMPTY_ANSWER", "ParsedReply", "parse_reply"]

logger = logging.getLogger(__name__)

DEFAULT_FOLLOW_UPS = [
    "📊 Can you show this as a chart?",
    "📈 What trends should I look for?",
    "🛠️ How do I clean this kind of data?",
]
EMPTY_ANSWER = "Here's an insight!"

_FENCE_RE = re.compile(r"```[\w-]*")
# A marker only opens a block when the JSON delimiter follows it
_CHART_RE = re.compile(r"CHART:\s*(?=\{)")
_FOLLOW_UPS_RE = re.compile(r"FOLLOW_UPS:\s*(?=\[)")
_NEXT_BLOCK_RE = re.compile(r"\n\s*\n|\n(?=\s*(?:CHART|FOLLOW_UPS):)")
_CLOSERS = {"{": "}", "[": "]"}
_DECODER = json.JSONDecoder()


@dataclass
class ParsedReply:
    answer: str
    chart: Optional[ChartSpec] = None
    follow_ups: List[str] = field(default_factory=lambda: list(DEFAULT_FOLLOW_UPS))


def _malformed_block_end(text: str, start: int) -> int:
    """End of an undecodable block starting at an opening bracket.

    Follows bracket depth (outside JSON strings) to the matching closer;
    when the block never closes, stops at the next blank line or marker.
    """
    opener = text[start]
    closer = _CLOSERS[opener]
    depth = 0
    in_string = escaped = False
    for idx in range(start, len(text)):
        ch = text[idx]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
        elif ch == '"':
            in_string = True
        elif ch == opener:
            depth += 1
        elif ch == closer:
            depth -= 1
            if depth == 0:
                return idx + 1
    stop = _NEXT_BLOCK_RE.search(text, start)
    return stop.start() if stop else len(text)


def _cut_block(text: str, marker: re.Pattern) -> Tuple[str, Any, bool]:
    """Remove the first marker block from text.

    Returns (remaining_text, decoded_value_or_None, found).
    """
    match = marker.search(text)
    if not match:
        return text, None, False
    try:
        value, end = _DECODER.raw_decode(text, match.end())
    except json.JSONDecodeError as exc:
        logger.warning("Malformed %s block: %s", match.group().strip(), exc)
        value = None
        end = _malformed_block_end(text, match.end())
    return text[: match.start()] + text[end:], value, True


def parse_reply(raw_text: str) -> ParsedReply:
    text = _FENCE_RE.sub("", raw_text or "")

    text, chart_payload, _ = _cut_block(text, _CHART_RE)
    chart = None
    if isinstance(chart_payload, dict):
        try:
            chart = ChartSpec.from_dict(chart_payload)
        except ValueError as exc:
            logger.warning("Ignoring unusable chart block: %s", exc)

    text, follow_ups, found = _cut_block(text, _FOLLOW_UPS_RE)
    if isinstance(follow_ups, list) and all(isinstance(q, str) for q in follow_ups):
        follow_ups = [q.strip() for q in follow_ups if q.strip()]
    else:
        if found:
            logger.warning("Follow-ups block is not a list of strings; using defaults")
        follow_ups = list(DEFAULT_FOLLOW_UPS)

    answer = text.strip() or EMPTY_ANSWER
    return ParsedReply(answer=answer, chart=chart, follow_ups=follow_ups)
