"""Persist the turn log as JSON on local disk."""
from __future__ import annotations
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Iterable, List

from insight_copilot.agent.types import Turn

__all__ = ["HistoryStore", "STORAGE_KEY"]

logger = logging.getLogger(__name__)

STORAGE_KEY = "chat-history"


class HistoryStore:
    """Reads and writes ``<directory>/chat-history.json``."""

    def __init__(self, directory: Path, key: str = STORAGE_KEY) -> None:
        self.path = Path(directory) / f"{key}.json"

    def save(self, turns: Iterable[Turn]) -> None:
        payload = [
            {"role": t.role, "content": t.content, "timestamp": t.timestamp.isoformat()}
            for t in turns
        ]
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")

    def load(self) -> List[Turn]:
        """Return stored turns with timestamps rebuilt as datetimes.

        A missing file yields an empty log; a corrupt one is logged and
        ignored so a session can still start.
        """
        if not self.path.exists():
            return []
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
            return [
                Turn(
                    role=item["role"],
                    content=item["content"],
                    timestamp=datetime.fromisoformat(item["timestamp"]),
                )
                for item in payload
            ]
        except (ValueError, KeyError, TypeError) as exc:
            logger.warning("Discarding unreadable history at %s: %s", self.path, exc)
            return []

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()
