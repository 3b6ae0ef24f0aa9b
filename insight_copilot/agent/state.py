"""Conversation state owned by the router: the turn log and the last chart."""
from __future__ import annotations
from typing import Iterable, List, Optional, Tuple

from insight_copilot.agent.types import ChartSpec, Turn

__all__ = ["ConversationState"]


class ConversationState:
    def __init__(self, turns: Optional[Iterable[Turn]] = None) -> None:
        self._turns: List[Turn] = list(turns or [])
        self.last_chart: Optional[ChartSpec] = None

    # ------------------------------------------------------------------
    @property
    def turns(self) -> Tuple[Turn, ...]:
        return tuple(self._turns)

    def __len__(self) -> int:
        return len(self._turns)

    def append(self, role: str, content: str) -> Turn:
        turn = Turn(role=role, content=content)
        self._turns.append(turn)
        return turn

    def remember_chart(self, chart: ChartSpec) -> None:
        self.last_chart = chart

    def previous_exchange(self) -> Optional[Tuple[Turn, Turn]]:
        """Most recent (user, model) pair before the latest user turn."""
        history = self._turns
        if history and history[-1].role == "user":
            history = history[:-1]
        for idx in range(len(history) - 1, 0, -1):
            if history[idx].role == "model" and history[idx - 1].role == "user":
                return history[idx - 1], history[idx]
        return None

    def reset(self) -> None:
        self._turns.clear()
        self.last_chart = None
