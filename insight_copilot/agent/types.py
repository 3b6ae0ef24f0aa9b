"""Shared value types passed between the router, parser and UI."""
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

__all__ = [
    "CHART_TYPES",
    "REPLY_KINDS",
    "ChartSpec",
    "RoutedReply",
    "Row",
    "Turn",
]

Row = Dict[str, Any]

CHART_TYPES = ("bar", "line", "pie", "scatter", "area")
REPLY_KINDS = ("casual", "gibberish", "out-of-domain", "analytics", "error")
ROLES = ("user", "model")


@dataclass(frozen=True)
class Turn:
    """One message in the conversation log."""
    role: str  # "user" or "model"
    content: str
    timestamp: datetime = field(default_factory=datetime.now)

    def __post_init__(self) -> None:
        if self.role not in ROLES:
            raise ValueError(f"Unknown turn role: {self.role!r}")


@dataclass
class ChartSpec:
    """A chart type plus the rows and the two column names to plot.

    Construction fails with ValueError unless there is at least one row
    and every row carries both keys.
    """
    type: str
    data: List[Row]
    x_key: str
    y_key: str

    def __post_init__(self) -> None:
        if self.type not in CHART_TYPES:
            raise ValueError(f"Unsupported chart type: {self.type!r}")
        if not self.data:
            raise ValueError("Chart needs at least one row")
        for row in self.data:
            if not isinstance(row, dict):
                raise ValueError("Chart rows must be mappings")
            if self.x_key not in row or self.y_key not in row:
                raise ValueError(
                    f"Every row must contain '{self.x_key}' and '{self.y_key}'"
                )

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "ChartSpec":
        """Build from the camelCase shape used in completion replies."""
        try:
            return cls(
                type=str(payload["type"]).lower(),
                data=list(payload["data"]),
                x_key=str(payload["xKey"]),
                y_key=str(payload["yKey"]),
            )
        except (KeyError, TypeError) as exc:
            raise ValueError(f"Malformed chart payload: {exc}") from exc


@dataclass
class RoutedReply:
    """The single output contract of the router."""
    answer: str
    follow_ups: List[str]
    kind: str
    chart: Optional[ChartSpec] = None

    def __post_init__(self) -> None:
        if self.kind not in REPLY_KINDS:
            raise ValueError(f"Unknown reply kind: {self.kind!r}")
