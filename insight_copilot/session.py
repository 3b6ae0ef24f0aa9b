"""Per-user chat session: router, conversation state and stored history."""
from __future__ import annotations
import asyncio
import logging
from typing import List, Optional

from insight_copilot.agent.model import CompletionClient, GeminiCompletionClient
from insight_copilot.agent.router import ResponseRouter
from insight_copilot.agent.state import ConversationState
from insight_copilot.agent.types import RoutedReply
from insight_copilot.config import Settings
from insight_copilot.data.history import HistoryStore
from insight_copilot.data.loader import Dataset

__all__ = ["ChatSession", "WELCOME_FOLLOW_UPS", "WELCOME_MESSAGE", "build_session"]

logger = logging.getLogger(__name__)

WELCOME_MESSAGE = (
    "👋 Hello! I'm your Data Analytics AI Assistant. I specialize in statistics, "
    "visualization, business intelligence, and data science. What would you like to explore?"
)
WELCOME_FOLLOW_UPS = [
    "How do I clean messy datasets?",
    "What's the best way to visualize trends?",
    "How to choose between regression models?",
]


class ChatSession:
    """Built once per UI session and held by the UI layer."""

    def __init__(self, router: ResponseRouter, store: Optional[HistoryStore] = None) -> None:
        self.router = router
        self.store = store
        # The Gemini SDK binds its aio channel to the first loop it runs on
        self._loop = asyncio.new_event_loop()

    @property
    def state(self) -> ConversationState:
        return self.router.state

    def welcome(self) -> RoutedReply:
        return RoutedReply(
            answer=WELCOME_MESSAGE, follow_ups=list(WELCOME_FOLLOW_UPS), kind="casual"
        )

    async def ask_async(self, query: str, dataset: Optional[Dataset] = None) -> RoutedReply:
        rows: List[dict] = dataset.rows if dataset else []
        file_name = dataset.file_name if dataset else None
        reply = await self.router.route(query, rows or None, file_name)
        if self.store is not None:
            try:
                self.store.save(self.state.turns)
            except OSError as exc:
                logger.warning("Could not persist history: %s", exc)
        return reply

    def ask(self, query: str, dataset: Optional[Dataset] = None) -> RoutedReply:
        """Blocking entry point for the synchronous Streamlit script.

        Every call runs on the same event loop for the session's lifetime.
        """
        return self._loop.run_until_complete(self.ask_async(query, dataset))

    def close(self) -> None:
        if not self._loop.is_closed():
            self._loop.close()

    def reset(self) -> None:
        self.state.reset()
        if self.store is not None:
            self.store.clear()
        logger.info("Conversation reset")


def build_session(
    settings: Settings,
    client: Optional[CompletionClient] = None,
    restore: bool = True,
) -> ChatSession:
    """Wire a session from settings; ``client`` overrides the Gemini client."""
    store = HistoryStore(settings.history_dir)
    client = client or GeminiCompletionClient.from_settings(settings)
    turns = store.load() if restore else []
    if turns:
        logger.info("Restored %d turns from %s", len(turns), store.path)
    router = ResponseRouter(client, state=ConversationState(turns))
    return ChatSession(router, store)
