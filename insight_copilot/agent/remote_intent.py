"""Fallback intent check that asks the completion service for a YES/NO."""
from __future__ import annotations
import logging

from insight_copilot.agent.model import CompletionClient, single_turn
from insight_copilot.agent.prompt import build_intent_prompt

__all__ = ["PERMISSIVE_DEFAULT", "RemoteIntentClassifier"]

logger = logging.getLogger(__name__)

# Verdict used when the service call fails: treat the query as in-domain.
PERMISSIVE_DEFAULT = True


class RemoteIntentClassifier:
    def __init__(self, client: CompletionClient, safe_default: bool = PERMISSIVE_DEFAULT) -> None:
        self._client = client
        self.safe_default = safe_default

    async def is_analytics(self, query: str) -> bool:
        """True iff the service's reply contains "yes" (case-insensitive)."""
        try:
            reply = await self._client.generate(single_turn(build_intent_prompt(query)))
            verdict = "yes" in str(reply).strip().lower()
        except Exception as exc:
            logger.warning(
                "Remote intent check failed (%s); using safe default %s",
                exc,
                self.safe_default,
            )
            return self.safe_default
        logger.debug("Remote intent for %r: %s", query[:80], verdict)
        return verdict
