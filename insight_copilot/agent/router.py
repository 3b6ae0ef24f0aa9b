"""Decide how to answer each query and shape the reply.

Checks run in a fixed priority order; the first that matches answers:

1. gibberish          -> ask the user to rephrase
2. small talk         -> canned friendly reply, no network
3. out of domain      -> scope refusal (skipped when a dataset is attached)
4. "the above data"   -> replay the cached chart
5. dataset attached   -> bar chart of the upload
6. anything else      -> ask Gemini, parse CHART:/FOLLOW_UPS: blocks
"""
from __future__ import annotations
import logging
from typing import Optional, Sequence

from insight_copilot.agent import intent
from insight_copilot.agent.intent import QueryClass
from insight_copilot.agent.model import CompletionClient, single_turn
from insight_copilot.agent.prompt import assemble_prompt, build_elaboration_request
from insight_copilot.agent.remote_intent import RemoteIntentClassifier
from insight_copilot.agent.reply_parser import parse_reply
from insight_copilot.agent.state import ConversationState
from insight_copilot.agent.types import ChartSpec, RoutedReply, Row
from insight_copilot.data.inference import infer_keys

__all__ = ["ResponseRouter"]

logger = logging.getLogger(__name__)

GIBBERISH_ANSWER = (
    "🤔 I couldn't quite understand that. Could you rephrase your question "
    "about data, statistics, or visualization?"
)
GIBBERISH_FOLLOW_UPS = [
    "📊 What is regression analysis?",
    "📈 How do I visualize a trend?",
    "📂 Can I upload a CSV for a chart?",
]

CASUAL_ANSWER = "😊 Sure! I'm here to help you with data analytics whenever you're ready."
CASUAL_FOLLOW_UPS = [
    "📊 Want me to explain regression analysis?",
    "📈 Curious about sales trend forecasting?",
    "🤖 Should I show how machine learning fits into analytics?",
]

OUT_OF_DOMAIN_ANSWER = (
    "🤖 I'm designed only for data analytics, statistics, visualization, and BI. "
    "Try asking me about regression, SQL, or dashboards instead."
)
OUT_OF_DOMAIN_FOLLOW_UPS = [
    "📊 What's regression analysis?",
    "📈 How to visualize trends?",
    "🛠️ What's data cleaning?",
]

REUSE_ANSWER = "📊 Here's the chart from your earlier data again."
CHART_FOLLOW_UPS = [
    "📈 Show this as a line chart",
    "🥧 Show this as a pie chart",
    "🔍 What insights can you find in this data?",
]

ERROR_ANSWER = "⚠️ Sorry, something went wrong while fetching the response. Please try again."
ERROR_FOLLOW_UPS = [
    "🔄 Try asking the question again",
    "📊 What is regression analysis?",
    "📈 How do I visualize a trend?",
]


class ResponseRouter:
    """Routes a query to a canned reply, a refusal, a chart, or Gemini.

    The router is the only writer of ``state``. It appends the user turn
    before any branching and a model turn for every answer it produces,
    except when the completion call fails.
    """

    def __init__(
        self,
        client: CompletionClient,
        state: Optional[ConversationState] = None,
        classifier: Optional[RemoteIntentClassifier] = None,
    ) -> None:
        self._client = client
        self.state = state if state is not None else ConversationState()
        self._classifier = classifier or RemoteIntentClassifier(client)

    async def route(
        self,
        query: str,
        dataset: Optional[Sequence[Row]] = None,
        file_name: Optional[str] = None,
    ) -> RoutedReply:
        self.state.append("user", query)
        has_dataset = bool(dataset)

        query_class = intent.classify(query)

        if query_class is QueryClass.GIBBERISH:
            logger.info("Route: gibberish")
            return self._reply(GIBBERISH_ANSWER, GIBBERISH_FOLLOW_UPS, "gibberish")

        if query_class is QueryClass.CASUAL:
            logger.info("Route: casual")
            return self._reply(CASUAL_ANSWER, CASUAL_FOLLOW_UPS, "casual")

        if not has_dataset and not await self._in_domain(query, query_class):
            logger.info("Route: out-of-domain")
            return self._reply(OUT_OF_DOMAIN_ANSWER, OUT_OF_DOMAIN_FOLLOW_UPS, "out-of-domain")

        if (
            not has_dataset
            and self.state.last_chart is not None
            and intent.references_prior_result(query)
        ):
            logger.info("Route: reusing cached chart")
            return self._reply(
                REUSE_ANSWER, CHART_FOLLOW_UPS, "analytics", chart=self.state.last_chart
            )

        if has_dataset:
            return self._chart_upload(list(dataset), file_name)

        return await self._delegate(query)

    # ------------------------------------------------------------------
    async def _in_domain(self, query: str, query_class: QueryClass) -> bool:
        if query_class is QueryClass.ANALYTICS_HINT:
            return True
        return await self._classifier.is_analytics(query)

    def _chart_upload(self, rows: list, file_name: Optional[str]) -> RoutedReply:
        label = f"**{file_name}**" if file_name else "your dataset"
        x_key, y_key = infer_keys(rows)
        plottable = [r for r in rows if isinstance(r, dict) and x_key in r and y_key in r]
        if not plottable:
            logger.info("Route: upload without plottable columns (%s)", file_name)
            answer = (
                f"📂 I received {label}, but couldn't find columns to plot. "
                "Try a file with a text column and a numeric column."
            )
            return self._reply(answer, OUT_OF_DOMAIN_FOLLOW_UPS, "analytics")

        chart = ChartSpec(type="bar", data=plottable, x_key=x_key, y_key=y_key)
        self.state.remember_chart(chart)
        logger.info(
            "Route: charted upload %s (%d rows, x=%s, y=%s)",
            file_name, len(plottable), x_key, y_key,
        )
        answer = (
            f"📂 I've analyzed {label} and plotted {y_key} by {x_key} "
            f"across {len(plottable)} rows."
        )
        return self._reply(answer, CHART_FOLLOW_UPS, "analytics", chart=chart)

    def _rewrite_request(self, query: str) -> str:
        if not intent.asks_for_elaboration(query):
            return query
        exchange = self.state.previous_exchange()
        if exchange is None:
            return query
        question, answer = exchange
        logger.debug("Rewriting follow-up against previous exchange")
        return build_elaboration_request(query, question.content, answer.content)

    async def _delegate(self, query: str) -> RoutedReply:
        request = self._rewrite_request(query)
        try:
            raw = await self._client.generate(single_turn(assemble_prompt(request)))
        except Exception:
            logger.exception("Completion call failed")
            return RoutedReply(answer=ERROR_ANSWER, follow_ups=list(ERROR_FOLLOW_UPS), kind="error")

        parsed = parse_reply(raw)
        if parsed.chart is not None:
            self.state.remember_chart(parsed.chart)
        logger.info("Route: delegated (chart=%s)", parsed.chart is not None)
        return self._reply(parsed.answer, parsed.follow_ups, "analytics", chart=parsed.chart)

    def _reply(
        self,
        answer: str,
        follow_ups: Sequence[str],
        kind: str,
        chart: Optional[ChartSpec] = None,
    ) -> RoutedReply:
        reply = RoutedReply(answer=answer, follow_ups=list(follow_ups), kind=kind, chart=chart)
        self.state.append("model", answer)
        return reply
