import logging
from typing import Any, Dict, List, Optional

import pandas as pd
import streamlit as st

from insight_copilot.agent.model import CompletionError
from insight_copilot.agent.types import ChartSpec, RoutedReply
from insight_copilot.config import Settings, load_settings
from insight_copilot.data.loader import (
    SUPPORTED_SUFFIXES,
    Dataset,
    DatasetError,
    build_preview,
    load_dataset,
)
from insight_copilot.session import ChatSession, build_session
from insight_copilot.utils.logging_config import setup_logging
from insight_copilot.utils.validation import DataValidator

logger = logging.getLogger(__name__)


def assistant_message(reply: RoutedReply) -> Dict[str, Any]:
    return {
        "role": "assistant",
        "content": reply.answer,
        "follow_ups": reply.follow_ups,
        "chart": reply.chart,
    }


def get_session(settings: Settings) -> Optional[ChatSession]:
    """Build the chat session once per browser session."""
    if "session" not in st.session_state:
        try:
            session = build_session(settings)
        except CompletionError as exc:
            st.error(str(exc))
            return None
        st.session_state.session = session
        messages: List[Dict[str, Any]] = [assistant_message(session.welcome())]
        for turn in session.state.turns:
            role = "user" if turn.role == "user" else "assistant"
            messages.append({"role": role, "content": turn.content})
        st.session_state.messages = messages
    return st.session_state.session


def render_chart(chart: ChartSpec) -> None:
    """Draw a ChartSpec with Streamlit's built-in charts."""
    df = pd.DataFrame(chart.data)
    x, y = chart.x_key, chart.y_key
    if x == y:
        df = df[[y]]
        x = None
    if chart.type == "pie":
        st.vega_lite_chart(
            df.reset_index(),
            {
                "mark": {"type": "arc", "tooltip": True},
                "encoding": {
                    "theta": {"field": y, "type": "quantitative"},
                    "color": {"field": x or "index", "type": "nominal"},
                },
            },
            use_container_width=True,
        )
    elif chart.type == "line":
        st.line_chart(df, x=x, y=y)
    elif chart.type == "area":
        st.area_chart(df, x=x, y=y)
    elif chart.type == "scatter":
        st.scatter_chart(df, x=x, y=y)
    else:
        st.bar_chart(df, x=x, y=y)


def render_message(message: Dict[str, Any], index: int) -> None:
    with st.chat_message(message["role"]):
        st.markdown(message["content"])
        chart = message.get("chart")
        if chart is not None:
            render_chart(chart)
        for n, follow_up in enumerate(message.get("follow_ups") or []):
            if st.button(follow_up, key=f"follow-up-{index}-{n}"):
                st.session_state.queued_query = follow_up
                st.rerun()


def handle_upload(uploaded: Any) -> None:
    """Parse a new upload once and keep it for the next question."""
    if uploaded is None or st.session_state.get("last_upload") == uploaded.name:
        return
    st.session_state.last_upload = uploaded.name
    try:
        dataset = load_dataset(uploaded, uploaded.name)
    except DatasetError as exc:
        logger.warning("Upload rejected: %s", exc)
        st.toast(f"⚠️ {exc}", icon="⚠️")
        return

    st.session_state.messages.append({"role": "assistant", "content": build_preview(dataset)})
    if not dataset:
        return
    st.session_state.pending_dataset = dataset
    issues = DataValidator.validate_dataframe(dataset.file_name, dataset.frame)
    st.session_state.upload_report = DataValidator.format_issues_report(issues, limit=15)


def main() -> None:
    settings = load_settings()
    setup_logging(settings.log_level, settings.log_dir)
    st.set_page_config(page_title="Data Analytics AI", page_icon="📊", layout="wide")
    st.title("📊 Data Analytics AI")
    st.caption("Specialized in data analysis and insights")

    session = get_session(settings)
    if session is None:
        st.info("Configure GEMINI_API_KEY and refresh the page.")
        return

    with st.sidebar:
        st.header("🔄 Session")
        if st.button("🆕 New Chat", use_container_width=True):
            session.reset()
            for key in ("messages", "pending_dataset", "last_upload", "upload_report"):
                st.session_state.pop(key, None)
            # A fresh uploader key drops the file the old widget still holds
            st.session_state.uploader_nonce = st.session_state.get("uploader_nonce", 0) + 1
            st.session_state.messages = [assistant_message(session.welcome())]
            st.rerun()

        st.header("Dataset")
        uploaded = st.file_uploader(
            "Upload CSV, JSON or Excel",
            type=[s.lstrip(".") for s in SUPPORTED_SUFFIXES],
            help="The next question you ask will chart this file.",
            key=f"uploader-{st.session_state.get('uploader_nonce', 0)}",
        )
        handle_upload(uploaded)
        pending: Optional[Dataset] = st.session_state.get("pending_dataset")
        if pending is not None:
            st.success(f"{pending.file_name}: {len(pending.rows)} rows ready to chart.")
            st.dataframe(pending.frame.head())
        if st.session_state.get("upload_report"):
            with st.expander("📊 Data Quality Report", expanded=False):
                st.text(st.session_state.upload_report)

        st.header("Model status")
        st.caption(f"Using model: `{settings.model_name}`")

    for index, message in enumerate(st.session_state.messages):
        render_message(message, index)

    typed = st.chat_input("Ask about data analytics, or upload a file and ask for a chart")
    query = typed or st.session_state.pop("queued_query", None)
    if not query:
        return

    st.session_state.messages.append({"role": "user", "content": query})
    with st.chat_message("user"):
        st.markdown(query)

    dataset = st.session_state.pop("pending_dataset", None)
    with st.spinner("Thinking..."):
        reply = session.ask(query, dataset)

    message = assistant_message(reply)
    st.session_state.messages.append(message)
    render_message(message, len(st.session_state.messages) - 1)


if __name__ == "__main__":
    main()
