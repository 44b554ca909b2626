"""Header component with title and counters."""

import streamlit as st

from ui.state import get_lottery


def render_header():
    """Render the title with the guarantee counter and ticket balance."""
    lottery = get_lottery()
    st.title("人格提取")

    col1, col2, _ = st.columns([1, 1, 3])
    with col1:
        st.metric(
            "保底计数",
            f"{lottery.remaining_guarantee()}/{lottery.table.guarantee.count}",
        )
    with col2:
        st.metric("当前抽数", lottery.state.tickets)
