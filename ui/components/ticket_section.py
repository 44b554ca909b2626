"""Ticket grant component."""

import streamlit as st

from ui.state import get_lottery


def render_ticket_section():
    """Render the ticket balance and the button granting one more draw."""
    lottery = get_lottery()
    with st.container(border=True):
        col1, col2 = st.columns([1, 3])
        with col1:
            if st.button("点击获取抽数", key="get_ticket", use_container_width=True):
                # The store listener queues the toast for the next run.
                lottery.grant_ticket()
                st.rerun()
        with col2:
            st.write(f"当前抽数: **{lottery.state.tickets}**")
