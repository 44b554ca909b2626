import streamlit as st

from settings import configure_logging, get_settings
from ui.components import (
    render_draw_section,
    render_header,
    render_history_section,
    render_prize_pool,
    render_ticket_section,
)
from ui.state import initialize_session_state, show_pending_toast

st.set_page_config(page_title="人格提取", layout="wide")

configure_logging(get_settings().log_level)
initialize_session_state()
show_pending_toast()

with st.sidebar:
    page = st.radio("页面", ["提取界面", "提取记录"], key="page")

if page == "提取记录":
    render_history_section()
else:
    render_header()
    render_draw_section()
    st.divider()
    render_prize_pool()
    st.divider()
    render_ticket_section()
