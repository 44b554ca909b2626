"""Draw buttons and result grid component."""

import time

import streamlit as st

from lottery import BatchResult, summarize
from prize import ResolvedPrize
from settings import get_settings
from ui.constants import MULTI_DRAW, PRIZE_COLORS, SINGLE_DRAW
from ui.state import get_lottery


def render_draw_section():
    """Render the draw buttons, then the results of the last batch."""
    lottery = get_lottery()
    tickets = lottery.state.tickets

    col1, col2, _ = st.columns([1, 1, 3])
    with col1:
        single = st.button(
            f"单抽 (消耗{SINGLE_DRAW}抽)",
            disabled=tickets < SINGLE_DRAW,
            use_container_width=True,
        )
    with col2:
        multi = st.button(
            f"十连！ (消耗{MULTI_DRAW}抽)",
            disabled=tickets < MULTI_DRAW,
            use_container_width=True,
        )

    st.subheader("提取结果")
    placeholder = st.empty()
    if single or multi:
        _perform_draw(placeholder, SINGLE_DRAW if single else MULTI_DRAW)
        st.rerun()

    result: BatchResult = st.session_state.get("last_result")
    if result is None:
        return
    try:
        _render_results(placeholder, result)
    except Exception as e:
        # The batch is already saved, only the display failed.
        st.error(f"结果显示出错: {e}")


def _perform_draw(placeholder, count: int):
    lottery = get_lottery()
    if lottery.state.tickets < count:
        st.session_state.last_result = BatchResult(accepted=False)
        return
    _run_draw_animation(placeholder, count)
    st.session_state.last_result = lottery.perform_batch(count)


def _run_draw_animation(placeholder, count: int):
    """Show placeholder cards for a few frames before the results."""
    settings = get_settings()
    for _ in range(settings.draw_animation_frames):
        with placeholder.container():
            cols = st.columns(min(count, 5))
            for i in range(count):
                with cols[i % 5]:
                    st.markdown("提取中...  \n**?**")
        time.sleep(settings.draw_animation_interval)
    placeholder.empty()


def _render_results(placeholder, result: BatchResult):
    messages = get_lottery().table.messages
    with placeholder.container():
        if not result.accepted:
            st.warning(summarize(result, messages))
            return

        cols = st.columns(min(len(result.items), 5))
        for i, prize in enumerate(result.items):
            with cols[i % 5]:
                _render_prize_card(prize)

        if result.got_special:
            st.success(summarize(result, messages))
        else:
            st.info(summarize(result, messages))


def _render_prize_card(prize: ResolvedPrize):
    if prize.is_top_prize:
        color = PRIZE_COLORS["top"]
    elif prize.is_special:
        color = PRIZE_COLORS["special"]
    else:
        color = PRIZE_COLORS["normal"]
    with st.container(border=True):
        st.caption(prize.category)
        st.markdown(
            f"<span style='color:{color}'><b>{prize.name}</b></span>",
            unsafe_allow_html=True,
        )
        badges = []
        if prize.is_guaranteed:
            badges.append("保底")
        if prize.is_top_prize:
            badges.append("⭐⭐⭐")
        if badges:
            st.caption(" ".join(badges))
