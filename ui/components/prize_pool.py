"""Prize pool display component."""

import streamlit as st

from ui.constants import PRIZE_COLORS
from ui.state import get_lottery


def render_prize_pool():
    """Render every category with its sub prizes and configured probabilities."""
    table = get_lottery().table
    st.header("概率详情")

    if not table.prize_categories:
        st.info("暂无奖品配置")
        return

    cols = st.columns(min(len(table.prize_categories), 3))
    for idx, category in enumerate(table.prize_categories):
        with cols[idx % 3]:
            with st.container(border=True):
                if category.is_top_prize:
                    color = PRIZE_COLORS["top"]
                elif category.is_special:
                    color = PRIZE_COLORS["special"]
                else:
                    color = PRIZE_COLORS["normal"]
                st.markdown(
                    f"<span style='color:{color}'><b>{category.name}</b> "
                    f"({category.probability * 100:.1f}%)</span>",
                    unsafe_allow_html=True,
                )
                # Shown as configured, draws give every sub prize an equal share.
                for sub_prize in category.sub_prizes:
                    st.caption(f"{sub_prize.name} ({sub_prize.probability * 100:.1f}%)")
