"""History replay page."""

import streamlit as st

from history import to_frame
from ui.state import get_lottery


def render_history_section():
    """Render the saved history, newest batch first, with a clear action."""
    lottery = get_lottery()
    records = lottery.replay_history()
    shown = min(len(records), lottery.table.history_size)
    st.header(f"人格提取记录 (最近{shown}条)")

    with st.popover("清空提取记录"):
        st.warning("确定要清空所有提取记录吗？此操作不可撤销！")
        if st.button("确认清空", type="primary"):
            lottery.clear_history()
            st.rerun()

    if not records:
        st.write("*暂无提取记录*")
        return

    for record in records:
        with st.container(border=True):
            col1, col2 = st.columns([4, 1])
            with col1:
                st.caption(record.time.strftime("%Y-%m-%d %H:%M:%S"))
            with col2:
                st.caption(f"{len(record.items)}抽")
            lines = []
            for item in record.items:
                line = f"{item.category} - {item.name}"
                if item.is_special:
                    line = f"**{line}**"
                if item.is_guaranteed:
                    line += " `保底`"
                lines.append(line)
            st.markdown("  \n".join(lines))

    with st.expander("表格视图", expanded=False):
        st.dataframe(to_frame(records), use_container_width=True, hide_index=True)
