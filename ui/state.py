"""Session state initialization."""

from collections.abc import MutableMapping

import streamlit as st

from lottery import Lottery
from prize import load_prize_table
from settings import get_settings
from storage import CounterStore, DrawState, FileStorage


def make_ticket_toast_listener(session: MutableMapping):
    """Build a store listener that queues a toast whenever the balance grows.

    The toast is kept in ``session`` under ``pending_toast`` so it survives the
    rerun that follows a button click.
    """

    def listener(state: DrawState):
        previous = session.get("known_tickets", state.tickets)
        if state.tickets > previous:
            session["pending_toast"] = f"+{state.tickets - previous}抽~"
        session["known_tickets"] = state.tickets

    return listener


def initialize_session_state():
    """Create this session's Lottery from the configured table and saved state."""
    if "initialized" not in st.session_state:
        settings = get_settings()
        table = load_prize_table(settings.config_path)
        store = CounterStore(
            FileStorage(settings.storage_dir), history_size=table.history_size
        )
        store.subscribe(make_ticket_toast_listener(st.session_state))
        st.session_state.lottery = Lottery(table, store)
        st.session_state.known_tickets = st.session_state.lottery.state.tickets
        st.session_state.last_result = None
        st.session_state.initialized = True
    else:
        # Other sessions may have drawn from the same storage since the last run.
        st.session_state.lottery.refresh()
        st.session_state.known_tickets = st.session_state.lottery.state.tickets


def show_pending_toast():
    """Show the toast queued before the last rerun, if any."""
    message = st.session_state.pop("pending_toast", None)
    if message:
        st.toast(message)


def get_lottery() -> Lottery:
    return st.session_state.lottery
