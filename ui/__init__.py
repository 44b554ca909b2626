"""UI components package for the prize lottery."""

from ui.constants import PRIZE_COLORS
from ui.state import get_lottery, initialize_session_state, show_pending_toast

__all__ = [
    "initialize_session_state",
    "get_lottery",
    "show_pending_toast",
    "PRIZE_COLORS",
]
