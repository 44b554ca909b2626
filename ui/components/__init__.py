"""UI component modules."""

from ui.components.draw_section import render_draw_section
from ui.components.header import render_header
from ui.components.history_section import render_history_section
from ui.components.prize_pool import render_prize_pool
from ui.components.ticket_section import render_ticket_section

__all__ = [
    "render_header",
    "render_draw_section",
    "render_prize_pool",
    "render_ticket_section",
    "render_history_section",
]
