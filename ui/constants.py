"""Display constants."""

PRIZE_COLORS = {
    "top": "#FF7043",  # top prize
    "special": "#FFB300",
    "normal": "#9E9E9E",
}

SINGLE_DRAW = 1
MULTI_DRAW = 10
