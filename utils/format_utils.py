"""
utils/format_utils.py

Purpose: Number formatting for Turkish readers

- Thousands separated with "." ("1.234.567")
- Signed prices and percentages ("+1.25", "-0.40%")
"""


def format_number(value: int) -> str:
    """1234567 -> "1.234.567" """
    return f"{int(value):,}".replace(",", ".")


def format_price(value: float) -> str:
    return f"{value:.2f}"


def format_signed(value: float) -> str:
    """Two decimals with an explicit sign for positives."""
    return f"{'+' if value > 0 else ''}{value:.2f}"


def format_percent(value: float) -> str:
    return f"{format_signed(value)}%"


def format_millions(value: float) -> str:
    """Market cap style: 2345678901 -> "2.346M" """
    return f"{format_number(round(value / 1_000_000))}M"


def change_emoji(value: float) -> str:
    if value > 0:
        return "🟢"
    if value < 0:
        return "🔴"
    return "⚪"
