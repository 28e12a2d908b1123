"""
utils/telegram_utils.py

Purpose: Telegram reply markup builders

- Inline keyboards (URL and callback buttons)
- Join prompt keyboard for the membership gate
- Per-symbol action menu
"""

from typing import Any, Dict, List, Optional

from utils.constants import (
    BUTTON_ADD_FAVORITE,
    BUTTON_AKD,
    BUTTON_CHECK_MEMBERSHIP,
    BUTTON_DEPTH,
    BUTTON_FUNDAMENTALS,
    BUTTON_JOIN_CHANNEL,
    BUTTON_NEWS,
    BUTTON_REFRESH,
    BUTTON_TAKAS,
    BUTTON_TECHNICAL,
    BUTTON_THEORETICAL,
    BUTTON_VIOP,
)

CHECK_MEMBERSHIP_CALLBACK = "check_membership"


def callback_button(text: str, callback_data: str) -> Dict[str, str]:
    """
    Creates an inline callback button.

    Telegram limits callback_data to 64 bytes; symbol payloads stay far below it.
    """
    return {"text": text, "callback_data": callback_data}


def url_button(text: str, url: str) -> Dict[str, str]:
    return {"text": text, "url": url}


def inline_keyboard(rows: List[List[Dict[str, str]]]) -> Dict[str, Any]:
    """Wraps button rows into a reply_markup payload."""
    return {"inline_keyboard": rows}


def channel_url(invite_link: Optional[str], main_channel_link: Optional[str]) -> Optional[str]:
    """
    Picks the link shown in the join prompt.

    The generated invite link wins; otherwise the legacy public channel
    name is turned into a t.me URL.
    """
    if invite_link:
        return invite_link
    if main_channel_link:
        name = main_channel_link.strip().lstrip("@")
        if name.startswith("http"):
            return name
        return f"https://t.me/{name}"
    return None


def create_join_keyboard(url: Optional[str]) -> Dict[str, Any]:
    """
    Join prompt: a link to the channel (when known) and a re-check button.
    """
    rows = []
    if url:
        rows.append([url_button(BUTTON_JOIN_CHANNEL, url)])
    rows.append([callback_button(BUTTON_CHECK_MEMBERSHIP, CHECK_MEMBERSHIP_CALLBACK)])
    return inline_keyboard(rows)


def create_symbol_keyboard(symbol: str) -> Dict[str, Any]:
    """
    Action menu for a single symbol.

    Example:
        create_symbol_keyboard("THYAO")["inline_keyboard"][0][0]
        -> {"text": "📊 Derinlik", "callback_data": "derinlik_THYAO"}
    """
    return inline_keyboard([
        [
            callback_button(BUTTON_DEPTH, f"derinlik_{symbol}"),
            callback_button(BUTTON_THEORETICAL, f"teorik_{symbol}"),
        ],
        [
            callback_button(BUTTON_AKD, f"akd_{symbol}"),
            callback_button(BUTTON_TAKAS, f"takas_{symbol}"),
        ],
        [
            callback_button(BUTTON_FUNDAMENTALS, f"temel_{symbol}"),
            callback_button(BUTTON_TECHNICAL, f"teknik_{symbol}"),
        ],
        [
            callback_button(BUTTON_NEWS, f"haber_{symbol}"),
            callback_button(BUTTON_VIOP, f"viop_{symbol}"),
        ],
        [
            callback_button(BUTTON_ADD_FAVORITE, f"favori_ekle_{symbol}"),
            callback_button(BUTTON_REFRESH, f"yenile_{symbol}"),
        ],
    ])
