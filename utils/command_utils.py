"""
utils/command_utils.py

Purpose: Command and callback parsing

- Splits "/command args" text (strips @botname suffixes)
- Symbol detection and normalization
- Callback payload decoding (prefix_SYMBOL)
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

# A bare ticker typed on its own, e.g. "THYAO"
SYMBOL_PATTERN = re.compile(r"[A-Z]{3,6}")

# Longest prefixes first so "favori_ekle_" wins over shorter matches
CALLBACK_ACTIONS = (
    "favori_ekle",
    "favori_cikar",
    "derinlik",
    "teorik",
    "temel",
    "teknik",
    "haber",
    "viop",
    "akd",
    "takas",
    "yenile",
)


@dataclass
class ParsedCommand:
    """A slash command split into its name and the raw remainder."""
    name: str
    argument: str = ""

    @property
    def symbols(self) -> List[str]:
        """Whitespace separated symbols, uppercased."""
        return [token.upper() for token in self.argument.split()]

    @property
    def symbol(self) -> Optional[str]:
        symbols = self.symbols
        return symbols[0] if symbols else None

    @property
    def symbol_list(self) -> List[str]:
        """Comma separated symbols, trimmed and uppercased."""
        return parse_symbol_list(self.argument)


def parse_command(text: Optional[str]) -> Optional[ParsedCommand]:
    """
    Parses a slash command.

    Command names are case-sensitive; "/start@MyBot" becomes "/start".

    Returns:
        ParsedCommand, or None if the text is not a command
    """
    if not text:
        return None

    text = text.strip()
    if not text.startswith("/"):
        return None

    parts = text.split(maxsplit=1)
    name = parts[0].split("@", 1)[0]
    argument = parts[1].strip() if len(parts) > 1 else ""
    return ParsedCommand(name=name, argument=argument)


def is_symbol(text: Optional[str]) -> bool:
    """True for 3-6 uppercase letters, nothing else."""
    if not text:
        return False
    return SYMBOL_PATTERN.fullmatch(text.strip()) is not None


def normalize_symbol(symbol: str) -> str:
    return symbol.strip().upper()


def parse_symbol_list(argument: str) -> List[str]:
    """
    Splits "thyao, AKBNK,,garan" into ["THYAO", "AKBNK", "GARAN"].
    Entries that are not 3-6 letter codes are dropped.
    """
    codes = [normalize_symbol(code) for code in argument.split(",")]
    return [code for code in codes if is_symbol(code)]


def parse_callback_data(data: Optional[str]) -> Tuple[Optional[str], Optional[str]]:
    """
    Decodes a callback payload.

    Args:
        data: e.g. "derinlik_THYAO", "favori_ekle_AKBNK" or "check_membership"

    Returns:
        (action, symbol); symbol is None for payloads without one,
        action is None for unknown or malformed payloads
    """
    if not data:
        return None, None

    if data == "check_membership":
        return data, None

    for action in CALLBACK_ACTIONS:
        prefix = f"{action}_"
        if data.startswith(prefix):
            symbol = normalize_symbol(data[len(prefix):])
            return (action, symbol) if is_symbol(symbol) else (None, None)

    return None, None


def parse_chat_id(value: Optional[str]) -> Optional[int]:
    """Converts a stored channel id like "-1001234567890" to int."""
    if value is None:
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        return None
