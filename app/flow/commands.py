"""
app/flow/commands.py

Purpose: Routing tables

- Slash commands that take a single symbol
- Callback actions that act on a symbol
- Every handler in these tables has the (ctx, chat_id, symbol) signature
"""

from typing import Awaitable, Callable, Dict

from app.flow.context import BotContext
from app.flow.handlers.market import (
    send_akd,
    send_depth,
    send_fundamentals,
    send_news,
    send_symbol_menu,
    send_takas,
    send_technical,
    send_theoretical,
    send_viop,
)

SymbolHandler = Callable[[BotContext, int, str], Awaitable[None]]

START_COMMAND = "/start"
COMPARE_COMMAND = "/karsilastir"
BULLETIN_COMMAND = "/bulten"
FAVORITES_COMMAND = "/favori"
ADD_FAVORITES_COMMAND = "/favoriekle"
REMOVE_FAVORITES_COMMAND = "/favoricikar"
CLEAR_FAVORITES_COMMAND = "/favorisifirla"

SYMBOL_COMMANDS: Dict[str, SymbolHandler] = {
    "/derinlik": send_depth,
    "/teorik": send_theoretical,
    "/temel": send_fundamentals,
    "/teknik": send_technical,
    "/haber": send_news,
    "/viop": send_viop,
    "/akd": send_akd,
    "/takas": send_takas,
}

# Callback prefix (without the trailing "_") → handler
SYMBOL_CALLBACKS: Dict[str, SymbolHandler] = {
    "derinlik": send_depth,
    "teorik": send_theoretical,
    "temel": send_fundamentals,
    "teknik": send_technical,
    "haber": send_news,
    "viop": send_viop,
    "akd": send_akd,
    "takas": send_takas,
    "yenile": send_symbol_menu,
}

ADD_FAVORITE_CALLBACK = "favori_ekle"
REMOVE_FAVORITE_CALLBACK = "favori_cikar"
