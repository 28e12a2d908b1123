"""
app/flow/handlers/favorites.py

Handles: favorite stock list

- /favori lists, /favoriekle and /favoricikar take "A,B" lists
- /favorisifirla clears everything
- A store failure mid-way answers one generic failure message
"""

from typing import List

from app.core.exceptions import PersistenceError
from app.core.logging import get_logger
from app.flow.context import BotContext
from utils.constants import (
    FAVORITES_ADD_FAILED_MESSAGE,
    FAVORITES_ADDED_MESSAGE,
    FAVORITES_CLEAR_FAILED_MESSAGE,
    FAVORITES_CLEARED_MESSAGE,
    FAVORITES_LIST_MESSAGE,
    FAVORITES_REMOVE_FAILED_MESSAGE,
    FAVORITES_REMOVED_MESSAGE,
    NO_FAVORITES_MESSAGE,
)

logger = get_logger(__name__)


async def list_favorites(ctx: BotContext, user_id: int, chat_id: int) -> None:
    favorites = await ctx.store.list_favorites(user_id)
    if not favorites:
        await ctx.telegram.send_message(chat_id, NO_FAVORITES_MESSAGE)
        return

    codes = ", ".join(favorite.stock_code for favorite in favorites)
    await ctx.telegram.send_message(chat_id, FAVORITES_LIST_MESSAGE.format(favorites=codes))


async def add_favorites(ctx: BotContext, user_id: int, chat_id: int, symbols: List[str]) -> None:
    try:
        for symbol in symbols:
            await ctx.store.add_favorite(user_id, symbol)
    except PersistenceError as e:
        logger.error(f"Adding favorites failed: {e.message}", extra={"user_id": user_id})
        await ctx.telegram.send_message(chat_id, FAVORITES_ADD_FAILED_MESSAGE)
        return

    await ctx.telegram.send_message(chat_id, FAVORITES_ADDED_MESSAGE.format(symbols=", ".join(symbols)))


async def remove_favorites(ctx: BotContext, user_id: int, chat_id: int, symbols: List[str]) -> None:
    try:
        for symbol in symbols:
            await ctx.store.remove_favorite(user_id, symbol)
    except PersistenceError as e:
        logger.error(f"Removing favorites failed: {e.message}", extra={"user_id": user_id})
        await ctx.telegram.send_message(chat_id, FAVORITES_REMOVE_FAILED_MESSAGE)
        return

    await ctx.telegram.send_message(chat_id, FAVORITES_REMOVED_MESSAGE.format(symbols=", ".join(symbols)))


async def clear_favorites(ctx: BotContext, user_id: int, chat_id: int) -> None:
    try:
        await ctx.store.clear_favorites(user_id)
    except PersistenceError as e:
        logger.error(f"Clearing favorites failed: {e.message}", extra={"user_id": user_id})
        await ctx.telegram.send_message(chat_id, FAVORITES_CLEAR_FAILED_MESSAGE)
        return

    await ctx.telegram.send_message(chat_id, FAVORITES_CLEARED_MESSAGE)
