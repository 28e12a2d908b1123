"""
app/flow/dispatcher.py

Purpose: Central update dispatcher

- Receives validated Telegram updates from the webhook
- Routes join requests, chat member changes, callbacks and messages
- Applies the membership guard to everything except /start
- Turns handler failures into one generic reply; never re-raises
"""

from typing import Optional

from app.core.logging import get_logger, LogContext
from app.flow.commands import (
    ADD_FAVORITE_CALLBACK,
    ADD_FAVORITES_COMMAND,
    BULLETIN_COMMAND,
    CLEAR_FAVORITES_COMMAND,
    COMPARE_COMMAND,
    FAVORITES_COMMAND,
    REMOVE_FAVORITE_CALLBACK,
    REMOVE_FAVORITES_COMMAND,
    START_COMMAND,
    SYMBOL_CALLBACKS,
    SYMBOL_COMMANDS,
)
from app.flow.context import BotContext
from app.flow.handlers.favorites import add_favorites, clear_favorites, list_favorites, remove_favorites
from app.flow.handlers.market import send_bulletin, send_comparison, send_symbol_menu
from app.flow.handlers.membership import handle_chat_member, handle_join_request
from app.flow.handlers.start import check_membership, ensure_member, handle_start
from app.schemas.telegram import CallbackQuery, Message, TelegramUpdate
from utils.command_utils import ParsedCommand, is_symbol, parse_callback_data, parse_command
from utils.constants import (
    FAVORITES_USAGE_MESSAGE,
    GENERIC_ERROR_MESSAGE,
    HELP_MESSAGE,
    SYMBOL_USAGE_MESSAGE,
)
from utils.telegram_utils import CHECK_MEMBERSHIP_CALLBACK

logger = get_logger(__name__)


async def dispatch_update(update: TelegramUpdate, ctx: BotContext) -> None:
    """
    Main dispatcher for incoming Telegram updates.

    Args:
        update: Parsed webhook payload
        ctx: Bot collaborators built at startup
    """
    actor = update.actor

    with LogContext(update_type=update.kind, user_id=actor.id if actor else None):
        logger.info(f"📨 Dispatching update {update.update_id} ({update.kind})")

        try:
            if update.chat_join_request:
                await handle_join_request(ctx, update.chat_join_request)
            elif update.chat_member:
                await handle_chat_member(ctx, update.chat_member)
            elif update.callback_query:
                await handle_callback(ctx, update.callback_query)
            elif update.message:
                await handle_message(ctx, update.message)
            else:
                logger.info("Ignoring update without a supported payload")

        except Exception as e:
            logger.error(f"❌ Dispatcher error: {e}", exc_info=True)

            chat_id = update.reply_chat_id
            if chat_id is not None:
                await ctx.telegram.send_message(chat_id, GENERIC_ERROR_MESSAGE)


async def handle_message(ctx: BotContext, message: Message) -> None:
    user = message.from_user
    if user is None:
        logger.info("Ignoring message without sender")
        return

    chat_id = message.chat.id
    text = (message.text or "").strip()
    command = parse_command(text)

    if command and command.name == START_COMMAND:
        await handle_start(ctx, user, chat_id)
        return

    if not await ensure_member(ctx, user, chat_id):
        return

    await route_message(ctx, user.id, chat_id, text, command)


async def route_message(
    ctx: BotContext,
    user_id: int,
    chat_id: int,
    text: str,
    command: Optional[ParsedCommand]
) -> None:
    """
    Routes a member's message by command name, or by bare symbol.
    Anything unrecognised gets the help text.
    """
    if command is None:
        if is_symbol(text):
            with LogContext(symbol=text):
                await send_symbol_menu(ctx, chat_id, text)
            return
        await ctx.telegram.send_message(chat_id, HELP_MESSAGE)
        return

    name = command.name
    logger.info(f"🚦 Routing command {name}")

    if name in SYMBOL_COMMANDS:
        symbol = command.symbol
        if not symbol:
            await ctx.telegram.send_message(chat_id, SYMBOL_USAGE_MESSAGE.format(command=name))
            return
        with LogContext(command=name, symbol=symbol):
            await SYMBOL_COMMANDS[name](ctx, chat_id, symbol)

    elif name == COMPARE_COMMAND:
        await send_comparison(ctx, chat_id, command.symbols)

    elif name == BULLETIN_COMMAND:
        await send_bulletin(ctx, chat_id)

    elif name == FAVORITES_COMMAND:
        await list_favorites(ctx, user_id, chat_id)

    elif name in (ADD_FAVORITES_COMMAND, REMOVE_FAVORITES_COMMAND):
        symbols = command.symbol_list
        if not symbols:
            await ctx.telegram.send_message(chat_id, FAVORITES_USAGE_MESSAGE.format(command=name))
            return
        if name == ADD_FAVORITES_COMMAND:
            await add_favorites(ctx, user_id, chat_id, symbols)
        else:
            await remove_favorites(ctx, user_id, chat_id, symbols)

    elif name == CLEAR_FAVORITES_COMMAND:
        await clear_favorites(ctx, user_id, chat_id)

    else:
        await ctx.telegram.send_message(chat_id, HELP_MESSAGE)


async def handle_callback(ctx: BotContext, query: CallbackQuery) -> None:
    """
    Acknowledges the button press, then runs the action it encodes.
    """
    await ctx.telegram.answer_callback_query(query.id)

    user = query.from_user
    # Private chat ids equal user ids
    chat_id = query.message.chat.id if query.message else user.id

    action, symbol = parse_callback_data(query.data)
    if action is None:
        logger.warning(f"Unknown callback payload: {query.data}")
        return

    if action == CHECK_MEMBERSHIP_CALLBACK:
        await check_membership(ctx, user, chat_id)
        return

    if not await ensure_member(ctx, user, chat_id):
        return

    with LogContext(command=action, symbol=symbol):
        if action == ADD_FAVORITE_CALLBACK:
            await add_favorites(ctx, user.id, chat_id, [symbol])
        elif action == REMOVE_FAVORITE_CALLBACK:
            await remove_favorites(ctx, user.id, chat_id, [symbol])
        elif action in SYMBOL_CALLBACKS:
            await SYMBOL_CALLBACKS[action](ctx, chat_id, symbol)
        else:
            logger.warning(f"No handler for callback action: {action}")
