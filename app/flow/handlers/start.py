"""
app/flow/handlers/start.py

Handles: /start and the membership guard

- Creates or refreshes the user record
- Members get the command menu
- A stored join request for the main channel promotes the user on the spot
- Everyone else gets the join prompt with the invite link
- check_membership callback re-runs the join request lookup
"""

from typing import Optional, Tuple

from app.core.logging import get_logger, LogContext
from app.flow.context import BotContext
from app.flow.states import MembershipState, is_valid_transition, resolve_membership_state
from app.models.setting import SettingKey
from app.schemas.telegram import TelegramUser
from utils.command_utils import parse_chat_id
from utils.constants import (
    BOT_NOT_CONFIGURED_MESSAGE,
    CHANNEL_NOT_CONFIGURED_MESSAGE,
    JOIN_PROMPT_MESSAGE,
    MEMBER_MENU_MESSAGE,
    NO_JOIN_REQUEST_MESSAGE,
    WELCOME_AFTER_REQUEST_MESSAGE,
)
from utils.telegram_utils import channel_url, create_join_keyboard

logger = get_logger(__name__)


async def _channel_settings(ctx: BotContext) -> Tuple[Optional[int], Optional[str]]:
    """Returns (main channel id, join prompt URL)."""
    values = await ctx.store.get_settings([
        SettingKey.MAIN_CHANNEL_ID.value,
        SettingKey.INVITE_LINK.value,
        SettingKey.MAIN_CHANNEL_LINK.value,
    ])
    main_channel_id = parse_chat_id(values[SettingKey.MAIN_CHANNEL_ID.value])
    url = channel_url(values[SettingKey.INVITE_LINK.value], values[SettingKey.MAIN_CHANNEL_LINK.value])
    return main_channel_id, url


async def _promote(ctx: BotContext, user_id: int, from_state: MembershipState) -> None:
    if not is_valid_transition(from_state, MembershipState.MEMBER):
        logger.warning(f"Unexpected transition {from_state.value} -> member")
    await ctx.store.set_membership(user_id, True)
    logger.info(f"✅ User promoted to member ({from_state.value} -> member)")


async def handle_start(ctx: BotContext, user: TelegramUser, chat_id: int) -> bool:
    """
    Runs the membership flow for a user.

    Args:
        ctx: Bot collaborators
        user: Telegram user who sent the update
        chat_id: Chat to reply in

    Returns:
        True if the user is a member once the flow has run
    """
    with LogContext(user_id=user.id, chat_id=chat_id, command="/start"):
        record = await ctx.store.upsert_user(
            user.id,
            username=user.username,
            first_name=user.first_name,
            last_name=user.last_name,
        )

        if record.is_member:
            logger.info("Member re-entered /start")
            await ctx.telegram.send_message(chat_id, MEMBER_MENU_MESSAGE)
            return True

        main_channel_id, url = await _channel_settings(ctx)
        if main_channel_id is None:
            logger.warning("main_channel_id is not configured")
            await ctx.telegram.send_message(chat_id, BOT_NOT_CONFIGURED_MESSAGE)
            return False

        join_request = await ctx.store.get_join_request(user.id, main_channel_id)
        state = resolve_membership_state(record, join_request)
        logger.info(f"🔄 Membership state: {state.value}")

        if state == MembershipState.REQUESTED:
            await _promote(ctx, user.id, state)
            await ctx.telegram.send_message(chat_id, WELCOME_AFTER_REQUEST_MESSAGE)
            return True

        await ctx.telegram.send_message(
            chat_id,
            JOIN_PROMPT_MESSAGE,
            reply_markup=create_join_keyboard(url)
        )
        return False


async def ensure_member(ctx: BotContext, user: TelegramUser, chat_id: int) -> bool:
    """
    Guard for every command except /start.

    Non-members are sent through the /start flow; the user row is read
    again afterwards and only a member may continue.
    """
    record = await ctx.store.get_user(user.id)
    if record and record.is_member:
        return True

    logger.info("Guard: user is not a member, running start flow", extra={"user_id": user.id})
    await handle_start(ctx, user, chat_id)

    record = await ctx.store.get_user(user.id)
    return bool(record and record.is_member)


async def check_membership(ctx: BotContext, user: TelegramUser, chat_id: int) -> None:
    """
    check_membership callback: promotes the user if a join request exists.
    """
    with LogContext(user_id=user.id, chat_id=chat_id, command="check_membership"):
        main_channel_id, _ = await _channel_settings(ctx)
        if main_channel_id is None:
            await ctx.telegram.send_message(chat_id, CHANNEL_NOT_CONFIGURED_MESSAGE)
            return

        record = await ctx.store.get_user(user.id)
        if record and record.is_member:
            await ctx.telegram.send_message(chat_id, MEMBER_MENU_MESSAGE)
            return

        join_request = await ctx.store.get_join_request(user.id, main_channel_id)
        if join_request is None:
            await ctx.telegram.send_message(chat_id, NO_JOIN_REQUEST_MESSAGE)
            return

        if record is None:
            record = await ctx.store.upsert_user(
                user.id,
                username=user.username,
                first_name=user.first_name,
                last_name=user.last_name,
            )

        await _promote(ctx, user.id, resolve_membership_state(record, join_request))
        await ctx.telegram.send_message(chat_id, WELCOME_AFTER_REQUEST_MESSAGE)
