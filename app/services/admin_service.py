"""
app/services/admin_service.py

Purpose: Business logic behind the admin HTTP endpoints

- Canonical settings view and partial updates
- Invite link creation for the private channel
- Announcements to all users
- Manual approve / decline of join requests
- Webhook registration
"""

from typing import Dict, List, Optional

from app.core.exceptions import BadRequestError, ExternalServiceError
from app.core.logging import get_logger
from app.flow.context import BotContext
from app.models.join_request import JoinRequest, JoinRequestStatus
from app.models.setting import SettingKey
from app.models.user import User
from app.services.broadcast_service import BroadcastResult, broadcast, format_announcement

logger = get_logger(__name__)

SETTING_KEYS = [key.value for key in SettingKey]


async def get_settings_view(ctx: BotContext) -> Dict[str, str]:
    """All canonical settings; unset ones map to ""."""
    values = await ctx.store.get_settings(SETTING_KEYS)
    return {key: value or "" for key, value in values.items()}


async def update_settings(ctx: BotContext, updates: Dict[str, Optional[str]]) -> Dict[str, str]:
    """
    Writes only the provided canonical keys.

    Args:
        updates: key → value; None values count as ""

    Returns:
        What was written
    """
    written = {}
    for key, value in updates.items():
        if key not in SETTING_KEYS:
            continue
        await ctx.store.set_setting(key, value or "")
        written[key] = value or ""

    logger.info(f"Settings updated: {', '.join(written) or 'nothing'}")
    return written


async def create_invite_link(ctx: BotContext, chat_id: str) -> Dict[str, Optional[int]]:
    """
    Creates a join-request invite link for the channel and stores it.

    Raises:
        BadRequestError: If Telegram cannot see the chat or refuses the link
    """
    chat = await ctx.telegram.get_chat(chat_id)
    if not chat.ok:
        raise BadRequestError(
            f"Kanal bulunamadı: {chat.error}. Bot'un kanala admin olarak eklendiğinden emin olun.",
            details={"chat_id": chat_id}
        )

    invite = await ctx.telegram.create_chat_invite_link(chat_id, name=ctx.config.INVITE_LINK_NAME)
    if not invite.ok or not isinstance(invite.result, dict):
        raise BadRequestError(
            f"Davet linki oluşturulamadı: {invite.error}",
            details={"chat_id": chat_id}
        )

    invite_link = invite.result["invite_link"]
    await ctx.store.set_setting(SettingKey.INVITE_LINK.value, invite_link)
    logger.info(f"🔗 Invite link created for chat {chat_id}")

    return {"invite_link": invite_link, "expire_date": invite.result.get("expire_date")}


async def send_announcement(ctx: BotContext, message: str) -> BroadcastResult:
    users = await ctx.store.list_users()
    return await broadcast(
        ctx.telegram,
        [user.id for user in users],
        format_announcement(message),
        delay_seconds=ctx.config.BROADCAST_DELAY_SECONDS
    )


async def list_users(ctx: BotContext) -> List[User]:
    return await ctx.store.list_users()


async def list_join_requests(ctx: BotContext, status: Optional[JoinRequestStatus] = None) -> List[JoinRequest]:
    return await ctx.store.list_join_requests(status)


async def process_join_request(
    ctx: BotContext,
    user_id: int,
    chat_id: int,
    approve: bool,
    processed_by: Optional[int] = None
) -> JoinRequestStatus:
    """
    Approves or declines a join request on Telegram and records the outcome.

    Declining leaves the user's bot access untouched.

    Raises:
        ExternalServiceError: If Telegram rejects the call
    """
    if approve:
        result = await ctx.telegram.approve_chat_join_request(chat_id, user_id)
        status = JoinRequestStatus.APPROVED
    else:
        result = await ctx.telegram.decline_chat_join_request(chat_id, user_id)
        status = JoinRequestStatus.DECLINED

    if not result.ok:
        raise ExternalServiceError(
            f"Telegram rejected the request: {result.error}",
            details={"user_id": user_id, "chat_id": chat_id}
        )

    await ctx.store.update_join_request_status(user_id, chat_id, status, processed_by=processed_by)

    if approve:
        await ctx.store.set_membership(user_id, True)

    logger.info(f"Join request {user_id}/{chat_id} {status.value} by admin")
    return status


async def register_webhook(ctx: BotContext, url: str) -> None:
    result = await ctx.telegram.set_webhook(url)
    if not result.ok:
        raise ExternalServiceError(f"setWebhook failed: {result.error}", details={"url": url})
