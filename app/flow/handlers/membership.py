"""
app/flow/handlers/membership.py

Handles: channel-side membership events

- chat_join_request: stores the request and grants bot access right away
  (the platform-side approval is left to channel admins)
- chat_member: promotion to member/administrator/creator approves the request
"""

from app.core.logging import get_logger, LogContext
from app.flow.context import BotContext
from app.flow.states import is_member_status
from app.models.join_request import JoinRequestStatus
from app.schemas.telegram import ChatJoinRequest, ChatMemberUpdated
from utils.constants import JOIN_REQUEST_RECEIVED_MESSAGE, MEMBERSHIP_APPROVED_MESSAGE

logger = get_logger(__name__)


async def handle_join_request(ctx: BotContext, request: ChatJoinRequest) -> None:
    """
    Records a join request and marks the requester as a member.

    The user row is created first so the membership update has a row to hit
    when the request arrives before any /start.
    """
    user = request.from_user
    chat_id = request.chat.id

    with LogContext(user_id=user.id, chat_id=chat_id, update_type="chat_join_request"):
        logger.info(f"📝 Join request received for chat {chat_id}")

        await ctx.store.upsert_user(
            user.id,
            username=user.username,
            first_name=user.first_name,
            last_name=user.last_name,
        )
        await ctx.store.create_join_request(
            user_id=user.id,
            chat_id=chat_id,
            username=user.username,
            first_name=user.first_name,
            last_name=user.last_name,
            bio=request.bio,
        )
        await ctx.store.set_membership(user.id, True)

        # A private chat with the bot shares the user's id
        result = await ctx.telegram.send_message(user.id, JOIN_REQUEST_RECEIVED_MESSAGE)
        if not result.ok:
            logger.warning(f"Could not notify user about join request: {result.error}")


async def handle_chat_member(ctx: BotContext, update: ChatMemberUpdated) -> None:
    """
    Approves the stored join request when the user shows up in the channel.
    Leaving or being removed does not revoke bot access.
    """
    member = update.new_chat_member
    user = member.user
    chat_id = update.chat.id

    with LogContext(user_id=user.id, chat_id=chat_id, update_type="chat_member"):
        if not is_member_status(member.status):
            logger.info(f"Ignoring chat member status '{member.status}'")
            return

        join_request = await ctx.store.get_join_request(user.id, chat_id)
        if join_request:
            await ctx.store.update_join_request_status(
                user.id,
                chat_id,
                JoinRequestStatus.APPROVED,
                processed_by=update.from_user.id
            )

        await ctx.store.upsert_user(
            user.id,
            username=user.username,
            first_name=user.first_name,
            last_name=user.last_name,
        )
        await ctx.store.set_membership(user.id, True)
        logger.info(f"✅ Channel membership confirmed ({member.status})")

        result = await ctx.telegram.send_message(user.id, MEMBERSHIP_APPROVED_MESSAGE)
        if not result.ok:
            logger.warning(f"Could not send approval message: {result.error}")
