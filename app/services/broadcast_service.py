"""
app/services/broadcast_service.py

Purpose: Announcement fan-out

- Sends one message to every user, one at a time
- Sleeps between sends to stay under Telegram's rate limit
- A failed send is counted and skipped; the loop never aborts
"""

import asyncio
from dataclasses import dataclass
from typing import Iterable

from app.core.logging import get_logger
from app.services.telegram_service import TelegramService
from utils.constants import ANNOUNCEMENT_TEMPLATE

logger = get_logger(__name__)


@dataclass
class BroadcastResult:
    sent: int = 0
    failed: int = 0
    total: int = 0


def format_announcement(message: str) -> str:
    return ANNOUNCEMENT_TEMPLATE.format(message=message.strip())


async def broadcast(
    telegram: TelegramService,
    user_ids: Iterable[int],
    text: str,
    delay_seconds: float = 0.05
) -> BroadcastResult:
    """
    Sends `text` to each user in order.

    Args:
        telegram: Bot API client
        user_ids: Recipients (private chat id == user id)
        text: Final message text, already formatted
        delay_seconds: Pause between two sends

    Returns:
        BroadcastResult where sent + failed == total
    """
    recipients = list(user_ids)
    result = BroadcastResult(total=len(recipients))
    logger.info(f"📢 Broadcasting to {result.total} users")

    for index, user_id in enumerate(recipients):
        try:
            response = await telegram.send_message(user_id, text)
            ok = response.ok
            error = response.error
        except Exception as e:
            ok = False
            error = str(e)

        if ok:
            result.sent += 1
        else:
            result.failed += 1
            logger.warning(f"Broadcast to {user_id} failed: {error}")

        if delay_seconds and index < len(recipients) - 1:
            await asyncio.sleep(delay_seconds)

    logger.info(f"Broadcast finished: {result.sent} sent, {result.failed} failed")
    return result
