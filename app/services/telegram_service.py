"""
app/services/telegram_service.py

Purpose: Telegram Bot API client

- Sends and edits messages (HTML parse mode, inline keyboards)
- Answers callback queries
- Chat / member lookups and invite link creation
- Approves or declines channel join requests
- One-shot calls: failures are logged and returned, never retried
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

import httpx

from app.core.logging import get_logger

logger = get_logger(__name__)

ALLOWED_UPDATES = ["message", "callback_query", "chat_join_request", "chat_member"]


@dataclass
class TelegramResult:
    """Outcome of a single Bot API call."""
    ok: bool
    result: Any = None
    error: Optional[str] = None


class TelegramService:
    """Service for calling the Telegram Bot HTTP API"""

    def __init__(
        self,
        token: str,
        client: httpx.AsyncClient,
        api_base: str = "https://api.telegram.org",
        timeout: float = 10.0,
    ):
        self.token = token
        self.client = client
        self.base_url = f"{api_base.rstrip('/')}/bot{token}"
        self.timeout = timeout

    async def call(self, method: str, payload: Dict[str, Any]) -> TelegramResult:
        """
        Posts a Bot API method.

        Args:
            method: Bot API method name (e.g. "sendMessage")
            payload: JSON body; None values are dropped

        Returns:
            TelegramResult with the API `result` on success or an error description
        """
        body = {key: value for key, value in payload.items() if value is not None}

        try:
            response = await self.client.post(
                f"{self.base_url}/{method}",
                json=body,
                timeout=self.timeout
            )
            data = response.json()

        except httpx.TimeoutException:
            logger.error(f"Telegram API timeout: {method}")
            return TelegramResult(ok=False, error="Telegram API timeout")
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Telegram API request failed: {method}: {e}")
            return TelegramResult(ok=False, error=str(e))

        if not data.get("ok"):
            description = data.get("description", f"HTTP {response.status_code}")
            logger.warning(f"❌ Telegram {method} rejected: {description}")
            return TelegramResult(ok=False, result=data.get("result"), error=description)

        return TelegramResult(ok=True, result=data.get("result"))

    async def send_message(
        self,
        chat_id: int,
        text: str,
        reply_markup: Optional[Dict[str, Any]] = None,
        disable_web_page_preview: bool = True,
    ) -> TelegramResult:
        logger.debug(f"📤 Sending message to {chat_id}: {text[:60]}")
        return await self.call("sendMessage", {
            "chat_id": chat_id,
            "text": text,
            "parse_mode": "HTML",
            "reply_markup": reply_markup,
            "disable_web_page_preview": disable_web_page_preview,
        })

    async def edit_message_text(
        self,
        chat_id: int,
        message_id: int,
        text: str,
        reply_markup: Optional[Dict[str, Any]] = None,
    ) -> TelegramResult:
        return await self.call("editMessageText", {
            "chat_id": chat_id,
            "message_id": message_id,
            "text": text,
            "parse_mode": "HTML",
            "reply_markup": reply_markup,
        })

    async def answer_callback_query(self, callback_query_id: str, text: Optional[str] = None) -> TelegramResult:
        return await self.call("answerCallbackQuery", {
            "callback_query_id": callback_query_id,
            "text": text,
            "show_alert": False,
        })

    async def get_chat(self, chat_id: Union[int, str]) -> TelegramResult:
        return await self.call("getChat", {"chat_id": chat_id})

    async def get_chat_member(self, chat_id: Union[int, str], user_id: int) -> TelegramResult:
        return await self.call("getChatMember", {"chat_id": chat_id, "user_id": user_id})

    async def create_chat_invite_link(self, chat_id: Union[int, str], name: Optional[str] = None) -> TelegramResult:
        """Creates an invite link that produces join requests instead of direct joins."""
        return await self.call("createChatInviteLink", {
            "chat_id": chat_id,
            "name": name,
            "creates_join_request": True,
        })

    async def approve_chat_join_request(self, chat_id: int, user_id: int) -> TelegramResult:
        return await self.call("approveChatJoinRequest", {"chat_id": chat_id, "user_id": user_id})

    async def decline_chat_join_request(self, chat_id: int, user_id: int) -> TelegramResult:
        return await self.call("declineChatJoinRequest", {"chat_id": chat_id, "user_id": user_id})

    async def set_webhook(self, url: str, allowed_updates: Optional[List[str]] = None) -> TelegramResult:
        logger.info(f"Registering webhook: {url}")
        return await self.call("setWebhook", {
            "url": url,
            "allowed_updates": allowed_updates or ALLOWED_UPDATES,
        })
