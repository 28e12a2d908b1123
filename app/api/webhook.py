"""
app/api/webhook.py

Purpose: Telegram webhook endpoint

- Receives updates posted by Telegram
- Validates the payload and passes it to the dispatcher
- Always answers {"ok": true} once dispatched so Telegram does not redeliver
- GET reports which secrets are configured
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError

from app.core.config import Settings
from app.core.logging import get_logger
from app.dependencies import get_bot_context, get_config
from app.flow.context import BotContext
from app.flow.dispatcher import dispatch_update
from app.schemas.response import WebhookAck
from app.schemas.telegram import TelegramUpdate

logger = get_logger(__name__)
router = APIRouter()

INTERNAL_ERROR_BODY = {"error": "Internal server error"}


@router.post("/webhook", response_model=WebhookAck)
async def webhook_handler(request: Request, ctx: BotContext = Depends(get_bot_context)):
    """
    Telegram update endpoint.

    Handler failures are answered inside the dispatcher; only payloads that
    cannot be read end up as a 500 here.
    """
    try:
        payload = await request.json()
        update = TelegramUpdate.model_validate(payload)
    except (ValueError, PydanticValidationError) as e:
        logger.error(f"Failed to parse webhook payload: {e}")
        return JSONResponse(status_code=500, content=INTERNAL_ERROR_BODY)

    try:
        await dispatch_update(update, ctx)
    except Exception as e:
        logger.error(f"Webhook error: {e}", exc_info=True)
        return JSONResponse(status_code=500, content=INTERNAL_ERROR_BODY)

    return WebhookAck()


@router.get("/webhook")
async def webhook_status(config: Settings = Depends(get_config)):
    """
    Webhook diagnostics: whether the bot token and Supabase secrets are set.
    """
    return {
        "status": "Webhook endpoint is working",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "bot_token": "set" if config.TELEGRAM_BOT_TOKEN else "missing",
        "supabase": "set" if config.SUPABASE_URL and config.SUPABASE_SERVICE_ROLE_KEY else "missing",
    }
