"""
Registers the bot webhook with Telegram

Reads TELEGRAM_BOT_TOKEN and WEBHOOK_URL from .env:
    python scripts/set_webhook.py
    python scripts/set_webhook.py https://example.com/api/v1/webhook
"""

import asyncio
import sys
from pathlib import Path
import os
from dotenv import load_dotenv

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

# Load environment variables
load_dotenv()

import httpx
import logging

from app.services.telegram_service import ALLOWED_UPDATES, TelegramService

logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')
logger = logging.getLogger(__name__)


TELEGRAM_BOT_TOKEN = os.getenv("TELEGRAM_BOT_TOKEN")
TELEGRAM_API_BASE = os.getenv("TELEGRAM_API_BASE", "https://api.telegram.org")

if not TELEGRAM_BOT_TOKEN:
    raise ValueError("❌ TELEGRAM_BOT_TOKEN must be set in .env file")


async def set_webhook(url: str) -> bool:
    logger.info(f"🔗 Registering webhook: {url}")
    logger.info(f"   Allowed updates: {', '.join(ALLOWED_UPDATES)}")

    async with httpx.AsyncClient() as client:
        telegram = TelegramService(TELEGRAM_BOT_TOKEN, client, api_base=TELEGRAM_API_BASE)
        result = await telegram.set_webhook(url)

    if result.ok:
        logger.info("✅ Webhook registered")
    else:
        logger.error(f"❌ setWebhook failed: {result.error}")
    return result.ok


if __name__ == "__main__":
    webhook_url = sys.argv[1] if len(sys.argv) > 1 else os.getenv("WEBHOOK_URL")
    if not webhook_url:
        raise ValueError("❌ Pass the URL as an argument or set WEBHOOK_URL in .env")

    ok = asyncio.run(set_webhook(webhook_url))
    sys.exit(0 if ok else 1)
