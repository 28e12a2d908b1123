"""
app/flow/context.py

Purpose: Collaborators handed to every handler

- Built once in the application lifespan
- Passed explicitly through the dispatcher (no module-level singletons)
"""

from dataclasses import dataclass

from app.core.config import Settings
from app.services.market_data_service import MarketDataProvider
from app.services.store_service import StoreService
from app.services.telegram_service import TelegramService


@dataclass
class BotContext:
    telegram: TelegramService
    store: StoreService
    market: MarketDataProvider
    config: Settings
