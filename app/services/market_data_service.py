"""
app/services/market_data_service.py

Purpose: Market data for Borsa Istanbul symbols

- MarketDataProvider: the capability interface the bot depends on
- MockMarketDataProvider: random but internally consistent filler data
  (no upstream source is wired in)
"""

import calendar
import random
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Protocol

from app.core.logging import get_logger
from app.models.market import (
    CompanyInfo,
    DepthLevel,
    MarketDepth,
    MarketSummary,
    NewsItem,
    StockPrice,
    TechnicalIndicators,
    TheoreticalPrice,
    ViopContract,
)

logger = get_logger(__name__)

DEPTH_LEVELS = 25
DEPTH_TICK = 0.05

SECTORS = ["Bankacılık", "Ulaştırma", "Holding", "Perakende", "Enerji", "Teknoloji", "Sanayi"]

# Symbols sampled for the daily bulletin
BULLETIN_UNIVERSE = [
    "THYAO", "AKBNK", "GARAN", "ASELS", "BIMAS", "EREGL", "KCHOL",
    "SAHOL", "SISE", "TUPRS", "YKBNK", "PGSUS", "FROTO", "TCELL",
]

NEWS_TEMPLATES = [
    ("{symbol} Şirketi Önemli Açıklama", "Şirket yönetimi önemli bir açıklama yaptı..."),
    ("{symbol} Mali Tablo Açıklaması", "Şirketin mali tabloları açıklandı..."),
    ("{symbol} Genel Kurul Toplantısı", "Olağan genel kurul toplantısı gündemi yayımlandı..."),
]


class MarketDataProvider(Protocol):
    """Everything the dispatcher needs from a market data source."""

    async def get_price(self, symbol: str) -> Optional[StockPrice]: ...

    async def get_depth(self, symbol: str) -> Optional[MarketDepth]: ...

    async def get_fundamentals(self, symbol: str) -> Optional[CompanyInfo]: ...

    async def get_news(self, symbol: str) -> List[NewsItem]: ...

    async def get_technical(self, symbol: str) -> Optional[TechnicalIndicators]: ...

    async def get_theoretical(self, symbol: str) -> Optional[TheoreticalPrice]: ...

    async def get_viop(self, symbol: str) -> Optional[ViopContract]: ...

    async def get_market_summary(self) -> Optional[MarketSummary]: ...


def technical_recommendation(rsi: float, price: float, sma20: float, sma50: float) -> str:
    """Maps RSI and moving averages to a Turkish buy/sell label."""
    if rsi < 30 and price < sma20:
        return "Güçlü Al"
    if rsi < 50 and price > sma20:
        return "Al"
    if rsi > 70 and price > sma50:
        return "Güçlü Sat"
    if rsi > 50 and price < sma50:
        return "Sat"
    return "Bekle"


def _month_end(now: datetime) -> str:
    last_day = calendar.monthrange(now.year, now.month)[1]
    return now.replace(day=last_day).strftime("%d.%m.%Y")


class MockMarketDataProvider:
    """
    Generates illustrative market data.

    Numbers are random on every call; only their relationships hold
    (high/low/open derive from price, depth steps away from a base).
    """

    def __init__(self, seed: Optional[int] = None):
        self._rng = random.Random(seed)

    def _round(self, value: float) -> float:
        return round(value, 2)

    def _base_price(self) -> float:
        return 25 + self._rng.random() * 50

    async def get_price(self, symbol: str) -> Optional[StockPrice]:
        base = self._base_price()
        return StockPrice(
            symbol=symbol.upper(),
            price=self._round(base),
            change=self._round(self._rng.uniform(-2, 2)),
            change_percent=self._round(self._rng.uniform(-4, 4)),
            volume=self._rng.randint(100_000, 1_099_999),
            high=self._round(base * 1.05),
            low=self._round(base * 0.95),
            open=self._round(base * 0.98),
            close=self._round(base),
        )

    async def get_depth(self, symbol: str) -> Optional[MarketDepth]:
        base = self._base_price()
        bids = [
            DepthLevel(price=self._round(base - i * DEPTH_TICK), quantity=self._rng.randint(1_000, 10_999))
            for i in range(DEPTH_LEVELS)
        ]
        asks = [
            DepthLevel(price=self._round(base + i * DEPTH_TICK), quantity=self._rng.randint(1_000, 10_999))
            for i in range(DEPTH_LEVELS)
        ]
        return MarketDepth(
            symbol=symbol.upper(),
            bids=bids,
            asks=asks,
            timestamp=datetime.now(timezone.utc),
        )

    async def get_fundamentals(self, symbol: str) -> Optional[CompanyInfo]:
        symbol = symbol.upper()
        return CompanyInfo(
            symbol=symbol,
            name=f"{symbol} Şirketi",
            sector=self._rng.choice(SECTORS),
            market_cap=self._rng.randint(0, 10_000_000_000),
            pe_ratio=self._round(self._rng.random() * 20 + 5),
            pb_ratio=self._round(self._rng.random() * 3 + 0.5),
            dividend_yield=self._round(self._rng.random() * 5),
            eps=self._round(self._rng.random() * 10),
            book_value=self._round(self._rng.random() * 50 + 10),
        )

    async def get_news(self, symbol: str) -> List[NewsItem]:
        symbol = symbol.upper()
        now = datetime.now(timezone.utc)
        count = self._rng.choice([2, 3])
        return [
            NewsItem(
                title=title.format(symbol=symbol),
                content=content,
                date=now - timedelta(days=index),
            )
            for index, (title, content) in enumerate(NEWS_TEMPLATES[:count])
        ]

    async def get_technical(self, symbol: str) -> Optional[TechnicalIndicators]:
        price = await self.get_price(symbol)
        if not price:
            return None

        sma20 = self._round(price.price * (1 + self._rng.uniform(-0.05, 0.05)))
        sma50 = self._round(price.price * (1 + self._rng.uniform(-0.05, 0.05)))
        rsi = self._round(self._rng.random() * 100)

        return TechnicalIndicators(
            symbol=price.symbol,
            current_price=price.price,
            sma20=sma20,
            sma50=sma50,
            rsi=rsi,
            support=self._round(price.low * 0.98),
            resistance=self._round(price.high * 1.02),
            trend="Yükseliş" if sma20 > sma50 else "Düşüş",
            recommendation=technical_recommendation(rsi, price.price, sma20, sma50),
        )

    async def get_theoretical(self, symbol: str) -> Optional[TheoreticalPrice]:
        price = await self.get_price(symbol)
        if not price:
            return None
        theoretical = price.price * (1 + self._rng.uniform(-0.01, 0.01))
        return TheoreticalPrice(symbol=price.symbol, price=price, theoretical_price=self._round(theoretical))

    async def get_viop(self, symbol: str) -> Optional[ViopContract]:
        base = self._base_price() * 10
        return ViopContract(
            symbol=symbol.upper(),
            price=self._round(base),
            change=self._round(self._rng.uniform(-3, 3)),
            volume=self._rng.randint(1_000, 500_000),
            open_interest=self._rng.randint(10_000, 2_000_000),
            expiry_date=_month_end(datetime.now(timezone.utc)),
        )

    async def get_market_summary(self) -> Optional[MarketSummary]:
        prices = [await self.get_price(symbol) for symbol in BULLETIN_UNIVERSE]
        ranked = sorted(prices, key=lambda p: p.change_percent, reverse=True)

        value = 9_000 + self._rng.random() * 2_000
        change_percent = self._rng.uniform(-3, 3)

        return MarketSummary(
            index="BIST 100",
            value=self._round(value),
            change=self._round(value * change_percent / 100),
            change_percent=self._round(change_percent),
            volume=self._rng.randint(50_000_000_000, 120_000_000_000),
            timestamp=datetime.now(timezone.utc),
            gainers=[p for p in ranked[:3] if p.change_percent > 0],
            losers=[p for p in reversed(ranked[-3:]) if p.change_percent < 0],
        )
