"""
app/models/market.py

Purpose: Market data payloads

- Price snapshot, order book, fundamentals, news, technical indicators
- VIOP contract and BIST 100 summary
- Shared by the market data provider and the response formatters
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


@dataclass
class StockPrice:
    symbol: str
    price: float
    change: float
    change_percent: float
    volume: int
    high: float
    low: float
    open: float
    close: float


@dataclass
class DepthLevel:
    price: float
    quantity: int


@dataclass
class MarketDepth:
    """Order book; bids step down and asks step up from the base price."""
    symbol: str
    bids: List[DepthLevel]
    asks: List[DepthLevel]
    timestamp: datetime


@dataclass
class CompanyInfo:
    symbol: str
    name: str
    sector: str
    market_cap: int
    pe_ratio: float
    pb_ratio: float
    dividend_yield: float
    eps: float
    book_value: float


@dataclass
class NewsItem:
    title: str
    content: str
    date: datetime
    source: str = "KAP"
    url: Optional[str] = None


@dataclass
class TechnicalIndicators:
    symbol: str
    current_price: float
    sma20: float
    sma50: float
    rsi: float
    support: float
    resistance: float
    trend: str
    recommendation: str


@dataclass
class TheoreticalPrice:
    symbol: str
    price: StockPrice
    theoretical_price: float

    @property
    def difference(self) -> float:
        return self.theoretical_price - self.price.price

    @property
    def difference_percent(self) -> float:
        if not self.price.price:
            return 0.0
        return self.difference / self.price.price * 100


@dataclass
class ViopContract:
    symbol: str
    price: float
    change: float
    volume: int
    open_interest: int
    expiry_date: str


@dataclass
class MarketSummary:
    index: str
    value: float
    change: float
    change_percent: float
    volume: int
    timestamp: datetime
    gainers: List[StockPrice] = field(default_factory=list)
    losers: List[StockPrice] = field(default_factory=list)
