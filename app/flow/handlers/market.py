"""
app/flow/handlers/market.py

Handles: market data commands and callbacks

- /derinlik, /teorik, /temel, /teknik, /haber, /viop, /akd, /takas
- /karsilastir (two symbols), /bulten (market summary)
- Bare symbol → inline action menu with the current price
- Message builders are pure functions; senders fetch and reply
- Text that came from the user or the provider is HTML-escaped
"""

from html import escape
from typing import List, Optional

from app.core.logging import get_logger, LogContext
from app.flow.context import BotContext
from app.models.market import (
    CompanyInfo,
    MarketDepth,
    MarketSummary,
    NewsItem,
    StockPrice,
    TechnicalIndicators,
    TheoreticalPrice,
    ViopContract,
)
from utils.constants import (
    AKD_PENDING_MESSAGE,
    BULLETIN_UNAVAILABLE_MESSAGE,
    COMPARE_USAGE_MESSAGE,
    DATA_UNAVAILABLE_MESSAGE,
    DEPTH_UNAVAILABLE_MESSAGE,
    FUNDAMENTALS_UNAVAILABLE_MESSAGE,
    LAST_UPDATE_LINE,
    NEWS_UNAVAILABLE_MESSAGE,
    SYMBOL_MENU_MESSAGE,
    TAKAS_PENDING_MESSAGE,
    TECHNICAL_UNAVAILABLE_MESSAGE,
    THEORETICAL_UNAVAILABLE_MESSAGE,
    VIOP_UNAVAILABLE_MESSAGE,
)
from utils.format_utils import (
    change_emoji,
    format_millions,
    format_number,
    format_percent,
    format_price,
    format_signed,
)
from utils.telegram_utils import create_symbol_keyboard
from utils.time_utils import format_date, format_timestamp

logger = get_logger(__name__)

# Levels shown per side; the provider returns 25
DEPTH_ROWS_SHOWN = 10
NEWS_ITEMS_SHOWN = 3


def _footer() -> str:
    return LAST_UPDATE_LINE.format(timestamp=format_timestamp())


# ============================================================
# MESSAGE BUILDERS
# ============================================================

def build_depth_message(depth: MarketDepth) -> str:
    lines = [f"📊 <b>{escape(depth.symbol)} - 25 Kademe Derinlik</b>", "", "<b>🔴 SATIŞ EMİRLERİ</b>"]
    for index, level in enumerate(depth.asks[:DEPTH_ROWS_SHOWN], start=1):
        lines.append(f"{index}. {format_price(level.price)} TL - {format_number(level.quantity)}")

    lines += ["", "<b>🟢 ALIŞ EMİRLERİ</b>"]
    for index, level in enumerate(depth.bids[:DEPTH_ROWS_SHOWN], start=1):
        lines.append(f"{index}. {format_price(level.price)} TL - {format_number(level.quantity)}")

    lines += ["", LAST_UPDATE_LINE.format(timestamp=format_timestamp(depth.timestamp))]
    return "\n".join(lines)


def build_theoretical_message(data: TheoreticalPrice) -> str:
    price = data.price
    return f"""📈 <b>{escape(data.symbol)} - Teorik Analiz</b>

<b>Mevcut Fiyat:</b> {format_price(price.price)} TL
<b>Teorik Fiyat:</b> {format_price(data.theoretical_price)} TL
<b>Fark:</b> {format_signed(data.difference)} TL ({format_percent(data.difference_percent)})

<b>Günlük Veriler:</b>
• Açılış: {format_price(price.open)} TL
• En Yüksek: {format_price(price.high)} TL
• En Düşük: {format_price(price.low)} TL
• Hacim: {format_number(price.volume)}

{_footer()}"""


def build_fundamentals_message(info: CompanyInfo, price: StockPrice) -> str:
    return f"""🏢 <b>{escape(info.symbol)} - Temel Analiz</b>

<b>Şirket:</b> {escape(info.name)}
<b>Sektör:</b> {escape(info.sector)}
<b>Mevcut Fiyat:</b> {format_price(price.price)} TL

<b>Finansal Oranlar:</b>
• F/K Oranı: {format_price(info.pe_ratio)}
• PD/DD Oranı: {format_price(info.pb_ratio)}
• Temettü Verimi: %{format_price(info.dividend_yield)}
• Hisse Başı Kâr: {format_price(info.eps)} TL
• Defter Değeri: {format_price(info.book_value)} TL

<b>Piyasa Verileri:</b>
• Piyasa Değeri: {format_millions(info.market_cap)} TL
• Günlük Hacim: {format_number(price.volume)}

{_footer()}"""


def build_technical_message(data: TechnicalIndicators) -> str:
    return f"""📊 <b>{escape(data.symbol)} - Teknik Analiz</b>

<b>Mevcut Fiyat:</b> {format_price(data.current_price)} TL

<b>Göstergeler:</b>
• SMA 20: {format_price(data.sma20)} TL
• SMA 50: {format_price(data.sma50)} TL
• RSI (14): {format_price(data.rsi)}

<b>Seviyeler:</b>
• Destek: {format_price(data.support)} TL
• Direnç: {format_price(data.resistance)} TL

<b>Trend:</b> {data.trend}
<b>Öneri:</b> {data.recommendation}

{_footer()}"""


def build_news_message(symbol: str, news: List[NewsItem]) -> str:
    lines = [f"📰 <b>{escape(symbol)} - Son Haberler</b>", ""]
    for index, item in enumerate(news[:NEWS_ITEMS_SHOWN], start=1):
        lines.append(f"<b>{index}. {escape(item.title)}</b>")
        lines.append(f"📅 {format_date(item.date)} | {escape(item.source)}")
        lines.append(escape(item.content))
        lines.append("")
    return "\n".join(lines).rstrip()


def build_viop_message(contract: ViopContract) -> str:
    return f"""📈 <b>{escape(contract.symbol)} - VIOP Vadeli Kontrat</b>

<b>Fiyat:</b> {format_price(contract.price)} {change_emoji(contract.change)} {format_signed(contract.change)}
<b>Hacim:</b> {format_number(contract.volume)}
<b>Açık Pozisyon:</b> {format_number(contract.open_interest)}
<b>Vade Sonu:</b> {contract.expiry_date}

{_footer()}"""


def build_compare_message(first: StockPrice, second: StockPrice) -> str:
    def column(price: StockPrice) -> str:
        return (
            f"<b>{escape(price.symbol)}</b>\n"
            f"• Fiyat: {format_price(price.price)} TL\n"
            f"• Değişim: {change_emoji(price.change_percent)} {format_percent(price.change_percent)}\n"
            f"• Hacim: {format_number(price.volume)}\n"
            f"• Gün Aralığı: {format_price(price.low)} - {format_price(price.high)} TL"
        )

    leader = first if first.change_percent >= second.change_percent else second
    return (
        f"⚖️ <b>{escape(first.symbol)} vs {escape(second.symbol)} Karşılaştırma</b>\n\n"
        f"{column(first)}\n\n{column(second)}\n\n"
        f"🏆 Günün daha iyi performansı: <b>{escape(leader.symbol)}</b>\n\n"
        f"{_footer()}"
    )


def build_bulletin_message(summary: MarketSummary) -> str:
    lines = [
        "📰 <b>Günlük Piyasa Özeti</b>",
        "",
        f"<b>{escape(summary.index)}:</b> {format_price(summary.value)} "
        f"{change_emoji(summary.change)} {format_signed(summary.change)} ({format_percent(summary.change_percent)})",
        f"<b>İşlem Hacmi:</b> {format_millions(summary.volume)} TL",
    ]

    if summary.gainers:
        lines += ["", "<b>🟢 Yükselenler</b>"]
        lines += [f"• {escape(p.symbol)}: {format_price(p.price)} TL ({format_percent(p.change_percent)})" for p in summary.gainers]
    if summary.losers:
        lines += ["", "<b>🔴 Düşenler</b>"]
        lines += [f"• {escape(p.symbol)}: {format_price(p.price)} TL ({format_percent(p.change_percent)})" for p in summary.losers]

    lines += ["", LAST_UPDATE_LINE.format(timestamp=format_timestamp(summary.timestamp))]
    return "\n".join(lines)


def build_symbol_menu_message(symbol: str, price: Optional[StockPrice]) -> str:
    price_line = ""
    if price:
        price_line = f"\n💰 Mevcut: {format_price(price.price)} TL ({format_percent(price.change_percent)})"
    return SYMBOL_MENU_MESSAGE.format(symbol=escape(symbol), price_line=price_line)


# ============================================================
# SENDERS
# ============================================================

async def send_depth(ctx: BotContext, chat_id: int, symbol: str) -> None:
    depth = await ctx.market.get_depth(symbol)
    if not depth:
        await ctx.telegram.send_message(chat_id, DEPTH_UNAVAILABLE_MESSAGE.format(symbol=escape(symbol)))
        return
    await ctx.telegram.send_message(chat_id, build_depth_message(depth))


async def send_theoretical(ctx: BotContext, chat_id: int, symbol: str) -> None:
    data = await ctx.market.get_theoretical(symbol)
    if not data:
        await ctx.telegram.send_message(chat_id, THEORETICAL_UNAVAILABLE_MESSAGE.format(symbol=escape(symbol)))
        return
    await ctx.telegram.send_message(chat_id, build_theoretical_message(data))


async def send_fundamentals(ctx: BotContext, chat_id: int, symbol: str) -> None:
    info = await ctx.market.get_fundamentals(symbol)
    price = await ctx.market.get_price(symbol)
    if not info or not price:
        await ctx.telegram.send_message(chat_id, FUNDAMENTALS_UNAVAILABLE_MESSAGE.format(symbol=escape(symbol)))
        return
    await ctx.telegram.send_message(chat_id, build_fundamentals_message(info, price))


async def send_technical(ctx: BotContext, chat_id: int, symbol: str) -> None:
    data = await ctx.market.get_technical(symbol)
    if not data:
        await ctx.telegram.send_message(chat_id, TECHNICAL_UNAVAILABLE_MESSAGE.format(symbol=escape(symbol)))
        return
    await ctx.telegram.send_message(chat_id, build_technical_message(data))


async def send_news(ctx: BotContext, chat_id: int, symbol: str) -> None:
    news = await ctx.market.get_news(symbol)
    if not news:
        await ctx.telegram.send_message(chat_id, NEWS_UNAVAILABLE_MESSAGE.format(symbol=escape(symbol)))
        return
    await ctx.telegram.send_message(chat_id, build_news_message(symbol, news))


async def send_viop(ctx: BotContext, chat_id: int, symbol: str) -> None:
    contract = await ctx.market.get_viop(symbol)
    if not contract:
        await ctx.telegram.send_message(chat_id, VIOP_UNAVAILABLE_MESSAGE.format(symbol=escape(symbol)))
        return
    await ctx.telegram.send_message(chat_id, build_viop_message(contract))


async def send_akd(ctx: BotContext, chat_id: int, symbol: str) -> None:
    # No broker distribution source yet
    await ctx.telegram.send_message(chat_id, AKD_PENDING_MESSAGE.format(symbol=escape(symbol)))


async def send_takas(ctx: BotContext, chat_id: int, symbol: str) -> None:
    await ctx.telegram.send_message(chat_id, TAKAS_PENDING_MESSAGE.format(symbol=escape(symbol)))


async def send_symbol_menu(ctx: BotContext, chat_id: int, symbol: str) -> None:
    """Inline action menu for a bare symbol, also used by the refresh button."""
    price = await ctx.market.get_price(symbol)
    await ctx.telegram.send_message(
        chat_id,
        build_symbol_menu_message(symbol, price),
        reply_markup=create_symbol_keyboard(symbol)
    )


async def send_comparison(ctx: BotContext, chat_id: int, symbols: List[str]) -> None:
    """
    /karsilastir S1 S2. Fewer than two symbols is a usage error and
    the provider is not called.
    """
    if len(symbols) < 2:
        await ctx.telegram.send_message(chat_id, COMPARE_USAGE_MESSAGE)
        return

    first_symbol, second_symbol = symbols[0], symbols[1]
    with LogContext(symbol=f"{first_symbol},{second_symbol}"):
        first = await ctx.market.get_price(first_symbol)
        second = await ctx.market.get_price(second_symbol)

        missing = first_symbol if not first else second_symbol if not second else None
        if missing:
            await ctx.telegram.send_message(chat_id, DATA_UNAVAILABLE_MESSAGE.format(symbol=escape(missing)))
            return

        await ctx.telegram.send_message(chat_id, build_compare_message(first, second))


async def send_bulletin(ctx: BotContext, chat_id: int) -> None:
    summary = await ctx.market.get_market_summary()
    if not summary:
        await ctx.telegram.send_message(chat_id, BULLETIN_UNAVAILABLE_MESSAGE)
        return
    await ctx.telegram.send_message(chat_id, build_bulletin_message(summary))
