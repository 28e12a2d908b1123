from unittest.mock import AsyncMock

import pytest

from app.flow.dispatcher import dispatch_update
from helpers import USER_ID, callback_update, message_update
from utils.constants import (
    COMPARE_USAGE_MESSAGE,
    FAVORITES_ADD_FAILED_MESSAGE,
    FAVORITES_CLEARED_MESSAGE,
    GENERIC_ERROR_MESSAGE,
    HELP_MESSAGE,
    JOIN_PROMPT_MESSAGE,
    NO_FAVORITES_MESSAGE,
)


async def send(ctx, text):
    await dispatch_update(message_update(text), ctx)


async def make_member(store):
    await store.upsert_user(USER_ID, username="ayse")
    await store.set_membership(USER_ID, True)


@pytest.mark.asyncio
async def test_non_member_command_runs_start_flow_instead(ctx, configured_db, store, telegram_api):
    ctx.market = AsyncMock()

    await send(ctx, "/derinlik THYAO")

    assert telegram_api.texts() == [JOIN_PROMPT_MESSAGE]
    ctx.market.get_depth.assert_not_awaited()
    assert (await store.get_user(USER_ID)).is_member is False


@pytest.mark.asyncio
async def test_start_is_not_guarded(ctx, configured_db, telegram_api):
    await send(ctx, "/start")

    assert telegram_api.texts() == [JOIN_PROMPT_MESSAGE]


@pytest.mark.parametrize("text, marker", [
    ("/derinlik THYAO", "THYAO - 25 Kademe Derinlik"),
    ("/teorik thyao", "THYAO - Teorik Analiz"),
    ("/temel AKBNK", "AKBNK - Temel Analiz"),
    ("/teknik GARAN", "GARAN - Teknik Analiz"),
    ("/haber ASELS", "ASELS - Son Haberler"),
    ("/viop XU030", "XU030 - VIOP Vadeli Kontrat"),
    ("/akd THYAO", "THYAO için AKD analizi hazırlanıyor"),
    ("/takas THYAO", "THYAO için takas analizi hazırlanıyor"),
    ("/karsilastir THYAO AKBNK", "THYAO vs AKBNK"),
    ("/bulten", "Günlük Piyasa Özeti"),
    ("/derinlik@BorsaBot SISE", "SISE - 25 Kademe Derinlik"),
])
@pytest.mark.asyncio
async def test_member_routing(ctx, store, telegram_api, text, marker):
    await make_member(store)

    await send(ctx, text)

    assert len(telegram_api.texts()) == 1
    assert marker in telegram_api.texts()[0]


@pytest.mark.asyncio
async def test_depth_shows_top_ten_per_side(ctx, store, telegram_api):
    await make_member(store)

    await send(ctx, "/derinlik THYAO")

    text = telegram_api.texts()[0]
    assert "10. " in text
    assert "11. " not in text
    assert "SATIŞ EMİRLERİ" in text and "ALIŞ EMİRLERİ" in text


@pytest.mark.asyncio
async def test_compare_needs_two_symbols(ctx, store, telegram_api):
    await make_member(store)
    ctx.market = AsyncMock()

    await send(ctx, "/karsilastir THYAO")

    assert telegram_api.texts() == [COMPARE_USAGE_MESSAGE]
    ctx.market.get_price.assert_not_awaited()


@pytest.mark.asyncio
async def test_symbol_command_without_symbol_gets_usage(ctx, store, telegram_api):
    await make_member(store)

    await send(ctx, "/teknik")

    assert "/teknik THYAO" in telegram_api.texts()[0]


@pytest.mark.asyncio
async def test_bare_symbol_shows_menu(ctx, store, telegram_api):
    await make_member(store)

    await send(ctx, "AKBNK")

    body = telegram_api.bodies()[0]
    assert "<b>AKBNK</b> için analiz seçin" in body["text"]
    assert "💰 Mevcut:" in body["text"]
    assert body["reply_markup"]["inline_keyboard"][0][0]["callback_data"] == "derinlik_AKBNK"


@pytest.mark.parametrize("text", ["akbnk", "merhaba", "/DERINLIK THYAO", "/bilinmeyen", ""])
@pytest.mark.asyncio
async def test_anything_else_gets_help(ctx, store, telegram_api, text):
    await make_member(store)

    await send(ctx, text)

    assert telegram_api.texts() == [HELP_MESSAGE]


@pytest.mark.asyncio
async def test_favorites_lifecycle(ctx, store, telegram_api):
    await make_member(store)

    await send(ctx, "/favoriekle thyao, AKBNK")
    await send(ctx, "/favori")
    assert set(telegram_api.texts()[-1].split("\n\n")[1].split(", ")) == {"THYAO", "AKBNK"}

    await send(ctx, "/favoricikar THYAO")
    await send(ctx, "/favori")
    assert telegram_api.texts()[-1].endswith("AKBNK")

    await send(ctx, "/favorisifirla")
    assert telegram_api.texts()[-1] == FAVORITES_CLEARED_MESSAGE
    await send(ctx, "/favori")
    assert telegram_api.texts()[-1] == NO_FAVORITES_MESSAGE


@pytest.mark.asyncio
async def test_favori_prefix_does_not_swallow_other_commands(ctx, store, telegram_api):
    await make_member(store)

    await send(ctx, "/favoriekle GARAN")

    assert "GARAN favorilere eklendi" in telegram_api.texts()[0]
    assert [f.stock_code for f in await store.list_favorites(USER_ID)] == ["GARAN"]


@pytest.mark.asyncio
async def test_favorite_write_failure_sends_single_message(ctx, store, fake_db, telegram_api):
    await make_member(store)
    fake_db.fail_on.add(("user_favorites", "insert"))

    await send(ctx, "/favoriekle THYAO,AKBNK")

    assert telegram_api.texts() == [FAVORITES_ADD_FAILED_MESSAGE]


@pytest.mark.asyncio
async def test_callback_is_acknowledged_then_routed(ctx, store, telegram_api):
    await make_member(store)

    await dispatch_update(callback_update("teorik_THYAO"), ctx)

    assert telegram_api.methods() == ["answerCallbackQuery", "sendMessage"]
    assert "THYAO - Teorik Analiz" in telegram_api.texts()[0]


@pytest.mark.asyncio
async def test_favorite_callbacks(ctx, store, telegram_api):
    await make_member(store)

    await dispatch_update(callback_update("favori_ekle_THYAO"), ctx)
    assert [f.stock_code for f in await store.list_favorites(USER_ID)] == ["THYAO"]

    await dispatch_update(callback_update("favori_cikar_THYAO"), ctx)
    assert await store.list_favorites(USER_ID) == []


@pytest.mark.asyncio
async def test_refresh_callback_reshows_menu(ctx, store, telegram_api):
    await make_member(store)

    await dispatch_update(callback_update("yenile_SISE"), ctx)

    assert "<b>SISE</b> için analiz seçin" in telegram_api.texts()[0]


@pytest.mark.asyncio
async def test_symbol_callback_is_guarded(ctx, configured_db, telegram_api):
    await dispatch_update(callback_update("derinlik_THYAO"), ctx)

    assert telegram_api.methods()[0] == "answerCallbackQuery"
    assert telegram_api.texts() == [JOIN_PROMPT_MESSAGE]


@pytest.mark.asyncio
async def test_unknown_callback_is_only_acknowledged(ctx, store, telegram_api):
    await make_member(store)

    await dispatch_update(callback_update("bilinmeyen"), ctx)

    assert telegram_api.methods() == ["answerCallbackQuery"]


@pytest.mark.asyncio
async def test_handler_failure_becomes_generic_reply(ctx, store, telegram_api):
    await make_member(store)
    ctx.market = AsyncMock()
    ctx.market.get_market_summary.side_effect = RuntimeError("boom")

    await send(ctx, "/bulten")

    assert telegram_api.texts() == [GENERIC_ERROR_MESSAGE]


@pytest.mark.asyncio
async def test_provider_without_data_reports_symbol(ctx, store, telegram_api):
    await make_member(store)
    ctx.market = AsyncMock()
    ctx.market.get_depth.return_value = None

    await send(ctx, "/derinlik THYAO")

    assert telegram_api.texts() == ["❌ THYAO için derinlik verisi alınamadı."]


@pytest.mark.asyncio
async def test_persistence_failure_on_gate_is_caught(ctx, configured_db, telegram_api):
    configured_db.fail_on.add(("users", "insert"))

    await send(ctx, "/start")

    assert telegram_api.texts() == [GENERIC_ERROR_MESSAGE]


@pytest.mark.asyncio
async def test_symbol_markup_is_escaped_in_replies(ctx, store, telegram_api):
    await make_member(store)

    await send(ctx, "/derinlik <x>")

    text = telegram_api.texts()[0]
    assert "<b>&lt;X&gt; - 25 Kademe Derinlik</b>" in text
    assert "<X>" not in text


@pytest.mark.asyncio
async def test_placeholder_reply_escapes_symbol(ctx, store, telegram_api):
    await make_member(store)

    await send(ctx, "/akd A&B")

    assert telegram_api.texts() == ["🏢 A&amp;B için AKD analizi hazırlanıyor..."]


@pytest.mark.asyncio
async def test_only_valid_codes_become_favorites(ctx, store, telegram_api):
    await make_member(store)

    await send(ctx, "/favoriekle THYAO,a&b,HELLO WORLD")

    assert [f.stock_code for f in await store.list_favorites(USER_ID)] == ["THYAO"]
    assert telegram_api.texts() == ["✅ THYAO favorilere eklendi."]


@pytest.mark.asyncio
async def test_favorite_list_without_valid_codes_gets_usage(ctx, store, telegram_api):
    await make_member(store)

    await send(ctx, "/favoriekle a&b")

    assert telegram_api.texts() == ["❌ Hisse kodu girin: /favoriekle THYAO,AKBNK"]
    assert await store.list_favorites(USER_ID) == []


@pytest.mark.asyncio
async def test_malformed_favorite_callback_is_ignored(ctx, store, telegram_api):
    await make_member(store)

    await dispatch_update(callback_update("favori_ekle_<b>x"), ctx)

    assert telegram_api.methods() == ["answerCallbackQuery"]
    assert await store.list_favorites(USER_ID) == []
