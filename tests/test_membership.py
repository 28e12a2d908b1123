import pytest

from app.flow.dispatcher import dispatch_update
from app.flow.handlers.start import check_membership, ensure_member, handle_start
from app.flow.states import (
    MembershipState,
    is_valid_transition,
    resolve_membership_state,
)
from app.models.join_request import JoinRequest, JoinRequestStatus
from app.models.user import User
from app.schemas.telegram import TelegramUser
from helpers import MAIN_CHANNEL_ID, USER_ID, callback_update, chat_member_update, join_request_update, message_update
from utils.constants import (
    BOT_NOT_CONFIGURED_MESSAGE,
    CHANNEL_NOT_CONFIGURED_MESSAGE,
    JOIN_PROMPT_MESSAGE,
    JOIN_REQUEST_RECEIVED_MESSAGE,
    MEMBER_MENU_MESSAGE,
    MEMBERSHIP_APPROVED_MESSAGE,
    NO_JOIN_REQUEST_MESSAGE,
    WELCOME_AFTER_REQUEST_MESSAGE,
)

TG_USER = TelegramUser(id=USER_ID, first_name="Ayşe", username="ayse")


def test_resolve_membership_state():
    user = User(id=1)
    request = JoinRequest(user_id=1, chat_id=-100)

    assert resolve_membership_state(None) == MembershipState.UNKNOWN
    assert resolve_membership_state(user) == MembershipState.PENDING
    assert resolve_membership_state(user, request) == MembershipState.REQUESTED
    assert resolve_membership_state(User(id=1, is_member=True), None) == MembershipState.MEMBER
    assert resolve_membership_state(User(id=1, is_member=True), request) == MembershipState.MEMBER


def test_membership_is_never_revoked_by_transitions():
    assert is_valid_transition(MembershipState.PENDING, MembershipState.REQUESTED)
    assert is_valid_transition(MembershipState.REQUESTED, MembershipState.MEMBER)
    assert is_valid_transition(MembershipState.MEMBER, MembershipState.MEMBER)
    assert not is_valid_transition(MembershipState.MEMBER, MembershipState.PENDING)


@pytest.mark.asyncio
async def test_start_without_channel_config(ctx, telegram_api):
    assert await handle_start(ctx, TG_USER, USER_ID) is False
    assert telegram_api.texts() == [BOT_NOT_CONFIGURED_MESSAGE]


@pytest.mark.asyncio
async def test_start_creates_user_and_sends_join_prompt(ctx, configured_db, telegram_api):
    assert await handle_start(ctx, TG_USER, USER_ID) is False

    assert configured_db.rows("users")[0]["is_member"] is False
    body = telegram_api.bodies()[0]
    assert body["text"] == JOIN_PROMPT_MESSAGE
    buttons = body["reply_markup"]["inline_keyboard"]
    assert buttons[0][0]["url"] == "https://t.me/+invite"
    assert buttons[1][0]["callback_data"] == "check_membership"


@pytest.mark.asyncio
async def test_join_prompt_falls_back_to_channel_link(ctx, fake_db, telegram_api):
    fake_db.tables["settings"] = [
        {"key": "main_channel_id", "value": str(MAIN_CHANNEL_ID)},
        {"key": "main_channel_link", "value": "@borsakanal"},
    ]

    await handle_start(ctx, TG_USER, USER_ID)

    buttons = telegram_api.bodies()[0]["reply_markup"]["inline_keyboard"]
    assert buttons[0][0]["url"] == "https://t.me/borsakanal"


@pytest.mark.asyncio
async def test_start_promotes_user_with_join_request(ctx, configured_db, store, telegram_api):
    await store.create_join_request(USER_ID, MAIN_CHANNEL_ID)

    assert await handle_start(ctx, TG_USER, USER_ID) is True

    assert (await store.get_user(USER_ID)).is_member is True
    assert telegram_api.texts() == [WELCOME_AFTER_REQUEST_MESSAGE]


@pytest.mark.asyncio
async def test_start_ignores_join_request_for_other_chat(ctx, configured_db, store):
    await store.create_join_request(USER_ID, -999)

    assert await handle_start(ctx, TG_USER, USER_ID) is False
    assert (await store.get_user(USER_ID)).is_member is False


@pytest.mark.asyncio
async def test_start_for_member_shows_menu(ctx, configured_db, store, telegram_api):
    await store.upsert_user(USER_ID)
    await store.set_membership(USER_ID, True)

    assert await handle_start(ctx, TG_USER, USER_ID) is True
    assert telegram_api.texts() == [MEMBER_MENU_MESSAGE]


@pytest.mark.asyncio
async def test_ensure_member_short_circuits_for_members(ctx, store, telegram_api):
    await store.upsert_user(USER_ID)
    await store.set_membership(USER_ID, True)

    assert await ensure_member(ctx, TG_USER, USER_ID) is True
    assert telegram_api.calls == []


@pytest.mark.asyncio
async def test_ensure_member_rereads_after_start_flow(ctx, configured_db, store, telegram_api):
    await store.create_join_request(USER_ID, MAIN_CHANNEL_ID)

    assert await ensure_member(ctx, TG_USER, USER_ID) is True
    assert telegram_api.texts() == [WELCOME_AFTER_REQUEST_MESSAGE]


@pytest.mark.asyncio
async def test_check_membership_paths(ctx, fake_db, store, telegram_api):
    await check_membership(ctx, TG_USER, USER_ID)
    assert telegram_api.texts()[-1] == CHANNEL_NOT_CONFIGURED_MESSAGE

    fake_db.tables["settings"] = [{"key": "main_channel_id", "value": str(MAIN_CHANNEL_ID)}]
    await check_membership(ctx, TG_USER, USER_ID)
    assert telegram_api.texts()[-1] == NO_JOIN_REQUEST_MESSAGE

    await store.create_join_request(USER_ID, MAIN_CHANNEL_ID)
    await check_membership(ctx, TG_USER, USER_ID)
    assert telegram_api.texts()[-1] == WELCOME_AFTER_REQUEST_MESSAGE
    assert (await store.get_user(USER_ID)).is_member is True

    await check_membership(ctx, TG_USER, USER_ID)
    assert telegram_api.texts()[-1] == MEMBER_MENU_MESSAGE


@pytest.mark.asyncio
async def test_join_request_event_grants_access(ctx, configured_db, store, telegram_api):
    await dispatch_update(join_request_update(MAIN_CHANNEL_ID), ctx)

    request = await store.get_join_request(USER_ID, MAIN_CHANNEL_ID)
    assert request.status == JoinRequestStatus.PENDING
    assert request.bio == "yatırımcı"
    assert (await store.get_user(USER_ID)).is_member is True
    assert telegram_api.bodies()[0]["chat_id"] == USER_ID
    assert telegram_api.texts() == [JOIN_REQUEST_RECEIVED_MESSAGE]
    # Platform-side approval is left to the channel admins
    assert "approveChatJoinRequest" not in telegram_api.methods()


@pytest.mark.asyncio
async def test_join_request_then_guarded_command_runs(ctx, configured_db, store, telegram_api):
    await dispatch_update(join_request_update(MAIN_CHANNEL_ID), ctx)

    await dispatch_update(message_update("/bulten"), ctx)

    assert "Günlük Piyasa Özeti" in telegram_api.texts()[-1]
    assert (await store.get_user(USER_ID)).is_member is True


@pytest.mark.asyncio
async def test_chat_member_join_approves_request(ctx, configured_db, store, telegram_api):
    await store.create_join_request(USER_ID, MAIN_CHANNEL_ID)

    await dispatch_update(chat_member_update(MAIN_CHANNEL_ID, "member", admin_id=7), ctx)

    request = await store.get_join_request(USER_ID, MAIN_CHANNEL_ID)
    assert request.status == JoinRequestStatus.APPROVED
    assert request.processed_by == 7
    assert (await store.get_user(USER_ID)).is_member is True
    assert telegram_api.texts() == [MEMBERSHIP_APPROVED_MESSAGE]


@pytest.mark.asyncio
async def test_chat_member_leave_keeps_access(ctx, configured_db, store, telegram_api):
    await store.upsert_user(USER_ID)
    await store.set_membership(USER_ID, True)

    await dispatch_update(chat_member_update(MAIN_CHANNEL_ID, "left"), ctx)

    assert (await store.get_user(USER_ID)).is_member is True
    assert telegram_api.calls == []


@pytest.mark.asyncio
async def test_check_membership_callback_is_not_guarded(ctx, configured_db, telegram_api):
    await dispatch_update(callback_update("check_membership"), ctx)

    assert telegram_api.methods()[0] == "answerCallbackQuery"
    assert telegram_api.texts() == [NO_JOIN_REQUEST_MESSAGE]
