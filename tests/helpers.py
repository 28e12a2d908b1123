"""Builders for Telegram update payloads."""

from app.schemas.telegram import TelegramUpdate

USER_ID = 42
MAIN_CHANNEL_ID = -1001234567890


def _user(user_id: int) -> dict:
    return {"id": user_id, "is_bot": False, "first_name": "Ayşe", "username": f"user{user_id}"}


def message_update(text: str, user_id: int = USER_ID) -> TelegramUpdate:
    return TelegramUpdate.model_validate({
        "update_id": 1,
        "message": {
            "message_id": 10,
            "from": _user(user_id),
            "chat": {"id": user_id, "type": "private"},
            "date": 1700000000,
            "text": text,
        },
    })


def callback_update(data: str, user_id: int = USER_ID) -> TelegramUpdate:
    return TelegramUpdate.model_validate({
        "update_id": 2,
        "callback_query": {
            "id": "cb-1",
            "from": _user(user_id),
            "message": {
                "message_id": 11,
                "chat": {"id": user_id, "type": "private"},
                "date": 1700000000,
                "text": "menu",
            },
            "data": data,
        },
    })


def join_request_update(chat_id: int, user_id: int = USER_ID) -> TelegramUpdate:
    return TelegramUpdate.model_validate({
        "update_id": 3,
        "chat_join_request": {
            "chat": {"id": chat_id, "type": "channel", "title": "Borsa"},
            "from": _user(user_id),
            "user_chat_id": user_id,
            "date": 1700000000,
            "bio": "yatırımcı",
        },
    })


def chat_member_update(chat_id: int, status: str, user_id: int = USER_ID, admin_id: int = 1) -> TelegramUpdate:
    return TelegramUpdate.model_validate({
        "update_id": 4,
        "chat_member": {
            "chat": {"id": chat_id, "type": "channel", "title": "Borsa"},
            "from": _user(admin_id),
            "date": 1700000000,
            "old_chat_member": {"user": _user(user_id), "status": "left"},
            "new_chat_member": {"user": _user(user_id), "status": status},
        },
    })
