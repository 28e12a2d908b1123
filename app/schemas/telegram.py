"""
app/schemas/telegram.py

Purpose: Telegram webhook payload schemas

- Validates the subset of the Bot API Update object the bot handles
- message, callback_query, chat_join_request, chat_member
- Unknown fields are ignored so new Bot API fields never break parsing
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class TelegramModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class TelegramUser(TelegramModel):
    id: int
    is_bot: bool = False
    first_name: str = ""
    last_name: Optional[str] = None
    username: Optional[str] = None


class Chat(TelegramModel):
    id: int
    type: str = "private"
    title: Optional[str] = None
    username: Optional[str] = None


class Message(TelegramModel):
    message_id: int
    from_user: Optional[TelegramUser] = Field(default=None, alias="from")
    chat: Chat
    date: int = 0
    text: Optional[str] = None


class CallbackQuery(TelegramModel):
    id: str
    from_user: TelegramUser = Field(..., alias="from")
    message: Optional[Message] = None
    data: Optional[str] = None


class ChatInviteLink(TelegramModel):
    invite_link: str
    name: Optional[str] = None
    creates_join_request: Optional[bool] = None


class ChatJoinRequest(TelegramModel):
    chat: Chat
    from_user: TelegramUser = Field(..., alias="from")
    date: int = 0
    bio: Optional[str] = None
    invite_link: Optional[ChatInviteLink] = None


class ChatMember(TelegramModel):
    user: TelegramUser
    status: str


class ChatMemberUpdated(TelegramModel):
    chat: Chat
    from_user: TelegramUser = Field(..., alias="from")
    date: int = 0
    old_chat_member: ChatMember
    new_chat_member: ChatMember


class TelegramUpdate(TelegramModel):
    """
    Incoming webhook update.
    At most one of the optional payloads is set by Telegram.
    """
    update_id: int = 0
    message: Optional[Message] = None
    callback_query: Optional[CallbackQuery] = None
    chat_join_request: Optional[ChatJoinRequest] = None
    chat_member: Optional[ChatMemberUpdated] = None

    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={
            "example": {
                "update_id": 10000,
                "message": {
                    "message_id": 1,
                    "from": {"id": 42, "is_bot": False, "first_name": "Ayşe", "username": "ayse"},
                    "chat": {"id": 42, "type": "private"},
                    "date": 1700000000,
                    "text": "/start"
                }
            }
        }
    )

    @property
    def kind(self) -> str:
        if self.chat_join_request:
            return "chat_join_request"
        if self.chat_member:
            return "chat_member"
        if self.callback_query:
            return "callback_query"
        if self.message:
            return "message"
        return "unknown"

    @property
    def actor(self) -> Optional[TelegramUser]:
        """The user who triggered the update."""
        if self.chat_join_request:
            return self.chat_join_request.from_user
        if self.chat_member:
            return self.chat_member.new_chat_member.user
        if self.callback_query:
            return self.callback_query.from_user
        if self.message:
            return self.message.from_user
        return None

    @property
    def reply_chat_id(self) -> Optional[int]:
        """Chat an error notice should go to, if any."""
        if self.callback_query and self.callback_query.message:
            return self.callback_query.message.chat.id
        if self.message:
            return self.message.chat.id
        return None
