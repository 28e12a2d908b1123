"""
app/schemas/admin.py

Purpose: Admin endpoint request / response bodies
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from app.models.join_request import JoinRequest
from app.models.user import User


class SettingsUpdate(BaseModel):
    """
    Partial settings update; fields left out are not touched.
    """
    main_channel_id: Optional[str] = None
    invite_link: Optional[str] = None
    main_channel_link: Optional[str] = None

    @field_validator("main_channel_id", mode="before")
    @classmethod
    def coerce_channel_id(cls, v):
        """Admin UIs send the id as a number or a string."""
        if isinstance(v, int):
            return str(v)
        return v


class SettingsResponse(BaseModel):
    settings: Dict[str, str]


class SettingsUpdateResponse(BaseModel):
    success: bool = True
    updated: Dict[str, str]


class CreateInviteRequest(BaseModel):
    chat_id: str = Field(..., min_length=1, description="Channel id, e.g. -1001234567890")

    @field_validator("chat_id", mode="before")
    @classmethod
    def coerce_chat_id(cls, v):
        if isinstance(v, int):
            return str(v)
        return v


class CreateInviteResponse(BaseModel):
    invite_link: str
    expire_date: Optional[int] = None


class AnnouncementRequest(BaseModel):
    message: str

    @field_validator("message")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Message is required")
        return v


class AnnouncementResponse(BaseModel):
    sent: int
    failed: int
    total: int


class UsersResponse(BaseModel):
    users: List[User]


class JoinRequestsResponse(BaseModel):
    join_requests: List[JoinRequest]


class JoinRequestActionResponse(BaseModel):
    success: bool = True
    status: str


class WebhookRegisterRequest(BaseModel):
    url: str = Field(..., min_length=1)


class WebhookRegisterResponse(BaseModel):
    success: bool = True
    url: str
