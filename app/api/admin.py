"""
app/api/admin.py

Purpose: Admin HTTP endpoints

- Users, settings, invite link, announcements
- Join request review
- Webhook registration
- No authentication: deploy behind a private network or gateway
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.core.logging import get_logger
from app.dependencies import get_bot_context
from app.flow.context import BotContext
from app.models.join_request import JoinRequestStatus
from app.schemas.admin import (
    AnnouncementRequest,
    AnnouncementResponse,
    CreateInviteRequest,
    CreateInviteResponse,
    JoinRequestActionResponse,
    JoinRequestsResponse,
    SettingsResponse,
    SettingsUpdate,
    SettingsUpdateResponse,
    UsersResponse,
    WebhookRegisterRequest,
    WebhookRegisterResponse,
)
from app.services import admin_service

logger = get_logger(__name__)
router = APIRouter(prefix="/admin")


@router.get("/users", response_model=UsersResponse)
async def get_users(ctx: BotContext = Depends(get_bot_context)):
    users = await admin_service.list_users(ctx)
    return UsersResponse(users=users)


@router.get("/settings", response_model=SettingsResponse)
async def get_settings(ctx: BotContext = Depends(get_bot_context)):
    return SettingsResponse(settings=await admin_service.get_settings_view(ctx))


@router.post("/settings", response_model=SettingsUpdateResponse)
async def update_settings(body: SettingsUpdate, ctx: BotContext = Depends(get_bot_context)):
    """
    Partial update: only fields present in the request body are written.
    """
    updates = body.model_dump(exclude_unset=True)
    written = await admin_service.update_settings(ctx, updates)
    return SettingsUpdateResponse(updated=written)


@router.post("/create-invite", response_model=CreateInviteResponse)
async def create_invite(body: CreateInviteRequest, ctx: BotContext = Depends(get_bot_context)):
    result = await admin_service.create_invite_link(ctx, body.chat_id)
    return CreateInviteResponse(**result)


@router.post("/announcement", response_model=AnnouncementResponse)
async def send_announcement(body: AnnouncementRequest, ctx: BotContext = Depends(get_bot_context)):
    result = await admin_service.send_announcement(ctx, body.message)
    return AnnouncementResponse(sent=result.sent, failed=result.failed, total=result.total)


@router.get("/join-requests", response_model=JoinRequestsResponse)
async def get_join_requests(
    status: Optional[JoinRequestStatus] = Query(default=None),
    ctx: BotContext = Depends(get_bot_context)
):
    requests = await admin_service.list_join_requests(ctx, status)
    return JoinRequestsResponse(join_requests=requests)


@router.post("/join-requests/{user_id}/{chat_id}/approve", response_model=JoinRequestActionResponse)
async def approve_join_request(user_id: int, chat_id: int, ctx: BotContext = Depends(get_bot_context)):
    status = await admin_service.process_join_request(ctx, user_id, chat_id, approve=True)
    return JoinRequestActionResponse(status=status.value)


@router.post("/join-requests/{user_id}/{chat_id}/decline", response_model=JoinRequestActionResponse)
async def decline_join_request(user_id: int, chat_id: int, ctx: BotContext = Depends(get_bot_context)):
    status = await admin_service.process_join_request(ctx, user_id, chat_id, approve=False)
    return JoinRequestActionResponse(status=status.value)


@router.post("/webhook/register", response_model=WebhookRegisterResponse)
async def register_webhook(body: WebhookRegisterRequest, ctx: BotContext = Depends(get_bot_context)):
    await admin_service.register_webhook(ctx, body.url)
    return WebhookRegisterResponse(url=body.url)
