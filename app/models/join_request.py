"""
app/models/join_request.py

Purpose: Channel join request record

- One row per (user_id, chat_id)
- Snapshot of the requester's profile at request time
- Status updated by chat member events or admin action
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class JoinRequestStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    DECLINED = "declined"


class JoinRequest(BaseModel):
    """Row of the `join_requests` table."""

    model_config = ConfigDict(extra="ignore")

    user_id: int
    chat_id: int
    username: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    bio: Optional[str] = None
    status: JoinRequestStatus = JoinRequestStatus.PENDING
    requested_at: Optional[datetime] = None
    processed_at: Optional[datetime] = None
    processed_by: Optional[int] = None
