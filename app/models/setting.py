"""
app/models/setting.py

Purpose: Key/value settings stored in the `settings` table

- Canonical keys used by the membership gate and admin endpoints
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class SettingKey(str, Enum):
    """Keys the bot reads from the settings table."""

    MAIN_CHANNEL_ID = "main_channel_id"
    INVITE_LINK = "invite_link"
    # Legacy public channel handle, used only when no invite link exists
    MAIN_CHANNEL_LINK = "main_channel_link"


class Setting(BaseModel):
    """Row of the `settings` table."""

    model_config = ConfigDict(extra="ignore")

    key: str
    value: Optional[str] = None
    updated_at: Optional[datetime] = None
