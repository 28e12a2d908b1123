"""
app/models/favorite.py

Purpose: Favorite stock record (`user_favorites` table)
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class Favorite(BaseModel):
    model_config = ConfigDict(extra="ignore")

    user_id: int
    stock_code: str
    created_at: Optional[datetime] = None
