"""
app/services/store_service.py

Purpose: Persistence gateway over the Supabase table API

- Key-filtered CRUD for users, settings, join requests and favorites
- Reads log failures and return None / empty lists
- Writes raise PersistenceError so callers can report a failure
- No caching; every call is a remote round trip
"""

from typing import Any, Dict, List, Optional

from postgrest.exceptions import APIError

from app.core.exceptions import PersistenceError
from app.core.logging import get_logger
from app.db.supabase import (
    FAVORITES_TABLE,
    JOIN_REQUESTS_TABLE,
    SETTINGS_TABLE,
    USERS_TABLE,
    check_database_health,
)
from app.models.favorite import Favorite
from app.models.join_request import JoinRequest, JoinRequestStatus
from app.models.user import User
from utils.time_utils import utc_now_iso

logger = get_logger(__name__)

# Postgres unique_violation
UNIQUE_VIOLATION = "23505"


class StoreService:
    """
    Thin wrapper around an async Supabase client.
    The client is injected so the same code runs against a fake in tests.
    """

    def __init__(self, client):
        self.client = client

    def _table(self, name: str):
        return self.client.table(name)

    async def _select(self, table: str, filters: Dict[str, Any], order_by: Optional[str] = None) -> Optional[List[Dict[str, Any]]]:
        """Runs an equality-filtered select. Returns None on failure."""
        try:
            query = self._table(table).select("*")
            for column, value in filters.items():
                query = query.eq(column, value)
            if order_by:
                query = query.order(order_by, desc=True)
            response = await query.execute()
            return response.data or []
        except Exception as e:
            logger.error(f"Select on {table} failed: {e}", extra={"filters": filters})
            return None

    async def ping(self) -> bool:
        return await check_database_health(self.client)

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    async def get_setting(self, key: str) -> Optional[str]:
        rows = await self._select(SETTINGS_TABLE, {"key": key})
        if not rows:
            return None
        return rows[0].get("value")

    async def get_settings(self, keys: List[str]) -> Dict[str, Optional[str]]:
        """Fetches several settings; missing keys map to None."""
        return {key: await self.get_setting(key) for key in keys}

    async def set_setting(self, key: str, value: str) -> None:
        try:
            await self._table(SETTINGS_TABLE).upsert(
                {"key": key, "value": value, "updated_at": utc_now_iso()},
                on_conflict="key"
            ).execute()
            logger.info(f"Setting updated: {key}")
        except Exception as e:
            logger.error(f"Failed to update setting {key}: {e}")
            raise PersistenceError(f"Could not save setting '{key}'") from e

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    async def get_user(self, user_id: int) -> Optional[User]:
        rows = await self._select(USERS_TABLE, {"id": user_id})
        if not rows:
            return None
        return User.model_validate(rows[0])

    async def upsert_user(
        self,
        user_id: int,
        username: Optional[str] = None,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
    ) -> User:
        """
        Creates the user on first contact, otherwise refreshes display fields.
        The membership flag of an existing user is never touched here.
        """
        profile = {
            "username": username,
            "first_name": first_name,
            "last_name": last_name,
            "updated_at": utc_now_iso(),
        }
        existing = await self.get_user(user_id)

        try:
            if existing:
                response = await self._table(USERS_TABLE).update(profile).eq("id", user_id).execute()
                rows = response.data or []
                return User.model_validate(rows[0]) if rows else existing

            now = profile["updated_at"]
            response = await self._table(USERS_TABLE).insert(
                {"id": user_id, **profile, "is_member": False, "created_at": now}
            ).execute()
            logger.info("Created new user", extra={"user_id": user_id})
            rows = response.data or []
            if rows:
                return User.model_validate(rows[0])
            return User(id=user_id, username=username, first_name=first_name, last_name=last_name)

        except APIError as e:
            # Another request may have created the row in between
            if e.code == UNIQUE_VIOLATION:
                user = await self.get_user(user_id)
                if user:
                    return user
            logger.error(f"Failed to save user {user_id}: {e}")
            raise PersistenceError("Could not save user", details={"user_id": user_id}) from e
        except Exception as e:
            logger.error(f"Failed to save user {user_id}: {e}")
            raise PersistenceError("Could not save user", details={"user_id": user_id}) from e

    async def set_membership(self, user_id: int, is_member: bool) -> None:
        try:
            await self._table(USERS_TABLE).update(
                {"is_member": is_member, "updated_at": utc_now_iso()}
            ).eq("id", user_id).execute()
            logger.info(f"Membership set to {is_member}", extra={"user_id": user_id})
        except Exception as e:
            logger.error(f"Failed to update membership for {user_id}: {e}")
            raise PersistenceError("Could not update membership", details={"user_id": user_id}) from e

    async def list_users(self) -> List[User]:
        rows = await self._select(USERS_TABLE, {}, order_by="created_at")
        return [User.model_validate(row) for row in rows or []]

    # ------------------------------------------------------------------
    # Join requests
    # ------------------------------------------------------------------

    async def create_join_request(
        self,
        user_id: int,
        chat_id: int,
        username: Optional[str] = None,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        bio: Optional[str] = None,
    ) -> JoinRequest:
        """Stores a pending request; a repeat request for the same chat overwrites the row."""
        record = {
            "user_id": user_id,
            "chat_id": chat_id,
            "username": username,
            "first_name": first_name,
            "last_name": last_name,
            "bio": bio,
            "status": JoinRequestStatus.PENDING.value,
            "requested_at": utc_now_iso(),
        }
        try:
            response = await self._table(JOIN_REQUESTS_TABLE).upsert(
                record, on_conflict="user_id,chat_id"
            ).execute()
        except Exception as e:
            logger.error(f"Failed to store join request {user_id}/{chat_id}: {e}")
            raise PersistenceError(
                "Could not save join request",
                details={"user_id": user_id, "chat_id": chat_id}
            ) from e

        rows = response.data or []
        return JoinRequest.model_validate(rows[0] if rows else record)

    async def get_join_request(self, user_id: int, chat_id: int) -> Optional[JoinRequest]:
        rows = await self._select(JOIN_REQUESTS_TABLE, {"user_id": user_id, "chat_id": chat_id})
        if not rows:
            return None
        return JoinRequest.model_validate(rows[0])

    async def update_join_request_status(
        self,
        user_id: int,
        chat_id: int,
        status: JoinRequestStatus,
        processed_by: Optional[int] = None,
    ) -> None:
        try:
            await self._table(JOIN_REQUESTS_TABLE).update({
                "status": status.value,
                "processed_at": utc_now_iso(),
                "processed_by": processed_by,
            }).eq("user_id", user_id).eq("chat_id", chat_id).execute()
            logger.info(f"Join request {user_id}/{chat_id} marked {status.value}")
        except Exception as e:
            logger.error(f"Failed to update join request {user_id}/{chat_id}: {e}")
            raise PersistenceError(
                "Could not update join request",
                details={"user_id": user_id, "chat_id": chat_id}
            ) from e

    async def list_join_requests(self, status: Optional[JoinRequestStatus] = None) -> List[JoinRequest]:
        filters = {"status": status.value} if status else {}
        rows = await self._select(JOIN_REQUESTS_TABLE, filters, order_by="requested_at")
        return [JoinRequest.model_validate(row) for row in rows or []]

    # ------------------------------------------------------------------
    # Favorites
    # ------------------------------------------------------------------

    async def list_favorites(self, user_id: int) -> List[Favorite]:
        rows = await self._select(FAVORITES_TABLE, {"user_id": user_id}, order_by="created_at")
        return [Favorite.model_validate(row) for row in rows or []]

    async def add_favorite(self, user_id: int, stock_code: str) -> bool:
        """
        Adds a favorite.

        Returns:
            True if a row was inserted, False if it already existed
        """
        code = stock_code.strip().upper()
        existing = await self._select(FAVORITES_TABLE, {"user_id": user_id, "stock_code": code})
        if existing:
            return False

        try:
            await self._table(FAVORITES_TABLE).insert({
                "user_id": user_id,
                "stock_code": code,
                "created_at": utc_now_iso(),
            }).execute()
            return True
        except APIError as e:
            if e.code == UNIQUE_VIOLATION:
                return False
            logger.error(f"Failed to add favorite {code} for {user_id}: {e}")
            raise PersistenceError("Could not add favorite", details={"stock_code": code}) from e
        except Exception as e:
            logger.error(f"Failed to add favorite {code} for {user_id}: {e}")
            raise PersistenceError("Could not add favorite", details={"stock_code": code}) from e

    async def remove_favorite(self, user_id: int, stock_code: str) -> None:
        code = stock_code.strip().upper()
        try:
            await self._table(FAVORITES_TABLE).delete().eq("user_id", user_id).eq("stock_code", code).execute()
        except Exception as e:
            logger.error(f"Failed to remove favorite {code} for {user_id}: {e}")
            raise PersistenceError("Could not remove favorite", details={"stock_code": code}) from e

    async def clear_favorites(self, user_id: int) -> None:
        try:
            await self._table(FAVORITES_TABLE).delete().eq("user_id", user_id).execute()
        except Exception as e:
            logger.error(f"Failed to clear favorites for {user_id}: {e}")
            raise PersistenceError("Could not clear favorites", details={"user_id": user_id}) from e
