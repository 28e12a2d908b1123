"""
Shared fixtures

- FakeSupabase: in-memory stand-in for the Supabase query builder, so the
  real StoreService runs in every test
- TelegramRecorder: httpx.MockTransport handler that records Bot API calls
- ctx: a BotContext wired to both
"""

import json
from typing import Any, Dict, List, Optional, Set, Tuple

import httpx
import pytest
from postgrest.exceptions import APIError

from app.core.config import Settings
from app.flow.context import BotContext
from app.services.market_data_service import MockMarketDataProvider
from app.services.store_service import StoreService
from app.services.telegram_service import TelegramService

from helpers import MAIN_CHANNEL_ID

# Columns that must be unique per table
UNIQUE_KEYS = {
    "users": ("id",),
    "settings": ("key",),
    "join_requests": ("user_id", "chat_id"),
    "user_favorites": ("user_id", "stock_code"),
}


class FakeResponse:
    def __init__(self, data):
        self.data = data


class FakeQuery:
    """Chainable query mirroring the subset of postgrest the store uses."""

    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table = table
        self.op = "select"
        self.filters: List[Tuple[str, Any]] = []
        self.payload: Optional[Dict[str, Any]] = None
        self.on_conflict: Optional[str] = None
        self.order_by: Optional[Tuple[str, bool]] = None
        self.limit_to: Optional[int] = None

    def select(self, *columns):
        self.op = "select"
        return self

    def insert(self, row):
        self.op, self.payload = "insert", dict(row)
        return self

    def upsert(self, row, on_conflict=None):
        self.op, self.payload, self.on_conflict = "upsert", dict(row), on_conflict
        return self

    def update(self, values):
        self.op, self.payload = "update", dict(values)
        return self

    def delete(self):
        self.op = "delete"
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def order(self, column, desc=False):
        self.order_by = (column, desc)
        return self

    def limit(self, count):
        self.limit_to = count
        return self

    def _matches(self, row):
        return all(row.get(column) == value for column, value in self.filters)

    async def execute(self):
        self.db.queries.append((self.table, self.op))
        if (self.table, self.op) in self.db.fail_on:
            raise APIError({"message": "simulated failure", "code": "XX000", "hint": None, "details": None})

        rows = self.db.tables.setdefault(self.table, [])

        if self.op == "select":
            found = [dict(row) for row in rows if self._matches(row)]
            if self.order_by:
                column, desc = self.order_by
                found.sort(key=lambda r: str(r.get(column) or ""), reverse=desc)
            if self.limit_to is not None:
                found = found[:self.limit_to]
            return FakeResponse(found)

        if self.op == "insert":
            keys = UNIQUE_KEYS[self.table]
            if any(all(row.get(k) == self.payload.get(k) for k in keys) for row in rows):
                raise APIError({"message": "duplicate key value", "code": "23505", "hint": None, "details": None})
            rows.append(dict(self.payload))
            return FakeResponse([dict(self.payload)])

        if self.op == "upsert":
            keys = tuple(self.on_conflict.split(",")) if self.on_conflict else UNIQUE_KEYS[self.table]
            for row in rows:
                if all(row.get(k) == self.payload.get(k) for k in keys):
                    row.update(self.payload)
                    return FakeResponse([dict(row)])
            rows.append(dict(self.payload))
            return FakeResponse([dict(self.payload)])

        if self.op == "update":
            changed = []
            for row in rows:
                if self._matches(row):
                    row.update(self.payload)
                    changed.append(dict(row))
            return FakeResponse(changed)

        if self.op == "delete":
            removed = [dict(row) for row in rows if self._matches(row)]
            self.db.tables[self.table] = [row for row in rows if not self._matches(row)]
            return FakeResponse(removed)

        raise AssertionError(f"unsupported op {self.op}")


class FakeSupabase:
    def __init__(self):
        self.tables: Dict[str, List[Dict[str, Any]]] = {}
        self.fail_on: Set[Tuple[str, str]] = set()
        self.queries: List[Tuple[str, str]] = []

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def rows(self, name: str) -> List[Dict[str, Any]]:
        return self.tables.get(name, [])


class TelegramRecorder:
    """Answers Bot API calls with ok=true unless told otherwise."""

    def __init__(self):
        self.calls: List[Tuple[str, Dict[str, Any]]] = []
        self.responses: Dict[str, Dict[str, Any]] = {}
        self.blocked_chat_ids: Set[int] = set()

    def __call__(self, request: httpx.Request) -> httpx.Response:
        method = request.url.path.rsplit("/", 1)[-1]
        body = json.loads(request.content or b"{}")
        self.calls.append((method, body))

        if method == "sendMessage" and body.get("chat_id") in self.blocked_chat_ids:
            return httpx.Response(403, json={
                "ok": False,
                "error_code": 403,
                "description": "Forbidden: bot was blocked by the user",
            })
        if method in self.responses:
            return httpx.Response(200, json=self.responses[method])
        return httpx.Response(200, json={"ok": True, "result": True})

    def bodies(self, method: str = "sendMessage") -> List[Dict[str, Any]]:
        return [body for name, body in self.calls if name == method]

    def texts(self) -> List[str]:
        return [body["text"] for body in self.bodies("sendMessage")]

    def methods(self) -> List[str]:
        return [name for name, _ in self.calls]


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        _env_file=None,
        TELEGRAM_BOT_TOKEN="test-token",
        SUPABASE_URL="https://example.supabase.co",
        SUPABASE_SERVICE_ROLE_KEY="service-role-key",
        BROADCAST_DELAY_SECONDS=0,
        MARKET_DATA_SEED=7,
    )


@pytest.fixture
def fake_db() -> FakeSupabase:
    return FakeSupabase()


@pytest.fixture
def store(fake_db) -> StoreService:
    return StoreService(fake_db)


@pytest.fixture
def telegram_api() -> TelegramRecorder:
    return TelegramRecorder()


@pytest.fixture
def telegram(telegram_api) -> TelegramService:
    client = httpx.AsyncClient(transport=httpx.MockTransport(telegram_api))
    return TelegramService("test-token", client)


@pytest.fixture
def ctx(telegram, store, test_settings) -> BotContext:
    return BotContext(
        telegram=telegram,
        store=store,
        market=MockMarketDataProvider(seed=7),
        config=test_settings,
    )


@pytest.fixture
def configured_db(fake_db) -> FakeSupabase:
    """Store with the main channel set up."""
    fake_db.tables["settings"] = [
        {"key": "main_channel_id", "value": str(MAIN_CHANNEL_ID)},
        {"key": "invite_link", "value": "https://t.me/+invite"},
    ]
    return fake_db
