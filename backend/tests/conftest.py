"""Pytest configuration and fixtures."""

import copy
import os
import time

# Settings are read at import time, so the environment must be in place first
os.environ.update({
    "ENVIRONMENT": "test",
    "SUPABASE_URL": "https://project.supabase.co",
    "SUPABASE_ANON_KEY": "anon-key",
    "SUPABASE_SERVICE_ROLE_KEY": "service-role-key",
    "SUPABASE_JWT_SECRET": "test-jwt-secret-with-enough-length-for-hs256",
    "SUPABASE_JWT_SECRET_BASE64": "false",
    "FIREBASE_SERVICE_ACCOUNT_JSON": "",
    "RATE_LIMIT_ENABLED": "false",
})

import jwt
import pytest
from fastapi.testclient import TestClient

from stylu.clients.fcm import FirebaseMessenger
from stylu.core.exceptions import UpstreamError
from stylu.dependencies import get_messenger, get_service_client, get_supabase_client
from stylu.main import app

JWT_SECRET = os.environ["SUPABASE_JWT_SECRET"]
JWT_ISSUER = "https://project.supabase.co/auth/v1"

PRIMARY_KEYS = {
    "outfit": "outfit_id",
    "outfit_schedule": "schedule_id",
    "device_tokens": "id",
    "notifications": "id",
}


def make_token(sub="user-1", role="authenticated", **overrides):
    claims = {
        "sub": sub,
        "email": f"{sub}@example.com",
        "role": role,
        "aud": "authenticated",
        "iss": JWT_ISSUER,
        "exp": int(time.time()) + 3600,
    }
    claims.update(overrides)
    return jwt.encode(claims, JWT_SECRET, algorithm="HS256")


def auth_headers(sub="user-1", role="authenticated", **overrides):
    return {"Authorization": f"Bearer {make_token(sub, role, **overrides)}"}


def seed_wardrobe(supabase):
    supabase.add("sub_category", subcategory_id=1, name="Shirts")
    supabase.add("item", item_id=52, item_name="Blue shirt", image_url="https://img/52.png",
                 colour="blue", subcategory_id=1)
    supabase.add("item", item_id=54, item_name="Chinos", image_url="https://img/54.png",
                 colour="beige", subcategory_id=None)


def seed_outfit(supabase, outfit_id, user_id="user-1", name="Office"):
    supabase.add("outfit", outfit_id=outfit_id, user_id=user_id, outfit_name=name, category="work")
    supabase.add("outfit_item", outfit_id=outfit_id, item_id=52,
                 layout_data={"x": 10, "y": 5, "scale": 1.2, "width": 120, "height": 90})
    supabase.add("outfit_item", outfit_id=outfit_id, item_id=54, layout_data=None)


def seed_schedule(supabase, schedule_id, outfit_id, event_date, user_id="user-1", event_name=None):
    supabase.add("outfit_schedule", schedule_id=schedule_id, user_id=user_id, outfit_id=outfit_id,
                 event_date=event_date, event_name=event_name, notes=None)


def _as_text(value):
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class InMemorySupabase:
    """Stand-in for SupabaseClient over plain dict tables.

    Understands eq/gte/lte filters, ordering, and the outfit -> outfit_item ->
    item -> sub_category embedding used by the outfit queries.
    """

    def __init__(self):
        self.tables = {
            "outfit": [],
            "outfit_item": [],
            "item": [],
            "sub_category": [],
            "outfit_schedule": [],
            "device_tokens": [],
            "notifications": [],
        }
        self.calls = []
        self.tokens_seen = []
        self._failures = []
        self._next_id = 1

    # -- test helpers ------------------------------------------------------

    def fail(self, method, table, status=500, body='{"message":"boom"}', when=None):
        """Make matching calls raise UpstreamError; ``when`` receives the filters."""
        self._failures.append((method, table, when, status, body))

    def add(self, table, **row):
        pk = PRIMARY_KEYS.get(table)
        if pk and pk not in row:
            row[pk] = self._allocate_id()
        self.tables[table].append(row)
        return row

    def _allocate_id(self):
        value = self._next_id
        self._next_id += 1
        return value

    def _check_failure(self, method, table, filters):
        for f_method, f_table, when, status, body in self._failures:
            if f_method == method and f_table == table and (when is None or when(filters)):
                raise UpstreamError(status, body)

    @staticmethod
    def _matches(row, filters):
        for column, op, value in filters:
            if column not in row:
                return False
            actual = _as_text(row[column])
            expected = _as_text(value)
            if op == "eq" and actual != expected:
                return False
            if op == "gte" and actual < expected:
                return False
            if op == "lte" and actual > expected:
                return False
        return True

    def _embed_outfit(self, outfit):
        result = dict(outfit)
        embedded = []
        for link in self.tables["outfit_item"]:
            if link["outfit_id"] != outfit["outfit_id"]:
                continue
            item = next((i for i in self.tables["item"] if i["item_id"] == link["item_id"]), None)
            item_view = None
            if item is not None:
                sub = next(
                    (s for s in self.tables["sub_category"] if s["subcategory_id"] == item.get("subcategory_id")),
                    None,
                )
                item_view = {
                    "item_id": item["item_id"],
                    "item_name": item.get("item_name"),
                    "image_url": item.get("image_url"),
                    "colour": item.get("colour"),
                    "sub_category": {"name": sub["name"]} if sub else None,
                }
            embedded.append({
                "item_id": link["item_id"],
                "layout_data": link.get("layout_data"),
                "item": item_view,
            })
        result["outfit_item"] = embedded
        return result

    # -- SupabaseClient interface -------------------------------------------

    def select(self, table, query, token=None):
        self.calls.append(("GET", table, list(query.filters)))
        self.tokens_seen.append(token)
        self._check_failure("GET", table, query.filters)
        rows = [copy.deepcopy(r) for r in self.tables[table] if self._matches(r, query.filters)]
        for column, descending in reversed(query.ordering):
            rows.sort(key=lambda r: r.get(column), reverse=descending)
        if table == "outfit" and query.columns and "outfit_item(" in query.columns:
            rows = [self._embed_outfit(r) for r in rows]
        return rows

    def insert(self, table, rows, token=None, returning=True):
        self.calls.append(("POST", table, copy.deepcopy(rows)))
        self.tokens_seen.append(token)
        self._check_failure("POST", table, [])
        created = [self.add(table, **copy.deepcopy(r)) for r in (rows if isinstance(rows, list) else [rows])]
        return copy.deepcopy(created) if returning else []

    def update(self, table, values, query, token=None, returning=False):
        self.calls.append(("PATCH", table, list(query.filters), dict(values)))
        self.tokens_seen.append(token)
        self._check_failure("PATCH", table, query.filters)
        touched = []
        for row in self.tables[table]:
            if self._matches(row, query.filters):
                row.update(values)
                touched.append(copy.deepcopy(row))
        return touched if returning else []

    def delete(self, table, query, token=None):
        self.calls.append(("DELETE", table, list(query.filters)))
        self.tokens_seen.append(token)
        self._check_failure("DELETE", table, query.filters)
        self.tables[table] = [r for r in self.tables[table] if not self._matches(r, query.filters)]

    def calls_for(self, method, table):
        return [c for c in self.calls if c[0] == method and c[1] == table]


class FakeMessenger(FirebaseMessenger):
    """Builds real firebase_admin messages but records them instead of sending."""

    def __init__(self):
        super().__init__(app=None, channel_id="stylu_channel")
        self.sent = []
        self.errors = {}

    def send(self, message):
        target = message.token or message.topic
        if target in self.errors:
            raise self.errors[target]
        self.sent.append(message)
        return f"projects/stylu/messages/{len(self.sent)}"


@pytest.fixture
def supabase():
    return InMemorySupabase()


@pytest.fixture
def service_supabase():
    return InMemorySupabase()


@pytest.fixture
def messenger():
    return FakeMessenger()


@pytest.fixture
def client(supabase, service_supabase, messenger):
    app.dependency_overrides[get_supabase_client] = lambda: supabase
    app.dependency_overrides[get_service_client] = lambda: service_supabase
    app.dependency_overrides[get_messenger] = lambda: messenger
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
