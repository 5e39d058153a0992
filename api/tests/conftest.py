# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Pytest configuration and fixtures.

Endpoint tests run against ``FakeBackend``, an in-memory stand-in for the
hosted backend that scopes rows to the token's user the way row-level
security does.
"""

import itertools
import time
import uuid
import pytest
import jwt
from datetime import date, datetime, timedelta, timezone
from typing import Dict, Any, List, Optional

from app import create_app
from services.auth import AuthService
from services.backend import BackendError
from utils.clock import fixed_clock

JWT_SECRET = "test-jwt-secret-with-enough-length-for-hs256"
TODAY = date(2024, 6, 15)
USER_ID = "11111111-1111-1111-1111-111111111111"
OTHER_USER_ID = "22222222-2222-2222-2222-222222222222"


def make_token(user_id: str = USER_ID, email: str = "tutor@example.com", expires_in: int = 3600,
               secret: str = JWT_SECRET, audience: str = "authenticated") -> str:
    """Mint an access token shaped like the backend's."""
    now = int(time.time())
    payload = {
        "sub": user_id,
        "email": email,
        "role": "authenticated",
        "aud": audience,
        "iat": now,
        "exp": now + expires_in,
        "user_metadata": {"full_name": "Maria Silva"}
    }
    return jwt.encode(payload, secret, algorithm="HS256")


class FakeBackend:
    """In-memory backend with per-user row visibility."""

    def __init__(self):
        self.tables: Dict[str, List[Dict[str, Any]]] = {
            "profiles": [], "pets": [], "vaccines": [], "notifications": []
        }
        self.accounts: Dict[str, Dict[str, Any]] = {}
        self.calls: List[tuple] = []
        self.healthy = True
        self._clock = itertools.count()

    # Helpers

    def _user_id(self, access_token: str) -> str:
        return jwt.decode(access_token, options={"verify_signature": False})["sub"]

    def _owned_pet_ids(self, user_id: str) -> set:
        return {pet["id"] for pet in self.tables["pets"] if pet["user_id"] == user_id}

    def _visible(self, table: str, user_id: str) -> List[Dict[str, Any]]:
        rows = self.tables[table]
        if table == "profiles":
            return [r for r in rows if r["id"] == user_id]
        if table == "vaccines":
            pet_ids = self._owned_pet_ids(user_id)
            return [r for r in rows if r["pet_id"] in pet_ids]
        return [r for r in rows if r.get("user_id") == user_id]

    @staticmethod
    def _matches(row: Dict[str, Any], filters) -> bool:
        for operator, column, value in filters or []:
            current = row.get(column)
            if operator == "eq" and current != value:
                return False
            if operator == "not_is" and current is None:
                return False
            if operator == "lte" and (current is None or current > value):
                return False
            if operator == "gte" and (current is None or current < value):
                return False
        return True

    def _join(self, row: Dict[str, Any], columns: str) -> Dict[str, Any]:
        joined = dict(row)
        if "pets:pet_id" in columns:
            pet = next((p for p in self.tables["pets"] if p["id"] == row.get("pet_id")), None)
            joined["pets"] = {"name": pet["name"], "species": pet["species"]} if pet else None
        if "vaccines:vaccine_id" in columns:
            vaccine = next((v for v in self.tables["vaccines"] if v["id"] == row.get("vaccine_id")), None)
            joined["vaccines"] = {"name": vaccine["name"]} if vaccine else None
        return joined

    def add(self, table: str, **record) -> Dict[str, Any]:
        """Seed a row directly."""
        row = {"id": str(uuid.uuid4()), "created_at": self._timestamp()}
        if table == "notifications":
            row.update({"is_read": False, "type": "general"})
        row.update(record)
        self.tables[table].append(row)
        return row

    def _timestamp(self) -> str:
        moment = datetime(2024, 1, 1, tzinfo=timezone.utc) + timedelta(seconds=next(self._clock))
        return moment.isoformat()

    # Tables

    def select(self, table, access_token, columns="*", filters=None, order_by=None,
               descending=False, limit=None):
        self.calls.append(("select", table))
        rows = [r for r in self._visible(table, self._user_id(access_token)) if self._matches(r, filters)]
        if order_by:
            rows.sort(key=lambda r: (r.get(order_by) is None, r.get(order_by) or ""), reverse=descending)
        if limit is not None:
            rows = rows[:limit]
        return [self._join(r, columns) for r in rows]

    def select_one(self, table, access_token, record_id, columns="*"):
        rows = self.select(table, access_token, columns, filters=[("eq", "id", record_id)], limit=1)
        return rows[0] if rows else None

    def count(self, table, access_token, filters=None):
        self.calls.append(("count", table))
        return len([r for r in self._visible(table, self._user_id(access_token)) if self._matches(r, filters)])

    def insert(self, table, access_token, record):
        return self.insert_many(table, access_token, [record])[0]

    def insert_many(self, table, access_token, records):
        self.calls.append(("insert", table))
        return [dict(self.add(table, **record)) for record in records]

    def update(self, table, access_token, record_id, changes):
        rows = self.update_where(table, access_token, [("eq", "id", record_id)], changes)
        return rows[0] if rows else None

    def update_where(self, table, access_token, filters, changes):
        self.calls.append(("update", table))
        updated = []
        for row in self._visible(table, self._user_id(access_token)):
            if self._matches(row, filters):
                row.update(changes)
                updated.append(dict(row))
        return updated

    def delete(self, table, access_token, record_id):
        self.calls.append(("delete", table))
        visible = {r["id"] for r in self._visible(table, self._user_id(access_token))}
        if record_id not in visible:
            return False
        self.tables[table] = [r for r in self.tables[table] if r["id"] != record_id]
        if table == "pets":
            self.tables["vaccines"] = [v for v in self.tables["vaccines"] if v["pet_id"] != record_id]
        return True

    # Auth

    def sign_up(self, email, password, metadata, redirect_to=None):
        self.calls.append(("sign_up", email, metadata, redirect_to))
        if email in self.accounts:
            raise BackendError("User already registered", 422)
        user_id = str(uuid.uuid4())
        self.accounts[email] = {"password": password, "user_id": user_id}
        return {"user_id": user_id, "email": email, "confirmation_required": True}

    def sign_in(self, email, password):
        self.calls.append(("sign_in", email))
        account = self.accounts.get(email)
        if account is None or account["password"] != password:
            raise BackendError("Invalid login credentials", 400)
        return {
            "access_token": make_token(account["user_id"], email),
            "refresh_token": "refresh-token",
            "token_type": "bearer",
            "expires_in": 3600,
            "user_id": account["user_id"]
        }

    def send_password_reset(self, email, redirect_to=None):
        self.calls.append(("send_password_reset", email, redirect_to))

    def update_user(self, access_token, attributes):
        self.calls.append(("update_user", self._user_id(access_token), attributes))

    def sign_out(self, access_token):
        self.calls.append(("sign_out", self._user_id(access_token)))

    def ping(self):
        return self.healthy

    def auth_calls(self, name: str) -> List[tuple]:
        return [call for call in self.calls if call[0] == name]


@pytest.fixture
def backend():
    """Empty in-memory backend."""
    return FakeBackend()


@pytest.fixture
def test_config() -> Dict[str, Any]:
    return {
        "ENVIRONMENT": "test",
        "TESTING": True,
        "OTEL_ENABLED": False,
        "DOCS_ENABLED": False,
        "BASE_URL": "http://localhost:5000",
        "SUPABASE_JWT_SECRET": JWT_SECRET,
        "EMAIL_REDIRECT_URL": "http://localhost:3000/dashboard",
        "PASSWORD_RESET_REDIRECT_URL": "http://localhost:3000/auth/reset-password",
        "CORS_ALLOWED_ORIGINS": ["http://localhost:3000"]
    }


@pytest.fixture
def app(test_config, backend):
    """Application wired to the fake backend and a fixed clock."""
    return create_app(
        config=test_config,
        backend=backend,
        auth_service=AuthService(JWT_SECRET),
        clock=fixed_clock(TODAY)
    )


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def token() -> str:
    return make_token()


@pytest.fixture
def auth_headers(token) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def other_auth_headers() -> Dict[str, str]:
    return {"Authorization": f"Bearer {make_token(OTHER_USER_ID, 'outra@example.com')}"}


@pytest.fixture
def pet(backend) -> Dict[str, Any]:
    """A dog owned by the test user."""
    return backend.add("pets", user_id=USER_ID, name="Rex", species="cachorro",
                       breed="Vira-lata", birth_date="2020-03-01", weight=12.5)


def days_from_today(days: int) -> Optional[str]:
    return (TODAY + timedelta(days=days)).isoformat()
