# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Unit tests for the backend gateway.
The SDK client is replaced with mocks through ``client_factory``.
"""

import pytest
from unittest.mock import MagicMock

from services.backend import SupabaseBackend, BackendError, BackendConfigurationError

CHAIN_METHODS = ("select", "eq", "is_", "lte", "gte", "order", "limit", "insert", "update", "delete")


def make_query(data=None, count=None):
    """Query builder mock whose filter methods chain onto itself."""
    query = MagicMock(name="query")
    for method in CHAIN_METHODS:
        getattr(query, method).return_value = query
    query.not_ = query
    query.execute.return_value = MagicMock(data=data, count=count)
    return query


class TestBackendConfiguration:
    """Test gateway construction."""

    def test_from_config(self):
        backend = SupabaseBackend.from_config({
            "SUPABASE_URL": "https://project.supabase.co",
            "SUPABASE_ANON_KEY": "anon",
            "SUPABASE_SERVICE_KEY": ""
        })

        assert backend.url == "https://project.supabase.co"
        assert backend.service_key is None

    def test_missing_url_raises_configuration_error(self):
        backend = SupabaseBackend("", "", client_factory=MagicMock())

        with pytest.raises(BackendConfigurationError):
            backend.select("pets", "token")

    def test_admin_calls_need_service_key(self):
        backend = SupabaseBackend("https://project.supabase.co", "anon", client_factory=MagicMock())

        with pytest.raises(BackendConfigurationError):
            backend.sign_out("user-token")


class TestTableOperations:
    """Test table calls."""

    @pytest.fixture
    def client(self):
        return MagicMock(name="client")

    @pytest.fixture
    def backend(self, client):
        factory = MagicMock(return_value=client)
        return SupabaseBackend("https://project.supabase.co", "anon", "service", client_factory=factory)

    def test_select_forwards_user_token(self, backend, client):
        query = make_query(data=[{"id": "p1"}])
        client.table.return_value = query

        rows = backend.select("pets", "user-token", order_by="created_at", descending=True, limit=3)

        assert rows == [{"id": "p1"}]
        client.postgrest.auth.assert_called_once_with("user-token")
        client.table.assert_called_once_with("pets")
        query.order.assert_called_once_with("created_at", desc=True)
        query.limit.assert_called_once_with(3)

    def test_select_applies_filters(self, backend, client):
        query = make_query(data=[])
        client.table.return_value = query

        backend.select("vaccines", "token", filters=[
            ("not_is", "next_dose_date", "null"),
            ("lte", "next_dose_date", "2024-02-14")
        ])

        query.is_.assert_called_once_with("next_dose_date", "null")
        query.lte.assert_called_once_with("next_dose_date", "2024-02-14")

    def test_select_one_missing(self, backend, client):
        client.table.return_value = make_query(data=[])
        assert backend.select_one("pets", "token", "p1") is None

    def test_count(self, backend, client):
        query = make_query(data=[], count=4)
        client.table.return_value = query

        assert backend.count("pets", "token") == 4
        query.select.assert_called_once_with("id", count="exact")

    def test_insert_many_skips_empty(self, backend, client):
        assert backend.insert_many("notifications", "token", []) == []
        client.table.assert_not_called()

    def test_insert_returns_stored_row(self, backend, client):
        client.table.return_value = make_query(data=[{"id": "p1", "name": "Rex"}])
        assert backend.insert("pets", "token", {"name": "Rex"}) == {"id": "p1", "name": "Rex"}

    def test_insert_without_rows_fails(self, backend, client):
        client.table.return_value = make_query(data=[])
        with pytest.raises(BackendError):
            backend.insert("pets", "token", {"name": "Rex"})

    def test_update_not_visible(self, backend, client):
        client.table.return_value = make_query(data=[])
        assert backend.update("pets", "token", "p1", {"name": "Bob"}) is None

    def test_delete(self, backend, client):
        query = make_query(data=[{"id": "p1"}])
        client.table.return_value = query

        assert backend.delete("pets", "token", "p1") is True
        query.eq.assert_called_once_with("id", "p1")

    def test_sdk_errors_are_translated(self, backend, client):
        error = RuntimeError("permission denied")
        error.code = 403
        query = make_query()
        query.execute.side_effect = error
        client.table.return_value = query

        with pytest.raises(BackendError) as exc_info:
            backend.select("pets", "token")

        assert exc_info.value.status_code == 403
        assert "permission denied" in exc_info.value.message

    def test_non_integer_error_code_is_dropped(self, backend, client):
        error = RuntimeError("bad column")
        error.code = "42703"
        query = make_query()
        query.execute.side_effect = error
        client.table.return_value = query

        with pytest.raises(BackendError) as exc_info:
            backend.select("pets", "token")

        assert exc_info.value.status_code is None


class TestAuthOperations:
    """Test auth API calls."""

    @pytest.fixture
    def client(self):
        return MagicMock(name="client")

    @pytest.fixture
    def backend(self, client):
        return SupabaseBackend("https://project.supabase.co", "anon", "service", client_factory=MagicMock(return_value=client))

    def test_sign_up(self, backend, client):
        client.auth.sign_up.return_value = MagicMock(user=MagicMock(id="u1"), session=None)

        result = backend.sign_up("maria@example.com", "Segura1", {"full_name": "Maria"}, "http://app/dashboard")

        assert result == {"user_id": "u1", "email": "maria@example.com", "confirmation_required": True}
        credentials = client.auth.sign_up.call_args[0][0]
        assert credentials["options"] == {
            "data": {"full_name": "Maria"},
            "email_redirect_to": "http://app/dashboard"
        }

    def test_sign_in(self, backend, client):
        session = MagicMock(access_token="access", refresh_token="refresh", expires_in=3600)
        client.auth.sign_in_with_password.return_value = MagicMock(session=session, user=MagicMock(id="u1"))

        tokens = backend.sign_in("maria@example.com", "Segura1")

        assert tokens["access_token"] == "access"
        assert tokens["user_id"] == "u1"

    def test_sign_in_without_session(self, backend, client):
        client.auth.sign_in_with_password.return_value = MagicMock(session=None)

        with pytest.raises(BackendError) as exc_info:
            backend.sign_in("maria@example.com", "errada")

        assert exc_info.value.status_code == 400

    def test_password_reset(self, backend, client):
        backend.send_password_reset("maria@example.com", "http://app/reset")
        client.auth.reset_password_for_email.assert_called_once_with(
            "maria@example.com", {"redirect_to": "http://app/reset"}
        )

    def test_update_user_runs_in_user_session(self, backend, client):
        backend.update_user("user-token", {"email": "nova@example.com"})

        client.auth.set_session.assert_called_once_with("user-token", "")
        client.auth.update_user.assert_called_once_with({"email": "nova@example.com"})
        client.auth.admin.update_user_by_id.assert_not_called()

    def test_update_user_does_not_need_service_key(self, client):
        factory = MagicMock(return_value=client)
        backend = SupabaseBackend("https://project.supabase.co", "anon", client_factory=factory)

        backend.update_user("user-token", {"password": "NovaSenha1"})

        factory.assert_called_once_with("https://project.supabase.co", "anon")

    def test_ping(self, backend, client):
        client.table.return_value = make_query(data=[])
        assert backend.ping() is True

        client.table.side_effect = ConnectionError("unreachable")
        assert backend.ping() is False
