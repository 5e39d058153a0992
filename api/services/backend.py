# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Supabase backend gateway for table operations and auth flows.

Every table call is made with the caller's access token so the backend's
row-level security applies. Password and email changes run in the
caller's own session; only session revocation uses the service key.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from opentelemetry import trace
from supabase import Client, create_client

tracer = trace.get_tracer(__name__)
logger = logging.getLogger(__name__)

QueryFilter = Tuple[str, str, Any]


class BackendError(Exception):
    """Raised when a backend call fails."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class BackendConfigurationError(BackendError):
    """Raised when the backend is not configured."""


def _apply_filters(query, filters: Optional[Sequence[QueryFilter]]):
    """Chain ``(operator, column, value)`` filters onto a query builder."""
    for operator, column, value in filters or []:
        if operator == "not_is":
            query = query.not_.is_(column, value)
        else:
            query = getattr(query, operator)(column, value)
    return query


class SupabaseBackend:
    """Gateway to the hosted Postgres tables and auth API."""

    def __init__(
        self,
        url: str,
        anon_key: str,
        service_key: Optional[str] = None,
        client_factory: Callable[[str, str], Client] = create_client
    ):
        """
        Initialize the backend gateway.

        Args:
            url: Project URL
            anon_key: Public key used for user-scoped calls
            service_key: Service role key used for admin auth calls
            client_factory: Builds SDK clients; replaced in tests
        """
        self.url = url
        self.anon_key = anon_key
        self.service_key = service_key
        self._client_factory = client_factory

        logger.info(f"Backend gateway initialized for {url or '<unset>'}")

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "SupabaseBackend":
        """Build a gateway from Flask configuration values."""
        return cls(
            url=config.get('SUPABASE_URL', ''),
            anon_key=config.get('SUPABASE_ANON_KEY', ''),
            service_key=config.get('SUPABASE_SERVICE_KEY') or None
        )

    def _client(self, access_token: Optional[str] = None) -> Client:
        """SDK client acting as the given user."""
        if not self.url or not self.anon_key:
            raise BackendConfigurationError("SUPABASE_URL and SUPABASE_ANON_KEY must be set")

        client = self._client_factory(self.url, self.anon_key)
        if access_token:
            client.postgrest.auth(access_token)
        return client

    def _admin_client(self) -> Client:
        """SDK client with the service role key."""
        if not self.url or not self.service_key:
            raise BackendConfigurationError("SUPABASE_URL and SUPABASE_SERVICE_KEY must be set")
        return self._client_factory(self.url, self.service_key)

    def _run(self, operation: str, target: str, call: Callable[[], Any]) -> Any:
        """Run an SDK call inside a span, translating SDK errors to BackendError."""
        with tracer.start_as_current_span(f"backend.{operation}") as span:
            span.set_attributes({
                "backend.operation": operation,
                "backend.target": target
            })
            try:
                return call()
            except BackendError:
                raise
            except Exception as e:
                span.record_exception(e)
                status_code = getattr(e, "status", None) or getattr(e, "code", None)
                if not isinstance(status_code, int):
                    status_code = None
                logger.error(
                    f"Backend {operation} on {target} failed: {e}",
                    extra={"operation": operation, "target": target, "status_code": status_code}
                )
                raise BackendError(getattr(e, "message", None) or str(e), status_code) from e

    # Tables

    def select(
        self,
        table: str,
        access_token: str,
        columns: str = "*",
        filters: Optional[Sequence[QueryFilter]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        """Select rows visible to the user."""
        def call():
            query = _apply_filters(self._client(access_token).table(table).select(columns), filters)
            if order_by:
                query = query.order(order_by, desc=descending)
            if limit is not None:
                query = query.limit(limit)
            return query.execute().data or []

        return self._run("select", table, call)

    def select_one(
        self,
        table: str,
        access_token: str,
        record_id: str,
        columns: str = "*"
    ) -> Optional[Dict[str, Any]]:
        """Fetch a row by id, or None when missing or not visible."""
        rows = self.select(table, access_token, columns, filters=[("eq", "id", record_id)], limit=1)
        return rows[0] if rows else None

    def count(
        self,
        table: str,
        access_token: str,
        filters: Optional[Sequence[QueryFilter]] = None
    ) -> int:
        """Count rows visible to the user."""
        def call():
            query = self._client(access_token).table(table).select("id", count="exact")
            response = _apply_filters(query, filters).execute()
            return response.count or 0

        return self._run("count", table, call)

    def insert(self, table: str, access_token: str, record: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a row and return it as stored."""
        rows = self.insert_many(table, access_token, [record])
        if not rows:
            raise BackendError(f"Insert into {table} returned no rows")
        return rows[0]

    def insert_many(
        self,
        table: str,
        access_token: str,
        records: List[Dict[str, Any]]
    ) -> List[Dict[str, Any]]:
        """Insert rows and return them as stored."""
        if not records:
            return []

        def call():
            return self._client(access_token).table(table).insert(records).execute().data or []

        return self._run("insert", table, call)

    def update(
        self,
        table: str,
        access_token: str,
        record_id: str,
        changes: Dict[str, Any]
    ) -> Optional[Dict[str, Any]]:
        """Update a row by id; None when no visible row matched."""
        rows = self.update_where(table, access_token, [("eq", "id", record_id)], changes)
        return rows[0] if rows else None

    def update_where(
        self,
        table: str,
        access_token: str,
        filters: Sequence[QueryFilter],
        changes: Dict[str, Any]
    ) -> List[Dict[str, Any]]:
        """Update every visible row matching the filters."""
        def call():
            query = self._client(access_token).table(table).update(changes)
            return _apply_filters(query, filters).execute().data or []

        return self._run("update", table, call)

    def delete(self, table: str, access_token: str, record_id: str) -> bool:
        """Delete a row by id; False when no visible row matched."""
        def call():
            query = self._client(access_token).table(table).delete().eq("id", record_id)
            return bool(query.execute().data)

        return self._run("delete", table, call)

    # Auth

    def sign_up(
        self,
        email: str,
        password: str,
        metadata: Dict[str, Any],
        redirect_to: Optional[str] = None
    ) -> Dict[str, Any]:
        """Create an account; the backend sends the confirmation email."""
        options: Dict[str, Any] = {"data": metadata}
        if redirect_to:
            options["email_redirect_to"] = redirect_to

        def call():
            response = self._client().auth.sign_up({
                "email": email,
                "password": password,
                "options": options
            })
            user = response.user
            return {
                "user_id": user.id if user else None,
                "email": email,
                "confirmation_required": response.session is None
            }

        return self._run("sign_up", "auth", call)

    def sign_in(self, email: str, password: str) -> Dict[str, Any]:
        """Exchange email and password for session tokens."""
        def call():
            response = self._client().auth.sign_in_with_password({
                "email": email,
                "password": password
            })
            session = response.session
            if session is None:
                raise BackendError("Invalid login credentials", 400)
            return {
                "access_token": session.access_token,
                "refresh_token": session.refresh_token,
                "token_type": "bearer",
                "expires_in": session.expires_in,
                "user_id": response.user.id if response.user else None
            }

        return self._run("sign_in", "auth", call)

    def send_password_reset(self, email: str, redirect_to: Optional[str] = None) -> None:
        """Send the password reset email."""
        options = {"redirect_to": redirect_to} if redirect_to else {}

        def call():
            self._client().auth.reset_password_for_email(email, options)

        self._run("reset_password", "auth", call)

    def update_user(self, access_token: str, attributes: Dict[str, Any]) -> None:
        """
        Change the password or email of the token's user.

        The call runs in the user's session, so a new email only takes effect
        once the link the backend sends to that address is followed.
        """
        def call():
            auth = self._client().auth
            auth.set_session(access_token, "")
            auth.update_user(attributes)

        self._run("update_user", "auth", call)

    def sign_out(self, access_token: str) -> None:
        """Revoke the sessions of the token's user."""
        def call():
            self._admin_client().auth.admin.sign_out(access_token)

        self._run("sign_out", "auth", call)

    def ping(self) -> bool:
        """Check that the REST endpoint answers."""
        try:
            self._client().table("pets").select("id").limit(1).execute()
            return True
        except Exception as e:
            logger.warning(f"Backend ping failed: {e}")
            return False
