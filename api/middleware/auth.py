# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Authentication middleware for access token validation and user context extraction.

This module provides Flask decorators that validate the bearer token sent by
the front end and store the caller's context in ``flask.g`` for the route.
"""

from functools import wraps
from flask import request, jsonify, g, current_app
from typing import Optional, Dict, Any, Callable
from opentelemetry import trace
import logging

from models.entities import UserContext
from services.auth import AuthService, TokenValidationError

tracer = trace.get_tracer(__name__)
logger = logging.getLogger(__name__)


class AuthMiddleware:
    """
    Bearer token authentication for Flask applications.

    Handles token extraction, validation and user context building for
    protected endpoints.
    """

    def __init__(self, auth_service: AuthService):
        """
        Initialize the authentication middleware.

        Args:
            auth_service: Access token verifier
        """
        self.auth_service = auth_service

    def extract_token_from_request(self) -> Optional[str]:
        """
        Extract the access token from the Authorization header.

        Returns:
            Token string or None if not found
        """
        auth_header = request.headers.get('Authorization', '')
        scheme, _, token = auth_header.partition(' ')

        if scheme.lower() != 'bearer' or not token.strip():
            return None

        return token.strip()

    def build_user_context(self, token: str, token_payload: Dict[str, Any]) -> UserContext:
        """
        Build user context from a validated token payload and request information.

        Args:
            token: Raw access token, forwarded to the backend on each call
            token_payload: Decoded JWT payload

        Returns:
            UserContext object for request processing
        """
        return UserContext(
            user_id=token_payload["sub"],
            email=token_payload.get("email"),
            access_token=token,
            ip_address=request.remote_addr
        )


def _authentication_problem(title_slug: str, title: str, detail: str):
    return jsonify(current_app.hal_formatter.builder.build_error_response(
        title_slug, title, 401, detail, request.path
    )), 401


def require_auth(auth_middleware: AuthMiddleware) -> Callable:
    """
    Decorator to require a valid access token for Flask routes.

    Args:
        auth_middleware: Configured AuthMiddleware instance

    Returns:
        Decorator function
    """
    def decorator(f: Callable) -> Callable:
        @wraps(f)
        def decorated_function(*args, **kwargs):
            with tracer.start_as_current_span("auth.middleware.validate_request") as span:
                span.set_attribute("auth.operation", "validate_request")

                token = auth_middleware.extract_token_from_request()
                if not token:
                    span.set_attribute("auth.result", "missing_token")
                    logger.warning("Authentication failed: missing token", extra={"path": request.path})
                    return _authentication_problem(
                        "authentication-required", "Authentication Required", "Missing authorization token"
                    )

                try:
                    token_payload = auth_middleware.auth_service.validate_token(token)
                except TokenValidationError as e:
                    span.set_attribute("auth.result", "invalid_token")
                    logger.warning(f"Authentication failed: {str(e)}", extra={"path": request.path})
                    return _authentication_problem("invalid-token", "Invalid Token", str(e))

                g.user_context = auth_middleware.build_user_context(token, token_payload)

                span.set_attributes({
                    "auth.result": "success",
                    "user.id": g.user_context.user_id
                })
                logger.debug(
                    "Authentication successful",
                    extra={
                        "user_id": g.user_context.user_id,
                        "ip_address": g.user_context.ip_address
                    }
                )

                return f(*args, **kwargs)

        return decorated_function
    return decorator


def require_jwt(f: Callable) -> Callable:
    """Require authentication using the middleware configured on the current app."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        return require_auth(current_app.auth_middleware)(f)(*args, **kwargs)
    return decorated_function
