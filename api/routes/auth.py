# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Authentication endpoints for registration, sign in, password flows and logout.

Accounts and sessions live in the backend's auth service; these endpoints
validate the forms and pass the calls through.
"""

from flask import jsonify, current_app, request
from flask_openapi3 import APIBlueprint, Tag
from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode
import logging

from domain.validation import validate_password
from models.requests import (
    RegisterRequest, LoginRequest, ForgotPasswordRequest,
    PasswordStrengthRequest, ChangePasswordRequest
)
from models.responses import AuthTokenResponse, PasswordStrengthResponse
from middleware.auth import require_jwt
from middleware.error_handler import AuthenticationException
from services.backend import BackendError
from utils.request import current_user, current_backend, get_request_context

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

INVALID_CREDENTIALS = "Email ou senha inválidos"

auth_tag = Tag(name="Authentication", description="Accounts, sessions and passwords")
auth_bp = APIBlueprint(
    'auth',
    __name__,
    url_prefix='/api/auth',
    abp_tags=[auth_tag]
)


@auth_bp.post('/register')
def register(body: RegisterRequest):
    """
    Create an account.

    CPF and phone are stored as digits in the user metadata; the backend
    sends a confirmation email before the first sign in.
    """
    with tracer.start_as_current_span(
        "auth.register",
        attributes={"operation": "register", "ip_address": request.remote_addr or ""}
    ) as span:
        result = current_backend().sign_up(
            body.email,
            body.password,
            body.to_metadata(),
            redirect_to=current_app.config.get('EMAIL_REDIRECT_URL') or None
        )

        span.set_attribute("auth.confirmation_required", result["confirmation_required"])
        span.set_status(Status(StatusCode.OK))
        logger.info(
            "Account registered",
            extra={"user_id": result["user_id"], "ip_address": request.remote_addr}
        )

        links = current_app.hal_formatter.links
        result["_links"] = {
            "login": links.build_action_link("/api/auth/login", title="Sign in").model_dump(exclude_none=True)
        }
        return jsonify(result), 201


@auth_bp.post('/login', responses={200: AuthTokenResponse})
def login(body: LoginRequest):
    """
    Authenticate with email and password and return session tokens.
    """
    with tracer.start_as_current_span(
        "auth.login",
        attributes={"operation": "login", "ip_address": request.remote_addr or ""}
    ) as span:
        try:
            session = current_backend().sign_in(body.email, body.password)
        except BackendError as e:
            if e.status_code not in (400, 401):
                raise
            span.set_status(Status(StatusCode.ERROR, "Invalid credentials"))
            logger.warning("Login failed", extra={"ip_address": request.remote_addr})
            raise AuthenticationException(INVALID_CREDENTIALS) from e

        span.set_attribute("user.id", session["user_id"] or "")
        span.set_status(Status(StatusCode.OK))
        logger.info("User logged in", extra={"user_id": session["user_id"], "ip_address": request.remote_addr})

        return jsonify(AuthTokenResponse(**session).model_dump()), 200


@auth_bp.post('/password/forgot')
def forgot_password(body: ForgotPasswordRequest):
    """
    Send a password reset link.

    The response is the same whether or not the email has an account.
    """
    with tracer.start_as_current_span("auth.forgot_password"):
        current_backend().send_password_reset(
            body.email,
            redirect_to=current_app.config.get('PASSWORD_RESET_REDIRECT_URL') or None
        )
        logger.info("Password reset requested", extra={"ip_address": request.remote_addr})
        return jsonify({"sent": True}), 202


@auth_bp.post('/password/strength', responses={200: PasswordStrengthResponse})
def password_strength(body: PasswordStrengthRequest):
    """Check a candidate password against the policy, listing every violated rule."""
    return jsonify(validate_password(body.password).to_dict()), 200


@auth_bp.put('/password')
@require_jwt
def change_password(body: ChangePasswordRequest):
    """
    Change the signed-in user's password.
    """
    user = current_user()

    with tracer.start_as_current_span("auth.change_password", attributes={"user.id": user.user_id}):
        current_backend().update_user(user.access_token, {"password": body.new_password})
        logger.info("Password changed", extra=get_request_context())
        return '', 204


@auth_bp.post('/logout')
@require_jwt
def logout():
    """
    Revoke the caller's sessions.
    """
    user = current_user()

    with tracer.start_as_current_span("auth.logout", attributes={"user.id": user.user_id}):
        current_backend().sign_out(user.access_token)
        logger.info("User logged out", extra=get_request_context())
        return '', 204
