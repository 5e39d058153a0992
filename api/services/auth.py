# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Authentication service for access token validation.

Tokens are issued by the backend's auth API; this service only verifies
their HS256 signature, expiry and audience, and exposes the claims.
"""

import jwt
from typing import Dict, Any
from opentelemetry import trace
import logging

tracer = trace.get_tracer(__name__)
logger = logging.getLogger(__name__)


class TokenValidationError(Exception):
    """Raised when token validation fails."""
    pass


class AuthService:
    """
    Access token verifier for backend-issued JWTs.

    The backend signs tokens with a shared secret (HS256) and sets the
    ``authenticated`` audience for signed-in users.
    """

    def __init__(
        self,
        jwt_secret: str,
        audience: str = "authenticated",
        leeway_seconds: int = 10
    ):
        """
        Initialize the authentication service.

        Args:
            jwt_secret: Shared secret the backend signs tokens with
            audience: Expected ``aud`` claim
            leeway_seconds: Clock skew tolerated on ``exp``
        """
        self.jwt_secret = jwt_secret
        self.audience = audience
        self.leeway_seconds = leeway_seconds
        self.algorithm = "HS256"

        if not jwt_secret:
            logger.warning("No JWT secret configured, every token will be rejected")

    def validate_token(self, token: str) -> Dict[str, Any]:
        """
        Validate and decode an access token.

        Args:
            token: JWT from the Authorization header

        Returns:
            Decoded token payload

        Raises:
            TokenValidationError: If the token is invalid, expired or unsigned
        """
        with tracer.start_as_current_span("auth.validate_token") as span:
            span.set_attribute("auth.operation", "validate_token")

            if not self.jwt_secret:
                span.set_attribute("auth.result", "not_configured")
                raise TokenValidationError("Token verification is not configured")

            try:
                payload = jwt.decode(
                    token,
                    self.jwt_secret,
                    algorithms=[self.algorithm],
                    audience=self.audience,
                    leeway=self.leeway_seconds,
                    options={"require": ["exp", "sub"]}
                )

                span.set_attributes({
                    "auth.result": "success",
                    "user.id": payload["sub"]
                })

                logger.debug(f"Token validated for user {payload['sub']}")
                return payload

            except jwt.ExpiredSignatureError:
                span.set_attribute("auth.result", "expired")
                logger.warning("Token validation failed: token expired")
                raise TokenValidationError("Token has expired")

            except jwt.InvalidTokenError as e:
                span.set_attribute("auth.result", "invalid")
                logger.warning(f"Token validation failed: {str(e)}")
                raise TokenValidationError(f"Invalid token: {str(e)}")
