# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Request utilities for reaching the caller, the backend and the clock from views.
"""

from datetime import date
from flask import request, current_app, g
from typing import Dict, Any

from models.entities import UserContext
from services.backend import SupabaseBackend


def current_user() -> UserContext:
    """Caller stored by ``require_jwt``."""
    return g.user_context


def current_backend() -> SupabaseBackend:
    return current_app.backend


def today() -> date:
    """Today's date from the application clock."""
    return current_app.clock()


def get_request_context() -> Dict[str, Any]:
    """Request metadata for structured log records."""
    user_context = g.get('user_context')
    return {
        "user_id": user_context.user_id if user_context else None,
        "ip_address": request.remote_addr,
        "request_id": request.headers.get('X-Request-ID'),
        "path": request.path,
        "method": request.method
    }
