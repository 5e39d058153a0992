# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Services package - External integrations and side effects.
"""

from .backend import SupabaseBackend, BackendError, BackendConfigurationError
from .auth import AuthService, TokenValidationError
from .hal import HalFormatter, create_hal_formatter
from .health import HealthCheckService

__all__ = [
    "SupabaseBackend",
    "BackendError",
    "BackendConfigurationError",
    "AuthService",
    "TokenValidationError",
    "HalFormatter",
    "create_hal_formatter",
    "HealthCheckService"
]
