# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Models package - Pydantic schemas and data models for the Carteirinha Pet platform.
"""

# Base models
from .base import BaseRecord, BaseRequest

# Enumerations
from .enums import (
    Species,
    DueStatus,
    NotificationType,
    NotificationFilter
)

# Core entities
from .entities import (
    Profile,
    Pet,
    PetSummary,
    Vaccine,
    VaccineSummary,
    Notification,
    UserContext
)

# Request models
from .requests import (
    RegisterRequest,
    LoginRequest,
    ForgotPasswordRequest,
    PasswordStrengthRequest,
    ChangePasswordRequest,
    UpdateProfileRequest,
    CreatePetRequest,
    UpdatePetRequest,
    CreateVaccineRequest,
    UpdateVaccineRequest,
    NotificationQuery,
    PetPath,
    VaccinePath,
    NotificationPath
)

# Response models
from .responses import (
    HalLink,
    PetResponse,
    VaccineResponse,
    NotificationResponse,
    ProfileResponse,
    PasswordStrengthResponse,
    VaccineStatsResponse,
    DashboardStatsResponse,
    AuthTokenResponse,
    HealthCheckResponse,
    ErrorResponse,
    ValidationErrorResponse
)

__all__ = [
    # Base models
    "BaseRecord",
    "BaseRequest",

    # Enumerations
    "Species",
    "DueStatus",
    "NotificationType",
    "NotificationFilter",

    # Core entities
    "Profile",
    "Pet",
    "PetSummary",
    "Vaccine",
    "VaccineSummary",
    "Notification",
    "UserContext",

    # Request models
    "RegisterRequest",
    "LoginRequest",
    "ForgotPasswordRequest",
    "PasswordStrengthRequest",
    "ChangePasswordRequest",
    "UpdateProfileRequest",
    "CreatePetRequest",
    "UpdatePetRequest",
    "CreateVaccineRequest",
    "UpdateVaccineRequest",
    "NotificationQuery",
    "PetPath",
    "VaccinePath",
    "NotificationPath",

    # Response models
    "HalLink",
    "PetResponse",
    "VaccineResponse",
    "NotificationResponse",
    "ProfileResponse",
    "PasswordStrengthResponse",
    "VaccineStatsResponse",
    "DashboardStatsResponse",
    "AuthTokenResponse",
    "HealthCheckResponse",
    "ErrorResponse",
    "ValidationErrorResponse"
]
