# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Response models for API endpoints with HAL support.
"""

from datetime import date, datetime
from typing import List, Optional, Dict, Any
from pydantic import BaseModel, Field

from .enums import DueStatus, Species, NotificationType


class HalLink(BaseModel):
    """HAL link representation."""

    href: str = Field(..., description="Link URL")
    method: Optional[str] = Field(None, description="HTTP method")
    type: Optional[str] = Field(None, description="Content type")
    title: Optional[str] = Field(None, description="Link title")
    templated: Optional[bool] = Field(None, description="Whether URL is templated")


class PetResponse(BaseModel):
    """Pet response model."""

    id: str = Field(..., description="Pet ID")
    name: str = Field(..., description="Pet name")
    species: Species = Field(..., description="Pet species")
    breed: Optional[str] = Field(None, description="Breed")
    birth_date: Optional[date] = Field(None, description="Birth date")
    weight: Optional[float] = Field(None, description="Weight in kg")
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")
    links: Dict[str, HalLink] = Field(default_factory=dict, alias="_links", description="HAL links")


class VaccineResponse(BaseModel):
    """Vaccine response model with due-date status."""

    id: str = Field(..., description="Vaccine ID")
    pet_id: str = Field(..., description="Pet ID")
    name: str = Field(..., description="Vaccine name")
    description: Optional[str] = Field(None, description="Notes")
    application_date: date = Field(..., description="Application date")
    next_dose_date: Optional[date] = Field(None, description="Next dose date")
    veterinarian: Optional[str] = Field(None, description="Veterinarian")
    batch_number: Optional[str] = Field(None, description="Batch number")
    status: DueStatus = Field(..., description="Due-date status")
    status_label: Optional[str] = Field(None, description="Badge text for the status")
    pet: Optional[Dict[str, Any]] = Field(None, description="Pet name and species")
    links: Dict[str, HalLink] = Field(default_factory=dict, alias="_links", description="HAL links")


class NotificationResponse(BaseModel):
    """Notification response model."""

    id: str = Field(..., description="Notification ID")
    title: str = Field(..., description="Title")
    message: str = Field(..., description="Body")
    type: NotificationType = Field(..., description="Notification type")
    is_read: bool = Field(..., description="Read flag")
    scheduled_for: Optional[date] = Field(None, description="Reminder date")
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")
    links: Dict[str, HalLink] = Field(default_factory=dict, alias="_links", description="HAL links")


class ProfileResponse(BaseModel):
    """Profile response model."""

    id: str = Field(..., description="User ID")
    full_name: str = Field(..., description="Full name")
    cpf: str = Field(..., description="CPF formatted for display")
    phone: Optional[str] = Field(None, description="Phone formatted for display")
    phone_confirmed: bool = Field(..., description="Whether the phone was verified")
    email: Optional[str] = Field(None, description="Email address")
    pending_email: Optional[str] = Field(None, description="New email awaiting confirmation")


class PasswordStrengthResponse(BaseModel):
    """Password policy result."""

    valid: bool = Field(..., description="Whether the password satisfies the policy")
    violations: List[str] = Field(default_factory=list, description="Violated rules, in rule order")


class VaccineStatsResponse(BaseModel):
    """Vaccine statistics."""

    total: int
    up_to_date: int
    upcoming: int
    overdue: int


class DashboardStatsResponse(BaseModel):
    """Dashboard statistics."""

    total_pets: int
    total_vaccines: int
    upcoming_vaccines: int
    overdue_vaccines: int


class AuthTokenResponse(BaseModel):
    """Session tokens returned by sign in."""

    access_token: str = Field(..., description="Access token")
    refresh_token: Optional[str] = Field(None, description="Refresh token")
    token_type: str = Field(default="bearer", description="Token type")
    expires_in: Optional[int] = Field(None, description="Access token lifetime in seconds")
    user_id: Optional[str] = Field(None, description="Authenticated user ID")


class HealthCheckResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Overall health status")
    service: str = Field(..., description="Service name")
    version: str = Field(..., description="Service version")
    environment: str = Field(..., description="Deployment environment")
    timestamp: str = Field(..., description="Check timestamp")
    dependencies: Dict[str, Any] = Field(default_factory=dict, description="Dependency status")


class ErrorResponse(BaseModel):
    """Error response model following RFC 7807."""

    type: str = Field(..., description="Error type URI")
    title: str = Field(..., description="Error title")
    status: int = Field(..., description="HTTP status code")
    detail: str = Field(..., description="Error detail")
    instance: str = Field(..., description="Request instance")
    errors: Optional[List[Dict[str, Any]]] = Field(None, description="Validation errors")


class ValidationErrorResponse(ErrorResponse):
    """Validation error response with field details."""

    errors: List[Dict[str, Any]] = Field(..., description="Field validation errors")
