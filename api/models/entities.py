# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Core entity models for the Carteirinha Pet platform.

These mirror rows returned by the backend tables. Storage and row-level
access control belong to the backend; the models only parse and expose.
"""

from datetime import date
from typing import Optional, Dict, Any, Iterable, List
from pydantic import BaseModel, Field, ConfigDict, TypeAdapter

from domain.validation import format_cpf
from .base import BaseRecord
from .enums import Species, NotificationType


class Profile(BaseRecord):
    """Account holder profile, keyed by the auth user id."""

    cpf: str = Field(..., description="CPF digits")
    full_name: str = Field(..., description="Full name")
    phone: Optional[str] = Field(None, description="Phone digits")
    phone_confirmed: bool = Field(default=False, description="Whether the phone was verified")

    @property
    def formatted_cpf(self) -> str:
        return format_cpf(self.cpf)


class Pet(BaseRecord):
    """Pet owned by a user."""

    user_id: Optional[str] = Field(None, description="Owner user ID")
    name: str = Field(..., description="Pet name")
    species: Species = Field(..., description="Pet species")
    breed: Optional[str] = Field(None, description="Breed")
    birth_date: Optional[date] = Field(None, description="Birth date")
    weight: Optional[float] = Field(None, description="Weight in kg")


class PetSummary(BaseModel):
    """Pet columns embedded in vaccine and notification rows."""

    model_config = ConfigDict(extra='ignore')

    name: str = Field(default="Pet", description="Pet name")
    species: Species = Field(default=Species.DOG, description="Pet species")


class VaccineSummary(BaseModel):
    """Vaccine columns embedded in notification rows."""

    model_config = ConfigDict(extra='ignore')

    name: str = Field(..., description="Vaccine name")


class Vaccine(BaseRecord):
    """A vaccine dose applied to a pet."""

    pet_id: str = Field(..., description="Pet ID")
    name: str = Field(..., description="Vaccine name")
    description: Optional[str] = Field(None, description="Notes")
    application_date: date = Field(..., description="Date the dose was applied")
    next_dose_date: Optional[date] = Field(None, description="Date the next dose is due")
    veterinarian: Optional[str] = Field(None, description="Veterinarian name")
    batch_number: Optional[str] = Field(None, description="Vaccine batch")
    pet: Optional[PetSummary] = Field(None, alias="pets", description="Joined pet columns")


class Notification(BaseRecord):
    """User notification, including vaccine reminders."""

    user_id: Optional[str] = Field(None, description="Recipient user ID")
    pet_id: Optional[str] = Field(None, description="Related pet")
    vaccine_id: Optional[str] = Field(None, description="Related vaccine")
    title: str = Field(..., description="Title")
    message: str = Field(..., description="Body text")
    type: NotificationType = Field(default=NotificationType.GENERAL, description="Notification type")
    is_read: bool = Field(default=False, description="Read flag")
    scheduled_for: Optional[date] = Field(None, description="Date the reminder refers to")
    pet: Optional[PetSummary] = Field(None, alias="pets", description="Joined pet columns")
    vaccine: Optional[VaccineSummary] = Field(None, alias="vaccines", description="Joined vaccine columns")


class UserContext(BaseModel):
    """Authenticated caller for request processing."""

    user_id: str = Field(..., description="Authenticated user ID")
    email: Optional[str] = Field(None, description="User email")
    access_token: str = Field(..., description="Bearer token forwarded to the backend")
    ip_address: Optional[str] = Field(None, description="Client IP address")


_due_date_adapter = TypeAdapter(Optional[date])


def parse_next_dose_dates(rows: Iterable[Dict[str, Any]]) -> List[Optional[date]]:
    """Next dose dates of vaccine rows selected with only that column."""
    return [_due_date_adapter.validate_python(row.get("next_dose_date")) for row in rows]
