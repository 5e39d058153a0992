# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Request models for API endpoints.

Each form of the application has its own model. Field validators delegate
to ``domain.validation`` so the same rules apply here and in any client
that calls the library directly.
"""

from datetime import date
from typing import Optional, Dict, Any
from pydantic import BaseModel, Field, field_validator, ValidationInfo

from domain.validation import (
    validate_cpf,
    validate_email,
    validate_phone,
    validate_password,
    validate_pet_name,
    validate_vaccine_name,
    sanitize_input,
    only_digits,
)
from .base import BaseRequest
from .enums import Species, NotificationFilter


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _clean_optional_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return sanitize_input(value) or None


def _check_email(value: str) -> str:
    value = value.strip()
    if not validate_email(value):
        raise ValueError('Email inválido')
    return value


def _check_phone(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str) or not validate_phone(value):
        raise ValueError('Telefone deve ter 10 ou 11 dígitos')
    return only_digits(value)


def _check_password(value: str) -> str:
    result = validate_password(value)
    if not result.is_valid:
        raise ValueError('; '.join(result.violations))
    return value


def _check_confirmation(value: str, info: ValidationInfo, field_name: str) -> str:
    # Skipped when the password itself failed; that error is reported instead
    if field_name in info.data and value != info.data[field_name]:
        raise ValueError('Senhas não coincidem')
    return value


def _check_full_name(value: str) -> str:
    value = sanitize_input(value)
    if not value:
        raise ValueError('Nome completo é obrigatório')
    return value


def _check_pet_name(value: str) -> str:
    if not sanitize_input(value):
        raise ValueError('Nome é obrigatório')
    if not validate_pet_name(value):
        raise ValueError('Nome do pet deve ter até 50 caracteres e conter apenas letras e espaços')
    return sanitize_input(value)


def _check_vaccine_name(value: str) -> str:
    if not sanitize_input(value):
        raise ValueError('Nome da vacina é obrigatório')
    if not validate_vaccine_name(value):
        raise ValueError('Nome da vacina deve ter até 100 caracteres')
    return sanitize_input(value)


class RegisterRequest(BaseRequest):
    """Request model for account registration."""

    full_name: str = Field(..., description="Full name")
    cpf: str = Field(..., description="CPF, formatted or digits only")
    email: str = Field(..., description="Email address")
    phone: Optional[str] = Field(None, description="Phone with area code")
    password: str = Field(..., description="Password")
    confirm_password: str = Field(..., description="Password confirmation")

    @field_validator('full_name')
    @classmethod
    def validate_full_name(cls, v):
        """Require a non-empty name."""
        return _check_full_name(v)

    @field_validator('cpf')
    @classmethod
    def validate_cpf(cls, v):
        """Validate CPF check digits and store digits only."""
        if not validate_cpf(v):
            raise ValueError('CPF inválido')
        return only_digits(v)

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        """Validate email format."""
        return _check_email(v)

    @field_validator('phone', mode='before')
    @classmethod
    def validate_phone(cls, v):
        """Validate phone length and store digits only."""
        return _check_phone(_blank_to_none(v))

    @field_validator('password')
    @classmethod
    def validate_password(cls, v):
        """Validate password strength."""
        return _check_password(v)

    @field_validator('confirm_password')
    @classmethod
    def validate_confirm_password(cls, v, info: ValidationInfo):
        """Confirmation must match the password."""
        return _check_confirmation(v, info, 'password')

    def to_metadata(self) -> Dict[str, Any]:
        """User metadata sent with the sign-up call."""
        return {
            "full_name": self.full_name,
            "cpf": self.cpf,
            "phone": self.phone,
        }


class LoginRequest(BaseRequest):
    """Request model for email/password sign in."""

    email: str = Field(..., min_length=1, description="Email address")
    password: str = Field(..., min_length=1, description="Password")

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        return v.strip()


class ForgotPasswordRequest(BaseRequest):
    """Request model for sending a password reset email."""

    email: str = Field(..., description="Email address")

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        """Validate email format."""
        return _check_email(v)


class PasswordStrengthRequest(BaseModel):
    """Request model for checking a password against the policy."""

    password: str = Field(..., description="Candidate password")


class ChangePasswordRequest(BaseRequest):
    """Request model for changing the signed-in user's password."""

    new_password: str = Field(..., description="New password")
    confirm_password: str = Field(..., description="New password confirmation")

    @field_validator('new_password')
    @classmethod
    def validate_new_password(cls, v):
        """Validate new password strength."""
        return _check_password(v)

    @field_validator('confirm_password')
    @classmethod
    def validate_confirm_password(cls, v, info: ValidationInfo):
        """Confirmation must match the new password."""
        return _check_confirmation(v, info, 'new_password')


class UpdateProfileRequest(BaseRequest):
    """Request model for updating the profile."""

    full_name: Optional[str] = Field(None, description="Full name")
    phone: Optional[str] = Field(None, description="Phone with area code, empty to clear")
    email: Optional[str] = Field(None, description="New email address")

    @field_validator('full_name')
    @classmethod
    def validate_full_name(cls, v):
        if v is None:
            raise ValueError('Nome completo é obrigatório')
        return _check_full_name(v)

    @field_validator('phone', mode='before')
    @classmethod
    def validate_phone(cls, v):
        return _check_phone(_blank_to_none(v))

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        if v is None:
            return v
        return _check_email(v)

    def profile_changes(self) -> Dict[str, Any]:
        """Columns to write to the profiles table."""
        return self.model_dump(include={'full_name', 'phone'}, exclude_unset=True)


class CreatePetRequest(BaseRequest):
    """Request model for adding a pet."""

    name: str = Field(..., description="Pet name")
    species: Species = Field(..., description="Pet species")
    breed: Optional[str] = Field(None, max_length=100, description="Breed")
    birth_date: Optional[date] = Field(None, description="Birth date")
    weight: Optional[float] = Field(None, gt=0, description="Weight in kg")

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        """Validate pet name shape."""
        return _check_pet_name(v)

    @field_validator('breed')
    @classmethod
    def clean_breed(cls, v):
        return _clean_optional_text(v)

    @field_validator('birth_date', 'weight', mode='before')
    @classmethod
    def blank_to_none(cls, v):
        return _blank_to_none(v)

    def to_record(self) -> Dict[str, Any]:
        return self.model_dump(mode='json')


class UpdatePetRequest(CreatePetRequest):
    """Request model for editing a pet; omitted fields are left unchanged."""

    name: Optional[str] = Field(None, description="Pet name")
    species: Optional[Species] = Field(None, description="Pet species")

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        """Validate pet name shape."""
        if v is None:
            raise ValueError('Nome é obrigatório')
        return _check_pet_name(v)

    @field_validator('species')
    @classmethod
    def validate_species(cls, v):
        if v is None:
            raise ValueError('Espécie é obrigatória')
        return v

    def to_record(self) -> Dict[str, Any]:
        return self.model_dump(mode='json', exclude_unset=True)


class CreateVaccineRequest(BaseRequest):
    """Request model for recording a vaccine dose."""

    pet_id: str = Field(..., description="Pet the dose was applied to")
    name: str = Field(..., description="Vaccine name")
    description: Optional[str] = Field(None, max_length=1000, description="Notes")
    application_date: date = Field(..., description="Date the dose was applied")
    next_dose_date: Optional[date] = Field(None, description="Date the next dose is due")
    veterinarian: Optional[str] = Field(None, max_length=200, description="Veterinarian name")
    batch_number: Optional[str] = Field(None, max_length=100, description="Vaccine batch")

    @field_validator('pet_id')
    @classmethod
    def validate_pet_id(cls, v):
        if not v.strip():
            raise ValueError('Pet é obrigatório')
        return v.strip()

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        """Validate vaccine name length."""
        return _check_vaccine_name(v)

    @field_validator('description', 'veterinarian', 'batch_number')
    @classmethod
    def clean_text(cls, v):
        return _clean_optional_text(v)

    @field_validator('next_dose_date', mode='before')
    @classmethod
    def blank_to_none(cls, v):
        return _blank_to_none(v)

    def to_record(self) -> Dict[str, Any]:
        return self.model_dump(mode='json')


class UpdateVaccineRequest(CreateVaccineRequest):
    """Request model for editing a vaccine; omitted fields are left unchanged."""

    pet_id: Optional[str] = Field(None, description="Pet the dose was applied to")
    name: Optional[str] = Field(None, description="Vaccine name")
    application_date: Optional[date] = Field(None, description="Date the dose was applied")

    @field_validator('pet_id')
    @classmethod
    def validate_pet_id(cls, v):
        if v is None or not v.strip():
            raise ValueError('Pet é obrigatório')
        return v.strip()

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if v is None:
            raise ValueError('Nome da vacina é obrigatório')
        return _check_vaccine_name(v)

    @field_validator('application_date')
    @classmethod
    def validate_application_date(cls, v):
        if v is None:
            raise ValueError('Data de aplicação é obrigatória')
        return v

    def to_record(self) -> Dict[str, Any]:
        return self.model_dump(mode='json', exclude_unset=True)


class NotificationQuery(BaseModel):
    """Query parameters for listing notifications."""

    filter: NotificationFilter = Field(default=NotificationFilter.ALL, description="List filter")


class PetPath(BaseModel):
    pet_id: str = Field(..., description="Pet ID")


class VaccinePath(BaseModel):
    vaccine_id: str = Field(..., description="Vaccine ID")


class NotificationPath(BaseModel):
    notification_id: str = Field(..., description="Notification ID")
