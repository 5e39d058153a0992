# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Input validation rules for identity, contact and free-text fields.

Every function here is total over ``str``: malformed input yields ``False``
or a list of violations, never an exception. No function keeps state, so
they are safe to call on every keystroke as well as on final submission.
"""

import re
from dataclasses import dataclass, field
from typing import List


CPF_LENGTH = 11
PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_LENGTH = 128
PET_NAME_MAX_LENGTH = 50
VACCINE_NAME_MAX_LENGTH = 100

COMMON_PASSWORDS = frozenset({"123456", "password", "123456789", "qwerty", "abc123"})

PASSWORD_TOO_SHORT = "A senha deve ter pelo menos 6 caracteres"
PASSWORD_MISSING_UPPERCASE = "A senha deve conter pelo menos uma letra maiúscula"
PASSWORD_MISSING_LOWERCASE = "A senha deve conter pelo menos uma letra minúscula"
PASSWORD_MISSING_DIGIT = "A senha deve conter pelo menos um número"
PASSWORD_TOO_LONG = "A senha não pode ter mais de 128 caracteres"
PASSWORD_TOO_COMMON = "Esta senha é muito comum. Escolha uma senha mais segura"

# Character classes are ASCII-only on purpose: str patterns would otherwise
# treat any Unicode digit as \d.
_NON_DIGITS = re.compile(r"[^0-9]")
_EMAIL = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
_UPPERCASE = re.compile(r"[A-Z]")
_LOWERCASE = re.compile(r"[a-z]")
_DIGIT = re.compile(r"[0-9]")
_MARKUP_CHARS = re.compile(r"[<>]")
# Latin-1 letters, excluding the multiplication and division signs.
_PET_NAME = re.compile(r"[A-Za-zÀ-ÖØ-öø-ÿ\s]+")


@dataclass
class PasswordValidationResult:
    """Outcome of the password policy check."""
    is_valid: bool
    violations: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"valid": self.is_valid, "violations": list(self.violations)}


def only_digits(raw: str) -> str:
    """Remove every character that is not an ASCII digit."""
    return _NON_DIGITS.sub("", raw)


def _cpf_check_digit(digits: str, length: int) -> int:
    """
    Compute a CPF check digit over the first ``length`` digits.

    Weights start at ``length + 1`` and decrease by one per position.
    """
    total = sum(int(digits[i]) * (length + 1 - i) for i in range(length))
    remainder = (total * 10) % 11
    return 0 if remainder >= 10 else remainder


def validate_cpf(raw: str) -> bool:
    """
    Check a CPF number, ignoring formatting characters.

    Args:
        raw: CPF as typed by the user, e.g. ``"529.982.247-25"``

    Returns:
        True when the number has 11 digits, is not a repeated-digit
        sequence and both check digits match
    """
    digits = only_digits(raw)

    if len(digits) != CPF_LENGTH:
        return False

    # 000.000.000-00, 111.111.111-11, ... satisfy the checksum but are not issued
    if len(set(digits)) == 1:
        return False

    if _cpf_check_digit(digits, 9) != int(digits[9]):
        return False

    return _cpf_check_digit(digits, 10) == int(digits[10])


def validate_email(raw: str) -> bool:
    """Syntactic sanity check: ``local@domain.tld`` without whitespace."""
    return _EMAIL.fullmatch(raw) is not None


def validate_phone(raw: str) -> bool:
    """Brazilian phone numbers have 10 (landline) or 11 (mobile) digits with area code."""
    return len(only_digits(raw)) in (10, 11)


def validate_password(raw: str) -> PasswordValidationResult:
    """
    Evaluate a password against the account policy.

    Every rule is checked; violations are reported in rule order so the
    first message shown to the user is stable.

    Args:
        raw: Candidate password

    Returns:
        PasswordValidationResult with the validity flag and violation messages
    """
    violations = []

    if len(raw) < PASSWORD_MIN_LENGTH:
        violations.append(PASSWORD_TOO_SHORT)

    if not _UPPERCASE.search(raw):
        violations.append(PASSWORD_MISSING_UPPERCASE)

    if not _LOWERCASE.search(raw):
        violations.append(PASSWORD_MISSING_LOWERCASE)

    if not _DIGIT.search(raw):
        violations.append(PASSWORD_MISSING_DIGIT)

    if len(raw) > PASSWORD_MAX_LENGTH:
        violations.append(PASSWORD_TOO_LONG)

    if raw.lower() in COMMON_PASSWORDS:
        violations.append(PASSWORD_TOO_COMMON)

    return PasswordValidationResult(is_valid=not violations, violations=violations)


def sanitize_input(raw: str) -> str:
    """
    Drop ``<`` and ``>`` and trim surrounding whitespace.

    Characters are removed before trimming so that the result is a fixed
    point: ``sanitize_input(sanitize_input(x)) == sanitize_input(x)``.
    This is not output encoding; renderers must still escape text.
    """
    return _MARKUP_CHARS.sub("", raw).strip()


def validate_pet_name(raw: str) -> bool:
    """Pet names are 1-50 letters (accents allowed) and spaces."""
    name = sanitize_input(raw)
    return 1 <= len(name) <= PET_NAME_MAX_LENGTH and _PET_NAME.fullmatch(name) is not None


def validate_vaccine_name(raw: str) -> bool:
    """Vaccine names are 1-100 characters of any kind."""
    name = sanitize_input(raw)
    return 1 <= len(name) <= VACCINE_NAME_MAX_LENGTH


def format_cpf(raw: str) -> str:
    """Format as ``000.000.000-00``; anything but 11 digits is returned as digits."""
    digits = only_digits(raw)
    if len(digits) != CPF_LENGTH:
        return digits
    return f"{digits[:3]}.{digits[3:6]}.{digits[6:9]}-{digits[9:]}"


def format_phone(raw: str) -> str:
    """Format as ``(00) 00000-0000`` or ``(00) 0000-0000``."""
    digits = only_digits(raw)
    if len(digits) == 11:
        return f"({digits[:2]}) {digits[2:7]}-{digits[7:]}"
    if len(digits) == 10:
        return f"({digits[:2]}) {digits[2:6]}-{digits[6:]}"
    return digits
