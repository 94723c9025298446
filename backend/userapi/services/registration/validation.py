"""
Registration validation pipeline.

Two stages, always in this order:

1. Structural checks (:func:`validate_structure`) look at presence, length
   and format of every field and collect *all* violations.
2. Domain policies (:func:`enforce_policies`) run only when the payload is
   structurally sound, one rule at a time; the first failing rule wins.
"""

from __future__ import annotations

import re
from datetime import date, datetime

from userapi.models.user import Gender
from userapi.services._shared.errors import ServiceError
from userapi.services._shared.policies.registration import (
    MINIMUM_AGE,
    is_adult,
    is_french_resident,
)
from userapi.services.registration.dto import RegistrationIn

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 50
PHONE_MAX_LENGTH = 20

# ASCII digits only; ``\d`` would also accept other Unicode digits.
PHONE_PATTERN = re.compile(r"\+?[0-9]{10,}")


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def _check_username(value: str | None) -> str | None:
    if _is_blank(value):
        return "Username is required"
    if not USERNAME_MIN_LENGTH <= len(value) <= USERNAME_MAX_LENGTH:
        return (
            f"Username must be between {USERNAME_MIN_LENGTH} "
            f"and {USERNAME_MAX_LENGTH} characters"
        )
    return None


def _check_birthdate(value: date | None) -> str | None:
    if value is None:
        return "Birthdate is required"
    if isinstance(value, datetime) or not isinstance(value, date):
        return "Birthdate must be a valid date (yyyy-MM-dd)"
    return None


def _check_country(value: str | None) -> str | None:
    if _is_blank(value):
        return "Country of residence is required"
    return None


def _check_phone(value: str | None) -> str | None:
    # Empty string counts as "not provided".
    if not value:
        return None
    if not PHONE_PATTERN.fullmatch(value):
        return (
            "Phone number must contain only digits with optional + sign "
            "and at least 10 digits"
        )
    if len(value) > PHONE_MAX_LENGTH:
        return f"Phone number cannot exceed {PHONE_MAX_LENGTH} characters"
    return None


def _check_gender(value: Gender | str | None) -> str | None:
    try:
        Gender.parse(value)
    except ValueError:
        return "Gender must be one of: " + ", ".join(Gender.choices())
    return None


def validate_structure(dto: RegistrationIn) -> dict[str, str]:
    """
    Collect structural violations for every field.

    :param dto: Registration payload.
    :type dto: RegistrationIn
    :returns: Wire field name → message; empty when the payload is sound.
    :rtype: dict[str, str]
    """
    checks = (
        ("username", _check_username(dto.username)),
        ("birthdate", _check_birthdate(dto.birthdate)),
        ("countryOfResidence", _check_country(dto.country_of_residence)),
        ("phoneNumber", _check_phone(dto.phone_number)),
        ("gender", _check_gender(dto.gender)),
    )
    return {name: message for name, message in checks if message is not None}


def enforce_policies(dto: RegistrationIn, *, today: date | None = None) -> None:
    """
    Apply the registration rules in order: age first, then residency.

    :raises ServiceError: ``AGE_MIN`` or ``COUNTRY_FR`` on the first failure.
    """
    if not is_adult(dto.birthdate, today=today):
        raise ServiceError.age_min(MINIMUM_AGE)
    if not is_french_resident(dto.country_of_residence):
        raise ServiceError.country_fr()


def validate_registration(dto: RegistrationIn, *, today: date | None = None) -> None:
    """
    Run the full pipeline.

    :raises ServiceError: ``VALIDATION`` carrying every structural violation,
        or the first failing policy signal.
    """
    violations = validate_structure(dto)
    if violations:
        raise ServiceError.validation(violations)
    enforce_policies(dto, today=today)
