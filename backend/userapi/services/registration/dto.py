"""
DTOs for UserRegistrationService.

Contracts for the registration and lookup flows. Wire names (camelCase)
live in ``userapi/schemas/user.py``; these carry Python names.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from userapi.models.user import Gender, User

# --------------------------------------------------------------------------- #
# Input
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class RegistrationIn:
    """
    Registration payload, built per request and discarded afterwards.

    Values are stored verbatim; nothing is trimmed or re-cased.

    :param username: Public handle (unique, 3 to 50 characters).
    :type username: str | None
    :param birthdate: Date of birth.
    :type birthdate: date | None
    :param country_of_residence: Country name; must be France.
    :type country_of_residence: str | None
    :param phone_number: Optional phone number, digits with optional ``+``.
    :type phone_number: str | None
    :param gender: Optional gender; names are accepted in any case.
    :type gender: Gender | str | None
    """

    username: str | None
    birthdate: date | None
    country_of_residence: str | None
    phone_number: str | None = None
    gender: Gender | str | None = None


# --------------------------------------------------------------------------- #
# Output
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class UserOut:
    """
    Public projection of a stored :class:`User`.

    Internal timestamps are deliberately absent.
    """

    id: int
    username: str
    birthdate: date
    country_of_residence: str
    phone_number: str | None
    gender: Gender | None

    @classmethod
    def from_model(cls, user: User) -> UserOut:
        return cls(
            id=user.id,
            username=user.username,
            birthdate=user.birthdate,
            country_of_residence=user.country_of_residence,
            phone_number=user.phone_number,
            gender=user.gender,
        )
