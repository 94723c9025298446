"""Registration eligibility rules (pure functions, no I/O)."""

from __future__ import annotations

from datetime import date

MINIMUM_AGE = 18
FRANCE = "France"

# ``str.strip()`` would also drop Unicode spaces such as U+00A0.
ASCII_WHITESPACE = " \t\n\r\x0b\x0c"


def age_in_years(birthdate: date, *, today: date | None = None) -> int:
    """Return completed calendar years between ``birthdate`` and ``today``.

    A birthday that has not yet occurred this year does not count, so a
    Feb 29 birthday completes its year on Mar 1 in non-leap years.
    """
    today = today or date.today()
    years = today.year - birthdate.year
    if (today.month, today.day) < (birthdate.month, birthdate.day):
        years -= 1
    return years


def is_adult(birthdate: date | None, *, today: date | None = None) -> bool:
    """Return True if the person is at least :data:`MINIMUM_AGE` years old."""
    if birthdate is None:
        return False
    return age_in_years(birthdate, today=today) >= MINIMUM_AGE


def is_french_resident(country: str | None) -> bool:
    """Return True if ``country`` names France, ignoring surrounding blanks and ASCII case."""
    if country is None or not country.isascii():
        return False
    return country.strip(ASCII_WHITESPACE).lower() == FRANCE.lower()
