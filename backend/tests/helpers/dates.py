"""Date helpers for age-dependent tests."""

from __future__ import annotations

from datetime import date


def years_ago(years: int, *, today: date | None = None) -> date:
    """Return the date ``years`` calendar years before ``today``.

    Feb 29 maps to Feb 28 when the target year is not a leap year.
    """
    today = today or date.today()
    try:
        return today.replace(year=today.year - years)
    except ValueError:
        return today.replace(year=today.year - years, day=28)
