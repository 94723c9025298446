"""Unit tests for the registration eligibility rules."""

from __future__ import annotations

from datetime import date

import pytest
from freezegun import freeze_time
from userapi.services._shared.policies.registration import (
    MINIMUM_AGE,
    age_in_years,
    is_adult,
    is_french_resident,
)

from tests.helpers.dates import years_ago

TODAY = date(2026, 6, 15)


class TestIsAdult:
    def test_missing_birthdate_is_not_adult(self):
        assert is_adult(None) is False

    def test_exactly_eighteen_years_is_adult(self):
        assert is_adult(date(2008, 6, 15), today=TODAY) is True

    def test_one_day_short_of_eighteen_is_not_adult(self):
        assert is_adult(date(2008, 6, 16), today=TODAY) is False

    def test_well_over_minimum_age(self):
        assert is_adult(date(1950, 1, 1), today=TODAY) is True

    def test_birthdate_in_the_future_is_not_adult(self):
        assert is_adult(date(2030, 1, 1), today=TODAY) is False

    @pytest.mark.parametrize(
        ("today", "expected"),
        [
            (date(2026, 2, 28), False),
            (date(2026, 3, 1), True),
            (date(2028, 2, 29), True),
        ],
    )
    def test_leap_day_birthday_uses_calendar_years(self, today, expected):
        assert is_adult(date(2008, 2, 29), today=today) is expected

    def test_year_boundary(self):
        assert is_adult(date(2007, 12, 31), today=date(2025, 12, 30)) is False
        assert is_adult(date(2007, 12, 31), today=date(2025, 12, 31)) is True

    @freeze_time("2026-06-15")
    def test_defaults_to_today(self):
        assert is_adult(years_ago(MINIMUM_AGE)) is True
        assert is_adult(date(2008, 6, 16)) is False

    def test_age_in_years_counts_completed_years_only(self):
        assert age_in_years(date(2000, 6, 16), today=TODAY) == 25
        assert age_in_years(date(2000, 6, 15), today=TODAY) == 26


class TestIsFrenchResident:
    @pytest.mark.parametrize(
        "country",
        ["France", "france", "FRANCE", "  France  ", "\tfRaNcE\n"],
    )
    def test_accepts_france_in_any_case(self, country):
        assert is_french_resident(country) is True

    @pytest.mark.parametrize(
        "country",
        [
            None,
            "",
            "   ",
            "Germany",
            "Frances",
            "Fr ance",
            "République française",
            "\u00a0France\u00a0",
            "France\u2003",
        ],
    )
    def test_rejects_anything_else(self, country):
        assert is_french_resident(country) is False
