"""Unit tests for the structural checks and the policy ordering."""

from __future__ import annotations

import dataclasses
from datetime import date, datetime

import pytest
from userapi.models.user import Gender
from userapi.services._shared.errors import ErrorKind, ServiceError
from userapi.services.registration.dto import RegistrationIn
from userapi.services.registration.validation import (
    enforce_policies,
    validate_registration,
    validate_structure,
)

TODAY = date(2026, 6, 15)

VALID = RegistrationIn(
    username="amine.bou",
    birthdate=date(2000, 1, 1),
    country_of_residence="France",
    phone_number="0612345678",
    gender=Gender.MALE,
)


def with_(**changes) -> RegistrationIn:
    return dataclasses.replace(VALID, **changes)


class TestValidateStructure:
    def test_valid_payload_has_no_violations(self):
        assert validate_structure(VALID) == {}

    def test_optional_fields_may_be_absent(self):
        assert validate_structure(with_(phone_number=None, gender=None)) == {}

    def test_collects_every_violation(self):
        dto = RegistrationIn(
            username=None,
            birthdate=None,
            country_of_residence="   ",
            phone_number="123",
            gender="robot",
        )
        violations = validate_structure(dto)
        assert set(violations) == {
            "username",
            "birthdate",
            "countryOfResidence",
            "phoneNumber",
            "gender",
        }
        assert violations["username"] == "Username is required"
        assert violations["birthdate"] == "Birthdate is required"
        assert violations["countryOfResidence"] == "Country of residence is required"

    @pytest.mark.parametrize("username", ["", "   "])
    def test_blank_username_is_required(self, username):
        assert validate_structure(with_(username=username)) == {
            "username": "Username is required"
        }

    @pytest.mark.parametrize("username", ["ab", "x" * 51])
    def test_username_length_bounds(self, username):
        violations = validate_structure(with_(username=username))
        assert "between 3 and 50" in violations["username"]

    @pytest.mark.parametrize("username", ["abc", "x" * 50])
    def test_username_length_edges_are_accepted(self, username):
        assert validate_structure(with_(username=username)) == {}

    def test_birthdate_must_be_a_plain_date(self):
        violations = validate_structure(with_(birthdate=datetime(2000, 1, 1, 12, 0)))
        assert "birthdate" in violations

    @pytest.mark.parametrize(
        "phone", ["0612345678", "+33612345678", "1" * 20, "", None]
    )
    def test_phone_accepted(self, phone):
        assert validate_structure(with_(phone_number=phone)) == {}

    @pytest.mark.parametrize(
        "phone", ["123", "invalid", "06 12 34 56 78", "++33612345678", "٠٦١٢٣٤٥٦٧٨"]
    )
    def test_phone_pattern_rejected(self, phone):
        violations = validate_structure(with_(phone_number=phone))
        assert "at least 10 digits" in violations["phoneNumber"]

    def test_phone_longer_than_twenty_characters(self):
        violations = validate_structure(with_(phone_number="1" * 21))
        assert violations == {"phoneNumber": "Phone number cannot exceed 20 characters"}

    @pytest.mark.parametrize("gender", ["female", "FEMALE", " Other ", Gender.MALE, None])
    def test_gender_accepted_case_insensitively(self, gender):
        assert validate_structure(with_(gender=gender)) == {}

    def test_unknown_gender_rejected(self):
        violations = validate_structure(with_(gender="unknown"))
        assert violations["gender"] == "Gender must be one of: MALE, FEMALE, OTHER"


class TestPolicies:
    def test_minor_fails_age_rule(self):
        with pytest.raises(ServiceError) as exc_info:
            enforce_policies(with_(birthdate=date(2009, 6, 15)), today=TODAY)
        assert exc_info.value.kind is ErrorKind.AGE_MIN
        assert "18" in exc_info.value.message

    def test_non_resident_fails_country_rule(self):
        with pytest.raises(ServiceError) as exc_info:
            enforce_policies(with_(country_of_residence="Germany"), today=TODAY)
        assert exc_info.value.kind is ErrorKind.COUNTRY_FR

    def test_age_rule_is_checked_before_country(self):
        dto = with_(birthdate=date(2015, 1, 1), country_of_residence="Germany")
        with pytest.raises(ServiceError) as exc_info:
            enforce_policies(dto, today=TODAY)
        assert exc_info.value.kind is ErrorKind.AGE_MIN


class TestValidateRegistration:
    def test_passes_silently(self):
        validate_registration(VALID, today=TODAY)

    def test_structural_failure_stops_before_policies(self):
        dto = with_(username="ab", birthdate=date(2015, 1, 1), country_of_residence="Germany")
        with pytest.raises(ServiceError) as exc_info:
            validate_registration(dto, today=TODAY)
        err = exc_info.value
        assert err.kind is ErrorKind.VALIDATION
        assert set(err.violations) == {"username"}

    def test_policy_failure_after_structure(self):
        with pytest.raises(ServiceError) as exc_info:
            validate_registration(with_(country_of_residence="Germany"), today=TODAY)
        assert exc_info.value.kind is ErrorKind.COUNTRY_FR
