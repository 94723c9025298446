from __future__ import annotations

from datetime import date

import pytest
from sqlalchemy.exc import IntegrityError
from userapi.models.user import Gender, User
from userapi.repositories.user import UserRepository
from userapi.services._shared.errors import violates

from tests.factories.user import UserFactory


class TestUserRepository:
    """Validate :class:`UserRepository` lookups and writes."""

    @pytest.fixture()
    def urepo(self, session) -> UserRepository:
        """Build a repository bound to the test session."""
        return UserRepository(session=session)

    def test_add_assigns_primary_key(self, urepo, session):
        user = User(
            username="carla",
            birthdate=date(1995, 3, 2),
            country_of_residence="France",
            gender=Gender.FEMALE,
        )
        urepo.add(user)

        assert user.id is not None
        assert urepo.get_by_username("carla") is user
        session.rollback()

    def test_get_by_username_exact_match(self, urepo):
        UserFactory(username="Alice")

        assert urepo.get_by_username("Alice") is not None
        assert urepo.get_by_username("alice") is None
        assert urepo.get_by_username(" Alice") is None

    def test_exists_by_username(self, urepo):
        UserFactory(username="bob")

        assert urepo.exists_by_username("bob") is True
        assert urepo.exists_by_username("bobby") is False

    def test_lookups_share_the_equality_filter(self, urepo):
        UserFactory(username="dan")
        UserFactory(username="erin")

        assert urepo.get_by_username("erin").username == "erin"
        assert urepo.find_one(username="dan").username == "dan"
        assert urepo.exists(username="nobody") is False

    def test_non_whitelisted_filters_are_ignored(self, urepo):
        UserFactory(username="dan", phone_number="0611111111")
        UserFactory(username="erin", phone_number="0622222222")

        found = urepo.find_one(username="erin", phone_number="0611111111")
        assert found is not None and found.username == "erin"

    def test_duplicate_username_violates_unique_constraint(self, urepo, session):
        UserFactory(username="frank")
        dup = User(username="frank", birthdate=date(1990, 1, 1), country_of_residence="France")

        with pytest.raises(IntegrityError) as exc_info:
            urepo.add(dup)
        session.rollback()

        assert violates(exc_info.value, "uq_users_username", "users.username")
        assert not violates(exc_info.value, "uq_users_email")
