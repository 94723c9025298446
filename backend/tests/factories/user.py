"""Factory Boy definition for :class:`userapi.models.user.User`."""

from __future__ import annotations

from datetime import date

import factory
from tests.factories import BaseFactory
from userapi.models.user import Gender, User


class UserFactory(BaseFactory):
    """Build persisted :class:`userapi.models.user.User` instances."""

    class Meta:
        model = User

    id = None  # let autoincrement handle it
    username = factory.Sequence(lambda n: f"user{n}")
    birthdate = date(1990, 5, 17)
    country_of_residence = "France"
    phone_number = factory.Sequence(lambda n: f"06{n:08d}")
    gender = Gender.OTHER
