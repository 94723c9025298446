"""
UserRegistrationService
=======================

Registers users and looks them up by username:

- ``register`` validates the payload, checks username uniqueness, then writes
  one fully populated ``User`` in a single transaction.
- ``get_user_details`` reads a user inside a read-only unit of work.

Failures are raised as :class:`ServiceError` signals and left for the API
error handlers to translate.
"""

from __future__ import annotations

from datetime import date

from sqlalchemy.exc import IntegrityError

from userapi.models.user import Gender, User
from userapi.services._shared.base import BaseService
from userapi.services._shared.errors import ServiceError, violates
from userapi.services.registration.dto import RegistrationIn, UserOut
from userapi.services.registration.validation import validate_registration

USERNAME_CONSTRAINT = "uq_users_username"


class UserRegistrationService(BaseService):
    """
    Orchestrates user registration and retrieval.
    """

    def register(self, dto: RegistrationIn, *, today: date | None = None) -> UserOut:
        """
        Validate and persist a new user.

        :param dto: Registration input.
        :type dto: :class:`RegistrationIn`
        :param today: Reference date for the age rule (defaults to today).
        :type today: date | None
        :returns: Projection of the stored user, including its new id.
        :rtype: :class:`UserOut`
        :raises ServiceError: ``VALIDATION``, ``AGE_MIN``, ``COUNTRY_FR`` or
            ``ALREADY_EXISTS``.
        """
        return self.run_logged(
            "UserRegistrationService.register", lambda d: self._register(d, today), dto
        )

    def get_user_details(self, username: str) -> UserOut:
        """
        Look up a user by exact username.

        :raises ServiceError: ``NOT_FOUND`` when no user has that username.
        """
        return self.run_logged(
            "UserRegistrationService.get_user_details", self._get_user_details, username
        )

    # ------------------------------------------------------------------ #
    # Steps
    # ------------------------------------------------------------------ #

    def _register(self, dto: RegistrationIn, today: date | None) -> UserOut:
        validate_registration(dto, today=today)
        username = dto.username

        try:
            with self.rw_uow() as uow:
                if uow.users.exists_by_username(username):
                    raise ServiceError.already_exists(username)

                user = User(
                    username=username,
                    birthdate=dto.birthdate,
                    country_of_residence=dto.country_of_residence,
                    phone_number=dto.phone_number,
                    gender=Gender.parse(dto.gender),
                )
                uow.users.add(user)
                out = UserOut.from_model(user)
        except IntegrityError as exc:
            # A concurrent registration won the race between check and write.
            if violates(exc, USERNAME_CONSTRAINT, "users.username"):
                raise ServiceError.already_exists(username) from exc
            raise
        return out

    def _get_user_details(self, username: str) -> UserOut:
        with self.ro_uow() as uow:
            user = uow.users.get_by_username(username)
            if user is None:
                raise ServiceError.not_found(username)
            return UserOut.from_model(user)
