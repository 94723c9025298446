"""
Domain-level failure signals raised within the service layer.

Every failure the workflow can report is a :class:`ServiceError` tagged with
one :class:`ErrorKind`. The set of kinds is closed; the HTTP translation table
in ``userapi/core/errors.py`` covers each of them.

These signals are **framework-agnostic** and never import Flask or HTTP
helpers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str, column: str | None = None) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    PostgreSQL reports the constraint name in the error message; SQLite only
    reports the offending ``table.column``, which is matched when ``column``
    is given.

    Parameters
    ----------
    exc : IntegrityError
        The exception raised by SQLAlchemy during flush/commit.
    constraint_name : str
        The name of the database constraint (e.g. ``'uq_users_username'``).
    column : str | None
        Optional ``table.column`` fallback (e.g. ``'users.username'``).

    Returns
    -------
    bool
        True if the IntegrityError matches the given constraint.
    """
    message = str(exc.orig).lower() if exc.orig else str(exc).lower()
    if constraint_name.lower() in message:
        return True
    return column is not None and column.lower() in message


class ErrorKind(str, Enum):
    """Closed set of failure signals produced by the registration workflow."""

    VALIDATION = "validation"
    MALFORMED_INPUT = "malformed_input"
    AGE_MIN = "age_min"
    COUNTRY_FR = "country_fr"
    ALREADY_EXISTS = "already_exists"
    NOT_FOUND = "not_found"


@dataclass(slots=True, eq=False)
class ServiceError(Exception):
    """
    Failure signal carrying enough data to build a client response.

    :param kind: Which failure occurred.
    :type kind: ErrorKind
    :param message: Human-readable description (safe for clients).
    :type message: str
    :param identifier: Offending identifier (e.g. a username), when relevant.
    :type identifier: str | None
    :param violations: Field → message mapping for structural failures.
    :type violations: dict[str, str]
    """

    kind: ErrorKind
    message: str
    identifier: str | None = None
    violations: dict[str, str] = field(default_factory=dict)

    def __str__(self) -> str:
        return self.message

    # ------------------------------------------------------------------ #
    # Constructors
    # ------------------------------------------------------------------ #

    @classmethod
    def validation(cls, violations: dict[str, str]) -> ServiceError:
        return cls(ErrorKind.VALIDATION, "Input validation failed", violations=dict(violations))

    @classmethod
    def malformed(cls, cause: str) -> ServiceError:
        """Wrap the text of a wire-level decoding failure."""
        return cls(ErrorKind.MALFORMED_INPUT, cause)

    @classmethod
    def age_min(cls, minimum_age: int = 18) -> ServiceError:
        return cls(ErrorKind.AGE_MIN, f"User must be at least {minimum_age} years old")

    @classmethod
    def country_fr(cls) -> ServiceError:
        return cls(ErrorKind.COUNTRY_FR, "Only French residents can register")

    @classmethod
    def already_exists(cls, username: str) -> ServiceError:
        return cls(
            ErrorKind.ALREADY_EXISTS,
            f"User with username '{username}' already exists",
            identifier=username,
        )

    @classmethod
    def not_found(cls, username: str) -> ServiceError:
        return cls(
            ErrorKind.NOT_FOUND,
            f"User with username '{username}' not found",
            identifier=username,
        )
