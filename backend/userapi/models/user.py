"""User model definition for the registration API."""

from __future__ import annotations

import enum
from datetime import date

from sqlalchemy import Date, Enum, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from userapi.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin


class Gender(str, enum.Enum):
    """Gender options; stored and emitted by name (upper case)."""

    MALE = "MALE"
    FEMALE = "FEMALE"
    OTHER = "OTHER"

    @classmethod
    def parse(cls, value: Gender | str | None) -> Gender | None:
        """
        Coerce ``value`` into a member, ignoring case and surrounding blanks.

        :param value: Member, member name, or ``None``.
        :returns: Matching member or ``None`` when ``value`` is ``None``.
        :raises ValueError: If ``value`` names no member.
        """
        if value is None or isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                pass
        raise ValueError(f"Not a valid gender: {value!r}")

    @classmethod
    def choices(cls) -> list[str]:
        return [member.name for member in cls]


class User(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Registered user. Rows are written once and never updated.

    Fields
    ------
    username : str
        Public handle, unique across all rows (``uq_users_username``).
    birthdate : date
        Date of birth, used for the minimum age rule.
    country_of_residence : str
        Stored exactly as submitted.
    phone_number : str | None
        Optional, stored exactly as submitted.
    gender : Gender | None
        Optional.
    """

    __tablename__ = "users"

    username: Mapped[str] = mapped_column(String(50), nullable=False)
    birthdate: Mapped[date] = mapped_column(Date, nullable=False)
    country_of_residence: Mapped[str] = mapped_column(String(100), nullable=False)
    phone_number: Mapped[str | None] = mapped_column(String(20), nullable=True)
    gender: Mapped[Gender | None] = mapped_column(
        Enum(Gender, name="gender", native_enum=False, length=10), nullable=True
    )

    # The unique constraint also serves as the lookup index.
    __table_args__ = (UniqueConstraint("username", name="uq_users_username"),)
