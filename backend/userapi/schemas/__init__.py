"""Convenience exports for application schemas."""

from __future__ import annotations

from .user import GenderField, IsoDateField, RegistrationSchema, UserSchema, describe_errors

__all__ = [
    "GenderField",
    "IsoDateField",
    "RegistrationSchema",
    "UserSchema",
    "describe_errors",
]
