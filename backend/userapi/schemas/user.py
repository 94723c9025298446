"""User resource schemas (JSON wire format ⇄ service DTOs)."""

from __future__ import annotations

import re
from typing import Any

from marshmallow import EXCLUDE, Schema, ValidationError, fields, post_load

from userapi.models.user import Gender
from userapi.services.registration.dto import RegistrationIn

DATE_FORMAT = "%Y-%m-%d"
_DATE_SHAPE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


class GenderField(fields.Field):
    """Gender accepted in any case on input, emitted upper case."""

    default_error_messages = {
        "invalid": "Not a valid gender. Must be one of: " + ", ".join(Gender.choices()) + ".",
    }

    def _serialize(self, value: Any, attr: str | None, obj: Any, **kwargs: Any) -> str | None:
        if value is None:
            return None
        return Gender.parse(value).value

    def _deserialize(self, value: Any, attr: str | None, data: Any, **kwargs: Any) -> Gender:
        try:
            return Gender.parse(value)
        except ValueError as exc:
            raise self.make_error("invalid") from exc


class IsoDateField(fields.Date):
    """Date in zero-padded ``yyyy-MM-dd`` form; ``strptime`` alone accepts ``2000-1-1``."""

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(format=DATE_FORMAT, **kwargs)

    def _deserialize(self, value: Any, attr: str | None, data: Any, **kwargs: Any):
        if not isinstance(value, str) or not _DATE_SHAPE.fullmatch(value):
            raise self.make_error("invalid")
        return super()._deserialize(value, attr, data, **kwargs)


class RegistrationSchema(Schema):
    """Decode a registration request body into :class:`RegistrationIn`.

    Only wire-level decoding happens here (types, date format, gender
    names). Presence, length and format rules belong to the validation
    pipeline, so every field is optional at this stage.
    """

    class Meta:
        unknown = EXCLUDE

    username = fields.String(load_default=None, allow_none=True)
    birthdate = IsoDateField(load_default=None, allow_none=True)
    country_of_residence = fields.String(
        data_key="countryOfResidence", load_default=None, allow_none=True
    )
    phone_number = fields.String(data_key="phoneNumber", load_default=None, allow_none=True)
    gender = GenderField(load_default=None, allow_none=True)

    @post_load
    def make_dto(self, data: dict[str, Any], **_: Any) -> RegistrationIn:
        return RegistrationIn(**data)


class UserSchema(Schema):
    """Public representation of a user."""

    id = fields.Integer(required=True)
    username = fields.String(required=True)
    birthdate = IsoDateField(required=True)
    country_of_residence = fields.String(data_key="countryOfResidence", required=True)
    phone_number = fields.String(data_key="phoneNumber", allow_none=True)
    gender = GenderField(allow_none=True)


def describe_errors(err: ValidationError) -> str:
    """Flatten Marshmallow error messages into one line (``field: message``)."""

    messages = err.messages
    if not isinstance(messages, dict):
        return " ".join(str(m) for m in messages) if isinstance(messages, list) else str(messages)
    parts = []
    for field_name, problems in messages.items():
        text = " ".join(problems) if isinstance(problems, list) else str(problems)
        parts.append(f"{field_name}: {text}")
    return "; ".join(parts)
