"""User endpoints."""

from __future__ import annotations

from flask import Blueprint

from userapi.api.deps import call_context, json_response, load_json_body, log_api_call
from userapi.schemas import RegistrationSchema, UserSchema
from userapi.services.registration.service import UserRegistrationService

bp = Blueprint("users", __name__)

user_schema = UserSchema()
registration_schema = RegistrationSchema()


@bp.post("")
@log_api_call
def register_user():
    """Register a new user."""

    dto = load_json_body(registration_schema)
    service = UserRegistrationService(ctx=call_context())
    user = service.register(dto)
    return json_response(user_schema.dump(user), status=201)


@bp.get("/<string:username>")
@log_api_call
def get_user(username: str):
    """Return a user's details by username."""

    service = UserRegistrationService(ctx=call_context())
    user = service.get_user_details(username)
    return json_response(user_schema.dump(user))
