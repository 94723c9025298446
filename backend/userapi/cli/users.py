"""Flask CLI commands running the registration workflow outside HTTP."""

from __future__ import annotations

import json
from uuid import uuid4

import click
from flask.cli import with_appcontext

from userapi.core.errors import translate_service_error
from userapi.models.user import Gender
from userapi.schemas import UserSchema
from userapi.services._shared.base import ServiceContext
from userapi.services._shared.errors import ServiceError
from userapi.services.registration.dto import RegistrationIn
from userapi.services.registration.service import UserRegistrationService

user_schema = UserSchema()


def _service() -> UserRegistrationService:
    # Not an HTTP call: the service logs its own calls.
    return UserRegistrationService(ctx=ServiceContext(request_id=str(uuid4())))


def _fail(exc: ServiceError) -> click.ClickException:
    api_error = translate_service_error(exc)
    message = f"{api_error.code}: {api_error.message}"
    for field, problem in api_error.validation_errors.items():
        message += f"\n  {field}: {problem}"
    return click.ClickException(message)


@click.group("users")
def users_cli() -> None:
    """Register and inspect users."""


@users_cli.command("register")
@click.option("--username", required=True, help="Unique username (3 to 50 characters).")
@click.option(
    "--birthdate",
    required=True,
    type=click.DateTime(formats=["%Y-%m-%d"]),
    help="Date of birth, YYYY-MM-DD.",
)
@click.option("--country", "country_of_residence", required=True, help="Country of residence.")
@click.option("--phone", "phone_number", default=None, help="Optional phone number.")
@click.option(
    "--gender",
    type=click.Choice(Gender.choices(), case_sensitive=False),
    default=None,
    help="Optional gender.",
)
@with_appcontext
def register_command(
    username: str,
    birthdate,
    country_of_residence: str,
    phone_number: str | None,
    gender: str | None,
) -> None:
    """Register a user and print it as JSON."""
    dto = RegistrationIn(
        username=username,
        birthdate=birthdate.date(),
        country_of_residence=country_of_residence,
        phone_number=phone_number,
        gender=gender,
    )
    try:
        user = _service().register(dto)
    except ServiceError as exc:
        raise _fail(exc) from exc
    click.echo(json.dumps(user_schema.dump(user)))


@users_cli.command("show")
@click.argument("username")
@with_appcontext
def show_command(username: str) -> None:
    """Print a user's details as JSON."""
    try:
        user = _service().get_user_details(username)
    except ServiceError as exc:
        raise _fail(exc) from exc
    click.echo(json.dumps(user_schema.dump(user)))
