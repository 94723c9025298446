"""Application factory wiring Flask extensions and blueprints."""

from __future__ import annotations

from flask import Flask

from userapi.core.config import BaseConfig, get_config
from userapi.core.logger import configure_logging, init_app as init_logging


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    instance_relative_config: bool = True,
    instance_config_filename: str = "config.py",
) -> Flask:
    """Build and configure the Flask application.

    ``config`` may be an environment name (``"testing"``), a config class or
    object; ``None`` selects the class named by ``APP_ENV``.
    """

    app = Flask(__name__, instance_relative_config=instance_relative_config)

    if config is None or isinstance(config, str):
        config = get_config(config)
    app.config.from_object(config)
    if instance_relative_config and instance_config_filename:
        app.config.from_pyfile(instance_config_filename, silent=True)
    # Flask 3 reads key sorting from the JSON provider, not from config.
    app.json.sort_keys = app.config.get("JSON_SORT_KEYS", False)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    from userapi.core import extensions

    extensions.init_app(app)

    init_logging(app)

    from userapi.api import init_app as init_api

    init_api(app)

    from userapi.core import errors

    errors.init_app(app)

    from userapi import cli as app_cli

    app_cli.init_app(app)

    return app
