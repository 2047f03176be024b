"""Application factory binding the store and registering the CLI."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from flask import Flask

from worldimport.core.config import BaseConfig, get_config
from worldimport.core.logger import configure_logging


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    overrides: Mapping[str, Any] | None = None,
) -> Flask:
    """Build and configure the Flask application.

    :param config: Config class, object or import path; defaults to the
        class selected by ``APP_ENV``.
    :param overrides: Keys applied after ``config``, e.g. the
        ``SQLALCHEMY_DATABASE_URI`` of the output store chosen at run time.
    """

    app = Flask(__name__)

    app.config.from_object(get_config() if config is None else config)
    if overrides:
        app.config.update(overrides)

    # pytest owns log capture under TESTING
    if not app.config.get("TESTING"):
        configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    from worldimport.core import extensions

    extensions.init_app(app)

    from worldimport import cli as app_cli

    app_cli.init_app(app)

    return app
