"""Application factory."""

from __future__ import annotations

from flask import Flask

from shopcart.core.config import BaseConfig, get_config, validate_settings
from shopcart.core.logger import configure_logging


def create_app(config: str | type[BaseConfig] | object | None = None) -> Flask:
    """Build the app for ``config`` (default: the class selected by ``APP_ENV``).

    An optional ``instance/config.py`` overrides the loaded class and is
    validated together with it, so the unsafe dev bypass cannot be switched
    on behind the settings checks.
    """
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config if config is not None else get_config())
    app.config.from_pyfile("config.py", silent=True)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))
    validate_settings(app.config)

    from shopcart import cli
    from shopcart.api import init_app as init_api
    from shopcart.core import container, errors, extensions, logger, scheduler

    # Order matters: the container needs the bound extensions, the API
    # needs the container, and the sweeper needs both.
    extensions.init_app(app)
    logger.init_app(app)
    container.init_app(app)
    init_api(app)
    errors.init_app(app)
    cli.init_app(app)
    scheduler.init_app(app)
    return app
