"""Application factory for the voting kiosk."""

from __future__ import annotations

from flask import Flask

from .config import Config
from .core.bootstrap import (
    configure_logging,
    configure_results_folder,
    initialize_database,
    register_blueprints,
    register_commands,
    register_extensions,
)
from .core.extensions import db

__all__ = ["create_app", "db"]


def create_app(config_class: type[Config] = Config) -> Flask:
    """Build the kiosk server: API, kiosk page and `flask kiosk` command."""

    app = Flask(__name__)
    app.config.from_object(config_class)

    configure_logging(app)
    register_extensions(app)
    configure_results_folder(app)
    register_blueprints(app)
    register_commands(app)

    with app.app_context():
        initialize_database(app)

    return app
