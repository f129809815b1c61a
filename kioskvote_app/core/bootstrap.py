"""Start-up steps run by ``create_app``, in order."""

from __future__ import annotations

import logging
import os

from flask import Flask

from .error_handlers import register_error_handlers
from .extensions import csrf_protect, db
from .logging_config import LOG_FORMAT, setup_logging
from .module_registry import register_modules


def configure_logging(app: Flask) -> None:
    """Console-only logging under test, console plus log file otherwise."""

    if app.logger.handlers:
        return

    if app.testing:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        app.logger.addHandler(handler)
        app.logger.setLevel(logging.DEBUG)
    else:
        setup_logging(app)
    app.logger.propagate = False


def register_extensions(app: Flask) -> None:
    """Bind the database and CSRF protection to ``app``."""

    db.init_app(app)
    csrf_protect.init_app(app)


def configure_results_folder(app: Flask) -> None:
    """Make sure the word-cloud staging and current folders exist."""

    results_folder = app.config["RESULTS_FOLDER"]
    os.makedirs(os.path.join(results_folder, "staging"), exist_ok=True)
    os.makedirs(os.path.join(results_folder, "current"), exist_ok=True)
    app.logger.info("Word-cloud results folder: %s", results_folder)
    if not app.config.get("WORDCLOUD_FONT_PATH"):
        app.logger.warning(
            "No WORDCLOUD_FONT_PATH and no system font with Hebrew glyphs found; "
            "non-Latin labels will render as boxes"
        )


def register_blueprints(app: Flask) -> None:
    """Mount the feature blueprints and the JSON error handlers."""

    register_modules(app)
    register_error_handlers(app)


def register_commands(app: Flask) -> None:
    """Attach the terminal kiosk command to ``flask``."""

    from ..cli import kiosk_command

    app.cli.add_command(kiosk_command)


def initialize_database(app: Flask) -> None:
    """Create database tables."""

    from .. import models  # noqa: F401  (registers the tables)

    db.create_all()
    app.logger.info("Database tables ready (%s).", app.config["SQLALCHEMY_DATABASE_URI"])
