"""
Logging for the kiosk server.

Everything under the ``kioskvote_app`` package (Flask's ``app.logger`` and the
``logging.getLogger(__name__)`` loggers of the services and the controller)
ends up on the console and in ``<LOG_DIR>/kioskvote.log``. The file rotates so
a kiosk left running for weeks does not fill its disk.
"""

import logging
import logging.handlers
import os

LOGGER_NAME = 'kioskvote_app'
LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5


def setup_logging(app) -> logging.Logger:
    """Attach console and rotating-file handlers according to ``app.config``."""
    level_name = str(app.config.get('LOG_LEVEL', 'INFO')).upper()
    level = getattr(logging, level_name, logging.INFO)
    log_dir = app.config.get('LOG_DIR') or os.path.join(os.path.dirname(app.root_path), 'logs')
    os.makedirs(log_dir, exist_ok=True)

    formatter = logging.Formatter(LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S')

    console_handler = logging.StreamHandler()
    file_handler = logging.handlers.RotatingFileHandler(
        os.path.join(log_dir, 'kioskvote.log'),
        maxBytes=LOG_FILE_MAX_BYTES,
        backupCount=LOG_FILE_BACKUPS,
        encoding='utf-8',
    )

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.handlers.clear()
    for handler in (console_handler, file_handler):
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    # Request lines from the dev server drown out vote logs
    logging.getLogger('werkzeug').setLevel(logging.WARNING)

    logger.info("Logging initialized: level=%s, file=%s", level_name, file_handler.baseFilename)
    return logger
