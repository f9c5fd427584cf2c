import logging
import os
from logging.handlers import RotatingFileHandler

import config

LOGGER_NAME = 'travelbuddy.api'
LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
MAX_LOG_BYTES = 5 * 1024 * 1024
LOG_BACKUPS = 5


def default_log_path() -> str:
    if config.API_LOG_PATH:
        return os.path.abspath(config.API_LOG_PATH)
    project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    return os.path.join(project_root, 'logs', 'api.log')


def _has_file_handler(logger: logging.Logger) -> bool:
    return any(isinstance(h, RotatingFileHandler) for h in logger.handlers)


def setup_api_logger(log_path: str | None = None) -> logging.Logger:
    """Return the shared API logger, attaching its handlers on first use.

    Records go to a rotating file at `log_path` (API_LOG_PATH when not
    given). In development they are echoed to stderr as well. Later calls
    return the same logger untouched.
    """
    logger = logging.getLogger(LOGGER_NAME)
    if _has_file_handler(logger):
        return logger

    logger.setLevel(config.LOG_LEVEL)
    path = os.path.abspath(log_path or default_log_path())
    os.makedirs(os.path.dirname(path), exist_ok=True)

    formatter = logging.Formatter(LOG_FORMAT)
    file_handler = RotatingFileHandler(path, maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUPS, encoding='utf-8')
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    if config.is_development():
        console = logging.StreamHandler()
        console.setFormatter(formatter)
        logger.addHandler(console)

    return logger
