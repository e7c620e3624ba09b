import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

from config.settings import (
    APP_LOG_FILE_PATH,
    DEBUG_LOGS_ENABLED,
    LOG_FILE_BACKUP_COUNT,
    LOG_FILE_MAX_BYTES,
)

CLIENT_LOGGER_NAME = "GenAIClient"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_client_logging(
    log_level: Optional[int] = None,
    log_file_path: Optional[str] = APP_LOG_FILE_PATH,
    redirect_to_stderr: bool = True,
) -> logging.Logger:
    """
    Configure the client logger.

    Installs a stderr handler and, when ``log_file_path`` is set, a size-rotating
    file handler. Calling it again replaces the handlers instead of stacking them.

    Args:
        log_level: Level for the client logger. Defaults to DEBUG when
            DEBUG_LOGS_ENABLED is set, INFO otherwise.
        log_file_path: Log file location, or None to disable file logging.
        redirect_to_stderr: Whether to attach a console handler.

    Returns:
        The configured client logger.
    """
    if log_level is None:
        log_level = logging.DEBUG if DEBUG_LOGS_ENABLED else logging.INFO

    logger = logging.getLogger(CLIENT_LOGGER_NAME)
    logger.setLevel(log_level)
    logger.propagate = False
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT)

    if redirect_to_stderr:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(formatter)
        console_handler.setLevel(log_level)
        logger.addHandler(console_handler)

    if log_file_path:
        os.makedirs(os.path.dirname(log_file_path) or ".", exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file_path,
            maxBytes=LOG_FILE_MAX_BYTES,
            backupCount=LOG_FILE_BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        file_handler.setLevel(logging.DEBUG)
        logger.addHandler(file_handler)

    # httpx logs every request line at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.ERROR)

    logger.debug(f"Client logging configured (level={logging.getLevelName(log_level)}, file={log_file_path})")
    return logger
