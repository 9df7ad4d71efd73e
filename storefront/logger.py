# storefront/logger.py
import logging
import os
import sys
from logging.handlers import RotatingFileHandler

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# HTTP and server libraries that drown out wishlist messages at INFO
QUIET_LOGGERS = ("urllib3", "werkzeug")

_configured = False


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


def _file_handler(path: str) -> logging.Handler | None:
    try:
        log_dir = os.path.dirname(path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        return RotatingFileHandler(
            path,
            maxBytes=int(os.getenv("LOG_MAX_BYTES", str(2 * 1024 * 1024))),
            backupCount=int(os.getenv("LOG_BACKUPS", "3")),
        )
    except OSError as e:
        logging.getLogger(__name__).warning("Failed to initialize file logging at %s: %s", path, e)
        return None


def setup_logging():
    """
    Configure the root logger once from LOG_* environment variables.
    Leaves existing handlers alone when the host (Flask, pytest) installed its own.
    """
    global _configured
    if _configured:
        return

    level = getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)
    root = logging.getLogger()
    root.setLevel(level)

    if not root.handlers:
        handlers = []
        if _env_flag("LOG_TO_STDOUT", "true"):
            handlers.append(logging.StreamHandler(sys.stdout))
        # The widget runs inside other programs; file logging is opt-in
        if _env_flag("LOG_TO_FILE", "false"):
            handlers.append(_file_handler(os.getenv("LOG_FILE", "/data/wishlist_widget.log")))

        formatter = logging.Formatter(LOG_FORMAT)
        for handler in filter(None, handlers):
            handler.setLevel(level)
            handler.setFormatter(formatter)
            root.addHandler(handler)

    if level > logging.DEBUG:
        for name in QUIET_LOGGERS:
            logging.getLogger(name).setLevel(max(level, logging.WARNING))

    _configured = True


def get_logger(name: str | None = None) -> logging.Logger:
    setup_logging()
    return logging.getLogger(name)
