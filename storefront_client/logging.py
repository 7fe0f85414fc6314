"""Logging setup for the storefront client.

Cache activity (HIT, SET, INVALIDATE, CLEAR) is logged at DEBUG under
``storefront_client.cache``. Failed requests are logged under
``storefront_client.api.session``.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"

# Transport libraries that flood DEBUG output with connection details
QUIET_LOGGERS = ("urllib3", "charset_normalizer")


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Send client logs to stdout, and to ``log_file`` when given."""
    log_level = logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        log_level = logging.INFO

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(level=log_level, format=LOG_FORMAT, handlers=handlers, force=True)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
