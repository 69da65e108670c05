"""Logging setup and filters for enriching log records with request context.

``RequestIdFilter`` injects the current request id into log records using
the ContextVar set by the request middleware. ``configure_logging`` attaches
a JSON handler carrying that filter to the ``kitchen`` logger.
"""

import logging
from logging import Filter, LogRecord

from pythonjsonlogger import jsonlogger

from .middleware import REQUEST_ID_CTX

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s %(request_id)s"


class RequestIdFilter(Filter):
    """Attach a ``request_id`` attribute to log records.

    The value is retrieved from ``REQUEST_ID_CTX``. Outside a request the
    ContextVar default ("-") is used so formatters can reliably reference
    ``%(request_id)s``.
    """

    def filter(self, record: LogRecord) -> bool:
        record.request_id = REQUEST_ID_CTX.get()
        return True


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Configure the ``kitchen`` logger with a JSON stream handler.

    Calling it again does not add a second handler.

    Args:
        level: Log level name for the ``kitchen`` logger.

    Returns:
        logging.Logger: The configured ``kitchen`` logger.
    """
    logger = logging.getLogger("kitchen")
    if not logger.handlers:
        h = logging.StreamHandler()
        h.setFormatter(jsonlogger.JsonFormatter(LOG_FORMAT))
        h.addFilter(RequestIdFilter())
        logger.addHandler(h)
    logger.setLevel(level)
    return logger
