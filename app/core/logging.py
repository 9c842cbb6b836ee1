"""
Logging setup.

Modules log through ``logging.getLogger(__name__)``; this configures the
root logger once at application start.
"""

import logging

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure the root logger (no-op for handlers if one is already installed)."""
    logging.basicConfig(level=level.upper(), format=_LOG_FORMAT)
    logging.getLogger().setLevel(level.upper())

    # SQL echo is controlled separately through settings.DEBUG.
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
