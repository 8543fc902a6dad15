"""Logging configuration for applications embedding docrepo.

Library modules only call logging.getLogger(); nothing is emitted until
the host application calls configure_logging() (or configures logging
itself).
"""

from __future__ import annotations

from logging.config import dictConfig

from docrepo.infrastructure.config import Settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(settings: Settings) -> None:
    """Install a console handler on the docrepo logger at settings.log_level."""
    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"default": {"format": LOG_FORMAT}},
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                }
            },
            "loggers": {
                "docrepo": {
                    "handlers": ["console"],
                    "level": settings.log_level.upper(),
                    "propagate": False,
                }
            },
        }
    )
