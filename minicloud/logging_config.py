"""
Logging setup for MiniCloud.

Call ``setup_logging()`` once at start-up; modules just use
``logging.getLogger(__name__)``.
"""
import logging.config
import os

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_configured = False


def setup_logging(level: str | None = None) -> None:
    global _configured

    if _configured:
        return

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {"format": LOG_FORMAT},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
            },
        },
        "root": {
            "level": (level or os.getenv("LOG_LEVEL", "INFO")).upper(),
            "handlers": ["console"],
        },
    })
    _configured = True
