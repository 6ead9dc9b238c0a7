"""
Logging helpers shared by every module.

Usage:
    from app.utils import get_logger

    log = get_logger(__name__)
    log.info("Something happened: %s", value)
"""
import logging
import logging.config

from app.core import config


_configured = False


def configure_logging(level: str | None = None) -> None:
    """Configure the root logger once for the whole process."""
    global _configured
    if _configured:
        return

    effective_level = (level or config.LOG_LEVEL).upper()
    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s %(levelname)-8s %(name)s: %(message)s",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
            },
        },
        "root": {
            "level": effective_level,
            "handlers": ["console"],
        },
        "loggers": {
            # SQL echo is controlled by the engine, keep the library quiet otherwise
            "sqlalchemy.engine": {"level": "WARNING"},
            "aiosqlite": {"level": "WARNING"},
        },
    })
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given module name, configuring logging on first use."""
    configure_logging()
    return logging.getLogger(name)
