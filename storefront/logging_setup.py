"""Central logging configuration for the storefront service.

Installs a single stdout handler on the root logger so module loggers emit
INFO-level records without per-module setup. uvicorn loggers share the same
handler and do not propagate, which avoids duplicate lines on reloads.
"""
from __future__ import annotations
import logging
import os
from logging.config import dictConfig

_DICT_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {
            "format": "%(asctime)s %(levelname)s:%(name)s:%(message)s",
        }
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "level": "DEBUG",
            "formatter": "default",
            "stream": "ext://sys.stdout",
        }
    },
    "root": {"level": "INFO", "handlers": ["console"]},
    "loggers": {
        "uvicorn": {"level": "INFO", "handlers": ["console"], "propagate": False},
        "uvicorn.error": {"level": "INFO", "handlers": ["console"], "propagate": False},
        "uvicorn.access": {"level": "INFO", "handlers": ["console"], "propagate": False},
        # passlib logs backend probing at DEBUG/INFO; keep it quiet
        "passlib": {"level": "WARNING"},
    },
}


def configure_logging(level: str | None = None) -> None:
    """Configure application-wide logging once.

    If the root logger already has handlers (pytest capture, reloaders), only
    the level is adjusted so output is not duplicated.
    """
    resolved = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    root = logging.getLogger()
    if root.handlers:
        root.setLevel(resolved)
        return
    config = dict(_DICT_CONFIG)
    config["root"] = {"level": resolved, "handlers": ["console"]}
    dictConfig(config)


__all__ = ["configure_logging"]
