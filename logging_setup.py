"""Central logging configuration.

Installs one stdout handler on the root logger so module loggers emit without
per-module setup. Uvicorn's loggers share the same handler. Calling it again
(reloaders, test app factories) only adjusts the level.
"""
from __future__ import annotations

import copy
import logging
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
            "formatter": "default",
            "stream": "ext://sys.stdout",
        }
    },
    "root": {"level": "INFO", "handlers": ["console"]},
    "loggers": {
        "uvicorn": {"handlers": ["console"], "propagate": False},
        "uvicorn.access": {"handlers": ["console"], "propagate": False},
    },
}


def configure_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    if root.handlers:
        root.setLevel(level.upper())
        return
    config = copy.deepcopy(_DICT_CONFIG)
    config["root"]["level"] = level.upper()
    dictConfig(config)
