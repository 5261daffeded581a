# backend/src/controlhorarios/app/logging_config.py
import logging
import logging.config
import os
from typing import Optional

_FORMAT = "%(asctime)s %(levelname)s [cid=%(correlation_id)s] %(name)s: %(message)s"


def build_logging_config(level: str = "INFO") -> dict:
    """dictConfig con filtro cid; uvicorn y la app comparten handler."""
    return {
        "version": 1,
        "disable_existing_loggers": False,  # mantiene loggers de uvicorn/fastapi
        "filters": {
            "cid": {
                "()": "controlhorarios.observability.logging_filters.CorrelationIdLogFilter"
            }
        },
        "formatters": {
            "default": {"format": _FORMAT},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": level,
                "filters": ["cid"],
                "formatter": "default",
            },
        },
        "root": {
            "level": level,
            "handlers": ["console"],
        },
        "loggers": {
            "uvicorn.error": {"level": "INFO", "handlers": ["console"], "propagate": False},
            "uvicorn.access": {"level": "INFO", "handlers": ["console"], "propagate": False},
            "controlhorarios": {"level": level, "handlers": ["console"], "propagate": False},
            # SQL emitido por SQLAlchemy solo con CH_LOG_LEVEL=DEBUG
            "sqlalchemy.engine": {"level": "WARNING" if level != "DEBUG" else "INFO"},
        },
    }


def setup_logging(level: Optional[str] = None) -> None:
    level = (level or os.getenv("CH_LOG_LEVEL", "INFO")).upper()
    logging.config.dictConfig(build_logging_config(level))
