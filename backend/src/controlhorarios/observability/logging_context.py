# backend/src/controlhorarios/observability/logging_context.py
from __future__ import annotations

import logging
from contextvars import ContextVar

# correlation_id de la request en curso ('-' fuera de una request)
correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="-")

_INSTALLED = False


def get_correlation_id() -> str:
    """correlation_id del contexto actual."""
    return correlation_id_var.get()


def install_logrecord_factory() -> None:
    """
    Instala una LogRecordFactory que copia el correlation_id del ContextVar
    al LogRecord, salvo que ya venga uno explícito (extra={...}).

    Idempotente: con --reload el startup puede ejecutarse más de una vez.
    """
    global _INSTALLED
    if _INSTALLED:
        return

    old_factory = logging.getLogRecordFactory()

    def record_factory(*args, **kwargs):
        record = old_factory(*args, **kwargs)
        current = record.__dict__.get("correlation_id")
        if not current or current == "-":
            record.__dict__["correlation_id"] = correlation_id_var.get() or "-"
        return record

    logging.setLogRecordFactory(record_factory)
    _INSTALLED = True
