# backend/src/controlhorarios/observability/logging_filters.py
import logging

from .logging_context import correlation_id_var


class CorrelationIdLogFilter(logging.Filter):
    """
    Garantiza 'correlation_id' en cada LogRecord para que el formatter pueda
    usar %(correlation_id)s. Si la LogRecordFactory aún no está instalada
    (logs de import o de uvicorn antes del startup) toma el ContextVar.
    """
    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "correlation_id", None):
            record.correlation_id = correlation_id_var.get() or "-"
        return True
