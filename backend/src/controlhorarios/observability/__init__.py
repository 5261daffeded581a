# backend/src/controlhorarios/observability/__init__.py
"""
Paquete de observabilidad: correlation id por request, filtro/factory de
logging y medición del tiempo de respuesta.
"""

from .logging_context import correlation_id_var, get_correlation_id, install_logrecord_factory
from .middleware_correlation import CorrelationIdMiddleware
from .middleware_timing import QueryTimeMiddleware

__all__ = [
    "CorrelationIdMiddleware",
    "QueryTimeMiddleware",
    "correlation_id_var",
    "get_correlation_id",
    "install_logrecord_factory",
]
