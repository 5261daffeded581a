# backend/src/controlhorarios/observability/middleware_timing.py
"""
Tiempo de respuesta por request.

El frontend muestra "tiempo de consulta" junto al conteo de resultados; este
middleware lo mide en el servidor y lo expone en X-Query-Time-Ms.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

HEADER = "X-Query-Time-Ms"

logger = logging.getLogger("controlhorarios.http")


class QueryTimeMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        t0 = time.perf_counter()
        response: Response = await call_next(request)
        elapsed_ms = (time.perf_counter() - t0) * 1000

        response.headers[HEADER] = f"{elapsed_ms:.0f}"
        logger.info(
            "%s %s -> %s (%.1f ms)",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )
        return response
