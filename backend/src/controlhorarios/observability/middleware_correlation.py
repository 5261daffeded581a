# backend/src/controlhorarios/observability/middleware_correlation.py
import re
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from .logging_context import correlation_id_var

HEADER = "X-Correlation-Id"

# Ids aceptados desde el cliente; el resto se reemplaza por un uuid4
_VALID_CID = re.compile(r"[A-Za-z0-9._\-]{1,64}")


def resolve_correlation_id(raw: str) -> str:
    """Devuelve el id recibido si es seguro para logs/headers, o uno nuevo."""
    cid = (raw or "").strip()
    return cid if _VALID_CID.fullmatch(cid) else str(uuid.uuid4())


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """
    - Toma X-Correlation-Id del request (el frontend lo reenvía entre
      tablero, registros y tiempos) o genera uno
    - Lo guarda en request.state y en el ContextVar de logging
    - Lo devuelve en la respuesta, incluidas las de error 4xx/5xx
    """

    async def dispatch(self, request: Request, call_next):
        cid = resolve_correlation_id(request.headers.get(HEADER, ""))
        request.state.correlation_id = cid

        token = correlation_id_var.set(cid)
        try:
            response: Response = await call_next(request)
        finally:
            correlation_id_var.reset(token)

        response.headers[HEADER] = cid
        return response
