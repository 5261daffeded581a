"""
Módulo principal de la API de ControlHorarios.

Responsabilidades:
- Instanciación de FastAPI
- Registro de routers (rutas agrupadas por dominio)
- Endpoints globales mínimos (/health)
- Habilitar CORS para el frontend (Next.js en 3000, Vite en 5173)
- Configurar logging (dictConfig) con correlation id por request
- Exponer el tiempo de respuesta en X-Query-Time-Ms
- Liberar el pool de conexiones al apagar
"""

from __future__ import annotations

import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Configuración de logging (dictConfig)
from controlhorarios.app.logging_config import setup_logging
from controlhorarios.db.engine import reset_engine

# Middlewares de trazabilidad y LogRecordFactory contextual
from controlhorarios.observability.logging_context import install_logrecord_factory
from controlhorarios.observability.middleware_correlation import CorrelationIdMiddleware
from controlhorarios.observability.middleware_timing import QueryTimeMiddleware

# Routers del dominio
from .routers import dashboard, filtros, registros, tiempos

logger = logging.getLogger("controlhorarios")

# Instancia de la aplicación (título visible en /docs y /openapi.json)
app = FastAPI(title="ControlHorarios API", version=os.getenv("API_VERSION", "0.3.0"))

# ---------------------------------------------------------------------------
# CORS
#   - CH_ALLOWED_ORIGINS (coma-separados) tiene prioridad
#   - Si no está definido, se usan los orígenes locales de desarrollo
# ---------------------------------------------------------------------------
_default_origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]
_raw_origins = os.getenv("CH_ALLOWED_ORIGINS")
ALLOWED_ORIGINS = (
    [o.strip() for o in _raw_origins.split(",") if o.strip()]
    if _raw_origins
    else _default_origins
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Correlation-Id", "X-Query-Time-Ms", "X-Total-Count", "Content-Disposition"],
    max_age=600,
)

# El último middleware agregado es el más externo: el correlation id ya está
# fijado cuando QueryTimeMiddleware registra la request.
app.add_middleware(QueryTimeMiddleware)
app.add_middleware(CorrelationIdMiddleware)


@app.on_event("startup")
def _startup_logging() -> None:
    """
    - Configura logging (dictConfig con filtro cid)
    - Instala LogRecordFactory que inyecta correlation_id desde ContextVar
    """
    setup_logging()
    install_logrecord_factory()
    logger.info("ControlHorarios API iniciada (origins=%s)", ALLOWED_ORIGINS)


@app.on_event("shutdown")
def _shutdown_engine() -> None:
    reset_engine()


@app.get("/health")
def health() -> dict:
    """Endpoint de salud: permite saber si la API está arriba (no consulta la base)."""
    return {"status": "ok"}


# Registro de routers bajo prefijos. Cada router agrupa rutas por contexto
# y define su propia etiqueta (tags) para la documentación automática.
app.include_router(filtros.router,    prefix="/filtros",    tags=["filtros"])
app.include_router(dashboard.router,  prefix="/dashboard",  tags=["dashboard"])
app.include_router(registros.router,  prefix="/registros",  tags=["registros"])
app.include_router(tiempos.router,    prefix="/tiempos",    tags=["tiempos"])
