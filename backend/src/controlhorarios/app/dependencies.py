# backend/src/controlhorarios/app/dependencies.py
"""Dependencias compartidas por los routers.

- :func:`filtros_query`: parsea los filtros globales de la query string.
- :func:`error_bd`: traduce errores de base de datos a ``HTTPException``.

Se mantienen en la capa HTTP porque representan parsing/contrato de entrada;
la lógica de filtrado real vive en :mod:`controlhorarios.dashboard`.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import HTTPException, Query
from pydantic import ValidationError

from controlhorarios.dashboard.filtros import Filtros, filtros_desde_params
from controlhorarios.db.config import DatabaseConfigError
from controlhorarios.observability.logging_context import get_correlation_id

logger = logging.getLogger("controlhorarios.api")


def validation_detail(exc: ValidationError) -> List[Dict[str, Any]]:
    """Errores de pydantic en formato JSON-serializable (loc/msg/type)."""
    return [
        {"loc": [str(x) for x in err.get("loc", ())], "msg": err.get("msg", ""), "type": err.get("type", "")}
        for err in exc.errors()
    ]


def filtros_query(
    desde: Optional[str] = Query(None, alias="from", description="Fecha inicial YYYY-MM-DD (incl.)."),  # noqa: B008
    hasta: Optional[str] = Query(None, alias="to", description="Fecha final YYYY-MM-DD (incl.)."),  # noqa: B008
    interno: Optional[str] = Query(None, description="Internos separados por coma."),  # noqa: B008
    servicio: Optional[str] = Query(None, description="Servicios separados por coma."),  # noqa: B008
    conductor: Optional[str] = Query(None, description="Conductores separados por coma."),  # noqa: B008
    tipo: Optional[str] = Query(None, description="Tipos de evento separados por coma."),  # noqa: B008
    lugar: Optional[str] = Query(None, description="Lugares separados por coma."),  # noqa: B008
    id_interno: Optional[str] = Query(None, alias="idInterno", include_in_schema=False),  # noqa: B008
    id_servicio: Optional[str] = Query(None, alias="idServicio", include_in_schema=False),  # noqa: B008
    id_conductor: Optional[str] = Query(None, alias="idConductor", include_in_schema=False),  # noqa: B008
    page: Optional[str] = Query(None, description="Página (desde 1)."),  # noqa: B008
    page_size: Optional[str] = Query(None, alias="pageSize", description="Filas por página (0 = todas)."),  # noqa: B008
    sort_by: Optional[str] = Query(None, alias="sortBy", description="fecha|hora|interno|servicio|tipo|lugar|conductor"),  # noqa: B008
    sort_dir: Optional[str] = Query(None, alias="sortDir", description="asc|desc"),  # noqa: B008
) -> Filtros:
    """Filtros globales desde query params (422 si son inválidos)."""
    params = {
        "from": desde,
        "to": hasta,
        "interno": interno,
        "idInterno": id_interno,
        "servicio": servicio,
        "idServicio": id_servicio,
        "conductor": conductor,
        "idConductor": id_conductor,
        "tipo": tipo,
        "lugar": lugar,
        "page": page,
        "pageSize": page_size,
        "sortBy": sort_by,
        "sortDir": sort_dir,
    }
    try:
        return filtros_desde_params({k: v for k, v in params.items() if v is not None})
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=validation_detail(exc)) from exc


def error_bd(exc: Exception, recurso: str) -> HTTPException:
    """Traduce un error de base de datos a una respuesta HTTP genérica.

    Debe llamarse dentro del ``except`` para que el traceback quede en logs.
    El detalle nunca incluye SQL ni credenciales.
    """
    cid = get_correlation_id()
    if isinstance(exc, DatabaseConfigError):
        logger.error("Base de datos sin configurar al consultar %s: %s", recurso, exc)
        return HTTPException(status_code=503, detail=f"Base de datos no configurada (cid={cid})")

    logger.exception("Error consultando %s", recurso)
    return HTTPException(status_code=500, detail=f"No se pudo consultar la base de datos (cid={cid})")
