# backend/src/controlhorarios/app/routers/dashboard.py
"""Router del tablero principal (KPIs, serie diaria y ranking de internos).

Este router expone la API ``/dashboard/*``:
- Los routers se mantienen delgados (HTTP/serialización).
- El SQL vive en ``controlhorarios.dashboard.queries`` y el cálculo de
  tiempos/KPIs en ``controlhorarios.dashboard.tiempos``.

Todos los endpoints aceptan los filtros globales (ver
:func:`controlhorarios.app.dependencies.filtros_query`).
"""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.exc import SQLAlchemyError

from controlhorarios.app.dependencies import error_bd, filtros_query
from controlhorarios.app.schemas.dashboard import KPIs, ChartDataPoint, TopInterno
from controlhorarios.dashboard.filtros import Filtros
from controlhorarios.dashboard.queries import fetch_top_internos
from controlhorarios.dashboard.tiempos import SERIE_MAX_DIAS, compute_kpis, serie_diaria
from controlhorarios.db.config import DatabaseConfigError

router = APIRouter()


@router.get("/kpis", response_model=KPIs)
def dashboard_kpis(filtros: Filtros = Depends(filtros_query)) -> KPIs:  # noqa: B008
    """KPIs de la ventana filtrada.

    - ``viajesTotales``: registros que pasan los filtros.
    - ``tiempoViajePromedio`` / ``tiempoEsperaPromedio``: minutos promedio
      entre eventos consecutivos del mismo interno (viaje si el previo es
      ``Salida``).
    - ``serviciosActivos``: servicios distintos no vacíos.
    """
    try:
        kpis = compute_kpis(filtros)
    except (DatabaseConfigError, SQLAlchemyError) as exc:
        raise error_bd(exc, "KPIs") from exc
    return KPIs(**kpis)


@router.get("/chart-data", response_model=List[ChartDataPoint])
def dashboard_chart_data(filtros: Filtros = Depends(filtros_query)) -> List[ChartDataPoint]:  # noqa: B008
    """Serie diaria (máx. 90 días, ascendente) de minutos de viaje y espera."""
    try:
        points = serie_diaria(filtros, limit=SERIE_MAX_DIAS)
    except (DatabaseConfigError, SQLAlchemyError) as exc:
        raise error_bd(exc, "serie diaria") from exc
    return [ChartDataPoint(**p) for p in points]


@router.get("/top-internos", response_model=List[TopInterno])
def dashboard_top_internos(
    limit: int = Query(10, ge=1, le=50, description="Cantidad máxima de internos."),  # noqa: B008
    filtros: Filtros = Depends(filtros_query),  # noqa: B008
) -> List[TopInterno]:
    """Internos con más registros en la ventana filtrada (desc)."""
    try:
        rows = fetch_top_internos(filtros, limit=limit)
    except (DatabaseConfigError, SQLAlchemyError) as exc:
        raise error_bd(exc, "top internos") from exc
    return [TopInterno(**r) for r in rows]
