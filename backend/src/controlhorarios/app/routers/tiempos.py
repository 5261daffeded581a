# backend/src/controlhorarios/app/routers/tiempos.py
"""Router de análisis de tiempos de viaje y de espera.

Endpoints
---------
- ``GET /tiempos/viaje``: tramos que parten de una ``Salida``.
- ``GET /tiempos/espera``: resto de tramos.
- ``GET /tiempos/{tramo}/distribucion``: histograma de minutos.
- ``GET /tiempos/{tramo}/export``: CSV de los tramos.

``tramo`` es ``viaje`` o ``espera``; cualquier otro valor responde 404.
``?tipo=`` sigue siendo el filtro global por tipo de evento.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.exc import SQLAlchemyError

from controlhorarios.app.dependencies import error_bd, filtros_query
from controlhorarios.app.schemas.tiempos import DistributionBin, TiempoEspera, TiempoViaje
from controlhorarios.dashboard import tiempos as analisis
from controlhorarios.dashboard.exports import esperas_csv, export_filename, viajes_csv
from controlhorarios.dashboard.filtros import Filtros
from controlhorarios.db.config import DatabaseConfigError

router = APIRouter()


@dataclass(frozen=True)
class _TipoTramo:
    """Configuración por tipo de tramo."""

    nombre: str
    listar: Callable[[Filtros], List[Dict[str, Any]]]
    bin_size: int
    csv: Callable[[List[Dict[str, Any]]], str]
    export_prefix: str


_TIPOS: Dict[str, _TipoTramo] = {
    "viaje": _TipoTramo("viaje", analisis.tiempos_viaje, 15, viajes_csv, "tiempos_viaje"),
    "espera": _TipoTramo("espera", analisis.tiempos_espera, 5, esperas_csv, "tiempos_espera"),
}


def _tramo_o_404(tramo: str) -> _TipoTramo:
    cfg = _TIPOS.get((tramo or "").strip().lower())
    if cfg is None:
        raise HTTPException(status_code=404, detail=f"Tipo de tiempo no soportado: {tramo}. Soportados={list(_TIPOS)}")
    return cfg


def _tramos(cfg: _TipoTramo, filtros: Filtros) -> List[Dict[str, Any]]:
    try:
        return cfg.listar(filtros)
    except (DatabaseConfigError, SQLAlchemyError) as exc:
        raise error_bd(exc, f"tiempos de {cfg.nombre}") from exc


@router.get("/viaje", response_model=List[TiempoViaje])
def tiempos_viaje(filtros: Filtros = Depends(filtros_query)) -> List[TiempoViaje]:  # noqa: B008
    """Tramos de viaje, del más reciente al más antiguo."""
    items = _tramos(_TIPOS["viaje"], filtros)
    return [TiempoViaje(minutos_viaje=it["minutos"], **it) for it in items]


@router.get("/espera", response_model=List[TiempoEspera])
def tiempos_espera(filtros: Filtros = Depends(filtros_query)) -> List[TiempoEspera]:  # noqa: B008
    """Tramos de espera, del más reciente al más antiguo."""
    items = _tramos(_TIPOS["espera"], filtros)
    return [TiempoEspera(minutos_espera=it["minutos"], **it) for it in items]


@router.get("/{tramo}/distribucion", response_model=List[DistributionBin])
def tiempos_distribucion(
    tramo: str,
    bin_size: Optional[int] = Query(  # noqa: B008
        None,
        ge=1,
        le=1440,
        description="Ancho del intervalo en minutos (por defecto 15 para viaje y 5 para espera).",
    ),
    filtros: Filtros = Depends(filtros_query),  # noqa: B008
) -> List[DistributionBin]:
    """Histograma de minutos; solo intervalos con al menos un tramo."""
    cfg = _tramo_o_404(tramo)
    items = _tramos(cfg, filtros)
    bins = analisis.distribucion([it["minutos"] for it in items], bin_size or cfg.bin_size)
    return [DistributionBin(**b) for b in bins]


@router.get("/{tramo}/export")
def tiempos_exportar(tramo: str, filtros: Filtros = Depends(filtros_query)) -> Response:  # noqa: B008
    """CSV de los tramos del tipo pedido."""
    cfg = _tramo_o_404(tramo)
    items = _tramos(cfg, filtros)
    return Response(
        content=cfg.csv(items),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{export_filename(cfg.export_prefix)}"'},
    )
