# backend/src/controlhorarios/app/routers/registros.py
"""Router de registros crudos: tabla paginada, exportación y detalle."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.exc import SQLAlchemyError

from controlhorarios.app.dependencies import error_bd, filtros_query
from controlhorarios.app.schemas.registros import Registro, RegistrosResponse
from controlhorarios.dashboard.exports import export_filename, registros_csv
from controlhorarios.dashboard.filtros import Filtros
from controlhorarios.dashboard.queries import fetch_registro, fetch_registros_page
from controlhorarios.db.config import DatabaseConfigError

router = APIRouter()

TOTAL_HEADER = "X-Total-Count"


@router.get("", response_model=RegistrosResponse)
def registros_listar(response: Response, filtros: Filtros = Depends(filtros_query)) -> RegistrosResponse:  # noqa: B008
    """Página de registros ordenada por ``sortBy``/``sortDir``.

    El total sin paginar se devuelve en el body y en ``X-Total-Count``.
    """
    try:
        rows, total = fetch_registros_page(filtros)
    except (DatabaseConfigError, SQLAlchemyError) as exc:
        raise error_bd(exc, "registros") from exc

    response.headers[TOTAL_HEADER] = str(total)
    return RegistrosResponse(
        rows=[Registro(**r) for r in rows],
        total=total,
        page=filtros.page,
        page_size=filtros.page_size,
    )


@router.get("/export")
def registros_exportar(filtros: Filtros = Depends(filtros_query)) -> Response:  # noqa: B008
    """CSV con todos los registros filtrados (ignora la paginación)."""
    try:
        rows, total = fetch_registros_page(filtros.sin_paginacion())
    except (DatabaseConfigError, SQLAlchemyError) as exc:
        raise error_bd(exc, "exportación de registros") from exc

    return Response(
        content=registros_csv(rows),
        media_type="text/csv; charset=utf-8",
        headers={
            "Content-Disposition": f'attachment; filename="{export_filename("registros")}"',
            TOTAL_HEADER: str(total),
        },
    )


@router.get("/{registro_id}", response_model=Registro)
def registros_detalle(registro_id: int) -> Registro:
    """Detalle de un registro (panel lateral del frontend)."""
    try:
        row = fetch_registro(registro_id)
    except (DatabaseConfigError, SQLAlchemyError) as exc:
        raise error_bd(exc, "detalle de registro") from exc

    if row is None:
        raise HTTPException(status_code=404, detail=f"Registro {registro_id} no encontrado")
    return Registro(**row)
