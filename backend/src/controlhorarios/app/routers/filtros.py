# backend/src/controlhorarios/app/routers/filtros.py
"""Catálogos para poblar los filtros globales."""

from __future__ import annotations

from fastapi import APIRouter
from sqlalchemy.exc import SQLAlchemyError

from controlhorarios.app.dependencies import error_bd
from controlhorarios.app.schemas.dashboard import FilterOptions
from controlhorarios.dashboard.queries import fetch_filter_options
from controlhorarios.db.config import DatabaseConfigError

router = APIRouter()


@router.get("", response_model=FilterOptions)
def filtros_opciones() -> FilterOptions:
    """Valores distintos de interno, servicio, conductor, tipo y lugar.

    No aplica filtros: siempre devuelve el catálogo completo.
    """
    try:
        options = fetch_filter_options()
    except (DatabaseConfigError, SQLAlchemyError) as exc:
        raise error_bd(exc, "opciones de filtro") from exc
    return FilterOptions(**options)
