# backend/src/controlhorarios/app/schemas/dashboard.py
"""Esquemas (Pydantic) para la API del tablero.

Contratos de respuesta **estables** para ``/dashboard/*`` y ``/filtros``.

Notas
-----
- Los nombres de campo en JSON son camelCase (``viajesTotales``...) porque así
  los consume el frontend; en Python se usan nombres snake_case y alias.
- FastAPI serializa ``response_model`` por alias, y ``populate_by_name``
  permite construir los modelos con el nombre Python.
"""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field


class FilterOptions(BaseModel):
    """Contrato para ``GET /filtros``: valores válidos de cada filtro."""

    internos: List[str] = Field(default_factory=list)
    servicios: List[str] = Field(default_factory=list)
    conductores: List[str] = Field(default_factory=list)
    tipos: List[str] = Field(default_factory=list)
    lugares: List[str] = Field(default_factory=list)


class KPIs(BaseModel):
    """Contrato para ``GET /dashboard/kpis``."""

    model_config = ConfigDict(populate_by_name=True)

    viajes_totales: int = Field(0, alias="viajesTotales", description="Registros en la ventana filtrada.")
    tiempo_viaje_promedio: int = Field(
        0,
        alias="tiempoViajePromedio",
        description="Minutos promedio de los tramos que parten de una Salida.",
    )
    tiempo_espera_promedio: int = Field(
        0,
        alias="tiempoEsperaPromedio",
        description="Minutos promedio del resto de tramos.",
    )
    servicios_activos: int = Field(0, alias="serviciosActivos", description="Servicios distintos no vacíos.")


class ChartDataPoint(BaseModel):
    """Punto diario de ``GET /dashboard/chart-data``."""

    model_config = ConfigDict(populate_by_name=True)

    fecha: str
    minutos_viaje: int = Field(0, alias="minutosViaje")
    minutos_espera: int = Field(0, alias="minutosEspera")


class TopInterno(BaseModel):
    """Ítem de ``GET /dashboard/top-internos``."""

    interno: str
    viajes: int
