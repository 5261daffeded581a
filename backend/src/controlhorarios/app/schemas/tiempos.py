# backend/src/controlhorarios/app/schemas/tiempos.py
"""Esquemas de ``/tiempos/*`` (tramos de viaje/espera y distribuciones)."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class _Tramo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(..., description="Id del evento que cierra el tramo.")
    fecha: str
    interno: Optional[str] = None
    servicio: Optional[str] = None
    duracion: str = Field(..., description="Duración legible (p.ej. '1h 15m').")
    nivel: str = Field(..., description="Normal | Medio | Alto")


class TiempoViaje(_Tramo):
    minutos_viaje: int = Field(..., alias="minutosViaje")


class TiempoEspera(_Tramo):
    minutos_espera: int = Field(..., alias="minutosEspera")


class DistributionBin(BaseModel):
    """Intervalo del histograma de minutos."""

    range: str = Field(..., description="'inicio-fin' (inclusive).")
    count: int
    percentage: float
