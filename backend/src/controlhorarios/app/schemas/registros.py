# backend/src/controlhorarios/app/schemas/registros.py
"""Esquemas de ``/registros`` (tabla paginada y detalle)."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Registro(BaseModel):
    """Un evento crudo de ``pointer.ControlHorarios``."""

    id: int
    fecha: str = Field(..., description="YYYY-MM-DD")
    hora: Optional[str] = Field(None, description="HH:MM:SS")
    interno: Optional[str] = None
    tipo: Optional[str] = None
    lugar: Optional[str] = None
    conductor: Optional[str] = None
    servicio: Optional[str] = None


class RegistrosResponse(BaseModel):
    """Contrato para ``GET /registros``."""

    model_config = ConfigDict(populate_by_name=True)

    rows: List[Registro] = Field(default_factory=list)
    total: int = Field(0, description="Total de filas filtradas (sin paginar).")
    page: int = 1
    page_size: int = Field(50, alias="pageSize", description="0 = todas las filas.")
