"""controlhorarios.dashboard.filtros

Filtros globales compartidos por todas las vistas del tablero.

Los mismos filtros (rango de fechas, interno, servicio, conductor, tipo y
lugar) alimentan KPIs, series, tabla de registros y análisis de tiempos. En
la query string los filtros multivalor viajan separados por comas
(``interno=5001,5002``) y se aceptan alias heredados (``idInterno``,
``idServicio``, ``idConductor``).

Paginación y orden
------------------
- ``page`` empieza en 1.
- ``pageSize=0`` significa "todas las filas" (lo usa la exportación CSV).
- ``sortBy``/``sortDir`` se normalizan: valores desconocidos vuelven al
  orden por defecto (``fecha`` descendente) en lugar de fallar.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple
from urllib.parse import urlencode

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

DEFAULT_PAGE_SIZE = 50
DEFAULT_SORT_BY = "fecha"
DEFAULT_SORT_DIR = "desc"
DEFAULT_RANGO_DIAS = 30

SORTABLE_FIELDS: Tuple[str, ...] = ("fecha", "hora", "interno", "servicio", "tipo", "lugar", "conductor")

# Campo multivalor -> claves aceptadas en la query string (en orden de prioridad).
MULTI_VALUE_KEYS: Dict[str, Tuple[str, ...]] = {
    "interno": ("interno", "idInterno"),
    "servicio": ("servicio", "idServicio"),
    "conductor": ("conductor", "idConductor"),
    "tipo": ("tipo",),
    "lugar": ("lugar",),
}


def parse_comma_separated(value: Optional[str]) -> Optional[List[str]]:
    """``"a, b,,c"`` -> ``["a", "b", "c"]``; vacío -> ``None``."""
    if not value:
        return None
    items = [item.strip() for item in value.split(",")]
    items = [item for item in items if item]
    return items or None


def parse_multi_value(params: Mapping[str, str], keys: Sequence[str]) -> Optional[List[str]]:
    """Devuelve la primera clave no vacía de `keys` parseada como lista."""
    for key in keys:
        value = params.get(key)
        if value:
            return parse_comma_separated(value)
    return None


class Filtros(BaseModel):
    """Filtros globales + paginación/orden de la tabla de registros."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    desde: Optional[date] = Field(None, alias="from", description="Fecha inicial (incl.).")
    hasta: Optional[date] = Field(None, alias="to", description="Fecha final (incl.).")

    interno: Optional[List[str]] = None
    servicio: Optional[List[str]] = None
    conductor: Optional[List[str]] = None
    tipo: Optional[List[str]] = None
    lugar: Optional[List[str]] = None

    page: int = Field(1, ge=1)
    page_size: int = Field(DEFAULT_PAGE_SIZE, alias="pageSize", ge=0, le=10000)
    sort_by: str = Field(DEFAULT_SORT_BY, alias="sortBy")
    sort_dir: str = Field(DEFAULT_SORT_DIR, alias="sortDir")

    @field_validator("desde", "hasta", mode="before")
    @classmethod
    def _empty_date_is_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("interno", "servicio", "conductor", "tipo", "lugar", mode="before")
    @classmethod
    def _clean_list(cls, v: Any) -> Any:
        if v is None:
            return None
        if isinstance(v, str):
            return parse_comma_separated(v)
        cleaned = [str(item).strip() for item in v if item is not None]
        cleaned = [item for item in cleaned if item]
        return cleaned or None

    @field_validator("sort_by", mode="before")
    @classmethod
    def _normalize_sort_by(cls, v: Any) -> str:
        key = str(v or "").strip().lower()
        return key if key in SORTABLE_FIELDS else DEFAULT_SORT_BY

    @field_validator("sort_dir", mode="before")
    @classmethod
    def _normalize_sort_dir(cls, v: Any) -> str:
        return "asc" if str(v or "").strip().lower() == "asc" else "desc"

    @model_validator(mode="after")
    def _check_rango(self) -> "Filtros":
        if self.desde and self.hasta and self.desde > self.hasta:
            raise ValueError("'from' no puede ser posterior a 'to'")
        return self

    @property
    def offset(self) -> int:
        """Filas a saltar para la página actual (0 si no se pagina)."""
        if self.page_size <= 0:
            return 0
        return (self.page - 1) * self.page_size

    def sin_paginacion(self) -> "Filtros":
        """Copia que pide todas las filas (export CSV)."""
        return self.model_copy(update={"page": 1, "page_size": 0})


def filtros_por_defecto(hoy: Optional[date] = None) -> Filtros:
    """Últimos 30 días hasta hoy, página 1, 50 filas, fecha descendente."""
    hoy = hoy or date.today()
    return Filtros(desde=hoy - timedelta(days=DEFAULT_RANGO_DIAS), hasta=hoy)


def filtros_desde_params(params: Mapping[str, str]) -> Filtros:
    """Construye `Filtros` desde una query string ya decodificada.

    Raises
    ------
    pydantic.ValidationError
        Si alguna fecha/paginación es inválida o el rango está invertido.
    """
    data: Dict[str, Any] = {
        "from": params.get("from") or None,
        "to": params.get("to") or None,
    }
    for campo, keys in MULTI_VALUE_KEYS.items():
        data[campo] = parse_multi_value(params, keys)

    for key in ("page", "pageSize", "sortBy", "sortDir"):
        value = params.get(key)
        if value not in (None, ""):
            data[key] = value

    return Filtros.model_validate(data)


def to_query_string(filtros: Filtros) -> str:
    """Serializa filtros a query string canónica (se omiten los defaults).

    Es la inversa de :func:`filtros_desde_params`.
    """
    pairs: List[Tuple[str, str]] = []
    if filtros.desde:
        pairs.append(("from", filtros.desde.isoformat()))
    if filtros.hasta:
        pairs.append(("to", filtros.hasta.isoformat()))

    for campo in MULTI_VALUE_KEYS:
        values = getattr(filtros, campo)
        if values:
            pairs.append((campo, ",".join(values)))

    if filtros.page > 1:
        pairs.append(("page", str(filtros.page)))
    if filtros.page_size != DEFAULT_PAGE_SIZE:
        pairs.append(("pageSize", str(filtros.page_size)))
    if filtros.sort_by != DEFAULT_SORT_BY:
        pairs.append(("sortBy", filtros.sort_by))
    if filtros.sort_dir != DEFAULT_SORT_DIR:
        pairs.append(("sortDir", filtros.sort_dir))

    return urlencode(pairs, safe=",")
