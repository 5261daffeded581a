"""controlhorarios.dashboard.queries

Consultas SQL del tablero sobre ``pointer.ControlHorarios``.

Este módulo concentra la construcción de SQL (SQLAlchemy Core) y la
normalización de filas. Los routers no arman SQL: llaman a estas funciones y
a las agregaciones de :mod:`controlhorarios.dashboard.tiempos`.

Reglas
------
1) Todos los valores de filtro viajan como parámetros enlazados; nunca se
   interpolan en el texto SQL.
2) Las columnas de orden salen de una lista blanca (``SORTABLE_COLUMNS``).
3) Los textos se normalizan al leer: ``strip()`` y vacío -> ``None``.

Emparejamiento de eventos
-------------------------
:func:`fetch_eventos_pareados` devuelve cada fila filtrada junto al evento
anterior del mismo interno usando funciones de ventana::

    LAG(x) OVER (PARTITION BY Interno
                 ORDER BY CASE WHEN Hora IS NULL THEN 0 ELSE 1 END, Fecha, Hora, Id)

La ventana se evalúa después del ``WHERE``, por lo que solo ve filas que
pasaron los filtros. Las filas sin ``Hora`` no tienen timestamp y van al
principio de la partición: no se interponen entre dos eventos con hora
(p.ej. un viaje que cruza la medianoche). El cálculo de minutos se hace
luego en pandas.
"""

from __future__ import annotations

import logging
import time
from datetime import date, datetime, time as dtime, timedelta
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd
from sqlalchemy import Date, Time, Unicode, asc, case, desc, func, select
from sqlalchemy.sql.elements import ColumnElement

from controlhorarios.dashboard.filtros import Filtros
from controlhorarios.db.engine import get_engine
from controlhorarios.db.tablas import CONTROL_HORARIOS

logger = logging.getLogger(__name__)

_T = CONTROL_HORARIOS

SORTABLE_COLUMNS = {
    "fecha": _T.c.Fecha,
    "hora": _T.c.Hora,
    "interno": _T.c.Interno,
    "servicio": _T.c.Servicio,
    "tipo": _T.c.Tipo,
    "lugar": _T.c.Lugar,
    "conductor": _T.c.Conductor,
}

# Campo de Filtros -> columna para condiciones IN (...)
_LIST_FILTER_COLUMNS = (
    ("interno", _T.c.Interno),
    ("servicio", _T.c.Servicio),
    ("conductor", _T.c.Conductor),
    ("tipo", _T.c.Tipo),
    ("lugar", _T.c.Lugar),
)

_REGISTRO_COLUMNS = (
    _T.c.Id,
    _T.c.Fecha,
    _T.c.Hora,
    _T.c.Interno,
    _T.c.Tipo,
    _T.c.Lugar,
    _T.c.Conductor,
    _T.c.Servicio,
)

# Sin Hora -> 0: primero en la ventana LAG.
_SIN_HORA_PRIMERO = case((_T.c.Hora.is_(None), 0), else_=1)

EVENTO_COLUMNS: Tuple[str, ...] = (
    "id",
    "fecha",
    "hora",
    "interno",
    "tipo",
    "servicio",
    "prev_fecha",
    "prev_hora",
    "prev_tipo",
)


# ---------------------------------------------------------------------------
# Normalización de valores
# ---------------------------------------------------------------------------

def sanitize_string(value: Any) -> Optional[str]:
    """Texto recortado o ``None`` si queda vacío."""
    if value is None:
        return None
    s = str(value).strip()
    return s or None


def format_date_only(value: Any) -> str:
    """Fecha como ``YYYY-MM-DD``; cadena vacía si no hay valor."""
    if value is None or value == "":
        return ""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    try:
        return pd.Timestamp(str(value)).date().isoformat()
    except (ValueError, TypeError):
        return str(value)


def format_time_only(value: Any) -> Optional[str]:
    """Hora como ``HH:MM:SS`` o ``None``."""
    if value is None or value == "":
        return None
    if isinstance(value, (dtime, datetime)):
        return value.strftime("%H:%M:%S")
    if isinstance(value, timedelta):
        total = int(value.total_seconds())
        return f"{total // 3600:02d}:{(total % 3600) // 60:02d}:{total % 60:02d}"
    if isinstance(value, str):
        return value[:8]
    return None


def to_registro(row: Any) -> Dict[str, Any]:
    """Fila de ``ControlHorarios`` -> dict del contrato ``Registro``."""
    return {
        "id": int(row["Id"]),
        "fecha": format_date_only(row["Fecha"]),
        "hora": format_time_only(row["Hora"]),
        "interno": sanitize_string(row["Interno"]),
        "tipo": sanitize_string(row["Tipo"]),
        "lugar": sanitize_string(row["Lugar"]),
        "conductor": sanitize_string(row["Conductor"]),
        "servicio": sanitize_string(row["Servicio"]),
    }


# ---------------------------------------------------------------------------
# WHERE / ORDER BY
# ---------------------------------------------------------------------------

def build_where(filtros: Filtros) -> List[ColumnElement[bool]]:
    """Condiciones SQL (con parámetros enlazados) para los filtros globales.

    Returns
    -------
    list
        Lista posiblemente vacía; se pasa a ``select(...).where(*conds)``.
    """
    conds: List[ColumnElement[bool]] = []
    if filtros.desde:
        conds.append(_T.c.Fecha >= filtros.desde)
    if filtros.hasta:
        conds.append(_T.c.Fecha <= filtros.hasta)

    for campo, column in _LIST_FILTER_COLUMNS:
        values = [v for v in (sanitize_string(x) for x in (getattr(filtros, campo) or [])) if v]
        if values:
            conds.append(column.in_(values))
    return conds


def sort_column(sort_by: Optional[str]):
    """Columna de orden desde la lista blanca (por defecto ``Fecha``)."""
    key = (sort_by or "").strip().lower()
    return SORTABLE_COLUMNS.get(key, SORTABLE_COLUMNS["fecha"])


def sort_direction(sort_dir: Optional[str]) -> str:
    """``"ASC"`` solo si se pide explícitamente; ``"DESC"`` en otro caso."""
    return "ASC" if (sort_dir or "").strip().lower() == "asc" else "DESC"


def _not_blank(column) -> ColumnElement[bool]:
    return func.ltrim(func.rtrim(column)) != ""


# ---------------------------------------------------------------------------
# Registros
# ---------------------------------------------------------------------------

def fetch_registros_page(filtros: Filtros) -> Tuple[List[Dict[str, Any]], int]:
    """Página de registros + total sin paginar.

    El orden es la columna pedida y, como desempate, ``Id`` en la misma
    dirección para que la paginación sea estable.
    """
    conds = build_where(filtros)
    order = asc if sort_direction(filtros.sort_dir) == "ASC" else desc

    stmt = (
        select(*_REGISTRO_COLUMNS)
        .where(*conds)
        .order_by(order(sort_column(filtros.sort_by)), order(_T.c.Id))
    )
    if filtros.page_size > 0:
        stmt = stmt.offset(filtros.offset).limit(filtros.page_size)

    count_stmt = select(func.count()).select_from(_T).where(*conds)

    t0 = time.perf_counter()
    with get_engine().connect() as conn:
        rows = [to_registro(r) for r in conn.execute(stmt).mappings()]
        total = int(conn.execute(count_stmt).scalar_one() or 0)

    logger.info(
        "registros page=%s page_size=%s rows=%s total=%s (%.1f ms)",
        filtros.page,
        filtros.page_size,
        len(rows),
        total,
        (time.perf_counter() - t0) * 1000,
    )
    return rows, total


def fetch_registro(registro_id: int) -> Optional[Dict[str, Any]]:
    """Un registro por ``Id`` (detalle) o ``None`` si no existe."""
    stmt = select(*_REGISTRO_COLUMNS).where(_T.c.Id == registro_id)
    with get_engine().connect() as conn:
        row = conn.execute(stmt).mappings().first()
    return to_registro(row) if row is not None else None


# ---------------------------------------------------------------------------
# Rankings y catálogos
# ---------------------------------------------------------------------------

def fetch_top_internos(filtros: Filtros, limit: int = 10) -> List[Dict[str, Any]]:
    """Internos con más registros en la ventana filtrada.

    Se excluyen internos nulos o vacíos. Empates: ``Interno`` ascendente.
    """
    viajes = func.count().label("Viajes")
    stmt = (
        select(_T.c.Interno, viajes)
        .where(*build_where(filtros))
        .where(_T.c.Interno.is_not(None), _not_blank(_T.c.Interno))
        .group_by(_T.c.Interno)
        .order_by(desc(viajes), asc(_T.c.Interno))
        .limit(limit)
    )
    with get_engine().connect() as conn:
        rows = conn.execute(stmt).all()

    return [
        {"interno": sanitize_string(r.Interno) or "Sin asignar", "viajes": int(r.Viajes or 0)}
        for r in rows
    ]


_OPTION_COLUMNS = (
    ("internos", _T.c.Interno),
    ("servicios", _T.c.Servicio),
    ("conductores", _T.c.Conductor),
    ("tipos", _T.c.Tipo),
    ("lugares", _T.c.Lugar),
)


def fetch_filter_options() -> Dict[str, List[str]]:
    """Valores distintos (no vacíos, ordenados) para poblar los filtros."""
    out: Dict[str, List[str]] = {}
    with get_engine().connect() as conn:
        for key, column in _OPTION_COLUMNS:
            stmt = (
                select(column)
                .distinct()
                .where(column.is_not(None), _not_blank(column))
                .order_by(column)
            )
            values = {sanitize_string(v) for v in conn.execute(stmt).scalars()}
            out[key] = sorted(v for v in values if v)
    return out


# ---------------------------------------------------------------------------
# Eventos con el evento previo del mismo interno (LAG)
# ---------------------------------------------------------------------------

def fetch_eventos_pareados(filtros: Filtros) -> pd.DataFrame:
    """Filas filtradas + fecha/hora/tipo del evento previo del mismo interno.

    Returns
    -------
    pandas.DataFrame
        Columnas ``EVENTO_COLUMNS``. Las columnas ``prev_*`` son nulas para el
        primer evento de cada interno.
    """
    window = {
        "partition_by": _T.c.Interno,
        "order_by": (_SIN_HORA_PRIMERO, _T.c.Fecha, _T.c.Hora, _T.c.Id),
    }
    stmt = select(
        _T.c.Id,
        _T.c.Fecha,
        _T.c.Hora,
        _T.c.Interno,
        _T.c.Tipo,
        _T.c.Servicio,
        func.lag(_T.c.Fecha, type_=Date).over(**window).label("PrevFecha"),
        func.lag(_T.c.Hora, type_=Time).over(**window).label("PrevHora"),
        func.lag(_T.c.Tipo, type_=Unicode).over(**window).label("PrevTipo"),
    ).where(*build_where(filtros))

    t0 = time.perf_counter()
    with get_engine().connect() as conn:
        rows = conn.execute(stmt).all()

    df = pd.DataFrame([tuple(r) for r in rows], columns=list(EVENTO_COLUMNS))
    logger.debug("eventos pareados rows=%s (%.1f ms)", len(df), (time.perf_counter() - t0) * 1000)
    return df
