"""controlhorarios.dashboard.tiempos

Análisis de tiempos de viaje y espera a partir de eventos consecutivos.

Se apoya en :func:`controlhorarios.dashboard.queries.fetch_eventos_pareados`
(que ya trae el evento previo de cada interno vía ``LAG``) y deriva:

- pares (evento previo, evento actual) con su duración en minutos,
- KPIs del tablero,
- serie diaria de minutos promedio (viaje/espera),
- listados de tiempos de viaje y de espera,
- histogramas para la vista de distribución.

Reglas de negocio
-----------------
- Timestamp de un evento = ``Fecha + Hora``. Sin ``Hora`` no hay timestamp y
  el evento no forma par (ni como previo ni como actual).
- Minutos = diferencia en límites de minuto (misma semántica que
  ``DATEDIFF(MINUTE, prev, actual)`` de SQL Server): se truncan ambos
  timestamps al minuto y se restan.
- Un par es de **viaje** si el evento previo es ``Salida``; cualquier otro
  tipo previo (incluido nulo) es **espera**.
"""

from __future__ import annotations

import logging
from datetime import datetime, time as dtime, timedelta
from typing import Any, Dict, List, Optional, Sequence

import numpy as np
import pandas as pd

from controlhorarios.dashboard.filtros import Filtros
from controlhorarios.dashboard.queries import fetch_eventos_pareados, sanitize_string
from controlhorarios.utils.formato import format_duration, nivel_por_umbral, round_half_up

logger = logging.getLogger(__name__)

TIPO_SALIDA = "Salida"
SERIE_MAX_DIAS = 90

UMBRALES_VIAJE = ((90, "Alto"), (60, "Medio"))
UMBRALES_ESPERA = ((20, "Alto"), (10, "Medio"))

PAR_COLUMNS = ("id", "fecha", "interno", "servicio", "prev_tipo", "ts", "minutos", "es_viaje")


# ---------------------------------------------------------------------------
# Construcción de pares
# ---------------------------------------------------------------------------

def _hora_texto(value: Any) -> Optional[str]:
    if value is None or (isinstance(value, float) and np.isnan(value)):
        return None
    if isinstance(value, (dtime, datetime)):
        return value.strftime("%H:%M:%S")
    if isinstance(value, timedelta):
        total = int(value.total_seconds())
        return f"{total // 3600:02d}:{(total % 3600) // 60:02d}:{total % 60:02d}"
    s = str(value).strip()
    return s[:8] or None


def combinar_fecha_hora(fecha: pd.Series, hora: pd.Series) -> pd.Series:
    """Timestamp ``Fecha + Hora``; ``NaT`` si falta cualquiera de los dos."""
    dias = pd.to_datetime(fecha, errors="coerce")
    horas = pd.to_timedelta(hora.map(_hora_texto), errors="coerce")
    return dias + horas


def calcular_pares(eventos: pd.DataFrame) -> pd.DataFrame:
    """Convierte eventos con su previo (``prev_*``) en pares con minutos.

    Parameters
    ----------
    eventos:
        DataFrame con columnas ``id, fecha, hora, interno, tipo, servicio,
        prev_fecha, prev_hora, prev_tipo`` (ver ``EVENTO_COLUMNS``).

    Returns
    -------
    pandas.DataFrame
        Una fila por par válido con columnas ``PAR_COLUMNS``, ordenado del
        más reciente al más antiguo.
    """
    if eventos is None or eventos.empty:
        return pd.DataFrame(columns=list(PAR_COLUMNS))

    ts = combinar_fecha_hora(eventos["fecha"], eventos["hora"])
    prev_ts = combinar_fecha_hora(eventos["prev_fecha"], eventos["prev_hora"])
    valid = ts.notna() & prev_ts.notna()
    if not valid.any():
        return pd.DataFrame(columns=list(PAR_COLUMNS))

    base = eventos.loc[valid]
    ts = ts[valid]
    prev_ts = prev_ts[valid]

    minutos = (ts.dt.floor("min") - prev_ts.dt.floor("min")) // pd.Timedelta(minutes=1)
    prev_tipo = base["prev_tipo"].map(sanitize_string)

    pares = pd.DataFrame(
        {
            "id": base["id"].astype(int),
            "fecha": ts.dt.strftime("%Y-%m-%d"),
            "interno": base["interno"].map(sanitize_string),
            "servicio": base["servicio"].map(sanitize_string),
            "prev_tipo": prev_tipo,
            "ts": ts,
            "minutos": minutos.astype(int),
            "es_viaje": prev_tipo.eq(TIPO_SALIDA),
        }
    )
    return pares.sort_values(["ts", "id"], ascending=[False, False]).reset_index(drop=True)


def pares_filtrados(filtros: Filtros) -> pd.DataFrame:
    """Pares de la ventana filtrada (consulta + cálculo)."""
    return calcular_pares(fetch_eventos_pareados(filtros))


# ---------------------------------------------------------------------------
# KPIs y serie diaria
# ---------------------------------------------------------------------------

def _mean_or_zero(series: pd.Series) -> int:
    x = pd.to_numeric(series, errors="coerce").dropna()
    if x.empty:
        return 0
    return round_half_up(x.mean())


def kpis_desde_eventos(eventos: pd.DataFrame) -> Dict[str, int]:
    """KPIs del tablero a partir de eventos ya consultados."""
    pares = calcular_pares(eventos)

    servicios = set()
    if not eventos.empty:
        servicios = {s for s in eventos["servicio"].map(sanitize_string) if s}

    if pares.empty:
        viaje = espera = 0
    else:
        viaje = _mean_or_zero(pares.loc[pares["es_viaje"], "minutos"])
        espera = _mean_or_zero(pares.loc[~pares["es_viaje"], "minutos"])

    return {
        "viajes_totales": int(len(eventos)),
        "tiempo_viaje_promedio": viaje,
        "tiempo_espera_promedio": espera,
        "servicios_activos": len(servicios),
    }


def compute_kpis(filtros: Filtros) -> Dict[str, int]:
    """KPIs: filas, minutos promedio de viaje/espera y servicios activos."""
    return kpis_desde_eventos(fetch_eventos_pareados(filtros))


def serie_desde_pares(pares: pd.DataFrame, limit: int = SERIE_MAX_DIAS) -> List[Dict[str, Any]]:
    """Minutos promedio de viaje y espera por día (ascendente, máx. `limit`)."""
    if pares.empty:
        return []

    out: List[Dict[str, Any]] = []
    for fecha, grupo in pares.groupby("fecha", sort=True):
        out.append(
            {
                "fecha": str(fecha),
                "minutos_viaje": _mean_or_zero(grupo.loc[grupo["es_viaje"], "minutos"]),
                "minutos_espera": _mean_or_zero(grupo.loc[~grupo["es_viaje"], "minutos"]),
            }
        )
        if len(out) >= limit:
            break
    return out


def serie_diaria(filtros: Filtros, limit: int = SERIE_MAX_DIAS) -> List[Dict[str, Any]]:
    """Serie temporal para el gráfico principal del tablero."""
    return serie_desde_pares(pares_filtrados(filtros), limit=limit)


# ---------------------------------------------------------------------------
# Listados de viaje / espera
# ---------------------------------------------------------------------------

def _items(pares: pd.DataFrame, umbrales) -> List[Dict[str, Any]]:
    items: List[Dict[str, Any]] = []
    for row in pares.itertuples(index=False):
        minutos = int(row.minutos)
        items.append(
            {
                "id": int(row.id),
                "fecha": row.fecha,
                "interno": row.interno,
                "servicio": row.servicio,
                "minutos": minutos,
                "duracion": format_duration(minutos),
                "nivel": nivel_por_umbral(minutos, umbrales),
            }
        )
    return items


def viajes_desde_pares(pares: pd.DataFrame) -> List[Dict[str, Any]]:
    if pares.empty:
        return []
    return _items(pares.loc[pares["es_viaje"]], UMBRALES_VIAJE)


def esperas_desde_pares(pares: pd.DataFrame) -> List[Dict[str, Any]]:
    if pares.empty:
        return []
    return _items(pares.loc[~pares["es_viaje"]], UMBRALES_ESPERA)


def tiempos_viaje(filtros: Filtros) -> List[Dict[str, Any]]:
    """Tramos iniciados en una ``Salida``, del más reciente al más antiguo."""
    items = viajes_desde_pares(pares_filtrados(filtros))
    logger.info("tiempos de viaje: %s tramos", len(items))
    return items


def tiempos_espera(filtros: Filtros) -> List[Dict[str, Any]]:
    """Tramos que no parten de una ``Salida`` (esperas)."""
    items = esperas_desde_pares(pares_filtrados(filtros))
    logger.info("tiempos de espera: %s tramos", len(items))
    return items


# ---------------------------------------------------------------------------
# Distribución (histograma)
# ---------------------------------------------------------------------------

def distribucion(minutos: Sequence[int], bin_size: int) -> List[Dict[str, Any]]:
    """Histograma de minutos en intervalos de ancho `bin_size`.

    Los intervalos empiezan en el mínimo observado y se etiquetan
    ``"{inicio}-{fin}"`` (ambos inclusive). Solo se devuelven intervalos con
    al menos un valor.

    Raises
    ------
    ValueError
        Si ``bin_size`` no es positivo.
    """
    if bin_size <= 0:
        raise ValueError("bin_size debe ser positivo")

    values = np.asarray([int(m) for m in minutos], dtype=np.int64)
    if values.size == 0:
        return []

    minimo = int(values.min())
    starts = (values - minimo) // bin_size * bin_size + minimo
    unique, counts = np.unique(starts, return_counts=True)
    total = int(values.size)

    return [
        {
            "range": f"{int(start)}-{int(start) + bin_size - 1}",
            "count": int(count),
            "percentage": float(count) / total * 100.0,
        }
        for start, count in zip(unique, counts)
    ]
