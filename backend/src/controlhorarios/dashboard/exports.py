"""controlhorarios.dashboard.exports

Exportación CSV de registros y tiempos.

Formato
-------
- Encabezado sin comillas (nombres legibles en español).
- Cada campo de datos entre comillas dobles; comillas internas duplicadas.
- ``None`` se exporta como cadena vacía.
- Fin de línea ``\\n`` y codificación UTF-8.
"""

from __future__ import annotations

import csv
from datetime import date
from typing import Any, Dict, List, Optional, Sequence, Tuple

import pandas as pd

# (encabezado visible, clave en el dict de origen)
REGISTROS_COLUMNS: Tuple[Tuple[str, str], ...] = (
    ("Fecha", "fecha"),
    ("Hora", "hora"),
    ("Interno", "interno"),
    ("Servicio", "servicio"),
    ("Conductor", "conductor"),
    ("Tipo", "tipo"),
    ("Lugar", "lugar"),
)

VIAJE_COLUMNS: Tuple[Tuple[str, str], ...] = (
    ("Fecha", "fecha"),
    ("Servicio", "servicio"),
    ("Interno", "interno"),
    ("Minutos de Viaje", "minutos"),
)

ESPERA_COLUMNS: Tuple[Tuple[str, str], ...] = (
    ("Fecha", "fecha"),
    ("Servicio", "servicio"),
    ("Interno", "interno"),
    ("Minutos de Espera", "minutos"),
)


def to_csv(items: Sequence[Dict[str, Any]], columns: Sequence[Tuple[str, str]]) -> str:
    """Serializa `items` a CSV con el formato del módulo."""
    header = ",".join(h for h, _ in columns)
    keys = [k for _, k in columns]
    if not items:
        return header + "\n"

    df = pd.DataFrame([{k: item.get(k) for k in keys} for item in items], columns=keys)
    df = df.astype(object).where(df.notna(), "")
    body = df.to_csv(index=False, header=False, quoting=csv.QUOTE_ALL, lineterminator="\n")
    return header + "\n" + body


def export_filename(prefix: str, hoy: Optional[date] = None) -> str:
    """``registros`` -> ``registros_2024-05-01.csv``."""
    hoy = hoy or date.today()
    return f"{prefix}_{hoy.isoformat()}.csv"


def registros_csv(rows: List[Dict[str, Any]]) -> str:
    return to_csv(rows, REGISTROS_COLUMNS)


def viajes_csv(items: List[Dict[str, Any]]) -> str:
    return to_csv(items, VIAJE_COLUMNS)


def esperas_csv(items: List[Dict[str, Any]]) -> str:
    return to_csv(items, ESPERA_COLUMNS)
