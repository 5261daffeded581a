"""Helpers de formato compartidos por tiempos y exportaciones."""

from __future__ import annotations

import math
from typing import Any, Optional, Sequence, Tuple


def round_half_up(value: Any) -> int:
    """Redondeo "escolar" (0.5 hacia arriba); ``None``/NaN -> 0."""
    if value is None:
        return 0
    try:
        x = float(value)
    except (TypeError, ValueError):
        return 0
    if math.isnan(x) or math.isinf(x):
        return 0
    return int(math.floor(x + 0.5))


def format_duration(minutes: int) -> str:
    """``75`` -> ``"1h 15m"``; ``45`` -> ``"45m"``."""
    minutes = int(minutes)
    hours, mins = divmod(minutes, 60)
    if hours > 0:
        return f"{hours}h {mins}m"
    return f"{mins}m"


def nivel_por_umbral(minutes: Optional[float], umbrales: Sequence[Tuple[float, str]], default: str = "Normal") -> str:
    """Etiqueta de severidad: primer umbral superado (orden descendente)."""
    if minutes is None:
        return default
    for limite, etiqueta in umbrales:
        if minutes > limite:
            return etiqueta
    return default
