"""
controlhorarios.db.engine
=========================

Engine SQLAlchemy único por proceso (pool de conexiones).

- Se crea de forma perezosa en el primer uso (``get_engine``).
- ``reset_engine`` libera el pool; lo usan los tests y recargas en caliente.

Mapeo del pool
--------------
``DB_POOL_MIN`` conexiones se conservan abiertas (mínimo 1, ``pool_size``) y
el resto hasta ``DB_POOL_MAX`` se abren bajo demanda (``max_overflow``).
``DB_POOL_IDLE`` (ms) se traduce a ``pool_recycle`` en segundos.

SQLite (desarrollo local, ``tools/sim``) no tiene esquemas: el esquema
``pointer`` se traduce a ``None`` y la tabla vive en la base principal.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from controlhorarios.db.config import ConexionConfig, resolve_config
from controlhorarios.db.tablas import SCHEMA

logger = logging.getLogger(__name__)

_ENGINE: Optional[Engine] = None
_LOCK = threading.Lock()


def _engine_kwargs(cfg: ConexionConfig, backend: str) -> Dict[str, Any]:
    kwargs: Dict[str, Any] = {"pool_pre_ping": True}
    if backend == "sqlite":
        # SQLite usa su propio pool; los parámetros de QueuePool no aplican.
        return kwargs

    pool_size = max(cfg.pool_min, 1)
    kwargs.update(
        pool_size=pool_size,
        max_overflow=max(cfg.pool_max - pool_size, 0),
        pool_recycle=max(cfg.pool_idle_ms // 1000, 1),
    )
    return kwargs


def build_engine(cfg: ConexionConfig) -> Engine:
    """Crea un engine nuevo a partir de una configuración ya resuelta."""
    url = cfg.sqlalchemy_url()
    backend = url.get_backend_name()
    engine = create_engine(url, **_engine_kwargs(cfg, backend))
    if backend == "sqlite":
        engine = engine.execution_options(schema_translate_map={SCHEMA: None})
    logger.info(
        "Engine creado backend=%s host=%s database=%s",
        backend,
        url.host or "-",
        url.database or "-",
    )
    return engine


def get_engine() -> Engine:
    """Devuelve el engine compartido, creándolo si hace falta.

    Raises
    ------
    controlhorarios.db.config.DatabaseConfigError
        Si la configuración de entorno está incompleta.
    """
    global _ENGINE
    if _ENGINE is not None:
        return _ENGINE

    with _LOCK:
        if _ENGINE is None:
            _ENGINE = build_engine(resolve_config())
    return _ENGINE


def reset_engine() -> None:
    """Libera el pool actual; el próximo ``get_engine`` crea uno nuevo."""
    global _ENGINE
    with _LOCK:
        if _ENGINE is not None:
            _ENGINE.dispose()
            logger.info("Engine liberado (pool cerrado)")
        _ENGINE = None
