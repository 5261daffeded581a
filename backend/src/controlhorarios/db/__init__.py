"""
Capa de acceso a la base de datos (SQL Server vía SQLAlchemy).
"""

from .config import ConexionConfig, DatabaseConfigError, resolve_config
from .engine import get_engine, reset_engine
from .tablas import CONTROL_HORARIOS, metadata

__all__ = [
    "CONTROL_HORARIOS",
    "ConexionConfig",
    "DatabaseConfigError",
    "get_engine",
    "metadata",
    "reset_engine",
    "resolve_config",
]
