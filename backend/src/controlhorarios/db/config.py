"""
controlhorarios.db.config
=========================

Resolución de la configuración de conexión a SQL Server.

Reglas de resolución
--------------------
1) Si existe ``DATABASE_URL`` se usa como fuente de verdad:
   - Si es una URL de SQLAlchemy (``mssql+pyodbc://...``, ``sqlite:///...``)
     se usa tal cual.
   - Si es un connection string estilo ADO (``Server=...;Database=...;``),
     opcionalmente con prefijo ``sqlserver://``, se parsea por segmentos.
2) Si no, se arma desde ``DB_SERVER`` / ``DB_NAME`` / ``DB_USER`` /
   ``DB_PASSWORD`` (más ``DB_ENCRYPT``, ``DB_TRUST_SERVER_CERTIFICATE`` y
   ``DB_POOL_*``).

Este módulo no abre conexiones: solo devuelve un :class:`ConexionConfig`.
La creación del engine vive en :mod:`controlhorarios.db.engine`.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

from sqlalchemy.engine import URL, make_url

DEFAULT_ODBC_DRIVER = "ODBC Driver 18 for SQL Server"
DEFAULT_POOL_MAX = 10
DEFAULT_POOL_MIN = 0
DEFAULT_POOL_IDLE_MS = 30000

_SERVER_KEYS = {"server", "data source", "address", "addr", "network address"}
_DATABASE_KEYS = {"database", "initial catalog"}
_USER_KEYS = {"user", "user id", "uid"}
_PASSWORD_KEYS = {"password", "pwd"}


class DatabaseConfigError(RuntimeError):
    """La configuración de base de datos está incompleta o es inválida."""


@dataclass(frozen=True)
class ConexionConfig:
    """Parámetros de conexión ya normalizados."""

    server: str = ""
    database: str = ""
    user: str = ""
    password: str = ""
    port: Optional[int] = None
    encrypt: bool = True
    trust_server_certificate: bool = True
    driver: str = DEFAULT_ODBC_DRIVER
    pool_max: int = DEFAULT_POOL_MAX
    pool_min: int = DEFAULT_POOL_MIN
    pool_idle_ms: int = DEFAULT_POOL_IDLE_MS
    # URL SQLAlchemy explícita (tiene prioridad sobre los campos sueltos).
    url: Optional[str] = None

    def sqlalchemy_url(self) -> URL:
        """Devuelve la URL de SQLAlchemy correspondiente."""
        if self.url:
            return make_url(self.url)
        return URL.create(
            "mssql+pyodbc",
            username=self.user,
            password=self.password,
            host=self.server,
            port=self.port,
            database=self.database,
            query={
                "driver": self.driver,
                "Encrypt": "yes" if self.encrypt else "no",
                "TrustServerCertificate": "yes" if self.trust_server_certificate else "no",
            },
        )


def parse_bool(value: Optional[str], fallback: bool) -> bool:
    """Interpreta 'true'/'false' (case-insensitive); cualquier otro valor es False."""
    if value is None:
        return fallback
    return value.strip().lower() == "true"


def _parse_int(value: Optional[str], fallback: int) -> int:
    if value is None or not value.strip():
        return fallback
    try:
        return int(value.strip())
    except ValueError:
        return fallback


def split_host_port(server: str) -> Tuple[str, Optional[int]]:
    """Separa ``host,puerto`` (convención SQL Server) o ``host:puerto``.

    Si el puerto no es numérico se ignora y se conserva solo el host.
    """
    server = server.strip()
    for sep in (",", ":"):
        if sep in server:
            host, port_s = server.split(sep, 1)
            try:
                return host.strip(), int(port_s.strip())
            except ValueError:
                return host.strip(), None
    return server, None


def parse_connection_string(connection_string: str) -> ConexionConfig:
    """Parsea un connection string estilo ADO (``clave=valor;...``).

    El primer segmento sin ``=`` se interpreta como servidor, igual que el
    formato ``sqlserver://host;database=...``.

    Raises
    ------
    DatabaseConfigError
        Si falta servidor, base, usuario o contraseña.
    """
    sanitized = connection_string.strip()
    if sanitized.lower().startswith("sqlserver://"):
        sanitized = sanitized[len("sqlserver://"):]

    segments = [s.strip() for s in sanitized.split(";")]

    server = database = user = password = None
    encrypt = True
    trust = True

    for index, segment in enumerate(segments):
        if not segment:
            continue
        if "=" not in segment:
            if index == 0:
                server = segment
            continue

        key, value = segment.split("=", 1)
        key = key.strip().lower()
        value = value.strip()

        if key in _SERVER_KEYS:
            server = value
        elif key in _DATABASE_KEYS:
            database = value
        elif key in _USER_KEYS:
            user = value
        elif key in _PASSWORD_KEYS:
            password = value
        elif key == "encrypt":
            encrypt = parse_bool(value, True)
        elif key == "trustservercertificate":
            trust = parse_bool(value, True)

    if not server or not database or not user or not password:
        raise DatabaseConfigError("DATABASE_URL is missing required connection options")

    host, port = split_host_port(server)
    return ConexionConfig(
        server=host,
        port=port,
        database=database,
        user=user,
        password=password,
        encrypt=encrypt,
        trust_server_certificate=trust,
    )


def _is_sqlalchemy_url(value: str) -> bool:
    if "://" not in value:
        return False
    return not value.strip().lower().startswith("sqlserver://")


def resolve_config(env: Optional[Mapping[str, str]] = None) -> ConexionConfig:
    """Resuelve la configuración desde variables de entorno.

    Parameters
    ----------
    env:
        Mapping a consultar (por defecto ``os.environ``). Útil en tests.

    Raises
    ------
    DatabaseConfigError
        Si no hay ``DATABASE_URL`` ni el cuarteto ``DB_SERVER``/``DB_NAME``/
        ``DB_USER``/``DB_PASSWORD``.
    """
    env = os.environ if env is None else env

    pool_max = _parse_int(env.get("DB_POOL_MAX"), DEFAULT_POOL_MAX)
    pool_min = _parse_int(env.get("DB_POOL_MIN"), DEFAULT_POOL_MIN)
    pool_idle = _parse_int(env.get("DB_POOL_IDLE"), DEFAULT_POOL_IDLE_MS)
    driver = env.get("DB_ODBC_DRIVER") or DEFAULT_ODBC_DRIVER

    database_url = (env.get("DATABASE_URL") or "").strip()
    if database_url:
        if _is_sqlalchemy_url(database_url):
            return ConexionConfig(url=database_url, pool_max=pool_max, pool_min=pool_min, pool_idle_ms=pool_idle)
        base = parse_connection_string(database_url)
        return ConexionConfig(
            server=base.server,
            port=base.port,
            database=base.database,
            user=base.user,
            password=base.password,
            encrypt=base.encrypt,
            trust_server_certificate=base.trust_server_certificate,
            driver=driver,
            pool_max=pool_max,
            pool_min=pool_min,
            pool_idle_ms=pool_idle,
        )

    server_env = env.get("DB_SERVER")
    database = env.get("DB_NAME")
    user = env.get("DB_USER")
    password = env.get("DB_PASSWORD")

    if not server_env or not database or not user or not password:
        raise DatabaseConfigError(
            "Database configuration is incomplete. Set DATABASE_URL or DB_SERVER/DB_NAME/DB_USER/DB_PASSWORD."
        )

    host, port = split_host_port(server_env)
    return ConexionConfig(
        server=host,
        port=port,
        database=database,
        user=user,
        password=password,
        encrypt=parse_bool(env.get("DB_ENCRYPT"), True),
        trust_server_certificate=parse_bool(env.get("DB_TRUST_SERVER_CERTIFICATE"), True),
        driver=driver,
        pool_max=pool_max,
        pool_min=pool_min,
        pool_idle_ms=pool_idle,
    )
