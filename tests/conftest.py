# tests/conftest.py
"""Fixtures compartidas por los tests de API.

La base de prueba es SQLite: ``main.db`` con ``pointer.db`` adjunta como
esquema ``pointer`` en cada conexión, de modo que ``pointer.ControlHorarios``
resuelve igual que en SQL Server.
"""

from __future__ import annotations

from datetime import date, time
from pathlib import Path
from typing import Any, Dict, List

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine

import controlhorarios.db.engine as db_engine
from controlhorarios.app.main import app
from controlhorarios.db.tablas import CONTROL_HORARIOS, metadata


def _registro(id_, fecha, hora, interno, tipo, lugar, conductor, servicio) -> Dict[str, Any]:
    return {
        "Id": id_,
        "Fecha": fecha,
        "Hora": hora,
        "Interno": interno,
        "Tipo": tipo,
        "Lugar": lugar,
        "Conductor": conductor,
        "Servicio": servicio,
    }


# Dos internos con recorridos completos, uno sin hora y un evento sin interno.
SEED: List[Dict[str, Any]] = [
    _registro(1, date(2024, 5, 1), time(8, 0), "5001", "Salida", "Terminal Rosario", "Juan Perez", "Regular"),
    _registro(2, date(2024, 5, 1), time(8, 45), "5001", "Entrada", "Deposito Central", "Juan Perez", "Regular"),
    _registro(3, date(2024, 5, 1), time(9, 5), "5001", "Salida", "Deposito Central", "Juan Perez", "Regular"),
    _registro(4, date(2024, 5, 1), time(10, 40), "5001", "Entrada", "Terminal Rosario", "Juan Perez", "Regular"),
    _registro(5, date(2024, 5, 2), time(7, 0), "5002", "Salida", "Base Norte", "Maria Gomez", "Especial"),
    _registro(6, date(2024, 5, 2), time(8, 10), "5002", "Parada", "Terminal Rosario", "Maria Gomez", "Especial"),
    _registro(7, date(2024, 5, 2), time(8, 15), "5002", "Salida", "Terminal Rosario", "Maria Gomez", "Especial"),
    _registro(8, date(2024, 5, 3), None, "5003", "Mantenimiento", "Taller MV", "Luis Lopez", "Regular"),
    _registro(9, date(2024, 5, 3), time(13, 0), None, "Entrada", "Base Norte", None, None),
]


def crear_engine_sqlite(tmp_path: Path) -> Engine:
    """Engine SQLite con el esquema ``pointer`` adjunto."""
    pointer_db = (tmp_path / "pointer.db").as_posix()
    engine = create_engine(f"sqlite:///{(tmp_path / 'main.db').as_posix()}")

    @event.listens_for(engine, "connect")
    def _attach_pointer(dbapi_conn, _record):
        dbapi_conn.execute(f"ATTACH DATABASE '{pointer_db}' AS pointer")

    return engine


@pytest.fixture()
def sqlite_engine(tmp_path, monkeypatch):
    """Engine sembrado con ``SEED`` e instalado como engine compartido."""
    engine = crear_engine_sqlite(tmp_path)
    metadata.create_all(engine)
    with engine.begin() as conn:
        conn.execute(CONTROL_HORARIOS.insert(), SEED)

    monkeypatch.setattr(db_engine, "_ENGINE", engine, raising=True)
    yield engine
    engine.dispose()


@pytest.fixture()
def client(sqlite_engine):
    return TestClient(app)
