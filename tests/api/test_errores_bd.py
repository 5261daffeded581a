# tests/api/test_errores_bd.py
"""Errores de base de datos: sin configuración (503) y fallo de consulta (500).

El detalle nunca expone SQL ni credenciales, solo el correlation id.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine

import controlhorarios.db.engine as db_engine
from controlhorarios.app.main import app

_DB_ENV = (
    "DATABASE_URL",
    "DB_SERVER",
    "DB_NAME",
    "DB_USER",
    "DB_PASSWORD",
)


@pytest.fixture()
def sin_configuracion(monkeypatch):
    for name in _DB_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(db_engine, "_ENGINE", None, raising=True)


@pytest.mark.parametrize(
    "path",
    [
        "/filtros",
        "/dashboard/kpis",
        "/dashboard/chart-data",
        "/dashboard/top-internos",
        "/registros",
        "/registros/export",
        "/registros/1",
        "/tiempos/viaje",
        "/tiempos/espera/distribucion",
        "/tiempos/viaje/export",
    ],
)
def test_sin_configuracion_es_503(sin_configuracion, path):
    client = TestClient(app)
    r = client.get(path, headers={"X-Correlation-Id": "cid-503"})
    assert r.status_code == 503, r.text
    assert r.json()["detail"] == "Base de datos no configurada (cid=cid-503)"


def test_health_no_depende_de_la_base(sin_configuracion):
    client = TestClient(app)
    assert client.get("/health").status_code == 200


def test_error_de_consulta_es_500(tmp_path, monkeypatch):
    # Base vacía: pointer.ControlHorarios no existe
    engine = create_engine(f"sqlite:///{(tmp_path / 'vacia.db').as_posix()}")
    monkeypatch.setattr(db_engine, "_ENGINE", engine, raising=True)

    client = TestClient(app)
    r = client.get("/dashboard/kpis", headers={"X-Correlation-Id": "cid-500"})
    assert r.status_code == 500
    detail = r.json()["detail"]
    assert detail == "No se pudo consultar la base de datos (cid=cid-500)"
    assert "SELECT" not in detail
    engine.dispose()
