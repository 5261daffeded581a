# tests/api/test_tiempos_api.py
"""Tests de ``/tiempos/*`` (listados, distribución y exportación)."""

from __future__ import annotations

from datetime import date, time

import pytest

from controlhorarios.db.tablas import CONTROL_HORARIOS


def test_tiempos_viaje_del_mas_reciente_al_mas_antiguo(client):
    r = client.get("/tiempos/viaje")
    assert r.status_code == 200, r.text
    assert r.json() == [
        {
            "id": 6,
            "fecha": "2024-05-02",
            "interno": "5002",
            "servicio": "Especial",
            "duracion": "1h 10m",
            "nivel": "Medio",
            "minutosViaje": 70,
        },
        {
            "id": 4,
            "fecha": "2024-05-01",
            "interno": "5001",
            "servicio": "Regular",
            "duracion": "1h 35m",
            "nivel": "Alto",
            "minutosViaje": 95,
        },
        {
            "id": 2,
            "fecha": "2024-05-01",
            "interno": "5001",
            "servicio": "Regular",
            "duracion": "45m",
            "nivel": "Normal",
            "minutosViaje": 45,
        },
    ]


def test_tiempos_espera(client):
    r = client.get("/tiempos/espera")
    assert r.status_code == 200, r.text
    body = r.json()
    assert [(x["id"], x["minutosEspera"], x["nivel"]) for x in body] == [
        (7, 5, "Normal"),
        (3, 20, "Medio"),
    ]
    assert body[1]["duracion"] == "20m"


def test_tiempos_filtro_excluye_evento_previo(client):
    # El previo se busca solo entre filas filtradas: con tipo=Entrada el par
    # de 5001 queda 08:45 -> 10:40 y su previo es Entrada (espera).
    r = client.get("/tiempos/viaje", params={"tipo": "Entrada"})
    assert r.status_code == 200, r.text
    assert r.json() == []

    esperas = client.get("/tiempos/espera", params={"tipo": "Entrada"}).json()
    assert [(x["id"], x["minutosEspera"]) for x in esperas] == [(4, 115)]


def test_distribucion_viaje_por_defecto(client):
    r = client.get("/tiempos/viaje/distribucion")
    assert r.status_code == 200, r.text
    body = r.json()
    assert [(b["range"], b["count"]) for b in body] == [("45-59", 1), ("60-74", 1), ("90-104", 1)]
    assert body[0]["percentage"] == pytest.approx(100 / 3)


def test_distribucion_bin_size_explicito(client):
    body = client.get("/tiempos/viaje/distribucion", params={"bin_size": 30}).json()
    assert [(b["range"], b["count"]) for b in body] == [("45-74", 2), ("75-104", 1)]
    assert sum(b["percentage"] for b in body) == pytest.approx(100.0)


def test_distribucion_espera(client):
    body = client.get("/tiempos/espera/distribucion").json()
    assert [(b["range"], b["count"]) for b in body] == [("5-9", 1), ("20-24", 1)]


def test_distribucion_vacia(client):
    r = client.get("/tiempos/viaje/distribucion", params={"interno": "9999"})
    assert r.status_code == 200, r.text
    assert r.json() == []


def test_distribucion_bin_size_invalido(client):
    assert client.get("/tiempos/viaje/distribucion", params={"bin_size": 0}).status_code == 422


def test_tipo_desconocido_es_404(client):
    assert client.get("/tiempos/ocio/distribucion").status_code == 404
    assert client.get("/tiempos/ocio/export").status_code == 404


def test_export_viaje_csv(client):
    r = client.get("/tiempos/viaje/export")
    assert r.status_code == 200, r.text
    assert r.headers["content-type"].startswith("text/csv")
    assert 'filename="tiempos_viaje_' in r.headers["content-disposition"]
    assert r.text.split("\n")[:2] == [
        "Fecha,Servicio,Interno,Minutos de Viaje",
        '"2024-05-02","Especial","5002","70"',
    ]


def test_export_espera_csv(client):
    r = client.get("/tiempos/espera/export")
    assert r.status_code == 200, r.text
    assert r.text == (
        "Fecha,Servicio,Interno,Minutos de Espera\n"
        '"2024-05-02","Especial","5002","5"\n'
        '"2024-05-01","Regular","5001","20"\n'
    )


def test_filtro_tipo_y_segmento_de_tramo_conviven(client):
    # ?tipo= filtra eventos; el segmento de la ruta elige viaje/espera
    r = client.get("/tiempos/viaje/distribucion", params={"tipo": "Entrada"})
    assert r.status_code == 200, r.text
    assert r.json() == []

    r2 = client.get("/tiempos/espera/distribucion", params={"tipo": "Entrada"})
    assert r2.status_code == 200, r2.text
    assert [(b["range"], b["count"]) for b in r2.json()] == [("115-119", 1)]

    r3 = client.get("/tiempos/espera/export", params={"tipo": "Entrada"})
    assert r3.status_code == 200, r3.text
    assert r3.text.split("\n")[1] == '"2024-05-01","Regular","5001","115"'


def test_evento_sin_hora_no_corta_viaje_nocturno(client, sqlite_engine):
    # Salida 22:00, Mantenimiento sin hora al día siguiente y Entrada 00:30:
    # el evento sin hora va primero en la partición y el viaje queda pareado.
    columnas = ("Id", "Fecha", "Hora", "Interno", "Tipo", "Lugar", "Conductor", "Servicio")
    nocturno = [
        (10, date(2024, 5, 4), time(22, 0), "5007", "Salida", "Base Norte", "Ana Fernandez", "Nocturno"),
        (11, date(2024, 5, 5), None, "5007", "Mantenimiento", "Taller MV", "Ana Fernandez", "Nocturno"),
        (12, date(2024, 5, 5), time(0, 30), "5007", "Entrada", "Terminal Sur", "Ana Fernandez", "Nocturno"),
    ]
    with sqlite_engine.begin() as conn:
        conn.execute(CONTROL_HORARIOS.insert(), [dict(zip(columnas, fila)) for fila in nocturno])

    r = client.get("/tiempos/viaje", params={"interno": "5007"})
    assert r.status_code == 200, r.text
    assert r.json() == [
        {
            "id": 12,
            "fecha": "2024-05-05",
            "interno": "5007",
            "servicio": "Nocturno",
            "duracion": "2h 30m",
            "nivel": "Alto",
            "minutosViaje": 150,
        }
    ]
    assert client.get("/tiempos/espera", params={"interno": "5007"}).json() == []

    kpis = client.get("/dashboard/kpis", params={"interno": "5007"}).json()
    assert kpis["viajesTotales"] == 3
    assert kpis["tiempoViajePromedio"] == 150
