# tests/api/test_registros_api.py
"""Tests de ``/registros``: paginación, orden, detalle y exportación CSV."""

from __future__ import annotations


def _ids(body):
    return [row["id"] for row in body["rows"]]


def test_registros_orden_por_defecto(client):
    r = client.get("/registros")
    assert r.status_code == 200, r.text
    body = r.json()

    assert body["total"] == 9
    assert body["page"] == 1
    assert body["pageSize"] == 50
    # Fecha descendente, Id descendente como desempate
    assert _ids(body) == [9, 8, 7, 6, 5, 4, 3, 2, 1]
    assert r.headers["x-total-count"] == "9"


def test_registros_normaliza_textos_y_horas(client):
    rows = client.get("/registros").json()["rows"]
    sin_interno = rows[0]
    assert sin_interno == {
        "id": 9,
        "fecha": "2024-05-03",
        "hora": "13:00:00",
        "interno": None,
        "tipo": "Entrada",
        "lugar": "Base Norte",
        "conductor": None,
        "servicio": None,
    }
    assert rows[1]["hora"] is None


def test_registros_paginacion(client):
    r = client.get("/registros", params={"page": 3, "pageSize": 4})
    assert r.status_code == 200, r.text
    body = r.json()
    assert _ids(body) == [1]
    assert body["total"] == 9
    assert body["page"] == 3
    assert body["pageSize"] == 4


def test_registros_page_size_cero_devuelve_todo(client):
    body = client.get("/registros", params={"pageSize": 0}).json()
    assert len(body["rows"]) == 9


def test_registros_orden_por_hora_ascendente(client):
    body = client.get("/registros", params={"sortBy": "hora", "sortDir": "asc"}).json()
    # Hora nula primero
    assert _ids(body)[:3] == [8, 5, 1]


def test_registros_orden_desconocido_vuelve_al_defecto(client):
    body = client.get("/registros", params={"sortBy": "nope; DROP TABLE", "sortDir": "raro"}).json()
    assert _ids(body) == [9, 8, 7, 6, 5, 4, 3, 2, 1]


def test_registros_filtros_multivalor(client):
    r = client.get("/registros", params={"tipo": "Salida", "servicio": "Regular,Especial"})
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["total"] == 4
    assert sorted(_ids(body)) == [1, 3, 5, 7]


def test_registros_page_invalida_es_422(client):
    assert client.get("/registros", params={"page": 0}).status_code == 422
    assert client.get("/registros", params={"page": "x"}).status_code == 422


def test_registro_detalle_y_404(client):
    r = client.get("/registros/6")
    assert r.status_code == 200, r.text
    assert r.json()["tipo"] == "Parada"

    r404 = client.get("/registros/999")
    assert r404.status_code == 404
    assert "999" in r404.json()["detail"]


def test_registros_export_csv(client):
    r = client.get("/registros/export", params={"pageSize": 2, "page": 2})
    assert r.status_code == 200, r.text
    assert r.headers["content-type"].startswith("text/csv")
    assert "attachment" in r.headers["content-disposition"]
    assert 'filename="registros_' in r.headers["content-disposition"]
    assert r.headers["x-total-count"] == "9"

    lines = r.text.split("\n")
    assert lines[0] == "Fecha,Hora,Interno,Servicio,Conductor,Tipo,Lugar"
    # Ignora la paginación: encabezado + 9 filas + línea final vacía
    assert len(lines) == 11
    assert lines[1] == '"2024-05-03","13:00:00","","","","Entrada","Base Norte"'
    assert lines[-1] == ""


def test_registros_export_sin_resultados(client):
    r = client.get("/registros/export", params={"interno": "9999"})
    assert r.status_code == 200, r.text
    assert r.text == "Fecha,Hora,Interno,Servicio,Conductor,Tipo,Lugar\n"
