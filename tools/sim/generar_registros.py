#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Genera eventos sintéticos de ControlHorarios para desarrollo y demos.

Cada interno recorre el día alternando ``Salida`` -> ``Entrada`` (viaje) y
espera en la terminal antes de la próxima ``Salida``. Con baja probabilidad
se intercala una ``Parada`` o un ``Mantenimiento`` sin hora.

Columnas: Fecha, Hora, Interno, Tipo, Lugar, Conductor, Servicio

Uso:
  python tools/sim/generar_registros.py --dias 30 --internos 12 --out data/simulated/registros.csv
  PYTHONPATH=backend/src python tools/sim/generar_registros.py --db sqlite:///dev.db --create
"""
import argparse
import os
from datetime import date, datetime, timedelta

import numpy as np
import pandas as pd

LUGARES = ["Terminal Rosario", "Deposito Central", "Base Norte", "Terminal Sur", "Parador Ruta 9"]
CONDUCTORES = [
    "Juan Perez",
    "Maria Gomez",
    "Luis Lopez",
    "Ana Fernandez",
    "Carlos Diaz",
    "Sofia Romero",
    "Diego Alvarez",
    "Lucia Torres",
]
SERVICIOS = ["Regular", "Especial", "Expreso", "Nocturno"]


def _jornada(dia: date, interno: str, conductor: str, servicio: str) -> list:
    """Eventos de un interno en un día."""
    rows = []
    t = datetime.combine(dia, datetime.min.time()) + timedelta(minutes=int(np.random.randint(300, 480)))
    fin = datetime.combine(dia, datetime.min.time()) + timedelta(hours=21)
    origen = np.random.choice(LUGARES)

    while t < fin:
        rows.append((dia, t.time(), interno, "Salida", origen, conductor, servicio))

        viaje = int(np.clip(np.random.normal(70, 20), 25, 150))
        if np.random.rand() < 0.15:
            parcial = int(viaje * np.random.uniform(0.3, 0.7))
            t += timedelta(minutes=parcial)
            rows.append((dia, t.time(), interno, "Parada", "Parador Ruta 9", conductor, servicio))
            viaje -= parcial
        t += timedelta(minutes=viaje)

        destino = np.random.choice([x for x in LUGARES if x != origen])
        rows.append((dia, t.time(), interno, "Entrada", destino, conductor, servicio))

        t += timedelta(minutes=int(np.clip(np.random.exponential(12), 2, 60)))
        origen = destino

    if np.random.rand() < 0.05:
        rows.append((dia, None, interno, "Mantenimiento", "Taller MV", conductor, servicio))
    return rows


def generar(n_internos: int, dias: int, hasta: date) -> pd.DataFrame:
    internos = [str(5001 + i) for i in range(n_internos)]
    asignacion = {
        i: (np.random.choice(CONDUCTORES), np.random.choice(SERVICIOS, p=[0.55, 0.2, 0.15, 0.1]))
        for i in internos
    }

    rows = []
    for offset in range(dias - 1, -1, -1):
        dia = hasta - timedelta(days=offset)
        for interno in internos:
            if np.random.rand() < 0.1:  # franco
                continue
            conductor, servicio = asignacion[interno]
            rows.extend(_jornada(dia, interno, conductor, servicio))

    return pd.DataFrame(rows, columns=["Fecha", "Hora", "Interno", "Tipo", "Lugar", "Conductor", "Servicio"])


def _insertar(df: pd.DataFrame, url: str, create: bool) -> None:
    from controlhorarios.db.config import ConexionConfig
    from controlhorarios.db.engine import build_engine
    from controlhorarios.db.tablas import CONTROL_HORARIOS, metadata

    engine = build_engine(ConexionConfig(url=url))
    if create:
        metadata.create_all(engine)
    records = df.astype(object).where(df.notna(), None).to_dict(orient="records")
    with engine.begin() as conn:
        conn.execute(CONTROL_HORARIOS.insert(), records)
    engine.dispose()


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--internos", type=int, default=10, help="Cantidad de internos")
    ap.add_argument("--dias", type=int, default=30, help="Días hacia atrás desde hoy")
    ap.add_argument("--seed", type=int, default=42)
    ap.add_argument("--out", default=None, help="CSV de salida")
    ap.add_argument("--db", default=None, help="URL SQLAlchemy donde insertar (pointer.ControlHorarios)")
    ap.add_argument("--create", action="store_true", help="Crear la tabla si no existe (con --db)")
    args = ap.parse_args()
    if not args.out and not args.db:
        ap.error("Indica --out y/o --db")
    np.random.seed(args.seed)

    df = generar(args.internos, args.dias, date.today())

    if args.out:
        os.makedirs(os.path.dirname(args.out) or ".", exist_ok=True)
        df.to_csv(args.out, index=False)
        print(f"[OK] Registros sintéticos escritos en: {args.out} (N={len(df)})")
    if args.db:
        _insertar(df, args.db, args.create)
        print(f"[OK] {len(df)} registros insertados en pointer.ControlHorarios")


if __name__ == "__main__":
    main()
