"""Metadata SQLAlchemy Core de la tabla de eventos ``pointer.ControlHorarios``."""

from __future__ import annotations

from sqlalchemy import Column, Date, Integer, MetaData, Table, Time, Unicode

SCHEMA = "pointer"
TABLE_NAME = "ControlHorarios"

metadata = MetaData()

CONTROL_HORARIOS = Table(
    TABLE_NAME,
    metadata,
    Column("Id", Integer, primary_key=True, autoincrement=True),
    Column("Fecha", Date, nullable=False),
    Column("Hora", Time, nullable=True),
    Column("Interno", Unicode(50), nullable=True),
    Column("Tipo", Unicode(50), nullable=True),
    Column("Lugar", Unicode(150), nullable=True),
    Column("Conductor", Unicode(150), nullable=True),
    Column("Servicio", Unicode(100), nullable=True),
    schema=SCHEMA,
)
