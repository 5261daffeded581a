"""controlhorarios.dashboard

Lógica de datos del tablero operativo de ControlHorarios.

Los routers permanecen delgados (HTTP/serialización) y la lógica vive aquí:

- :mod:`.filtros`: filtros globales (rango de fechas y dimensiones).
- :mod:`.queries`: SQL sobre ``pointer.ControlHorarios`` (registros,
  catálogos, ranking de internos y eventos con su previo vía ``LAG``).
- :mod:`.tiempos`: pares de eventos, KPIs, serie diaria y distribuciones.
- :mod:`.exports`: CSV de registros y tiempos.
"""
