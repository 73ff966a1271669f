"""
AptoStock – Infrastructure Layer
==================================
Implementaciones concretas de interfaces.

Este módulo contiene:
- persistence/: Snapshot store (SQLAlchemy / memoria)
- external/: EventBus
- scheduling/: Timers asyncio cancelables

REGLA DE DEPENDENCIA:
Esta capa implementa interfaces definidas en application/ports/.

Puede importar de:
- domain/ (entidades, value objects)
- application/ (ports)
- shared/ (config, logging)
"""
