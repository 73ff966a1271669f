"""
AptoStock – Domain Layer
===========================
Núcleo puro del sistema. CERO dependencias externas.

Este módulo contiene:
- entities/: Entidades de negocio (Pool, Candle)
- value_objects/: Objetos inmutables (Unit, PriceSnapshot, SwapQuote)
- services/: Servicios de dominio puros (Quote Engine, Candle Aggregator)
- events/: Eventos de dominio
- exceptions/: Excepciones de dominio

REGLA DE DEPENDENCIA:
Este módulo NO puede importar de:
- infrastructure/
- presentation/
- application/
- Frameworks externos (SQLAlchemy, FastAPI, etc.)
"""

from aptostock.domain.entities.candle import Candle
from aptostock.domain.entities.pool import Pool
from aptostock.domain.value_objects.price import PricePoint, PriceSnapshot
from aptostock.domain.value_objects.quote import SwapQuote
from aptostock.domain.value_objects.units import Asset, PoolKey, SwapDirection, Unit

__all__ = [
    "Candle",
    "Pool",
    "PricePoint",
    "PriceSnapshot",
    "SwapQuote",
    "Asset",
    "PoolKey",
    "SwapDirection",
    "Unit",
]
