"""Domain entities."""
from aptostock.domain.entities.candle import Candle
from aptostock.domain.entities.pool import Pool

__all__ = ["Candle", "Pool"]
