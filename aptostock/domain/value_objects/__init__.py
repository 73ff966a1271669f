"""Domain value objects."""
from aptostock.domain.value_objects.units import (
    Asset,
    PoolKey,
    STABLE_UNIT,
    SwapDirection,
    Unit,
    require_pair,
    resolve_pair,
)
from aptostock.domain.value_objects.price import PricePoint, PriceSnapshot
from aptostock.domain.value_objects.quote import SwapQuote

__all__ = [
    "Asset",
    "PoolKey",
    "STABLE_UNIT",
    "SwapDirection",
    "Unit",
    "require_pair",
    "resolve_pair",
    "PricePoint",
    "PriceSnapshot",
    "SwapQuote",
]
