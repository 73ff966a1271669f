"""
Market Data Bounded Context
============================
Precios sintéticos de TLSA y CRCL.

Componentes:
- price_oracle: PriceOracle (paseo aleatorio, RUNNING/PAUSED)
"""

from aptostock.market_data.price_oracle import OracleState, PriceOracle

__all__ = [
    "OracleState",
    "PriceOracle",
]
