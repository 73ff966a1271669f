"""
AptoStock – Demo DEX
======================
Mint de tokens sintéticos (TLSA, CRCL) con USDA, swaps AMM de producto
constante, oráculo de precios con paseo aleatorio y velas OHLC.
"""

__version__ = "0.1.0"
