"""Domain services - cálculos puros sin estado."""
from aptostock.domain.services.candle_aggregator import bucket_start, to_candles
from aptostock.domain.services.quote_engine import DEFAULT_FEE_RATE, quote, quote_mint

__all__ = ["bucket_start", "to_candles", "DEFAULT_FEE_RATE", "quote", "quote_mint"]
