"""Data Transfer Objects de la capa de aplicación."""

from aptostock.application.dto.trade_dto import (
    MintResult,
    RejectionReason,
    SwapQuoteResult,
    SwapResult,
)

__all__ = [
    "MintResult",
    "RejectionReason",
    "SwapQuoteResult",
    "SwapResult",
]
