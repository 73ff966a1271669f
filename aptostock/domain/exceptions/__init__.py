"""Domain exceptions."""
from aptostock.domain.exceptions.domain_errors import (
    DomainError,
    InsufficientBalanceError,
    InvalidAmountError,
    ReserveInvariantError,
    UnsupportedPairError,
)

__all__ = [
    "DomainError",
    "InsufficientBalanceError",
    "InvalidAmountError",
    "ReserveInvariantError",
    "UnsupportedPairError",
]
