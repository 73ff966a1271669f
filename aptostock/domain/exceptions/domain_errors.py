"""
AptoStock – Domain Exceptions
================================
Excepciones específicas del dominio de negocio.

Estas excepciones marcan violaciones de invariantes de los ledgers.
Los casos de uso comprueban antes y devuelven un rechazo, así que en
un flujo correcto nunca llegan al caller.

JERARQUÍA:
    DomainError (base)
    ├── InsufficientBalanceError
    ├── ReserveInvariantError
    ├── UnsupportedPairError
    └── InvalidAmountError
"""

from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Excepción base para errores de dominio."""

    def __init__(self, message: str, code: str = "DOMAIN_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)

    def to_dict(self) -> dict:
        return {
            "error": self.code,
            "message": self.message,
        }


class InsufficientBalanceError(DomainError):
    """El saldo quedaría negativo tras aplicar un delta."""

    def __init__(self, message: str, unit: Optional[str] = None,
                 balance: Optional[float] = None, delta: Optional[float] = None):
        super().__init__(message, code="INSUFFICIENT_BALANCE")
        self.unit = unit
        self.balance = balance
        self.delta = delta


class ReserveInvariantError(DomainError):
    """Una reserva del pool quedaría negativa tras aplicar un swap."""

    def __init__(self, message: str, pool: Optional[str] = None):
        super().__init__(message, code="RESERVE_INVARIANT")
        self.pool = pool


class UnsupportedPairError(DomainError):
    """Par de swap no soportado (solo token↔USDA)."""

    def __init__(self, message: str, from_unit: Optional[str] = None,
                 to_unit: Optional[str] = None):
        super().__init__(message, code="UNSUPPORTED_PAIR")
        self.from_unit = from_unit
        self.to_unit = to_unit


class InvalidAmountError(DomainError):
    """Monto no positivo o no finito."""

    def __init__(self, message: str, value: Optional[float] = None):
        super().__init__(message, code="INVALID_AMOUNT")
        self.value = value
