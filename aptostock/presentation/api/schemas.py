"""
AptoStock – API Schemas (Pydantic)
====================================
Schemas de validación para request/response de la API REST.

Las unidades se validan con los Enum del dominio: una unidad desconocida
falla con 422. Los montos NO se restringen aquí; un monto ≤ 0 llega al
caso de uso y vuelve como rechazo (accepted=false, reason=invalid_amount).
"""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from aptostock.domain.value_objects.units import Asset, Unit


# ─── Requests ───────────────────────────────────────────────────────────

class MintRequest(BaseModel):
    asset: Asset
    stable_in: float = Field(description="USDA a gastar")


class SwapRequest(BaseModel):
    from_unit: Unit
    to_unit: Unit
    amount_in: float


class SetPricesRequest(BaseModel):
    TLSA: Optional[float] = Field(default=None, gt=0)
    CRCL: Optional[float] = Field(default=None, gt=0)


# ─── Responses ──────────────────────────────────────────────────────────

class HealthResponse(BaseModel):
    status: str
    service: str


class PricesResponse(BaseModel):
    TLSA: float
    CRCL: float
    timestamp: int


class OracleResponse(BaseModel):
    state: str
    prices: PricesResponse


class MintPreviewResponse(BaseModel):
    asset: Asset
    stable_in: float
    price: float
    amount_out: float


class MintResponse(BaseModel):
    accepted: bool
    reason: Optional[str] = None
    error: Optional[str] = None
    asset: str
    stable_in: float
    amount_out: float
    price: float
    balances: Dict[str, float]


class SwapQuoteResponse(BaseModel):
    supported: bool
    pool: Optional[str] = None
    from_unit: str
    to_unit: str
    amount_in: float
    amount_in_after_fee: float
    amount_out: float
    fee_paid: float
    price_impact_pct: float


class SwapResponse(BaseModel):
    accepted: bool
    reason: Optional[str] = None
    error: Optional[str] = None
    pool: Optional[str] = None
    from_unit: str
    to_unit: str
    amount_in: float
    amount_in_after_fee: float
    amount_out: float
    fee_paid: float
    price_impact_pct: float
    balances: Dict[str, float]


class PointSchema(BaseModel):
    t: int
    p: float


class HistoryResponse(BaseModel):
    symbol: str
    count: int
    points: List[PointSchema]


class CandleSchema(BaseModel):
    symbol: str
    timestamp: int
    open: float
    high: float
    low: float
    close: float
    tick_count: int
    interval: int


class CandlesResponse(BaseModel):
    symbol: str
    frame_ms: int
    count: int
    candles: List[CandleSchema]
