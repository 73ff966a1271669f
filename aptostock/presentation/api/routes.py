"""
AptoStock – API Routes (FastAPI)
==================================
Endpoints REST y WebSocket para el frontend.

Endpoints disponibles:
  WS   /ws/market               → precios y trades en tiempo real
  GET  /api/health              → health check
  GET  /api/status              → oráculo, precios, saldos y pools
  GET  /api/prices              → snapshot de precios actual
  POST /api/oracle/pause        → RUNNING → PAUSED
  POST /api/oracle/resume       → PAUSED → RUNNING
  POST /api/oracle/reset        → precios semilla
  POST /api/oracle/prices       → fijar precios manualmente
  GET  /api/balances            → saldos
  GET  /api/pools               → reservas de los pools
  GET  /api/quote/mint          → preview de mint
  POST /api/mint                → mint USDA → token
  GET  /api/quote/swap          → cotización de swap
  POST /api/swap                → swap
  POST /api/reset               → saldos + pools a semilla
  POST /api/history/reset       → vaciar historial de precios
  GET  /api/history/{asset}     → puntos de precio
  GET  /api/candles/{asset}     → velas OHLC (frame_ms configurable)

Los rechazos de mint/swap responden 200 con accepted=false y un `reason`.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, HTTPException, Query, WebSocket, WebSocketDisconnect

from aptostock.domain.events.domain_events import PricesUpdated
from aptostock.domain.value_objects.price import PriceSnapshot
from aptostock.domain.value_objects.units import Asset, Unit
from aptostock.presentation.api.schemas import (
    CandlesResponse,
    HealthResponse,
    HistoryResponse,
    MintPreviewResponse,
    MintRequest,
    MintResponse,
    OracleResponse,
    PricesResponse,
    SetPricesRequest,
    SwapQuoteResponse,
    SwapRequest,
    SwapResponse,
)
from aptostock.presentation.websocket.websocket_manager import PRICES_TOPIC, TRADE_TOPIC
from aptostock.shared.logging.logger import get_logger

logger = get_logger("api.routes")

router = APIRouter()

# Referencias a componentes inyectados desde main.py
_ws_manager = None
_event_bus = None
_oracle = None
_history = None
_balances = None
_pools = None
_mint = None
_swap = None
_reset_demo = None
_status_provider = None


def init_routes(
    ws_manager,
    event_bus,
    oracle,
    history,
    balances,
    pools,
    mint_usecase,
    swap_usecase,
    reset_demo_usecase,
    status_provider=None,
) -> None:
    """Inyectar dependencias desde main.py al arrancar."""
    global _ws_manager, _event_bus, _oracle, _history, _balances, _pools
    global _mint, _swap, _reset_demo, _status_provider
    _ws_manager = ws_manager
    _event_bus = event_bus
    _oracle = oracle
    _history = history
    _balances = balances
    _pools = pools
    _mint = mint_usecase
    _swap = swap_usecase
    _reset_demo = reset_demo_usecase
    _status_provider = status_provider


def _require(component):
    if component is None:
        raise HTTPException(status_code=503, detail="Server not ready")
    return component


async def _publish_prices(snapshot: PriceSnapshot) -> None:
    if _event_bus is None:
        return
    await _event_bus.publish(
        PRICES_TOPIC,
        PricesUpdated(
            prices={asset.value: price for asset, price in snapshot.prices.items()},
            price_timestamp=snapshot.timestamp,
        ),
    )


async def _publish_trade(event) -> None:
    if _event_bus is not None and event is not None:
        await _event_bus.publish(TRADE_TOPIC, event)


def _oracle_response() -> dict:
    oracle = _require(_oracle)
    return {"state": oracle.state.value, "prices": oracle.prices.to_dict()}


# ─── WebSocket endpoint para streaming a frontend ─────────────────────

@router.websocket("/ws/market")
async def market_stream(websocket: WebSocket) -> None:
    """
    WebSocket endpoint principal.
    El broadcast lo maneja WebSocketManager; este handler solo gestiona
    el ciclo de vida de la conexión.
    """
    if _ws_manager is None:
        await websocket.close(code=1011, reason="Server not ready")
        return

    await _ws_manager.connect(websocket)
    try:
        while True:
            try:
                data = await websocket.receive_text()
                logger.debug("Mensaje de cliente WS: %s", data[:100])
            except WebSocketDisconnect:
                break
    finally:
        _ws_manager.disconnect(websocket)


# ─── Estado ────────────────────────────────────────────────────────────

@router.get("/api/health", response_model=HealthResponse)
async def health_check() -> dict:
    """Health check para monitoreo."""
    return {"status": "ok", "service": "aptostock"}


@router.get("/api/status")
async def system_status() -> dict:
    """Estado completo de la demo."""
    result = dict(_require(_status_provider)())
    result["ws_clients"] = _ws_manager.client_count if _ws_manager else 0
    return result


@router.get("/api/prices", response_model=PricesResponse)
async def get_prices() -> dict:
    return _require(_oracle).prices.to_dict()


# ─── Oráculo ───────────────────────────────────────────────────────────

@router.post("/api/oracle/pause", response_model=OracleResponse)
async def pause_oracle() -> dict:
    _require(_oracle).pause()
    return _oracle_response()


@router.post("/api/oracle/resume", response_model=OracleResponse)
async def resume_oracle() -> dict:
    _require(_oracle).resume()
    return _oracle_response()


@router.post("/api/oracle/reset", response_model=OracleResponse)
async def reset_oracle() -> dict:
    snapshot = _require(_oracle).reset()
    await _publish_prices(snapshot)
    return _oracle_response()


@router.post("/api/oracle/prices", response_model=OracleResponse)
async def set_oracle_prices(body: SetPricesRequest) -> dict:
    """Fijar precios manualmente (los omitidos conservan su valor)."""
    overrides = {
        asset: value
        for asset, value in ((Asset.TLSA, body.TLSA), (Asset.CRCL, body.CRCL))
        if value is not None
    }
    snapshot = _require(_oracle).set_prices(overrides)
    await _publish_prices(snapshot)
    return _oracle_response()


# ─── Ledgers ───────────────────────────────────────────────────────────

@router.get("/api/balances")
async def get_balances() -> dict:
    return _require(_balances).to_dict()


@router.get("/api/pools")
async def get_pools() -> dict:
    return _require(_pools).to_dict()


@router.post("/api/reset")
async def reset_demo() -> dict:
    """Saldos y pools vuelven a sus valores semilla."""
    event = _require(_reset_demo).execute()
    await _publish_trade(event)
    return {
        "balances": _require(_balances).to_dict(),
        "pools": _require(_pools).to_dict(),
    }


# ─── Mint ──────────────────────────────────────────────────────────────

@router.get("/api/quote/mint", response_model=MintPreviewResponse)
async def quote_mint(asset: Asset, stable_in: float = Query(...)) -> dict:
    oracle = _require(_oracle)
    return {
        "asset": asset,
        "stable_in": stable_in,
        "price": oracle.price(asset),
        "amount_out": _require(_mint).preview(asset, stable_in),
    }


@router.post("/api/mint", response_model=MintResponse)
async def mint(body: MintRequest) -> dict:
    result = _require(_mint).execute(body.asset, body.stable_in)
    if result.accepted:
        await _publish_trade(result.event)
    data = result.to_dict()
    data["balances"] = _require(_balances).to_dict()
    return data


# ─── Swap ──────────────────────────────────────────────────────────────

@router.get("/api/quote/swap", response_model=SwapQuoteResponse)
async def quote_swap(from_unit: Unit, to_unit: Unit, amount_in: float = Query(...)) -> dict:
    return _require(_swap).quote(from_unit, to_unit, amount_in).to_dict()


@router.post("/api/swap", response_model=SwapResponse)
async def swap(body: SwapRequest) -> dict:
    result = _require(_swap).execute(body.from_unit, body.to_unit, body.amount_in)
    if result.accepted:
        await _publish_trade(result.event)
    data = result.to_dict()
    data["balances"] = _require(_balances).to_dict()
    return data


# ─── Historial y velas ─────────────────────────────────────────────────

@router.post("/api/history/reset")
async def reset_history() -> dict:
    _require(_history).reset()
    return {"status": "ok"}


@router.get("/api/history/{asset}", response_model=HistoryResponse)
async def get_history(asset: Asset, count: Optional[int] = Query(default=None, gt=0)) -> dict:
    points = _require(_history).points(asset, count)
    return {
        "symbol": asset.value,
        "count": len(points),
        "points": [pt.to_dict() for pt in points],
    }


@router.get("/api/candles/{asset}", response_model=CandlesResponse)
async def get_candles(asset: Asset, frame_ms: Optional[int] = Query(default=None, gt=0)) -> dict:
    """Velas OHLC derivadas del historial (las últimas 60 como máximo)."""
    history = _require(_history)
    frame = frame_ms or history.frame_ms
    candles = history.candles(asset, frame)
    return {
        "symbol": asset.value,
        "frame_ms": frame,
        "count": len(candles),
        "candles": [c.to_dict() for c in candles],
    }
