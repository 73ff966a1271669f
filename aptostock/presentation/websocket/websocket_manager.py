"""
AptoStock – WebSocket Manager (broadcast a clientes frontend)
===============================================================
Envía a los clientes conectados los precios del oráculo y los trades
(mint / swap / reset) en tiempo real.

ARQUITECTURA:
  EventBus ──(prices)──▸ WSManager._broadcast_loop()
  EventBus ──(trade)───▸ WSManager._broadcast_loop()
       │
       ▼
  [Cliente WS 1, Cliente WS 2, ...]

NO BLOQUEA EL LOOP PRINCIPAL:
- Cada tópico tiene su task de broadcast.
- El envío a cada cliente usa asyncio.wait_for con timeout; un cliente
  lento o caído se descarta sin afectar a los demás.

MENSAJES:
  {"type": "prices", "data": {...}}
  {"type": "trade",  "data": {...}}
  {"type": "snapshot", "data": {...}}   (solo al conectar)
"""

from __future__ import annotations

import asyncio
import json
from typing import Callable, List, Optional, Set

from fastapi import WebSocket, WebSocketDisconnect

from aptostock.application.ports.event_publisher import IEventPublisher
from aptostock.shared.logging.logger import get_logger

logger = get_logger("ws_manager")

PRICES_TOPIC = "prices"
TRADE_TOPIC = "trade"

SEND_TIMEOUT_SECONDS = 5.0


class WebSocketManager:
    """Gestiona conexiones frontend y broadcast de datos en tiempo real."""

    def __init__(
        self,
        event_bus: IEventPublisher,
        snapshot_provider: Optional[Callable[[], dict]] = None,
    ) -> None:
        self._event_bus = event_bus
        self._snapshot_provider = snapshot_provider
        self._clients: Set[WebSocket] = set()
        self._broadcast_tasks: List[asyncio.Task] = []

    async def start(self) -> None:
        """Lanzar un loop de broadcast por tópico."""
        prices_queue = await self._event_bus.subscribe(PRICES_TOPIC, "ws_broadcast_prices")
        trade_queue = await self._event_bus.subscribe(TRADE_TOPIC, "ws_broadcast_trade")

        self._broadcast_tasks = [
            asyncio.create_task(
                self._broadcast_loop(prices_queue, PRICES_TOPIC),
                name="ws-broadcast-prices",
            ),
            asyncio.create_task(
                self._broadcast_loop(trade_queue, TRADE_TOPIC),
                name="ws-broadcast-trade",
            ),
        ]
        logger.info("WebSocketManager iniciado – broadcast loops para prices, trade")

    async def stop(self) -> None:
        """Cancelar broadcast y cerrar todos los clientes."""
        for task in self._broadcast_tasks:
            task.cancel()
        if self._broadcast_tasks:
            await asyncio.gather(*self._broadcast_tasks, return_exceptions=True)
        self._broadcast_tasks = []

        for ws in list(self._clients):
            try:
                await ws.close()
            except Exception as e:
                logger.debug("Error cerrando cliente WS: %s", e)
        self._clients.clear()
        logger.info("WebSocketManager detenido")

    async def connect(self, websocket: WebSocket) -> None:
        """Registrar un nuevo cliente y enviarle el estado actual."""
        await websocket.accept()
        self._clients.add(websocket)
        logger.info("Cliente WS conectado. Total: %d", len(self._clients))

        if self._snapshot_provider is not None:
            payload = json.dumps({"type": "snapshot", "data": self._snapshot_provider()})
            disconnected: List[WebSocket] = []
            await self._safe_send(websocket, payload, disconnected)
            for ws in disconnected:
                self._clients.discard(ws)

    def disconnect(self, websocket: WebSocket) -> None:
        """Des-registrar un cliente desconectado."""
        self._clients.discard(websocket)
        logger.info("Cliente WS desconectado. Total: %d", len(self._clients))

    async def _broadcast_loop(self, queue: asyncio.Queue, event_type: str) -> None:
        """Consumir una Queue y reenviar cada evento a todos los clientes."""
        try:
            while True:
                data = await queue.get()
                if not self._clients:
                    continue

                payload_data = data.to_dict() if hasattr(data, "to_dict") else data
                payload = json.dumps({"type": event_type, "data": payload_data})

                disconnected: List[WebSocket] = []
                await asyncio.gather(
                    *(self._safe_send(ws, payload, disconnected) for ws in list(self._clients))
                )
                for ws in disconnected:
                    self._clients.discard(ws)

        except asyncio.CancelledError:
            pass  # Shutdown limpio

    async def _safe_send(
        self, ws: WebSocket, payload: str, disconnected: List[WebSocket]
    ) -> None:
        """
        Enviar payload a un cliente con timeout.
        Si falla, marcarlo como desconectado. No lanza excepciones.
        """
        try:
            await asyncio.wait_for(ws.send_text(payload), timeout=SEND_TIMEOUT_SECONDS)
        except (WebSocketDisconnect, asyncio.TimeoutError, RuntimeError) as e:
            logger.debug("Envío WS fallido (%s), cliente descartado", type(e).__name__)
            disconnected.append(ws)

    @property
    def client_count(self) -> int:
        return len(self._clients)
