"""
Event Bus Adapter.

Implementación de IEventPublisher con asyncio.Queue fan-out por tópico.
Los Domain Events se convierten a dict al publicarse, así los consumidores
(WebSocketManager) reciben datos serializables.

Política de cola llena: drop-oldest. Un consumidor lento nunca bloquea
al oráculo ni a las rutas.
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional, Tuple

from aptostock.application.ports.event_publisher import IEventPublisher
from aptostock.domain.events.domain_events import DomainEvent
from aptostock.shared.logging.logger import get_logger

logger = get_logger("event_bus")


class EventBus(IEventPublisher):
    """
    Fan-out en memoria: cada consumidor tiene su propia cola acotada.

    Uso:
        bus = EventBus(max_queue_size=1000)
        queue = await bus.subscribe("prices", "ws_prices")
        await bus.publish("prices", PricesUpdated(...))
        item = await queue.get()     # → dict
    """

    def __init__(self, max_queue_size: int = 1_000) -> None:
        self._max_queue_size = max_queue_size
        self._subscribers: Dict[str, List[Tuple[asyncio.Queue, str]]] = {}
        self._published = 0
        self._dropped = 0

    async def publish(self, topic: str, data: Any) -> None:
        """Publicar a todos los consumidores del tópico."""
        payload = data.to_dict() if isinstance(data, DomainEvent) else data
        self._published += 1

        for queue, consumer_name in self._subscribers.get(topic, []):
            if queue.full():
                # Drop-oldest policy
                try:
                    queue.get_nowait()
                    self._dropped += 1
                    logger.warning(
                        "Cola llena para '%s' en tópico '%s' - evento antiguo descartado",
                        consumer_name, topic,
                    )
                except asyncio.QueueEmpty:
                    pass
            try:
                queue.put_nowait(payload)
            except asyncio.QueueFull:
                logger.error("No se pudo encolar evento para '%s'", consumer_name)

    async def subscribe(self, topic: str, consumer_name: str) -> asyncio.Queue:
        """Registrar un consumidor y retornar su cola exclusiva."""
        queue: asyncio.Queue = asyncio.Queue(maxsize=self._max_queue_size)
        self._subscribers.setdefault(topic, []).append((queue, consumer_name))
        logger.info("Consumidor '%s' suscrito a '%s'", consumer_name, topic)
        return queue

    async def unsubscribe_all(self, topic: Optional[str] = None) -> None:
        if topic:
            self._subscribers.pop(topic, None)
        else:
            self._subscribers.clear()

    @property
    def stats(self) -> dict:
        return {
            "topics": {topic: len(subs) for topic, subs in self._subscribers.items()},
            "published": self._published,
            "dropped": self._dropped,
        }
