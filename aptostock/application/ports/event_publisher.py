"""
AptoStock – Application Port: Event Publisher
===============================================
Interfaz para publicar eventos a consumidores desacoplados.

El oráculo y las rutas publican; la infraestructura decide CÓMO
entregar esos eventos (fan-out en memoria, WebSocket, ...).
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from typing import Any, Optional


class IEventPublisher(ABC):
    """
    Interfaz para publicar eventos del sistema.

    IMPLEMENTACIONES:
    - EventBus (asyncio.Queue fan-out)
    """

    @abstractmethod
    async def publish(self, topic: str, data: Any) -> None:
        """
        Publica un evento a un tópico.

        Args:
            topic: Nombre del tópico (e.g. "prices", "trade")
            data: Datos del evento (dict o DomainEvent)
        """

    @abstractmethod
    async def subscribe(self, topic: str, consumer_name: str) -> asyncio.Queue:
        """Registra un consumidor y retorna su cola exclusiva."""

    @abstractmethod
    async def unsubscribe_all(self, topic: Optional[str] = None) -> None:
        """Desuscribe todos los consumidores (de un tópico o de todos)."""
