"""Puertos (interfaces) hacia la infraestructura."""

from aptostock.application.ports.event_publisher import IEventPublisher
from aptostock.application.ports.key_value_store import IKeyValueStore
from aptostock.application.ports.price_source import IPriceSource

__all__ = [
    "IEventPublisher",
    "IKeyValueStore",
    "IPriceSource",
]
