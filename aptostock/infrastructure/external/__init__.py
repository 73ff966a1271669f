"""External systems - messaging."""

from aptostock.infrastructure.external.event_bus_adapter import EventBus

__all__ = [
    "EventBus",
]
