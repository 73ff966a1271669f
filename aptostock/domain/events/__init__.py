"""Domain events."""
from aptostock.domain.events.domain_events import (
    DemoReset,
    DomainEvent,
    MintExecuted,
    PricesUpdated,
    SwapExecuted,
)

__all__ = ["DemoReset", "DomainEvent", "MintExecuted", "PricesUpdated", "SwapExecuted"]
