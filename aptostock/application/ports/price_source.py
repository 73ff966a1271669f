"""
AptoStock – Application Port: Price Source
============================================
Interfaz de lectura de precios spot (la implementa el PriceOracle).
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from aptostock.domain.value_objects.units import Asset


class IPriceSource(ABC):
    """Precio actual en USDA de un token."""

    @abstractmethod
    def price(self, asset: Asset) -> float:
        """Precio spot; <= 0 significa que no hay precio disponible."""
