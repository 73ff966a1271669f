"""
AptoStock – Shared Module
===========================
Utilidades transversales usadas por todas las capas.

Este módulo contiene:
- config/: Settings y configuración
- logging/: Setup de logging

NOTA: Este módulo no contiene lógica de negocio.
"""

from aptostock.shared.config.settings import settings
from aptostock.shared.logging.logger import get_logger, setup_logging

__all__ = [
    "settings",
    "setup_logging",
    "get_logger",
]
