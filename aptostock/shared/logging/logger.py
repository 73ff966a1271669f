"""
AptoStock – Logging configuration
====================================
Un único handler a stdout en el root logger y loggers por componente
bajo el namespace "aptostock.<componente>".

Componentes que loguean:
  price_oracle, price_history, balance_ledger, pool_ledger, snapshots,
  mint_usecase, swap_usecase, event_bus, ws_manager, api.routes, database
"""

from __future__ import annotations

import logging
import sys
from typing import Iterable, Union

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)-30s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
ROOT_NAMESPACE = "aptostock"

# Librerías que en DEBUG inundan la salida (queries SQL, access log)
NOISY_LOGGERS = ("sqlalchemy.engine", "uvicorn.access")


def setup_logging(
    level: Union[int, str] = logging.INFO,
    quiet: Iterable[str] = NOISY_LOGGERS,
) -> None:
    """
    Configurar el root logger. Idempotente: llamarlo de nuevo solo
    cambia el nivel, nunca añade un segundo handler.

    Args:
        level: nivel numérico o nombre ("DEBUG", "info", ...).
        quiet: loggers de terceros que se fijan en WARNING.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Nivel de log desconocido: {level}")

    root = logging.getLogger()
    if not any(getattr(h, "_aptostock", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        handler._aptostock = True  # marca para no duplicar
        root.addHandler(handler)
    root.setLevel(level)

    for name in quiet:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Logger del componente `name` dentro del namespace de la app."""
    return logging.getLogger(f"{ROOT_NAMESPACE}.{name}")
