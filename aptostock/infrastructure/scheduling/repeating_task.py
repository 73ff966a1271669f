"""
AptoStock – Repeating Task (scheduler asyncio cancelable)
==========================================================
Ejecuta un callback cada `interval` segundos dentro del event loop.

CICLO DE VIDA:
  1. start()  → crea un task nuevo; el primer disparo ocurre `interval`
                segundos DESPUÉS del start (nunca se retoma un horario viejo).
  2. cancel() → síncrono: invalida la generación actual y cancela el task.
  3. stop()   → igual que cancel() pero espera a que el task termine
                (shutdown limpio).

CÓMO SE EVITA UN TICK DESPUÉS DE CANCELAR:
- Cada start() abre una "generación" nueva. El loop compara su generación
  con la actual al despertar y ANTES de invocar el callback.
- cancel() incrementa la generación de forma síncrona; cuando retorna,
  ningún loop anterior puede volver a invocar el callback, aunque el
  CancelledError todavía no se haya entregado.

ERRORES:
- Una excepción del callback se loguea y el loop continúa.
"""

from __future__ import annotations

import asyncio
import inspect
from typing import Awaitable, Callable, Optional, Union

from aptostock.shared.logging.logger import get_logger

logger = get_logger("repeating_task")

TickCallback = Callable[[], Union[None, Awaitable[None]]]


class RepeatingTask:
    """Tarea periódica cancelable de forma síncrona."""

    def __init__(self, callback: TickCallback, interval_seconds: float, name: str = "repeating-task") -> None:
        if interval_seconds <= 0:
            raise ValueError(f"interval_seconds debe ser positivo, recibido {interval_seconds}")
        self._callback = callback
        self._interval = interval_seconds
        self._name = name
        self._generation = 0
        self._task: Optional[asyncio.Task] = None
        self._runs = 0

    # ──────────────────────── Lifecycle ──────────────────────────────────

    def start(self) -> None:
        """Programar el loop. Idempotente; requiere un event loop corriendo."""
        if self.is_running:
            return
        loop = asyncio.get_running_loop()
        self._generation += 1
        self._task = loop.create_task(self._run(self._generation), name=self._name)
        logger.debug("%s iniciado (interval=%.3fs)", self._name, self._interval)

    def cancel(self) -> None:
        """Cancelar inmediatamente. Tras retornar no se invoca más el callback."""
        self._generation += 1
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
            logger.debug("%s cancelado", self._name)

    async def stop(self) -> None:
        """Cancelar y esperar a que el task termine."""
        task = self._task
        self.cancel()
        if task is not None:
            try:
                await task
            except asyncio.CancelledError:
                pass

    # ──────────────────────── Estado ────────────────────────────────────

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def runs(self) -> int:
        """Callbacks ejecutados desde la creación."""
        return self._runs

    # ──────────────────────── Loop ──────────────────────────────────────

    async def _run(self, generation: int) -> None:
        try:
            while generation == self._generation:
                await asyncio.sleep(self._interval)
                if generation != self._generation:
                    break
                try:
                    result = self._callback()
                    if inspect.isawaitable(result):
                        await result
                    self._runs += 1
                except Exception as e:
                    logger.error("Error en callback de %s: %s", self._name, e, exc_info=True)
        except asyncio.CancelledError:
            pass  # Shutdown limpio
