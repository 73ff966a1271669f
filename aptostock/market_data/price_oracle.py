"""
AptoStock – Price Oracle (paseo aleatorio sintético)
=====================================================
Genera precios para TLSA y CRCL cotizados en USDA.

MÁQUINA DE ESTADOS:

    RUNNING ──pause()──▸ PAUSED
    PAUSED ──resume()──▸ RUNNING

    Solo se generan ticks en RUNNING.

TICK (cada `interval_ms`, por defecto 3000):
    Para cada token, de forma independiente:
        bps   ~ U[-volatility_bps, +volatility_bps]
        next  = price · (1 + bps / 10_000 + drift)
        next  = clamp(round(next, 2), 0.01, 1_000_000)
    Se emite UN PriceSnapshot con ambos tokens y el mismo timestamp.

CANCELACIÓN:
- pause() cancela el RepeatingTask de forma síncrona y además tick() verifica
  el estado, así que ningún tick muta precios después de que pause() retorna.
- resume() programa un intervalo NUEVO desde el instante del resume.

PUSH:
- Cada snapshot emitido se entrega a los suscriptores síncronos
  (on_price_snapshot) y, si hay publisher, al tópico "prices" del EventBus.
"""

from __future__ import annotations

import random
import time
from enum import Enum
from typing import Callable, Dict, List, Mapping, Optional

from aptostock.application.ports.event_publisher import IEventPublisher
from aptostock.application.ports.price_source import IPriceSource
from aptostock.domain.events.domain_events import PricesUpdated
from aptostock.domain.services.precision import clamp, round_price
from aptostock.domain.value_objects.price import PriceSnapshot
from aptostock.domain.value_objects.units import Asset
from aptostock.infrastructure.scheduling.repeating_task import RepeatingTask
from aptostock.shared.logging.logger import get_logger
from aptostock.state.snapshots import PRICES_KEY, PricesBlob, SnapshotStore

logger = get_logger("price_oracle")

PRICES_TOPIC = "prices"

DEFAULT_SEED_PRICES: Dict[Asset, float] = {Asset.TLSA: 120.0, Asset.CRCL: 240.0}
DEFAULT_INTERVAL_MS = 3000
DEFAULT_VOLATILITY_BPS = 20.0
DEFAULT_DRIFT = 0.0002
MIN_PRICE = 0.01
MAX_PRICE = 1_000_000.0

PriceListener = Callable[[PriceSnapshot], None]


class OracleState(str, Enum):
    """Estados del oráculo."""
    RUNNING = "RUNNING"
    PAUSED = "PAUSED"


class PriceOracle(IPriceSource):
    """
    Oráculo de precios con paseo aleatorio y deriva positiva.

    Uso:
        oracle = PriceOracle(store, rng=random.Random(7))
        oracle.subscribe(history.on_price_snapshot)
        oracle.start()      # dentro de un event loop
        oracle.pause()
        oracle.resume()
    """

    def __init__(
        self,
        store: SnapshotStore,
        *,
        interval_ms: int = DEFAULT_INTERVAL_MS,
        volatility_bps: float = DEFAULT_VOLATILITY_BPS,
        drift: float = DEFAULT_DRIFT,
        min_price: float = MIN_PRICE,
        max_price: float = MAX_PRICE,
        seed_prices: Optional[Mapping[Asset, float]] = None,
        initial_state: OracleState = OracleState.RUNNING,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.time,
        publisher: Optional[IEventPublisher] = None,
    ) -> None:
        self._store = store
        self._interval_ms = interval_ms
        self._volatility_bps = volatility_bps
        self._drift = drift
        self._min_price = min_price
        self._max_price = max_price
        self._seed: Dict[Asset, float] = dict(seed_prices or DEFAULT_SEED_PRICES)
        self._state = initial_state
        self._rng = rng or random.Random()
        self._clock = clock
        self._publisher = publisher
        self._listeners: List[PriceListener] = []
        self._task = RepeatingTask(self._on_timer, interval_ms / 1000, name="price-oracle-tick")
        self._started = False
        self._ticks = 0

        self._snapshot = PriceSnapshot(prices=self._load(), timestamp=self._now_ms())

    # ──────────────────────── Persistencia ──────────────────────────────

    def _load(self) -> Dict[Asset, float]:
        blob = self._store.load(PRICES_KEY, PricesBlob)
        if blob is None:
            return dict(self._seed)
        logger.info("Precios restaurados desde snapshot: TLSA=%.2f CRCL=%.2f", blob.TLSA, blob.CRCL)
        return {asset: self._bound(getattr(blob, asset.value)) for asset in Asset}

    def _save(self) -> None:
        self._store.save(
            PRICES_KEY,
            PricesBlob(**{asset.value: price for asset, price in self._snapshot.prices.items()}),
        )

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    # ──────────────────────── Consultas ─────────────────────────────────

    @property
    def prices(self) -> PriceSnapshot:
        return self._snapshot

    def price(self, asset: Asset) -> float:
        return self._snapshot.price(asset)

    @property
    def state(self) -> OracleState:
        return self._state

    @property
    def is_paused(self) -> bool:
        return self._state is OracleState.PAUSED

    @property
    def is_ticking(self) -> bool:
        return self._task.is_running

    @property
    def stats(self) -> dict:
        return {
            "state": self._state.value,
            "ticking": self.is_ticking,
            "ticks": self._ticks,
            "interval_ms": self._interval_ms,
            "volatility_bps": self._volatility_bps,
            "drift": self._drift,
        }

    def subscribe(self, listener: PriceListener) -> None:
        """Registrar un consumidor push de snapshots."""
        self._listeners.append(listener)

    # ──────────────────────── Paseo aleatorio ───────────────────────────

    def _bound(self, price: float) -> float:
        return clamp(round_price(price), self._min_price, self._max_price)

    def next_price(self, price: float) -> float:
        """Un paso del paseo aleatorio para un token."""
        rnd_bps = self._rng.uniform(-self._volatility_bps, self._volatility_bps)
        fraction = rnd_bps / 10_000
        return self._bound(price * (1 + fraction + self._drift))

    def tick(self) -> Optional[PriceSnapshot]:
        """
        Generar y emitir un snapshot nuevo.

        Returns: el snapshot emitido, o None si el oráculo está PAUSED.
        """
        if self._state is not OracleState.RUNNING:
            return None

        current = self._snapshot
        self._snapshot = PriceSnapshot(
            prices={asset: self.next_price(current.price(asset)) for asset in Asset},
            timestamp=self._now_ms(),
        )
        self._ticks += 1
        self._emit()
        logger.debug(
            "Tick #%d TLSA=%.2f CRCL=%.2f",
            self._ticks,
            self._snapshot.price(Asset.TLSA),
            self._snapshot.price(Asset.CRCL),
        )
        return self._snapshot

    def _emit(self) -> None:
        self._save()
        for listener in self._listeners:
            try:
                listener(self._snapshot)
            except Exception as e:
                logger.error("Error en suscriptor del oráculo: %s", e, exc_info=True)

    async def _on_timer(self) -> None:
        snapshot = self.tick()
        if snapshot is None or self._publisher is None:
            return
        await self._publisher.publish(
            PRICES_TOPIC,
            PricesUpdated(
                prices={asset.value: price for asset, price in snapshot.prices.items()},
                price_timestamp=snapshot.timestamp,
            ),
        )

    # ──────────────────────── Lifecycle ─────────────────────────────────

    def start(self) -> None:
        """Enganchar el timer al event loop (arranque de la app)."""
        self._started = True
        if self._state is OracleState.RUNNING:
            self._task.start()
        logger.info(
            "PriceOracle iniciado (estado=%s, intervalo=%dms, volatilidad=%.1fbps)",
            self._state.value, self._interval_ms, self._volatility_bps,
        )

    async def stop(self) -> None:
        """Desenganchar el timer (shutdown). No cambia el estado."""
        self._started = False
        await self._task.stop()
        logger.info("PriceOracle detenido. Ticks emitidos: %d", self._ticks)

    def pause(self) -> None:
        """RUNNING → PAUSED. Síncrono e idempotente."""
        if self._state is OracleState.PAUSED:
            return
        self._state = OracleState.PAUSED
        self._task.cancel()
        logger.info("PriceOracle pausado")

    def resume(self) -> None:
        """PAUSED → RUNNING con un intervalo nuevo desde ahora."""
        if self._state is OracleState.RUNNING:
            return
        self._state = OracleState.RUNNING
        if self._started:
            self._task.start()
        logger.info("PriceOracle reanudado")

    # ──────────────────────── Overrides ─────────────────────────────────

    def reset(self) -> PriceSnapshot:
        """Volver a los precios semilla y emitirlos."""
        self._snapshot = PriceSnapshot(
            prices={asset: self._bound(self._seed[asset]) for asset in Asset},
            timestamp=self._now_ms(),
        )
        self._emit()
        logger.info("Precios reiniciados a semilla")
        return self._snapshot

    def set_prices(self, prices: Mapping[Asset, float]) -> PriceSnapshot:
        """Fijar precios manualmente (redondeados y acotados) y emitirlos."""
        merged = {asset: self._bound(prices.get(asset, self.price(asset))) for asset in Asset}
        self._snapshot = PriceSnapshot(prices=merged, timestamp=self._now_ms())
        self._emit()
        return self._snapshot
