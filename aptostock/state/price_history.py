"""
AptoStock – Price History
===========================
Historial de precios por token y velas derivadas bajo demanda.

PROTECCIÓN DE MEMORIA:
- Cada token usa collections.deque con maxlen → al superar el límite
  (600 por defecto) se descarta el punto más antiguo (FIFO). O(1).

DEDUPLICACIÓN:
- Solo se registra un punto si el precio difiere del último registrado
  para ese token. Los ticks sin cambio no generan puntos.

BACKFILL:
- Al arrancar, si NO hay historial persistido, se puede sembrar una serie
  sintética (~20 min a 5 s) caminando hacia atrás desde el precio actual
  con pasos de ±0.4 %. Como mucho una vez por sesión.

Las velas NO se almacenan: candles() las recalcula con to_candles().
"""

from __future__ import annotations

import random
import time
from collections import deque
from typing import Callable, Deque, Dict, List, Optional

from aptostock.domain.entities.candle import Candle
from aptostock.domain.services.candle_aggregator import DEFAULT_CANDLE_LIMIT, to_candles
from aptostock.domain.services.precision import round_price
from aptostock.domain.value_objects.price import PricePoint, PriceSnapshot
from aptostock.domain.value_objects.units import Asset
from aptostock.shared.logging.logger import get_logger
from aptostock.state.snapshots import HISTORY_KEY, HistoryBlob, PointBlob, SnapshotStore

logger = get_logger("price_history")

DEFAULT_MAX_POINTS = 600
DEFAULT_FRAME_MS = 10_000
DEFAULT_BACKFILL_POINTS = 240       # 20 min / 5 s
DEFAULT_BACKFILL_STEP_MS = 5_000
DEFAULT_BACKFILL_STEP_PCT = 0.004
MIN_BACKFILL_PRICE = 0.01


class PriceHistory:
    """
    Gestor del historial de puntos por token.

    Acceso:
        history.on_price_snapshot(snapshot)   # push desde el oráculo
        history.points(Asset.TLSA)            → list[PricePoint]
        history.candles(Asset.TLSA, 10_000)   → list[Candle]
    """

    def __init__(
        self,
        store: SnapshotStore,
        *,
        max_points: int = DEFAULT_MAX_POINTS,
        frame_ms: int = DEFAULT_FRAME_MS,
        max_candles: int = DEFAULT_CANDLE_LIMIT,
        backfill_points: int = DEFAULT_BACKFILL_POINTS,
        backfill_step_ms: int = DEFAULT_BACKFILL_STEP_MS,
        backfill_step_pct: float = DEFAULT_BACKFILL_STEP_PCT,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if max_points <= 0:
            raise ValueError(f"max_points debe ser positivo, recibido {max_points}")
        self._store = store
        self._max_points = max_points
        self._frame_ms = frame_ms
        self._max_candles = max_candles
        self._backfill_points = backfill_points
        self._backfill_step_ms = backfill_step_ms
        self._backfill_step_pct = backfill_step_pct
        self._rng = rng or random.Random()
        self._clock = clock
        self._backfill_attempted = False

        self._points: Dict[Asset, Deque[PricePoint]] = {
            asset: deque(maxlen=max_points) for asset in Asset
        }
        self._last_price: Dict[Asset, Optional[float]] = {asset: None for asset in Asset}
        self._loaded_from_store = self._load()

    # ──────────────────────── Persistencia ──────────────────────────────

    def _load(self) -> bool:
        blob = self._store.load(HISTORY_KEY, HistoryBlob)
        if blob is None:
            return False
        for asset in Asset:
            for point in getattr(blob, asset.value):
                self._points[asset].append(PricePoint(t=point.t, p=point.p))
            if self._points[asset]:
                self._last_price[asset] = self._points[asset][-1].p
        restored = self.has_history
        if restored:
            logger.info(
                "Historial restaurado: TLSA=%d puntos, CRCL=%d puntos",
                len(self._points[Asset.TLSA]), len(self._points[Asset.CRCL]),
            )
        return restored

    def _save(self) -> None:
        self._store.save(
            HISTORY_KEY,
            HistoryBlob(**{
                asset.value: [PointBlob(t=pt.t, p=pt.p) for pt in self._points[asset]]
                for asset in Asset
            }),
        )

    # ──────────────────────── Ingesta ───────────────────────────────────

    def record(self, asset: Asset, price: float, timestamp_ms: int) -> bool:
        """
        Registrar una observación si el precio cambió.

        Returns: True si se añadió un punto.
        """
        if self._last_price[asset] == price:
            return False
        self._last_price[asset] = price
        self._points[asset].append(PricePoint(t=int(timestamp_ms), p=price))
        return True

    def on_price_snapshot(self, snapshot: PriceSnapshot) -> None:
        """Suscriptor del oráculo: un snapshot por tick completado."""
        changed = False
        for asset in Asset:
            if self.record(asset, snapshot.price(asset), snapshot.timestamp):
                changed = True
        if changed:
            self._save()

    # ──────────────────────── Consultas ─────────────────────────────────

    @property
    def has_history(self) -> bool:
        return any(self._points[asset] for asset in Asset)

    @property
    def max_points(self) -> int:
        return self._max_points

    @property
    def frame_ms(self) -> int:
        return self._frame_ms

    def points(self, asset: Asset, count: Optional[int] = None) -> List[PricePoint]:
        """Últimos N puntos de un token (todos si count es None)."""
        pts = list(self._points[asset])
        if count is None:
            return pts
        return pts[-count:] if count > 0 else []

    def candles(self, asset: Asset, frame_ms: Optional[int] = None) -> List[Candle]:
        """Velas OHLC derivadas del historial del token."""
        return to_candles(
            self._points[asset],
            frame_ms or self._frame_ms,
            limit=self._max_candles,
            symbol=asset.value,
        )

    def to_dict(self) -> dict:
        return {
            asset.value: [pt.to_dict() for pt in self._points[asset]]
            for asset in Asset
        }

    # ──────────────────────── Backfill ──────────────────────────────────

    def seed_backfill(self, snapshot: PriceSnapshot, now_ms: Optional[int] = None) -> int:
        """
        Sembrar historial sintético caminando hacia atrás desde el precio actual.

        Se omite si ya se intentó en esta sesión o si existe historial.
        Returns: puntos generados por token (0 si se omitió).
        """
        if self._backfill_attempted:
            return 0
        self._backfill_attempted = True

        if self._loaded_from_store or self.has_history:
            logger.info("Backfill omitido: ya existe historial")
            return 0

        now = int(self._clock() * 1000) if now_ms is None else int(now_ms)
        count = min(self._max_points, self._backfill_points)
        if count <= 0:
            return 0

        for asset in Asset:
            price = snapshot.price(asset)
            walked: List[PricePoint] = []
            for i in range(count):
                walked.append(PricePoint(t=now - i * self._backfill_step_ms, p=price))
                step = self._rng.uniform(-self._backfill_step_pct, self._backfill_step_pct)
                price = max(MIN_BACKFILL_PRICE, round_price(price * (1 + step)))
            walked.reverse()
            self._points[asset].extend(walked)
            self._last_price[asset] = walked[-1].p

        self._save()
        logger.info(
            "Backfill sintético: %d puntos por token (paso=%dms, ±%.2f%%)",
            count, self._backfill_step_ms, self._backfill_step_pct * 100,
        )
        return count

    # ──────────────────────── Reset ─────────────────────────────────────

    def reset(self) -> None:
        """Vaciar todos los puntos y la memoria de deduplicación."""
        for asset in Asset:
            self._points[asset].clear()
            self._last_price[asset] = None
        self._save()
        logger.info("Historial de precios vaciado")
