"""
Dependency Injection Container.

Este módulo proporciona el contenedor de inyección de dependencias
que gestiona todas las instancias de ledgers, oráculo y casos de uso.

Clean Architecture: Este contenedor vive en la capa más externa y es el único
lugar donde se crean dependencias concretas.
"""

from __future__ import annotations

import random
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from aptostock.application.ports.event_publisher import IEventPublisher
from aptostock.application.ports.key_value_store import IKeyValueStore
from aptostock.domain.entities.pool import Pool
from aptostock.domain.value_objects.units import Asset, PoolKey, Unit
from aptostock.market_data.price_oracle import OracleState, PriceOracle
from aptostock.shared.config.settings import Settings
from aptostock.state.balance_ledger import BalanceLedger
from aptostock.state.pool_ledger import PoolLedger
from aptostock.state.price_history import PriceHistory
from aptostock.state.snapshots import SnapshotStore


@dataclass
class Container:
    """
    Contenedor de Inyección de Dependencias.

    Todas las dependencias se crean de forma perezosa (singleton por
    contenedor). Los tests pueden inyectar un kv_store o un rng propios
    con override() antes del primer acceso.
    """

    # Configuración
    settings: Settings = field(default_factory=Settings)

    # Infraestructura
    _kv_store: Optional[IKeyValueStore] = None
    _db_manager: Optional[Any] = None
    _event_bus: Optional[IEventPublisher] = None
    _ws_manager: Optional[Any] = None
    _rng: Optional[random.Random] = None
    _clock: Optional[Callable[[], float]] = None

    # Estado de la sesión
    _snapshot_store: Optional[SnapshotStore] = None
    _balance_ledger: Optional[BalanceLedger] = None
    _pool_ledger: Optional[PoolLedger] = None
    _price_oracle: Optional[PriceOracle] = None
    _price_history: Optional[PriceHistory] = None

    # ==================== Infraestructura ====================

    @property
    def rng(self) -> random.Random:
        if self._rng is None:
            self._rng = random.Random(self.settings.oracle_rng_seed)
        return self._rng

    @property
    def clock(self) -> Callable[[], float]:
        """Reloj en segundos epoch compartido por oráculo e historial."""
        if self._clock is None:
            self._clock = time.time
        return self._clock

    @property
    def db_manager(self):
        """DatabaseManager (solo si db_enabled)."""
        if self._db_manager is None:
            from aptostock.infrastructure.persistence.database import DatabaseManager
            self._db_manager = DatabaseManager(self.settings)
        return self._db_manager

    @property
    def kv_store(self) -> IKeyValueStore:
        """Store de snapshots: SQL si db_enabled, memoria si no."""
        if self._kv_store is None:
            from aptostock.infrastructure.persistence.repositories.kv_store_impl import (
                InMemoryKeyValueStore,
                SqlKeyValueStore,
            )
            if self.settings.db_enabled:
                self._kv_store = SqlKeyValueStore(self.db_manager)
            else:
                self._kv_store = InMemoryKeyValueStore()
        return self._kv_store

    @property
    def snapshot_store(self) -> SnapshotStore:
        if self._snapshot_store is None:
            self._snapshot_store = SnapshotStore(self.kv_store)
        return self._snapshot_store

    @property
    def event_bus(self) -> IEventPublisher:
        """Obtiene el publicador de eventos."""
        if self._event_bus is None:
            from aptostock.infrastructure.external.event_bus_adapter import EventBus
            self._event_bus = EventBus(max_queue_size=self.settings.event_bus_max_queue_size)
        return self._event_bus

    @property
    def ws_manager(self):
        if self._ws_manager is None:
            from aptostock.presentation.websocket.websocket_manager import WebSocketManager
            self._ws_manager = WebSocketManager(self.event_bus, snapshot_provider=self.snapshot)
        return self._ws_manager

    # ==================== Estado ====================

    @property
    def balance_ledger(self) -> BalanceLedger:
        if self._balance_ledger is None:
            s = self.settings
            self._balance_ledger = BalanceLedger(
                self.snapshot_store,
                seed={Unit.USDA: s.balance_seed_usda, Unit.TLSA: 0.0, Unit.CRCL: 0.0},
            )
        return self._balance_ledger

    @property
    def pool_ledger(self) -> PoolLedger:
        if self._pool_ledger is None:
            s = self.settings
            self._pool_ledger = PoolLedger(
                self.snapshot_store,
                seed={
                    PoolKey.TLSA_USDA: Pool(
                        asset=Asset.TLSA,
                        reserve_asset=s.pool_seed_asset_reserve,
                        reserve_stable=s.pool_seed_tlsa_stable_reserve,
                    ),
                    PoolKey.CRCL_USDA: Pool(
                        asset=Asset.CRCL,
                        reserve_asset=s.pool_seed_asset_reserve,
                        reserve_stable=s.pool_seed_crcl_stable_reserve,
                    ),
                },
            )
        return self._pool_ledger

    @property
    def price_oracle(self) -> PriceOracle:
        """Oráculo con el historial ya suscrito."""
        if self._price_oracle is None:
            s = self.settings
            self._price_oracle = PriceOracle(
                self.snapshot_store,
                interval_ms=s.oracle_interval_ms,
                volatility_bps=s.oracle_volatility_bps,
                drift=s.oracle_drift,
                min_price=s.oracle_min_price,
                max_price=s.oracle_max_price,
                seed_prices={Asset.TLSA: s.oracle_seed_tlsa, Asset.CRCL: s.oracle_seed_crcl},
                initial_state=OracleState.PAUSED if s.oracle_start_paused else OracleState.RUNNING,
                rng=self.rng,
                clock=self.clock,
                publisher=self.event_bus,
            )
            self._price_oracle.subscribe(self.price_history.on_price_snapshot)
        return self._price_oracle

    @property
    def price_history(self) -> PriceHistory:
        if self._price_history is None:
            s = self.settings
            self._price_history = PriceHistory(
                self.snapshot_store,
                max_points=s.history_max_points,
                frame_ms=s.candle_frame_ms,
                max_candles=s.max_candles,
                backfill_points=(s.backfill_minutes * 60_000) // s.backfill_step_ms,
                backfill_step_ms=s.backfill_step_ms,
                backfill_step_pct=s.backfill_step_pct,
                rng=self.rng,
                clock=self.clock,
            )
        return self._price_history

    def snapshot(self) -> dict:
        """Estado completo de la demo (API /status y WS al conectar)."""
        return {
            "oracle": self.price_oracle.stats,
            "prices": self.price_oracle.prices.to_dict(),
            "balances": self.balance_ledger.to_dict(),
            "pools": self.pool_ledger.to_dict(),
        }

    # ==================== Use Cases ====================

    def get_mint_usecase(self):
        """Factory para MintUseCase."""
        from aptostock.application.use_cases.mint_usecase import MintUseCase
        return MintUseCase(balances=self.balance_ledger, oracle=self.price_oracle)

    def get_swap_usecase(self):
        """Factory para SwapUseCase."""
        from aptostock.application.use_cases.swap_usecase import SwapUseCase
        return SwapUseCase(
            balances=self.balance_ledger,
            pools=self.pool_ledger,
            fee_rate=self.settings.swap_fee_rate,
        )

    def get_reset_demo_usecase(self):
        """Factory para ResetDemoUseCase."""
        from aptostock.application.use_cases.reset_demo_usecase import ResetDemoUseCase
        return ResetDemoUseCase(balances=self.balance_ledger, pools=self.pool_ledger)

    # ==================== Lifecycle ====================

    def reset(self) -> None:
        """Resetea todas las instancias (útil para tests)."""
        self._kv_store = None
        self._db_manager = None
        self._event_bus = None
        self._ws_manager = None
        self._rng = None
        self._clock = None
        self._snapshot_store = None
        self._balance_ledger = None
        self._pool_ledger = None
        self._price_oracle = None
        self._price_history = None

    def override(self, name: str, instance: Any) -> None:
        """
        Override una dependencia (útil para tests).

        Args:
            name: Nombre de la dependencia (ej: 'kv_store', 'rng')
            instance: Instancia a usar
        """
        attr_name = f"_{name}"
        if hasattr(self, attr_name):
            setattr(self, attr_name, instance)
        else:
            raise ValueError(f"Unknown dependency: {name}")


# ==================== Global Container ====================

_container: Optional[Container] = None


def get_container() -> Container:
    """
    Obtiene la instancia global del contenedor.

    Patrón Singleton para asegurar una única instancia
    compartida en toda la aplicación.
    """
    global _container
    if _container is None:
        _container = Container()
    return _container


def reset_container() -> None:
    """Resetea el contenedor global."""
    global _container
    if _container is not None:
        _container.reset()
    _container = None


def init_container(settings: Optional[Settings] = None) -> Container:
    """
    Inicializa el contenedor con configuración específica.

    Args:
        settings: Configuración opcional. Si es None, usa valores por defecto.
    """
    global _container
    if settings is None:
        settings = Settings()
    _container = Container(settings=settings)
    return _container
