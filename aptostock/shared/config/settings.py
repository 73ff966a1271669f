"""
AptoStock – Settings (Pydantic BaseSettings)
=============================================
Configuración centralizada cargada desde variables de entorno / .env.
Se usa pydantic-settings para validación estricta al arranque.

Valores por defecto de la demo: oráculo cada 3s,
fee 0.3%, pools sembrados a 120 y 240 USDA por token.
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ─── Price Oracle ───────────────────────────────────────────────────
    oracle_interval_ms: int = Field(
        default=3000, gt=0, description="Intervalo entre ticks del oráculo (ms)"
    )
    oracle_volatility_bps: float = Field(
        default=20.0, ge=0, description="Amplitud máxima del paseo aleatorio (bps)"
    )
    oracle_drift: float = Field(
        default=0.0002, description="Deriva positiva constante por tick"
    )
    oracle_min_price: float = Field(default=0.01, gt=0)
    oracle_max_price: float = Field(default=1_000_000.0, gt=0)
    oracle_seed_tlsa: float = Field(default=120.0, gt=0, description="Precio inicial TLSA")
    oracle_seed_crcl: float = Field(default=240.0, gt=0, description="Precio inicial CRCL")
    oracle_start_paused: bool = Field(
        default=False, description="Arrancar el oráculo en estado PAUSED"
    )
    oracle_rng_seed: Optional[int] = Field(
        default=None, description="Semilla del RNG (None = no determinista)"
    )

    # ─── AMM ────────────────────────────────────────────────────────────
    swap_fee_rate: float = Field(
        default=0.003, ge=0, lt=1, description="Fee del pool (0.003 = 0.3%)"
    )
    pool_seed_asset_reserve: float = Field(default=1000.0, gt=0)
    pool_seed_tlsa_stable_reserve: float = Field(default=120_000.0, gt=0)
    pool_seed_crcl_stable_reserve: float = Field(default=240_000.0, gt=0)

    # ─── Balances ───────────────────────────────────────────────────────
    balance_seed_usda: float = Field(default=10_000.0, ge=0)

    # ─── Price History ──────────────────────────────────────────────────
    history_max_points: int = Field(
        default=600, gt=0, description="Máximo de puntos por símbolo (FIFO)"
    )
    candle_frame_ms: int = Field(
        default=10_000, gt=0, description="Ancho de vela por defecto (ms)"
    )
    max_candles: int = Field(default=60, gt=0, description="Velas devueltas como máximo")
    backfill_minutes: int = Field(
        default=20, ge=0, description="Minutos de historial sintético al arrancar"
    )
    backfill_step_ms: int = Field(default=5000, gt=0)
    backfill_step_pct: float = Field(
        default=0.004, ge=0, description="Variación máxima por paso del backfill"
    )

    # ─── Event Bus ──────────────────────────────────────────────────────
    event_bus_max_queue_size: int = Field(
        default=1_000,
        description="Tamaño máximo de cola del Event Bus para contrapresión",
    )

    # ─── Server ─────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8888)
    debug: bool = Field(default=False)

    # ─── Database (key-value de snapshots) ──────────────────────────────
    db_enabled: bool = Field(
        default=False, description="Persistir snapshots en SQL (si no, en memoria)"
    )
    db_url: str = Field(default="sqlite:///aptostock.db", description="URL SQLAlchemy")
    db_echo: bool = Field(default=False, description="Loguear queries SQL (debug)")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


# Singleton global – se importa donde se necesite
settings = Settings()
