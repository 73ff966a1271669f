"""
AptoStock – Main Application Entry Point
==========================================
Orquesta todos los componentes: Price Oracle + Ledgers + Historial + API.

ARQUITECTURA DE ARRANQUE:
  1. Configurar logging
  2. Crear instancias desde el Container (ledgers, oráculo, historial, EventBus)
  3. FastAPI lifespan startup:
     a. Backfill sintético del historial (solo si no hay historial)
     b. Iniciar WebSocketManager (broadcast a frontend)
     c. Iniciar el timer del PriceOracle
  4. FastAPI lifespan shutdown:
     a. Detener todo en orden inverso

FLUJO DE DATOS:
  PriceOracle (cada 3s) → PriceHistory.on_price_snapshot
                        → EventBus(prices) → WebSocketManager → Frontend
  POST /api/mint | /api/swap → UseCase → Ledgers
                        → EventBus(trade) → WebSocketManager → Frontend

  uvicorn aptostock.main:app --reload --host 0.0.0.0 --port 8888
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from aptostock import __version__
from aptostock.container import Container, init_container
from aptostock.domain.exceptions.domain_errors import DomainError
from aptostock.presentation.api.routes import init_routes, router
from aptostock.shared.logging.logger import get_logger, setup_logging

logger = get_logger("main")


def create_app(container: Optional[Container] = None) -> FastAPI:
    """Construir la app FastAPI sobre un Container (uno nuevo si es None)."""
    container = container or init_container()
    settings = container.settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup/shutdown lifecycle de la aplicación."""
        setup_logging(logging.DEBUG if settings.debug else logging.INFO)

        logger.info("=" * 60)
        logger.info("  AptoStock Demo DEX v%s", __version__)
        logger.info("  Oráculo: cada %dms, ±%.1fbps, drift=%.4f",
                    settings.oracle_interval_ms,
                    settings.oracle_volatility_bps,
                    settings.oracle_drift)
        logger.info("  AMM: fee=%.2f%%", settings.swap_fee_rate * 100)
        logger.info("  Historial: %d puntos por token, velas de %dms",
                    settings.history_max_points, settings.candle_frame_ms)
        logger.info("  Snapshots: %s", "SQL (%s)" % settings.db_url if settings.db_enabled else "memoria")
        logger.info("=" * 60)

        oracle = container.price_oracle
        history = container.price_history

        init_routes(
            ws_manager=container.ws_manager,
            event_bus=container.event_bus,
            oracle=oracle,
            history=history,
            balances=container.balance_ledger,
            pools=container.pool_ledger,
            mint_usecase=container.get_mint_usecase(),
            swap_usecase=container.get_swap_usecase(),
            reset_demo_usecase=container.get_reset_demo_usecase(),
            status_provider=container.snapshot,
        )

        history.seed_backfill(oracle.prices)
        await container.ws_manager.start()
        oracle.start()

        logger.info("✓ Todos los componentes iniciados correctamente")

        yield  # ← La app está corriendo aquí

        # ── SHUTDOWN ──
        logger.info("Iniciando shutdown...")
        await oracle.stop()
        await container.ws_manager.stop()
        await container.event_bus.unsubscribe_all()
        if settings.db_enabled:
            container.db_manager.close()
        logger.info("✓ Shutdown completo")

    app = FastAPI(
        title="AptoStock Demo DEX",
        description="Mint de tokens sintéticos, swaps AMM y oráculo de precios simulado",
        version=__version__,
        lifespan=lifespan,
    )

    # CORS para frontend local
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
        logger.warning("DomainError en %s: %s", request.url.path, exc.message)
        return JSONResponse(status_code=409, content=exc.to_dict())

    app.include_router(router)
    return app


app = create_app()


def run() -> None:
    """Arrancar el servidor con uvicorn (host/port desde Settings)."""
    import uvicorn

    from aptostock.shared.config.settings import settings

    uvicorn.run("aptostock.main:app", host=settings.host, port=settings.port, reload=settings.debug)


if __name__ == "__main__":
    run()
