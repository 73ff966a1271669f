"""
AptoStock – SQLAlchemy ORM Base Configuration
===============================================
Base declarativa y manager de conexión para el snapshot store SQL.

El engine es SÍNCRONO: las operaciones de los ledgers no se suspenden
(quote → apply debe ser atómico respecto al timer del oráculo), así que
el store se llama directamente desde el event loop. Por defecto SQLite.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import MetaData, create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from aptostock.shared.config.settings import Settings
from aptostock.shared.logging.logger import get_logger

logger = get_logger("database")

# ─── Naming Convention (para migraciones consistentes) ─────────────────────
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Base declarativa para todos los modelos ORM."""

    metadata = MetaData(naming_convention=NAMING_CONVENTION)


class DatabaseManager:
    """
    Manager de conexión SQLAlchemy.

    USO:
        db = DatabaseManager(settings)
        db.initialize()          # crea engine y tablas

        with db.session() as session:
            session.get(KeyValueBlobModel, "apto_balances_v1")

        db.close()               # shutdown
    """

    def __init__(self, settings: Optional[Settings] = None, url: Optional[str] = None) -> None:
        self._settings = settings or Settings()
        self._url = url or self._settings.db_url
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

    @property
    def database_url(self) -> str:
        return self._url

    @property
    def is_initialized(self) -> bool:
        return self._engine is not None

    def initialize(self) -> None:
        """Crear engine, session factory y tablas. Idempotente."""
        if self._engine is not None:
            return

        # Registrar modelos en Base.metadata antes de create_all
        from aptostock.infrastructure.persistence.models import KeyValueBlobModel  # noqa: F401

        engine = create_engine(
            self._url,
            echo=self._settings.db_echo,
            pool_pre_ping=True,
        )
        try:
            Base.metadata.create_all(engine)
        except Exception:
            # Sin engine a medias: la próxima llamada reintenta desde cero
            engine.dispose()
            raise

        self._engine = engine
        self._session_factory = sessionmaker(
            bind=self._engine,
            expire_on_commit=False,
            autoflush=False,
        )
        logger.info("Base de datos inicializada (%s)", self._engine.url.render_as_string(hide_password=True))

    def close(self) -> None:
        """Cerrar el engine y todas las conexiones del pool."""
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            self._session_factory = None
            logger.info("Conexión a base de datos cerrada")

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Sesión con commit al salir y rollback ante error."""
        if self._session_factory is None:
            raise RuntimeError("DatabaseManager no inicializado. Llama a initialize() primero.")

        with self._session_factory() as session:
            try:
                yield session
                session.commit()
            except Exception:
                session.rollback()
                raise
