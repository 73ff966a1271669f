"""
AptoStock – Key/Value Blob ORM Model
======================================
Modelo para la tabla `kv_blobs`: un blob JSON por ledger.

DECISIONES DE DISEÑO:

- key es la clave primaria (apto_balances_v1, apto_pools_v1, ...).
- value se guarda como bytes tal como lo entrega el SnapshotStore.
- updated_at solo sirve para diagnóstico.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import DateTime, LargeBinary, String
from sqlalchemy.orm import Mapped, mapped_column

from aptostock.infrastructure.persistence.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class KeyValueBlobModel(Base):
    """Modelo ORM para blobs de snapshot."""

    __tablename__ = "kv_blobs"

    # ─── Columnas ─────────────────────────────────────────────────────
    key: Mapped[str] = mapped_column(String(128), primary_key=True)
    value: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return f"<KeyValueBlobModel(key={self.key!r}, size={len(self.value or b'')})>"
