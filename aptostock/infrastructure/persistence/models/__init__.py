"""
Infrastructure Models Package.

Modelos ORM de SQLAlchemy para la persistencia de snapshots.
"""

from aptostock.infrastructure.persistence.models.kv_blob import KeyValueBlobModel

__all__ = [
    "KeyValueBlobModel",
]
