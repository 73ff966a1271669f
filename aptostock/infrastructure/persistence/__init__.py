"""Persistencia de snapshots (SQLAlchemy + memoria)."""
