"""FastAPI routes y schemas."""
