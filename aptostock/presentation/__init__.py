"""
AptoStock – Presentation Layer
================================
API HTTP y WebSocket.

Este módulo contiene:
- api/: FastAPI routes y schemas
- websocket/: broadcast a clientes

REGLA DE DEPENDENCIA:
Esta capa llama a los casos de uso y a los componentes inyectados en
init_routes(). No crea dependencias concretas.
"""
