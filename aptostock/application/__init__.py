"""
AptoStock – Application Layer
===============================
Capa de casos de uso y orquestación.

Este módulo contiene:
- use_cases/: mint, swap y reset de la demo
- ports/: Interfaces hacia infraestructura
- dto/: Resultados de los casos de uso

REGLA DE DEPENDENCIA:
Esta capa puede importar de domain/, state/ y de sus propios ports/.
NO puede importar de infrastructure/ ni de presentation/.
"""
