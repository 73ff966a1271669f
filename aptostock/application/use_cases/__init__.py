"""Casos de uso de la aplicación."""

from aptostock.application.use_cases.mint_usecase import MintUseCase
from aptostock.application.use_cases.reset_demo_usecase import ResetDemoUseCase
from aptostock.application.use_cases.swap_usecase import SwapUseCase

__all__ = [
    "MintUseCase",
    "SwapUseCase",
    "ResetDemoUseCase",
]
