"""Services package."""

from .optimization_service import (
    OptimizationHandle,
    OptimizationService,
    RunNotFound,
    optimize,
    run_optimization,
)
from .singleton import get_optimization_service, shutdown_optimization_service

__all__ = [
    "OptimizationHandle",
    "OptimizationService",
    "RunNotFound",
    "optimize",
    "run_optimization",
    "get_optimization_service",
    "shutdown_optimization_service",
]
