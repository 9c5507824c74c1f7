"""API schemas for request/response models."""

from .optimize_schemas import GeneticParams, OptimizeRequest, OptimizeResponse, PerformanceMetrics
from .run_schemas import RunStartResponse, RunStatusResponse, HealthResponse

__all__ = [
    "GeneticParams",
    "OptimizeRequest",
    "OptimizeResponse",
    "PerformanceMetrics",
    "RunStartResponse",
    "RunStatusResponse",
    "HealthResponse",
]
