"""Schemas for background run endpoints."""

from pydantic import BaseModel
from typing import Optional

from shiftplan.models.optimization import OptimizationResult, ProgressEvent, RunStatus


class RunStartResponse(BaseModel):
    """Response model for a started run."""

    run_id: str
    status: RunStatus


class RunStatusResponse(BaseModel):
    """Response model for polling a run."""

    run_id: str
    status: RunStatus
    latest_progress: Optional[ProgressEvent] = None
    result: Optional[OptimizationResult] = None


class HealthResponse(BaseModel):
    """Response model for the health check."""

    status: str
    active_runs: int
