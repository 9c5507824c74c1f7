"""Routes for background runs (start, poll, cancel) and health."""

import logging
from fastapi import APIRouter, HTTPException

from ..schemas.optimize_schemas import OptimizeRequest
from ..schemas.run_schemas import RunStartResponse, RunStatusResponse, HealthResponse
from ..services.optimization_service import OptimizationHandle, RunNotFound
from ..services.singleton import get_optimization_service
from ..validator import InvalidConfiguration

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["runs"])


def _status_response(handle: OptimizationHandle) -> RunStatusResponse:
    return RunStatusResponse(
        run_id=handle.run_id,
        status=handle.status,
        latest_progress=handle.latest_progress,
        result=handle.result(0) if handle.done else None,
    )


@router.get("/health", response_model=HealthResponse)
async def health():
    """Health check with the number of runs in progress."""
    optimization_service = get_optimization_service()
    return HealthResponse(status="ok", active_runs=optimization_service.active_runs())


@router.post("/runs", response_model=RunStartResponse)
async def start_run(request: OptimizeRequest):
    """
    Start an optimization in the background.

    Args:
        request: Configuration, optional catalog, GA parameters and seed

    Returns:
        Run id to poll
    """
    optimization_service = get_optimization_service()

    try:
        handle = optimization_service.start_run(
            request.config,
            request.catalog(),
            request.genetic_config(),
            request.seed,
        )
        return RunStartResponse(run_id=handle.run_id, status=handle.status)
    except InvalidConfiguration as e:
        raise HTTPException(status_code=400, detail=e.errors)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error starting run: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/runs/{run_id}", response_model=RunStatusResponse)
async def get_run(run_id: str):
    """
    Poll a run.

    Returns:
        Status, latest progress and the result once terminal
    """
    optimization_service = get_optimization_service()
    try:
        return _status_response(optimization_service.get_run(run_id))
    except RunNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/runs/{run_id}/cancel", response_model=RunStatusResponse)
async def cancel_run(run_id: str):
    """
    Cancel a run. Cancelling a finished run is a no-op.

    Returns:
        Run status after the request
    """
    optimization_service = get_optimization_service()
    try:
        return _status_response(optimization_service.cancel_run(run_id))
    except RunNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
