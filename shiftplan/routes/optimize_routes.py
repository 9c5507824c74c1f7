"""Routes for synchronous optimization."""

import logging
import time
from fastapi import APIRouter, HTTPException

from ..schemas.optimize_schemas import OptimizeRequest, OptimizeResponse, PerformanceMetrics
from ..services.singleton import get_optimization_service
from ..models.optimization import RunStatus
from ..validator import InvalidConfiguration

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["optimize"])


@router.post("/optimize", response_model=OptimizeResponse)
def optimize_schedule(request: OptimizeRequest):
    """
    Optimize a schedule and wait for the result.

    Runs in the server's thread pool since the call blocks until the
    optimizer finishes.

    Args:
        request: Configuration, optional catalog, GA parameters and seed

    Returns:
        Result with performance metrics
    """
    optimization_service = get_optimization_service()
    start_time = time.time() * 1000

    try:
        result = optimization_service.run_sync(
            request.config,
            request.catalog(),
            request.genetic_config(),
            request.seed,
        )
    except InvalidConfiguration as e:
        raise HTTPException(status_code=400, detail=e.errors)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error optimizing schedule: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    end_time = time.time() * 1000
    return OptimizeResponse(
        success=result.status != RunStatus.FAILED,
        result=result,
        error=result.error,
        performance_metrics=PerformanceMetrics(
            start_time=start_time,
            end_time=end_time,
            total_time=end_time - start_time,
            server_region=optimization_service.config.SERVER_REGION,
        ),
    )
