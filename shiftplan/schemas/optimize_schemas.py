"""Schemas for optimization endpoints."""

import dataclasses
from pydantic import BaseModel, Field
from typing import Dict, Optional

from shiftplan.models.shift import Shift, ShiftCatalog, ShiftType
from shiftplan.models.financial import FinancialConfiguration
from shiftplan.models.optimization import OptimizationResult
from shiftplan.genetic.config import GeneticConfig


class GeneticParams(BaseModel):
    """Overrides for genetic algorithm parameters; omitted fields keep their defaults."""

    population_size: Optional[int] = None
    generations: Optional[int] = None
    mutation_rate: Optional[float] = None
    crossover_rate: Optional[float] = None
    elite_percentage: Optional[float] = None
    min_elite_size: Optional[int] = None
    tournament_size: Optional[int] = None
    stagnation_limit: Optional[int] = None
    improvement_threshold: Optional[float] = None
    first_check: Optional[int] = None
    second_check: Optional[int] = None
    final_check: Optional[int] = None
    fitness_threshold: Optional[float] = None
    extended_threshold: Optional[float] = None
    balance_tolerance: Optional[float] = None
    progress_interval: Optional[int] = None
    log_interval: Optional[int] = None
    use_local_search: Optional[bool] = None
    local_search_iterations: Optional[int] = None

    def to_config(self) -> GeneticConfig:
        overrides = {name: value for name, value in self.model_dump().items() if value is not None}
        return dataclasses.replace(GeneticConfig(), **overrides)


class OptimizeRequest(BaseModel):
    """Request model for starting an optimization."""

    config: FinancialConfiguration
    shift_types: Optional[Dict[ShiftType, Shift]] = Field(
        None, description="Shift catalog; default values when omitted"
    )
    ga_params: Optional[GeneticParams] = None
    seed: Optional[int] = Field(None, description="Seed for a reproducible run")

    def catalog(self) -> ShiftCatalog:
        if self.shift_types is None:
            return ShiftCatalog()
        return ShiftCatalog(shifts=self.shift_types)

    def genetic_config(self) -> GeneticConfig:
        if self.ga_params is None:
            return GeneticConfig()
        return self.ga_params.to_config()


class PerformanceMetrics(BaseModel):
    """Timing of a synchronous optimization request."""

    start_time: float  # Epoch milliseconds
    end_time: float
    total_time: float
    server_region: str


class OptimizeResponse(BaseModel):
    """Response model for a synchronous optimization."""

    success: bool
    result: Optional[OptimizationResult] = None
    error: Optional[str] = None
    performance_metrics: PerformanceMetrics
