"""Optimization progress and result models."""

from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field

from shiftplan.models.schedule import DaySchedule


class RunStatus(str, Enum):
    """Optimizer driver states."""

    IDLE = "idle"
    RUNNING = "running"
    CONVERGED = "converged"
    STOPPED = "stopped"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (RunStatus.CONVERGED, RunStatus.STOPPED, RunStatus.FAILED)


class ProgressEvent(BaseModel):
    """Snapshot emitted while a run is in progress."""

    generation: int
    progress: float  # Percent of the generation budget
    best_fitness: float
    best_schedule_preview: List[str]  # One entry per day, "" for a day off
    violations: int
    work_days: int
    balance: float
    is_crisis_mode: bool

    class Config:
        json_schema_extra = {
            "example": {
                "generation": 50,
                "progress": 10.0,
                "best_fitness": 412.5,
                "best_schedule_preview": ["large", "", "", "medium+small"] + [""] * 26,
                "violations": 0,
                "work_days": 4,
                "balance": 512.0,
                "is_crisis_mode": False,
            }
        }


class OptimizationResult(BaseModel):
    """Terminal result of a run.

    A failed run carries the error message and no schedule.
    """

    status: RunStatus
    best_schedule: List[str] = Field(default_factory=list)
    formatted_schedule: List[DaySchedule] = Field(default_factory=list)
    best_fitness: Optional[float] = None
    final_balance: Optional[float] = None
    min_balance: Optional[float] = None
    total_earnings: float = 0.0
    work_days: List[int] = Field(default_factory=list)  # 1-based work days
    work_days_count: int = 0
    violations: int = 0
    generations_run: int = 0
    elapsed_ms: int = 0
    computation_time: str = ""
    is_crisis_mode: bool = False
    fitness_history: List[float] = Field(default_factory=list)
    error: Optional[str] = None
