"""Domain models package."""

from .shift import OptimizerError, UnknownShiftType, ShiftType, Shift, ShiftCatalog
from .financial import Expense, Deposit, ManualConstraint, FinancialConfiguration
from .schedule import (
    DayAssignment,
    EMPTY,
    DaySchedule,
    parse_assignment,
    format_assignment,
    empty_schedule,
    compute_ledger,
    build_day_schedules,
)
from .optimization import RunStatus, ProgressEvent, OptimizationResult

__all__ = [
    "OptimizerError",
    "UnknownShiftType",
    "ShiftType",
    "Shift",
    "ShiftCatalog",
    "Expense",
    "Deposit",
    "ManualConstraint",
    "FinancialConfiguration",
    "DayAssignment",
    "EMPTY",
    "DaySchedule",
    "parse_assignment",
    "format_assignment",
    "empty_schedule",
    "compute_ledger",
    "build_day_schedules",
    "RunStatus",
    "ProgressEvent",
    "OptimizationResult",
]
