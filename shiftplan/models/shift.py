"""Shift models and the shift catalog."""

from enum import Enum
from typing import Dict, Optional, Tuple
from pydantic import BaseModel, Field

from shiftplan.config import SHIFT_VALUES


class OptimizerError(Exception):
    """Base class for errors raised by the optimizer core."""


class UnknownShiftType(OptimizerError):
    """Raised when a schedule references a shift key missing from the catalog."""

    def __init__(self, key: str):
        super().__init__(f"Unknown shift type: {key!r}")
        self.key = key


class ShiftType(str, Enum):
    """Shift sizes that can be worked on a day."""

    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


class Shift(BaseModel):
    """Monetary value of one shift."""

    net: float
    gross: float


def _default_shifts() -> Dict[ShiftType, Shift]:
    return {ShiftType(key): Shift(**values) for key, values in SHIFT_VALUES.items()}


class ShiftCatalog(BaseModel):
    """Static table of shift sizes and their values."""

    shifts: Dict[ShiftType, Shift] = Field(default_factory=_default_shifts)

    class Config:
        json_schema_extra = {
            "example": {
                "shifts": {
                    "large": {"net": 86.5, "gross": 94.5},
                    "medium": {"net": 67.5, "gross": 75.5},
                    "small": {"net": 56.0, "gross": 64.0},
                }
            }
        }

    def get(self, key) -> Shift:
        """Look up a shift, raising UnknownShiftType for absent keys."""
        try:
            return self.shifts[ShiftType(key)]
        except (KeyError, ValueError):
            raise UnknownShiftType(str(key)) from None

    def net(self, key) -> float:
        return self.get(key).net

    def assignment_net(self, assignment: Tuple[ShiftType, ...]) -> float:
        """Net earnings of all shifts worked on one day."""
        return sum(self.get(shift).net for shift in assignment)

    def mean_net(self, weights: Optional[Dict[str, float]] = None) -> float:
        """Mean net value, optionally weighted by a {shift: probability} table."""
        if not weights:
            values = [shift.net for shift in self.shifts.values()]
            return sum(values) / len(values) if values else 0.0
        total_weight = sum(weights.values())
        return sum(self.net(key) * weight for key, weight in weights.items()) / total_weight

    def mean_double_net(self) -> float:
        """Mean net of the crisis double shifts (large+large, medium+large, medium+medium)."""
        large = self.net(ShiftType.LARGE)
        medium = self.net(ShiftType.MEDIUM)
        return ((large + large) + (medium + large) + (medium + medium)) / 3
