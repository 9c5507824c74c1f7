"""Type definitions for genetic algorithm.

Contains the Individual (chromosome), its cached Evaluation, and the
per-run RunState.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from shiftplan.models.schedule import DayAssignment, empty_schedule, format_assignment


@dataclass
class Evaluation:
    """Cached result of scoring one schedule."""

    fitness: float
    final_balance: float
    work_days: int
    violations: int
    total_earnings: float
    min_balance: float
    work_days_list: List[int] = field(default_factory=list)  # 1-based days


class Individual:
    """Represents a solution candidate (chromosome).

    Attributes:
        genes: Day assignments, genes[d - 1] for day d
        fitness: Fitness score (lower is better)
        evaluation: Details behind the fitness score, None until evaluated
    """

    def __init__(self, genes: Optional[List[DayAssignment]] = None):
        self.genes: List[DayAssignment] = list(genes) if genes is not None else empty_schedule()
        self.fitness: float = float('inf')
        self.evaluation: Optional[Evaluation] = None

    def copy(self) -> 'Individual':
        """Copy of this individual; assignments are immutable tuples so a shallow list copy suffices."""
        new_ind = Individual(self.genes)
        new_ind.fitness = self.fitness
        new_ind.evaluation = self.evaluation
        return new_ind

    def preview(self) -> List[str]:
        """Day assignments as text, one entry per day."""
        return [format_assignment(assignment) for assignment in self.genes]

    def __repr__(self) -> str:
        work_days = sum(1 for assignment in self.genes if assignment)
        return f"Individual(work_days={work_days}, fit={self.fitness:.2f})"


@dataclass
class RunState:
    """Mutable state of one optimization run."""

    generation: int = 0
    best: Optional[Individual] = None
    best_fitness: float = float('inf')
    stagnation: int = 0
    stagnation_reference: float = float('inf')  # Fitness at the last qualifying improvement
    is_crisis: bool = False
    fitness_history: List[float] = field(default_factory=list)
