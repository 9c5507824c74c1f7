"""Refinement applied to the best individual after evolution."""

import logging
from typing import Callable, List, Sequence

from shiftplan.models.shift import ShiftType
from shiftplan.models.schedule import DayAssignment, EMPTY

from shiftplan.genetic.types import Evaluation, Individual
from shiftplan.genetic.crisis import CrisisContext

logger = logging.getLogger(__name__)

S, M, L = ShiftType.SMALL, ShiftType.MEDIUM, ShiftType.LARGE

# Every assignment a day can take, cheapest first
ASSIGNMENT_OPTIONS: List[DayAssignment] = [
    EMPTY,
    (S,), (M,), (L,),
    (S, S), (S, M), (S, L), (M, M), (M, L), (L, L),
]


def local_search(
    individual: Individual,
    evaluate: Callable[[Sequence[DayAssignment]], Evaluation],
    context: CrisisContext,
    iterations: int = 5,
) -> Individual:
    """Hill-climb over single-day reassignments.

    Each iteration tries every option on every free day and keeps any change
    that lowers fitness. Stops early when an iteration finds nothing.

    Args:
        individual: Evaluated starting point (not modified)
        evaluate: Scores a genome
        context: Crisis analysis (free days)
        iterations: Max sweeps over the schedule

    Returns:
        Individual no worse than the input
    """
    best = individual.copy()

    for iteration in range(iterations):
        improved = False
        for day in context.free_days:
            for option in ASSIGNMENT_OPTIONS:
                if option == best.genes[day - 1]:
                    continue
                genes = list(best.genes)
                genes[day - 1] = option
                evaluation = evaluate(genes)
                if evaluation.fitness < best.fitness:
                    best = Individual(genes)
                    best.fitness = evaluation.fitness
                    best.evaluation = evaluation
                    improved = True
        if not improved:
            logger.debug(f"Local search settled after {iteration + 1} sweeps")
            break

    return best
