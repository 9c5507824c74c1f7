"""Genetic operators: selection, crossover, mutation, elitism.

Implements the core evolutionary operators for the genetic algorithm. All
randomness comes from the run's injected random.Random.
"""

import random
from typing import List, Tuple

from shiftplan.config import HORIZON_LENGTH, PROBABILITIES
from shiftplan.models.shift import ShiftType
from shiftplan.models.schedule import DayAssignment, EMPTY

from shiftplan.genetic.types import Individual
from shiftplan.genetic.crisis import CrisisContext
from shiftplan.genetic.initialization import (
    has_adjacent_work,
    draw_normal_assignment,
    draw_crisis_assignment,
)

MUTATION_ACTIONS = ("REMOVE", "TO_SMALL", "TO_MEDIUM", "TO_LARGE", "ADD_SHIFT")
CRISIS_CRITICAL_ACTIONS = ("TO_LARGE", "ADD_SHIFT")


def tournament_selection(
    population: List[Individual],
    tournament_size: int,
    rng: random.Random,
) -> Individual:
    """Select an individual using tournament selection.

    Samples tournament_size individuals without replacement and returns the
    best one. Lower fitness is better.
    """
    tournament = rng.sample(population, tournament_size)
    return min(tournament, key=lambda ind: ind.fitness)


def crossover(
    parent1: Individual,
    parent2: Individual,
    rng: random.Random,
) -> Tuple[Individual, Individual]:
    """Perform two-point crossover.

    The day range between two random cut days (inclusive) is swapped between
    the parents. Genome length is preserved and locked days, identical in both
    parents, stay untouched.

    Returns:
        Tuple of two child individuals (not evaluated)
    """
    point1 = rng.randrange(HORIZON_LENGTH)
    point2 = rng.randrange(HORIZON_LENGTH)
    start, end = min(point1, point2), max(point1, point2)

    genes1 = parent1.genes[:start] + parent2.genes[start:end + 1] + parent1.genes[end + 1:]
    genes2 = parent2.genes[:start] + parent1.genes[start:end + 1] + parent2.genes[end + 1:]
    return Individual(genes1), Individual(genes2)


def mutate(
    individual: Individual,
    context: CrisisContext,
    mutation_rate: float,
    rng: random.Random,
) -> None:
    """Mutate free day slots in place.

    Each free slot mutates with probability mutation_rate; exactly one action
    is then chosen by the MUTATION weights:
    - REMOVE: clear the day
    - TO_SMALL / TO_MEDIUM / TO_LARGE: single shift of that size
    - ADD_SHIFT: empty day gets a shift drawn from the current mode's mix
      (a crisis double in an earnings crisis, which also upgrades a single);
      any other worked day is left alone

    Normal mode protects spacing: an isolated work day survives removal with
    probability KEEP_WELL_SPACED and work is added next to an existing work day
    only with probability ADD_ADJACENT. Crisis-mode critical days only move up:
    TO_LARGE keeps a double a double (large+large), ADD_SHIFT draws a crisis
    double, and a draw worth less net than the current day is discarded.
    """
    weights = PROBABILITIES["MUTATION"]
    genes = individual.genes
    changed = False

    for day in context.free_days:
        if rng.random() >= mutation_rate:
            continue

        current = genes[day - 1]
        crisis_critical = context.is_crisis and day in context.critical_days
        actions = CRISIS_CRITICAL_ACTIONS if crisis_critical else MUTATION_ACTIONS
        action = rng.choices(actions, weights=[weights[a] for a in actions])[0]
        mutated = _apply_action(action, current, context, crisis_critical, rng)

        if mutated == current:
            continue
        if crisis_critical and context.assignment_net(mutated) < context.assignment_net(current):
            continue
        if not context.is_crisis:
            adjacent = has_adjacent_work(genes, day)
            if current and not mutated and not adjacent and rng.random() < weights["KEEP_WELL_SPACED"]:
                continue
            if not current and mutated and adjacent and rng.random() >= weights["ADD_ADJACENT"]:
                continue

        genes[day - 1] = mutated
        changed = True

    if changed:
        individual.fitness = float('inf')
        individual.evaluation = None


def _apply_action(
    action: str,
    current: DayAssignment,
    context: CrisisContext,
    crisis_critical: bool,
    rng: random.Random,
) -> DayAssignment:
    if action == "REMOVE":
        return EMPTY
    if action == "TO_SMALL":
        return (ShiftType.SMALL,)
    if action == "TO_MEDIUM":
        return (ShiftType.MEDIUM,)
    if action == "TO_LARGE":
        if crisis_critical and len(current) > 1:
            return (ShiftType.LARGE, ShiftType.LARGE)
        return (ShiftType.LARGE,)

    # ADD_SHIFT
    if crisis_critical:
        return draw_crisis_assignment(rng, "SECOND_PASS")
    if context.is_earnings_crisis:
        if len(current) > 1:
            return current
        return draw_crisis_assignment(rng, "SECOND_PASS")
    if current:
        return current
    return draw_normal_assignment(rng)


def select_elites(population: List[Individual], elite_size: int) -> List[Individual]:
    """Copies of the best elite_size individuals of a sorted population, scores kept."""
    return [individual.copy() for individual in population[:elite_size]]
