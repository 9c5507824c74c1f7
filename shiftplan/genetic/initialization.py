"""Population initialization for genetic algorithm.

Creates a diverse initial population:
- Planned (70%): exactly the target number of work days
- Exploratory (30%): target work days jittered by up to +-3

Every genome starts from the locked template (manual constraints), then
covers critical days before money deadlines, then spreads the remaining
work days evenly with a random phase, avoiding days next to existing work
where possible.
"""

import logging
import random
from typing import Dict, List, Optional

from shiftplan.config import HORIZON_LENGTH, PROBABILITIES, CRITICAL_DAY_PARAMS
from shiftplan.models.financial import FinancialConfiguration
from shiftplan.models.shift import ShiftType
from shiftplan.models.schedule import DayAssignment, empty_schedule, parse_assignment

from shiftplan.genetic.types import Individual
from shiftplan.genetic.config import GeneticConfig
from shiftplan.genetic.crisis import CrisisContext

logger = logging.getLogger(__name__)

PLANNED_SHARE = 0.70
EXPLORATORY_JITTER = 3


def locked_template(config: FinancialConfiguration) -> List[DayAssignment]:
    """Empty schedule with manually pinned days filled in."""
    genes = empty_schedule()
    for day, text in config.locked_shifts().items():
        if 1 <= day <= HORIZON_LENGTH:
            genes[day - 1] = parse_assignment(text)
    return genes


def initialize_population(
    ga_config: GeneticConfig,
    template: List[DayAssignment],
    context: CrisisContext,
    rng: random.Random,
) -> List[Individual]:
    """Generate the initial population (not yet evaluated)."""
    planned_count = int(ga_config.population_size * PLANNED_SHARE)
    population = []

    for _ in range(planned_count):
        population.append(create_random_individual(template, context, rng))

    for _ in range(ga_config.population_size - planned_count):
        target = rng.randint(
            max(0, context.target_work_days - EXPLORATORY_JITTER),
            min(context.available_days, context.target_work_days + EXPLORATORY_JITTER),
        )
        population.append(create_random_individual(template, context, rng, target))

    logger.debug(
        f"Initialized {len(population)} individuals "
        f"(target_work_days={context.target_work_days}, crisis={context.is_crisis})"
    )
    return population


def create_random_individual(
    template: List[DayAssignment],
    context: CrisisContext,
    rng: random.Random,
    target_work_days: Optional[int] = None,
) -> Individual:
    """Build one genome: critical days first, then evenly spaced fill days."""
    genes = list(template)
    if target_work_days is None:
        target_work_days = context.target_work_days

    # Critical pass
    if context.is_crisis:
        usage = CRITICAL_DAY_PARAMS["CRISIS_MODE_USAGE"]
        for day in sorted(context.critical_days):
            if not genes[day - 1] and rng.random() < usage:
                genes[day - 1] = draw_crisis_assignment(rng, "FIRST_PASS")
    else:
        for window in context.critical_windows:
            day = rng.choice(window)
            if not genes[day - 1]:
                genes[day - 1] = draw_normal_assignment(rng)

    scheduled = sum(1 for day in context.free_days if genes[day - 1])
    remaining = target_work_days - scheduled
    if remaining <= 0:
        return Individual(genes)

    open_days = [day for day in context.free_days if not genes[day - 1]]
    if not open_days:
        return Individual(genes)

    # First pass: even spacing with a random phase
    step = max(1, len(open_days) // remaining)
    added = 0
    for index in range(rng.randrange(step), len(open_days), step):
        if added >= remaining:
            break
        day = open_days[index]
        if has_adjacent_work(genes, day):
            continue
        genes[day - 1] = draw_fill_assignment(rng, context.is_earnings_crisis)
        added += 1

    # Second pass: fill what spacing could not place
    if added < remaining:
        leftovers = [day for day in open_days if not genes[day - 1]]
        rng.shuffle(leftovers)
        for day in leftovers[:remaining - added]:
            genes[day - 1] = draw_fill_assignment(rng, context.is_earnings_crisis)

    return Individual(genes)


def has_adjacent_work(genes: List[DayAssignment], day: int) -> bool:
    """Whether the day before or after (1-based) is a work day."""
    if day > 1 and genes[day - 2]:
        return True
    if day < HORIZON_LENGTH and genes[day]:
        return True
    return False


def _draw_key(rng: random.Random, table: Dict[str, float]) -> str:
    keys = list(table)
    return rng.choices(keys, weights=[table[key] for key in keys])[0]


def draw_normal_assignment(rng: random.Random) -> DayAssignment:
    """Single shift from the normal-mode mix."""
    return (ShiftType(_draw_key(rng, PROBABILITIES["NORMAL_MODE"])),)


def draw_crisis_assignment(rng: random.Random, phase: str = "SECOND_PASS") -> DayAssignment:
    """Double shift from the crisis-mode mix."""
    key = _draw_key(rng, PROBABILITIES["CRISIS_MODE"][phase])
    if key == "mixed_large":
        if rng.random() < 0.5:
            return (ShiftType.MEDIUM, ShiftType.LARGE)
        return (ShiftType.LARGE, ShiftType.MEDIUM)
    return parse_assignment(key)


def draw_fill_assignment(rng: random.Random, is_crisis: bool) -> DayAssignment:
    """Assignment for a fill day: crisis doubles, or a placement-mix shift with an occasional second shift."""
    if is_crisis:
        return draw_crisis_assignment(rng, "SECOND_PASS")

    first = ShiftType(_draw_key(rng, PROBABILITIES["SHIFT_PLACEMENT"]))
    if first != ShiftType.LARGE and rng.random() < PROBABILITIES["DOUBLE_SHIFT"]:
        second = ShiftType.SMALL if rng.random() < 0.5 else ShiftType.MEDIUM
        return (first, second)
    return (first,)
