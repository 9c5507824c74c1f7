"""Fitness evaluation for genetic algorithm.

Evaluates schedules as a sum of independent penalty terms (lower is better,
0 is ideal):
- Balance: days under the minimum balance, distance of the final balance
  from the target, thin buffers before expense deadlines, missed fixed balances
- Work days: distance from the target work-day count, long streaks, short
  gaps and uneven gaps between work days
- Clustering: too many work days inside a sliding window

Penalty weights come from config.FITNESS_WEIGHTS. VIOLATION_PENALTY per day
outweighs any realistic sum of the other terms, so schedules that keep the
balance above the minimum always rank first.
"""

from typing import List, Sequence

from shiftplan.config import HORIZON_LENGTH, FITNESS_WEIGHTS
from shiftplan.models.financial import FinancialConfiguration
from shiftplan.models.shift import ShiftCatalog
from shiftplan.models.schedule import DayAssignment, compute_ledger

from shiftplan.genetic.crisis import CrisisContext
from shiftplan.genetic.types import Evaluation


def evaluate_fitness(
    genes: Sequence[DayAssignment],
    config: FinancialConfiguration,
    catalog: ShiftCatalog,
    context: CrisisContext,
) -> Evaluation:
    """Score a schedule.

    Pure function of its arguments. An all-empty schedule is valid input.

    Args:
        genes: Day assignments, genes[d - 1] for day d
        config: Financial configuration
        catalog: Shift catalog
        context: Crisis analysis for the same configuration

    Returns:
        Evaluation with the fitness and the ledger summary behind it

    Raises:
        UnknownShiftType: If a day references a shift absent from the catalog
    """
    balances = compute_ledger(
        genes, config, catalog, context.expenses_by_day, context.deposits_by_day
    )
    violations = count_violations(balances, config.minimum_balance, context.start_day)

    work_days_list = [day for day in range(1, HORIZON_LENGTH + 1) if genes[day - 1]]
    free_work_days = sum(1 for day in work_days_list if context.is_free(day))

    fitness = (
        balance_penalty(balances, violations, config, context)
        + fixed_balance_penalty(balances, config, context)
        + work_day_penalty(work_days_list, free_work_days, context.target_work_days)
        + clustering_penalty(genes)
    )

    return Evaluation(
        fitness=fitness,
        final_balance=balances[HORIZON_LENGTH],
        work_days=len(work_days_list),
        violations=violations,
        total_earnings=sum(catalog.assignment_net(assignment) for assignment in genes),
        min_balance=min(balances[context.start_day - 1:]),
        work_days_list=work_days_list,
    )


def count_violations(balances: Sequence[float], minimum_balance: float, start_day: int = 1) -> int:
    """Days (from start_day on) ending under the minimum balance."""
    return sum(
        1 for day in range(start_day, HORIZON_LENGTH + 1)
        if balances[day] < minimum_balance
    )


def balance_penalty(
    balances: Sequence[float],
    violations: int,
    config: FinancialConfiguration,
    context: CrisisContext,
) -> float:
    """Violation, final balance and deadline buffer penalties.

    Distances are measured in average shifts (context.balance_scale). Normal
    mode punishes overshooting the target harder (needless extra work); crisis
    mode punishes falling short harder and adds a flat TARGET_MISS_PENALTY
    whenever the month ends under the target.
    """
    weights = FITNESS_WEIGHTS["BALANCE"]
    penalty = violations * weights["VIOLATION_PENALTY"]

    diff = balances[HORIZON_LENGTH] - config.target_ending_balance
    distance = abs(diff) / context.balance_scale
    overshoot = diff > 0
    if overshoot != context.is_crisis:
        distance *= weights["OVERSHOOT_MULTIPLIER"]
    penalty += weights["FINAL_BALANCE_PENALTY"] * distance
    if context.is_crisis and diff < -0.01:
        penalty += weights["TARGET_MISS_PENALTY"]

    buffered_minimum = config.minimum_balance + weights["CRITICAL_DAY_BUFFER"]
    for day in context.deadline_days:
        if day == HORIZON_LENGTH:
            continue  # Covered by the final balance term
        shortfall = buffered_minimum - balances[day]
        if shortfall > 0:
            penalty += weights["FINAL_BALANCE_PENALTY"] * shortfall / context.balance_scale

    return penalty


def fixed_balance_penalty(
    balances: Sequence[float],
    config: FinancialConfiguration,
    context: CrisisContext,
) -> float:
    """Penalty for days pinned to a balance that the schedule misses."""
    penalty = 0.0
    weight = FITNESS_WEIGHTS["BALANCE"]["FIXED_BALANCE_PENALTY"]
    for day, fixed in config.fixed_balances().items():
        if not 1 <= day <= HORIZON_LENGTH:
            continue
        diff = abs(balances[day] - fixed)
        if diff > 0.01:
            penalty += weight * diff / context.balance_scale
    return penalty


def work_day_penalty(work_days_list: List[int], free_work_days: int, target_work_days: int) -> float:
    """Work-day count, streak, gap and gap variance penalties."""
    weights = FITNESS_WEIGHTS["WORK_DAYS"]
    penalty = weights["WORK_DAY_DIFF_PENALTY"] * abs(free_work_days - target_work_days)

    # Streaks of consecutive work days
    streak = 0
    previous = None
    for day in work_days_list:
        if previous is not None and day == previous + 1:
            streak += 1
        else:
            if streak > weights["MAX_CONSECUTIVE_DAYS"]:
                penalty += weights["CONSECUTIVE_DAY_PENALTY"]
            streak = 1
        previous = day
    if streak > weights["MAX_CONSECUTIVE_DAYS"]:
        penalty += weights["CONSECUTIVE_DAY_PENALTY"]

    gaps = [later - earlier for earlier, later in zip(work_days_list, work_days_list[1:])]
    if gaps:
        penalty += weights["SMALL_GAP_PENALTY"] * sum(1 for gap in gaps if gap < weights["MIN_GAP_DAYS"])
        mean_gap = sum(gaps) / len(gaps)
        variance = sum((gap - mean_gap) ** 2 for gap in gaps) / len(gaps)
        penalty += weights["GAP_VARIANCE_WEIGHT"] * variance

    return penalty


def clustering_penalty(genes: Sequence[DayAssignment]) -> float:
    """Penalty per sliding window holding too many work days."""
    weights = FITNESS_WEIGHTS["CLUSTERING"]
    window = weights["WINDOW_SIZE"]
    worked = [1 if assignment else 0 for assignment in genes]

    penalty = 0.0
    in_window = sum(worked[:window])
    for start in range(len(worked) - window + 1):
        if start > 0:
            in_window += worked[start + window - 1] - worked[start - 1]
        if in_window > weights["MAX_WORK_DAYS_IN_WINDOW"]:
            penalty += weights["CLUSTERING_PENALTY"]
    return penalty
