"""Crisis and critical-day analysis.

Decides once per run whether the month can be financed with the normal shift
mix or whether the search has to switch to crisis mode (double shifts, heavy
work on critical days), and which days sit just before a money deadline.

Two kinds of crisis are detected:
- earnings crisis: the required earnings exceed what one shift a day drawn
  from the normal-mode mix can bring in
- timing crisis: spreading the required earnings evenly over the free days
  still lets the balance dip below the minimum (bills come before income)
"""

import logging
import math
import random
from dataclasses import dataclass, field
from typing import Dict, List, Set

from shiftplan.config import HORIZON_LENGTH, PROBABILITIES, CRITICAL_DAY_PARAMS, FITNESS_WEIGHTS
from shiftplan.models.financial import FinancialConfiguration
from shiftplan.models.shift import ShiftCatalog, ShiftType
from shiftplan.models.schedule import DayAssignment, parse_assignment

logger = logging.getLogger(__name__)


@dataclass
class CrisisContext:
    """Analysis results shared by initialization, mutation and fitness."""

    is_crisis: bool
    is_earnings_crisis: bool
    required_earnings: float
    achievable_earnings: float
    target_work_days: int
    start_day: int
    available_days: int
    balance_scale: float
    expenses_by_day: List[float]
    deposits_by_day: List[float]
    shift_net: Dict[ShiftType, float]
    locked_days: Set[int] = field(default_factory=set)
    deadline_days: List[int] = field(default_factory=list)
    critical_windows: List[List[int]] = field(default_factory=list)
    critical_days: Set[int] = field(default_factory=set)

    def is_free(self, day: int) -> bool:
        """Whether the optimizer may change the given 1-based day."""
        return day >= self.start_day and day not in self.locked_days

    def assignment_net(self, assignment: DayAssignment) -> float:
        return sum(self.shift_net[shift_type] for shift_type in assignment)

    @property
    def free_days(self) -> List[int]:
        return [day for day in range(1, HORIZON_LENGTH + 1) if self.is_free(day)]


def analyze_crisis(
    config: FinancialConfiguration,
    catalog: ShiftCatalog,
    rng: random.Random,
) -> CrisisContext:
    """Analyze a configuration for crisis mode and critical days.

    Args:
        config: Financial configuration
        catalog: Shift catalog
        rng: The run's random generator (perturbs critical windows)

    Returns:
        CrisisContext consumed by population operators and fitness
    """
    expenses_by_day = config.expenses_by_day()
    deposits_by_day = config.deposits_by_day()
    start_day = config.start_day
    effective_start = config.effective_starting_balance

    locked_net: Dict[int, float] = {}
    locked_days = set(range(1, start_day))
    for day, text in config.locked_shifts().items():
        locked_days.add(day)
        locked_net[day] = catalog.assignment_net(parse_assignment(text))

    free_days = [d for d in range(start_day, HORIZON_LENGTH + 1) if d not in locked_days]
    available_days = len(free_days)

    horizon = range(start_day, HORIZON_LENGTH + 1)
    required = (
        sum(expenses_by_day[d] for d in horizon)
        + config.target_ending_balance
        - effective_start
        - sum(deposits_by_day[d] for d in horizon)
        - sum(locked_net.get(d, 0.0) for d in horizon)
    )
    required = max(0.0, required)

    achievable = available_days * catalog.mean_net(PROBABILITIES["NORMAL_MODE"])
    is_earnings_crisis = required > achievable
    is_timing_crisis = _even_spread_breaches_minimum(
        config, required, free_days, locked_net, expenses_by_day, deposits_by_day
    )
    is_crisis = is_earnings_crisis or is_timing_crisis

    if is_earnings_crisis:
        usage = CRITICAL_DAY_PARAMS["CRISIS_MODE_USAGE"]
        target_work_days = max(
            math.floor(available_days * usage),
            math.ceil(required / catalog.mean_double_net()),
        )
    else:
        target_work_days = math.ceil(required / catalog.mean_net(PROBABILITIES["SHIFT_PLACEMENT"]))
    target_work_days = min(target_work_days, available_days)

    deadline_days = _find_deadline_days(
        config, required, locked_net, expenses_by_day, deposits_by_day
    )
    critical_windows = [
        _critical_window(deadline, start_day, locked_days, rng) for deadline in deadline_days
    ]
    critical_windows = [window for window in critical_windows if window]
    critical_days = {day for window in critical_windows for day in window}

    context = CrisisContext(
        is_crisis=is_crisis,
        is_earnings_crisis=is_earnings_crisis,
        required_earnings=required,
        achievable_earnings=achievable,
        target_work_days=target_work_days,
        start_day=start_day,
        available_days=available_days,
        balance_scale=catalog.mean_net() or 1.0,
        expenses_by_day=expenses_by_day,
        deposits_by_day=deposits_by_day,
        shift_net={shift_type: shift.net for shift_type, shift in catalog.shifts.items()},
        locked_days=locked_days,
        deadline_days=deadline_days,
        critical_windows=critical_windows,
        critical_days=critical_days,
    )

    if is_crisis:
        logger.warning(
            f"Crisis mode activated: required={required:.2f}, achievable={achievable:.2f}, "
            f"earnings_crisis={is_earnings_crisis}, timing_crisis={is_timing_crisis}"
        )
    logger.debug(
        f"Crisis analysis: target_work_days={target_work_days}, deadlines={deadline_days}, "
        f"critical_days={sorted(critical_days)}"
    )
    return context


def _even_spread_breaches_minimum(
    config: FinancialConfiguration,
    required: float,
    free_days: List[int],
    locked_net: Dict[int, float],
    expenses_by_day: List[float],
    deposits_by_day: List[float],
) -> bool:
    """Check whether earning required/free_days on every free day breaches the minimum."""
    per_day = required / len(free_days) if free_days else 0.0
    free = set(free_days)
    balance = config.effective_starting_balance
    for day in range(config.start_day, HORIZON_LENGTH + 1):
        balance += deposits_by_day[day] + locked_net.get(day, 0.0) - expenses_by_day[day]
        if day in free:
            balance += per_day
        if balance < config.minimum_balance:
            return True
    return False


def _find_deadline_days(
    config: FinancialConfiguration,
    required: float,
    locked_net: Dict[int, float],
    expenses_by_day: List[float],
    deposits_by_day: List[float],
) -> List[int]:
    """Expense days where a work-free month would sit under minimum + buffer, plus the horizon end."""
    buffer = FITNESS_WEIGHTS["BALANCE"]["CRITICAL_DAY_BUFFER"]
    deadlines = []
    balance = config.effective_starting_balance
    for day in range(config.start_day, HORIZON_LENGTH + 1):
        balance += deposits_by_day[day] + locked_net.get(day, 0.0) - expenses_by_day[day]
        if expenses_by_day[day] > 0 and balance < config.minimum_balance + buffer:
            deadlines.append(day)
    if required > 0 and HORIZON_LENGTH not in deadlines:
        deadlines.append(HORIZON_LENGTH)
    return deadlines


def _critical_window(
    deadline: int,
    start_day: int,
    locked_days: Set[int],
    rng: random.Random,
) -> List[int]:
    """Free days between MIN_DAYS_BEFORE and a random lead (up to MAX_DAYS_BEFORE) before a deadline."""
    min_before = CRITICAL_DAY_PARAMS["MIN_DAYS_BEFORE"]
    lead = min_before + rng.randrange(CRITICAL_DAY_PARAMS["RANDOM_RANGE"])
    lead = min(lead, CRITICAL_DAY_PARAMS["MAX_DAYS_BEFORE"])

    first = max(start_day, deadline - lead)
    last = max(first, deadline - min_before)
    return [
        day for day in range(first, min(last, HORIZON_LENGTH) + 1)
        if day not in locked_days
    ]
