"""Schedule representation and the derived daily ledger.

A schedule (genome) is a list of HORIZON_LENGTH day assignments, 0-based
internally: genes[0] is day 1. A day assignment is a tuple of zero, one or two
ShiftType values; the empty tuple is a day off.
"""

from typing import List, Optional, Sequence, Tuple
from pydantic import BaseModel

from shiftplan.config import HORIZON_LENGTH
from shiftplan.models.shift import ShiftCatalog, ShiftType, UnknownShiftType
from shiftplan.models.financial import FinancialConfiguration

DayAssignment = Tuple[ShiftType, ...]

EMPTY: DayAssignment = ()


def parse_assignment(text: Optional[str]) -> DayAssignment:
    """Parse "large+medium" style text into a day assignment."""
    if not text:
        return EMPTY
    parts = [part.strip() for part in text.split("+") if part.strip()]
    if len(parts) > 2:
        raise ValueError(f"At most two shifts per day, got {text!r}")
    try:
        return tuple(ShiftType(part) for part in parts)
    except ValueError:
        raise UnknownShiftType(text) from None


def format_assignment(assignment: DayAssignment) -> str:
    return "+".join(shift.value for shift in assignment)


def empty_schedule() -> List[DayAssignment]:
    return [EMPTY] * HORIZON_LENGTH


def compute_ledger(
    genes: Sequence[DayAssignment],
    config: FinancialConfiguration,
    catalog: ShiftCatalog,
    expenses_by_day: Optional[List[float]] = None,
    deposits_by_day: Optional[List[float]] = None,
) -> List[float]:
    """Compute running balances balance[0..HORIZON_LENGTH].

    balance[0] is the starting balance and each day adds deposits and shift
    earnings and subtracts expenses. On the balance edit day the balance is
    replaced by the new starting balance.

    Args:
        genes: Day assignments, genes[d - 1] for day d
        config: Financial configuration
        catalog: Shift catalog used for net values
        expenses_by_day: Precomputed config.expenses_by_day()
        deposits_by_day: Precomputed config.deposits_by_day()

    Returns:
        List of HORIZON_LENGTH + 1 balances
    """
    if len(genes) != HORIZON_LENGTH:
        raise ValueError(f"Schedule must have {HORIZON_LENGTH} days, got {len(genes)}")
    if expenses_by_day is None:
        expenses_by_day = config.expenses_by_day()
    if deposits_by_day is None:
        deposits_by_day = config.deposits_by_day()

    balances = [0.0] * (HORIZON_LENGTH + 1)
    balance = config.starting_balance
    balances[0] = balance
    for day in range(1, HORIZON_LENGTH + 1):
        balance += deposits_by_day[day]
        balance += catalog.assignment_net(genes[day - 1])
        balance -= expenses_by_day[day]
        if config.balance_edit_day and day == config.balance_edit_day:
            balance = config.new_starting_balance
        balances[day] = balance
    return balances


class DaySchedule(BaseModel):
    """One row of the formatted schedule."""

    day: int
    shifts: List[str]
    earnings: float
    expenses: float
    deposit: float
    start_balance: float
    end_balance: float


def build_day_schedules(
    genes: Sequence[DayAssignment],
    config: FinancialConfiguration,
    catalog: ShiftCatalog,
) -> List[DaySchedule]:
    """Format a schedule into per-day rows with start and end balances."""
    expenses_by_day = config.expenses_by_day()
    deposits_by_day = config.deposits_by_day()
    balances = compute_ledger(genes, config, catalog, expenses_by_day, deposits_by_day)

    rows = []
    for day in range(1, HORIZON_LENGTH + 1):
        assignment = genes[day - 1]
        rows.append(DaySchedule(
            day=day,
            shifts=[shift.value for shift in assignment],
            earnings=catalog.assignment_net(assignment),
            expenses=expenses_by_day[day],
            deposit=deposits_by_day[day],
            start_balance=balances[day - 1],
            end_balance=balances[day],
        ))
    return rows
