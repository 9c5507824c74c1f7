"""Financial configuration models."""

from typing import Dict, List, Optional
from pydantic import BaseModel, Field

from shiftplan.config import HORIZON_LENGTH


class Expense(BaseModel):
    """A bill due on a given day."""

    day: int
    amount: float
    name: str = ""


class Deposit(BaseModel):
    """Income other than shifts (transfers, refunds) arriving on a given day."""

    day: int
    amount: float


class ManualConstraint(BaseModel):
    """User pinned values for a single day.

    shifts locks the day's assignment ("large", "medium+small", "" for a day off),
    fixed_expenses replaces the day's expense total and fixed_balance asks the
    optimizer to end the day on that balance.
    """

    shifts: Optional[str] = None
    fixed_expenses: Optional[float] = None
    fixed_balance: Optional[float] = None


class FinancialConfiguration(BaseModel):
    """Everything the optimizer needs to know about money over the horizon."""

    starting_balance: float
    target_ending_balance: float
    minimum_balance: float = 0.0
    expenses: List[Expense] = Field(default_factory=list)
    deposits: List[Deposit] = Field(default_factory=list)
    manual_constraints: Dict[int, ManualConstraint] = Field(default_factory=dict)
    balance_edit_day: Optional[int] = None
    new_starting_balance: Optional[float] = None

    class Config:
        json_schema_extra = {
            "example": {
                "starting_balance": 90.5,
                "target_ending_balance": 490.5,
                "minimum_balance": 0,
                "expenses": [
                    {"day": 1, "amount": 75, "name": "Phone"},
                    {"day": 15, "amount": 1636, "name": "Rent"},
                ],
                "deposits": [{"day": 11, "amount": 1356.75}],
            }
        }

    @property
    def start_day(self) -> int:
        """First day the optimizer may change."""
        return self.balance_edit_day + 1 if self.balance_edit_day else 1

    @property
    def effective_starting_balance(self) -> float:
        if self.balance_edit_day:
            return self.new_starting_balance
        return self.starting_balance

    def expenses_by_day(self) -> List[float]:
        """Expense totals indexed by day (index 0 unused)."""
        by_day = [0.0] * (HORIZON_LENGTH + 1)
        for expense in self.expenses:
            if 1 <= expense.day <= HORIZON_LENGTH:
                by_day[expense.day] += expense.amount
        for day, constraint in self.manual_constraints.items():
            if constraint.fixed_expenses is not None and 1 <= day <= HORIZON_LENGTH:
                by_day[day] = constraint.fixed_expenses
        return by_day

    def deposits_by_day(self) -> List[float]:
        """Deposit totals indexed by day (index 0 unused)."""
        by_day = [0.0] * (HORIZON_LENGTH + 1)
        for deposit in self.deposits:
            if 1 <= deposit.day <= HORIZON_LENGTH:
                by_day[deposit.day] += deposit.amount
        return by_day

    def locked_shifts(self) -> Dict[int, str]:
        """Days whose assignment is pinned by a manual constraint."""
        return {
            day: constraint.shifts
            for day, constraint in self.manual_constraints.items()
            if constraint.shifts is not None
        }

    def fixed_balances(self) -> Dict[int, float]:
        return {
            day: constraint.fixed_balance
            for day, constraint in self.manual_constraints.items()
            if constraint.fixed_balance is not None
        }
