"""Validator module for pre-run validation of configurations and GA parameters."""

import logging
from typing import List, Optional
from pydantic import BaseModel

from shiftplan.config import HORIZON_LENGTH
from shiftplan.models.shift import OptimizerError, ShiftCatalog, ShiftType, UnknownShiftType
from shiftplan.models.financial import FinancialConfiguration
from shiftplan.models.schedule import parse_assignment
from shiftplan.genetic.config import GeneticConfig

logger = logging.getLogger(__name__)


class InvalidConfiguration(OptimizerError):
    """Raised before a run starts when its inputs cannot produce a meaningful schedule."""

    def __init__(self, errors: List[str]):
        super().__init__("; ".join(errors))
        self.errors = errors


class ValidationReport(BaseModel):
    """Validation report with errors and warnings."""

    errors: List[str]
    warnings: List[str]

    def is_valid(self) -> bool:
        """Check if validation passed (no errors)."""
        return len(self.errors) == 0


class Validator:
    """Validates a run's inputs before any generation runs."""

    def __init__(self, catalog: ShiftCatalog, ga_config: GeneticConfig):
        """
        Initialize validator.

        Args:
            catalog: Shift catalog the run will use
            ga_config: Genetic algorithm parameters
        """
        self.catalog = catalog
        self.ga_config = ga_config

    def validate(self, config: FinancialConfiguration) -> ValidationReport:
        """
        Validate a financial configuration together with the catalog and GA parameters.

        Args:
            config: Financial configuration

        Returns:
            ValidationReport with errors and warnings
        """
        errors: List[str] = []
        warnings: List[str] = []

        catalog_ok = self._validate_catalog(errors, warnings)
        self._validate_ga_config(errors)
        self._validate_entries(config, errors)
        constraints_ok = self._validate_constraints(config, errors)

        if config.minimum_balance > config.target_ending_balance and config.starting_balance < config.minimum_balance:
            errors.append(
                f"Minimum balance {config.minimum_balance} is above both the target "
                f"{config.target_ending_balance} and the starting balance {config.starting_balance}"
            )

        if catalog_ok and constraints_ok and not errors:
            self._check_feasibility(config, errors, warnings)

        for warning in warnings:
            logger.warning(f"Configuration warning: {warning}")
        return ValidationReport(errors=errors, warnings=warnings)

    def _validate_catalog(self, errors: List[str], warnings: List[str]) -> bool:
        ok = True
        for shift_type in ShiftType:
            shift = self.catalog.shifts.get(shift_type)
            if shift is None:
                errors.append(f"Shift catalog is missing {shift_type.value!r}")
                ok = False
                continue
            if shift.net < 0 or shift.gross < 0:
                errors.append(f"Shift {shift_type.value!r} has a negative value")
                ok = False
            elif shift.net > shift.gross:
                warnings.append(f"Shift {shift_type.value!r} net value exceeds its gross value")
        return ok

    def _validate_ga_config(self, errors: List[str]) -> None:
        ga = self.ga_config
        if ga.population_size <= 0:
            errors.append(f"population_size must be positive, got {ga.population_size}")
        if ga.generations <= 0:
            errors.append(f"generations must be positive, got {ga.generations}")
        for name in ("mutation_rate", "crossover_rate", "elite_percentage"):
            value = getattr(ga, name)
            if not 0.0 <= value <= 1.0:
                errors.append(f"{name} must be within [0, 1], got {value}")
        if ga.min_elite_size < 0:
            errors.append(f"min_elite_size must not be negative, got {ga.min_elite_size}")
        if ga.population_size > 0 and ga.elite_size < 1:
            errors.append("Elite size must be at least 1")
        elif ga.population_size > 0 and ga.elite_size >= ga.population_size:
            errors.append(
                f"Elite size {ga.elite_size} leaves no room for offspring in a population of {ga.population_size}"
            )
        if ga.population_size > 0 and not 1 <= ga.tournament_size <= ga.population_size:
            errors.append(
                f"tournament_size must be within [1, {ga.population_size}], got {ga.tournament_size}"
            )
        if not 0.0 < ga.improvement_threshold <= 1.0:
            errors.append(f"improvement_threshold must be within (0, 1], got {ga.improvement_threshold}")
        for name in ("stagnation_limit", "progress_interval", "log_interval"):
            if getattr(ga, name) <= 0:
                errors.append(f"{name} must be positive, got {getattr(ga, name)}")
        if ga.local_search_iterations < 0:
            errors.append(f"local_search_iterations must not be negative, got {ga.local_search_iterations}")

    def _validate_entries(self, config: FinancialConfiguration, errors: List[str]) -> None:
        for expense in config.expenses:
            if not 1 <= expense.day <= HORIZON_LENGTH:
                errors.append(f"Expense {expense.name or expense.amount} has day {expense.day} outside 1..{HORIZON_LENGTH}")
            if expense.amount < 0:
                errors.append(f"Expense on day {expense.day} has negative amount {expense.amount}")
        for deposit in config.deposits:
            if not 1 <= deposit.day <= HORIZON_LENGTH:
                errors.append(f"Deposit has day {deposit.day} outside 1..{HORIZON_LENGTH}")
            if deposit.amount < 0:
                errors.append(f"Deposit on day {deposit.day} has negative amount {deposit.amount}")

    def _validate_constraints(self, config: FinancialConfiguration, errors: List[str]) -> bool:
        ok = True
        for day, constraint in config.manual_constraints.items():
            if not 1 <= day <= HORIZON_LENGTH:
                errors.append(f"Manual constraint day {day} outside 1..{HORIZON_LENGTH}")
                ok = False
                continue
            if constraint.shifts is not None:
                try:
                    parse_assignment(constraint.shifts)
                except (UnknownShiftType, ValueError) as e:
                    errors.append(f"Manual constraint on day {day}: {e}")
                    ok = False
            if constraint.fixed_expenses is not None and constraint.fixed_expenses < 0:
                errors.append(f"Manual constraint on day {day} has negative fixed expenses")

        if config.balance_edit_day is not None:
            if not 1 <= config.balance_edit_day < HORIZON_LENGTH:
                errors.append(
                    f"balance_edit_day must be within 1..{HORIZON_LENGTH - 1}, got {config.balance_edit_day}"
                )
                ok = False
            if config.new_starting_balance is None:
                errors.append("balance_edit_day requires new_starting_balance")
                ok = False
        return ok

    def _check_feasibility(
        self,
        config: FinancialConfiguration,
        errors: List[str],
        warnings: List[str],
    ) -> None:
        """Reject months where even two large shifts on every free day cannot keep the balance up."""
        best_day = 2 * self.catalog.net(ShiftType.LARGE)
        expenses_by_day = config.expenses_by_day()
        deposits_by_day = config.deposits_by_day()
        locked = config.locked_shifts()

        balance = config.effective_starting_balance
        first_breach: Optional[int] = None
        for day in range(config.start_day, HORIZON_LENGTH + 1):
            if day in locked:
                earnings = self.catalog.assignment_net(parse_assignment(locked[day]))
            else:
                earnings = best_day
            balance += deposits_by_day[day] + earnings - expenses_by_day[day]
            if first_breach is None and balance < config.minimum_balance:
                first_breach = day

        if first_breach is not None:
            errors.append(
                f"Day {first_breach} ends below the minimum balance {config.minimum_balance} "
                f"even with two large shifts on every free day"
            )
        elif balance < config.target_ending_balance:
            warnings.append(
                f"Target {config.target_ending_balance} is unreachable: "
                f"the best possible ending balance is {balance:.2f}"
            )


def ensure_valid(
    config: FinancialConfiguration,
    catalog: ShiftCatalog,
    ga_config: GeneticConfig,
) -> ValidationReport:
    """Validate and raise InvalidConfiguration on any error."""
    report = validate_configuration(config, catalog, ga_config)
    if not report.is_valid():
        logger.error(f"Invalid configuration: {report.errors}")
        raise InvalidConfiguration(report.errors)
    return report


def validate_configuration(
    config: FinancialConfiguration,
    catalog: ShiftCatalog,
    ga_config: GeneticConfig,
) -> ValidationReport:
    """Validate without raising."""
    return Validator(catalog, ga_config).validate(config)
