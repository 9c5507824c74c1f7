"""Tests for validator module."""

import pytest
from shiftplan.validator import (
    Validator,
    ValidationReport,
    InvalidConfiguration,
    validate_configuration,
    ensure_valid,
)
from shiftplan.models import (
    ShiftCatalog,
    ShiftType,
    Shift,
    FinancialConfiguration,
    Expense,
    Deposit,
    ManualConstraint,
    OptimizerError,
)
from shiftplan.genetic.config import GeneticConfig, FAST_CONFIG, ACCURATE_CONFIG


@pytest.fixture
def catalog():
    return ShiftCatalog()


@pytest.fixture
def ga_config():
    return GeneticConfig()


@pytest.fixture
def valid_config():
    """Reachable month with rent in the middle."""
    return FinancialConfiguration(
        starting_balance=500,
        target_ending_balance=800,
        minimum_balance=0,
        expenses=[Expense(day=15, amount=900, name="Rent")],
        deposits=[Deposit(day=10, amount=200)],
    )


def test_valid_configuration(valid_config, catalog, ga_config):
    """Test validation of a valid configuration."""
    report = validate_configuration(valid_config, catalog, ga_config)
    assert isinstance(report, ValidationReport)
    assert report.is_valid()
    assert ensure_valid(valid_config, catalog, ga_config).errors == []


def test_day_out_of_range(valid_config, catalog, ga_config):
    """Test expense and deposit days outside the horizon."""
    valid_config.expenses.append(Expense(day=31, amount=10))
    valid_config.deposits.append(Deposit(day=0, amount=10))

    report = Validator(catalog, ga_config).validate(valid_config)

    assert not report.is_valid()
    assert len(report.errors) == 2


def test_negative_amounts(valid_config, catalog, ga_config):
    """Test negative expense amounts."""
    valid_config.expenses.append(Expense(day=3, amount=-10))
    report = validate_configuration(valid_config, catalog, ga_config)
    assert any("negative" in error for error in report.errors)


def test_catalog_missing_shift(valid_config, ga_config):
    """Test a catalog without every shift size."""
    catalog = ShiftCatalog(shifts={
        ShiftType.LARGE: Shift(net=86.5, gross=94.5),
        ShiftType.MEDIUM: Shift(net=67.5, gross=75.5),
    })
    report = validate_configuration(valid_config, catalog, ga_config)
    assert any("small" in error for error in report.errors)


@pytest.mark.parametrize("overrides", [
    {"population_size": 0},
    {"generations": 0},
    {"mutation_rate": 1.5},
    {"crossover_rate": -0.1},
    {"tournament_size": 500},
    {"elite_percentage": 0.0, "min_elite_size": 0},
    {"progress_interval": 0},
])
def test_degenerate_ga_parameters(valid_config, catalog, overrides):
    """Test GA parameters that cannot run."""
    report = validate_configuration(valid_config, catalog, GeneticConfig(**overrides))
    assert not report.is_valid()


def test_manual_constraint_errors(valid_config, catalog, ga_config):
    """Test unknown shift keys and out-of-range constraint days."""
    valid_config.manual_constraints = {
        3: ManualConstraint(shifts="huge"),
        40: ManualConstraint(shifts="large"),
    }
    report = validate_configuration(valid_config, catalog, ga_config)
    assert len(report.errors) == 2


def test_balance_edit_requires_new_balance(valid_config, catalog, ga_config):
    """Test a balance edit day without the new balance."""
    valid_config.balance_edit_day = 5
    report = validate_configuration(valid_config, catalog, ga_config)
    assert any("new_starting_balance" in error for error in report.errors)


def test_minimum_above_target_and_start(catalog, ga_config):
    """Test a minimum above both the target and the starting balance."""
    config = FinancialConfiguration(
        starting_balance=100,
        target_ending_balance=200,
        minimum_balance=300,
    )
    report = validate_configuration(config, catalog, ga_config)
    assert not report.is_valid()


def test_infeasible_day_one_expense(catalog, ga_config):
    """Test an expense no schedule can cover before the minimum is breached."""
    config = FinancialConfiguration(
        starting_balance=100,
        target_ending_balance=1000,
        minimum_balance=500,
        expenses=[Expense(day=1, amount=1000, name="Rent")],
    )
    with pytest.raises(InvalidConfiguration) as exc_info:
        ensure_valid(config, catalog, ga_config)

    assert isinstance(exc_info.value, OptimizerError)
    assert any("Day 1" in error for error in exc_info.value.errors)


def test_unreachable_target_is_warning(catalog, ga_config):
    """Test a target beyond two large shifts a day."""
    config = FinancialConfiguration(starting_balance=0, target_ending_balance=10000)
    report = validate_configuration(config, catalog, ga_config)
    assert report.is_valid()
    assert len(report.warnings) == 1


@pytest.mark.parametrize("preset", [FAST_CONFIG, ACCURATE_CONFIG])
def test_presets_are_valid(valid_config, catalog, preset):
    """Test the bundled GA presets pass validation."""
    assert validate_configuration(valid_config, catalog, preset).is_valid()


def test_elites_filling_population_rejected(valid_config, catalog):
    """Test an elite count that leaves no room for offspring."""
    ga_config = GeneticConfig(population_size=20)
    assert ga_config.elite_size == 20

    report = validate_configuration(valid_config, catalog, ga_config)

    assert not report.is_valid()
    assert any("no room for offspring" in error for error in report.errors)
    with pytest.raises(InvalidConfiguration):
        ensure_valid(valid_config, catalog, ga_config)


def test_small_population_with_small_elite_accepted(valid_config, catalog):
    """Test a small population is fine once elites leave room for children."""
    ga_config = GeneticConfig(population_size=20, min_elite_size=4)
    assert validate_configuration(valid_config, catalog, ga_config).is_valid()
