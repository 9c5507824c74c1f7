"""Tests for crisis and critical-day analysis."""

import random
import pytest
from shiftplan.genetic.crisis import analyze_crisis
from shiftplan.models import (
    ShiftCatalog,
    FinancialConfiguration,
    Expense,
    ManualConstraint,
)


@pytest.fixture
def catalog():
    return ShiftCatalog()


@pytest.fixture
def balanced_config():
    """Scenario A: nothing to earn."""
    return FinancialConfiguration(starting_balance=5000, target_ending_balance=5000, minimum_balance=0)


@pytest.fixture
def crisis_config():
    """Scenario B: 3000 to earn from zero."""
    return FinancialConfiguration(
        starting_balance=0,
        target_ending_balance=3000,
        minimum_balance=0,
        expenses=[Expense(day=30, amount=0)],
    )


def test_no_crisis_when_nothing_to_earn(balanced_config, catalog):
    """Test a month that needs no work."""
    context = analyze_crisis(balanced_config, catalog, random.Random(1))

    assert not context.is_crisis
    assert context.required_earnings == 0
    assert context.target_work_days == 0
    assert context.deadline_days == []
    assert context.critical_days == set()
    assert context.available_days == 30


def test_earnings_crisis(crisis_config, catalog):
    """Test crisis detection when normal-mode earnings fall short."""
    context = analyze_crisis(crisis_config, catalog, random.Random(1))

    assert context.is_crisis
    assert context.is_earnings_crisis
    assert context.required_earnings == 3000
    assert context.achievable_earnings == pytest.approx(30 * 76.6)
    # max(floor(30 * 0.9), ceil(3000 / 154))
    assert context.target_work_days == 27
    assert context.deadline_days == [30]


def test_critical_window_before_deadline(crisis_config, catalog):
    """Test the critical window sits two to five days before the deadline."""
    for seed in range(20):
        context = analyze_crisis(crisis_config, catalog, random.Random(seed))
        window = context.critical_windows[0]
        assert window[-1] == 28
        assert 25 <= window[0] <= 28
        assert set(window) == context.critical_days


def test_critical_windows_reproducible_per_seed(crisis_config, catalog):
    """Test the same seed gives the same windows."""
    first = analyze_crisis(crisis_config, catalog, random.Random(42))
    second = analyze_crisis(crisis_config, catalog, random.Random(42))
    assert first.critical_windows == second.critical_windows


def test_timing_crisis(catalog):
    """Test a bill due before an even spread of work can cover it."""
    config = FinancialConfiguration(
        starting_balance=0,
        target_ending_balance=0,
        minimum_balance=0,
        expenses=[Expense(day=2, amount=100)],
    )
    context = analyze_crisis(config, catalog, random.Random(1))

    assert context.is_crisis
    assert not context.is_earnings_crisis
    assert 2 in context.deadline_days


def test_balance_edit_locks_history(catalog):
    """Test days up to the balance edit are not free."""
    config = FinancialConfiguration(
        starting_balance=0,
        target_ending_balance=1000,
        balance_edit_day=10,
        new_starting_balance=900,
    )
    context = analyze_crisis(config, catalog, random.Random(1))

    assert context.start_day == 11
    assert context.available_days == 20
    assert context.required_earnings == 100
    assert not context.is_free(10)
    assert context.is_free(11)


def test_locked_shift_reduces_required_earnings(catalog):
    """Test manually pinned shifts count toward the required earnings."""
    config = FinancialConfiguration(
        starting_balance=0,
        target_ending_balance=500,
        manual_constraints={5: ManualConstraint(shifts="large+large")},
    )
    context = analyze_crisis(config, catalog, random.Random(1))

    assert context.required_earnings == pytest.approx(500 - 173)
    assert 5 in context.locked_days
    assert 5 not in context.free_days
    assert context.available_days == 29
