"""Tests for fitness evaluation."""

import random
import pytest
from shiftplan.genetic.crisis import analyze_crisis
from shiftplan.genetic.fitness import (
    evaluate_fitness,
    balance_penalty,
    fixed_balance_penalty,
    work_day_penalty,
    clustering_penalty,
    count_violations,
)
from shiftplan.models import (
    ShiftCatalog,
    ShiftType,
    Shift,
    UnknownShiftType,
    FinancialConfiguration,
    Expense,
    ManualConstraint,
    empty_schedule,
)

L = ShiftType.LARGE


@pytest.fixture
def catalog():
    return ShiftCatalog()


@pytest.fixture
def balanced_config():
    return FinancialConfiguration(starting_balance=5000, target_ending_balance=5000, minimum_balance=0)


@pytest.fixture
def balanced_context(balanced_config, catalog):
    return analyze_crisis(balanced_config, catalog, random.Random(0))


@pytest.fixture
def crisis_config():
    return FinancialConfiguration(
        starting_balance=0,
        target_ending_balance=3000,
        minimum_balance=0,
        expenses=[Expense(day=30, amount=0)],
    )


@pytest.fixture
def crisis_context(crisis_config, catalog):
    return analyze_crisis(crisis_config, catalog, random.Random(0))


def test_empty_schedule_is_optimal_when_nothing_to_earn(balanced_config, catalog, balanced_context):
    """Test that a month needing no work scores 0 with no work."""
    evaluation = evaluate_fitness(empty_schedule(), balanced_config, catalog, balanced_context)

    assert evaluation.fitness == 0
    assert evaluation.violations == 0
    assert evaluation.work_days == 0
    assert evaluation.final_balance == 5000
    assert evaluation.total_earnings == 0


def test_violations_dominate(catalog):
    """Test each day under the minimum adds the violation penalty."""
    config = FinancialConfiguration(
        starting_balance=0,
        target_ending_balance=0,
        minimum_balance=0,
        expenses=[Expense(day=1, amount=100)],
    )
    context = analyze_crisis(config, catalog, random.Random(0))

    evaluation = evaluate_fitness(empty_schedule(), config, catalog, context)

    assert evaluation.violations == 30
    assert evaluation.fitness >= 30 * 5000
    assert evaluation.min_balance == -100


def test_count_violations_from_start_day():
    """Test violations before the start day are ignored."""
    balances = [-1.0] * 5 + [10.0] * 26
    assert count_violations(balances, 0) == 4
    assert count_violations(balances, 0, start_day=5) == 0


def test_overshoot_costs_more_in_normal_mode(balanced_config, balanced_context):
    """Test the final balance asymmetry outside crisis mode."""
    scale = balanced_context.balance_scale
    over = [5000.0] * 30 + [5000.0 + scale]
    under = [5000.0] * 30 + [5000.0 - scale]

    assert balance_penalty(over, 0, balanced_config, balanced_context) == pytest.approx(200)
    assert balance_penalty(under, 0, balanced_config, balanced_context) == pytest.approx(100)


def test_undershoot_costs_more_in_crisis_mode(crisis_config, crisis_context):
    """Test the flipped asymmetry and target miss penalty in crisis mode."""
    scale = crisis_context.balance_scale
    over = [3000.0] * 30 + [3000.0 + scale]
    under = [3000.0] * 30 + [3000.0 - scale]

    assert balance_penalty(over, 0, crisis_config, crisis_context) == pytest.approx(100)
    assert balance_penalty(under, 0, crisis_config, crisis_context) == pytest.approx(1200)


def test_deadline_buffer(catalog):
    """Test the buffer penalty on an expense day close to the minimum."""
    config = FinancialConfiguration(
        starting_balance=1000,
        target_ending_balance=0,
        minimum_balance=0,
        expenses=[Expense(day=10, amount=900)],
    )
    context = analyze_crisis(config, catalog, random.Random(0))
    assert 10 in context.deadline_days

    balances = [1000.0] * 10 + [100.0] * 21
    # Final balance 100 over target 0: 100 * (100 / scale) * 2; day 10 short of 200 by 100
    expected = 100 * 100 / context.balance_scale * 2 + 100 * 100 / context.balance_scale
    assert balance_penalty(balances, 0, config, context) == pytest.approx(expected)


def test_fixed_balance_penalty(catalog):
    """Test a day pinned to a balance the schedule misses."""
    config = FinancialConfiguration(
        starting_balance=5000,
        target_ending_balance=5000,
        manual_constraints={10: ManualConstraint(fixed_balance=5100)},
    )
    context = analyze_crisis(config, catalog, random.Random(0))

    assert fixed_balance_penalty([5000.0] * 31, config, context) == pytest.approx(1000 * 100 / context.balance_scale)
    assert fixed_balance_penalty([5100.0] * 31, config, context) == 0


def test_work_day_penalty_spacing():
    """Test count, streak, gap and variance terms."""
    assert work_day_penalty([], 0, 0) == 0
    assert work_day_penalty([1, 5, 9], 3, 3) == 0
    assert work_day_penalty([1, 5], 2, 3) == 200
    # Gaps 2 and 5: variance 2.25
    assert work_day_penalty([1, 3, 8], 3, 3) == pytest.approx(150 * 2.25)
    # Seven-day streak: one streak penalty and six short gaps
    assert work_day_penalty(list(range(1, 8)), 7, 7) == pytest.approx(500 + 6 * 150)


def test_clustering_penalty():
    """Test windows holding more than three work days."""
    genes = empty_schedule()
    assert clustering_penalty(genes) == 0

    for day in range(1, 5):
        genes[day - 1] = (L,)
    assert clustering_penalty(genes) == 300

    genes[4] = (L,)
    assert clustering_penalty(genes) == 600


def test_unknown_shift_raises(balanced_config, balanced_context):
    """Test a genome using a shift missing from the catalog."""
    catalog = ShiftCatalog(shifts={ShiftType.SMALL: Shift(net=56, gross=64)})
    genes = empty_schedule()
    genes[0] = (L,)

    with pytest.raises(UnknownShiftType):
        evaluate_fitness(genes, balanced_config, catalog, balanced_context)
