"""Tests for shift catalog, configuration and ledger models."""

import pytest
from shiftplan.models import (
    ShiftCatalog,
    ShiftType,
    Shift,
    UnknownShiftType,
    FinancialConfiguration,
    Expense,
    Deposit,
    ManualConstraint,
    EMPTY,
    parse_assignment,
    format_assignment,
    empty_schedule,
    compute_ledger,
    build_day_schedules,
)

L, M, S = ShiftType.LARGE, ShiftType.MEDIUM, ShiftType.SMALL


@pytest.fixture
def catalog():
    """Default shift catalog."""
    return ShiftCatalog()


@pytest.fixture
def sample_config():
    """Configuration with a few expenses and a deposit."""
    return FinancialConfiguration(
        starting_balance=100.0,
        target_ending_balance=500.0,
        minimum_balance=0.0,
        expenses=[
            Expense(day=1, amount=75, name="Phone"),
            Expense(day=15, amount=600, name="Rent"),
            Expense(day=15, amount=40, name="Internet"),
        ],
        deposits=[Deposit(day=11, amount=300)],
    )


def test_catalog_defaults(catalog):
    """Test default shift values."""
    assert catalog.net(ShiftType.LARGE) == 86.5
    assert catalog.net("medium") == 67.5
    assert catalog.get(ShiftType.SMALL).gross == 64.0


def test_catalog_unknown_key(catalog):
    """Test lookups of absent shift keys."""
    with pytest.raises(UnknownShiftType):
        catalog.get("huge")

    partial = ShiftCatalog(shifts={L: Shift(net=86.5, gross=94.5)})
    with pytest.raises(UnknownShiftType):
        partial.net(ShiftType.SMALL)


def test_catalog_means(catalog):
    """Test weighted and double-shift means."""
    assert catalog.mean_net() == pytest.approx((86.5 + 67.5 + 56.0) / 3)
    assert catalog.mean_net({"large": 1.0}) == pytest.approx(86.5)
    assert catalog.mean_net({"large": 0.6, "medium": 0.2, "small": 0.2}) == pytest.approx(76.6)
    assert catalog.mean_double_net() == pytest.approx((173 + 154 + 135) / 3)


def test_assignment_net(catalog):
    """Test day earnings for empty, single and double days."""
    assert catalog.assignment_net(EMPTY) == 0
    assert catalog.assignment_net((M,)) == 67.5
    assert catalog.assignment_net((L, L)) == 173.0


def test_parse_and_format_assignment():
    """Test textual day assignments."""
    assert parse_assignment("large+medium") == (L, M)
    assert parse_assignment("small") == (S,)
    assert parse_assignment("") == EMPTY
    assert parse_assignment(None) == EMPTY
    assert format_assignment((M, S)) == "medium+small"
    assert format_assignment(EMPTY) == ""


def test_parse_assignment_errors():
    """Test rejected day assignments."""
    with pytest.raises(ValueError):
        parse_assignment("large+large+small")
    with pytest.raises(UnknownShiftType):
        parse_assignment("huge")


def test_expenses_and_deposits_by_day(sample_config):
    """Test per-day totals."""
    expenses = sample_config.expenses_by_day()
    deposits = sample_config.deposits_by_day()

    assert len(expenses) == 31
    assert expenses[1] == 75
    assert expenses[15] == 640
    assert deposits[11] == 300
    assert sum(deposits) == 300


def test_fixed_expenses_override(sample_config):
    """Test manual fixed expenses replacing the day's total."""
    sample_config.manual_constraints = {15: ManualConstraint(fixed_expenses=100)}
    assert sample_config.expenses_by_day()[15] == 100


def test_ledger_identity(sample_config, catalog):
    """Test balance[d] = balance[d-1] + deposits + earnings - expenses."""
    genes = empty_schedule()
    genes[0] = (L,)
    genes[9] = (M, S)
    genes[20] = (L, L)

    balances = compute_ledger(genes, sample_config, catalog)
    expenses = sample_config.expenses_by_day()
    deposits = sample_config.deposits_by_day()

    assert len(balances) == 31
    assert balances[0] == sample_config.starting_balance
    for day in range(1, 31):
        expected = balances[day - 1] + deposits[day] + catalog.assignment_net(genes[day - 1]) - expenses[day]
        assert balances[day] == pytest.approx(expected)
    assert balances[30] == pytest.approx(100 + 86.5 + 123.5 + 173 + 300 - 715)


def test_ledger_balance_edit(catalog):
    """Test the ledger reset on the balance edit day."""
    config = FinancialConfiguration(
        starting_balance=0,
        target_ending_balance=0,
        expenses=[Expense(day=3, amount=50)],
        balance_edit_day=5,
        new_starting_balance=1000,
    )
    genes = empty_schedule()
    genes[6] = (L,)

    balances = compute_ledger(genes, config, catalog)

    assert balances[3] == -50
    assert balances[5] == 1000
    assert balances[7] == 1086.5
    assert balances[30] == 1086.5
    assert config.start_day == 6
    assert config.effective_starting_balance == 1000


def test_ledger_rejects_wrong_length(sample_config, catalog):
    """Test genomes that do not cover the horizon."""
    with pytest.raises(ValueError):
        compute_ledger([EMPTY] * 29, sample_config, catalog)


def test_build_day_schedules(sample_config, catalog):
    """Test formatted per-day rows."""
    genes = empty_schedule()
    genes[0] = (L,)

    rows = build_day_schedules(genes, sample_config, catalog)

    assert len(rows) == 30
    assert rows[0].day == 1
    assert rows[0].shifts == ["large"]
    assert rows[0].start_balance == 100
    assert rows[0].end_balance == pytest.approx(100 + 86.5 - 75)
    for previous, current in zip(rows, rows[1:]):
        assert current.start_balance == previous.end_balance


def test_locked_shifts_and_fixed_balances():
    """Test manual constraint accessors."""
    config = FinancialConfiguration(
        starting_balance=0,
        target_ending_balance=0,
        manual_constraints={
            4: ManualConstraint(shifts="large"),
            9: ManualConstraint(fixed_balance=250.0),
        },
    )
    assert config.locked_shifts() == {4: "large"}
    assert config.fixed_balances() == {9: 250.0}
