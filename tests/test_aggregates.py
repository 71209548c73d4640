import math

from tracker.aggregates import budget_status, by_category, category_spending, income_vs_expense, totals
from tracker.domain import CATEGORIES, Transaction


def make_tx(id, amount, type="expense", category="Food"):
    return Transaction(id=id, description=f"tx {id}", amount=amount, type=type, category=category, date="2025-09-01")


def sample():
    return (
        make_tx("t1", 1000, type="income", category="Other"),
        make_tx("t2", 120, category="Food"),
        make_tx("t3", 80, category="Food"),
        make_tx("t4", 45.5, category="Transport"),
        make_tx("t5", 250, type="income", category="Other"),
    )


def test_totals():
    t = totals(sample())
    assert t.income == 1250
    assert t.expense == 245.5
    assert t.balance == t.income - t.expense


def test_totals_empty():
    t = totals(())
    assert (t.balance, t.income, t.expense) == (0, 0, 0)


def test_totals_balance_can_go_negative():
    t = totals((make_tx("t1", 10, type="income"), make_tx("t2", 30)))
    assert t.balance == -20


def test_by_category_expense_only():
    grouped = by_category(sample())
    assert grouped == {"Food": 200, "Transport": 45.5}
    assert "Other" not in grouped


def test_by_category_omits_empty_categories():
    grouped = by_category((make_tx("t1", 500, type="income", category="Bills"),))
    assert grouped == {}
    assert all(total != 0 for total in by_category(sample()).values())


def test_income_vs_expense_always_has_both_points():
    assert income_vs_expense(()) == {"Income": 0, "Expense": 0}
    assert income_vs_expense(sample()) == {"Income": 1250, "Expense": 245.5}


def test_category_spending():
    assert category_spending(sample(), "Food") == 200
    assert category_spending(sample(), "Other") == 0


def test_budget_status_covers_every_category_in_order():
    statuses = budget_status(sample(), {"Food": 500, "Transport": 40})
    assert tuple(s.category for s in statuses) == CATEGORIES

    food = statuses[0]
    assert food.spent == 200
    assert food.limit == 500
    assert food.percentage == 40
    assert not food.over_budget

    transport = statuses[1]
    assert transport.over_budget
    assert transport.percentage > 100


def test_budget_status_zero_limit_never_divides():
    statuses = budget_status(sample(), {"Food": 0})
    for s in statuses:
        assert math.isfinite(s.percentage)
        assert s.percentage == 0

    food = statuses[0]
    assert food.over_budget  # spend with no limit still counts as over

    bills = statuses[3]
    assert bills.category == "Bills"
    assert not bills.over_budget


def test_budget_status_ignores_negative_limits():
    statuses = budget_status(sample(), {"Food": -50})
    assert statuses[0].limit == 0
    assert statuses[0].percentage == 0


def test_budget_status_custom_categories():
    statuses = budget_status(sample(), {"Transport": 91}, ("Transport",))
    assert len(statuses) == 1
    assert statuses[0].percentage == 50
