from functools import reduce
from typing import Dict, Iterable, Mapping, Sequence, Tuple

from tracker.domain import CATEGORIES, BudgetStatus, Totals, Transaction


def totals(trans: Iterable[Transaction]) -> Totals:
    income, expense = reduce(
        lambda acc, t: (acc[0] + t.amount, acc[1]) if t.is_income() else (acc[0], acc[1] + t.amount),
        trans,
        (0.0, 0.0),
    )
    return Totals(balance=income - expense, income=income, expense=expense)


def by_category(trans: Iterable[Transaction]) -> Dict[str, float]:
    """Summed expense per category, in order of first appearance.

    Income is ignored and categories that add up to zero are left out.
    """
    grouped: Dict[str, float] = {}
    for t in trans:
        if t.is_expense():
            grouped[t.category] = grouped.get(t.category, 0.0) + t.amount
    return {cat: total for cat, total in grouped.items() if total != 0}


def income_vs_expense(trans: Iterable[Transaction]) -> Dict[str, float]:
    t = totals(trans)
    return {"Income": t.income, "Expense": t.expense}


def category_spending(trans: Iterable[Transaction], cat: str) -> float:
    return reduce(
        lambda acc, t: acc + t.amount if t.is_expense() and t.category == cat else acc, trans, 0.0
    )


def _limit_of(budgets: Mapping[str, float], cat: str) -> float:
    limit = budgets.get(cat) or 0
    return float(limit) if limit > 0 else 0.0


def budget_status(
    trans: Sequence[Transaction],
    budgets: Mapping[str, float],
    categories: Sequence[str] = CATEGORIES,
) -> Tuple[BudgetStatus, ...]:
    result = []
    for cat in categories:
        spent = category_spending(trans, cat)
        limit = _limit_of(budgets, cat)
        # an unset limit reports 0% but still counts any spend as over
        percentage = spent / limit * 100 if limit > 0 else 0.0
        result.append(
            BudgetStatus(
                category=cat,
                spent=spent,
                limit=limit,
                percentage=percentage,
                over_budget=spent > limit,
            )
        )
    return tuple(result)
