"""Rule-based advisories derived from totals and per-category spend.

Rules run in a fixed order and each one emits at most one advisory. The
savings rule deliberately stays quiet for rates in [10, 20) and whenever
there is no income at all.
"""
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Dict, Optional, Sequence, Tuple

from tracker.aggregates import by_category, totals
from tracker.domain import Advisory, Totals, Transaction

POSITIVE = "positive"
OVERSPENDING = "overspending"
BOOST_SAVINGS = "boost_savings"
CONCENTRATION = "concentration"

GOOD_SAVINGS_RATE = 20.0
LOW_SAVINGS_RATE = 10.0
CONCENTRATION_SHARE = 40.0

Rule = Callable[[Totals, Dict[str, float]], Optional[Advisory]]


def round_percent(value: float) -> int:
    return int(Decimal(value).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def savings_rate(t: Totals) -> float:
    return (t.income - t.expense) / t.income * 100 if t.income > 0 else 0.0


def top_category(grouped: Dict[str, float]) -> Optional[Tuple[str, float]]:
    # largest amount wins, ties go to the alphabetically first category
    ranked = sorted(grouped.items(), key=lambda item: (-item[1], item[0]))
    return ranked[0] if ranked else None


def savings_rule(t: Totals, grouped: Dict[str, float]) -> Optional[Advisory]:
    rate = savings_rate(t)
    if rate >= GOOD_SAVINGS_RATE:
        return Advisory(
            kind=POSITIVE,
            title="Great Savings!",
            message=f"You're saving {round_percent(rate)}% of your income. Keep it up!",
        )
    if rate < 0:
        return Advisory(
            kind=OVERSPENDING,
            title="Overspending Alert",
            message="Your expenses exceed your income. Time to review your budget.",
        )
    if t.income > 0 and rate < LOW_SAVINGS_RATE:
        return Advisory(
            kind=BOOST_SAVINGS,
            title="Boost Your Savings",
            message="Try to save at least 20% of your income for financial health.",
        )
    return None


def concentration_rule(t: Totals, grouped: Dict[str, float]) -> Optional[Advisory]:
    top = top_category(grouped)
    if top is None:
        return None
    name, amount = top
    total_expense = sum(grouped.values())
    share = amount / total_expense * 100 if total_expense > 0 else 0.0
    if share <= CONCENTRATION_SHARE:
        return None
    return Advisory(
        kind=CONCENTRATION,
        title="Spending Insight",
        message=f"You spend {round_percent(share)}% of expenses on {name}. Consider simpler alternatives.",
    )


DEFAULT_RULES: Tuple[Rule, ...] = (savings_rule, concentration_rule)


def recommendations(
    trans: Sequence[Transaction], rules: Sequence[Rule] = DEFAULT_RULES
) -> Tuple[Advisory, ...]:
    if not trans:
        return ()
    t = totals(trans)
    grouped = by_category(trans)
    return tuple(adv for adv in (rule(t, grouped) for rule in rules) if adv is not None)
