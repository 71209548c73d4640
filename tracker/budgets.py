import math
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from tracker.aggregates import budget_status
from tracker.domain import CATEGORIES, BudgetStatus, Transaction
from tracker.events import BUDGETS_CHANGED, EventBus
from tracker.functional import to_number
from tracker.logger import get_logger

logger = get_logger(__name__)

DEFAULT_BUDGETS: Dict[str, float] = {"Food": 500, "Transport": 200, "Shopping": 300}

WARNING_LEVEL = 80.0


def coerce_limit(value: Any) -> float:
    """Blank, non-numeric and negative input all mean "no limit" (0)."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return 0.0
    number = to_number(value)
    if not math.isfinite(number) or number < 0:
        return 0.0
    return number


def set_limit(budgets: Mapping[str, float], category: str, value: Any) -> Dict[str, float]:
    return {**budgets, category: coerce_limit(value)}


def budget_level(percentage: float) -> str:
    if percentage > 100:
        return "over"
    if percentage > WARNING_LEVEL:
        return "warning"
    return "ok"


class BudgetLedger:
    """Monthly limit per category; 0 or a missing entry means unset."""

    def __init__(self, budgets: Optional[Mapping[str, float]] = None, bus: Optional[EventBus] = None):
        self._budgets: Dict[str, float] = dict(DEFAULT_BUDGETS if budgets is None else budgets)
        self._bus = bus

    @property
    def limits(self) -> Dict[str, float]:
        return dict(self._budgets)

    def limit(self, category: str) -> float:
        return self._budgets.get(category, 0.0)

    def set_limit(self, category: str, value: Any) -> None:
        self._budgets = set_limit(self._budgets, category, value)
        logger.info(f"Budget for {category} set to {self._budgets[category]}")
        if self._bus is not None:
            self._bus.publish(BUDGETS_CHANGED, {"budgets": self.limits})

    def status(
        self, trans: Sequence[Transaction], categories: Sequence[str] = CATEGORIES
    ) -> Tuple[BudgetStatus, ...]:
        return budget_status(trans, self._budgets, categories)
