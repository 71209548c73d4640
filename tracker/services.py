from datetime import datetime, timezone
from typing import Any, Callable, Dict, Mapping, Optional, Sequence
from uuid import uuid4

from tracker.aggregates import budget_status, by_category, income_vs_expense, totals
from tracker.budgets import BudgetLedger
from tracker.domain import ALL, CATEGORIES, EXPENSE, SavingsGoal, Transaction
from tracker.events import (
    BUDGETS_CHANGED,
    GOALS_CHANGED,
    PREFERENCES_CHANGED,
    TRANSACTIONS_CHANGED,
    Event,
    EventBus,
)
from tracker.export import export_csv
from tracker.functional import (
    Either,
    validate_funds,
    validate_goal,
    validate_goal_form,
    validate_transaction,
    validate_transaction_form,
)
from tracker.goals import SavingsGoalLedger
from tracker.logger import get_logger
from tracker.recommendations import recommendations
from tracker.repository import TransactionRepository
from tracker.settings import CURRENCIES, Preferences
from tracker.storage import (
    KeyValueStore,
    load_budgets,
    load_goals,
    load_transactions,
    save_budgets,
    save_goals,
    save_transactions,
)

logger = get_logger(__name__)

Calculator = Callable[[Sequence[Transaction], Mapping[str, float], Dict[str, Any]], Dict[str, Any]]


def calc_totals(transactions, budgets, acc):
    return {"totals": totals(transactions)}


def calc_by_category(transactions, budgets, acc):
    return {"by_category": by_category(transactions)}


def calc_income_vs_expense(transactions, budgets, acc):
    return {"income_vs_expense": income_vs_expense(transactions)}


def calc_budget_status(transactions, budgets, acc):
    return {"budget_status": budget_status(transactions, budgets, CATEGORIES)}


def calc_recommendations(transactions, budgets, acc):
    return {"recommendations": recommendations(transactions)}


DEFAULT_CALCULATORS = (
    calc_totals,
    calc_by_category,
    calc_income_vs_expense,
    calc_budget_status,
    calc_recommendations,
)


class ReportService:
    """Facade that builds the dashboard snapshot from injected calculators.

    calculators: sequence of functions taking (transactions, budgets, acc) -> dict
    Nothing is cached; each call recomputes from the collection it is given.
    """

    def __init__(self, calculators: Sequence[Calculator] = DEFAULT_CALCULATORS):
        self.calculators = calculators

    def dashboard(self, transactions: Sequence[Transaction], budgets: Mapping[str, float]) -> Dict[str, Any]:
        report = {"steps": [], "result": {}}

        acc: Dict[str, Any] = {}
        for calc in self.calculators:
            out = calc(transactions, budgets, acc)
            report["steps"].append({"calculator": getattr(calc, "__name__", str(calc)), "output": out})
            acc.update(out)

        report["result"] = acc
        return report


def now_iso() -> str:
    """Current UTC time as `YYYY-MM-DDTHH:MM:SS.mmmZ`."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class ExpenseTracker:
    """One user's session: ledgers loaded from a store and kept in sync with it.

    The ledgers publish a change event after every mutation; the handlers
    subscribed here write the matching key back to the store.
    """

    def __init__(
        self,
        store: KeyValueStore,
        bus: Optional[EventBus] = None,
        reports: Optional[ReportService] = None,
        id_factory: Callable[[], str] = lambda: str(uuid4()),
        clock: Callable[[], str] = now_iso,
    ):
        self.store = store
        self.bus = bus or EventBus()
        self.reports = reports or ReportService()
        self._new_id = id_factory
        self._now = clock

        self.bus.subscribe(TRANSACTIONS_CHANGED, self._persist_transactions)
        self.bus.subscribe(BUDGETS_CHANGED, self._persist_budgets)
        self.bus.subscribe(GOALS_CHANGED, self._persist_goals)
        self.bus.subscribe(PREFERENCES_CHANGED, self._persist_preferences)
        self._load()

    def _load(self) -> None:
        self.transactions = TransactionRepository(load_transactions(self.store), self.bus)
        self.budgets = BudgetLedger(load_budgets(self.store), self.bus)
        self.goals = SavingsGoalLedger(load_goals(self.store), self.bus)
        self.preferences = Preferences.load(self.store)
        logger.info(
            f"Loaded {len(self.transactions)} transactions and {len(self.goals)} savings goals"
        )

    # ── persistence handlers ─────────────────────────────

    def _persist_transactions(self, event: Event, payload: dict) -> dict:
        save_transactions(self.store, payload["transactions"])
        return {"persisted": "transactions"}

    def _persist_budgets(self, event: Event, payload: dict) -> dict:
        save_budgets(self.store, payload["budgets"])
        return {"persisted": "budgets"}

    def _persist_goals(self, event: Event, payload: dict) -> dict:
        save_goals(self.store, payload["goals"])
        return {"persisted": "savingsGoals"}

    def _persist_preferences(self, event: Event, payload: dict) -> dict:
        payload["preferences"].save(self.store)
        return {"persisted": "preferences"}

    # ── transactions ─────────────────────────────────────

    def submit_transaction(
        self,
        description: Any,
        amount: Any,
        tx_type: str = EXPENSE,
        category: str = CATEGORIES[0],
        recurring: bool = False,
        editing_id: Optional[str] = None,
    ) -> Either[dict, Optional[Transaction]]:
        """Validate a form submission and add it, or replace `editing_id` with it.

        Edits keep the original id and date. An edit whose record has been
        deleted in the meantime is dropped and yields Right(None).
        """
        checked = validate_transaction_form(description, amount, tx_type, category)
        if editing_id is not None:
            return checked.map(lambda fields: self._apply_edit(editing_id, fields, bool(recurring)))
        return (
            checked
            .map(lambda fields: Transaction(
                id=self._new_id(), date=self._now(), recurring=bool(recurring), **fields
            ))
            .bind(validate_transaction)
            .map(self._store_transaction)
        )

    def _store_transaction(self, t: Transaction) -> Transaction:
        self.transactions.add(t)
        return t

    def _apply_edit(self, tx_id: str, fields: Dict[str, Any], recurring: bool) -> Optional[Transaction]:
        updated = self.transactions.find(tx_id).map(
            lambda original: Transaction(id=tx_id, date=original.date, recurring=recurring, **fields)
        )
        if updated.is_none():
            logger.info(f"Transaction {tx_id} no longer exists, edit dropped")
            return None
        t = updated.get_or_else(None)
        self.transactions.update(t)
        return t

    def delete_transaction(self, tx_id: str) -> None:
        self.transactions.delete(tx_id)

    def filter_transactions(self, category: str = ALL, search: str = ""):
        return self.transactions.filter(category, search)

    def export_csv(self) -> str:
        return export_csv(self.transactions.items)

    # ── budgets ──────────────────────────────────────────

    def set_budget(self, category: str, value: Any) -> None:
        self.budgets.set_limit(category, value)

    # ── savings goals ────────────────────────────────────

    def submit_goal(self, name: Any, target: Any, current_amount: Any = 0) -> Either[dict, SavingsGoal]:
        return (
            validate_goal_form(name, target, current_amount)
            .map(lambda fields: SavingsGoal(id=self._new_id(), **fields))
            .bind(validate_goal)
            .map(self._store_goal)
        )

    def _store_goal(self, goal: SavingsGoal) -> SavingsGoal:
        self.goals.add(goal)
        return goal

    def add_funds(self, goal_id: str, delta: Any) -> Either[dict, float]:
        """Add (or with a negative delta, withdraw) funds; unknown goals are ignored."""
        return validate_funds(delta).map(lambda value: self._fund_goal(goal_id, value))

    def _fund_goal(self, goal_id: str, value: float) -> float:
        self.goals.add_funds(goal_id, value)
        return value

    def delete_goal(self, goal_id: str) -> None:
        self.goals.delete(goal_id)

    # ── preferences ──────────────────────────────────────

    def set_currency(self, symbol: str) -> None:
        if symbol not in CURRENCIES:
            raise ValueError(f"Unsupported currency {symbol!r}")
        self.preferences.currency = symbol
        logger.info(f"Currency set to {self.preferences.currency_code}")
        self.bus.publish(PREFERENCES_CHANGED, {"preferences": self.preferences})

    def set_dark_mode(self, enabled: bool) -> None:
        self.preferences.dark_mode = bool(enabled)
        self.bus.publish(PREFERENCES_CHANGED, {"preferences": self.preferences})

    def toggle_dark_mode(self) -> None:
        self.set_dark_mode(not self.preferences.dark_mode)

    # ── derived state ────────────────────────────────────

    def dashboard(self) -> Dict[str, Any]:
        return self.reports.dashboard(self.transactions.items, self.budgets.limits)["result"]

    def reset(self) -> None:
        """Wipe every persisted key and reload defaults. Irreversible."""
        logger.warning("Clearing all persisted state")
        self.store.clear()
        self._load()
