"""Key-value persistence for the tracker state.

A store maps string keys to string values. The typed helpers below read and
write the five persisted keys and fall back to defaults whenever stored
content is missing or malformed.
"""

import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from tracker.budgets import DEFAULT_BUDGETS
from tracker.domain import SavingsGoal, Transaction
from tracker.functional import is_finite_number, validate_goal, validate_transaction
from tracker.logger import get_logger

logger = get_logger(__name__)

TRANSACTIONS_KEY = "transactions"
THEME_KEY = "theme"
CURRENCY_KEY = "currency"
BUDGETS_KEY = "budgets"
GOALS_KEY = "savingsGoals"


class KeyValueStore(ABC):

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        pass

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        pass

    @abstractmethod
    def remove_item(self, key: str) -> None:
        pass

    @abstractmethod
    def clear(self) -> None:
        pass


class MemoryStore(KeyValueStore):

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)

    def clear(self) -> None:
        self._data.clear()


class JsonFileStore(KeyValueStore):
    """Store backed by a single JSON object on disk, rewritten on every change."""

    def __init__(self, path: Path | str):
        self.path = Path(path)
        self._data = self._read()

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Ignoring unreadable store {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring store {self.path}: expected an object")
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _write(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as handle:
            json.dump(self._data, handle, indent=2, ensure_ascii=False)

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._data[key] = value
        self._write()

    def remove_item(self, key: str) -> None:
        if self._data.pop(key, None) is not None:
            self._write()

    def clear(self) -> None:
        self._data = {}
        self._write()


def _load_json(store: KeyValueStore, key: str) -> Any:
    raw = store.get_item(key)
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        logger.warning(f"Malformed JSON under '{key}', using defaults: {e}")
        return None


def transaction_to_record(t: Transaction) -> Dict[str, Any]:
    return {
        "id": t.id,
        "description": t.description,
        "amount": t.amount,
        "type": t.type,
        "category": t.category,
        "date": t.date,
        "recurring": t.recurring,
    }


def transaction_from_record(record: Dict[str, Any]) -> Transaction:
    return Transaction(
        id=str(record["id"]),
        description=record["description"],
        amount=record["amount"],
        type=record["type"],
        category=record["category"],
        date=str(record.get("date", "")),
        recurring=bool(record.get("recurring", False)),
    )


def goal_to_record(g: SavingsGoal) -> Dict[str, Any]:
    return {"id": g.id, "name": g.name, "target": g.target, "currentAmount": g.current_amount}


def goal_from_record(record: Dict[str, Any]) -> SavingsGoal:
    return SavingsGoal(
        id=str(record["id"]),
        name=record["name"],
        target=record["target"],
        current_amount=record.get("currentAmount", 0),
    )


def load_transactions(store: KeyValueStore) -> Tuple[Transaction, ...]:
    data = _load_json(store, TRANSACTIONS_KEY)
    if not isinstance(data, list):
        if data is not None:
            logger.warning(f"'{TRANSACTIONS_KEY}' is not a list, starting empty")
        return ()

    result = []
    for record in data:
        if not record:
            continue
        try:
            t = transaction_from_record(record)
        except (KeyError, TypeError, AttributeError) as e:
            logger.warning(f"Skipping malformed transaction {record!r}: {e}")
            continue
        checked = validate_transaction(t)
        if checked.is_left():
            logger.warning(f"Skipping invalid transaction: {checked.get_error()['message']}")
            continue
        result.append(t)
    return tuple(result)


def save_transactions(store: KeyValueStore, trans: Tuple[Transaction, ...]) -> None:
    store.set_item(TRANSACTIONS_KEY, json.dumps([transaction_to_record(t) for t in trans]))


def load_goals(store: KeyValueStore) -> Tuple[SavingsGoal, ...]:
    data = _load_json(store, GOALS_KEY)
    if not isinstance(data, list):
        return ()

    result = []
    for record in data:
        try:
            g = goal_from_record(record)
        except (KeyError, TypeError, AttributeError) as e:
            logger.warning(f"Skipping malformed savings goal {record!r}: {e}")
            continue
        if validate_goal(g).is_left():
            logger.warning(f"Skipping invalid savings goal {g.id}")
            continue
        result.append(g)
    return tuple(result)


def save_goals(store: KeyValueStore, goals: Tuple[SavingsGoal, ...]) -> None:
    store.set_item(GOALS_KEY, json.dumps([goal_to_record(g) for g in goals]))


def load_budgets(store: KeyValueStore) -> Dict[str, float]:
    data = _load_json(store, BUDGETS_KEY)
    if not isinstance(data, dict):
        return dict(DEFAULT_BUDGETS)
    return {
        str(cat): float(limit)
        for cat, limit in data.items()
        if is_finite_number(limit) and limit >= 0
    }


def save_budgets(store: KeyValueStore, budgets: Dict[str, float]) -> None:
    store.set_item(BUDGETS_KEY, json.dumps(budgets))
