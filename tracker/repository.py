from typing import Iterator, Optional, Tuple

from tracker.domain import ALL, Transaction
from tracker.events import TRANSACTIONS_CHANGED, EventBus
from tracker.functional import Maybe, validate_transaction
from tracker.lazy import filter_transactions
from tracker.logger import get_logger
from tracker.transforms import (
    add_transaction,
    delete_transaction,
    find_transaction,
    update_transaction,
)

logger = get_logger(__name__)


class TransactionRepository:
    """Ordered, newest-first collection of transactions.

    Every effective mutation publishes TRANSACTIONS_CHANGED with the new
    collection so subscribers can persist it. Misses on update/delete are
    silent no-ops.
    """

    def __init__(self, transactions: Tuple[Transaction, ...] = (), bus: Optional[EventBus] = None):
        self._items: Tuple[Transaction, ...] = tuple(transactions)
        self._bus = bus

    @property
    def items(self) -> Tuple[Transaction, ...]:
        return self._items

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Transaction]:
        return iter(self._items)

    def add(self, t: Transaction) -> None:
        checked = validate_transaction(t)
        if checked.is_left():
            raise ValueError(checked.get_error()["message"])
        self._set(add_transaction(self._items, t))
        logger.info(f"Added {t.type} {t.id} ({t.category}, {t.amount})")

    def update(self, t: Transaction) -> None:
        if find_transaction(self._items, t.id).is_none():
            return
        checked = validate_transaction(t)
        if checked.is_left():
            raise ValueError(checked.get_error()["message"])
        self._set(update_transaction(self._items, t))
        logger.info(f"Updated transaction {t.id}")

    def delete(self, tx_id: str) -> None:
        remaining = delete_transaction(self._items, tx_id)
        if len(remaining) == len(self._items):
            return
        self._set(remaining)
        logger.info(f"Deleted transaction {tx_id}")

    def find(self, tx_id: str) -> Maybe[Transaction]:
        return find_transaction(self._items, tx_id)

    def filter(self, category: str = ALL, search: str = "") -> Tuple[Transaction, ...]:
        return filter_transactions(self._items, category, search)

    def _set(self, items: Tuple[Transaction, ...]) -> None:
        self._items = items
        if self._bus is not None:
            self._bus.publish(TRANSACTIONS_CHANGED, {"transactions": items})
