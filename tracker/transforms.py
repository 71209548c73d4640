from typing import Tuple

from tracker.domain import Transaction
from tracker.functional import Maybe, Nothing, Some


def add_transaction(
    trans: Tuple[Transaction, ...], t: Transaction
) -> Tuple[Transaction, ...]:
    # newest first
    return (t,) + trans


def update_transaction(
    trans: Tuple[Transaction, ...], updated: Transaction
) -> Tuple[Transaction, ...]:
    return tuple(updated if t.id == updated.id else t for t in trans)


def delete_transaction(
    trans: Tuple[Transaction, ...], tx_id: str
) -> Tuple[Transaction, ...]:
    return tuple(filter(lambda t: t.id != tx_id, trans))


def find_transaction(trans: Tuple[Transaction, ...], tx_id: str) -> Maybe[Transaction]:
    for t in trans:
        if t.id == tx_id:
            return Some(t)
    return Nothing()
