from typing import Callable, Iterable, Iterator, Tuple

from tracker.domain import ALL, Transaction


def iter_transactions(
    trans: Iterable[Transaction], pred: Callable[[Transaction], bool]
) -> Iterator[Transaction]:
    for t in trans:
        if pred(t):
            yield t


def by_category(category: str):
    def _filter(t: Transaction) -> bool:
        return category == ALL or t.category == category

    return _filter


def by_search(text: str):
    needle = (text or "").lower()

    def _filter(t: Transaction) -> bool:
        return needle in t.description.lower()

    return _filter


def all_of(*preds: Callable[[Transaction], bool]):
    def _filter(t: Transaction) -> bool:
        return all(p(t) for p in preds)

    return _filter


def filter_transactions(
    trans: Iterable[Transaction], category: str = ALL, search: str = ""
) -> Tuple[Transaction, ...]:
    """Transactions in `category` (or any, for "All") whose description contains `search`.

    Matching is case-insensitive and keeps the source order.
    """
    return tuple(iter_transactions(trans, all_of(by_category(category), by_search(search))))
