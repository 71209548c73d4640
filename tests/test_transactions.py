import pytest

from tracker.domain import Transaction
from tracker.events import TRANSACTIONS_CHANGED, EventBus
from tracker.lazy import by_category, by_search, filter_transactions, iter_transactions
from tracker.repository import TransactionRepository
from tracker.transforms import (
    add_transaction,
    delete_transaction,
    find_transaction,
    update_transaction,
)


def make_tx(id, description, amount, type="expense", category="Food", date="2025-09-01T10:00:00.000Z"):
    return Transaction(id=id, description=description, amount=amount, type=type, category=category, date=date)


def sample():
    return (
        make_tx("t3", "Cinema tickets", 30, category="Entertainment"),
        make_tx("t2", "Salary", 1000, type="income", category="Other"),
        make_tx("t1", "Grocery Shopping", 85.5),
    )


def test_add_transaction_prepends():
    trans = sample()
    new_tx = make_tx("t4", "Bus pass", 40, category="Transport")
    result = add_transaction(trans, new_tx)

    assert len(result) == len(trans) + 1
    assert result[0] == new_tx
    assert result[1:] == trans


def test_update_transaction_keeps_order():
    trans = sample()
    edited = make_tx("t2", "Salary September", 1200, type="income", category="Other")
    result = update_transaction(trans, edited)

    assert [t.id for t in result] == ["t3", "t2", "t1"]
    assert result[1].amount == 1200
    assert trans[1].amount == 1000


def test_update_transaction_unknown_id_is_noop():
    trans = sample()
    result = update_transaction(trans, make_tx("missing", "Ghost", 5))
    assert result == trans


def test_delete_transaction_twice_is_idempotent():
    trans = sample()
    once = delete_transaction(trans, "t2")
    twice = delete_transaction(once, "t2")

    assert [t.id for t in once] == ["t3", "t1"]
    assert twice == once


def test_find_transaction():
    trans = sample()
    assert find_transaction(trans, "t1").get_or_else(None).description == "Grocery Shopping"
    assert find_transaction(trans, "nope").is_none()


def test_by_category_all_matches_everything():
    trans = sample()
    assert list(filter(by_category("All"), trans)) == list(trans)
    assert [t.id for t in filter(by_category("Food"), trans)] == ["t1"]


def test_by_search_is_case_insensitive():
    trans = sample()
    assert [t.id for t in filter(by_search("GROCERY"), trans)] == ["t1"]
    assert len(list(filter(by_search(""), trans))) == 3


def test_iter_transactions_is_lazy():
    seen = []

    def pred(t):
        seen.append(t.id)
        return True

    gen = iter_transactions(sample(), pred)
    assert seen == []
    next(gen)
    assert seen == ["t3"]


def test_filter_transactions_combines_category_and_search():
    trans = sample() + (make_tx("t0", "Food truck", 12, category="Food"),)
    result = filter_transactions(trans, "Food", "food")

    assert [t.id for t in result] == ["t0"]
    assert len(trans) == 4


def test_repository_add_puts_new_record_first():
    repo = TransactionRepository(sample())
    new_tx = make_tx("t4", "Electricity", 60, category="Bills")
    repo.add(new_tx)

    assert len(repo) == 4
    assert repo.items[0] == new_tx


def test_repository_add_rejects_invalid_records():
    repo = TransactionRepository()
    with pytest.raises(ValueError):
        repo.add(make_tx("bad", "Refund", -5))
    with pytest.raises(ValueError):
        repo.add(make_tx("bad", "   ", 5))
    assert len(repo) == 0


def test_repository_does_not_check_id_uniqueness():
    repo = TransactionRepository()
    repo.add(make_tx("same", "First", 1))
    repo.add(make_tx("same", "Second", 2))
    assert len(repo) == 2


def test_repository_publishes_after_each_mutation():
    bus = EventBus()
    published = []
    bus.subscribe(TRANSACTIONS_CHANGED, lambda event, payload: published.append(payload["transactions"]) or {})

    repo = TransactionRepository(sample(), bus)
    repo.add(make_tx("t4", "Taxi", 25, category="Transport"))
    repo.update(make_tx("t4", "Taxi home", 27, category="Transport"))
    repo.delete("t4")

    assert len(published) == 3
    assert published[-1] == repo.items


def test_repository_misses_do_not_publish():
    bus = EventBus()
    published = []
    bus.subscribe(TRANSACTIONS_CHANGED, lambda event, payload: published.append(payload) or {})

    repo = TransactionRepository(sample(), bus)
    repo.update(make_tx("missing", "Ghost", 5))
    repo.delete("missing")
    repo.delete("missing")

    assert published == []
    assert repo.items == sample()


def test_repository_filter_does_not_mutate():
    repo = TransactionRepository(sample())
    result = repo.filter("Entertainment", "")
    assert [t.id for t in result] == ["t3"]
    assert len(repo) == 3
