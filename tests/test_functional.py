from tracker.domain import SavingsGoal, Transaction
from tracker.functional import (
    Left,
    Nothing,
    Right,
    Some,
    to_number,
    validate_funds,
    validate_goal,
    validate_goal_form,
    validate_transaction,
    validate_transaction_form,
)


def test_maybe_map():
    assert Some(5).map(lambda x: x * 2) == Some(10)
    assert Nothing().map(lambda x: x * 2).is_none()
    assert Nothing().get_or_else(0) == 0


def test_either_bind():
    def positive(x):
        return Right(x) if x > 0 else Left("not positive")

    assert Right(3).bind(positive) == Right(3)
    assert Right(-1).bind(positive).get_error() == "not positive"
    assert Left("boom").bind(positive) == Left("boom")
    assert Left("boom").map(lambda x: x + 1).get_or_else(7) == 7


def test_to_number():
    assert to_number("12.5") == 12.5
    assert to_number(3) == 3.0
    assert to_number("abc") != to_number("abc")  # NaN
    assert to_number(None) != to_number(None)
    assert to_number(True) != to_number(True)


def test_transaction_form_ok():
    result = validate_transaction_form("  Groceries ", "42.10", "expense", "Food")
    assert result.is_right()
    assert result.get_or_else({}) == {
        "description": "Groceries",
        "amount": 42.10,
        "type": "expense",
        "category": "Food",
    }


def test_transaction_form_missing_fields():
    for description, amount in (("", 10), ("Lunch", None), ("   ", 10), ("Lunch", "")):
        result = validate_transaction_form(description, amount, "expense", "Food")
        assert result.get_error()["message"] == "Please fill all fields"


def test_transaction_form_non_positive_amount():
    for amount in (0, "0", -5, "-0.01"):
        result = validate_transaction_form("Refund", amount, "income", "Other")
        assert result.get_error()["error"] == "non_positive_amount"
        assert result.get_error()["message"] == "Amount must be positive"


def test_transaction_form_non_numeric_amount():
    for amount in ("ten", "nan", "inf"):
        result = validate_transaction_form("Lunch", amount, "expense", "Food")
        assert result.get_error()["message"] == "Amount must be a number"


def test_transaction_form_unknown_enums():
    assert validate_transaction_form("Lunch", 5, "transfer", "Food").get_error()["error"] == "invalid_type"
    assert validate_transaction_form("Lunch", 5, "expense", "Pets").get_error()["error"] == "invalid_category"


def test_validate_transaction_record():
    ok = Transaction(id="t1", description="Rent", amount=900, type="expense", category="Bills", date="2025-09-01")
    negative = Transaction(id="t2", description="Rent", amount=-900, type="expense", category="Bills", date="2025-09-01")

    assert validate_transaction(ok) == Right(ok)
    assert validate_transaction(negative).get_error()["id"] == "t2"


def test_goal_form():
    assert validate_goal_form("Car", "5000").get_or_else(None) == {"name": "Car", "target": 5000, "current_amount": 0}
    assert validate_goal_form("Car", "5000", "").get_or_else(None)["current_amount"] == 0
    assert validate_goal_form("", "5000").get_error()["error"] == "missing_fields"
    assert validate_goal_form("Car", None).get_error()["error"] == "missing_fields"
    assert validate_goal_form("Car", "0").get_error()["message"] == "Target must be positive"
    assert validate_goal_form("Car", "many").get_error()["message"] == "Target must be a number"
    assert validate_goal_form("Car", 100, -1).get_error()["message"] == "Saved amount cannot be negative"


def test_validate_goal_record():
    goal = SavingsGoal(id="g1", name="Car", target=5000, current_amount=6000)
    assert validate_goal(goal).is_right()
    assert validate_goal(SavingsGoal(id="g2", name=" ", target=5)).is_left()


def test_validate_funds():
    assert validate_funds("25") == Right(25.0)
    assert validate_funds(-10) == Right(-10.0)
    assert validate_funds("").get_error()["error"] == "missing_amount"
    assert validate_funds("abc").get_error()["message"] == "Amount must be a number"
    assert validate_funds(float("inf")).is_left()
