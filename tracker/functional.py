import math
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Generic, TypeVar

from tracker.domain import CATEGORIES, TRANSACTION_TYPES, SavingsGoal, Transaction

T = TypeVar('T')
U = TypeVar('U')
E = TypeVar('E')


class Maybe(Generic[T], ABC):

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def is_some(self) -> bool:
        pass

    def is_none(self) -> bool:
        return not self.is_some()


class Some(Maybe[T]):

    def __init__(self, value: T):
        self._value = value

    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        return Some(f(self._value))

    def get_or_else(self, default: T) -> T:
        return self._value

    def is_some(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"Some({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Some) and self._value == other._value


class Nothing(Maybe[T]):

    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        return Nothing()

    def get_or_else(self, default: T) -> T:
        return default

    def is_some(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "Nothing()"

    def __eq__(self, other) -> bool:
        return isinstance(other, Nothing)


class Either(Generic[E, T], ABC):
    """Result of a validation step: Right carries the value, Left the error."""

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        pass

    @abstractmethod
    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def is_right(self) -> bool:
        pass

    def is_left(self) -> bool:
        return not self.is_right()

    @abstractmethod
    def get_error(self) -> E:
        pass


class Right(Either[E, T]):

    def __init__(self, value: T):
        self._value = value

    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        return Right(f(self._value))

    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        return f(self._value)

    def get_or_else(self, default: T) -> T:
        return self._value

    def is_right(self) -> bool:
        return True

    def get_error(self) -> E:
        raise ValueError("Cannot get error from Right")

    def __repr__(self) -> str:
        return f"Right({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Right) and self._value == other._value


class Left(Either[E, T]):

    def __init__(self, error: E):
        self._error = error

    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        return self

    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        return self

    def get_or_else(self, default: T) -> T:
        return default

    def is_right(self) -> bool:
        return False

    def get_error(self) -> E:
        return self._error

    def __repr__(self) -> str:
        return f"Left({self._error!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Left) and self._error == other._error


def _fail(code: str, message: str, **details: Any) -> Left:
    return Left({"error": code, "message": message, **details})


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def to_number(value: Any) -> float:
    """Coerce form input to a float; anything unparseable becomes NaN."""
    if isinstance(value, bool):
        return math.nan
    try:
        return float(value)
    except (TypeError, ValueError, OverflowError):
        return math.nan


def is_finite_number(value: Any) -> bool:
    """True for an int or float that fits a finite float. Bools are not numbers here."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        return False


def validate_transaction_form(
    description: Any,
    amount: Any,
    tx_type: str,
    category: str,
) -> Either[dict, Dict[str, Any]]:
    """Check raw form values and return the cleaned fields of a transaction."""
    if _is_blank(description) or _is_blank(amount):
        return _fail("missing_fields", "Please fill all fields")

    value = to_number(amount)
    if not math.isfinite(value):
        return _fail("invalid_amount", "Amount must be a number", amount=amount)
    if value <= 0:
        return _fail("non_positive_amount", "Amount must be positive", amount=value)
    if tx_type not in TRANSACTION_TYPES:
        return _fail("invalid_type", f"Unknown transaction type {tx_type}", type=tx_type)
    if category not in CATEGORIES:
        return _fail("invalid_category", f"Unknown category {category}", category=category)

    return Right({
        "description": str(description).strip(),
        "amount": value,
        "type": tx_type,
        "category": category,
    })


def validate_transaction(t: Transaction) -> Either[dict, Transaction]:
    if not isinstance(t.description, str) or not t.description.strip():
        return _fail("missing_description", "Description must not be empty", id=t.id)
    if not is_finite_number(t.amount) or t.amount <= 0:
        return _fail("non_positive_amount", "Amount must be positive", id=t.id, amount=t.amount)
    if t.type not in TRANSACTION_TYPES:
        return _fail("invalid_type", f"Unknown transaction type {t.type}", id=t.id)
    if t.category not in CATEGORIES:
        return _fail("invalid_category", f"Unknown category {t.category}", id=t.id)
    return Right(t)


def validate_goal_form(
    name: Any, target: Any, current_amount: Any = 0
) -> Either[dict, Dict[str, Any]]:
    if _is_blank(name) or _is_blank(target):
        return _fail("missing_fields", "Please enter a goal name and target")

    target_value = to_number(target)
    if not math.isfinite(target_value):
        return _fail("invalid_target", "Target must be a number", target=target)
    if target_value <= 0:
        return _fail("non_positive_target", "Target must be positive", target=target_value)

    saved = 0.0 if _is_blank(current_amount) else to_number(current_amount)
    if not math.isfinite(saved):
        return _fail("invalid_amount", "Saved amount must be a number", current_amount=current_amount)
    if saved < 0:
        return _fail("negative_amount", "Saved amount cannot be negative", current_amount=saved)

    return Right({"name": str(name).strip(), "target": target_value, "current_amount": saved})


def validate_goal(goal: SavingsGoal) -> Either[dict, SavingsGoal]:
    if not isinstance(goal.name, str) or not goal.name.strip():
        return _fail("missing_name", "Goal name must not be empty", id=goal.id)
    if not is_finite_number(goal.target) or goal.target <= 0:
        return _fail("non_positive_target", "Target must be positive", id=goal.id, target=goal.target)
    if not is_finite_number(goal.current_amount):
        return _fail("invalid_amount", "Saved amount must be a number", id=goal.id)
    return Right(goal)


def validate_funds(delta: Any) -> Either[dict, float]:
    if _is_blank(delta):
        return _fail("missing_amount", "Please enter an amount")
    value = to_number(delta)
    if not math.isfinite(value):
        return _fail("invalid_amount", "Amount must be a number", amount=delta)
    return Right(value)
