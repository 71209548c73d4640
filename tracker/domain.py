from dataclasses import dataclass

CATEGORIES = ("Food", "Transport", "Shopping", "Bills", "Entertainment", "Other")
ALL = "All"

INCOME = "income"
EXPENSE = "expense"
TRANSACTION_TYPES = (INCOME, EXPENSE)


@dataclass(frozen=True)
class Transaction:
    id: str
    description: str
    amount: float        # always positive, direction comes from type
    type: str            # "income" or "expense"
    category: str        # one of CATEGORIES
    date: str            # ISO timestamp, e.g. "2025-09-01T10:00:00.000Z"
    recurring: bool = False

    def is_income(self) -> bool:
        return self.type == INCOME

    def is_expense(self) -> bool:
        return self.type == EXPENSE


@dataclass(frozen=True)
class SavingsGoal:
    id: str
    name: str
    target: float
    current_amount: float = 0.0  # may exceed target


@dataclass(frozen=True)
class Totals:
    balance: float
    income: float
    expense: float


# Spend against the monthly limit of one category
@dataclass(frozen=True)
class BudgetStatus:
    category: str
    spent: float
    limit: float
    percentage: float
    over_budget: bool


@dataclass(frozen=True)
class Advisory:
    kind: str
    title: str
    message: str
