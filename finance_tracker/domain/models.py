"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class RecurringTemplate:
    """Recurring transaction template with its cached schedule"""

    name: str
    amount: float
    category: str
    type: str  # "income" or "expense"
    recurrence_type: str  # daily | weekly | monthly | yearly
    next_due_date: str  # YYYY-MM-DD, derived from the rule and last_executed
    is_active: bool = True
    recurrence_day: Optional[int] = None
    last_executed: Optional[str] = None
    description: str = ""


@dataclass
class BudgetProgress:
    """Spend of one category measured against its limit"""

    spent: float
    limit: float
    warning_threshold: float
    percentage_used: float
    remaining: float
    status: str  # safe | warning | danger
    is_over_budget: bool


@dataclass
class BudgetSummary:
    """Totals across all budgets of a user"""

    total_budget: float
    total_spent: float
    total_remaining: float
    overall_percentage: float
    over_budget_count: int
    budget_count: int


@dataclass
class BudgetNotification:
    """User-facing alert produced by a budget evaluation"""

    type: str  # "error" or "warning"
    category: str
    status: str
    message: str


@dataclass
class CategoryShare:
    """Expense total of one category and its share of all expenses in a period"""

    category: str
    category_name: str
    amount: float
    transaction_count: int
    percentage: float


@dataclass
class PeriodSummary:
    """Income, expenses and net result of a period"""

    total_income: float
    total_expenses: float
    net: float
    savings_rate: float  # net as percent of income, 0 without income
    transaction_count: int
    top_category: Optional[str] = None


@dataclass
class MonthlyTotal:
    """Expense total of one calendar month"""

    month: str  # YYYY-MM
    total_expenses: float
