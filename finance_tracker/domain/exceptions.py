"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class UnknownCategoryError(DomainException):
    """Category key is not part of the known income/expense categories"""

    pass


class InvalidBudgetCategoryError(DomainException):
    """Budgets can only be set on expense categories"""

    pass


class CategoryTypeMismatchError(DomainException):
    """Category belongs to the other transaction type (e.g. an income under "food")"""

    pass


class InvalidRecurrenceDayError(DomainException):
    """recurrence_day is outside the range its recurrence type accepts"""

    pass
