"""Data access layer for finance tracker entities"""

import uuid
from datetime import date, datetime, timezone
from typing import Dict, List, Optional, Tuple
from sqlalchemy import extract, func
from sqlalchemy.orm import Session
from finance_tracker.infrastructure.database.models import (
    CategoryBudget,
    FinanceTransaction,
    Notification,
    RecurringTemplateRecord,
)
from finance_tracker.domain.models import RecurringTemplate


def to_domain_template(record: RecurringTemplateRecord) -> RecurringTemplate:
    """Map an ORM row onto the domain dataclass used by the recurrence engine"""
    return RecurringTemplate(
        name=record.name,
        amount=record.amount,
        category=record.category,
        type=record.type,
        recurrence_type=record.recurrence_type,
        next_due_date=record.next_due_date.isoformat(),
        is_active=record.is_active,
        recurrence_day=record.recurrence_day,
        last_executed=record.last_executed.isoformat() if record.last_executed else None,
        description=record.description,
    )


class RecurringTemplateRepository:
    """Repository for recurring transaction templates"""

    def __init__(self, db: Session):
        self.db = db

    def create_template(
        self,
        user_id: str,
        name: str,
        amount: float,
        category: str,
        type: str,
        recurrence_type: str,
        next_due_date: date,
        recurrence_day: Optional[int] = None,
        last_executed: Optional[date] = None,
        description: str = "",
        is_active: bool = True,
        auto_execute: bool = False,
    ) -> RecurringTemplateRecord:
        """Persist a new template"""
        record = RecurringTemplateRecord(
            user_id=user_id,
            name=name,
            description=description,
            amount=amount,
            category=category,
            type=type,
            recurrence_type=recurrence_type,
            recurrence_day=recurrence_day,
            last_executed=last_executed,
            next_due_date=next_due_date,
            is_active=is_active,
            auto_execute=auto_execute,
        )
        self.db.add(record)
        self.db.flush()  # Get ID without committing
        return record

    def get_template(self, template_id: uuid.UUID, user_id: Optional[str] = None) -> Optional[RecurringTemplateRecord]:
        """Fetch one template, optionally restricted to its owner"""
        query = self.db.query(RecurringTemplateRecord).filter(RecurringTemplateRecord.id == template_id)
        if user_id is not None:
            query = query.filter(RecurringTemplateRecord.user_id == user_id)
        return query.first()

    def get_templates_by_user(self, user_id: str, active_only: bool = False) -> List[RecurringTemplateRecord]:
        """All templates of a user, soonest due first"""
        query = self.db.query(RecurringTemplateRecord).filter(RecurringTemplateRecord.user_id == user_id)
        if active_only:
            query = query.filter(RecurringTemplateRecord.is_active.is_(True))
        return query.order_by(RecurringTemplateRecord.next_due_date.asc()).all()

    def update_template(self, record: RecurringTemplateRecord, **fields) -> RecurringTemplateRecord:
        for key, value in fields.items():
            setattr(record, key, value)
        self.db.flush()
        return record

    def mark_executed(
        self,
        record: RecurringTemplateRecord,
        last_executed: date,
        next_due_date: date,
    ) -> RecurringTemplateRecord:
        """Store the execution date and the recomputed due date"""
        record.last_executed = last_executed
        record.next_due_date = next_due_date
        self.db.flush()
        return record

    def delete_template(self, record: RecurringTemplateRecord) -> None:
        self.db.delete(record)
        self.db.flush()


class BudgetRepository:
    """Repository for category budgets"""

    def __init__(self, db: Session):
        self.db = db

    def upsert_budget(
        self,
        user_id: str,
        category: str,
        limit_amount: float,
        warning_threshold: float,
        currency: str,
    ) -> CategoryBudget:
        """Create the category budget or replace its limit, threshold and currency"""
        budget = self.get_budget(user_id, category)
        if budget is None:
            budget = CategoryBudget(user_id=user_id, category=category)
            self.db.add(budget)

        budget.limit_amount = limit_amount
        budget.warning_threshold = warning_threshold
        budget.currency = currency
        self.db.flush()
        return budget

    def get_budget(self, user_id: str, category: str) -> Optional[CategoryBudget]:
        return (
            self.db.query(CategoryBudget)
            .filter(CategoryBudget.user_id == user_id, CategoryBudget.category == category)
            .first()
        )

    def get_budgets_by_user(self, user_id: str) -> List[CategoryBudget]:
        return (
            self.db.query(CategoryBudget)
            .filter(CategoryBudget.user_id == user_id)
            .order_by(CategoryBudget.category.asc())
            .all()
        )

    def delete_budget(self, budget: CategoryBudget) -> None:
        self.db.delete(budget)
        self.db.flush()


class TransactionRepository:
    """Repository for income and expense transactions"""

    def __init__(self, db: Session):
        self.db = db

    def create_transaction(
        self,
        user_id: str,
        amount: float,
        category: str,
        type: str,
        transaction_date: date,
        description: str = "",
        recurring_template_id: Optional[uuid.UUID] = None,
    ) -> FinanceTransaction:
        transaction = FinanceTransaction(
            user_id=user_id,
            amount=amount,
            category=category,
            type=type,
            description=description,
            date=transaction_date,
            recurring_template_id=recurring_template_id,
        )
        self.db.add(transaction)
        self.db.flush()
        return transaction

    def get_transactions_by_user(self, user_id: str, limit: int = 50) -> List[FinanceTransaction]:
        """Most recent transactions first"""
        return (
            self.db.query(FinanceTransaction)
            .filter(FinanceTransaction.user_id == user_id)
            .order_by(FinanceTransaction.date.desc(), FinanceTransaction.created_at.desc())
            .limit(limit)
            .all()
        )

    def sum_expenses(self, user_id: str, category: str, start: date, end: date) -> float:
        """Total expense amount of a category within [start, end]"""
        total = (
            self.db.query(func.coalesce(func.sum(FinanceTransaction.amount), 0.0))
            .filter(
                FinanceTransaction.user_id == user_id,
                FinanceTransaction.category == category,
                FinanceTransaction.type == "expense",
                FinanceTransaction.date >= start,
                FinanceTransaction.date <= end,
            )
            .scalar()
        )
        return float(total)

    def category_totals(self, user_id: str, type: str, start: date, end: date) -> List[Tuple[str, float, int]]:
        """(category, amount, transaction_count) of one transaction type within [start, end]"""
        total = func.sum(FinanceTransaction.amount)
        rows = (
            self.db.query(FinanceTransaction.category, total, func.count(FinanceTransaction.id))
            .filter(
                FinanceTransaction.user_id == user_id,
                FinanceTransaction.type == type,
                FinanceTransaction.date >= start,
                FinanceTransaction.date <= end,
            )
            .group_by(FinanceTransaction.category)
            .order_by(total.desc(), FinanceTransaction.category.asc())
            .all()
        )
        return [(category, float(amount), count) for category, amount, count in rows]

    def type_totals(self, user_id: str, start: date, end: date) -> Dict[str, Tuple[float, int]]:
        """Amount and count per transaction type within [start, end]"""
        rows = (
            self.db.query(FinanceTransaction.type, func.sum(FinanceTransaction.amount), func.count(FinanceTransaction.id))
            .filter(
                FinanceTransaction.user_id == user_id,
                FinanceTransaction.date >= start,
                FinanceTransaction.date <= end,
            )
            .group_by(FinanceTransaction.type)
            .all()
        )
        return {type: (float(amount), count) for type, amount, count in rows}

    def monthly_expense_totals(self, user_id: str, start: date, end: date) -> Dict[Tuple[int, int], float]:
        """Expense total per (year, month) within [start, end]; months without expenses are absent"""
        year = extract("year", FinanceTransaction.date)
        month = extract("month", FinanceTransaction.date)
        rows = (
            self.db.query(year, month, func.sum(FinanceTransaction.amount))
            .filter(
                FinanceTransaction.user_id == user_id,
                FinanceTransaction.type == "expense",
                FinanceTransaction.date >= start,
                FinanceTransaction.date <= end,
            )
            .group_by(year, month)
            .all()
        )
        return {(int(y), int(m)): float(total) for y, m, total in rows}


class NotificationRepository:
    """Repository for user notifications"""

    def __init__(self, db: Session):
        self.db = db

    def create_notification(self, user_id: str, type: str, message: str) -> Notification:
        notification = Notification(user_id=user_id, type=type, message=message)
        self.db.add(notification)
        self.db.flush()
        return notification

    def get_notifications_by_user(
        self,
        user_id: str,
        only_unread: bool = False,
        limit: int = 50,
    ) -> List[Notification]:
        """Newest first"""
        query = self.db.query(Notification).filter(Notification.user_id == user_id)
        if only_unread:
            query = query.filter(Notification.is_read.is_(False))
        return query.order_by(Notification.created_at.desc()).limit(limit).all()

    def mark_as_read(self, notification_id: uuid.UUID, user_id: str) -> Optional[Notification]:
        """Flag a notification as read; None when it does not belong to the user"""
        notification = (
            self.db.query(Notification)
            .filter(Notification.id == notification_id, Notification.user_id == user_id)
            .first()
        )
        if notification is None:
            return None

        if not notification.is_read:
            notification.is_read = True
            notification.read_at = datetime.now(timezone.utc)
            self.db.flush()
        return notification
