"""Integration tests for repository ordering"""

from datetime import date
from sqlalchemy.orm import Session
from finance_tracker.infrastructure.database.repositories import NotificationRepository, TransactionRepository


def test_notifications_created_within_one_second_keep_order(db: Session):
    """Newest first even when both rows share the same wall-clock second"""
    repo = NotificationRepository(db)
    repo.create_notification("user_1", "warning", "first")
    repo.create_notification("user_1", "error", "second")
    db.commit()

    messages = [n.message for n in repo.get_notifications_by_user("user_1")]
    assert messages == ["second", "first"]


def test_transactions_on_same_date_newest_first(db: Session):
    repo = TransactionRepository(db)
    repo.create_transaction("user_1", 1000, "food", "expense", date(2024, 1, 10), description="lunch")
    repo.create_transaction("user_1", 2000, "food", "expense", date(2024, 1, 10), description="dinner")
    db.commit()

    descriptions = [t.description for t in repo.get_transactions_by_user("user_1")]
    assert descriptions == ["dinner", "lunch"]


def test_category_totals_scoped_to_type_and_period(db: Session):
    repo = TransactionRepository(db)
    repo.create_transaction("user_1", 300, "food", "expense", date(2024, 1, 3))
    repo.create_transaction("user_1", 200, "food", "expense", date(2024, 1, 31))
    repo.create_transaction("user_1", 700, "rent", "expense", date(2024, 1, 10))
    repo.create_transaction("user_1", 900, "food", "expense", date(2024, 2, 1))
    repo.create_transaction("user_1", 5000, "salary", "income", date(2024, 1, 5))
    repo.create_transaction("user_2", 100, "food", "expense", date(2024, 1, 5))
    db.commit()

    totals = repo.category_totals("user_1", "expense", date(2024, 1, 1), date(2024, 1, 31))
    assert totals == [("rent", 700.0, 1), ("food", 500.0, 2)]

    by_type = repo.type_totals("user_1", date(2024, 1, 1), date(2024, 1, 31))
    assert by_type == {"expense": (1200.0, 3), "income": (5000.0, 1)}

    monthly = repo.monthly_expense_totals("user_1", date(2024, 1, 1), date(2024, 2, 29))
    assert monthly == {(2024, 1): 1200.0, (2024, 2): 900.0}
