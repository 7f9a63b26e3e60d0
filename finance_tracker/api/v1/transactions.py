"""POST/GET /v1/transactions - record transactions and evaluate category budgets"""

import uuid
import logging
from datetime import date
from typing import Optional, Tuple
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from finance_tracker.api.v1.schemas import (
    BudgetEvaluation,
    NotificationResponse,
    TransactionCreate,
    TransactionCreateResponse,
    TransactionListResponse,
    TransactionResponse,
)
from finance_tracker.api.dependencies import get_request_id, get_today
from finance_tracker.config import settings
from finance_tracker.infrastructure.database.session import get_db
from finance_tracker.infrastructure.database.models import FinanceTransaction, Notification
from finance_tracker.infrastructure.database.repositories import (
    BudgetRepository,
    NotificationRepository,
    TransactionRepository,
)
from finance_tracker.domain.budget import build_budget_notification, get_budget_status
from finance_tracker.domain.exceptions import CategoryTypeMismatchError, DomainException
from finance_tracker.infrastructure.observability.logging import log_budget_alert
from finance_tracker.infrastructure.observability.metrics import record_budget_evaluation
from finance_tracker.utils.date_utils import month_bounds
from finance_tracker.utils.formatting import get_category_type

router = APIRouter()


def ensure_category_matches_type(category: str, type: str) -> None:
    """Reject unknown categories and categories of the other transaction type"""
    category_type = get_category_type(category)
    if category_type != type:
        raise CategoryTypeMismatchError(f"Category {category} is an {category_type} category, not {type}")


def to_transaction_response(transaction: FinanceTransaction) -> TransactionResponse:
    return TransactionResponse(
        transaction_id=str(transaction.id),
        user_id=transaction.user_id,
        amount=transaction.amount,
        category=transaction.category,
        type=transaction.type,
        description=transaction.description,
        transaction_date=transaction.date,
        recurring_template_id=str(transaction.recurring_template_id) if transaction.recurring_template_id else None,
    )


def to_notification_response(notification: Notification) -> NotificationResponse:
    return NotificationResponse(
        notification_id=str(notification.id),
        type=notification.type,
        message=notification.message,
        is_read=notification.is_read,
        created_at=notification.created_at.isoformat(),
        read_at=notification.read_at.isoformat() if notification.read_at else None,
    )


def evaluate_budget(
    db: Session,
    request_id: str,
    user_id: str,
    category: str,
    on_date: date,
) -> Optional[BudgetEvaluation]:
    """
    Re-classify the category budget after an expense and store a notification
    when it reached warning or danger.

    Spend covers the calendar month of on_date. Returns None when the
    category has no budget.
    """
    budget = BudgetRepository(db).get_budget(user_id, category)
    if budget is None:
        return None

    period_start, period_end = month_bounds(on_date)
    spent = TransactionRepository(db).sum_expenses(user_id, category, period_start, period_end)
    status = get_budget_status(spent, budget.limit_amount, budget.warning_threshold)

    alert = build_budget_notification(category, spent, budget.limit_amount, status, budget.currency)
    notification = None
    if alert is not None:
        notification = NotificationRepository(db).create_notification(
            user_id=user_id,
            type=alert.type,
            message=alert.message,
        )
        log_budget_alert(request_id, user_id, category, status, spent, budget.limit_amount)

    record_budget_evaluation(status, alert.type if alert else None)

    return BudgetEvaluation(
        category=category,
        status=status,
        spent=spent,
        limit=budget.limit_amount,
        notification=to_notification_response(notification) if notification else None,
    )


def record_transaction(
    db: Session,
    request_id: str,
    user_id: str,
    amount: float,
    category: str,
    type: str,
    transaction_date: date,
    description: str = "",
    recurring_template_id: Optional[uuid.UUID] = None,
) -> Tuple[FinanceTransaction, Optional[BudgetEvaluation]]:
    """Persist a transaction; expenses are followed by a budget evaluation"""
    ensure_category_matches_type(category, type)

    transaction = TransactionRepository(db).create_transaction(
        user_id=user_id,
        amount=amount,
        category=category,
        type=type,
        transaction_date=transaction_date,
        description=description,
        recurring_template_id=recurring_template_id,
    )

    evaluation = None
    if type == "expense":
        evaluation = evaluate_budget(db, request_id, user_id, category, transaction_date)

    return transaction, evaluation


@router.post("/transactions", response_model=TransactionCreateResponse, status_code=201)
def create_transaction(
    request_body: TransactionCreate,
    request: Request,
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    """
    Record an income or expense.

    Flow:
    1. Persist the transaction (date defaults to today)
    2. For expenses, sum the category's spend for that month
    3. Classify the budget (safe / warning / danger)
    4. Store a notification when the budget reached warning or danger
    """
    request_id = get_request_id(request)

    try:
        transaction, evaluation = record_transaction(
            db,
            request_id,
            user_id=request_body.user_id,
            amount=request_body.amount,
            category=request_body.category,
            type=request_body.type,
            transaction_date=request_body.transaction_date or today,
            description=request_body.description,
        )
        db.commit()

    except DomainException as e:
        db.rollback()
        logging.warning(f"Rejected transaction: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    return TransactionCreateResponse(
        transaction=to_transaction_response(transaction),
        budget=evaluation,
    )


@router.get("/transactions", response_model=TransactionListResponse)
def list_transactions(
    user_id: str = Query(..., description="User identifier"),
    db: Session = Depends(get_db),
):
    """Most recent transactions of a user"""
    transactions = TransactionRepository(db).get_transactions_by_user(user_id, limit=settings.history_limit)
    return TransactionListResponse(
        user_id=user_id,
        transactions=[to_transaction_response(t) for t in transactions],
    )
