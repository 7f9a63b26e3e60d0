"""PUT/GET/DELETE /v1/budgets - category budgets with monthly spend"""

import math
import logging
from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response
from sqlalchemy.orm import Session

from finance_tracker.api.v1.schemas import (
    BudgetListResponse,
    BudgetResponse,
    BudgetSummarySchema,
    BudgetUpsertRequest,
)
from finance_tracker.api.dependencies import get_request_id, get_today
from finance_tracker.config import settings
from finance_tracker.infrastructure.database.session import get_db
from finance_tracker.infrastructure.database.models import CategoryBudget
from finance_tracker.infrastructure.database.repositories import BudgetRepository, TransactionRepository
from finance_tracker.domain.budget import calculate_budget_progress, summarize_budgets
from finance_tracker.domain.exceptions import InvalidBudgetCategoryError, UnknownCategoryError
from finance_tracker.domain.models import BudgetProgress
from finance_tracker.utils.date_utils import month_bounds
from finance_tracker.utils.formatting import get_category_name, get_category_type, is_valid_currency

router = APIRouter()


def _budget_progress(db: Session, budget: CategoryBudget, today: date) -> BudgetProgress:
    period_start, period_end = month_bounds(today)
    spent = TransactionRepository(db).sum_expenses(budget.user_id, budget.category, period_start, period_end)
    return calculate_budget_progress(spent, budget.limit_amount, budget.warning_threshold)


def _to_budget_response(budget: CategoryBudget, progress: BudgetProgress, today: date) -> BudgetResponse:
    period_start, period_end = month_bounds(today)
    percentage = progress.percentage_used
    return BudgetResponse(
        category=budget.category,
        category_name=get_category_name(budget.category),
        limit=progress.limit,
        spent=progress.spent,
        remaining=progress.remaining,
        percentage_used=None if math.isinf(percentage) else round(percentage, 2),
        warning_threshold=progress.warning_threshold,
        status=progress.status,
        is_over_budget=progress.is_over_budget,
        currency=budget.currency,
        period_start=period_start,
        period_end=period_end,
    )


@router.put("/budgets", response_model=BudgetResponse)
def upsert_budget(
    request_body: BudgetUpsertRequest,
    request: Request,
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    """
    Create or replace the monthly budget of an expense category.

    Omitted warning_threshold and currency fall back to the configured defaults.
    """
    request_id = get_request_id(request)
    currency = request_body.currency or settings.default_currency
    warning_threshold = request_body.warning_threshold or settings.default_warning_threshold

    try:
        if get_category_type(request_body.category) != "expense":
            raise InvalidBudgetCategoryError(f"Budgets apply to expense categories, got: {request_body.category}")
        if not is_valid_currency(currency):
            raise HTTPException(status_code=422, detail=f"Unsupported currency: {currency}")

        budget = BudgetRepository(db).upsert_budget(
            user_id=request_body.user_id,
            category=request_body.category,
            limit_amount=request_body.limit,
            warning_threshold=warning_threshold,
            currency=currency,
        )
        progress = _budget_progress(db, budget, today)
        db.commit()

    except (UnknownCategoryError, InvalidBudgetCategoryError) as e:
        db.rollback()
        logging.warning(f"Rejected budget: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    return _to_budget_response(budget, progress, today)


@router.get("/budgets", response_model=BudgetListResponse)
def list_budgets(
    user_id: str = Query(..., description="User identifier"),
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    """
    Retrieve every budget of a user with this month's spend.

    Returns:
        Per-category progress plus totals across categories
    """
    budgets = BudgetRepository(db).get_budgets_by_user(user_id)
    progress = [_budget_progress(db, b, today) for b in budgets]
    summary = summarize_budgets(progress)

    return BudgetListResponse(
        user_id=user_id,
        budgets=[_to_budget_response(b, p, today) for b, p in zip(budgets, progress)],
        summary=BudgetSummarySchema(
            total_budget=summary.total_budget,
            total_spent=summary.total_spent,
            total_remaining=summary.total_remaining,
            overall_percentage=summary.overall_percentage,
            over_budget_count=summary.over_budget_count,
            budget_count=summary.budget_count,
        ),
    )


@router.get("/budgets/{category}", response_model=BudgetResponse)
def get_budget(
    category: str,
    user_id: str = Query(..., description="User identifier"),
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    budget = BudgetRepository(db).get_budget(user_id, category)
    if not budget:
        raise HTTPException(status_code=404, detail="Budget not found")

    return _to_budget_response(budget, _budget_progress(db, budget, today), today)


@router.delete("/budgets/{category}", status_code=204)
def delete_budget(
    category: str,
    user_id: str = Query(..., description="User identifier"),
    db: Session = Depends(get_db),
):
    repo = BudgetRepository(db)
    budget = repo.get_budget(user_id, category)
    if not budget:
        raise HTTPException(status_code=404, detail="Budget not found")

    repo.delete_budget(budget)
    db.commit()
    return Response(status_code=204)
