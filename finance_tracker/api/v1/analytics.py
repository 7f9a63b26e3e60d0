"""GET /v1/analytics - monthly totals, category breakdown and spending trend"""

from datetime import date
from typing import Optional, Tuple
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from finance_tracker.api.v1.schemas import (
    AnalyticsSummaryResponse,
    CategoryBreakdownResponse,
    CategoryShareSchema,
    MonthlyTotalSchema,
    SpendingTrendResponse,
)
from finance_tracker.api.dependencies import get_today
from finance_tracker.config import settings
from finance_tracker.infrastructure.database.session import get_db
from finance_tracker.infrastructure.database.repositories import TransactionRepository
from finance_tracker.domain.analytics import (
    average_monthly_expense,
    build_category_breakdown,
    build_expense_trend,
    summarize_period,
    trailing_months,
)
from finance_tracker.utils.date_utils import month_bounds
from finance_tracker.utils.formatting import get_category_name

router = APIRouter()

MONTH_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"


def _resolve_month(month: Optional[str], today: date) -> Tuple[str, date, date]:
    """Selected month as (YYYY-MM, first day, last day); today's month when omitted"""
    if month:
        year, month_number = (int(part) for part in month.split("-"))
        anchor = date(year, month_number, 1)
    else:
        anchor = today
    period_start, period_end = month_bounds(anchor)
    return period_start.strftime("%Y-%m"), period_start, period_end


@router.get("/analytics/summary", response_model=AnalyticsSummaryResponse)
def get_analytics_summary(
    user_id: str = Query(..., description="User identifier"),
    month: Optional[str] = Query(None, pattern=MONTH_PATTERN, description="YYYY-MM, defaults to the current month"),
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    """
    Income, expenses and net result of one month.

    Returns:
        Totals per type, savings rate and the category with the largest spend
    """
    label, period_start, period_end = _resolve_month(month, today)
    repo = TransactionRepository(db)

    breakdown = build_category_breakdown(repo.category_totals(user_id, "expense", period_start, period_end))
    summary = summarize_period(repo.type_totals(user_id, period_start, period_end), breakdown)

    return AnalyticsSummaryResponse(
        user_id=user_id,
        month=label,
        period_start=period_start,
        period_end=period_end,
        total_income=summary.total_income,
        total_expenses=summary.total_expenses,
        net=summary.net,
        savings_rate=summary.savings_rate,
        transaction_count=summary.transaction_count,
        top_category=summary.top_category,
        top_category_name=get_category_name(summary.top_category) if summary.top_category else None,
    )


@router.get("/analytics/breakdown", response_model=CategoryBreakdownResponse)
def get_category_breakdown(
    user_id: str = Query(..., description="User identifier"),
    month: Optional[str] = Query(None, pattern=MONTH_PATTERN, description="YYYY-MM, defaults to the current month"),
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    """Expense totals per category for one month, largest first"""
    label, period_start, period_end = _resolve_month(month, today)
    totals = TransactionRepository(db).category_totals(user_id, "expense", period_start, period_end)
    breakdown = build_category_breakdown(totals)

    return CategoryBreakdownResponse(
        user_id=user_id,
        month=label,
        total_expenses=sum(share.amount for share in breakdown),
        categories=[
            CategoryShareSchema(
                category=share.category,
                category_name=share.category_name,
                amount=share.amount,
                transaction_count=share.transaction_count,
                percentage=share.percentage,
            )
            for share in breakdown
        ],
    )


@router.get("/analytics/trends", response_model=SpendingTrendResponse)
def get_spending_trend(
    user_id: str = Query(..., description="User identifier"),
    months: Optional[int] = Query(None, ge=1, le=24, description="Number of months ending with the current one"),
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    """Monthly expense totals, oldest first, with months lacking expenses reported as 0"""
    window = trailing_months(today, months or settings.trend_months)
    period_start = date(*window[0], 1)
    _, period_end = month_bounds(today)

    totals = TransactionRepository(db).monthly_expense_totals(user_id, period_start, period_end)
    trend = build_expense_trend(window, totals)

    return SpendingTrendResponse(
        user_id=user_id,
        months=[MonthlyTotalSchema(month=m.month, total_expenses=m.total_expenses) for m in trend],
        average_monthly_expense=average_monthly_expense(trend),
    )
