"""Spending analytics - category breakdowns, period totals and monthly trends"""

from datetime import date
from typing import Dict, List, Tuple

from finance_tracker.domain.models import CategoryShare, MonthlyTotal, PeriodSummary
from finance_tracker.utils.date_utils import previous_month
from finance_tracker.utils.formatting import get_category_name


def build_category_breakdown(totals: List[Tuple[str, float, int]]) -> List[CategoryShare]:
    """
    Turn (category, amount, transaction_count) rows into shares of the total.

    Largest amount first; percentages are rounded to two decimals and are
    all 0.0 when nothing was spent.

    Example:
        [("food", 300, 3), ("rent", 700, 1)] -> rent 70.0%, food 30.0%
    """
    grand_total = sum(amount for _, amount, _ in totals)

    shares = [
        CategoryShare(
            category=category,
            category_name=get_category_name(category),
            amount=amount,
            transaction_count=count,
            percentage=round(amount / grand_total * 100, 2) if grand_total > 0 else 0.0,
        )
        for category, amount, count in totals
    ]
    return sorted(shares, key=lambda s: (-s.amount, s.category))


def summarize_period(
    type_totals: Dict[str, Tuple[float, int]],
    breakdown: List[CategoryShare],
) -> PeriodSummary:
    """Combine per-type (amount, count) totals with the expense breakdown"""
    income, income_count = type_totals.get("income", (0.0, 0))
    expenses, expense_count = type_totals.get("expense", (0.0, 0))
    net = income - expenses

    return PeriodSummary(
        total_income=income,
        total_expenses=expenses,
        net=net,
        savings_rate=round(net / income * 100, 2) if income > 0 else 0.0,
        transaction_count=income_count + expense_count,
        top_category=breakdown[0].category if breakdown else None,
    )


def trailing_months(today: date, count: int) -> List[Tuple[int, int]]:
    """The last count calendar months as (year, month), oldest first, ending with today's month"""
    months = [(today.year, today.month)]
    while len(months) < count:
        months.append(previous_month(*months[-1]))
    return list(reversed(months))


def build_expense_trend(
    months: List[Tuple[int, int]],
    totals: Dict[Tuple[int, int], float],
) -> List[MonthlyTotal]:
    """One entry per month, 0.0 for months without expenses"""
    return [
        MonthlyTotal(month=f"{year:04d}-{month:02d}", total_expenses=totals.get((year, month), 0.0))
        for year, month in months
    ]


def average_monthly_expense(trend: List[MonthlyTotal]) -> float:
    if not trend:
        return 0.0
    return round(sum(m.total_expenses for m in trend) / len(trend), 2)
