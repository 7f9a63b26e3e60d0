"""Budget evaluator - classifies category spend against its limit"""

import math
from typing import List, Optional

from finance_tracker.domain.models import BudgetNotification, BudgetProgress, BudgetSummary
from finance_tracker.utils.formatting import format_currency, get_category_name

SAFE = "safe"
WARNING = "warning"
DANGER = "danger"


def budget_percentage(spent: float, limit: float) -> float:
    """
    Share of the limit already spent, in percent.

    A zero limit yields infinity, so any spend (even none) against it counts
    as exceeded.
    """
    if limit == 0:
        return math.inf
    return spent / limit * 100


def get_budget_status(spent: float, limit: float, warning_threshold: float) -> str:
    """
    Classify budget health.

    Thresholds:
    - >= 100% of limit:            danger
    - >= warning_threshold percent: warning
    - otherwise:                   safe

    Example:
        get_budget_status(850, 1000, 80) -> "warning"
        get_budget_status(0, 0, 80) -> "danger"
    """
    percentage = budget_percentage(spent, limit)

    if percentage >= 100:
        return DANGER
    elif percentage >= warning_threshold:
        return WARNING
    else:
        return SAFE


def calculate_budget_progress(spent: float, limit: float, warning_threshold: float) -> BudgetProgress:
    status = get_budget_status(spent, limit, warning_threshold)
    return BudgetProgress(
        spent=spent,
        limit=limit,
        warning_threshold=warning_threshold,
        percentage_used=budget_percentage(spent, limit),
        remaining=max(0.0, limit - spent),
        status=status,
        is_over_budget=spent > limit,
    )


def build_budget_notification(
    category: str,
    spent: float,
    limit: float,
    status: str,
    currency: str = "KRW",
) -> Optional[BudgetNotification]:
    """
    Alert for a budget that reached warning or danger, None while safe.
    """
    amounts = f"({format_currency(spent, currency)} / {format_currency(limit, currency)})"
    name = get_category_name(category)

    if status == DANGER:
        return BudgetNotification(
            type="error",
            category=category,
            status=status,
            message=f"{name} budget exceeded! {amounts}",
        )
    if status == WARNING:
        return BudgetNotification(
            type="warning",
            category=category,
            status=status,
            message=f"{name} budget is approaching its limit. {amounts}",
        )
    return None


def summarize_budgets(progress: List[BudgetProgress]) -> BudgetSummary:
    total_budget = sum(p.limit for p in progress)
    total_spent = sum(p.spent for p in progress)
    overall = total_spent / total_budget * 100 if total_budget > 0 else 0.0

    return BudgetSummary(
        total_budget=total_budget,
        total_spent=total_spent,
        total_remaining=max(0.0, total_budget - total_spent),
        overall_percentage=round(overall, 2),
        over_budget_count=sum(1 for p in progress if p.is_over_budget),
        budget_count=len(progress),
    )
