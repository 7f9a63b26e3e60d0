"""Unit tests for budget evaluation"""

import math
import pytest
from finance_tracker.domain.budget import (
    build_budget_notification,
    budget_percentage,
    calculate_budget_progress,
    get_budget_status,
    summarize_budgets,
)


def test_budget_status_safe():
    assert get_budget_status(500, 1000, 80) == "safe"


def test_budget_status_warning():
    assert get_budget_status(850, 1000, 80) == "warning"


def test_budget_status_danger_at_limit():
    """Reaching the limit exactly is already danger"""
    assert get_budget_status(1000, 1000, 80) == "danger"
    assert get_budget_status(1500, 1000, 80) == "danger"


def test_warning_threshold_is_inclusive():
    assert get_budget_status(800, 1000, 80) == "warning"
    assert get_budget_status(799.99, 1000, 80) == "safe"


def test_zero_limit_is_danger():
    """A zero limit counts as exceeded even without spend"""
    assert get_budget_status(0, 0, 80) == "danger"
    assert budget_percentage(0, 0) == math.inf


def test_custom_warning_threshold():
    assert get_budget_status(500, 1000, 50) == "warning"
    assert get_budget_status(950, 1000, 99) == "safe"


def test_budget_progress_over_limit():
    progress = calculate_budget_progress(1200, 1000, 80)

    assert progress.status == "danger"
    assert progress.is_over_budget is True
    assert progress.remaining == 0
    assert progress.percentage_used == pytest.approx(120)


def test_budget_progress_at_limit_is_not_over():
    """Spending exactly the limit is danger but not over budget"""
    progress = calculate_budget_progress(1000, 1000, 80)

    assert progress.status == "danger"
    assert progress.is_over_budget is False
    assert progress.remaining == 0


def test_budget_progress_safe():
    progress = calculate_budget_progress(250, 1000, 80)

    assert progress.status == "safe"
    assert progress.remaining == 750
    assert progress.percentage_used == pytest.approx(25)


def test_notification_for_danger():
    notification = build_budget_notification("food", 120000, 100000, "danger")

    assert notification.type == "error"
    assert notification.category == "food"
    assert notification.message == "Food budget exceeded! (₩120,000 / ₩100,000)"


def test_notification_for_warning():
    notification = build_budget_notification("coffee", 42.5, 50, "warning", currency="USD")

    assert notification.type == "warning"
    assert notification.message == "Coffee budget is approaching its limit. ($42.50 / $50.00)"


def test_no_notification_while_safe():
    assert build_budget_notification("food", 100, 100000, "safe") is None


def test_summarize_budgets():
    progress = [
        calculate_budget_progress(500, 1000, 80),
        calculate_budget_progress(1200, 1000, 80),
    ]

    summary = summarize_budgets(progress)

    assert summary.total_budget == 2000
    assert summary.total_spent == 1700
    assert summary.total_remaining == 300
    assert summary.overall_percentage == 85.0
    assert summary.over_budget_count == 1
    assert summary.budget_count == 2


def test_summarize_no_budgets():
    summary = summarize_budgets([])

    assert summary.total_budget == 0
    assert summary.overall_percentage == 0.0
    assert summary.budget_count == 0


@pytest.mark.parametrize(
    "spent,limit,threshold",
    [(0, 1000, 80), (500, 1000, 80), (800, 1000, 80), (1000, 1000, 80), (0, 0, 80), (2500, 1000, 50)],
)
def test_budget_status_is_idempotent(spent, limit, threshold):
    """Repeated evaluation of the same inputs never changes the status"""
    statuses = {get_budget_status(spent, limit, threshold) for _ in range(5)}
    assert len(statuses) == 1
