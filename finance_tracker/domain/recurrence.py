"""Recurrence engine - due date calculation for recurring transaction templates"""

from datetime import date, timedelta
from typing import Dict, List, Optional, Tuple

from finance_tracker.domain.models import RecurringTemplate
from finance_tracker.utils.date_utils import (
    clamped_date,
    days_in_month,
    next_month,
    sunday_weekday,
    to_date,
    to_iso,
)

RECURRENCE_TYPES = ("daily", "weekly", "monthly", "yearly")

RECURRENCE_TYPE_LABELS: Dict[str, str] = {
    "daily": "every day",
    "weekly": "every week",
    "monthly": "every month",
    "yearly": "every year",
}
UNKNOWN_LABEL = "unknown"

WEEKDAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")
MONTH_NAMES = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

# Yearly day options are listed over a leap year so Feb 29 can be chosen
_OPTIONS_YEAR = 2024


def calculate_next_due_date(
    recurrence_type: str,
    recurrence_day: Optional[int] = None,
    last_executed: str | date | None = None,
    today: date | None = None,
) -> str:
    """
    Compute the next due date of a recurrence rule.

    The base date is last_executed, or today when the template never ran.

    Rules:
    - daily:   base + 1 day
    - weekly:  next date whose weekday (0 = Sunday) equals recurrence_day
               (default Sunday); never the base date itself
    - monthly: next calendar month on day recurrence_day (default 1),
               clamped to the last day of that month
    - yearly:  next calendar year; recurrence_day encodes month*100 + day
               (1225 = Dec 25), absent keeps the base month/day

    An unrecognized recurrence_type leaves the base date unchanged.

    Returns:
        ISO date string YYYY-MM-DD

    Example:
        calculate_next_due_date("monthly", 31, "2024-01-31") -> "2024-02-29"
    """
    if last_executed:
        base = to_date(last_executed)
    else:
        base = today or date.today()

    if recurrence_type == "daily":
        next_date = base + timedelta(days=1)

    elif recurrence_type == "weekly":
        target_day = recurrence_day or 0
        days_until = (target_day - sunday_weekday(base)) % 7
        next_date = base + timedelta(days=days_until or 7)

    elif recurrence_type == "monthly":
        target_day = recurrence_day or 1
        year, month = next_month(base.year, base.month)
        next_date = clamped_date(year, month, target_day)

    elif recurrence_type == "yearly":
        year = base.year + 1
        if recurrence_day:
            month, day = divmod(recurrence_day, 100)
        else:
            month, day = base.month, base.day
        next_date = clamped_date(year, month, day)

    else:
        next_date = base

    return next_date.isoformat()


def is_due_for_execution(template: RecurringTemplate, today: date | None = None) -> bool:
    """Active template whose next due date is today or earlier"""
    if not template.is_active:
        return False

    today_iso = (today or date.today()).isoformat()
    return to_iso(template.next_due_date) <= today_iso


def get_recurrence_type_label(recurrence_type: str) -> str:
    return RECURRENCE_TYPE_LABELS.get(recurrence_type, UNKNOWN_LABEL)


def format_recurrence_details(recurrence_type: str, recurrence_day: Optional[int] = None) -> str:
    """
    Human readable schedule, e.g. "every week on Monday" or "every year on Dec 25".
    """
    if recurrence_type == "daily":
        return RECURRENCE_TYPE_LABELS["daily"]

    if recurrence_type == "weekly":
        weekday = WEEKDAY_NAMES[(recurrence_day or 0) % 7]
        return f"every week on {weekday}"

    # Out-of-range days are shown the way calculate_next_due_date clamps them
    if recurrence_type == "monthly":
        return f"every month on day {min(max(recurrence_day or 1, 1), 31)}"

    if recurrence_type == "yearly":
        if recurrence_day:
            scheduled = clamped_date(_OPTIONS_YEAR, *divmod(recurrence_day, 100))
            return f"every year on {MONTH_NAMES[scheduled.month - 1]} {scheduled.day}"
        return RECURRENCE_TYPE_LABELS["yearly"]

    return get_recurrence_type_label(recurrence_type)


def is_valid_recurrence_day(recurrence_type: str, recurrence_day: Optional[int]) -> bool:
    """
    Whether recurrence_day is meaningful for the recurrence type.

    None always is (the type's default applies). Weekly takes 0-6,
    monthly 1-31, yearly a month*100+day code for a real calendar day
    (229 included). Daily ignores the value.
    """
    if recurrence_day is None or recurrence_type == "daily":
        return True

    if recurrence_type == "weekly":
        return 0 <= recurrence_day <= 6

    if recurrence_type == "monthly":
        return 1 <= recurrence_day <= 31

    if recurrence_type == "yearly":
        month, day = divmod(recurrence_day, 100)
        return 1 <= month <= 12 and 1 <= day <= days_in_month(_OPTIONS_YEAR, month)

    return False


def get_recurrence_day_options(recurrence_type: str) -> List[Dict]:
    """Selectable recurrence_day values with display labels for a recurrence type"""
    if recurrence_type == "weekly":
        return [{"value": i, "label": name} for i, name in enumerate(WEEKDAY_NAMES)]

    if recurrence_type == "monthly":
        return [{"value": day, "label": f"Day {day}"} for day in range(1, 32)]

    if recurrence_type == "yearly":
        return [
            {"value": month * 100 + day, "label": f"{MONTH_NAMES[month - 1]} {day}"}
            for month in range(1, 13)
            for day in range(1, days_in_month(_OPTIONS_YEAR, month) + 1)
        ]

    return []


def get_overdue_templates(
    templates: List[RecurringTemplate], today: date | None = None
) -> List[RecurringTemplate]:
    today = today or date.today()
    return [t for t in templates if is_due_for_execution(t, today)]


def get_upcoming_templates(
    templates: List[RecurringTemplate],
    days: int = 7,
    today: date | None = None,
) -> List[RecurringTemplate]:
    """Active templates due after today and no later than today + days"""
    today = today or date.today()
    today_iso = today.isoformat()
    horizon_iso = (today + timedelta(days=days)).isoformat()

    return [
        t
        for t in templates
        if t.is_active and today_iso < to_iso(t.next_due_date) <= horizon_iso
    ]


def advance_template(template: RecurringTemplate, executed_on: date) -> Tuple[str, str]:
    """
    Schedule after executing a template on executed_on.

    Returns: (last_executed, next_due_date) as ISO strings
    """
    last_executed = executed_on.isoformat()
    next_due_date = calculate_next_due_date(
        template.recurrence_type,
        template.recurrence_day,
        last_executed,
    )
    return last_executed, next_due_date
