"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, Field, model_validator
from datetime import date
from typing import List, Literal, Optional

from finance_tracker.domain.recurrence import is_valid_recurrence_day

RecurrenceType = Literal["daily", "weekly", "monthly", "yearly"]
TransactionType = Literal["income", "expense"]


class RecurringTemplateCreate(BaseModel):
    """Request body for POST /v1/recurring-templates"""

    user_id: str = Field(..., min_length=1, description="User identifier")
    name: str = Field(..., min_length=1)
    description: str = ""
    amount: float = Field(..., gt=0)
    category: str = Field(..., min_length=1)
    type: TransactionType
    recurrence_type: RecurrenceType
    recurrence_day: Optional[int] = Field(
        None,
        description="Weekday 0-6 (0 = Sunday), day of month 1-31, or month*100+day for yearly",
    )
    last_executed: Optional[date] = None
    is_active: bool = True
    auto_execute: bool = False

    @model_validator(mode="after")
    def check_recurrence_day(self) -> "RecurringTemplateCreate":
        if not is_valid_recurrence_day(self.recurrence_type, self.recurrence_day):
            raise ValueError(f"recurrence_day {self.recurrence_day} is not valid for {self.recurrence_type} recurrence")
        return self


class RecurringTemplateUpdate(BaseModel):
    """Request body for PUT /v1/recurring-templates/{template_id}; omitted fields are kept"""

    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    amount: Optional[float] = Field(None, gt=0)
    category: Optional[str] = Field(None, min_length=1)
    type: Optional[TransactionType] = None
    recurrence_type: Optional[RecurrenceType] = None
    recurrence_day: Optional[int] = None
    is_active: Optional[bool] = None
    auto_execute: Optional[bool] = None


class RecurringTemplateResponse(BaseModel):
    """Single recurring template with its schedule"""

    template_id: str
    user_id: str
    name: str
    description: str
    amount: float
    category: str
    type: str
    recurrence_type: str
    recurrence_day: Optional[int] = None
    recurrence_label: str
    recurrence_details: str
    last_executed: Optional[date] = None
    next_due_date: date
    is_active: bool
    auto_execute: bool
    is_due: bool


class RecurringTemplateListResponse(BaseModel):
    """Response for GET /v1/recurring-templates"""

    user_id: str
    templates: List[RecurringTemplateResponse]
    count: int


class TransactionCreate(BaseModel):
    """Request body for POST /v1/transactions"""

    user_id: str = Field(..., min_length=1, description="User identifier")
    amount: float = Field(..., gt=0)
    category: str = Field(..., min_length=1)
    type: TransactionType
    description: str = ""
    transaction_date: Optional[date] = Field(None, description="Defaults to today")


class TransactionResponse(BaseModel):
    """Single recorded transaction"""

    transaction_id: str
    user_id: str
    amount: float
    category: str
    type: str
    description: str
    transaction_date: date
    recurring_template_id: Optional[str] = None


class TransactionListResponse(BaseModel):
    """Response for GET /v1/transactions"""

    user_id: str
    transactions: List[TransactionResponse]


class NotificationResponse(BaseModel):
    """Single user notification"""

    notification_id: str
    type: str
    message: str
    is_read: bool
    created_at: str
    read_at: Optional[str] = None


class NotificationListResponse(BaseModel):
    """Response for GET /v1/notifications"""

    user_id: str
    notifications: List[NotificationResponse]


class BudgetEvaluation(BaseModel):
    """Budget classification triggered by a recorded expense"""

    category: str
    status: str
    spent: float
    limit: float
    notification: Optional[NotificationResponse] = None


class TransactionCreateResponse(BaseModel):
    """Response for POST /v1/transactions"""

    transaction: TransactionResponse
    budget: Optional[BudgetEvaluation] = None


class ExecutionResponse(BaseModel):
    """Result of executing one recurring template"""

    template: RecurringTemplateResponse
    transaction: TransactionResponse
    budget: Optional[BudgetEvaluation] = None


class ProcessDueResponse(BaseModel):
    """Response for POST /v1/recurring-templates/process-due"""

    user_id: str
    executed: List[ExecutionResponse]
    count: int


class BudgetUpsertRequest(BaseModel):
    """Request body for PUT /v1/budgets"""

    user_id: str = Field(..., min_length=1, description="User identifier")
    category: str = Field(..., min_length=1)
    limit: float = Field(..., gt=0, description="Monthly spending limit")
    warning_threshold: Optional[float] = Field(None, gt=0, le=100, description="Percent of limit that triggers a warning")
    currency: Optional[str] = None


class BudgetResponse(BaseModel):
    """Category budget with spend for the current month"""

    category: str
    category_name: str
    limit: float
    spent: float
    remaining: float
    percentage_used: Optional[float] = None  # None when the limit is zero
    warning_threshold: float
    status: str
    is_over_budget: bool
    currency: str
    period_start: date
    period_end: date


class BudgetSummarySchema(BaseModel):
    """Totals across all budgets"""

    total_budget: float
    total_spent: float
    total_remaining: float
    overall_percentage: float
    over_budget_count: int
    budget_count: int


class BudgetListResponse(BaseModel):
    """Response for GET /v1/budgets"""

    user_id: str
    budgets: List[BudgetResponse]
    summary: BudgetSummarySchema


class AnalyticsSummaryResponse(BaseModel):
    """Response for GET /v1/analytics/summary"""

    user_id: str
    month: str
    period_start: date
    period_end: date
    total_income: float
    total_expenses: float
    net: float
    savings_rate: float
    transaction_count: int
    top_category: Optional[str] = None
    top_category_name: Optional[str] = None


class CategoryShareSchema(BaseModel):
    """Expense total of one category and its share of the month"""

    category: str
    category_name: str
    amount: float
    transaction_count: int
    percentage: float


class CategoryBreakdownResponse(BaseModel):
    """Response for GET /v1/analytics/breakdown"""

    user_id: str
    month: str
    total_expenses: float
    categories: List[CategoryShareSchema]


class MonthlyTotalSchema(BaseModel):
    month: str
    total_expenses: float


class SpendingTrendResponse(BaseModel):
    """Response for GET /v1/analytics/trends"""

    user_id: str
    months: List[MonthlyTotalSchema]
    average_monthly_expense: float
