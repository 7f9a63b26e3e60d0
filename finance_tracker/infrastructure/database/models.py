"""SQLAlchemy ORM models for templates, budgets, transactions and notifications"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, Boolean, Float, DateTime, Date, Integer, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RecurringTemplateRecord(Base):
    """Recurring transaction template with cached next due date"""

    __tablename__ = "recurring_template"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    description = Column(Text, nullable=False, default="")
    amount = Column(Float, nullable=False)
    category = Column(Text, nullable=False)
    type = Column(Text, nullable=False)
    recurrence_type = Column(Text, nullable=False)
    recurrence_day = Column(Integer, nullable=True)
    last_executed = Column(Date, nullable=True)
    next_due_date = Column(Date, nullable=False, index=True)
    is_active = Column(Boolean, nullable=False, default=True)
    auto_execute = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())


class CategoryBudget(Base):
    """Monthly spending limit for one category"""

    __tablename__ = "category_budget"
    __table_args__ = (UniqueConstraint("user_id", "category", name="uq_budget_user_category"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    category = Column(Text, nullable=False)
    limit_amount = Column(Float, nullable=False)
    warning_threshold = Column(Float, nullable=False)
    currency = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())


class FinanceTransaction(Base):
    """Income or expense entry"""

    __tablename__ = "finance_transaction"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    amount = Column(Float, nullable=False)
    category = Column(Text, nullable=False)
    type = Column(Text, nullable=False)
    description = Column(Text, nullable=False, default="")
    date = Column(Date, nullable=False, index=True)
    recurring_template_id = Column(UUID(as_uuid=True), nullable=True)
    # Python-side default keeps sub-second ordering on SQLite
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, server_default=func.now())


class Notification(Base):
    """User-facing alert, e.g. a budget warning"""

    __tablename__ = "notification"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    type = Column(Text, nullable=False)
    message = Column(Text, nullable=False)
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, server_default=func.now())
    read_at = Column(DateTime(timezone=True), nullable=True)
